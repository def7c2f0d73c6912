"""Relief post data models and parsing - Pure functions.

This module handles parsing raw post records (from the post repository)
into typed RelievePost objects. Posts are immutable once loaded.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from src.core.geo import Coordinate


class Urgency(str, Enum):
    """How urgently a post needs help."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class PostStatus(str, Enum):
    """Lifecycle status of a post."""
    ACTIVE = "active"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class PostLocation:
    """Where help is needed.

    Attributes:
        coordinate: Geographic position of the request
        address: Free-text address, including ward and province names
    """
    coordinate: Coordinate
    address: str


@dataclass(frozen=True)
class RelievePost:
    """Immutable relief request.

    Attributes:
        id: Unique post ID
        location: Position and address text
        urgency: Urgency level
        status: Lifecycle status (optional)
        title: Short headline
        description: Summary shown in listings
        full_description: Long text shown on the detail view
        posted_at: When the post was created (UTC)
        contact_phone: Phone number to reach the poster
        contact_name: Name of the poster (optional)
        needs: Items or kinds of help requested
    """
    id: str
    location: PostLocation
    urgency: Urgency
    status: PostStatus | None = None
    title: str = ""
    description: str = ""
    full_description: str | None = None
    posted_at: datetime | None = None
    contact_phone: str = ""
    contact_name: str | None = None
    needs: tuple[str, ...] = field(default_factory=tuple)

    @property
    def coordinate(self) -> Coordinate:
        """Shortcut to the post's coordinate."""
        return self.location.coordinate

    @property
    def address(self) -> str:
        """Shortcut to the post's address text."""
        return self.location.address


def _parse_time(value: Any) -> datetime | None:
    """Parse an ISO-8601 string or datetime into an aware UTC datetime."""
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value))

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_post(record: dict[str, Any]) -> RelievePost | None:
    """Parse a single raw record into a RelievePost.

    Pure function: takes raw dict, returns typed post or None if invalid.

    Args:
        record: Raw post dict from the repository

    Returns:
        RelievePost or None if parsing fails
    """
    try:
        post_id = record.get("id")
        if post_id is None or str(post_id) == "":
            return None

        location = record.get("location", {})
        latitude = location.get("latitude")
        longitude = location.get("longitude")
        if latitude is None or longitude is None:
            return None

        status = record.get("status")

        return RelievePost(
            id=str(post_id),
            location=PostLocation(
                coordinate=Coordinate(float(latitude), float(longitude)),
                address=location.get("address", ""),
            ),
            urgency=Urgency(record.get("urgency", "medium")),
            status=PostStatus(status) if status else None,
            title=record.get("title", ""),
            description=record.get("description", ""),
            full_description=record.get("full_description"),
            posted_at=_parse_time(record.get("posted_at")),
            contact_phone=str(record.get("contact_phone", "")),
            contact_name=record.get("contact_name"),
            needs=tuple(record.get("needs", [])),
        )
    except (AttributeError, KeyError, TypeError, ValueError):
        return None


def parse_posts(records: list[dict[str, Any]]) -> list[RelievePost]:
    """Parse raw records into posts, skipping invalid ones.

    Pure function. Source order is preserved.
    """
    posts = []

    for record in records:
        post = parse_post(record)
        if post is not None:
            posts.append(post)

    return posts


def find_post(posts: list[RelievePost], post_id: str) -> RelievePost | None:
    """Look up a post by ID.

    Pure function.
    """
    for post in posts:
        if post.id == post_id:
            return post
    return None
