"""Post relevance filtering - Pure functions.

This module decides which relief posts are shown to a user. The
administrative filter (province, then ward) is applied first and the
distance filter narrows the result further. All criteria are combined
with AND.

Administrative matching is a case-insensitive substring test against the
post's address text, not a join on region codes. A ward whose name
appears inside an unrelated address will match.

All functions are pure with no side effects.
"""

from dataclasses import dataclass

from src.core.geo import Coordinate, is_within_radius
from src.core.post import RelievePost


@dataclass(frozen=True)
class FilterSpec:
    """User-facing filter criteria.

    Attributes:
        user_location: Center for the distance filter (optional)
        radius_km: Maximum distance; None or 0 disables the distance filter
        province_name: Province name to match in the address (optional)
        ward_name: Ward name to match in the address (optional)
    """
    user_location: Coordinate | None = None
    radius_km: float | None = None
    province_name: str | None = None
    ward_name: str | None = None

    @property
    def distance_active(self) -> bool:
        """True when both a location and a positive radius are set."""
        return _distance_active(self.user_location, self.radius_km)

    @property
    def administrative_active(self) -> bool:
        """True when a province or ward name is set."""
        return bool(self.province_name) or bool(self.ward_name)


def _distance_active(user_location: Coordinate | None, radius_km: float | None) -> bool:
    return user_location is not None and radius_km is not None and radius_km > 0


def _address_contains(address: str, name: str) -> bool:
    return name.casefold() in address.casefold()


def matches_administrative(
    post: RelievePost,
    province_name: str | None = None,
    ward_name: str | None = None,
) -> bool:
    """Check if a post's address mentions the province and ward.

    Pure function. Empty names always match.
    """
    address = post.location.address

    if province_name and not _address_contains(address, province_name):
        return False

    if ward_name and not _address_contains(address, ward_name):
        return False

    return True


def matches_distance(
    post: RelievePost,
    user_location: Coordinate | None,
    radius_km: float | None,
) -> bool:
    """Check if a post is within radius_km of user_location.

    Pure function. Returns True when the distance filter is inactive
    (no location, or no positive radius).
    """
    if not _distance_active(user_location, radius_km):
        return True

    return is_within_radius(post.location.coordinate, user_location, radius_km)


def filter_by_administrative(
    posts: list[RelievePost],
    province_name: str | None = None,
    ward_name: str | None = None,
) -> list[RelievePost]:
    """Filter posts by province and ward name.

    Pure function.

    Args:
        posts: Posts to filter
        province_name: Province name to match (optional)
        ward_name: Ward name to match (optional)

    Returns:
        Posts whose address mentions both names, in input order
    """
    if not province_name and not ward_name:
        return list(posts)

    return [
        p for p in posts
        if matches_administrative(p, province_name, ward_name)
    ]


def filter_by_location(
    posts: list[RelievePost],
    user_location: Coordinate | None,
    radius_km: float | None,
) -> list[RelievePost]:
    """Filter posts to those within a radius of the user.

    Pure function. Without a location or a positive radius, all posts
    are returned.
    """
    if not _distance_active(user_location, radius_km):
        return list(posts)

    return [
        p for p in posts
        if is_within_radius(p.location.coordinate, user_location, radius_km)
    ]


def filter_posts(posts: list[RelievePost], spec: FilterSpec) -> list[RelievePost]:
    """Apply all filter criteria to a post collection.

    Pure function. The result is an order-preserving subsequence of posts;
    with no criteria set it contains every post.

    Args:
        posts: Full, unfiltered post collection
        spec: Filter criteria

    Returns:
        Posts matching every active criterion
    """
    filtered = filter_by_administrative(posts, spec.province_name, spec.ward_name)
    return filter_by_location(filtered, spec.user_location, spec.radius_km)
