"""Post Repository - Imperative Shell.

This module loads the relief post collection from a YAML file. The
filter accepts any in-memory list, so other sources only need to supply
a list of RelievePost.

All I/O is contained here; parsing is in the core module.
"""

import logging
from pathlib import Path
from typing import Protocol

import yaml

from src.core.post import RelievePost, find_post, parse_posts


logger = logging.getLogger(__name__)


class PostRepository(Protocol):
    """Source of the full, unfiltered post collection."""

    def get_all(self) -> list[RelievePost]:
        ...

    def get_by_id(self, post_id: str) -> RelievePost | None:
        ...


class YamlPostRepository:
    """Loads posts from a YAML file on first access.

    File structure:
    posts:
      - id: "1"
        location: {latitude: ..., longitude: ..., address: ...}
        urgency: critical
        ...
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize repository.

        Args:
            path: YAML file holding a top-level 'posts' list
        """
        self.path = Path(path)
        self._posts: list[RelievePost] | None = None

    def _load(self) -> list[RelievePost]:
        """Read and parse the posts file.

        This method performs file I/O.

        Raises:
            yaml.YAMLError: If the file is invalid YAML
        """
        if not self.path.exists():
            logger.warning("Posts file not found: %s, no posts loaded", self.path)
            return []

        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        records = (data or {}).get("posts") or []
        posts = parse_posts(records)

        skipped = len(records) - len(posts)
        if skipped:
            logger.warning("Skipped %d invalid post records", skipped)

        logger.info("Loaded %d posts from %s", len(posts), self.path)
        return posts

    def get_all(self) -> list[RelievePost]:
        """Return every post in file order."""
        if self._posts is None:
            self._posts = self._load()
        return list(self._posts)

    def get_by_id(self, post_id: str) -> RelievePost | None:
        """Return a post by ID, or None if not found."""
        return find_post(self.get_all(), post_id)

    def reload(self) -> None:
        """Drop the cached collection so the next access rereads the file."""
        self._posts = None
