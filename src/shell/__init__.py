"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- Region lookup client (HTTP)
- Profile store (Firestore / memory)
- Post repository (YAML file)
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from src.shell.region_client import RegionClient
from src.shell.profile_store import (
    FirestoreProfileConfig,
    FirestoreProfileStore,
    InMemoryProfileStore,
    ProfileStore,
)
from src.shell.post_repository import PostRepository, YamlPostRepository
from src.shell.config_loader import load_config, load_config_from_env

__all__ = [
    "RegionClient",
    "FirestoreProfileConfig",
    "FirestoreProfileStore",
    "InMemoryProfileStore",
    "ProfileStore",
    "PostRepository",
    "YamlPostRepository",
    "load_config",
    "load_config_from_env",
]
