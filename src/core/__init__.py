"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Great-circle distance calculations
- Region record normalization
- Province/ward selection state transitions
- Post relevance filtering
- Profile merge and change detection

All functions here are deterministic and have no I/O.
"""

from src.core.geo import Coordinate, calculate_distance, distance_km, is_within_radius
from src.core.region import Region, parse_provinces, parse_wards
from src.core.post import RelievePost, parse_posts
from src.core.filters import FilterSpec, filter_posts
from src.core.selection import (
    SavedSelection,
    SelectionState,
    WardRequest,
    apply_wards,
    can_select_ward,
    change_province,
    change_ward,
    initial_state,
)
from src.core.preferences import SelectionSnapshot, UserProfile, merge_profile

__all__ = [
    # Geo
    "Coordinate",
    "calculate_distance",
    "distance_km",
    "is_within_radius",
    # Regions
    "Region",
    "parse_provinces",
    "parse_wards",
    # Posts
    "RelievePost",
    "parse_posts",
    # Filters
    "FilterSpec",
    "filter_posts",
    # Selection
    "SavedSelection",
    "SelectionState",
    "WardRequest",
    "apply_wards",
    "can_select_ward",
    "change_province",
    "change_ward",
    "initial_state",
    # Preferences
    "SelectionSnapshot",
    "UserProfile",
    "merge_profile",
]
