"""Preference Synchronizer - Wires profile logic to the profile store.

Persists the user's filter selection whenever it settles on a new value
and seeds the initial selection from the stored profile. The store is
injected; there is no process-wide profile state.

The profile is read from the store once and kept in memory; every write
goes through this class, so the cached copy stays current. Store access
is blocking, so async callers run these methods in a worker thread.
"""

import logging
import threading

from src.core.geo import Coordinate
from src.core.preferences import (
    DEFAULT_RADIUS_KM,
    SelectionSnapshot,
    UserProfile,
    merge_profile,
    profile_from_dict,
    profile_to_dict,
    selection_changed,
)
from src.shell.profile_store import ProfileStore


logger = logging.getLogger(__name__)


class PreferenceSynchronizer:
    """Reads and writes the filter selection in the profile store."""

    def __init__(
        self,
        store: ProfileStore,
        default_radius_km: float = DEFAULT_RADIUS_KM,
    ) -> None:
        """Initialize synchronizer.

        Args:
            store: Profile store to read from and write to
            default_radius_km: Radius used when nothing else specifies one
        """
        self.store = store
        self.default_radius_km = default_radius_km
        self._lock = threading.Lock()
        self._profile: UserProfile | None = None
        self._loaded = False

    def load(self) -> UserProfile | None:
        """Return the stored profile, or None if nothing is stored.

        This method performs database I/O on first call only.
        """
        with self._lock:
            return self._current()

    def _current(self) -> UserProfile | None:
        if not self._loaded:
            self._profile = profile_from_dict(self.store.load())
            self._loaded = True
        return self._profile

    def _write(self, profile: UserProfile) -> bool:
        if not self.store.save(profile_to_dict(profile)):
            return False
        self._profile = profile
        return True

    def save(self, snapshot: SelectionSnapshot) -> bool:
        """Persist a selection if it differs from the stored one.

        Fields missing from the stored record are filled from the
        snapshot; fields the snapshot does not cover are kept.

        Args:
            snapshot: Effective selection to persist

        Returns:
            True if a write happened and succeeded
        """
        with self._lock:
            existing = self._current()

            if not selection_changed(existing, snapshot):
                logger.debug("Selection unchanged, skipping profile write")
                return False

            updated = merge_profile(
                existing,
                snapshot.to_updates(),
                default_radius_km=self.default_radius_km,
            )

            logger.info(
                "Saving selection: province=%s ward=%s radius=%.1f km",
                updated.province_code,
                updated.ward_code,
                updated.radius_km,
            )
            return self._write(updated)

    def update_location(self, location: Coordinate) -> bool:
        """Persist a geolocation reading in the profile.

        Returns:
            True if the write succeeded
        """
        with self._lock:
            updated = merge_profile(
                self._current(),
                {"location": location},
                default_radius_km=self.default_radius_km,
            )
            logger.info(
                "Saving location %.4f, %.4f",
                location.latitude,
                location.longitude,
            )
            return self._write(updated)

    def saved_location(self) -> Coordinate | None:
        """Return the location stored in the profile, if any."""
        profile = self.load()
        return profile.location if profile else None
