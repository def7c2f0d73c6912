"""Region Selection Coordinator - Owns the province/ward selection.

This module wires the pure selection state machine (core.selection) to
the region lookup client and the preference synchronizer. It is the only
place SelectionState is mutated.

Scheduling is cooperative: all state changes happen on the asyncio event
loop, and blocking calls (region HTTP lookups, profile store reads and
writes) run in worker threads via asyncio.to_thread. Ward fetches may
complete out of order; each result carries the WardRequest it was issued
with and is dropped if the selected province has changed since.
"""

import asyncio
import logging
import threading

from src.core.filters import FilterSpec
from src.core.geo import Coordinate
from src.core.preferences import (
    DEFAULT_RADIUS_KM,
    SelectionSnapshot,
    saved_selection_fields,
)
from src.core.region import Region, find_region
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
from src.preferences import PreferenceSynchronizer
from src.shell.region_client import RegionClient


logger = logging.getLogger(__name__)


class RegionSelectionCoordinator:
    """Coordinates the province → ward cascade and the filter radius.

    This class wires together:
    - Region client (fetches provinces and wards)
    - Core selection transitions (pure state machine)
    - Preference synchronizer (persists settled selections)

    Call start() before using the coordinator; it reads the saved
    selection and loads the province list.
    """

    def __init__(
        self,
        region_client: RegionClient,
        synchronizer: PreferenceSynchronizer,
        default_radius_km: float = DEFAULT_RADIUS_KM,
    ) -> None:
        """Initialize coordinator.

        Args:
            region_client: Client for province/ward lookups
            synchronizer: Reads the saved selection and persists changes
            default_radius_km: Radius used when the profile has none
        """
        self.region_client = region_client
        self.synchronizer = synchronizer

        self._saved = SavedSelection()
        self._state = SelectionState()
        self._provinces: list[Region] = []
        self._default_radius_km = default_radius_km
        self._radius_km = default_radius_km
        self._persist_lock = threading.Lock()

    @property
    def state(self) -> SelectionState:
        """Current selection state (immutable snapshot)."""
        return self._state

    @property
    def provinces(self) -> list[Region]:
        """Provinces loaded by start()."""
        return list(self._provinces)

    @property
    def radius_km(self) -> float:
        """Selected radius; 0 means no distance filter."""
        return self._radius_km

    async def start(self) -> None:
        """Read the saved selection, load provinces and the saved wards.

        The saved ward is kept until its province's wards arrive, then
        restored if it is still among them.
        """
        profile = await asyncio.to_thread(self.synchronizer.load)
        self._saved = SavedSelection(**saved_selection_fields(profile))
        self._state = initial_state(self._saved)
        if profile is not None:
            self._default_radius_km = profile.radius_km
            self._radius_km = profile.radius_km

        self._provinces = await asyncio.to_thread(self.region_client.fetch_provinces)

        if not self._state.selected_province_code:
            return

        self._state, request = change_province(
            self._state,
            self._state.selected_province_code,
            hydrating=True,
        )
        if request is not None:
            await self._load_wards(request)

    async def select_province(self, code: str | None) -> bool:
        """Select a province and load its wards.

        Selecting the province that is already selected does nothing.
        Completes when this province's wards are applied, or when the
        result is discarded because the selection moved on.

        Args:
            code: Province code; empty clears the province and ward

        Returns:
            True if this province is still the selected one on return,
            False if a later selection superseded it
        """
        code = code or None
        if code == self._state.selected_province_code:
            return True

        self._state, request = change_province(self._state, code)
        await self._persist()

        if request is not None:
            await self._load_wards(request)

        return self._state.selected_province_code == code

    async def select_ward(self, code: str | None) -> bool:
        """Select a ward of the current province; empty clears it.

        Refused while wards are loading, and for codes that are not among
        the current ward options.

        Returns:
            True if the selection was applied
        """
        if not can_select_ward(self._state, code):
            logger.warning(
                "Rejecting ward %s for province %s (loading: %s)",
                code,
                self._state.selected_province_code,
                self._state.loading_wards,
            )
            return False

        self._state = change_ward(self._state, code)
        await self._persist()
        return True

    async def set_radius(self, radius_km: float) -> None:
        """Set the filter radius; 0 shows posts at any distance."""
        self._radius_km = max(0.0, float(radius_km))
        await self._persist()

    async def clear_filters(self) -> None:
        """Clear province and ward and restore the default radius."""
        self._state, _ = change_province(self._state, None)
        self._radius_km = self._default_radius_km
        await self._persist()

    async def _fetch_wards(self, request: WardRequest) -> list[Region]:
        """Run a ward fetch off the event loop.

        The client is fail-soft already; anything it still raises is
        treated as an empty result so loading_wards cannot get stuck.
        """
        try:
            return await asyncio.to_thread(
                self.region_client.fetch_wards,
                request.province_code,
            )
        except Exception as e:
            logger.error(
                "Ward fetch for province %s failed: %s",
                request.province_code,
                str(e),
            )
            return []

    async def _load_wards(self, request: WardRequest) -> None:
        """Fetch wards for a request and apply them if still current."""
        wards = await self._fetch_wards(request)

        new_state = apply_wards(self._state, request, wards, self._saved)
        if new_state is self._state:
            logger.debug(
                "Discarding stale wards for province %s (selected: %s)",
                request.province_code,
                self._state.selected_province_code,
            )
            return

        self._state = new_state
        await self._persist()

    def _province_name(self) -> str | None:
        code = self._state.selected_province_code
        province = find_region(self._provinces, code)
        if province is not None:
            return province.name
        if code and code == self._saved.province_code:
            return self._saved.province_name
        return None

    def _ward_name(self) -> str | None:
        ward = self._state.selected_ward
        if ward is not None:
            return ward.name
        code = self._state.selected_ward_code
        if code and code == self._saved.ward_code:
            return self._saved.ward_name
        return None

    def snapshot(self) -> SelectionSnapshot:
        """Effective selection with display names resolved."""
        return SelectionSnapshot(
            province_code=self._state.selected_province_code,
            province_name=self._province_name(),
            ward_code=self._state.selected_ward_code,
            ward_name=self._ward_name(),
            radius_km=self._radius_km if self._radius_km > 0 else None,
        )

    def filter_spec(self, user_location: Coordinate | None = None) -> FilterSpec:
        """Build filter criteria from the current selection.

        The saved location comes from the profile cached by start(), so
        this does no I/O.

        Args:
            user_location: Live geolocation; falls back to the location
                saved in the profile

        Returns:
            FilterSpec for filter_posts()
        """
        snapshot = self.snapshot()
        location = user_location or self.synchronizer.saved_location()

        return FilterSpec(
            user_location=location,
            radius_km=snapshot.radius_km,
            province_name=snapshot.province_name,
            ward_name=snapshot.ward_name,
        )

    async def _persist(self) -> None:
        await asyncio.to_thread(self._save_latest)

    def _save_latest(self) -> None:
        # Snapshot under the lock: the last writer always sees the newest state.
        with self._persist_lock:
            self.synchronizer.save(self.snapshot())
