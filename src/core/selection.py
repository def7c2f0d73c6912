"""Province/ward selection state machine - Pure functions.

The ward selector depends on the province selector: changing province
triggers a ward fetch, and only the fetch issued for the province that is
still selected when it completes may update the ward options.

Every ward fetch is described by a WardRequest carrying the province code
it was issued for. apply_wards() checks that token against the live state
instead of trusting whatever state the caller captured at issue time.

All functions here are pure: they take a state and return a new one.
"""

from dataclasses import dataclass, field, replace

from src.core.region import Region, find_region


@dataclass(frozen=True)
class SavedSelection:
    """Selection previously persisted in the user's profile.

    Attributes:
        province_code: Saved province code (optional)
        province_name: Saved province label (optional)
        ward_code: Saved ward code (optional)
        ward_name: Saved ward label (optional)
    """
    province_code: str | None = None
    province_name: str | None = None
    ward_code: str | None = None
    ward_name: str | None = None


@dataclass(frozen=True)
class SelectionState:
    """Current province/ward selection.

    Attributes:
        selected_province_code: Selected province, None when cleared
        selected_ward_code: Selected ward, None when cleared
        ward_options: Wards of the selected province
        loading_wards: True while a ward fetch for the selection is pending
    """
    selected_province_code: str | None = None
    selected_ward_code: str | None = None
    ward_options: tuple[Region, ...] = field(default_factory=tuple)
    loading_wards: bool = False

    @property
    def selected_ward(self) -> Region | None:
        """The selected ward among the current options, if any."""
        return find_region(self.ward_options, self.selected_ward_code)


@dataclass(frozen=True)
class WardRequest:
    """Token for a ward fetch, tagged with the province it was issued for."""
    province_code: str


def initial_state(saved: SavedSelection | None = None) -> SelectionState:
    """Build the starting state from a saved selection.

    Pure function. Ward options start empty; they arrive with the first
    ward fetch.
    """
    if saved is None:
        return SelectionState()

    return SelectionState(
        selected_province_code=saved.province_code or None,
        selected_ward_code=saved.ward_code or None,
    )


def change_province(
    state: SelectionState,
    new_code: str | None,
    hydrating: bool = False,
) -> tuple[SelectionState, WardRequest | None]:
    """Select a province.

    Pure function.

    Args:
        state: Current state
        new_code: Province code to select; empty clears the selection
        hydrating: True for the first load from a saved profile, which must
            keep the saved ward until its province's wards are fetched

    Returns:
        Tuple of (new state, ward request to issue or None)
    """
    if not new_code:
        cleared = replace(
            state,
            selected_province_code=None,
            ward_options=(),
            loading_wards=False,
            selected_ward_code=state.selected_ward_code if hydrating else None,
        )
        return cleared, None

    ward_code = state.selected_ward_code
    if new_code != state.selected_province_code:
        ward_code = None

    new_state = replace(
        state,
        selected_province_code=new_code,
        selected_ward_code=ward_code,
        loading_wards=True,
    )
    return new_state, WardRequest(province_code=new_code)


def is_stale(state: SelectionState, request: WardRequest) -> bool:
    """Check if a ward fetch no longer matches the live selection.

    Pure function.
    """
    return request.province_code != state.selected_province_code


def apply_wards(
    state: SelectionState,
    request: WardRequest,
    wards: list[Region] | tuple[Region, ...],
    saved: SavedSelection | None = None,
) -> SelectionState:
    """Apply the result of a ward fetch.

    Pure function. A stale result returns the input state object
    untouched. Otherwise the ward options are replaced wholesale and the
    saved ward is restored when it belongs to this province.

    Args:
        state: Live state at completion time
        request: Token the fetch was issued with
        wards: Fetched wards (empty on failure)
        saved: Selection saved in the profile (optional)

    Returns:
        New state, or the same state if the result is stale
    """
    if is_stale(state, request):
        return state

    ward_code = None
    if saved is not None and saved.province_code == request.province_code:
        saved_ward = find_region(wards, saved.ward_code)
        if saved_ward is not None:
            ward_code = saved_ward.code

    return replace(
        state,
        ward_options=tuple(wards),
        loading_wards=False,
        selected_ward_code=ward_code,
    )


def can_select_ward(state: SelectionState, new_code: str | None) -> bool:
    """Check if a ward selection is allowed in the current state.

    Pure function. Nothing may change while wards are loading. A non-empty
    code must be one of the current ward options, so a ward of another
    province is never accepted. An empty code (clear) is always allowed
    once loading is done.
    """
    if state.loading_wards:
        return False
    if not new_code:
        return True
    return find_region(state.ward_options, new_code) is not None


def change_ward(state: SelectionState, new_code: str | None) -> SelectionState:
    """Select a ward.

    Pure function. An empty code clears the ward. Callers check
    can_select_ward() first.
    """
    return replace(state, selected_ward_code=new_code or None)
