"""Administrative region models and parsing - Pure functions.

This module normalizes raw province/ward records from the region lookup
service into typed Region objects. The upstream source is inconsistent
about field names, so every logical field has several candidate keys.

All functions are pure with no side effects.
"""

from dataclasses import dataclass
from typing import Any


# Candidate keys, in priority order
PROVINCE_CODE_KEYS = ("code", "mahc")
PROVINCE_NAME_KEYS = ("name", "ten", "tentinh")
WARD_CODE_KEYS = ("code", "ma")
WARD_NAME_KEYS = ("name",)


@dataclass(frozen=True)
class Region:
    """A province or ward.

    Attributes:
        code: Stable identifier, unique within its level
        name: Display label
        parent_code: Province code for wards, None for provinces
    """
    code: str
    name: str
    parent_code: str | None = None

    @property
    def is_ward(self) -> bool:
        """Returns True if this region belongs to a province."""
        return self.parent_code is not None


def _first_value(record: dict[str, Any], keys: tuple[str, ...]) -> str:
    """Return the first non-empty value among keys, stripped."""
    for key in keys:
        value = record.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return ""


def _extract_records(payload: Any) -> list[dict[str, Any]]:
    """Pull the record list out of a raw response.

    The service returns either a bare list or an object wrapping the
    list under "data".
    """
    if isinstance(payload, dict):
        payload = payload.get("data")

    if not isinstance(payload, list):
        return []

    return [r for r in payload if isinstance(r, dict)]


def _ward_label(record: dict[str, Any]) -> str:
    """Build a ward label from its sub-fields.

    "tenhc" is the unit name and "loai" its type (e.g. "Phường", "Xã").
    """
    name = _first_value(record, WARD_NAME_KEYS)
    if name:
        return name

    unit_name = _first_value(record, ("tenhc",))
    unit_type = _first_value(record, ("loai",))
    if unit_name and unit_type:
        return f"{unit_name} ({unit_type})"
    return unit_name


def parse_province(record: dict[str, Any]) -> Region | None:
    """Parse a single province record.

    Pure function.

    Args:
        record: Raw record from the provinces endpoint

    Returns:
        Region, or None if the record has no usable code
    """
    code = _first_value(record, PROVINCE_CODE_KEYS)
    if not code:
        return None

    name = _first_value(record, PROVINCE_NAME_KEYS) or code
    return Region(code=code, name=name)


def parse_ward(record: dict[str, Any], province_code: str) -> Region | None:
    """Parse a single ward record.

    Pure function.

    Args:
        record: Raw record from the wards endpoint
        province_code: Province the ward was fetched for

    Returns:
        Region scoped to province_code, or None if the record has no code
    """
    code = _first_value(record, WARD_CODE_KEYS)
    if not code:
        return None

    name = _ward_label(record) or code
    return Region(code=code, name=name, parent_code=province_code)


def dedupe_regions(regions: list[Region]) -> list[Region]:
    """Drop repeated codes, keeping the first occurrence.

    Pure function. Source order is preserved.
    """
    seen: set[str] = set()
    unique = []

    for region in regions:
        if region.code in seen:
            continue
        seen.add(region.code)
        unique.append(region)

    return unique


def parse_provinces(payload: Any) -> list[Region]:
    """Parse a provinces response into a list of Regions.

    Pure function: unusable records are skipped, duplicates removed.

    Args:
        payload: Decoded JSON from the provinces endpoint

    Returns:
        Provinces in source order
    """
    provinces = []

    for record in _extract_records(payload):
        province = parse_province(record)
        if province is not None:
            provinces.append(province)

    return dedupe_regions(provinces)


def parse_wards(payload: Any, province_code: str) -> list[Region]:
    """Parse a wards response into a list of Regions.

    Pure function: unusable records are skipped, duplicates removed.

    Args:
        payload: Decoded JSON from the wards endpoint
        province_code: Province the wards were fetched for

    Returns:
        Wards in source order
    """
    wards = []

    for record in _extract_records(payload):
        ward = parse_ward(record, province_code)
        if ward is not None:
            wards.append(ward)

    return dedupe_regions(wards)


def find_region(regions: list[Region] | tuple[Region, ...], code: str | None) -> Region | None:
    """Look up a region by code.

    Pure function.
    """
    if not code:
        return None

    for region in regions:
        if region.code == code:
            return region

    return None
