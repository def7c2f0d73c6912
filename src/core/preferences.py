"""User profile and filter preference logic - Pure functions.

The profile is a single record holding the user's filter selection
(province, ward, radius), their saved location and their contact details.
This module contains the merge and change-detection rules; reading and
writing the record is handled by the imperative shell.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any

from src.core.geo import Coordinate


# Radius used when neither the update nor the stored profile has one
DEFAULT_RADIUS_KM = 5.0

# Keys written by the browser client
_CAMEL_CASE_KEYS = {
    "phoneNumber": "phone_number",
    "alternativePhones": "alternative_phones",
    "provinceCode": "province_code",
    "provinceName": "province_name",
    "wardCode": "ward_code",
    "wardName": "ward_name",
    "radius": "radius_km",
}


@dataclass(frozen=True)
class Relative:
    """An emergency contact attached to a profile."""
    id: str
    name: str = ""
    relationship: str = ""
    phone_number: str = ""
    address: str | None = None


@dataclass(frozen=True)
class UserProfile:
    """Persisted user profile.

    Attributes:
        name: Display name
        phone_number: Primary phone number
        alternative_phones: Extra phone numbers
        address: Home address text
        location: Last known geolocation (optional)
        radius_km: Preferred filter radius
        province_code: Selected province code (optional)
        province_name: Selected province label (optional)
        ward_code: Selected ward code (optional)
        ward_name: Selected ward label (optional)
        relatives: Emergency contacts
    """
    name: str = ""
    phone_number: str = ""
    alternative_phones: tuple[str, ...] = field(default_factory=tuple)
    address: str = ""
    location: Coordinate | None = None
    radius_km: float = DEFAULT_RADIUS_KM
    province_code: str | None = None
    province_name: str | None = None
    ward_code: str | None = None
    ward_name: str | None = None
    relatives: tuple[Relative, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class SelectionSnapshot:
    """The effective filter selection, as handed to the synchronizer."""
    province_code: str | None = None
    province_name: str | None = None
    ward_code: str | None = None
    ward_name: str | None = None
    radius_km: float | None = None

    def to_updates(self) -> dict[str, Any]:
        """Express the snapshot as a profile update."""
        return {
            "province_code": self.province_code,
            "province_name": self.province_name,
            "ward_code": self.ward_code,
            "ward_name": self.ward_name,
            "radius_km": self.radius_km,
        }


_PROFILE_FIELDS = {f.name for f in fields(UserProfile)}


def _parse_location(value: Any) -> Coordinate | None:
    if isinstance(value, Coordinate):
        return value
    if not isinstance(value, dict):
        return None
    try:
        return Coordinate(float(value["latitude"]), float(value["longitude"]))
    except (KeyError, TypeError, ValueError):
        return None


def _parse_relative(value: Any) -> Relative | None:
    if isinstance(value, Relative):
        return value
    if not isinstance(value, dict) or not value.get("id"):
        return None
    return Relative(
        id=str(value["id"]),
        name=value.get("name", ""),
        relationship=value.get("relationship", ""),
        phone_number=value.get("phone_number", value.get("phoneNumber", "")),
        address=value.get("address"),
    )


def _parse_radius(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        radius = float(value)
    except (TypeError, ValueError):
        return None
    return radius if radius > 0 else None


def normalize_keys(data: dict[str, Any]) -> dict[str, Any]:
    """Map camelCase keys to profile field names.

    Pure function. Snake-case keys win when both spellings are present.
    """
    normalized = {}
    for key, value in data.items():
        target = _CAMEL_CASE_KEYS.get(key, key)
        if target in normalized and key != target:
            continue
        normalized[target] = value
    return normalized


def profile_from_dict(data: dict[str, Any] | None) -> UserProfile | None:
    """Build a UserProfile from a stored record.

    Pure function. Missing keys take their defaults; malformed nested
    values (location, relatives) are dropped.
    """
    if not data:
        return None

    data = normalize_keys(data)
    relatives = [_parse_relative(r) for r in data.get("relatives") or []]

    return UserProfile(
        name=data.get("name") or "",
        phone_number=data.get("phone_number") or "",
        alternative_phones=tuple(data.get("alternative_phones") or ()),
        address=data.get("address") or "",
        location=_parse_location(data.get("location")),
        radius_km=_parse_radius(data.get("radius_km")) or DEFAULT_RADIUS_KM,
        province_code=data.get("province_code") or None,
        province_name=data.get("province_name") or None,
        ward_code=data.get("ward_code") or None,
        ward_name=data.get("ward_name") or None,
        relatives=tuple(r for r in relatives if r is not None),
    )


def profile_to_dict(profile: UserProfile) -> dict[str, Any]:
    """Serialize a profile for the store.

    Pure function.
    """
    location = None
    if profile.location is not None:
        location = {
            "latitude": profile.location.latitude,
            "longitude": profile.location.longitude,
        }

    return {
        "name": profile.name,
        "phone_number": profile.phone_number,
        "alternative_phones": list(profile.alternative_phones),
        "address": profile.address,
        "location": location,
        "radius_km": profile.radius_km,
        "province_code": profile.province_code,
        "province_name": profile.province_name,
        "ward_code": profile.ward_code,
        "ward_name": profile.ward_name,
        "relatives": [
            {
                "id": r.id,
                "name": r.name,
                "relationship": r.relationship,
                "phone_number": r.phone_number,
                "address": r.address,
            }
            for r in profile.relatives
        ],
    }


def merge_profile(
    existing: UserProfile | None,
    updates: dict[str, Any],
    default_radius_km: float = DEFAULT_RADIUS_KM,
) -> UserProfile:
    """Merge a partial update into the stored profile.

    Pure function. Keys absent from updates keep their stored values; a
    key present with None clears the field. The radius falls back to the
    stored value, then to default_radius_km.

    Args:
        existing: Stored profile (None if nothing stored yet)
        updates: Partial profile, keyed by field name
        default_radius_km: Fallback radius

    Returns:
        Merged profile
    """
    base = existing or UserProfile(radius_km=default_radius_km)
    updates = normalize_keys(updates)

    changes: dict[str, Any] = {
        key: value for key, value in updates.items()
        if key in _PROFILE_FIELDS and key != "radius_km"
    }

    if "location" in changes:
        changes["location"] = _parse_location(changes["location"])
    if "relatives" in changes:
        parsed = [_parse_relative(r) for r in changes["relatives"] or []]
        changes["relatives"] = tuple(r for r in parsed if r is not None)
    if "alternative_phones" in changes:
        changes["alternative_phones"] = tuple(changes["alternative_phones"] or ())
    for key in ("province_code", "province_name", "ward_code", "ward_name"):
        if key in changes:
            changes[key] = changes[key] or None

    radius = _parse_radius(updates.get("radius_km"))
    if radius is None and existing is not None:
        radius = existing.radius_km
    changes["radius_km"] = radius or default_radius_km

    return replace(base, **changes)


def selection_changed(profile: UserProfile | None, snapshot: SelectionSnapshot) -> bool:
    """Check if a selection differs from what is stored.

    Pure function. Only province code, ward code and radius count; label
    changes alone do not trigger a write.
    """
    if profile is None:
        return True

    return (
        (snapshot.province_code or None) != profile.province_code
        or (snapshot.ward_code or None) != profile.ward_code
        or (
            snapshot.radius_km is not None
            and snapshot.radius_km != profile.radius_km
        )
    )


def saved_selection_fields(profile: UserProfile | None) -> dict[str, str | None]:
    """Extract the province/ward fields of a profile.

    Pure function.
    """
    if profile is None:
        return {
            "province_code": None,
            "province_name": None,
            "ward_code": None,
            "ward_name": None,
        }

    return {
        "province_code": profile.province_code,
        "province_name": profile.province_name,
        "ward_code": profile.ward_code,
        "ward_name": profile.ward_name,
    }
