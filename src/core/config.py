"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field

from src.core.preferences import DEFAULT_RADIUS_KM


PROVINCES_API = "https://sapnhap.bando.com.vn/pcotinh"
WARDS_API = "https://sapnhap.bando.com.vn/ptracuu"

# Radius choices offered to the user; 0 means "show everything"
DEFAULT_RADIUS_OPTIONS_KM = (1.0, 3.0, 5.0, 10.0, 20.0, 50.0, 100.0, 0.0)

# Bounds accepted for the preferred radius on the settings form
MIN_PROFILE_RADIUS_KM = 1.0
MAX_PROFILE_RADIUS_KM = 100.0

PROFILE_STORE_TYPES = ("memory", "firestore")


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        provinces_url: Region lookup endpoint for provinces
        wards_url: Region lookup endpoint for wards
        request_timeout_seconds: HTTP timeout for region lookups
        default_radius_km: Radius used when the profile has none
        radius_options_km: Radius choices offered to the user (0 = all)
        posts_path: YAML file holding the post collection
        profile_store: Profile store backend ('memory' or 'firestore')
        firestore_database: Firestore database name (None for default)
        firestore_collection: Firestore collection holding the profile
        profile_document: Document ID of the profile record
    """
    provinces_url: str = PROVINCES_API
    wards_url: str = WARDS_API
    request_timeout_seconds: int = 30
    default_radius_km: float = DEFAULT_RADIUS_KM
    radius_options_km: tuple[float, ...] = field(default=DEFAULT_RADIUS_OPTIONS_KM)
    posts_path: str = "config/posts.yaml"
    profile_store: str = "memory"
    firestore_database: str | None = None
    firestore_collection: str = "relief_profiles"
    profile_document: str = "user_profile"


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_coordinates(lat: float, lon: float, field_name: str) -> list[ValidationError]:
    """Validate latitude/longitude coordinates.

    Pure function.

    Args:
        lat: Latitude value
        lon: Longitude value
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not -90 <= lat <= 90:
        errors.append(ValidationError(
            field=field_name,
            message=f"Latitude {lat} out of range [-90, 90]",
        ))

    if not -180 <= lon <= 180:
        errors.append(ValidationError(
            field=field_name,
            message=f"Longitude {lon} out of range [-180, 180]",
        ))

    return errors


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    if config.request_timeout_seconds <= 0:
        errors.append(ValidationError(
            field="request_timeout_seconds",
            message=f"Timeout must be positive, got {config.request_timeout_seconds}",
        ))

    if config.default_radius_km <= 0:
        errors.append(ValidationError(
            field="default_radius_km",
            message=f"Default radius must be positive, got {config.default_radius_km}",
        ))
    elif not MIN_PROFILE_RADIUS_KM <= config.default_radius_km <= MAX_PROFILE_RADIUS_KM:
        errors.append(ValidationError(
            field="default_radius_km",
            message=(
                f"Default radius {config.default_radius_km} outside "
                f"[{MIN_PROFILE_RADIUS_KM:g}, {MAX_PROFILE_RADIUS_KM:g}] km"
            ),
            severity="warning",
        ))

    for i, option in enumerate(config.radius_options_km):
        if option < 0:
            errors.append(ValidationError(
                field=f"radius_options_km[{i}]",
                message=f"Radius option must not be negative, got {option}",
            ))

    if config.profile_store not in PROFILE_STORE_TYPES:
        errors.append(ValidationError(
            field="profile_store",
            message=(
                f"Unknown profile store '{config.profile_store}', "
                f"expected one of {', '.join(PROFILE_STORE_TYPES)}"
            ),
        ))

    for name in ("provinces_url", "wards_url"):
        value = getattr(config, name)
        if not value or value.startswith("${"):
            errors.append(ValidationError(
                field=name,
                message="URL not resolved (still contains placeholder)",
                severity="warning",
            ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
