"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

The Config model is defined in src/core/config.py to avoid
information leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from src.core.config import Config, DEFAULT_RADIUS_OPTIONS_KM, validate_config


logger = logging.getLogger(__name__)


def _resolve_value(value: Any) -> Any:
    """Resolve a ${VAR} placeholder from the environment.

    Non-string values and plain strings are returned unchanged. An unset
    variable leaves the placeholder in place so validation can flag it.
    """
    if not isinstance(value, str):
        return value

    if value.startswith("${") and value.endswith("}"):
        var_name = value[2:-1]
        env_value = os.environ.get(var_name)
        if env_value:
            return env_value
        logger.warning("Environment variable %s not set", var_name)

    return value


def _parse_radius_options(data: Any) -> tuple[float, ...]:
    """Parse the list of radius choices."""
    if not data:
        return DEFAULT_RADIUS_OPTIONS_KM
    return tuple(float(v) for v in data)


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only env var expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    defaults = Config()
    region_api = data.get("region_api", {})
    firestore = data.get("firestore", {})

    return Config(
        provinces_url=_resolve_value(region_api.get("provinces_url", defaults.provinces_url)),
        wards_url=_resolve_value(region_api.get("wards_url", defaults.wards_url)),
        request_timeout_seconds=int(
            region_api.get("timeout_seconds", defaults.request_timeout_seconds)
        ),
        default_radius_km=float(data.get("default_radius_km", defaults.default_radius_km)),
        radius_options_km=_parse_radius_options(data.get("radius_options_km")),
        posts_path=_resolve_value(data.get("posts_path", defaults.posts_path)),
        profile_store=data.get("profile_store", defaults.profile_store),
        firestore_database=_resolve_value(firestore.get("database")),
        firestore_collection=firestore.get("collection", defaults.firestore_collection),
        profile_document=firestore.get("document", defaults.profile_document),
    )


def _log_validation(config: Config) -> None:
    """Log validation problems without failing the load."""
    result = validate_config(config)
    for error in result.errors:
        if error.severity == "warning":
            logger.warning("Config %s: %s", error.field, error.message)
        else:
            logger.error("Config %s: %s", error.field, error.message)


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", "config/config.yaml")

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return Config()

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    config = load_config_from_dict(data)
    _log_validation(config)

    logger.info(
        "Loaded config: profile store=%s, default radius=%.1f km, posts=%s",
        config.profile_store,
        config.default_radius_km,
        config.posts_path,
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Useful for simple deployments without a YAML file.

    Environment variables:
        PROVINCES_URL: Provinces endpoint
        WARDS_URL: Wards endpoint
        DEFAULT_RADIUS_KM: Radius used when the profile has none
        POSTS_PATH: YAML file holding the posts
        PROFILE_STORE: 'memory' or 'firestore'
        FIRESTORE_DATABASE: Firestore database name

    Returns:
        Config object from environment
    """
    defaults = Config()

    config = Config(
        provinces_url=os.environ.get("PROVINCES_URL", defaults.provinces_url),
        wards_url=os.environ.get("WARDS_URL", defaults.wards_url),
        default_radius_km=float(
            os.environ.get("DEFAULT_RADIUS_KM", str(defaults.default_radius_km))
        ),
        posts_path=os.environ.get("POSTS_PATH", defaults.posts_path),
        profile_store=os.environ.get("PROFILE_STORE", defaults.profile_store),
        firestore_database=os.environ.get("FIRESTORE_DATABASE"),
    )
    _log_validation(config)

    return config
