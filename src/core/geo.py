"""Geographic calculations - Pure functions.

This module provides great-circle distance calculations for relief post
locations. All functions are pure with no side effects.
"""

import math
from dataclasses import dataclass


# Earth's radius in kilometers
EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Coordinate:
    """A point on the Earth's surface in decimal degrees.

    Attributes:
        latitude: Latitude in [-90, 90]
        longitude: Longitude in [-180, 180]
    """
    latitude: float
    longitude: float


def calculate_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Calculate distance between two points using Haversine formula.

    Pure function.

    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point

    Returns:
        Distance in kilometers (never negative)
    """
    # Convert to radians
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    # Haversine formula
    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    # Rounding can push a just outside [0, 1]
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates in kilometers.

    Pure function.
    """
    return calculate_distance(a.latitude, a.longitude, b.latitude, b.longitude)


def is_within_radius(
    point: Coordinate,
    center: Coordinate,
    radius_km: float,
) -> bool:
    """Check if a point is within a radius of a center point.

    Pure function. The boundary is inclusive.

    Args:
        point: Point to check
        center: Center point
        radius_km: Radius in kilometers

    Returns:
        True if point is within radius
    """
    return distance_km(center, point) <= radius_km
