"""Great-circle distance shared by foreground ranking and background checks."""

import math

from mallfinder.models.geo import GeoPoint

# Earth's mean radius in kilometers
EARTH_RADIUS_KM = 6371.0


def haversine_km(origin: GeoPoint, point: GeoPoint) -> float:
    """Calculate distance between two points using the Haversine formula.

    Returns distance in kilometers.
    """
    lat1_rad = math.radians(origin.latitude)
    lat2_rad = math.radians(point.latitude)
    dlat = math.radians(point.latitude - origin.latitude)
    dlon = math.radians(point.longitude - origin.longitude)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def within_radius(distance_km: float, radius_km: float) -> bool:
    """Radius predicate used by every ranking path (boundary inclusive)."""
    if radius_km < 0:
        raise ValueError("radius_km must be >= 0")
    return distance_km <= radius_km


def format_distance(distance_km: float) -> str:
    """Human-readable distance, one decimal place."""
    return f"{distance_km:.1f} km"
