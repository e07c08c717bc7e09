"""Great-circle distance helpers."""

import math

from foodloop.domain.listings import GeoPoint

EARTH_RADIUS_KM = 6371.0088
_METERS_PER_KM = 1000


def distance_km(origin: GeoPoint, target: GeoPoint) -> float:
    """Return the haversine surface distance between two points in km."""
    lat1 = math.radians(origin.latitude)
    lat2 = math.radians(target.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(target.longitude - origin.longitude)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    # Rounding can push a slightly past 1 for antipodal points.
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def format_distance(km: float) -> str:
    """Format a distance as whole meters below 1 km, otherwise one-decimal km."""
    meters = km * _METERS_PER_KM
    if meters < _METERS_PER_KM:
        return f"{int(meters)} m"
    return f"{km:.1f} km"
