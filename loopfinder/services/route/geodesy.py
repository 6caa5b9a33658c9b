"""Spherical-earth helpers: destination point and great-circle distance."""
import math
from typing import Tuple

EARTH_RADIUS_MILES = 3958.8
EARTH_RADIUS_METERS = 6371000


def offset_point(
    lat: float, lng: float, distance_miles: float, bearing_deg: float
) -> Tuple[float, float]:
    """
    Move a point by a distance along a bearing.

    Args:
        lat, lng: Origin in degrees
        distance_miles: Distance to travel (>= 0)
        bearing_deg: Compass bearing, any real value (normalized mod 360)

    Returns:
        Destination (lat, lng) in degrees. Longitude is not wrapped into
        [-180, 180); callers normalize if they need to.
    """
    if distance_miles == 0:
        return (lat, lng)

    d = distance_miles / EARTH_RADIUS_MILES
    brng = math.radians(bearing_deg % 360)
    lat1 = math.radians(lat)
    lng1 = math.radians(lng)

    lat2 = math.asin(
        math.sin(lat1) * math.cos(d) + math.cos(lat1) * math.sin(d) * math.cos(brng)
    )
    lng2 = lng1 + math.atan2(
        math.sin(brng) * math.sin(d) * math.cos(lat1),
        math.cos(d) - math.sin(lat1) * math.sin(lat2),
    )

    return (math.degrees(lat2), math.degrees(lng2))


def haversine_meters(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    """Great-circle distance in meters between two (lat, lng) points"""
    lat1, lng1 = a
    lat2, lng2 = b

    delta_lat = math.radians(lat2 - lat1)
    delta_lng = math.radians(lng2 - lng1)

    h = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(delta_lng / 2) ** 2
    )
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(min(1.0, h)))
