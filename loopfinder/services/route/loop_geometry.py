"""
Loop geometry builder - turns (origin, bearing, radius) into closed waypoint loops.

The routing provider is order-sensitive and expects [lng, lat] pairs, so every
loop starts and ends at the origin in that coordinate order.
"""
from typing import List, Sequence, Tuple

from loopfinder.services.route.geodesy import offset_point

DIAMOND = "diamond"
PENTAGON = "pentagon"

# (bearing offset in degrees, radius factor) for each vertex after the origin
LOOP_SHAPES = {
    # Asymmetric quadrilateral so the router does not retrace a single street
    DIAMOND: ((0, 1.0), (90, 1.0), (180, 0.5)),
    # Extra vertex keeps large loops round instead of collapsing into two legs
    PENTAGON: ((0, 1.0), (90, 1.0), (135, 0.8), (180, 0.6)),
}

_SHAPE_BY_CATEGORY = {
    "short": DIAMOND,
    "medium": DIAMOND,
    "long": PENTAGON,
}


def shape_for_category(category: str) -> str:
    return _SHAPE_BY_CATEGORY.get(category, DIAMOND)


def loop_vertices(
    lat: float, lng: float, bearing_deg: float, radius_miles: float, shape: str = DIAMOND
) -> List[Tuple[float, float]]:
    """Closed loop as (lat, lng) vertices, origin first and last"""
    try:
        template: Sequence[Tuple[float, float]] = LOOP_SHAPES[shape]
    except KeyError:
        raise ValueError(f"Unknown loop shape: {shape}") from None

    vertices = [(lat, lng)]
    for bearing_offset, radius_factor in template:
        vertices.append(
            offset_point(lat, lng, radius_miles * radius_factor, bearing_deg + bearing_offset)
        )
    vertices.append((lat, lng))
    return vertices


def build_loop_waypoints(
    lat: float, lng: float, bearing_deg: float, radius_miles: float, shape: str = DIAMOND
) -> List[List[float]]:
    """Closed loop in provider order: [lng, lat] pairs, origin first and last"""
    return [
        [point_lng, point_lat]
        for point_lat, point_lng in loop_vertices(lat, lng, bearing_deg, radius_miles, shape)
    ]
