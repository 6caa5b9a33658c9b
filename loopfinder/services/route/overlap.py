"""Overlap scoring - how much of a path retraces ground it already covered."""
from typing import Sequence, Tuple

from loopfinder.models.route import METERS_TO_MILES
from loopfinder.services.route.geodesy import haversine_meters

OVERLAP_THRESHOLD_M = 30.0
INDEX_GAP = 10


def calculate_overlap_miles(
    points: Sequence[Tuple[float, float]],
    threshold_m: float = OVERLAP_THRESHOLD_M,
    index_gap: int = INDEX_GAP,
) -> float:
    """
    Estimate the distance (miles) of a path that is travelled twice.

    Each point i is compared with every later point j >= i + index_gap; the
    gap keeps normal curvature from counting as overlap. On the first j closer
    than threshold_m, the segment i -> i+1 is counted once and the scan for i
    stops. O(n^2) over the polyline, which is fine for decoded route shapes.
    """
    count = len(points)
    overlap_meters = 0.0

    for i in range(count):
        for j in range(i + index_gap, count):
            if haversine_meters(points[i], points[j]) < threshold_m:
                if i + 1 < count:
                    overlap_meters += haversine_meters(points[i], points[i + 1])
                break

    return overlap_meters * METERS_TO_MILES
