"""Unit tests for the out-and-back overlap scorer."""
import math

import pytest

from loopfinder.models.route import METERS_TO_MILES
from loopfinder.services.route.geodesy import EARTH_RADIUS_METERS
from loopfinder.services.route.overlap import calculate_overlap_miles

METERS_PER_DEGREE = EARTH_RADIUS_METERS * math.pi / 180
START = (43.0731, -89.4012)


def _northward_line(count: int, spacing_m: float):
    step = spacing_m / METERS_PER_DEGREE
    return [(START[0] + k * step, START[1]) for k in range(count)]


def _circle(count: int, radius_m: float):
    radius_deg = radius_m / METERS_PER_DEGREE
    lng_scale = math.cos(math.radians(START[0]))
    return [
        (
            START[0] + radius_deg * math.sin(2 * math.pi * k / count),
            START[1] + radius_deg * math.cos(2 * math.pi * k / count) / lng_scale,
        )
        for k in range(count)
    ]


def test_empty_and_single_point_paths_have_no_overlap():
    assert calculate_overlap_miles([]) == 0
    assert calculate_overlap_miles([START]) == 0


def test_simple_loop_has_no_overlap():
    # 40 points, ~78 m apart; non-adjacent points are never within 30 m
    assert calculate_overlap_miles(_circle(40, 500)) == 0


def test_pure_retrace_overlap_matches_one_way_length():
    out = _northward_line(200, 20)
    path = out + out[-2::-1]
    one_way_miles = 199 * 20 * METERS_TO_MILES

    overlap = calculate_overlap_miles(path)

    assert overlap == pytest.approx(one_way_miles, rel=0.05)
    assert overlap <= one_way_miles


def test_each_point_is_counted_once():
    line = _northward_line(11, 100)
    path = line + [line[0], line[0], line[0]]

    assert calculate_overlap_miles(path) == pytest.approx(100 * METERS_TO_MILES, rel=1e-6)


def test_points_inside_the_index_gap_are_ignored():
    # Tight wiggle that returns to the start after 5 points
    line = _northward_line(5, 20)
    path = line + line[-2::-1]

    assert len(path) == 9
    assert calculate_overlap_miles(path) == 0


def test_threshold_and_gap_are_configurable():
    line = _northward_line(11, 100)
    path = line + [line[0]]

    assert calculate_overlap_miles(path, threshold_m=10) > 0
    assert calculate_overlap_miles(path, index_gap=12) == 0
    assert calculate_overlap_miles(path, threshold_m=150, index_gap=2) > calculate_overlap_miles(path)


def test_overlap_is_deterministic():
    out = _northward_line(50, 25)
    path = out + out[::-1]
    assert calculate_overlap_miles(path) == calculate_overlap_miles(list(path))
