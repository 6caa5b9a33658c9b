"""Unit tests for per-category route selection and backfill."""
import pytest

from loopfinder.config import CATEGORY_TABLE, CategoryConfig
from loopfinder.config.categories import load_category_table
from loopfinder.models.route import METERS_TO_MILES, ScoredRoute
from loopfinder.services.route.scheduler import bearing_label
from loopfinder.services.route.selector import (
    SelectionPolicy,
    backfill,
    categorize,
    effective_overlap,
    select_best_routes,
    select_categories,
)


def _route(bearing: int, distance_miles: float, overlap: float = 0.0, category: str = "short") -> ScoredRoute:
    return ScoredRoute(
        points=((43.0731, -89.4012), (43.0731 + bearing / 1000, -89.4012)),
        distance_meters=distance_miles / METERS_TO_MILES,
        duration_seconds=distance_miles * 600,
        overlap_miles=overlap,
        bearing=bearing,
        bearing_label=bearing_label(bearing),
        category=category,
        estimated_minutes=0,
    )


def _config(dist_min, dist_max, max_routes, pace=10) -> CategoryConfig:
    return CategoryConfig(
        radius_min=1.0,
        radius_max=2.0,
        dist_min=dist_min,
        dist_max=dist_max,
        max_routes=max_routes,
        pace_minutes_per_mile=pace,
    )


def _bearings(routes):
    return [route.bearing for route in routes]


def test_effective_overlap_penalizes_small_positive_overlap():
    assert effective_overlap(_route(0, 5, 0.0)) == 0.0
    assert effective_overlap(_route(0, 5, 0.01)) == 100.0
    assert effective_overlap(_route(0, 5, 1.99)) == 100.0
    assert effective_overlap(_route(0, 5, 2.0)) == 2.0
    assert effective_overlap(_route(0, 5, 3.4)) == 3.4


def test_effective_overlap_uses_policy_constants():
    policy = SelectionPolicy(penalty_threshold_miles=1.0, penalty_value=50.0)
    assert effective_overlap(_route(0, 5, 0.5), policy) == 50.0
    assert effective_overlap(_route(0, 5, 1.5), policy) == 1.5


def test_select_best_routes_orders_by_penalized_overlap_then_bearing():
    routes = [_route(45, 5, 1.5), _route(0, 5, 0.3), _route(90, 5, 0.0), _route(135, 5, 3.0)]

    selected = select_best_routes(routes, 4)

    assert _bearings(selected) == [90, 135, 0, 45]


def test_overlap_penalty_prefers_lower_bearing_on_tie_even_if_it_arrives_last():
    late = _route(0, 5.1, 0.3)
    early = _route(45, 4.8, 1.5)

    selected = select_best_routes([early, late], 2)

    assert selected[0] is late
    assert selected[1] is early


def test_select_best_routes_spreads_bearings_first():
    routes = [
        _route(0, 5, 0.0),
        _route(0, 5, 0.0),
        _route(90, 5, 4.0),
        _route(90, 5, 5.0),
        _route(180, 5, 1.0),
    ]

    selected = select_best_routes(routes, 3)

    assert sorted(_bearings(selected)) == [0, 90, 180]


def test_second_pass_fills_from_leftovers():
    best_zero = _route(0, 5, 0.0)
    second_zero = _route(0, 5, 2.5)
    worst_zero = _route(0, 5, 6.0)
    ninety = _route(90, 5, 3.0)

    selected = select_best_routes([worst_zero, ninety, second_zero, best_zero], 3)

    assert selected == (best_zero, ninety, second_zero)
    assert selected[2] is second_zero


def test_select_best_routes_respects_cap_and_never_invents():
    routes = [_route(b, 5, 0.0) for b in (0, 45, 90, 135, 180)]

    selected = select_best_routes(routes, 2)

    assert len(selected) == 2
    assert all(any(chosen is route for route in routes) for chosen in selected)
    assert select_best_routes([], 3) == ()


def test_select_best_routes_does_not_mutate_input():
    routes = [_route(90, 5, 3.0), _route(0, 5, 0.0)]
    snapshot = list(routes)

    select_best_routes(routes, 1)

    assert routes == snapshot


def test_categorize_boundaries_are_inclusive_and_shorter_first():
    on_boundary = _route(0, 6.0)
    just_over = _route(45, 6.01)
    too_short = _route(90, 3.99)
    too_long = _route(135, 14.5)

    buckets = categorize([on_boundary, just_over, too_short, too_long], "running")

    assert buckets["short"] == (on_boundary,)
    assert buckets["medium"] == (just_over,)
    assert buckets["long"] == ()


def test_just_over_boundary_is_backfilled_into_next_category():
    table = load_category_table(
        {
            "running": {
                "short": {"radius_min": 1.0, "radius_max": 1.5, "dist_min": 4, "dist_max": 6,
                          "max_routes": 1, "pace_minutes_per_mile": 10},
                "medium": {"radius_min": 1.5, "radius_max": 2.2, "dist_min": 7, "dist_max": 9,
                           "max_routes": 2, "pace_minutes_per_mile": 10},
            }
        }
    )
    in_short = _route(0, 5.0)
    over_short = _route(45, 6.01)
    in_medium = _route(90, 8.0)

    buckets = categorize([in_short, over_short, in_medium], "running", table)
    assert buckets["short"] == (in_short,)
    assert buckets["medium"] == (in_medium,)

    selections = select_categories([in_short, over_short, in_medium], "running", table)

    assert _bearings(selections["short"]) == [0]
    assert _bearings(selections["medium"]) == [90, 45]


def test_backfill_orders_by_distance_from_midpoint():
    config = _config(4, 8, 5)  # target 6, soft window 2.4 - 12.8
    selected = (_route(0, 5.0), _route(45, 7.0))
    minus_three = _route(90, 3.0)
    plus_half = _route(135, 6.5)
    plus_five = _route(180, 11.0)

    filled = backfill(selected, [plus_five, minus_three, plus_half], config)

    assert _bearings(filled) == [0, 45, 135, 90, 180]


def test_backfill_stops_at_cap():
    config = _config(4, 8, 4)
    selected = (_route(0, 5.0), _route(45, 7.0))
    pool = [_route(90, 3.0), _route(135, 6.5), _route(180, 11.0)]

    filled = backfill(selected, pool, config)

    assert _bearings(filled) == [0, 45, 135, 90]


def test_backfill_skips_used_bearings_taken_routes_and_out_of_window():
    config = _config(4, 8, 4)
    selected = (_route(0, 5.0),)
    same_bearing = _route(0, 6.0)
    taken_elsewhere = _route(45, 6.0)
    too_short = _route(90, 2.3)
    too_long = _route(135, 12.9)
    eligible = _route(180, 9.0)

    filled = backfill(
        selected,
        [same_bearing, taken_elsewhere, too_short, too_long, eligible],
        config,
        taken={id(taken_elsewhere)},
    )

    assert filled == (selected[0], eligible)


def test_backfill_takes_one_route_per_new_bearing():
    config = _config(4, 8, 4)
    pool = [_route(90, 6.0), _route(90, 6.1), _route(135, 7.5)]

    filled = backfill((), pool, config)

    assert _bearings(filled) == [90, 135]


def test_backfill_returns_selection_untouched_when_full():
    config = _config(4, 8, 1)
    selected = (_route(0, 5.0),)

    assert backfill(selected, [_route(90, 6.0)], config) == selected


def test_select_categories_never_duplicates_routes_across_categories():
    pool = [_route(b, d) for b, d in [(0, 5.0), (45, 5.5), (90, 7.0), (135, 10.0), (180, 4.1), (225, 8.9)]]

    selections = select_categories(pool, "running")

    chosen = [route for routes in selections.values() for route in routes]
    assert len(chosen) == len({(r.bearing, r.distance_miles) for r in chosen})
    for category, routes in selections.items():
        assert len(routes) <= CATEGORY_TABLE[("running", category)].max_routes
        assert len({r.bearing for r in routes}) == len(routes)


def test_select_categories_stamps_estimated_minutes_with_category_pace():
    pool = [_route(0, 12.0, category="long")]

    selections = select_categories(pool, "cycling")

    assert selections["short"][0].estimated_minutes == 48
    assert selections["short"][0].distance_miles == pytest.approx(12.0)


def test_empty_pool_gives_empty_categories():
    assert select_categories([], "running") == {"short": (), "medium": (), "long": ()}


def test_backfill_skips_routes_held_by_another_category_by_default():
    pool = [_route(0, 5.0)]

    selections = select_categories(pool, "running")

    assert _bearings(selections["short"]) == [0]
    assert selections["medium"] == ()


def test_backfill_can_reuse_routes_across_categories_when_policy_allows():
    pool = [_route(0, 5.0)]
    policy = SelectionPolicy(backfill_exclude_selected=False)

    selections = select_categories(pool, "running", policy=policy)

    assert _bearings(selections["short"]) == [0]
    assert _bearings(selections["medium"]) == [0]
    # 5.0 mi is below the long soft window (9 * 0.6)
    assert selections["long"] == ()
