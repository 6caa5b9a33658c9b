"""
Category selector - reduces the resolved pool to a diverse, high-quality
subset per distance category.

Two stages per category:
1. Primary selection over routes whose realized distance is inside the
   category window, ranked by overlap (small out-and-back overlap heavily
   penalized) and spread across bearings.
2. Backfill from the whole pool when the primary stage leaves open slots,
   using a softer distance window and closeness to the category midpoint.
"""
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

from pydantic import BaseModel, ConfigDict

from loopfinder.config import CATEGORY_TABLE, CategoryConfig, categories_for_mode, settings
from loopfinder.models.route import ScoredRoute


class SelectionPolicy(BaseModel):
    """Empirical selection constants"""

    model_config = ConfigDict(frozen=True)

    penalty_threshold_miles: float = 2.0
    penalty_value: float = 100.0
    backfill_min_factor: float = 0.6
    backfill_max_factor: float = 1.6
    # Backfill skips routes another category already holds
    backfill_exclude_selected: bool = True

    @classmethod
    def from_settings(cls) -> "SelectionPolicy":
        return cls(
            penalty_threshold_miles=settings.overlap_penalty_threshold_miles,
            penalty_value=settings.overlap_penalty_value,
            backfill_min_factor=settings.backfill_min_factor,
            backfill_max_factor=settings.backfill_max_factor,
            backfill_exclude_selected=settings.backfill_exclude_selected,
        )


DEFAULT_POLICY = SelectionPolicy()


def effective_overlap(route: ScoredRoute, policy: SelectionPolicy = DEFAULT_POLICY) -> float:
    """Overlap used for ranking; a small positive overlap is a degenerate out-and-back"""
    overlap = route.overlap_miles or 0.0
    if 0 < overlap < policy.penalty_threshold_miles:
        return policy.penalty_value
    return overlap


def categorize(
    pool: Sequence[ScoredRoute],
    mode: str,
    table: Mapping[Tuple[str, str], CategoryConfig] = CATEGORY_TABLE,
) -> Dict[str, Tuple[ScoredRoute, ...]]:
    """
    Bucket routes by realized distance.

    Windows are inclusive and checked in short -> long order, so a route on a
    shared boundary belongs to the shorter category. Routes outside every
    window stay in the pool only.
    """
    categories = categories_for_mode(mode, table)
    buckets: Dict[str, List[ScoredRoute]] = {category: [] for category in categories}

    for route in pool:
        distance = route.distance_miles
        for category in categories:
            config = table[(mode, category)]
            if config.dist_min <= distance <= config.dist_max:
                buckets[category].append(route)
                break

    return {category: tuple(routes) for category, routes in buckets.items()}


def select_best_routes(
    routes: Sequence[ScoredRoute],
    max_count: int,
    policy: SelectionPolicy = DEFAULT_POLICY,
) -> Tuple[ScoredRoute, ...]:
    """Pick up to max_count routes: best overlap first, one per bearing before repeats"""
    ranked = sorted(routes, key=lambda r: (effective_overlap(r, policy), r.bearing))

    selected: List[ScoredRoute] = []
    used_bearings: Set[int] = set()

    # First pass: one per bearing
    for route in ranked:
        if len(selected) >= max_count:
            break
        if route.bearing not in used_bearings:
            selected.append(route)
            used_bearings.add(route.bearing)

    # Second pass: fill remaining slots
    for route in ranked:
        if len(selected) >= max_count:
            break
        if not any(route is chosen for chosen in selected):
            selected.append(route)

    return tuple(selected)


def backfill(
    selected: Sequence[ScoredRoute],
    pool: Sequence[ScoredRoute],
    config: CategoryConfig,
    policy: SelectionPolicy = DEFAULT_POLICY,
    taken: Optional[Set[int]] = None,
) -> Tuple[ScoredRoute, ...]:
    """
    Top up a category from the full pool.

    Eligible routes have a bearing not yet used in this category, are not
    already taken by any category (tracked by object id), and fall inside the
    soft window [dist_min * min_factor, dist_max * max_factor]. They are
    appended nearest-to-midpoint first until the quota is met.
    """
    result = list(selected)
    if len(result) >= config.max_routes:
        return tuple(result)

    taken_ids = set(taken or ()) | {id(route) for route in result}
    used_bearings = {route.bearing for route in result}
    soft_min = config.dist_min * policy.backfill_min_factor
    soft_max = config.dist_max * policy.backfill_max_factor
    target = config.target_distance

    eligible = [
        route
        for route in pool
        if id(route) not in taken_ids and soft_min <= route.distance_miles <= soft_max
    ]
    eligible.sort(key=lambda r: (abs(r.distance_miles - target), r.bearing))

    for route in eligible:
        if len(result) >= config.max_routes:
            break
        if route.bearing in used_bearings:
            continue
        result.append(route)
        used_bearings.add(route.bearing)

    return tuple(result)


def select_categories(
    pool: Sequence[ScoredRoute],
    mode: str,
    table: Mapping[Tuple[str, str], CategoryConfig] = CATEGORY_TABLE,
    policy: SelectionPolicy = DEFAULT_POLICY,
) -> Dict[str, Tuple[ScoredRoute, ...]]:
    """
    Primary selection plus backfill for every category of the mode, short first.

    With backfill_exclude_selected (the default) a route appears in at most one
    category; without it backfill only avoids bearings already used in the
    category being filled.
    """
    buckets = categorize(pool, mode, table)

    primary = {
        category: select_best_routes(in_range, table[(mode, category)].max_routes, policy)
        for category, in_range in buckets.items()
    }
    # Primary picks are reserved before any category backfills
    taken: Set[int] = {id(route) for chosen in primary.values() for route in chosen}

    selections: Dict[str, Tuple[ScoredRoute, ...]] = {}
    for category, chosen in primary.items():
        config = table[(mode, category)]
        reserved = taken if policy.backfill_exclude_selected else None
        filled = backfill(chosen, pool, config, policy, reserved)
        taken.update(id(route) for route in filled)
        selections[category] = tuple(
            _with_category_pace(route, config) for route in filled
        )

    return selections


def _with_category_pace(route: ScoredRoute, config: CategoryConfig) -> ScoredRoute:
    estimated = round(route.distance_miles * config.pace_minutes_per_mile)
    if estimated == route.estimated_minutes:
        return route
    return route.model_copy(update={"estimated_minutes": estimated})
