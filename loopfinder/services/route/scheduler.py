import asyncio
import random
from functools import partial
from typing import Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from loopfinder.config import (
    CATEGORY_TABLE,
    CategoryConfig,
    categories_for_mode,
    get_category_config,
)
from loopfinder.models.route import Candidate, CandidateError, ResolvedPath, ScoredRoute
from loopfinder.services.route.loop_geometry import build_loop_waypoints, shape_for_category
from loopfinder.services.route.overlap import calculate_overlap_miles
from loopfinder.services.route.throttle import DeadlineExceeded, PacedExecutor
from loopfinder.services.routing.errors import RoutingError
from loopfinder.services.routing.routing_service import RoutingService
from loopfinder.utils import get_logger

logger = get_logger("scheduler")

CANONICAL_BEARINGS: Tuple[int, ...] = (0, 45, 90, 135, 180, 225, 270, 315)

BEARING_LABELS = {
    0: "North",
    45: "Northeast",
    90: "East",
    135: "Southeast",
    180: "South",
    225: "Southwest",
    270: "West",
    315: "Northwest",
}

CANCELLED_MESSAGE = "cancelled: request deadline exceeded"


def bearing_label(bearing: int) -> str:
    return BEARING_LABELS.get(bearing, f"{bearing}°")


def eligible_bearings(exclude: Optional[Iterable[int]] = None) -> Tuple[int, ...]:
    """Canonical bearings minus the ones the caller has already seen"""
    excluded = set(exclude or ())
    return tuple(b for b in CANONICAL_BEARINGS if b not in excluded)


def build_candidates(
    bearings: Sequence[int],
    mode: str,
    rng: random.Random,
    table: Mapping[Tuple[str, str], CategoryConfig] = CATEGORY_TABLE,
) -> Tuple[Candidate, ...]:
    """
    One candidate per (bearing, category) for the mode.

    Radii are drawn uniformly from the category's radius window so repeated
    requests at the same origin produce differently shaped loops.
    """
    categories = categories_for_mode(mode, table)
    candidates: List[Candidate] = []
    for bearing in bearings:
        for category in categories:
            config = table[(mode, category)]
            candidates.append(
                Candidate(
                    bearing=bearing,
                    radius=rng.uniform(config.radius_min, config.radius_max),
                    category=category,
                )
            )
    return tuple(candidates)


def estimate_minutes(distance_miles: float, pace_minutes_per_mile: float) -> int:
    return round(distance_miles * pace_minutes_per_mile)


class CandidateScheduler:
    """
    Candidate scheduler - resolves loop candidates through the routing provider

    Candidates are sent strictly one after another through a PacedExecutor so
    the provider never sees more than one request in flight.
    """

    def __init__(
        self,
        routing_service: RoutingService,
        delay_seconds: float = 0.2,
        deadline_seconds: Optional[float] = None,
        overlap_scorer: Callable[[Sequence[Tuple[float, float]]], float] = calculate_overlap_miles,
        sleep: Callable = asyncio.sleep,
    ):
        self.routing_service = routing_service
        self.delay_seconds = delay_seconds
        self.deadline_seconds = deadline_seconds
        self.overlap_scorer = overlap_scorer
        self._sleep = sleep

    def _score(
        self, path: ResolvedPath, candidate: Candidate, config: CategoryConfig
    ) -> ScoredRoute:
        overlap_miles = round(self.overlap_scorer(path.points), 2)
        return ScoredRoute(
            **path.model_dump(),
            overlap_miles=max(0.0, overlap_miles),
            bearing=candidate.bearing,
            bearing_label=bearing_label(candidate.bearing),
            category=candidate.category,
            estimated_minutes=estimate_minutes(
                path.distance_miles, config.pace_minutes_per_mile
            ),
        )

    async def resolve(
        self,
        candidates: Sequence[Candidate],
        origin: Tuple[float, float],
        mode: str,
        quiet: bool = False,
        table: Mapping[Tuple[str, str], CategoryConfig] = CATEGORY_TABLE,
    ) -> Tuple[Tuple[ScoredRoute, ...], Tuple[CandidateError, ...]]:
        """
        Resolve every candidate in order.

        Returns:
            (pool, errors): every successfully resolved route regardless of
            which category its realized distance falls in, and one
            CandidateError per failed or cancelled candidate.
        """
        lat, lng = origin
        executor = PacedExecutor(
            delay_seconds=self.delay_seconds,
            deadline_seconds=self.deadline_seconds,
            sleep=self._sleep,
        )
        pool: List[ScoredRoute] = []
        errors: List[CandidateError] = []

        for candidate in candidates:
            config = get_category_config(mode, candidate.category, table)
            waypoints = build_loop_waypoints(
                lat, lng, candidate.bearing, candidate.radius,
                shape_for_category(candidate.category),
            )
            label = bearing_label(candidate.bearing)

            try:
                path = await executor.submit(
                    partial(self.routing_service.get_route, waypoints, mode, quiet)
                )
            except DeadlineExceeded:
                logger.warning(f"  {label} {candidate.category}: {CANCELLED_MESSAGE}")
                errors.append(
                    CandidateError(
                        bearing=candidate.bearing,
                        category=candidate.category,
                        message=CANCELLED_MESSAGE,
                    )
                )
                continue
            except RoutingError as e:
                logger.warning(f"  {label} {candidate.category}: failed - {e.message}")
                errors.append(
                    CandidateError(
                        bearing=candidate.bearing,
                        category=candidate.category,
                        message=e.message,
                    )
                )
                continue

            route = self._score(path, candidate, config)
            logger.info(
                f"  {label} {candidate.category}: {route.distance_miles} mi, "
                f"overlap: {route.overlap_miles} mi"
            )
            pool.append(route)

        return tuple(pool), tuple(errors)
