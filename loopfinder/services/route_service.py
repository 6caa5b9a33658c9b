"""
Main route generation service
Integrates candidate scheduling, overlap scoring, category selection and response building
"""
import asyncio
import random
from typing import Callable, Iterable, Mapping, Optional, Tuple

from loopfinder.config import (
    CATEGORY_TABLE,
    MODE_PROFILES,
    CategoryConfig,
    categories_for_mode,
    settings,
)
from loopfinder.models.route import RequestResult
from loopfinder.services.route.overlap import calculate_overlap_miles
from loopfinder.services.route.scheduler import (
    CandidateScheduler,
    build_candidates,
    eligible_bearings,
)
from loopfinder.services.route.selector import SelectionPolicy, select_categories
from loopfinder.services.routing.openroute_service import OpenRouteService
from loopfinder.services.routing.routing_service import RoutingService
from loopfinder.utils import get_logger

logger = get_logger("route_service")


class UnsupportedModeError(ValueError):
    """Requested travel mode has no configuration"""


class RouteService:
    """
    Main route generation service - one pure pipeline run per request

    Architecture: Candidates → Loop waypoints → Provider path → Overlap scoring
    → Categorization → Selection with backfill
    """

    def __init__(
        self,
        routing_service: Optional[RoutingService] = None,
        rng: Optional[random.Random] = None,
        policy: Optional[SelectionPolicy] = None,
        table: Mapping[Tuple[str, str], CategoryConfig] = CATEGORY_TABLE,
        delay_seconds: Optional[float] = None,
        deadline_seconds: Optional[float] = None,
        overlap_scorer: Callable = calculate_overlap_miles,
        sleep: Callable = asyncio.sleep,
    ):
        self._routing_service = routing_service
        self.rng = rng or random.Random()
        self.policy = policy or SelectionPolicy.from_settings()
        self.table = table
        self.delay_seconds = (
            settings.provider_delay_seconds if delay_seconds is None else delay_seconds
        )
        self.deadline_seconds = (
            settings.request_deadline_seconds if deadline_seconds is None else deadline_seconds
        )
        self.overlap_scorer = overlap_scorer
        self._sleep = sleep

    @property
    def routing_service(self) -> RoutingService:
        # Built on first use so missing credentials fail the request, not the import
        if self._routing_service is None:
            self._routing_service = OpenRouteService()
        return self._routing_service

    async def generate_routes(
        self,
        lat: float,
        lng: float,
        mode: Optional[str] = None,
        quiet: bool = False,
        exclude_bearings: Optional[Iterable[int]] = None,
    ) -> RequestResult:
        """
        Main route generation process

        Raises:
            UnsupportedModeError: Unsupported mode
            ProviderConfigurationError: Routing provider credentials missing
        """
        mode = mode or settings.default_mode
        if mode not in MODE_PROFILES or not categories_for_mode(mode, self.table):
            raise UnsupportedModeError(f"unsupported mode: {mode}")

        routing_service = self.routing_service

        logger.info(f"Generating {mode} routes from [{lat}, {lng}]...")
        bearings = eligible_bearings(exclude_bearings)
        if exclude_bearings:
            logger.info(
                f"Excluding bearings: {sorted(set(exclude_bearings))} → using: {list(bearings)}"
            )

        # Step 1: Enumerate candidates
        candidates = build_candidates(bearings, mode, self.rng, self.table)

        # Step 2: Resolve candidates sequentially through the provider
        scheduler = CandidateScheduler(
            routing_service,
            delay_seconds=self.delay_seconds,
            deadline_seconds=self.deadline_seconds,
            overlap_scorer=self.overlap_scorer,
            sleep=self._sleep,
        )
        pool, errors = await scheduler.resolve(
            candidates, (lat, lng), mode, quiet=quiet, table=self.table
        )

        # Step 3: Categorize by realized distance and select per category
        selections = select_categories(pool, mode, self.table, self.policy)

        result = RequestResult(
            mode=mode,
            errors=errors,
            total_candidates=len(candidates),
            **selections,
        )

        counts = ", ".join(
            f"{len(routes)} {category}" for category, routes in selections.items()
        )
        logger.info(f"Generated {counts} routes ({len(errors)} errors)")
        return result
