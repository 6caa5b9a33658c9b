"""
Response builder service - converts selected routes to API response format
"""
from typing import Dict, Mapping, Tuple

from loopfinder.config import CATEGORY_ORDER, CATEGORY_TABLE, CategoryConfig, categories_for_mode
from loopfinder.models.response import CategoryRoutes, Route, RouteResponse
from loopfinder.models.route import RequestResult, ScoredRoute


class ResponseBuilderService:
    """Response builder service - converts internal data to API response format"""

    def build_route(self, route: ScoredRoute) -> Route:
        return Route(
            coordinates=[[lat, lng] for lat, lng in route.points],
            distance_miles=route.distance_miles,
            elevation_gain_ft=route.elevation_gain_ft,
            duration_seconds=route.duration_seconds,
            duration_minutes=route.duration_minutes,
            estimated_minutes=route.estimated_minutes,
            bearing=route.bearing,
            bearing_label=route.bearing_label,
            overlap_miles=route.overlap_miles,
        )

    def distance_labels(
        self,
        mode: str,
        table: Mapping[Tuple[str, str], CategoryConfig] = CATEGORY_TABLE,
    ) -> Dict[str, str]:
        return {
            category: table[(mode, category)].distance_label
            for category in categories_for_mode(mode, table)
        }

    def build_response(
        self,
        result: RequestResult,
        table: Mapping[Tuple[str, str], CategoryConfig] = CATEGORY_TABLE,
    ) -> RouteResponse:
        """
        Build API response from a request result

        Args:
            result: Per-category selection, errors and candidate count

        Returns:
            RouteResponse; categories the mode does not configure are empty
        """
        routes = CategoryRoutes(
            **{
                category: [self.build_route(r) for r in result.routes_for(category)]
                for category in CATEGORY_ORDER
            }
        )

        return RouteResponse(
            routes=routes,
            mode=result.mode,
            distance_labels=self.distance_labels(result.mode, table),
            total_candidates=result.total_candidates,
            errors=len(result.errors),
        )
