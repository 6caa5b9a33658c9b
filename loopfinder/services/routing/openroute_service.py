import httpx
import polyline
from typing import Any, Dict, List, Optional

from loopfinder.config import settings, get_mode_profile
from loopfinder.models.route import METERS_TO_FEET, ResolvedPath
from loopfinder.services.routing.api_counter import APICounter
from loopfinder.services.routing.errors import ProviderConfigurationError, RoutingError
from loopfinder.services.routing.routing_service import RoutingService

POLYLINE_PRECISION = 5
UNEXPECTED_RESPONSE = "Unexpected response from provider"


def decode_geometry(encoded: str) -> List[tuple]:
    """Decode an encoded polyline (1e-5 precision) into (lat, lng) tuples"""
    return [(lat, lng) for lat, lng in polyline.decode(encoded, POLYLINE_PRECISION)]


class OpenRouteService(RoutingService):
    """OpenRouteService directions API implementation"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        api_counter: Optional[APICounter] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.ors_api_key
        self.base_url = (base_url or settings.ors_base_url).rstrip("/")
        self.timeout = timeout or settings.request_timeout_seconds
        self.api_counter = api_counter or APICounter(settings.max_api_calls_per_day)
        self._client = client

        if not self.api_key:
            raise ProviderConfigurationError("ORS_API_KEY is not configured")

    async def get_route(
        self, waypoints: List[List[float]], mode: str, quiet: bool = False
    ) -> ResolvedPath:
        """Get a route through the waypoints ([lng, lat] pairs, origin first and last)"""
        # Check API call limit
        if not self.api_counter.can_make_call():
            raise RoutingError(
                f"API call limit exceeded. Max calls per day: {self.api_counter.max_calls_per_day}"
            )

        profile = get_mode_profile(mode)
        url = f"{self.base_url}/{profile.provider_profile}"
        body = self._build_request_body(waypoints, mode, quiet)

        try:
            if self._client is not None:
                response = await self._post(self._client, url, body)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client, url, body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RoutingError(
                self._extract_error_message(e.response), status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            raise RoutingError(f"Routing request failed: {e}") from e
        finally:
            # Rejected calls still count against the provider quota
            self.api_counter.record_call()

        try:
            data = response.json()
        except ValueError as e:
            raise RoutingError("Provider returned an unreadable response") from e

        try:
            return self._convert_route_response(data)
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
            raise RoutingError(UNEXPECTED_RESPONSE) from e

    async def _post(self, client: httpx.AsyncClient, url: str, body: Dict) -> httpx.Response:
        return await client.post(
            url,
            headers={
                "Authorization": self.api_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            json=body,
            timeout=self.timeout,
        )

    def _build_request_body(
        self, waypoints: List[List[float]], mode: str, quiet: bool
    ) -> Dict[str, Any]:
        """Build request body for the directions API"""
        profile = get_mode_profile(mode)
        options: Dict[str, Any] = {}

        if profile.avoid_features:
            options["avoid_features"] = list(profile.avoid_features)

        # Quiet weighting only exists for pedestrian profiles
        if quiet and profile.supports_quiet:
            options["profile_params"] = {"weightings": {"quiet": 1}}

        # No "elevation" flag: it turns the geometry into lat/lng/elevation triples
        body: Dict[str, Any] = {"coordinates": [list(point) for point in waypoints]}
        if options:
            body["options"] = options
        return body

    def _convert_route_response(self, data: Dict) -> ResolvedPath:
        """Convert directions response to a ResolvedPath"""
        if not isinstance(data, dict):
            raise RoutingError(UNEXPECTED_RESPONSE)
        routes = data.get("routes") or []
        if not routes:
            raise RoutingError("No route returned by provider")

        route = routes[0]
        summary = route.get("summary", {})
        geometry = route.get("geometry", "")
        if not isinstance(geometry, str):
            raise RoutingError("Unexpected geometry format from provider")

        ascent = summary.get("ascent")
        elevation_gain_ft = round(ascent * METERS_TO_FEET) if ascent else None

        return ResolvedPath(
            points=tuple(decode_geometry(geometry)),
            distance_meters=float(summary.get("distance", 0.0)),
            elevation_gain_ft=elevation_gain_ft,
            duration_seconds=float(summary.get("duration", 0.0)),
        )

    @staticmethod
    def _extract_error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            data = None
        error = data.get("error") if isinstance(data, dict) else None

        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        if isinstance(error, str) and error:
            return error
        return f"Routing API error: {response.status_code}"
