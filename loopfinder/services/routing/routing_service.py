from abc import ABC, abstractmethod
from typing import List

from loopfinder.models.route import ResolvedPath


class RoutingService(ABC):
    """Routing provider abstract interface"""

    @abstractmethod
    async def get_route(
        self, waypoints: List[List[float]], mode: str, quiet: bool = False
    ) -> ResolvedPath:
        """Resolve a street-following path through the waypoints

        Args:
            waypoints: Ordered [lng, lat] pairs, origin first and last
            mode: Travel mode, e.g. "running" or "cycling"
            quiet: Prefer quiet streets where the mode supports it

        Raises:
            RoutingError: The provider could not resolve the route
        """
        pass
