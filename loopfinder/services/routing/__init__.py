# Routing provider package
from .api_counter import APICounter
from .errors import ProviderConfigurationError, RoutingError
from .openroute_service import OpenRouteService, decode_geometry
from .routing_service import RoutingService

__all__ = [
    "APICounter",
    "OpenRouteService",
    "ProviderConfigurationError",
    "RoutingError",
    "RoutingService",
    "decode_geometry",
]
