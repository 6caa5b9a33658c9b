"""
Response models for route generation API
Wire format uses camelCase keys for the map client
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Route(CamelModel):
    """Selected loop with geometry and summary stats"""
    coordinates: List[List[float]]  # [lat, lng] pairs
    distance_miles: float
    elevation_gain_ft: Optional[int] = None
    duration_seconds: float
    duration_minutes: int
    estimated_minutes: int
    bearing: int
    bearing_label: str
    overlap_miles: float


class CategoryRoutes(BaseModel):
    short: List[Route] = []
    medium: List[Route] = []
    long: List[Route] = []


class RouteResponse(CamelModel):
    """Route generation response model"""
    routes: CategoryRoutes
    mode: str
    distance_labels: Dict[str, str] = {}
    total_candidates: int = 0
    errors: int = 0


class ErrorResponse(BaseModel):
    error: str
