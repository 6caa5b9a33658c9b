"""
Domain models flowing through the loop generation pipeline.
Every record is frozen; each stage returns new collections instead of mutating.
"""
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

METERS_TO_MILES = 0.000621371
METERS_TO_FEET = 3.28084

LatLng = Tuple[float, float]


class Candidate(BaseModel):
    """One (bearing, radius, category) loop request"""

    model_config = ConfigDict(frozen=True)

    bearing: int = Field(ge=0, le=359)
    radius: float = Field(gt=0)  # miles
    category: str


class ResolvedPath(BaseModel):
    """Street-following path returned by the routing provider"""

    model_config = ConfigDict(frozen=True)

    points: Tuple[LatLng, ...]
    distance_meters: float
    elevation_gain_ft: Optional[int] = None
    duration_seconds: float

    @property
    def distance_miles(self) -> float:
        return round(self.distance_meters * METERS_TO_MILES, 2)

    @property
    def duration_minutes(self) -> int:
        return round(self.duration_seconds / 60)


class ScoredRoute(ResolvedPath):
    """Resolved path annotated with overlap, direction and time estimate"""

    overlap_miles: float = Field(ge=0)
    bearing: int
    bearing_label: str
    category: str  # category the candidate was requested as
    estimated_minutes: int


class CandidateError(BaseModel):
    model_config = ConfigDict(frozen=True)

    bearing: int
    category: str
    message: str


class RequestResult(BaseModel):
    """Final per-request selection"""

    model_config = ConfigDict(frozen=True)

    mode: str
    short: Tuple[ScoredRoute, ...] = ()
    medium: Tuple[ScoredRoute, ...] = ()
    long: Tuple[ScoredRoute, ...] = ()
    errors: Tuple[CandidateError, ...] = ()
    total_candidates: int = 0

    def routes_for(self, category: str) -> Tuple[ScoredRoute, ...]:
        return getattr(self, category)
