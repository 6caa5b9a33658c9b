"""
Distance category configuration for loop generation.
Static per-mode tables, validated once at import and exposed read-only.
"""

from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, model_validator


CATEGORY_ORDER: Tuple[str, ...] = ("short", "medium", "long")


class CategoryConfig(BaseModel):
    """Radius/distance window and quota for one (mode, category) pair"""

    model_config = ConfigDict(frozen=True)

    radius_min: float
    radius_max: float
    dist_min: float
    dist_max: float
    max_routes: int
    pace_minutes_per_mile: float

    @model_validator(mode="after")
    def _check_ranges(self) -> "CategoryConfig":
        if not self.radius_min < self.radius_max:
            raise ValueError("radius_min must be less than radius_max")
        if not self.dist_min < self.dist_max:
            raise ValueError("dist_min must be less than dist_max")
        if self.radius_min <= 0:
            raise ValueError("radius_min must be positive")
        if self.max_routes < 1:
            raise ValueError("max_routes must be at least 1")
        if self.pace_minutes_per_mile <= 0:
            raise ValueError("pace_minutes_per_mile must be positive")
        return self

    @property
    def target_distance(self) -> float:
        return (self.dist_min + self.dist_max) / 2

    @property
    def distance_label(self) -> str:
        return f"{self.dist_min:g}–{self.dist_max:g} mi"


class ModeProfile(BaseModel):
    """How a travel mode is requested from the routing provider"""

    model_config = ConfigDict(frozen=True)

    provider_profile: str
    supports_quiet: bool = False
    avoid_features: Tuple[str, ...] = ()


# Mode -> provider profile
RAW_MODE_PROFILES: Dict[str, Dict] = {
    "running": {
        "provider_profile": "foot-walking",
        "supports_quiet": True,
        "avoid_features": ("highways",),
    },
    "cycling": {
        "provider_profile": "cycling-regular",
        "supports_quiet": False,
    },
}

# Mode -> category -> window. Running short/medium target 4-6 and 6-9 mile loops.
RAW_CATEGORY_TABLE: Dict[str, Dict[str, Dict[str, float]]] = {
    "running": {
        "short": {
            "radius_min": 1.0,
            "radius_max": 1.5,
            "dist_min": 4,
            "dist_max": 6,
            "max_routes": 3,
            "pace_minutes_per_mile": 10,
        },
        "medium": {
            "radius_min": 1.5,
            "radius_max": 2.2,
            "dist_min": 6,
            "dist_max": 9,
            "max_routes": 3,
            "pace_minutes_per_mile": 10,
        },
        "long": {
            "radius_min": 2.2,
            "radius_max": 3.2,
            "dist_min": 9,
            "dist_max": 14,
            "max_routes": 3,
            "pace_minutes_per_mile": 10,
        },
    },
    "cycling": {
        "short": {
            "radius_min": 2.5,
            "radius_max": 3.5,
            "dist_min": 10,
            "dist_max": 15,
            "max_routes": 3,
            "pace_minutes_per_mile": 4,
        },
        "medium": {
            "radius_min": 3.5,
            "radius_max": 5.0,
            "dist_min": 15,
            "dist_max": 25,
            "max_routes": 3,
            "pace_minutes_per_mile": 4,
        },
        "long": {
            "radius_min": 5.0,
            "radius_max": 7.5,
            "dist_min": 25,
            "dist_max": 40,
            "max_routes": 3,
            "pace_minutes_per_mile": 4,
        },
    },
}


def load_category_table(
    raw: Mapping[str, Mapping[str, Mapping[str, float]]]
) -> Mapping[Tuple[str, str], CategoryConfig]:
    """Validate a raw mode/category table into an immutable (mode, category) map"""
    table: Dict[Tuple[str, str], CategoryConfig] = {}
    for mode, categories in raw.items():
        for category, values in categories.items():
            if category not in CATEGORY_ORDER:
                raise ValueError(f"Unknown category '{category}' for mode '{mode}'")
            table[(mode, category)] = CategoryConfig(**values)
    return MappingProxyType(table)


def load_mode_profiles(raw: Mapping[str, Mapping]) -> Mapping[str, ModeProfile]:
    return MappingProxyType({mode: ModeProfile(**values) for mode, values in raw.items()})


CATEGORY_TABLE = load_category_table(RAW_CATEGORY_TABLE)
MODE_PROFILES = load_mode_profiles(RAW_MODE_PROFILES)


def get_mode_profile(mode: str) -> ModeProfile:
    try:
        return MODE_PROFILES[mode]
    except KeyError:
        raise ValueError(f"unsupported mode: {mode}") from None


def get_category_config(
    mode: str,
    category: str,
    table: Mapping[Tuple[str, str], CategoryConfig] = CATEGORY_TABLE,
) -> CategoryConfig:
    try:
        return table[(mode, category)]
    except KeyError:
        raise ValueError(f"No category '{category}' configured for mode '{mode}'") from None


def categories_for_mode(
    mode: str, table: Mapping[Tuple[str, str], CategoryConfig] = CATEGORY_TABLE
) -> List[str]:
    """Categories configured for a mode, in canonical short -> long order"""
    return [category for category in CATEGORY_ORDER if (mode, category) in table]
