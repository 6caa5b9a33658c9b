from .config import Settings, settings
from .categories import (
    CATEGORY_ORDER,
    CATEGORY_TABLE,
    MODE_PROFILES,
    CategoryConfig,
    ModeProfile,
    categories_for_mode,
    get_category_config,
    get_mode_profile,
)

__all__ = [
    "Settings",
    "settings",
    "CATEGORY_ORDER",
    "CATEGORY_TABLE",
    "MODE_PROFILES",
    "CategoryConfig",
    "ModeProfile",
    "categories_for_mode",
    "get_category_config",
    "get_mode_profile",
]
