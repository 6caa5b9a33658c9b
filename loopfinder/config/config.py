from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # OpenRouteService configuration
    ors_api_key: str = ""
    ors_base_url: str = "https://api.openrouteservice.org/v2/directions"
    request_timeout_seconds: float = 30.0

    # API configuration
    api_version: str = "1.0"
    default_mode: str = "running"

    # API call limits
    max_api_calls_per_day: int = 2000
    provider_delay_seconds: float = 0.2
    request_deadline_seconds: Optional[float] = None

    # Selection tuning
    overlap_penalty_threshold_miles: float = 2.0
    overlap_penalty_value: float = 100.0
    backfill_min_factor: float = 0.6
    backfill_max_factor: float = 1.6
    backfill_exclude_selected: bool = True

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore"
    )


settings = Settings()
