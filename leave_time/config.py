"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

from leave_time.domain.enums import TrafficModel


class Settings(BaseSettings):
    app_name: str = "leave-time"
    debug: bool = False
    log_level: str = "INFO"

    # External services
    google_maps_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("LEAVE_TIME_GOOGLE_MAPS_API_KEY", "GOOGLE_MAPS_API_KEY"),
    )
    google_maps_base_url: str = "https://maps.googleapis.com/maps/api"
    open_meteo_base_url: str = "https://api.open-meteo.com/v1"
    http_timeout_seconds: float = 15.0

    # Buffer policy
    procedural_floor_minutes: int = 30
    default_pickup_minutes: int = 8
    default_parking_minutes: int = 12
    weather_addend_minutes: int = 10

    # Weather thresholds
    precipitation_probability_threshold: float = 60.0
    precipitation_mm_threshold: float = 1.0
    wind_gust_kmh_threshold: float = 40.0

    # Departure search
    search_max_probes: int = 8
    search_step_seconds: int = 60
    search_revalidate: bool = False
    default_traffic_model: TrafficModel = TrafficModel.BEST_GUESS

    model_config = {"env_prefix": "LEAVE_TIME_"}


settings = Settings()
