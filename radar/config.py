"""Configuration management for the Radar API."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Events provider
    skiddle_api_key: str = Field(default="", description="Skiddle API key")
    skiddle_base_url: str = Field(
        default="https://www.skiddle.com/api/v1",
        description="Skiddle API base URL",
    )
    demo_mode: bool = Field(
        default=False,
        validation_alias="RADAR_DEMO_MODE",
        description="Serve demo events when no Skiddle key is configured",
    )

    # Geocoding
    nominatim_url: str = Field(
        default="https://nominatim.openstreetmap.org/search",
        description="Nominatim search endpoint",
    )
    geocode_user_agent: str = Field(
        default="UNDER001-RaveFinder/1.0",
        description="User-Agent sent to Nominatim (required by its usage policy)",
    )
    geocode_country_code: str = Field(default="gb", description="ISO country filter")

    # Search behaviour
    user_timezone: str = Field(default="Europe/London", description="Timezone for 'today'")
    search_debounce_seconds: float = Field(default=0.45, description="Search quiescence window")
    geocode_debounce_seconds: float = Field(default=0.8, description="Geocode quiescence window")

    # HTTP caching
    events_cache_max_age: int = Field(default=30, description="Cache lifetime for /api/events")
    geocode_cache_max_age: int = Field(default=86400, description="Cache lifetime for /api/geocode")

    # Server config
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:3001",
        description="Comma-separated CORS origins",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure application logging."""
    if settings is None:
        settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Suppress verbose third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
