"""Application configuration and settings management."""

from typing import Annotated, Any, Optional

import json
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ROUTES_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = "Itinerary Route Optimizer API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root logging level.")

    geoapify_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("ROUTES_GEOAPIFY_API_KEY", "GEOAPIFY_API_KEY"),
        description="Geoapify API key. Without it, optimize/calculate degrade to a haversine estimate.",
    )
    geoapify_base_url: str = Field(
        default="https://api.geoapify.com/v1",
        description="Base URL for the Geoapify geocoding/routing API.",
    )
    geoapify_timeout_seconds: float = Field(default=15.0, gt=0.0)
    autocomplete_ttl_seconds: float = Field(default=5 * 60, ge=0.0)
    autocomplete_limit: int = Field(default=3, ge=1)
    matrix_ttl_seconds: float = Field(default=10 * 60, ge=0.0)
    max_optimize_activities: int = Field(default=25, ge=2)
    default_travel_mode: str = Field(default="drive")
    fallback_average_speed_mps: float = Field(
        default=16.67,
        gt=0.0,
        description="Assumed average speed (~60 km/h) for the straight-line fallback.",
    )
    frontend_allowed_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("geoapify_api_key", mode="before")
    @classmethod
    def _blank_key_is_none(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
