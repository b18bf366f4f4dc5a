"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_ROOT = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="SAFERIDE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "SafeRide Navigator API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Level applied to the 'saferide' logger.")

    routing_api_url: str = Field(
        default="http://127.0.0.1:5000",
        description="Base URL of the routing backend (e.g., http://127.0.0.1:5000).",
    )
    rain_avoiding_endpoint: str = Field(
        default="route",
        description="Backend endpoint that routes around rain cells.",
    )
    direct_endpoint: str = Field(
        default="normal_route",
        description="Backend endpoint that ignores precipitation.",
    )
    request_timeout_seconds: float = Field(default=10.0, gt=0.0)
    connect_timeout_seconds: float = Field(default=5.0, gt=0.0)
    sample_route_file: Path = Field(
        default=PACKAGE_ROOT / "data" / "route_sample.json",
        description="Bundled route returned when the backend cannot be reached.",
    )
    fallback_speed_mps: float = Field(
        default=8.33,
        gt=0.0,
        description="Constant speed (~30 km/h) used to estimate time for synthesized routes.",
    )

    tick_interval_seconds: float = Field(default=1.0, gt=0.0)
    session_ttl_seconds: float = Field(
        default=1800.0,
        gt=0.0,
        description="Navigation sessions untouched for this long are discarded.",
    )
    max_sessions: int = Field(default=100, ge=1, description="Oldest sessions are discarded beyond this count.")
    default_start: tuple[float, float] = Field(
        default=(137.7, 34.7),
        description="(longitude, latitude) used when no start or device position is supplied.",
    )
    default_end: tuple[float, float] = Field(
        default=(137.72, 34.72),
        description="(longitude, latitude) used when a navigation request names no destination.",
    )

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "tauri://localhost",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("sample_route_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
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

    @field_validator("default_start", "default_end", mode="before")
    @classmethod
    def _parse_coordinate_from_env(cls, value: Any) -> Optional[tuple[float, float]]:
        """Parse a "lng,lat" pair from environment variable (comma-separated or JSON array)."""
        if isinstance(value, (tuple, list)):
            return tuple(float(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(float(item) for item in parsed)
            except (json.JSONDecodeError, TypeError, ValueError):
                pass
            parts = [item.strip() for item in value.split(",") if item.strip()]
            return tuple(float(item) for item in parts)
        return value


settings = Settings()
