"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="COURIER_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Courier Stop Sequencing API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for session and export files.")
    osrm_base_url: Optional[str] = Field(
        default="https://router.project-osrm.org",
        description="Base URL for the OSRM routing service (e.g., http://localhost:5000).",
    )
    osrm_profile: Literal["driving", "driving-hgv", "cycling", "foot"] = Field(
        default="driving",
        description="OSRM profile to use when requesting a trip.",
    )
    osrm_timeout_seconds: Optional[float] = Field(
        default=30.0,
        ge=0.0,
        description="Transport timeout for a single trip request. None disables it.",
    )
    match_tolerance_degrees: float = Field(
        default=1e-3,
        gt=0.0,
        description="Maximum lat/lng delta when matching a stop onto the trip geometry.",
    )
    group_by_code: bool = Field(
        default=False,
        description="Cluster stops sharing a postal code after the trip order is recovered.",
    )
    distance_mode: Literal["leg", "haversine"] = Field(
        default="leg",
        description="'leg' applies trip legs by position, 'haversine' recomputes adjacent pair distances.",
    )
    delivered_state_key: str = Field(
        default="deliveredPoints",
        description="Session store key holding the delivered stop positions.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("data_root", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("osrm_base_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.rstrip("/") or None

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
            # Try comma-separated
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            # Single value
            if value.strip():
                return (value.strip(),)
        # Return empty tuple if value is None or empty
        return tuple()


settings = Settings()
