"""Application configuration and settings management."""

from pathlib import Path
from typing import Annotated, Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ROUTEGRID_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "RouteGrid Distance Matrix API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for persisted state.")
    state_file: Optional[Path] = Field(
        default=None,
        description="JSON file holding persisted points, mode and map view. Defaults to <data_root>/state.json.",
    )
    routing_endpoints: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(
            "https://routing.openstreetmap.de/routed-car/route/v1/driving",
            "https://router.project-osrm.org/route/v1/driving",
        ),
        description="Ordered OSRM-compatible route endpoints, tried until one returns a road route.",
    )
    routing_max_attempts: int = Field(default=2, ge=1)
    routing_rate_limit_backoff_seconds: float = Field(default=1.0, ge=0.0)
    routing_network_retry_seconds: float = Field(default=0.5, ge=0.0)
    routing_timeout_seconds: Optional[float] = Field(
        default=20.0,
        gt=0.0,
        description="Per-request deadline for routing providers. A timeout counts as a network error.",
    )
    geocoder_base_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        description="Base URL of the Nominatim-compatible search service.",
    )
    geocoder_user_agent: str = Field(default="routegrid/0.1 (distance matrix service)")
    geocoder_timeout_seconds: float = Field(default=10.0, gt=0.0)
    default_mode: Literal["one-to-many", "many-to-many"] = "one-to-many"
    log_level: str = Field(default="INFO")
    frontend_allowed_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(
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

    @field_validator("state_file", mode="before")
    @classmethod
    def _expand_optional_path(cls, value: Any) -> Path | None:
        if value is None or value == "":
            return None
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("routing_endpoints", "frontend_allowed_origins", mode="before")
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

    @property
    def resolved_state_file(self) -> Path:
        return self.state_file or (self.data_root / "state.json")


settings = Settings()
