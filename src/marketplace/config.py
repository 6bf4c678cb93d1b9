"""Application configuration and settings management."""

from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="MKT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Delivery Marketplace API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root logging level.")
    data_root: Path = Field(default=Path("data"), description="Root directory for seed data and report exports.")
    seed_file: Optional[Path] = Field(
        default=None,
        description="Optional JSON file used to seed the in-memory store when Supabase is not configured.",
    )

    default_estimated_time: str = Field(
        default="30-45 minutes",
        description="Estimated delivery time used when no delivery zone covers the distance.",
    )
    fallback_max_fee: Decimal = Field(
        default=Decimal("1000"),
        ge=0,
        description="Maximum fee of the built-in fee setting used when nothing is configured.",
    )
    default_restaurant_commission: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        le=100,
        description="Platform commission (percent of subtotal) when no restaurant rate is configured.",
    )
    default_driver_commission: Decimal = Field(
        default=Decimal("70"),
        ge=0,
        le=100,
        description="Driver share (percent of delivery fee) when no driver rate is configured.",
    )

    nominatim_base_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        description="Base URL of the Nominatim geocoding service.",
    )
    nominatim_user_agent: str = Field(default="delivery-marketplace/0.1")
    nominatim_language: str = Field(default="ar")
    nominatim_max_retries: int = Field(default=2, ge=0)
    nominatim_backoff_seconds: float = Field(default=0.5, ge=0.0)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:5000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @field_validator("data_root", mode="before")
    @classmethod
    def _expand_data_root(cls, value: Any) -> Path:
        if value is None or value == "":
            value = "data"
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("seed_file", mode="before")
    @classmethod
    def _expand_seed_file(cls, value: Any) -> Optional[Path]:
        if value is None or value == "":
            return None
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
