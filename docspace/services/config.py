"""Application configuration helpers."""

from __future__ import annotations

from functools import lru_cache
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_DATABASE_PATH = PROJECT_ROOT / "data" / "docspace.db"


class AppConfig(BaseModel):
    """Runtime configuration loaded from environment variables."""

    model_config = ConfigDict(frozen=True)

    jwt_secret_key: Optional[str] = Field(
        default=None,
        description="HMAC secret for JWT signing (required for JWT/HTTP auth)",
    )
    enable_local_mode: bool = Field(
        default=True,
        description="Allow local-dev token bypass when running locally",
    )
    local_dev_token: Optional[str] = Field(
        default="local-dev-token",
        description="Static token accepted in local mode for development",
    )
    api_secret: Optional[str] = Field(
        default=None,
        description="Shared secret for the ingestion and keep-alive endpoints",
    )
    database_path: Path = Field(
        default=DEFAULT_DATABASE_PATH, description="SQLite database file"
    )
    admin_email: Optional[str] = Field(
        default=None,
        description="Email of the initial account, always treated as admin",
    )
    shared_ai_user: Optional[str] = Field(
        default=None,
        description="Admin account whose AI settings users without their own may borrow",
    )
    autosave_delay_seconds: float = Field(default=1.5, gt=0)
    search_delay_seconds: float = Field(default=0.3, gt=0)
    batch_result_ttl_seconds: float = Field(default=3.0, ge=0)
    model_timeout_seconds: float = Field(default=60.0, gt=0)

    @field_validator("database_path", mode="before")
    @classmethod
    def _normalize_database_path(cls, value: str | Path | None) -> Path:
        if value is None or value == "":
            return DEFAULT_DATABASE_PATH
        if value == ":memory:":
            raise ValueError("DATABASE_PATH must be a file path")
        return Path(value).expanduser().resolve()

    @field_validator("jwt_secret_key", mode="before")
    @classmethod
    def _ensure_secret(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        cleaned = value.strip()
        if not cleaned:
            raise ValueError(
                "JWT_SECRET_KEY cannot be empty; unset the variable to disable JWT auth in local mode"
            )
        if len(cleaned) < 16:
            raise ValueError("JWT_SECRET_KEY must be at least 16 characters")
        return cleaned

    @field_validator("api_secret", "admin_email", "shared_ai_user", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None


def _read_env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(key, default)


def _read_float(key: str, default: float) -> float:
    raw = _read_env(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be a number, got {raw!r}") from exc


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Load and cache application configuration."""
    enable_local_mode = _read_env("ENABLE_LOCAL_MODE", "true").lower() not in {
        "0",
        "false",
        "no",
    }

    config = AppConfig(
        jwt_secret_key=_read_env("JWT_SECRET_KEY"),
        enable_local_mode=enable_local_mode,
        local_dev_token=_read_env("LOCAL_DEV_TOKEN", "local-dev-token"),
        api_secret=_read_env("API_SECRET"),
        database_path=_read_env("DATABASE_PATH", str(DEFAULT_DATABASE_PATH)),
        admin_email=_read_env("DEFAULT_EMAIL"),
        shared_ai_user=_read_env("SHARED_AI_USER"),
        autosave_delay_seconds=_read_float("AUTOSAVE_DELAY_SECONDS", 1.5),
        search_delay_seconds=_read_float("SEARCH_DELAY_SECONDS", 0.3),
        batch_result_ttl_seconds=_read_float("BATCH_RESULT_TTL_SECONDS", 3.0),
        model_timeout_seconds=_read_float("MODEL_TIMEOUT_SECONDS", 60.0),
    )
    # Ensure the data directory exists for downstream services.
    config.database_path.parent.mkdir(parents=True, exist_ok=True)
    return config


def reload_config() -> AppConfig:
    """Clear cached config (useful for tests) and reload."""
    get_config.cache_clear()
    return get_config()


__all__ = ["AppConfig", "get_config", "reload_config", "PROJECT_ROOT", "DEFAULT_DATABASE_PATH"]
