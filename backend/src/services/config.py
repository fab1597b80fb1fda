"""Application configuration helpers."""

from __future__ import annotations

from functools import lru_cache
import logging
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_DATA_STORE_PATH = PROJECT_ROOT / "data" / "store"
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:5173"
STORAGE_TYPES = {"memory", "filesystem"}


class AppConfig(BaseModel):
    """Runtime configuration loaded from environment variables."""

    model_config = ConfigDict(frozen=True)

    storage_type: str = Field(
        default="memory",
        description="Backend used for the default session: 'memory' or 'filesystem'",
    )
    data_store_path: Path = Field(
        default=DEFAULT_DATA_STORE_PATH,
        description="Base directory of the filesystem backend",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_origins: List[str] = Field(
        default_factory=lambda: DEFAULT_CORS_ORIGINS.split(","),
        description="Origins allowed to call the HTTP API",
    )

    @field_validator("storage_type", mode="before")
    @classmethod
    def _normalize_storage_type(cls, value: Optional[str]) -> str:
        cleaned = (value or "memory").strip().lower()
        if cleaned not in STORAGE_TYPES:
            raise ValueError(
                f"STORAGE_TYPE must be one of {', '.join(sorted(STORAGE_TYPES))}, got '{value}'"
            )
        return cleaned

    @field_validator("data_store_path", mode="before")
    @classmethod
    def _normalize_store_path(cls, value: str | Path | None) -> Path:
        if value is None or value == "":
            raise ValueError("DATA_STORE_PATH cannot be empty")
        path = value if isinstance(value, Path) else Path(value)
        return path.expanduser().resolve()

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Optional[str]) -> str:
        cleaned = (value or "INFO").strip().upper()
        if not isinstance(logging.getLevelName(cleaned), int):
            raise ValueError(f"Unknown LOG_LEVEL: {value}")
        return cleaned

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: str | List[str] | None) -> List[str]:
        if value is None:
            return DEFAULT_CORS_ORIGINS.split(",")
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return list(value)


def _read_env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(key, default)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Load and cache application configuration."""
    return AppConfig(
        storage_type=_read_env("STORAGE_TYPE", "memory"),
        data_store_path=_read_env("DATA_STORE_PATH", str(DEFAULT_DATA_STORE_PATH)),
        log_level=_read_env("LOG_LEVEL", "INFO"),
        cors_origins=_read_env("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
    )


def reload_config() -> AppConfig:
    """Clear cached config (useful for tests) and reload."""
    get_config.cache_clear()
    return get_config()


__all__ = [
    "AppConfig",
    "get_config",
    "reload_config",
    "PROJECT_ROOT",
    "DEFAULT_DATA_STORE_PATH",
    "STORAGE_TYPES",
]
