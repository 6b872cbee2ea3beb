"""
Configuration helpers for the userhub backend.

Routers and services read settings through ``get_settings()`` instead of
fetching ``os.environ`` directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    token_ttl_seconds: int
    rate_limit_per_minute: int
    rate_limit_window_seconds: int
    log_level: str
    cors_origins: tuple[str, ...]


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _list(value: str | None) -> tuple[str, ...]:
        return tuple(item.strip().rstrip("/") for item in (value or "").split(",") if item.strip())

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./userhub.db"),
        token_ttl_seconds=max(0, _int(os.getenv("TOKEN_TTL_SECONDS", "0"), 0)),
        rate_limit_per_minute=_int(os.getenv("RATE_LIMIT_PER_MINUTE", "100"), 100),
        rate_limit_window_seconds=_int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"), 60),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        cors_origins=_list(os.getenv("CORS_ORIGINS")),
    )
