"""
Service configuration

Reads environment variables once and exposes them as a typed Settings object,
so that routers and the database layer do not call os.getenv directly.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

DEFAULT_DATABASE_URL = "postgresql+psycopg2://backend_user:changeme@db:5432/backend_db"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    database_url: str
    environment: str
    frontend_url: Optional[str]
    log_level: str
    database_echo: bool
    cors_origins: tuple[str, ...] = ()

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def _bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _list(value: Optional[str]) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(item.strip().rstrip("/") for item in value.split(",") if item.strip())


@lru_cache
def get_settings() -> Settings:
    """Build Settings from the current environment (cached, call cache_clear() to re-read)."""
    return Settings(
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL).strip(),
        environment=os.getenv("ENVIRONMENT", "development").strip().lower(),
        frontend_url=os.getenv("FRONTEND_URL") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        database_echo=_bool(os.getenv("DATABASE_ECHO")),
        cors_origins=_list(os.getenv("CORS_ORIGINS")),
    )
