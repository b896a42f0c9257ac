from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default) or 'sqlite'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/tasks.db'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: root log level name (default: INFO)
    - EXPOSE_ERROR_DETAILS: 'false' to hide internal error text from 500 responses (default: true)
    """

    persistence_backend: str
    sqlite_db_path: str
    cors_allow_origins: List[str]
    log_level: str
    expose_error_details: bool


_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off"})
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env(name: str, default: str) -> str:
    # Unset and empty variables both mean "use the default".
    return (os.getenv(name) or default).strip()


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name, "").lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    return default


def _env_origins(name: str) -> List[str]:
    """'*' (the default) allows every origin; otherwise a comma-separated list."""
    raw = _env(name, "*")
    if raw == "*":
        return ["*"]
    return [origin for origin in (part.strip() for part in raw.split(",")) if origin]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Read Settings from the environment; unknown backend or log level values use the defaults."""
    backend = _env("PERSISTENCE_BACKEND", "memory").lower()
    log_level = _env("LOG_LEVEL", "INFO").upper()

    return Settings(
        persistence_backend=backend if backend in ("memory", "sqlite") else "memory",
        sqlite_db_path=_env("SQLITE_DB_PATH", "./data/tasks.db"),
        cors_allow_origins=_env_origins("CORS_ALLOW_ORIGINS"),
        log_level=log_level if log_level in _LOG_LEVELS else "INFO",
        expose_error_details=_env_flag("EXPOSE_ERROR_DETAILS", True),
    )
