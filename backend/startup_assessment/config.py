"""Application settings read from the environment.

``main.py`` calls ``load_dotenv()`` before anything reads these values, so a
local ``.env`` file works the same as exported variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List

_DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",      # Next.js dev server
    "http://127.0.0.1:3000",      # Alternative localhost
    "http://localhost:3001",      # Alternative port
]


def _env_bool(key: str, default: bool) -> bool:
    return os.getenv(key, str(default)).strip().lower() == "true"


def _env_int(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


def _env_list(key: str, default: List[str]) -> List[str]:
    raw = os.getenv(key, "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    app_name: str = "Startup Strategic Assessment"
    version: str = "0.1.0"
    debug: bool = False
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: List[str] = field(default_factory=lambda: list(_DEFAULT_CORS_ORIGINS))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings once per process from environment variables."""
    return Settings(
        app_name=os.getenv("APP_NAME", "Startup Strategic Assessment"),
        debug=_env_bool("DEBUG", False),
        host=os.getenv("HOST", "127.0.0.1"),
        port=_env_int("PORT", 8000),
        cors_origins=_env_list("CORS_ORIGINS", _DEFAULT_CORS_ORIGINS),
    )
