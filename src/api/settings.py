"""Runtime configuration read from the environment (.env is loaded by api.main)."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from portfolio.domain import ConfigurationError

STORAGE_BACKENDS = ("redis", "memory")


@dataclass(frozen=True)
class Settings:
    admin_api_keys: tuple[str, ...]
    storage_backend: str = "redis"
    redis_url: str = "redis://localhost:6379/0"
    public_base_url: str | None = None
    log_level: str = "INFO"


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables. Raises ConfigurationError when ADMIN_API_KEY is missing."""
    env = os.environ if environ is None else environ
    admin_key = (env.get("ADMIN_API_KEY") or "").strip()
    if not admin_key:
        raise ConfigurationError("ADMIN_API_KEY must be set")
    secondary = (env.get("ADMIN_API_KEY_SECONDARY") or "").strip()
    keys = (admin_key, secondary) if secondary else (admin_key,)

    backend = (env.get("STORAGE_BACKEND") or "redis").strip().lower()
    if backend not in STORAGE_BACKENDS:
        raise ConfigurationError(
            f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}, got {backend!r}"
        )
    return Settings(
        admin_api_keys=keys,
        storage_backend=backend,
        redis_url=(env.get("REDIS_URL") or "redis://localhost:6379/0").strip(),
        public_base_url=(env.get("PUBLIC_BASE_URL") or "").strip().rstrip("/") or None,
        log_level=(env.get("LOG_LEVEL") or "INFO").strip().upper(),
    )
