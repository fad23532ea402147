"""Environment-driven settings, read at call time."""

from __future__ import annotations

import logging
import os
import secrets

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "shovel-heroes.db"
DEFAULT_LOOKUP_TIMEOUT = 2.0
DEFAULT_LOOKUP_RETRIES = 1

_fallback_jwt_secret: str | None = None


def db_path() -> str:
    return os.getenv("DB_PATH", DEFAULT_DB_PATH)


def log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def jwt_secret() -> str:
    """Return JWT_SECRET, or a random per-process secret when it is unset.

    Tokens signed with the fallback secret stop validating after a restart,
    so production deployments must set JWT_SECRET.
    """
    global _fallback_jwt_secret
    env_secret = os.getenv("JWT_SECRET", "").strip()
    if env_secret:
        return env_secret
    if _fallback_jwt_secret is None:
        logger.warning(
            "JWT_SECRET is not set; using a random secret. "
            "Issued tokens will be rejected after a restart."
        )
        _fallback_jwt_secret = secrets.token_urlsafe(64)
    return _fallback_jwt_secret


def lookup_timeout_seconds() -> float:
    raw = os.getenv("LOOKUP_TIMEOUT_SECONDS")
    try:
        value = float(raw) if raw is not None else DEFAULT_LOOKUP_TIMEOUT
    except ValueError:
        return DEFAULT_LOOKUP_TIMEOUT
    return value if value > 0 else DEFAULT_LOOKUP_TIMEOUT


def lookup_retries() -> int:
    raw = os.getenv("LOOKUP_RETRIES")
    try:
        value = int(raw) if raw is not None else DEFAULT_LOOKUP_RETRIES
    except ValueError:
        return DEFAULT_LOOKUP_RETRIES
    return max(0, value)


def seed_demo_data_enabled() -> bool:
    return os.getenv("SEED_DEMO_DATA", "").strip().lower() in ("1", "true", "yes")
