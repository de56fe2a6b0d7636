from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    resume_api_base_url: str
    resume_api_timeout_s: float
    resume_gateway: str
    log_level: str
    sentry_dsn: str | None
    rate_limit: str
    rate_limit_enabled: bool
    cors_allowed_origins: tuple[str, ...]
    wizard_session_ttl_minutes: int
    wizard_revalidate_on_submit: bool
    education_min_year: int
    education_year_horizon: int


settings = Settings(
    resume_api_base_url=(_get_env("RESUME_API_BASE_URL", "http://localhost:5000/api") or "").rstrip("/"),
    resume_api_timeout_s=_get_env_float("RESUME_API_TIMEOUT_S", 15.0),
    resume_gateway=(_get_env("RESUME_GATEWAY", "http") or "http").strip().lower(),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
        ],
    ),
    wizard_session_ttl_minutes=_get_env_int("WIZARD_SESSION_TTL_MINUTES", 120),
    wizard_revalidate_on_submit=_get_env_bool("WIZARD_REVALIDATE_ON_SUBMIT", False),
    education_min_year=_get_env_int("EDUCATION_MIN_YEAR", 1990),
    education_year_horizon=_get_env_int("EDUCATION_YEAR_HORIZON", 5),
)

if settings.resume_gateway not in {"http", "memory"}:
    raise RuntimeError("RESUME_GATEWAY must be either 'http' or 'memory'.")
