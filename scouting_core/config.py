from __future__ import annotations
import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


SHARE_EXPIRES_DAYS_DEFAULT: int = 7
SHARE_MAX_VIEWS_DEFAULT: int = 0  # 0 = unlimited
SHARE_BASE_URL: str = "/shared-reports"

AUDIT_EXPORT_ENABLED: bool = True

ALLOWED_ORIGINS: tuple[str, ...] = (
    "http://localhost:3000",
    "http://localhost:3001",
)

LOG_LEVEL: str = "INFO"

DATA_DIR: str = "data"

# env overrides
SHARE_EXPIRES_DAYS_DEFAULT = _env_int("SHARE_EXPIRES_DAYS_DEFAULT", SHARE_EXPIRES_DAYS_DEFAULT)
SHARE_MAX_VIEWS_DEFAULT = _env_int("SHARE_MAX_VIEWS_DEFAULT", SHARE_MAX_VIEWS_DEFAULT)
SHARE_BASE_URL = os.getenv("SHARE_BASE_URL", SHARE_BASE_URL).rstrip("/")
AUDIT_EXPORT_ENABLED = _env_bool("AUDIT_EXPORT_ENABLED", AUDIT_EXPORT_ENABLED)
ALLOWED_ORIGINS = _env_list("ALLOWED_ORIGINS", ALLOWED_ORIGINS)
LOG_LEVEL = os.getenv("LOG_LEVEL", LOG_LEVEL).upper()
DATA_DIR = os.getenv("DATA_DIR", DATA_DIR)
