"""
Environment variable loading for EigenTrust Lab.

- Loads .env from the project root when available.
- Typed readers for EIGENTRUST_* variables; malformed values raise ValidationError.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from eigentrust_lab.core.exceptions import ValidationError

# Project root: config is eigentrust_lab/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

ENV_PREFIX = "EIGENTRUST_"


def load_lab_env() -> None:
    """Load .env from project root. Safe to call multiple times; real env vars win."""
    if _ENV_PATH.is_file():
        load_dotenv(_ENV_PATH, override=False)


def _raw(name: str) -> str | None:
    value = os.getenv(ENV_PREFIX + name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def env_str(name: str, default: str) -> str:
    return _raw(name) or default


def env_float(name: str, default: float) -> float:
    raw = _raw(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValidationError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from None


def env_int(name: str, default: int) -> int:
    raw = _raw(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None
