"""Environment helpers used by the configuration layer."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

_env_loaded = False


def load_env_file(path: str | os.PathLike[str] | None = None) -> bool:
    """Load a .env file once. Existing environment variables win."""
    global _env_loaded
    if _env_loaded:
        return False

    env_file = Path(path) if path else Path.cwd() / ".env"
    _env_loaded = True
    if not env_file.exists():
        return False
    load_dotenv(env_file, override=False)
    logger.debug("Loaded environment from %s", env_file)
    return True


def get_env(name: str, default: str = "") -> str:
    """Return the variable, or ``default`` when it is unset or empty."""
    value = os.getenv(name)
    if value:
        return value
    return default


def get_bool_env(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    logger.warning("Ignoring non-boolean value for %s: %r", name, value)
    return default


def get_list_env(name: str, default: list[str]) -> list[str]:
    """Comma-separated list; blanks are dropped."""
    value = os.getenv(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]
