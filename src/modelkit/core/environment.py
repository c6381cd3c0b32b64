"""
Environment configuration for modelkit.

Settings are read from environment variables at call time, so tests and
tools can change them without reloading modules.

Environment variables:
    MODELKIT_ENV         development (default), test, production
    MODELKIT_LOG_LEVEL   Logging level name (default: DEBUG in development,
                         WARNING otherwise)
    MODELKIT_LOG_FORMAT  console (default) or jsonl

Usage:
    from modelkit.core.environment import get_modelkit_env, get_log_level

    env = get_modelkit_env()  # ModelkitEnv.DEVELOPMENT
"""

from __future__ import annotations

import logging
import os
from enum import StrEnum

logger = logging.getLogger(__name__)


class ModelkitEnv(StrEnum):
    """Runtime environment values."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


class LogFormat(StrEnum):
    """Supported log output formats."""

    CONSOLE = "console"
    JSONL = "jsonl"


MODELKIT_ENV_VAR = "MODELKIT_ENV"
MODELKIT_LOG_LEVEL_VAR = "MODELKIT_LOG_LEVEL"
MODELKIT_LOG_FORMAT_VAR = "MODELKIT_LOG_FORMAT"

_DEFAULT_ENV = ModelkitEnv.DEVELOPMENT


def get_modelkit_env() -> ModelkitEnv:
    """Get the current environment from MODELKIT_ENV.

    Returns:
        ModelkitEnv: The current environment. Defaults to development if
        MODELKIT_ENV is not set or invalid.
    """
    env_value = os.environ.get(MODELKIT_ENV_VAR, "").lower().strip()

    if env_value in ("production", "prod"):
        return ModelkitEnv.PRODUCTION
    elif env_value in ("test", "testing"):
        return ModelkitEnv.TEST
    elif env_value in ("development", "dev", ""):
        return ModelkitEnv.DEVELOPMENT
    else:
        logger.warning(
            "Unknown MODELKIT_ENV value '%s'. "
            "Valid values: development, test, production. Defaulting to development.",
            env_value,
        )
        return _DEFAULT_ENV


def is_production() -> bool:
    """Check if running in production environment."""
    return get_modelkit_env() == ModelkitEnv.PRODUCTION


def get_log_level(override: str | int | None = None) -> int:
    """Resolve the logging level.

    Resolution order:
    1. ``override`` (a level name or number), when given
    2. MODELKIT_LOG_LEVEL
    3. DEBUG in development, WARNING otherwise

    Unknown level names fall back to WARNING.
    """
    if isinstance(override, int):
        return override

    name = (override or os.environ.get(MODELKIT_LOG_LEVEL_VAR, "")).upper().strip()
    if not name:
        return logging.DEBUG if get_modelkit_env() == ModelkitEnv.DEVELOPMENT else logging.WARNING

    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level
    return logging.WARNING


def get_log_format(override: str | None = None) -> LogFormat:
    """Resolve the log format from ``override`` or MODELKIT_LOG_FORMAT."""
    value = (override or os.environ.get(MODELKIT_LOG_FORMAT_VAR, "")).lower().strip()
    if value == LogFormat.JSONL:
        return LogFormat.JSONL
    return LogFormat.CONSOLE


def get_environment_info() -> dict[str, str]:
    """Summary of the resolved configuration, for diagnostics."""
    return {
        "env": get_modelkit_env().value,
        "log_level": logging.getLevelName(get_log_level()),
        "log_format": get_log_format().value,
    }
