"""
Logging setup for modelkit.

Library modules only call ``logging.getLogger(__name__)``; applications (and
the ``modelkit`` CLI) call ``setup_logging()`` to attach a handler to the
``modelkit`` logger, either:

- console: brief, colored, human-readable lines (respects NO_COLOR)
- jsonl: one JSON object per line, for tooling

Records may carry ``component`` and ``context`` extras; both formatters use
them.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

from modelkit.core.environment import LogFormat, get_log_format, get_log_level

ROOT_LOGGER = "modelkit"

# =============================================================================
# Terminal Colors (respects NO_COLOR)
# =============================================================================

_NO_COLOR = bool(os.environ.get("NO_COLOR")) or not sys.stderr.isatty()


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "" if _NO_COLOR else "\033[0m"
    DIM = "" if _NO_COLOR else "\033[2m"

    DEBUG = "" if _NO_COLOR else "\033[36m"  # Cyan
    INFO = "" if _NO_COLOR else "\033[32m"  # Green
    WARNING = "" if _NO_COLOR else "\033[33m"  # Yellow
    ERROR = "" if _NO_COLOR else "\033[31m"  # Red
    CRITICAL = "" if _NO_COLOR else "\033[35m"  # Magenta

    COMPONENT = "" if _NO_COLOR else "\033[34m"  # Blue


# =============================================================================
# Formatters
# =============================================================================


class JSONLFormatter(logging.Formatter):
    """
    Formats log records as JSON Lines.

    Each entry contains timestamp, level, component, logger and message, plus
    ``context`` and ``exception`` when present.

    Example output:
    {"timestamp":"2024-01-15T10:30:45.123456Z","level":"DEBUG","component":"MODEL","logger":"modelkit.runtime.model","message":"User failed validation on: email","context":{"fields":["email"]}}
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": timestamp.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "component": getattr(record, "component", "MODELKIT"),
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = getattr(record, "context", None)
        if context:
            entry["context"] = context

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
            }

        return json.dumps(entry, default=str, separators=(",", ":"))


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.DEBUG,
        logging.INFO: Colors.INFO,
        logging.WARNING: Colors.WARNING,
        logging.ERROR: Colors.ERROR,
        logging.CRITICAL: Colors.CRITICAL,
    }

    def format(self, record: logging.LogRecord) -> str:
        component = getattr(record, "component", "MODELKIT")
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        if _NO_COLOR:
            prefix = f"[{timestamp}] [{component}]"
        else:
            prefix = f"{Colors.DIM}{timestamp}{Colors.RESET} {Colors.COMPONENT}[{component}]{Colors.RESET}"

        # Level only for non-INFO messages
        if record.levelno != logging.INFO:
            level_name = record.levelname
            if not _NO_COLOR:
                level_name = f"{self.LEVEL_COLORS.get(record.levelno, '')}{level_name}{Colors.RESET}"
            prefix = f"{prefix} {level_name}:"

        message = f"{prefix} {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


# =============================================================================
# Setup
# =============================================================================


def setup_logging(
    level: str | int | None = None,
    fmt: str | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Attach a single handler to the ``modelkit`` logger.

    Calling it again replaces the previous handler.

    Args:
        level: Level name/number (default: MODELKIT_LOG_LEVEL or env default)
        fmt: "console" or "jsonl" (default: MODELKIT_LOG_FORMAT)
        stream: Output stream (default: stderr)

    Returns:
        The configured ``modelkit`` logger
    """
    resolved_level = get_log_level(level)
    formatter: logging.Formatter
    if get_log_format(fmt) == LogFormat.JSONL:
        formatter = JSONLFormatter()
    else:
        formatter = ConsoleFormatter()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)
    handler.setLevel(resolved_level)

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(resolved_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False

    return root_logger


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    context: dict[str, Any] | None = None,
    component: str | None = None,
    **kwargs: Any,
) -> None:
    """
    Log a message with structured context data.

    Args:
        logger: Logger instance
        level: Logging level (logging.INFO, logging.ERROR, etc.)
        message: Human-readable message
        context: Structured context data (included in JSONL output)
        component: Component tag shown by both formatters
        **kwargs: Additional context items
    """
    extra: dict[str, Any] = {}
    if component:
        extra["component"] = component
    merged = {**(context or {}), **kwargs}
    if merged:
        extra["context"] = merged
    logger.log(level, message, extra=extra)
