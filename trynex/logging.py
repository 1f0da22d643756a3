"""
Logging for the Trynex cart.

Everything logs under the "trynex" package logger, which writes to stderr
until the host application installs its own handlers. Records still
propagate, so an application's root configuration sees them too.

Environment:
    TRYNEX_LOG_LEVEL  level for the package logger (falls back to LOG_LEVEL, then INFO)
    TRYNEX_LOG_FORMAT "plain" drops timestamps, for hosts that add their own

Usage:
    from trynex.logging import get_logger
    logger = get_logger(__name__)
"""

import logging
import os
import sys
from functools import cache

PACKAGE_LOGGER = "trynex"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FORMAT_PLAIN = "[%(levelname)s] %(name)s: %(message)s"


def _get_log_level() -> int:
    level_name = os.environ.get("TRYNEX_LOG_LEVEL") or os.environ.get("LOG_LEVEL") or "INFO"
    return getattr(logging, level_name.upper(), logging.INFO)


def _configure_package_logger() -> None:
    """Give the package logger a stderr handler unless the host already logs somewhere."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(_get_log_level())

    if package_logger.handlers or logging.getLogger().handlers:
        return

    handler = logging.StreamHandler(sys.stderr)
    plain = os.environ.get("TRYNEX_LOG_FORMAT", "").lower() == "plain"
    handler.setFormatter(logging.Formatter(LOG_FORMAT_PLAIN if plain else LOG_FORMAT))
    package_logger.addHandler(handler)


_configure_package_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    """
    Logger for a module. Names outside the package are nested under it.

    Args:
        name: Logger name (typically __name__)
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def _escape_log_injection(value: str) -> str:
    """Escape newlines and control characters so one value stays one log line."""
    return (
        value.replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")
    )


def sanitize_id_for_logging(id_value: str | None) -> str:
    """
    Sanitize an id for logging: escape control characters, keep the first 8 chars.

    Args:
        id_value: Line item id, tracking id, etc. (can be None)

    Returns:
        Sanitized id or "N/A" if empty
    """
    if not id_value:
        return "N/A"
    safe_value = _escape_log_injection(str(id_value))
    return safe_value[:8] if len(safe_value) > 8 else safe_value


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """
    Sanitize shopper-supplied text (product names, file names) for logging.

    Args:
        value: String value to sanitize (can be None)
        max_length: Maximum length to keep (default: 50)

    Returns:
        Sanitized string or "N/A" if empty
    """
    if not value:
        return "N/A"
    safe_value = _escape_log_injection(str(value))
    if len(safe_value) <= max_length:
        return safe_value
    return safe_value[:max_length] + "..."


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_PLAIN",
    "PACKAGE_LOGGER",
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_string_for_logging",
]
