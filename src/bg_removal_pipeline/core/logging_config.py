"""Logging setup for the bg_removal_pipeline logger namespace.

Only the package logger owns a handler. Module loggers
(``bg_removal_pipeline.core.services`` and so on) inherit it, so anything
obtained with ``get_logger`` or ``logging.getLogger(__name__)`` inside the
package shares one format and level.

Environment Variables:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL (default INFO)
    LOG_FORMAT: "structured" (default) or "simple"
"""

import os
import sys
import logging
from typing import Optional

PACKAGE_LOGGER_NAME = "bg_removal_pipeline"
HANDLER_NAME = "bg_removal_pipeline.stdout"

LOG_FORMATS = {
    "structured": (
        "%(asctime)s | %(name)s | %(levelname)-8s | "
        "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s",
        "%Y-%m-%d %H:%M:%S",
    ),
    "simple": ("%(asctime)s - %(name)s - %(levelname)s - %(message)s", None),
}


def resolve_level(level: Optional[str] = None) -> int:
    """Map a level name (or LOG_LEVEL) to a logging level, falling back to INFO."""
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def build_formatter(format_type: Optional[str] = None) -> logging.Formatter:
    """Formatter for a format name (or LOG_FORMAT); unknown names get "structured"."""
    name = (format_type or os.getenv("LOG_FORMAT", "structured")).lower()
    fmt, datefmt = LOG_FORMATS.get(name, LOG_FORMATS["structured"])
    return logging.Formatter(fmt, datefmt=datefmt)


def _package_handler(logger: logging.Logger) -> Optional[logging.Handler]:
    for handler in logger.handlers:
        if handler.get_name() == HANDLER_NAME:
            return handler
    return None


def configure_package_logging(
    level: Optional[str] = None, format_type: Optional[str] = None
) -> logging.Logger:
    """
    Attach the stdout handler to the package logger and set its level.

    Safe to call repeatedly: the handler is created once and only its
    formatter and the logger level are refreshed.

    Args:
        level: Level name; LOG_LEVEL when omitted
        format_type: "structured" or "simple"; LOG_FORMAT when omitted

    Returns:
        The package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    logger.setLevel(resolve_level(level))

    handler = _package_handler(logger)
    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(HANDLER_NAME)
        logger.addHandler(handler)
    handler.setFormatter(build_formatter(format_type))

    return logger


def get_logger(name: str = "") -> logging.Logger:
    """
    Return a logger inside the package namespace.

    Short names are nested under the package ("processor" becomes
    "bg_removal_pipeline.processor"). The package logger is configured on
    first use.
    """
    if _package_handler(logging.getLogger(PACKAGE_LOGGER_NAME)) is None:
        configure_package_logging()

    if not name or name == PACKAGE_LOGGER_NAME:
        return logging.getLogger(PACKAGE_LOGGER_NAME)
    if not name.startswith(PACKAGE_LOGGER_NAME + "."):
        name = f"{PACKAGE_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
