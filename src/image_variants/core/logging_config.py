"""Centralized logging configuration for the image variants worker."""

import os
import sys
import logging
from typing import Optional

LOG_FORMATS = {
    "structured": (
        "%(asctime)s | %(name)s | %(levelname)-8s | "
        "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s"
    ),
    "simple": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}


def _resolve_level(level: Optional[str]) -> int:
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    return getattr(logging, name, logging.INFO)


def _build_formatter(format_type: str) -> logging.Formatter:
    env_format = os.getenv("LOG_FORMAT", format_type).lower()
    if env_format == "structured":
        return logging.Formatter(LOG_FORMATS["structured"], datefmt="%Y-%m-%d %H:%M:%S")
    return logging.Formatter(LOG_FORMATS["simple"])


def setup_logger(
    name: str = "image-variants",
    level: Optional[str] = None,
    format_type: str = "structured",
) -> logging.Logger:
    """
    Configure a worker logger writing to stdout.

    Inside Lambda, stdout lines end up in CloudWatch, so the same setup
    serves the handler and the CLI.

    Args:
        name: Logger name (defaults to "image-variants")
        level: Log level override (defaults to env var or INFO)
        format_type: Logging format ("structured" or "simple")

    Returns:
        Configured logger instance

    Environment Variables:
        LOG_LEVEL: Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_FORMAT: Set format type ("structured" or "simple")
    """
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(_build_formatter(format_type))
        logger.addHandler(handler)

    # Lambda attaches its own root handler; keep lines from being emitted twice
    logger.propagate = False
    return logger


def get_logger(name: str = "image-variants") -> logging.Logger:
    """Return the named logger configured like every other worker logger."""
    return setup_logger(name)


def set_debug_logging(name: str = "image-variants") -> None:
    """Switch the named logger and the root logger to DEBUG."""
    logging.getLogger(name).setLevel(logging.DEBUG)
    logging.getLogger().setLevel(logging.DEBUG)


logger = setup_logger()
