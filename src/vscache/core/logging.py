"""
Logging setup for vscache.

Every module logs through a child of the ``vscache`` logger obtained with
``get_logger``. ``configure_logging`` attaches a single stdout handler to
that parent, driven either by explicit arguments or by ``Settings``.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vscache.core.config import Settings

LOGGER_NAME = "vscache"

TEXT_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
    '"logger": "%(name)s", "message": "%(message)s"}'
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    settings: Settings | None = None,
    level: int | str | None = None,
    json_format: bool | None = None,
) -> logging.Logger:
    """
    Configure the vscache logger.

    Args:
        settings: Source of ``log_level`` / ``log_json`` when the explicit
            arguments are omitted
        level: Logging level (e.g., logging.INFO, "DEBUG")
        json_format: Emit one JSON object per line

    Returns:
        The configured ``vscache`` logger.
    """
    if level is None:
        level = settings.log_level if settings is not None else logging.INFO
    if json_format is None:
        json_format = settings.log_json if settings is not None else False
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(JSON_FORMAT if json_format else TEXT_FORMAT, datefmt=DATE_FORMAT)
    )
    logger.addHandler(handler)

    # uvicorn installs its own root handlers
    logger.propagate = False
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a child logger of vscache."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}" if name else LOGGER_NAME)
