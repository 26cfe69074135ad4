"""Process-wide logging setup shared by every layer."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from hotel_booking.utils.config import get_settings


PACKAGE_LOGGER_NAME = "hotel_booking"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """Install the stdout handler once and apply the configured level.

    basicConfig is a no-op when uvicorn has already attached root handlers,
    so the level is also set on the package logger directly.
    """
    global _configured
    if _configured:
        return

    resolved_level = (level or get_settings().log_level).upper()
    logging.basicConfig(level=resolved_level, format=LOG_FORMAT, stream=sys.stdout)
    logging.getLogger(PACKAGE_LOGGER_NAME).setLevel(resolved_level)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
