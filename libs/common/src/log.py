"""
Logging setup for applications embedding the indicator engine
"""
import logging
import sys
from typing import Optional

from libs.common.src.config import get_settings


def setup_logging(
    level: Optional[str] = None,
    fmt: Optional[str] = None
) -> None:
    """
    Set up root logging

    Args:
        level: Log level name (defaults to LOG_LEVEL)
        fmt: Log record format (defaults to LOG_FORMAT)
    """
    settings = get_settings().logging
    level = (level or settings.level).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level, logging.INFO))

    # Clear existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(fmt or settings.format))
    root_logger.addHandler(console_handler)
