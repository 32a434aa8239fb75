"""loguru sink setup for chipcarve hosts and the CLI."""
from __future__ import annotations

import sys
from typing import Any, Optional

from loguru import logger

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> | {message}"


def configure_logging(level: str = "INFO", sink: Optional[Any] = None, fmt: str = LOG_FORMAT) -> int:
    """Replace loguru's handlers with a single formatted sink (stderr by default)."""
    logger.remove()
    return logger.add(sys.stderr if sink is None else sink, format=fmt, level=level.upper())


__all__ = ["LOG_FORMAT", "configure_logging", "logger"]
