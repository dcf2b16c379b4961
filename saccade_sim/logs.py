"""Logging setup.

Library modules log through ``loguru.logger`` directly; applications (the CLI,
batch scripts) call `setup_logging` once to choose sinks and level.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

__all__ = ["setup_logging", "logger"]

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function} | {message}"

_CONFIGURED = False


def setup_logging(level: str = "INFO", log_file: Optional[str | Path] = None) -> None:
    """Replace loguru's default sink with stderr (and optionally a file)."""
    global _CONFIGURED
    logger.enable("saccade_sim")
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)
    if log_file is not None:
        logger.add(
            str(log_file),
            level=level,
            format=LOG_FORMAT,
            enqueue=True,  # safe with worker processes
        )
    if not _CONFIGURED:
        logger.debug("Logger initialised (level={})", level)
    _CONFIGURED = True
