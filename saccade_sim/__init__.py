"""Moving-object & saccade episode generator."""
from __future__ import annotations

from importlib import metadata as _metadata

from loguru import logger as _logger

try:
    __version__: str = _metadata.version("saccade-sim")
except _metadata.PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = ["config", "errors", "simulator", "agents", "SaccadeConfig", "SaccadeSimulation", "configure"]

# Silent as a library; `logs.setup_logging` switches output on.
_logger.disable(__name__)

from .config import SaccadeConfig
from .simulator.engine import SaccadeSimulation, configure
from . import agents
