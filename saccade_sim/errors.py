"""Error types and status values raised or returned by the simulator."""
from __future__ import annotations

from enum import Enum

__all__ = [
    "SaccadeSimError",
    "InvalidConfig",
    "PlanNotReady",
    "PlanWindowMissed",
    "PlanStatus",
]


class SaccadeSimError(Exception):
    """Base class for all simulator errors."""


class InvalidConfig(SaccadeSimError, ValueError):
    """Configuration ranges are malformed; the simulation cannot be built."""


class PlanNotReady(SaccadeSimError):
    """External saccade mode is active but no plan was registered in time."""


class PlanWindowMissed(SaccadeSimError):
    """An external plan was offered outside the registration window."""


class PlanStatus(Enum):
    """Outcome of `SaccadeSimulation.set_pending_plan`."""

    ACCEPTED = "accepted"
    WINDOW_MISSED = "window_missed"

    def raise_for_status(self) -> None:
        """Raise `PlanWindowMissed` for callers that prefer exceptions."""
        if self is PlanStatus.WINDOW_MISSED:
            raise PlanWindowMissed("saccade plan registered outside its window")
