"""World and view ranges derived from the configured margins."""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

__all__ = ["Range", "Bounds", "compute_bounds"]

# Slack used when checking containment of accumulated float positions.
CONTAINMENT_TOL = 1e-9


@dataclass(frozen=True)
class Range:
    """Closed interval ``[min, max]`` applied to both axes."""

    min: float
    max: float

    @property
    def span(self) -> float:
        return self.max - self.min

    def contains(self, x, tol: float = CONTAINMENT_TOL) -> bool:
        """True if every element of `x` lies inside the range."""
        x = np.asarray(x)
        return bool(np.all((x >= self.min - tol) & (x <= self.max + tol)))

    def clip(self, x):
        return np.clip(x, self.min, self.max)


@dataclass(frozen=True)
class Bounds:
    """Usable world range and the eye-relative view window."""

    world: Range
    view: Range


def compute_bounds(margin: float, view_pct: float) -> Bounds:
    """Return world bounds ``(-1+margin, 1-margin)`` and view bounds ``±(view_pct-margin)``."""
    half_view = view_pct - margin
    return Bounds(
        world=Range(-1.0 + margin, 1.0 - margin),
        view=Range(-half_view, half_view),
    )
