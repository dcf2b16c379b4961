"""Tensor encodings of episode state for network inputs.

Two kinds of encoding are provided:

* `PopCode2D` renders a 2-vector as a Gaussian bump over a grid of units
  whose preferred values span ``[min, max]`` on each axis.
* `occupancy_grid` marks the grid cell of each object with 1.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np
from loguru import logger

__all__ = [
    "PopCode2D",
    "occupancy_grid",
    "EYE_POP",
    "SACCADE_POP",
    "VELOCITY_POP",
    "WORLD_GRID_SHAPE",
    "VIEW_GRID_SHAPE",
]


@dataclass(frozen=True)
class PopCode2D:
    """Gaussian-bump population code over a ``(ny, nx)`` grid.

    Attributes
    ----------
    min, max
        Values represented by the first and last unit on each ``(x, y)`` axis.
    sigma
        Bump width as a fraction of the ``max - min`` range.
    shape
        Grid shape ``(ny, nx)``; rows index y.
    clip
        Clamp encoded values into ``[min, max]`` first.
    """

    min: Tuple[float, float] = (-0.5, -0.5)
    max: Tuple[float, float] = (1.5, 1.5)
    sigma: Tuple[float, float] = (0.2, 0.2)
    shape: Tuple[int, int] = (11, 11)
    clip: bool = True

    def encode(self, values) -> np.ndarray:
        """Encode ``(..., 2)`` values into ``(..., ny, nx)`` activations in ``(0, 1]``."""
        values = np.asarray(values, dtype=float)
        lo = np.asarray(self.min, dtype=float)
        hi = np.asarray(self.max, dtype=float)
        if self.clip:
            values = np.clip(values, lo, hi)
        span = hi - lo
        ny, nx = self.shape
        units_x = lo[0] + span[0] * np.linspace(0.0, 1.0, nx)
        units_y = lo[1] + span[1] * np.linspace(0.0, 1.0, ny)
        sig_x, sig_y = np.asarray(self.sigma, dtype=float) * span

        dx = (units_x - values[..., 0, None]) / sig_x  # (..., nx)
        dy = (units_y - values[..., 1, None]) / sig_y  # (..., ny)
        return np.exp(-(dy[..., :, None] ** 2 + dx[..., None, :] ** 2))


# Eye position covers the whole world, saccades and velocities a smaller range.
EYE_POP = PopCode2D(min=(-1.1, -1.1), max=(1.1, 1.1), sigma=(0.1, 0.1), shape=(21, 21))
SACCADE_POP = PopCode2D(min=(-0.45, -0.45), max=(0.45, 0.45), shape=(11, 11))
VELOCITY_POP = PopCode2D(min=(-0.45, -0.45), max=(0.45, 0.45), shape=(11, 11))

WORLD_GRID_SHAPE = (24, 24)
VIEW_GRID_SHAPE = (16, 16)


def occupancy_grid(positions, lo: float, hi: float, shape: Tuple[int, int]) -> np.ndarray:
    """Mark object cells on a ``(ny, nx)`` grid covering ``[lo, hi)`` on both axes.

    `positions` has shape ``(..., n_obj, 2)``; the result ``(..., ny, nx)``.
    Objects falling outside the grid are skipped.
    """
    positions = np.asarray(positions, dtype=float)
    ny, nx = shape
    grid = np.zeros(positions.shape[:-2] + (ny, nx), dtype=np.float32)

    frac = (positions - lo) / (hi - lo)
    ix = np.floor(frac[..., 0] * nx).astype(int)
    iy = np.floor(frac[..., 1] * ny).astype(int)
    valid = (ix >= 0) & (ix < nx) & (iy >= 0) & (iy < ny)
    if not np.all(valid):
        logger.debug("{} object positions fall outside the {}x{} grid", int(np.sum(~valid)), ny, nx)

    # drop the object axis from the index tuple; objects in one cell overlap
    lead = np.nonzero(valid)[:-1]
    grid[lead + (iy[valid], ix[valid])] = 1.0
    return grid
