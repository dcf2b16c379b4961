"""Trajectory sampling: random start positions & bounds-respecting velocities."""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from loguru import logger

from ..config import SaccadeConfig
from .bounds import Range

__all__ = ["Trajectory", "limit_velocity", "sample_trajectory"]


@dataclass
class Trajectory:
    """One freshly sampled trajectory for every object in the scene."""

    positions: np.ndarray  # shape (n_obj, 2)
    velocities: np.ndarray  # shape (n_obj, 2)
    length: int
    # Centroid of the new positions: where the eye should land next.
    target: np.ndarray  # shape (2,)


def limit_velocity(vel: float, start: float, length: int, world: Range) -> float:
    """Shrink `vel` so that ``start + vel * length`` stays inside `world`.

    A non-positive `length` leaves the velocity untouched.
    """
    if length <= 0:
        return vel
    end = start + vel * length
    if end > world.max:
        vel = (world.max - start) / length
    elif end < world.min:
        vel = (world.min - start) / length
    return vel


def sample_trajectory(cfg: SaccadeConfig, world: Range, rng: np.random.Generator) -> Trajectory:
    """Draw a new length, start position and velocity for every object.

    Draw order is fixed per object (zero-velocity coin, x, y, vx, vy) so that
    a seed fully determines the episode.
    """
    length = int(rng.integers(cfg.traj_len_min, cfg.traj_len_max, endpoint=True))
    if length == 0:
        logger.debug("Degenerate trajectory (length 0); velocity limiting skipped")

    n_obj = cfg.n_obj_scene
    positions = np.zeros((n_obj, 2))
    velocities = np.zeros((n_obj, 2))
    for i in range(n_obj):
        zero_vel = rng.random() < cfg.zero_vel_p
        positions[i] = world.min + rng.random(2) * world.span
        if zero_vel:
            continue
        vel = -cfg.vel_gen_max + 2.0 * rng.random(2) * cfg.vel_gen_max
        for axis in range(2):
            velocities[i, axis] = limit_velocity(vel[axis], positions[i, axis], length, world)

    target = positions.mean(axis=0)
    return Trajectory(positions=positions, velocities=velocities, length=length, target=target)
