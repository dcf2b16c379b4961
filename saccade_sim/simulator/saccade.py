"""Saccade planning and the sequential clipping that keeps objects in view.

Clipping is a greedy per-axis projection, not a joint feasibility solve.
With several constraining objects it runs once per object in index order, so
when their requirements conflict the last object processed wins.
"""
from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
from loguru import logger

from ..config import SaccadeConfig
from ..errors import PlanNotReady
from .bounds import Bounds, Range

__all__ = [
    "limit_saccade",
    "clip_plan",
    "random_plan",
    "SaccadePlanner",
]


def _shift_into_view(dev: float, eye: float, obj: float, view: Range) -> float:
    eye_next = eye + dev
    low = eye_next + view.min
    high = eye_next + view.max
    if obj < low:
        dev += obj - low
    elif obj > high:
        dev += obj - high
    return dev


def _shift_into_world(dev: float, eye: float, world: Range) -> float:
    eye_next = eye + dev
    return dev + float(world.clip(eye_next) - eye_next)


def limit_saccade(dev: float, eye: float, obj_pos: float, obj_vel: float, ticks: int, bounds: Bounds) -> float:
    """Clip one axis of a saccade deviation.

    The object's predicted end-of-fixation position is fitted into the view
    first so it acts as the stronger constraint, then the eye is pulled back
    into the world, then the current object position is fitted, then the
    eye is pulled back into the world once more.  Order matters.
    """
    obj_end = obj_pos + obj_vel * ticks
    dev = _shift_into_view(dev, eye, obj_end, bounds.view)
    dev = _shift_into_world(dev, eye, bounds.world)
    dev = _shift_into_view(dev, eye, obj_pos, bounds.view)
    dev = _shift_into_world(dev, eye, bounds.world)
    return dev


def clip_plan(
    plan: np.ndarray,
    eye: np.ndarray,
    obj_pos: np.ndarray,
    obj_vel: np.ndarray,
    ticks: int,
    n_sac_lim: int,
    bounds: Bounds,
) -> np.ndarray:
    """Apply `limit_saccade` on both axes for objects ``0..n_sac_lim-1``."""
    plan = np.array(plan, dtype=float)
    for i in range(n_sac_lim):
        for axis in range(2):
            plan[axis] = limit_saccade(plan[axis], eye[axis], obj_pos[i, axis], obj_vel[i, axis], ticks, bounds)
    return plan


def random_plan(cfg: SaccadeConfig, rng: np.random.Generator) -> np.ndarray:
    """Draw each axis uniformly in ``[0, sac_gen_max]``.

    The draw is one-sided, so unconstrained random saccades drift towards
    +x/+y until the clipping pulls them back.
    """
    return rng.random(2) * cfg.sac_gen_max


class SaccadePlanner:
    """Chooses the raw saccade plan before clipping.

    In random mode plans are drawn internally.  In external mode the plan
    registered by an agent is consumed exactly once.
    """

    def __init__(self, cfg: SaccadeConfig):
        self.cfg = cfg
        self._registered: Optional[np.ndarray] = None

    @property
    def has_registered_plan(self) -> bool:
        return self._registered is not None

    @property
    def ready(self) -> bool:
        """False if `next_plan` would raise `PlanNotReady`."""
        return self.cfg.random_action or self.cfg.external_fallback or self._registered is not None

    def register(self, plan: np.ndarray) -> None:
        self._registered = np.array(plan, dtype=float)

    def discard(self) -> None:
        if self._registered is not None:
            logger.debug("Registered saccade plan {} discarded by new trajectory", self._registered)
        self._registered = None

    def next_plan(self, rng: np.random.Generator) -> Tuple[np.ndarray, bool]:
        """Return ``(plan, fell_back)`` for the upcoming fixation.

        Raises `PlanNotReady` in external mode when nothing was registered
        and `external_fallback` is disabled.
        """
        if self.cfg.random_action:
            self._registered = None
            return random_plan(self.cfg, rng), False
        if self._registered is None:
            if not self.cfg.external_fallback:
                raise PlanNotReady("no saccade plan registered before the fixation boundary")
            logger.warning("No external saccade plan registered in time; using a random plan")
            return random_plan(self.cfg, rng), True
        plan, self._registered = self._registered, None
        return plan, False
