"""Step engine: advances one episode by one tick at a time."""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Optional

import numpy as np
from loguru import logger

from ..config import SaccadeConfig, make_rng
from ..errors import PlanNotReady, PlanStatus
from .bounds import Bounds
from .clock import EpisodeClock
from .saccade import SaccadePlanner, clip_plan
from .trajectory import sample_trajectory

__all__ = ["StepResult", "SimulationState", "SaccadeSimulation", "configure"]


@dataclass(frozen=True)
class StepResult:
    """Container returned by `SaccadeSimulation.step`."""

    rolled_over_trajectory: bool
    rolled_over_saccade: bool
    # True if external mode had no registered plan and a random one was used.
    plan_fallback: bool = False


@dataclass(frozen=True)
class SimulationState:
    """Read-only snapshot for renderers, loggers and agents."""

    object_positions: np.ndarray  # shape (n_obj, 2)
    object_velocities: np.ndarray  # shape (n_obj, 2)
    object_view_positions: np.ndarray  # shape (n_obj, 2)
    eye_position: np.ndarray  # shape (2,)
    pending_plan: np.ndarray  # shape (2,)
    executed_saccade: np.ndarray  # shape (2,)
    trajectory_tick: int
    fixation_tick: int
    trajectory_length: int
    fixation_duration: int
    step_index: int

    def to_dict(self) -> dict:
        """Plain-python representation (lists instead of arrays)."""
        return {k: v.tolist() if isinstance(v, np.ndarray) else v for k, v in asdict(self).items()}


class SaccadeSimulation:
    """One episode of moving objects and a saccading eye.

    All randomness comes from the injected generator, so a seed fully
    determines the episode.  State is private and changes only through
    `step` and `set_pending_plan`.
    """

    def __init__(self, cfg: SaccadeConfig, rng: Optional[np.random.Generator] = None):
        self._cfg = cfg.validate()
        self._bounds = cfg.bounds
        self._rng = rng if rng is not None else make_rng(cfg.seed)
        self._planner = SaccadePlanner(cfg)
        self._clock = EpisodeClock()

        n_obj = cfg.n_obj_scene
        self._pos = np.zeros((n_obj, 2))
        self._vel = np.zeros((n_obj, 2))
        self._pos_next = np.zeros((n_obj, 2))
        self._vel_next = np.zeros((n_obj, 2))
        self._view_pos = np.zeros((n_obj, 2))
        self._eye = np.zeros(2)
        self._plan = np.zeros(2)
        self._saccade = np.zeros(2)
        self._step_index = -1

        # start with a trajectory ready
        self._next_trajectory()
        logger.debug("Simulation configured: {}", cfg)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def config(self) -> SaccadeConfig:
        return self._cfg

    @property
    def bounds(self) -> Bounds:
        return self._bounds

    def saccade_window_open(self) -> bool:
        """True if `set_pending_plan` would be accepted right now."""
        return self._clock.saccade_window_open()

    # ------------------------------------------------------------------
    # Planning (one step ahead)
    # ------------------------------------------------------------------
    def _draw_duration(self) -> int:
        cfg = self._cfg
        return int(self._rng.integers(cfg.fix_dur_min, cfg.fix_dur_max, endpoint=True))

    def _next_trajectory(self) -> None:
        traj = sample_trajectory(self._cfg, self._bounds.world, self._rng)
        self._pos_next = traj.positions
        self._vel_next = traj.velocities
        self._clock.next_length = traj.length

        # saccade to the centroid of the new objects, keeping the constrained ones in view
        duration = self._draw_duration()
        self._clock.next_duration = duration
        self._plan = clip_plan(
            traj.target - self._eye,
            self._eye,
            traj.positions,
            traj.velocities,
            duration,
            self._cfg.n_obj_sac_lim,
            self._bounds,
        )
        self._planner.discard()
        self._clock.force_saccade()
        logger.debug("New trajectory: length={}, saccade plan={}", traj.length, self._plan)

    def _next_saccade(self) -> bool:
        duration = self._draw_duration()
        self._clock.next_duration = duration
        plan, fell_back = self._planner.next_plan(self._rng)
        self._plan = clip_plan(
            plan,
            self._eye,
            self._pos_next,
            self._vel_next,
            duration,
            self._cfg.n_obj_sac_lim,
            self._bounds,
        )
        logger.debug("Saccade planned: raw={}, clipped={}, fixation={}", plan, self._plan, duration)
        return fell_back

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def step(self) -> StepResult:
        """Advance the episode by one tick.

        Raises `PlanNotReady` (external mode without fallback) when this step
        must plan the next saccade and no plan was registered.  Nothing has
        changed when it raises, so the caller may register a plan and retry.
        """
        if not self._planner.ready and self._clock.plan_due_next():
            raise PlanNotReady(
                f"no saccade plan registered for the fixation ending at tick {self._clock.fixation.tick + 1}"
            )
        self._step_index += 1
        new_traj, new_sac = self._clock.advance()

        if new_traj:
            self._vel = self._vel_next.copy()

        if new_sac:
            # move the eyes according to plan
            self._eye = self._eye + self._plan
            self._saccade = self._plan
            self._plan = np.zeros(2)
        else:
            self._saccade = np.zeros(2)

        # next state was computed last step
        self._pos = self._pos_next.copy()
        self._view_pos = self._pos - self._eye

        fell_back = False
        if self._clock.trajectory.would_roll_over():
            self._next_trajectory()
        else:
            self._pos_next = self._pos + self._vel
            if self._clock.fixation.would_roll_over():
                fell_back = self._next_saccade()

        return StepResult(rolled_over_trajectory=new_traj, rolled_over_saccade=new_sac, plan_fallback=fell_back)

    def current_state(self) -> SimulationState:
        return SimulationState(
            object_positions=self._pos.copy(),
            object_velocities=self._vel.copy(),
            object_view_positions=self._view_pos.copy(),
            eye_position=self._eye.copy(),
            pending_plan=self._plan.copy(),
            executed_saccade=self._saccade.copy(),
            trajectory_tick=self._clock.trajectory.tick,
            fixation_tick=self._clock.fixation.tick,
            trajectory_length=self._clock.trajectory.max,
            fixation_duration=self._clock.fixation.max,
            step_index=self._step_index,
        )

    def set_pending_plan(self, plan) -> PlanStatus:
        """Register an externally computed saccade for the coming fixation.

        Accepted only with exactly two ticks left in the current fixation;
        otherwise nothing changes and `PlanStatus.WINDOW_MISSED` is returned.
        """
        plan = np.asarray(plan, dtype=float)
        if plan.shape != (2,) or not np.all(np.isfinite(plan)):
            raise ValueError(f"saccade plan must be a finite 2-vector, got {plan!r}")
        if not self._clock.saccade_window_open():
            logger.warning(
                "Saccade plan {} missed its window (fixation tick {} of {})",
                plan,
                self._clock.fixation.tick,
                self._clock.fixation.max,
            )
            return PlanStatus.WINDOW_MISSED
        self._planner.register(plan)
        return PlanStatus.ACCEPTED


def configure(cfg: SaccadeConfig, rng: Optional[np.random.Generator] = None) -> SaccadeSimulation:
    """Validate `cfg` and build a simulation (raises `InvalidConfig`)."""
    return SaccadeSimulation(cfg, rng=rng)
