"""Tick counters driving trajectory and fixation rollover."""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Tuple

__all__ = ["TickCounter", "EpisodeClock"]


@dataclass
class TickCounter:
    """Counts ``0..max-1`` and wraps to 0.

    A counter with ``max == 0`` rolls over on every increment.
    """

    tick: int = -1
    max: int = 0

    def would_roll_over(self) -> bool:
        """True if the next `incr` wraps the counter."""
        return self.tick + 1 >= self.max

    def incr(self) -> bool:
        rolled = self.would_roll_over()
        self.tick = 0 if rolled else self.tick + 1
        return rolled


@dataclass
class EpisodeClock:
    """Trajectory and fixation counters plus their planned next extents.

    `next_length` / `next_duration` are sampled one step ahead and copied into
    the counters when they roll over.  Both counters start at ``tick=-1`` and
    ``max=0`` so the first `advance` starts a trajectory and a saccade.
    """

    trajectory: TickCounter = field(default_factory=TickCounter)
    fixation: TickCounter = field(default_factory=TickCounter)
    next_length: int = 0
    next_duration: int = 0

    def advance(self) -> Tuple[bool, bool]:
        """Increment both counters; return ``(trajectory_rolled, fixation_rolled)``."""
        traj_rolled = self.trajectory.incr()
        fix_rolled = self.fixation.incr()
        if traj_rolled:
            self.trajectory.max = self.next_length
        if fix_rolled:
            self.fixation.max = self.next_duration
        return traj_rolled, fix_rolled

    def force_saccade(self) -> None:
        """Make the next `advance` end the current fixation."""
        self.fixation.tick = self.fixation.max - 1

    def plan_due_next(self) -> bool:
        """True if the lookahead after the next `advance` plans a fixation saccade."""
        peek = copy.deepcopy(self)
        peek.advance()
        return not peek.trajectory.would_roll_over() and peek.fixation.would_roll_over()

    def saccade_window_open(self) -> bool:
        """True while an external plan may be registered for the next fixation."""
        return self.fixation.tick + 2 == self.fixation.max
