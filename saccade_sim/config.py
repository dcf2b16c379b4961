"""Episode configuration.

All tunables of the saccade generator live here so that every component can
access them in a single import.  Config objects can be created either
programmatically or loaded from YAML files to facilitate batch generation.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Optional

import numpy as np
import yaml

from .errors import InvalidConfig
from .simulator.bounds import Bounds, compute_bounds

__all__ = [
    "SaccadeConfig",
    "make_rng",
]

DEFAULT_YAML_INDENT = 2

_INT_FIELDS = (
    "traj_len_min",
    "traj_len_max",
    "fix_dur_min",
    "fix_dur_max",
    "n_obj_scene",
    "n_obj_sac_lim",
    "seed",
)
_FLOAT_FIELDS = ("sac_gen_max", "vel_gen_max", "zero_vel_p", "margin", "view_pct")


@dataclass
class SaccadeConfig:
    """Container for all episode hyperparameters.

    World coordinates are normalised to ``-1..1`` on both axes.

    Attributes
    ----------
    traj_len_min, traj_len_max
        Inclusive range of trajectory lengths (ticks).
    fix_dur_min, fix_dur_max
        Inclusive range of fixation durations (ticks).
    random_action
        Generate saccade plans internally; if False, plans are expected from
        an external agent through `SaccadeSimulation.set_pending_plan`.
    external_fallback
        In external mode, draw a random plan when none was registered in
        time instead of raising `PlanNotReady`.
    sac_gen_max
        Maximum per-axis saccade magnitude.
    vel_gen_max
        Maximum per-axis object velocity (world units per tick).
    zero_vel_p
        Probability that an object is stationary for a whole trajectory.
    margin
        Edge around the world (and inside the view) that is never used.
    view_pct
        Half-size of the view window as a fraction of the world half-size.
    n_obj_scene
        Number of objects simultaneously in the scene.
    n_obj_sac_lim
        Number of objects (from index 0) whose visibility limits saccades.
        Limiting with all objects can be overly restrictive.
    seed
        Seed of the episode random generator.
    """

    traj_len_min: int = 4
    traj_len_max: int = 4
    fix_dur_min: int = 2
    fix_dur_max: int = 2
    random_action: bool = True
    external_fallback: bool = True
    sac_gen_max: float = 0.4
    vel_gen_max: float = 0.4
    zero_vel_p: float = 0.0
    margin: float = 0.1
    view_pct: float = 0.5
    n_obj_scene: int = 1
    n_obj_sac_lim: int = 1
    seed: int = 0

    # Free-form field to store arbitrary user metadata (e.g., dataset name).
    tag: str = field(default="", metadata={"yaml_field": True})

    # Automatically filled, not expected to be loaded from file.
    _yaml_path: Optional[Path] = field(default=None, repr=False, compare=False)

    # ---------------------------------------------------------------------
    # YAML helpers
    # ---------------------------------------------------------------------
    @classmethod
    def from_yaml(cls, path: os.PathLike | str) -> "SaccadeConfig":
        """Load a configuration from a YAML file."""
        with open(path, "r", encoding="utf-8") as fh:
            try:
                data = yaml.safe_load(fh) or {}
            except yaml.YAMLError as exc:
                raise InvalidConfig(f"{path}: malformed YAML ({exc})") from exc
        if not isinstance(data, dict):
            raise InvalidConfig(f"{path}: expected a mapping of config keys, got {type(data).__name__}")
        known = {f.name for f in fields(cls) if not f.name.startswith("_")}
        unknown = sorted(str(k) for k in data if k not in known)
        if unknown:
            raise InvalidConfig(f"{path}: unknown config keys {unknown}")
        cfg = cls(**data)
        cfg._yaml_path = Path(path)
        return cfg

    def to_yaml(self, path: os.PathLike | str) -> None:
        """Save the config to YAML."""
        data = asdict(self)
        data.pop("_yaml_path", None)
        with open(path, "w", encoding="utf-8") as fh:
            yaml.safe_dump(data, fh, indent=DEFAULT_YAML_INDENT, sort_keys=False)

    # ------------------------------------------------------------------
    # Validation & derived values
    # ------------------------------------------------------------------
    def validate(self) -> "SaccadeConfig":
        """Check ranges, raising `InvalidConfig` on the first problem found."""
        if self.traj_len_min < 0 or self.fix_dur_min < 0:
            raise InvalidConfig("trajectory length and fixation duration minimums must be >= 0")
        if self.traj_len_min > self.traj_len_max:
            raise InvalidConfig(f"traj_len_min ({self.traj_len_min}) > traj_len_max ({self.traj_len_max})")
        if self.fix_dur_min > self.fix_dur_max:
            raise InvalidConfig(f"fix_dur_min ({self.fix_dur_min}) > fix_dur_max ({self.fix_dur_max})")
        if not self.margin < 1:
            raise InvalidConfig(f"margin must be < 1, got {self.margin}")
        if not self.view_pct - self.margin > 0:
            raise InvalidConfig(f"view_pct - margin must be > 0, got {self.view_pct - self.margin}")
        if self.sac_gen_max < 0 or self.vel_gen_max < 0:
            raise InvalidConfig("sac_gen_max and vel_gen_max must be >= 0")
        if not 0.0 <= self.zero_vel_p <= 1.0:
            raise InvalidConfig(f"zero_vel_p must lie in [0, 1], got {self.zero_vel_p}")
        if self.n_obj_scene < 1:
            raise InvalidConfig(f"n_obj_scene must be >= 1, got {self.n_obj_scene}")
        if not 0 <= self.n_obj_sac_lim <= self.n_obj_scene:
            raise InvalidConfig(
                f"n_obj_sac_lim must lie in [0, n_obj_scene={self.n_obj_scene}], got {self.n_obj_sac_lim}"
            )
        return self

    @property
    def bounds(self) -> Bounds:
        return compute_bounds(self.margin, self.view_pct)

    # Convenience str representation for logging
    def __str__(self) -> str:  # noqa: DunderStr
        return (
            f"SaccadeConfig(n_obj_scene={self.n_obj_scene}, traj_len={self.traj_len_min}..{self.traj_len_max}, "
            f"fix_dur={self.fix_dur_min}..{self.fix_dur_max}, seed={self.seed})"
        )

    def __post_init__(self):
        # YAML may hand back numbers as strings (e.g. '4e-1')
        for name in _INT_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                try:
                    setattr(self, name, int(value))
                except (TypeError, ValueError) as exc:
                    raise InvalidConfig(f"{name} must be an integer, got {value!r}") from exc
        for name in _FLOAT_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, float):
                try:
                    setattr(self, name, float(value))
                except (TypeError, ValueError) as exc:
                    raise InvalidConfig(f"{name} must be a number, got {value!r}") from exc


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Return an independent generator; episodes never touch global RNG state."""
    return np.random.default_rng(seed)
