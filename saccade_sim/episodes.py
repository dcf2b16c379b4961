"""Episode recording and a PyTorch dataset of generated episodes."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Dict, Optional

import numpy as np
import torch
from loguru import logger
from torch.utils.data import Dataset

from .agents import SaccadeAgent
from .config import SaccadeConfig, make_rng
from .simulator.encoding import (
    EYE_POP,
    SACCADE_POP,
    VELOCITY_POP,
    VIEW_GRID_SHAPE,
    WORLD_GRID_SHAPE,
    occupancy_grid,
)
from .simulator.engine import SaccadeSimulation

__all__ = ["Episode", "record_episode", "encode_episode", "EpisodeDataset"]

# Fields of `Episode` that are not per-step arrays.
_META_FIELDS = ("seed", "encodings")


@dataclass
class Episode:
    """Stacked per-step snapshots of one simulated episode (T steps, N objects)."""

    seed: int
    object_positions: np.ndarray  # (T, N, 2)
    object_velocities: np.ndarray  # (T, N, 2)
    object_view_positions: np.ndarray  # (T, N, 2)
    eye_positions: np.ndarray  # (T, 2)
    pending_plans: np.ndarray  # (T, 2)
    saccades: np.ndarray  # (T, 2)
    trajectory_ticks: np.ndarray  # (T,)
    fixation_ticks: np.ndarray  # (T,)
    new_trajectory: np.ndarray  # (T,) bool
    new_saccade: np.ndarray  # (T,) bool
    plan_fallback: np.ndarray  # (T,) bool
    # optional network-input encodings, see `encode_episode`
    encodings: Dict[str, np.ndarray] = field(default_factory=dict)

    def __len__(self) -> int:
        return self.eye_positions.shape[0]

    def arrays(self) -> Dict[str, np.ndarray]:
        out = {f.name: getattr(self, f.name) for f in fields(self) if f.name not in _META_FIELDS}
        out.update(self.encodings)
        return out


def encode_episode(episode: Episode, cfg: SaccadeConfig) -> Dict[str, np.ndarray]:
    """Population codes and occupancy grids for every step of `episode`.

    Keys
    ----
    eye_pop (T, 21, 21)
        Eye position.
    plan_pop, saccade_pop (T, 11, 11)
        Pending saccade plan and executed saccade.
    velocity_pop (T, 11, 11)
        Object velocities, bumps summed over objects.
    world_grid (T, 24, 24)
        Object cells over the full ``-1..1`` world.
    view_grid (T, 16, 16)
        Object cells over the ``±view_pct`` window around the eye.
    """
    return {
        "eye_pop": EYE_POP.encode(episode.eye_positions),
        "plan_pop": SACCADE_POP.encode(episode.pending_plans),
        "saccade_pop": SACCADE_POP.encode(episode.saccades),
        "velocity_pop": VELOCITY_POP.encode(episode.object_velocities).sum(axis=1),
        "world_grid": occupancy_grid(episode.object_positions, -1.0, 1.0, WORLD_GRID_SHAPE),
        "view_grid": occupancy_grid(episode.object_view_positions, -cfg.view_pct, cfg.view_pct, VIEW_GRID_SHAPE),
    }


def record_episode(
    cfg: SaccadeConfig,
    n_steps: int,
    seed: Optional[int] = None,
    agent: Optional[SaccadeAgent] = None,
    encode: bool = False,
) -> Episode:
    """Run one episode for `n_steps` and stack its states.

    `seed` overrides ``cfg.seed``.  With an `agent` the episode should be
    configured with ``random_action=False`` so the agent's plans are used.
    With `encode` the `encode_episode` tensors are attached as ``encodings``.
    """
    if n_steps < 1:
        raise ValueError(f"n_steps must be >= 1, got {n_steps}")
    seed = cfg.seed if seed is None else seed
    if agent is not None and cfg.random_action:
        logger.warning("Agent {} supplied but random_action=True; its plans will be ignored", agent.name)
    sim = SaccadeSimulation(cfg, rng=make_rng(seed))

    rows: Dict[str, list] = {f.name: [] for f in fields(Episode) if f.name not in _META_FIELDS}
    for _ in range(n_steps):
        if agent is not None and sim.saccade_window_open():
            sim.set_pending_plan(agent.act(sim.current_state()))
        result = sim.step()
        state = sim.current_state()
        rows["object_positions"].append(state.object_positions)
        rows["object_velocities"].append(state.object_velocities)
        rows["object_view_positions"].append(state.object_view_positions)
        rows["eye_positions"].append(state.eye_position)
        rows["pending_plans"].append(state.pending_plan)
        rows["saccades"].append(state.executed_saccade)
        rows["trajectory_ticks"].append(state.trajectory_tick)
        rows["fixation_ticks"].append(state.fixation_tick)
        rows["new_trajectory"].append(result.rolled_over_trajectory)
        rows["new_saccade"].append(result.rolled_over_saccade)
        rows["plan_fallback"].append(result.plan_fallback)

    arrays = {name: np.asarray(values) for name, values in rows.items()}
    for name in ("new_trajectory", "new_saccade", "plan_fallback"):
        arrays[name] = arrays[name].astype(bool)
    episode = Episode(seed=seed, **arrays)
    if encode:
        episode.encodings = encode_episode(episode, cfg)
    return episode


class EpisodeDataset(Dataset):
    """PyTorch Dataset generating episode ``i`` from seed ``base_seed + i`` on demand.

    Args:
        cfg (SaccadeConfig): episode configuration
        n_episodes (int): dataset length
        n_steps (int): steps per episode
        base_seed (int): seed of episode 0 (defaults to ``cfg.seed``)
        encode (bool): add population-code and grid tensors to each item

    Example:
        >>> dataset = EpisodeDataset(SaccadeConfig(), n_episodes=100, n_steps=32)
        >>> item = dataset[0]  # dict of float32 tensors, e.g. item["eye_positions"].shape == (32, 2)
    """
    def __init__(
        self,
        cfg: SaccadeConfig,
        n_episodes: int,
        n_steps: int,
        base_seed: Optional[int] = None,
        encode: bool = False,
    ):
        self.cfg = cfg.validate()
        self.n_episodes = n_episodes
        self.n_steps = n_steps
        self.base_seed = cfg.seed if base_seed is None else base_seed
        self.encode = encode
    def __len__(self):
        return self.n_episodes
    def __getitem__(self, idx):
        if not 0 <= idx < self.n_episodes:
            raise IndexError(idx)
        episode = record_episode(self.cfg, self.n_steps, seed=self.base_seed + idx, encode=self.encode)
        return {name: torch.from_numpy(np.asarray(arr)).float() for name, arr in episode.arrays().items()}
