"""Parallel episode generation using a multiprocessing pool."""
from __future__ import annotations

import multiprocessing as mp
from typing import Iterable, List

from .config import SaccadeConfig
from .episodes import Episode, record_episode

__all__ = ["run_batch"]


def _worker(args):  # type: ignore
    cfg, n_steps, seed = args
    return record_episode(cfg, n_steps, seed=seed)


def run_batch(cfg: SaccadeConfig, seeds: Iterable[int], n_steps: int, processes: int | None = None) -> List[Episode]:
    """Generate one independent episode per seed in parallel."""

    cfg.validate()
    with mp.Pool(processes=processes) as pool:
        results = pool.map(_worker, [(cfg, n_steps, seed) for seed in seeds])
    return results
