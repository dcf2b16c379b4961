"""Containment metrics for recorded episodes."""
from __future__ import annotations

import numpy as np

from .bounds import Bounds, CONTAINMENT_TOL

__all__ = [
    "fixation_mask",
    "world_violations",
    "view_violations",
    "saccade_amplitudes",
]


def fixation_mask(episode) -> np.ndarray:
    """Steps on which the eye held still (no saccade executed)."""
    return ~np.any(episode.saccades != 0.0, axis=-1)


def world_violations(episode, bounds: Bounds, tol: float = CONTAINMENT_TOL) -> int:
    """Number of (step, object) positions plus eye positions outside the world."""
    world = bounds.world
    objs = episode.object_positions
    eye = episode.eye_positions
    obj_out = np.any((objs < world.min - tol) | (objs > world.max + tol), axis=-1)
    eye_out = np.any((eye < world.min - tol) | (eye > world.max + tol), axis=-1)
    return int(obj_out.sum() + eye_out.sum())


def view_violations(episode, bounds: Bounds, n_sac_lim: int, tol: float = CONTAINMENT_TOL) -> int:
    """Number of fixation steps where a constraining object left the view.

    Only objects ``0..n_sac_lim-1`` are checked.
    """
    view = bounds.view
    rel = episode.object_view_positions[:, :n_sac_lim]
    out = np.any((rel < view.min - tol) | (rel > view.max + tol), axis=(-1, -2))
    return int((out & fixation_mask(episode)).sum())


def saccade_amplitudes(episode) -> np.ndarray:
    """Euclidean length of each executed saccade."""
    amps = np.linalg.norm(episode.saccades, axis=-1)
    return amps[~fixation_mask(episode)]
