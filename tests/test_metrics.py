"""Quick sanity tests for episode metrics."""
from types import SimpleNamespace

import numpy as np

from saccade_sim.config import SaccadeConfig
from saccade_sim.episodes import record_episode
from saccade_sim.simulator.bounds import compute_bounds
from saccade_sim.simulator.metrics import (
    fixation_mask,
    saccade_amplitudes,
    view_violations,
    world_violations,
)

BOUNDS = compute_bounds(0.1, 0.5)


def _episode(objs, eye, saccades):
    objs = np.asarray(objs, dtype=float)
    eye = np.asarray(eye, dtype=float)
    return SimpleNamespace(
        object_positions=objs,
        eye_positions=eye,
        object_view_positions=objs - eye[:, None, :],
        saccades=np.asarray(saccades, dtype=float),
    )


def test_counts_world_violations():
    ep = _episode(
        objs=[[[0.0, 0.0]], [[0.95, 0.0]], [[0.0, 0.0]]],
        eye=[[0.0, 0.0], [0.0, 0.0], [0.0, -1.0]],
        saccades=[[0.1, 0.0], [0.0, 0.0], [0.0, 0.0]],
    )
    assert world_violations(ep, BOUNDS) == 2


def test_view_violations_only_during_fixation():
    ep = _episode(
        objs=[[[0.6, 0.0]], [[0.6, 0.0]], [[0.1, 0.0]]],
        eye=[[0.0, 0.0], [0.0, 0.0], [0.0, 0.0]],
        saccades=[[0.2, 0.0], [0.0, 0.0], [0.0, 0.0]],
    )
    assert list(fixation_mask(ep)) == [False, True, True]
    assert view_violations(ep, BOUNDS, n_sac_lim=1) == 1
    assert view_violations(ep, BOUNDS, n_sac_lim=0) == 0


def test_saccade_amplitudes():
    ep = _episode(objs=np.zeros((3, 1, 2)), eye=np.zeros((3, 2)), saccades=[[0.3, 0.4], [0.0, 0.0], [0.0, 0.1]])
    assert np.allclose(saccade_amplitudes(ep), [0.5, 0.1])


def test_recorded_reference_episode_is_clean():
    cfg = SaccadeConfig()
    ep = record_episode(cfg, 200, seed=0)
    assert world_violations(ep, cfg.bounds) == 0
    assert view_violations(ep, cfg.bounds, cfg.n_obj_sac_lim) == 0
