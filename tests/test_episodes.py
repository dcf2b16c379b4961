"""Tests for episode recording, the torch dataset and batch generation."""
import numpy as np
import pytest
import torch

from saccade_sim.agents import RandomAgent
from saccade_sim.config import SaccadeConfig
from saccade_sim.episodes import EpisodeDataset, record_episode
from saccade_sim.parallel import run_batch


def test_record_episode_shapes():
    cfg = SaccadeConfig(n_obj_scene=3, n_obj_sac_lim=1)
    ep = record_episode(cfg, 25, seed=4)
    assert len(ep) == 25
    assert ep.object_positions.shape == (25, 3, 2)
    assert ep.object_view_positions.shape == (25, 3, 2)
    assert ep.eye_positions.shape == (25, 2)
    assert ep.saccades.shape == (25, 2)
    assert ep.new_saccade.dtype == bool
    assert ep.trajectory_ticks.shape == (25,)
    assert ep.new_trajectory[0] and ep.new_saccade[0]
    assert ep.seed == 4


def test_record_episode_is_reproducible():
    cfg = SaccadeConfig(traj_len_min=2, traj_len_max=6)
    a = record_episode(cfg, 30, seed=9)
    b = record_episode(cfg, 30, seed=9)
    for name, arr in a.arrays().items():
        assert np.array_equal(arr, b.arrays()[name]), name


def test_record_episode_with_agent():
    cfg = SaccadeConfig(random_action=False, external_fallback=False)
    ep = record_episode(cfg, 30, seed=1, agent=RandomAgent(cfg))
    assert not ep.plan_fallback.any()


def test_record_episode_rejects_empty():
    with pytest.raises(ValueError):
        record_episode(SaccadeConfig(), 0)


def test_dataset_items():
    cfg = SaccadeConfig(n_obj_scene=2, n_obj_sac_lim=2)
    ds = EpisodeDataset(cfg, n_episodes=4, n_steps=16, base_seed=100)
    assert len(ds) == 4
    item = ds[1]
    assert item["object_positions"].shape == (16, 2, 2)
    assert item["eye_positions"].dtype == torch.float32
    assert torch.equal(item["eye_positions"], ds[1]["eye_positions"])
    assert not torch.equal(item["eye_positions"], ds[2]["eye_positions"])
    with pytest.raises(IndexError):
        ds[4]


def test_dataset_with_dataloader():
    ds = EpisodeDataset(SaccadeConfig(), n_episodes=6, n_steps=8)
    loader = torch.utils.data.DataLoader(ds, batch_size=3)
    batch = next(iter(loader))
    assert batch["object_positions"].shape == (3, 8, 1, 2)


def test_run_batch_matches_sequential():
    cfg = SaccadeConfig(traj_len_min=2, traj_len_max=6)
    episodes = run_batch(cfg, [0, 1, 2], n_steps=20, processes=2)
    assert [ep.seed for ep in episodes] == [0, 1, 2]
    for ep in episodes:
        ref = record_episode(cfg, 20, seed=ep.seed)
        assert np.array_equal(ep.object_positions, ref.object_positions)
        assert np.array_equal(ep.eye_positions, ref.eye_positions)


def test_record_episode_encodings():
    cfg = SaccadeConfig(n_obj_scene=2, n_obj_sac_lim=1)
    ep = record_episode(cfg, 12, seed=3, encode=True)
    enc = ep.encodings
    assert enc["eye_pop"].shape == (12, 21, 21)
    assert enc["plan_pop"].shape == (12, 11, 11)
    assert enc["saccade_pop"].shape == (12, 11, 11)
    assert enc["velocity_pop"].shape == (12, 11, 11)
    assert enc["world_grid"].shape == (12, 24, 24)
    assert enc["view_grid"].shape == (12, 16, 16)
    # every object lies inside the world, so each step marks 1 or 2 cells
    cells = enc["world_grid"].reshape(12, -1).sum(axis=1)
    assert np.all((cells >= 1) & (cells <= 2))
    assert "eye_pop" in ep.arrays()
    assert not record_episode(cfg, 12, seed=3).encodings


def test_dataset_items_with_encodings():
    ds = EpisodeDataset(SaccadeConfig(), n_episodes=2, n_steps=8, encode=True)
    item = ds[0]
    assert item["eye_pop"].shape == (8, 21, 21)
    assert item["view_grid"].dtype == torch.float32
