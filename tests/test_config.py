"""Tests for configuration loading and validation."""
from pathlib import Path

import pytest
import yaml

from saccade_sim.config import SaccadeConfig, make_rng
from saccade_sim.errors import InvalidConfig

CFG_DIR = Path(__file__).resolve().parents[1] / "cfgs"


def test_default_yaml_matches_defaults():
    cfg = SaccadeConfig.from_yaml(CFG_DIR / "default.yaml")
    assert cfg == SaccadeConfig(tag="default")
    assert cfg.validate() is cfg


def test_multi_object_yaml_is_valid():
    cfg = SaccadeConfig.from_yaml(CFG_DIR / "multi_object.yaml").validate()
    assert cfg.n_obj_scene == 3
    assert cfg.n_obj_sac_lim == 1


def test_yaml_round_trip(tmp_path):
    cfg = SaccadeConfig(traj_len_min=3, traj_len_max=9, n_obj_scene=2, n_obj_sac_lim=1, seed=5, tag="rt")
    path = tmp_path / "cfg.yaml"
    cfg.to_yaml(path)
    loaded = SaccadeConfig.from_yaml(path)
    assert loaded == cfg
    assert loaded._yaml_path == path


def test_yaml_strings_are_coerced(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text(yaml.safe_dump({"vel_gen_max": "4e-1", "traj_len_max": "6", "margin": 0}))
    cfg = SaccadeConfig.from_yaml(path)
    assert cfg.vel_gen_max == pytest.approx(0.4)
    assert cfg.traj_len_max == 6
    assert isinstance(cfg.margin, float)


def test_non_numeric_value_rejected():
    with pytest.raises(InvalidConfig):
        SaccadeConfig(margin="wide")


@pytest.mark.parametrize(
    "text",
    [
        "bogus_key: 1\n",
        "- traj_len_min: 4\n- traj_len_max: 4\n",
        "traj_len_min: [4\n",
    ],
)
def test_bad_yaml_file_rejected(tmp_path, text):
    path = tmp_path / "cfg.yaml"
    path.write_text(text)
    with pytest.raises(InvalidConfig):
        SaccadeConfig.from_yaml(path)


def test_bounds_property():
    bounds = SaccadeConfig(margin=0.2, view_pct=0.6).bounds
    assert bounds.world.max == pytest.approx(0.8)
    assert bounds.view.max == pytest.approx(0.4)


def test_invalid_config_is_a_value_error():
    with pytest.raises(ValueError):
        SaccadeConfig(fix_dur_min=3, fix_dur_max=2).validate()


def test_make_rng_is_independent():
    a, b = make_rng(1), make_rng(1)
    assert a.random() == b.random()
    assert a is not b
