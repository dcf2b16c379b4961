"""Smoke tests for the command-line interface."""
from pathlib import Path

import pytest
from loguru import logger

from saccade_sim.cli import main

CFG = Path(__file__).resolve().parents[1] / "cfgs" / "default.yaml"


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logger.remove()
    logger.disable("saccade_sim")


def test_run_prints_summary(capsys):
    main(["--log_level", "WARNING", "run", "--config", str(CFG), "--steps", "12", "--seed", "3"])
    out = capsys.readouterr().out
    assert "seed=3" in out
    assert "world_viol=0" in out
    assert "view_viol=0" in out


def test_run_with_agent(capsys):
    main(["--log_level", "WARNING", "run", "--config", str(CFG), "--steps", "12", "--agent", "RandomAgent"])
    assert "world_viol=0" in capsys.readouterr().out


def test_missing_config_exits(tmp_path):
    with pytest.raises(SystemExit):
        main(["--log_level", "ERROR", "run", "--config", str(tmp_path / "nope.yaml")])


def test_unknown_config_key_exits(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("bogus_key: 1\n")
    with pytest.raises(SystemExit) as exc_info:
        main(["--log_level", "ERROR", "run", "--config", str(path)])
    assert exc_info.value.code == 1
