"""Command‐line interface entry‐point.

Usage examples
--------------
Run single episode:
    python -m saccade_sim.cli run --config cfgs/default.yaml --steps 40

Drive saccades from the random agent and save a plot:
    python -m saccade_sim.cli run --config cfgs/default.yaml --agent RandomAgent --plot figs/episode

Batch (sweep seeds 0..9):
    python -m saccade_sim.cli batch --config cfgs/default.yaml --seeds 0 9
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List

import numpy as np
from loguru import logger

from .agents import available_agents, get_agent
from .config import SaccadeConfig
from .episodes import record_episode
from .errors import SaccadeSimError
from .logs import setup_logging
from .parallel import run_batch
from .simulator.metrics import saccade_amplitudes, view_violations, world_violations


def _parse_args(argv: List[str] | None = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="saccade-sim", description="Moving-object & saccade episode generator")
    parser.add_argument("--log_level", default="INFO", help="Log level (DEBUG shows every step)")
    parser.add_argument("--log_file", type=Path, default=None, help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # ------------------------------------------------------------------
    # run
    # ------------------------------------------------------------------
    p_run = subparsers.add_parser("run", help="Run a single episode")
    p_run.add_argument("--config", required=True, type=Path, help="YAML config file")
    p_run.add_argument("--steps", type=int, default=40, help="Number of steps")
    p_run.add_argument("--seed", type=int, default=None, help="Override the config seed")
    p_run.add_argument(
        "--agent",
        default=None,
        choices=available_agents(),
        help="Supply saccade plans from a registered agent (switches off random_action)",
    )
    p_run.add_argument("--plot", type=Path, default=None, help="Save an episode plot (png+svg) to this path")

    # ------------------------------------------------------------------
    # batch
    # ------------------------------------------------------------------
    p_batch = subparsers.add_parser("batch", help="Run multiple seeds in parallel")
    p_batch.add_argument("--config", required=True, type=Path, help="YAML config file")
    p_batch.add_argument(
        "--seeds",
        nargs=2,
        type=int,
        metavar=("START", "END"),
        help="Inclusive range of seeds to iterate (START END)",
        required=True,
    )
    p_batch.add_argument("--steps", type=int, default=40, help="Steps per episode")
    p_batch.add_argument("--processes", type=int, default=None, help="Number of worker processes")
    return parser


def _summarise(episode, cfg: SaccadeConfig) -> str:
    bounds = cfg.bounds
    amps = saccade_amplitudes(episode)
    mean_amp = float(np.mean(amps)) if amps.size else 0.0
    return (
        f"seed={episode.seed:<6} steps={len(episode):<5} "
        f"trajectories={int(episode.new_trajectory.sum()):<4} saccades={int(episode.new_saccade.sum()):<4} "
        f"mean_amp={mean_amp:.3f} world_viol={world_violations(episode, bounds)} "
        f"view_viol={view_violations(episode, bounds, cfg.n_obj_sac_lim)}"
    )


def main(argv: List[str] | None = None) -> None:  # noqa: D401
    """Main entry point for the command-line interface."""
    parser = _parse_args(argv)
    args = parser.parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    try:
        cfg = SaccadeConfig.from_yaml(args.config).validate()
    except (OSError, SaccadeSimError) as exc:
        logger.error("Could not load config {}: {}", args.config, exc)
        sys.exit(1)
    logger.info("Loaded {}", cfg)

    if args.cmd == "run":
        agent = None
        if args.agent is not None:
            cfg.random_action = False
            agent = get_agent(args.agent)(cfg)
        episode = record_episode(cfg, args.steps, seed=args.seed, agent=agent)
        for t in range(len(episode)):
            logger.debug(
                "t={:<4} tick={} sac_tick={} eye={} saccade={} objects={}",
                t,
                episode.trajectory_ticks[t],
                episode.fixation_ticks[t],
                np.round(episode.eye_positions[t], 3).tolist(),
                np.round(episode.saccades[t], 3).tolist(),
                np.round(episode.object_positions[t], 3).tolist(),
            )
        print(_summarise(episode, cfg))
        if args.plot is not None:
            from .simulator.visualize import plot_episode

            plot_episode(episode, cfg, save_path=args.plot)
            logger.info("Episode plot saved to {}", args.plot)

    elif args.cmd == "batch":
        start_seed, end_seed = args.seeds
        episodes = run_batch(cfg, range(start_seed, end_seed + 1), args.steps, processes=args.processes)
        for episode in episodes:
            print(_summarise(episode, cfg))


if __name__ == "__main__":
    main()
