"""Visualisation helpers (Matplotlib)."""
from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from ..config import SaccadeConfig

__all__ = ["plot_episode"]

DEFAULT_CMAP = plt.get_cmap("tab10")


def plot_episode(episode, cfg: SaccadeConfig, save_path: Path | None = None) -> None:
    """Draw object tracks, the eye track, saccade landings with their view windows, and the world."""

    bounds = cfg.bounds
    world, view = bounds.world, bounds.view

    fig, ax = plt.subplots(figsize=(6, 6))
    ax.add_patch(Rectangle((world.min, world.min), world.span, world.span, fill=False, ls="--", color="grey"))

    for i in range(episode.object_positions.shape[1]):
        xy = episode.object_positions[:, i]
        ax.plot(xy[:, 0], xy[:, 1], ".-", color=DEFAULT_CMAP(i + 1), alpha=0.7, label=f"object {i}")

    eye = episode.eye_positions
    ax.plot(eye[:, 0], eye[:, 1], "-", color=DEFAULT_CMAP(0), alpha=0.5, label="eye")

    # fixation points where a saccade landed, with the view window around each
    landed = eye[episode.new_saccade]
    ax.scatter(landed[:, 0], landed[:, 1], marker="x", color=DEFAULT_CMAP(0), zorder=3, label="saccade")
    for x, y in landed:
        ax.add_patch(
            Rectangle((x + view.min, y + view.min), view.span, view.span, fill=False, color=DEFAULT_CMAP(0), alpha=0.2)
        )
    last = eye[-1]
    ax.add_patch(
        Rectangle((last[0] + view.min, last[1] + view.min), view.span, view.span, fill=False, color=DEFAULT_CMAP(0))
    )

    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.set_title(f"Episode seed={episode.seed} ({len(episode)} steps)")
    ax.set_xlim(-1, 1)
    ax.set_ylim(-1, 1)
    ax.set_aspect("equal")
    ax.legend()
    ax.grid(True, ls=":", lw=0.5)

    if save_path is not None:
        save_path = Path(save_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path.with_suffix(".png"), dpi=300, bbox_inches="tight")
        fig.savefig(save_path.with_suffix(".svg"), bbox_inches="tight")
    else:
        plt.show()

    plt.close(fig)
