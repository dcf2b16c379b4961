"""
External saccade agents: registry, abstract base class and a random baseline.

An agent supplies saccade plans when the simulation runs with
``random_action=False``.  Learning agents live outside this package; they only
need to implement `SaccadeAgent.act`.

Usage Example:
--------------

from saccade_sim.agents import SaccadeAgent, register_agent, get_agent

@register_agent
class StayPut(SaccadeAgent):
    def act(self, state):
        return np.zeros(2)

agent = get_agent("StayPut")(cfg)
drive_episode(sim, agent, n_steps=100)
"""
from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

import numpy as np

from .config import SaccadeConfig, make_rng
from .simulator.engine import SaccadeSimulation, SimulationState, StepResult

__all__ = [
    "SaccadeAgent",
    "RandomAgent",
    "register_agent",
    "get_agent",
    "available_agents",
    "drive_episode",
]

# Agent registry: maps agent names to classes
_REGISTRY: Dict[str, Type["SaccadeAgent"]] = {}


class SaccadeAgent(ABC):
    """
    Abstract interface every saccade agent must implement.
    """
    def __init__(self, cfg: SaccadeConfig, rng: Optional[np.random.Generator] = None):
        self.cfg = cfg
        self.rng = rng if rng is not None else make_rng(cfg.seed + 1)

    @abstractmethod
    def act(self, state: SimulationState, /) -> np.ndarray:
        """
        Return the saccade displacement (2-vector, world units) to execute
        at the end of the current fixation.
        """

    @property
    def name(self) -> str:
        """
        Name used in logs (defaults to class name).
        """
        return self.__class__.__name__


# ------------------------------------------------------------------
# Registry helpers
# ------------------------------------------------------------------

def register_agent(cls: Type["SaccadeAgent"]) -> Type["SaccadeAgent"]:
    """
    Class decorator registering an agent under its class name.
    Raises if duplicate or invalid registration is attempted.
    """
    if not inspect.isclass(cls):
        raise TypeError("@register_agent can only decorate classes")
    if not issubclass(cls, SaccadeAgent):
        raise TypeError("Registered class must inherit from SaccadeAgent")

    key = cls.__name__
    if key in _REGISTRY:
        raise KeyError(f"Agent '{key}' is already registered")
    _REGISTRY[key] = cls
    return cls


def get_agent(name: str) -> Type["SaccadeAgent"]:
    """
    Retrieve an agent class by name (case-insensitive) from the registry.
    Raises KeyError if not found.
    """
    for key, cls in _REGISTRY.items():
        if key.lower() == name.lower():
            return cls
    raise KeyError(f"Agent '{name}' not found in registry. Available: {list(_REGISTRY)}")


def available_agents() -> List[str]:
    return list(_REGISTRY)


@register_agent
class RandomAgent(SaccadeAgent):
    """Symmetric random saccades in ``[-sac_gen_max, sac_gen_max]`` per axis."""

    def act(self, state: SimulationState, /) -> np.ndarray:
        return 2.0 * (self.rng.random(2) - 0.5) * self.cfg.sac_gen_max


# ------------------------------------------------------------------
# Driving loop
# ------------------------------------------------------------------

def drive_episode(sim: SaccadeSimulation, agent: SaccadeAgent, n_steps: int) -> List[StepResult]:
    """Step `sim` for `n_steps`, asking `agent` for a plan whenever the window is open."""
    results = []
    for _ in range(n_steps):
        if sim.saccade_window_open():
            sim.set_pending_plan(agent.act(sim.current_state())).raise_for_status()
        results.append(sim.step())
    return results
