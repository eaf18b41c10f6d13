"""Simulation context: the explicit owner of all mutable simulation state.

Step functions, the gesture controller and the tick scheduler all receive a
:class:`SimulationContext` instead of reaching for globals.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

import numpy as np

from .config import DEFAULT_CONFIG, SimulationConfig
from ..simulation.graph import Graph


class SimMode(str, enum.Enum):
    """Which propagation model is active."""

    SIGNAL = "signal"
    HEAT = "heat"


class RunMode(str, enum.Enum):
    """Whether pointer input edits topology or stimulates the simulation."""

    EDITING = "editing"
    PLAYING = "playing"


@dataclass
class SimulationContext:
    """Graph plus run mode, simulation mode and time for one editing session."""

    graph: Graph
    config: SimulationConfig = DEFAULT_CONFIG
    sim_mode: SimMode = SimMode.SIGNAL
    run_mode: RunMode = RunMode.EDITING
    # Wall-clock milliseconds of the latest frame; written by the scheduler only.
    time: float = 0.0
    tick_count: int = 0

    @property
    def playing(self) -> bool:
        return self.run_mode is RunMode.PLAYING

    @classmethod
    def create(
        cls,
        config: SimulationConfig = DEFAULT_CONFIG,
        rng: np.random.Generator | None = None,
    ) -> SimulationContext:
        """Build a context around a fresh, empty graph."""
        return cls(graph=Graph(config, rng=rng), config=config)
