"""Tunable constants for the graph editor and both propagation models."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True)
class SimulationConfig:
    """Fixed constant table.

    Every value can be overridden at construction (or later through
    :meth:`with_overrides`) so tests can shorten latencies or switch off
    decay without touching module globals.
    """

    # Geometry / hit testing
    node_radius: float = 18.0
    hit_radius: float = 22.0

    # Gestures
    long_press_ms: float = 320.0
    move_threshold: float = 6.0

    # Signal model
    signal_decay: float = 0.9
    signal_transfer: float = 0.25
    impulse: float = 1.2

    # Heat model
    heat_diffusion: float = 0.2
    heat_cooling: float = 0.02
    heat_edge_cooling_boost: float = 0.03
    pulse_base: float = 0.08
    pulse_amplitude: float = 0.08
    pulse_frequency: float = 0.004  # radians per ms of simulation time

    # Scheduling
    tick_interval_ms: float = 30.0

    # Edge parameters drawn at creation
    weight_min: float = 0.6
    weight_max: float = 1.5
    delay_min: int = 1
    delay_max: int = 4

    # Demo generator
    generator_node_count: int = 26
    generator_padding: float = 60.0
    generator_neighbors: int = 2
    canvas_width: float = 960.0
    canvas_height: float = 640.0

    def __post_init__(self) -> None:
        for name in ("node_radius", "hit_radius", "long_press_ms",
                     "tick_interval_ms", "canvas_width", "canvas_height"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)!r}")
        if self.move_threshold < 0:
            raise ValueError("move_threshold must be non-negative")
        if not 0.0 <= self.signal_decay < 1.0:
            raise ValueError(f"signal_decay must lie in [0, 1), got {self.signal_decay!r}")
        if self.pulse_base < self.pulse_amplitude:
            # base - amplitude is the pulse minimum; it must never cool a source
            raise ValueError("pulse_base must be >= pulse_amplitude")
        if self.weight_max <= self.weight_min:
            raise ValueError("weight range is empty")
        if self.delay_min < 1 or self.delay_max < self.delay_min:
            raise ValueError("delay range must satisfy 1 <= delay_min <= delay_max")
        if self.generator_node_count < 0 or self.generator_neighbors < 0:
            raise ValueError("generator counts must be non-negative")

    def with_overrides(self, **changes: Any) -> SimulationConfig:
        """Return a copy with *changes* applied (validated again)."""
        return replace(self, **changes)


DEFAULT_CONFIG = SimulationConfig()
