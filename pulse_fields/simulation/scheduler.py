"""Frame-driven tick scheduler.

Each frame may advance the simulation, but only once more than
``interval_ms`` of wall-clock time has passed since the previous tick, so
tick rate is capped independently of display refresh rate.  Rendering runs
on every frame.
"""

from __future__ import annotations

import logging
from typing import Callable

from ..core.context import SimulationContext
from .engine import SimulationEngine

logger = logging.getLogger(__name__)


class TickScheduler:
    """Sole writer of ``ctx.time``; drives the engine at a capped rate."""

    def __init__(
        self,
        engine: SimulationEngine,
        render: Callable[[], None] | None = None,
        before_tick: Callable[[], None] | None = None,
        interval_ms: float | None = None,
    ) -> None:
        self.engine = engine
        self.ctx: SimulationContext = engine.ctx
        self.render_callback = render
        self.before_tick = before_tick
        self.interval_ms = self.ctx.config.tick_interval_ms if interval_ms is None else interval_ms
        self.last_tick = 0.0
        self.frames = 0

    def advance(self, now_ms: float) -> bool:
        """Record *now_ms* as simulation time and tick if the gate is open."""
        self.ctx.time = now_ms
        if not self.ctx.playing:
            return False
        if now_ms - self.last_tick <= self.interval_ms:
            return False
        self.engine.step()
        self.last_tick = now_ms
        return True

    def render(self) -> None:
        if self.render_callback is not None:
            self.render_callback()

    def frame(self, now_ms: float) -> bool:
        """One frame: resolve due gestures, maybe simulate, then draw."""
        self.frames += 1
        if self.before_tick is not None:
            self.before_tick()
        ticked = self.advance(now_ms)
        self.render()
        return ticked
