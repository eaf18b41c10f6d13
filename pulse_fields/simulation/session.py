"""Session facade: one entrypoint per shell command plus a snapshot query.

A :class:`Session` wires the graph, simulation context, engine, gesture
controller and tick scheduler together.  UI shells talk to nothing else.
"""

from __future__ import annotations

import logging
from typing import Callable

import numpy as np

from ..core.config import DEFAULT_CONFIG, SimulationConfig
from ..core.context import RunMode, SimMode, SimulationContext
from ..core.snapshot import EdgeView, GraphSnapshot, LinkPreview, NodeView
from ..editing.controller import Clock, EditController, monotonic_ms
from .engine import SimulationEngine
from .generator import generate_graph
from .scheduler import TickScheduler

logger = logging.getLogger(__name__)

Point = tuple[float, float]


class Session:
    """Graph, simulation context, engine, gesture controller and scheduler of one editor.

    Every mutation a UI shell may request goes through a method here, and
    :meth:`snapshot` is the only read path renderers need.
    """

    def __init__(
        self,
        config: SimulationConfig = DEFAULT_CONFIG,
        rng: np.random.Generator | None = None,
        clock: Clock = monotonic_ms,
        render: Callable[[GraphSnapshot], None] | None = None,
        history_limit: int | None = 0,
    ) -> None:
        self.config = config
        self.ctx = SimulationContext.create(config, rng=rng)
        self.graph = self.ctx.graph
        self.engine = SimulationEngine(self.ctx, history_limit=history_limit)
        self.controller = EditController(self.ctx, clock=clock)
        self.renderer = render
        self.scheduler = TickScheduler(
            self.engine,
            render=self._render,
            before_tick=self.controller.poll,
        )
        self.canvas_size: tuple[float, float] = (config.canvas_width, config.canvas_height)

    # ── Commands ─────────────────────────────────────────────────────

    def set_mode(self, mode: SimMode | str) -> None:
        mode = SimMode(mode)
        if mode is self.ctx.sim_mode:
            return
        self.ctx.sim_mode = mode
        self.reset()
        logger.info("simulation mode set to %s", mode.value)

    def toggle_play(self) -> bool:
        """Flip between editing and playing; returns the new playing flag."""
        self.controller.cancel()
        if self.ctx.playing:
            self.ctx.run_mode = RunMode.EDITING
            self.reset()
        else:
            self.ctx.run_mode = RunMode.PLAYING
        logger.info("run mode set to %s", self.ctx.run_mode.value)
        return self.ctx.playing

    def regenerate(self, width: float | None = None, height: float | None = None) -> None:
        self.controller.cancel()
        width = self.canvas_size[0] if width is None else width
        height = self.canvas_size[1] if height is None else height
        generate_graph(self.graph, self.config, width=width, height=height)
        self.engine.clear_history()

    def clear(self) -> None:
        self.controller.cancel()
        self.graph.clear()
        self.reset()
        logger.info("graph cleared")

    def reset(self) -> None:
        self.graph.reset_simulation()
        self.engine.clear_history()

    def resize(self, width: float, height: float) -> None:
        """Canvas size used by :meth:`regenerate`."""
        self.canvas_size = (float(width), float(height))

    # ── Pointer forwarding ───────────────────────────────────────────

    def pointer_down(self, point: Point, invert: bool = False) -> None:
        self.controller.pointer_down(point, invert=invert)

    def pointer_move(self, point: Point) -> None:
        self.controller.pointer_move(point)

    def pointer_up(self, point: Point) -> None:
        self.controller.pointer_up(point)

    def pointer_leave(self, point: Point) -> None:
        self.controller.pointer_leave(point)

    # ── Frame loop ───────────────────────────────────────────────────

    def frame(self, now_ms: float) -> bool:
        return self.scheduler.frame(now_ms)

    def _render(self) -> None:
        if self.renderer is not None:
            self.renderer(self.snapshot())

    # ── Query ────────────────────────────────────────────────────────

    def snapshot(self) -> GraphSnapshot:
        graph = self.graph
        nodes = tuple(
            NodeView(n.id, n.x, n.y, n.signal, n.heat, n.pulse_heat)
            for n in graph.nodes.values()
        )
        edges = []
        for e in graph.edges.values():
            a, b = graph.nodes.get(e.a), graph.nodes.get(e.b)
            if a is None or b is None:
                continue
            edges.append(EdgeView(e.id, e.a, e.b, a.position, b.position, e.weight, e.delay))
        preview = self.controller.link_preview()
        return GraphSnapshot(
            nodes=nodes,
            edges=tuple(edges),
            mode=self.ctx.sim_mode.value,
            playing=self.ctx.playing,
            time=self.ctx.time,
            tick=self.ctx.tick_count,
            link_preview=LinkPreview(*preview) if preview is not None else None,
        )
