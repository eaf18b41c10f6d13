"""Pointer gesture state machine for editing and stimulating the graph.

While editing, a press on empty canvas creates a node, a short tap on a node
deletes it, and a press held past the long-press latency becomes a link drag
that connects the start node to whatever node the pointer is released over.
While playing, a press on a node stimulates it instead.

Time comes from an injectable clock (milliseconds), so the long-press timer
is a deadline checked by :meth:`EditController.poll` and before every
pointer event rather than a real deferred callback.
"""

from __future__ import annotations

import enum
import logging
import math
import time
from dataclasses import dataclass
from typing import Callable

from ..core.context import SimulationContext
from ..core.elements import Node
from ..simulation.engine import stimulate

logger = logging.getLogger(__name__)

Point = tuple[float, float]
Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class GestureState(str, enum.Enum):
    IDLE = "idle"
    PRESSED_ON_NODE = "pressed_on_node"  # long-press timer armed
    DRAGGING = "dragging"  # timer cancelled by motion, never promoted
    LINK_DRAGGING = "link_dragging"


class LongPressTimer:
    """A cancellable one-shot deadline."""

    def __init__(self) -> None:
        self.deadline: float | None = None

    @property
    def armed(self) -> bool:
        return self.deadline is not None

    def arm(self, now: float, latency: float) -> None:
        self.deadline = now + latency

    def cancel(self) -> None:
        self.deadline = None

    def fire_if_due(self, now: float) -> bool:
        """Disarm and return ``True`` once *now* reaches the deadline."""
        if self.deadline is None or now < self.deadline:
            return False
        self.deadline = None
        return True


@dataclass
class DragState:
    active: bool = False
    start_node: Node | None = None
    start: Point = (0.0, 0.0)
    current: Point = (0.0, 0.0)
    promoted: bool = False


class EditController:
    """Translate canvas-space pointer events into graph mutations or stimuli."""

    def __init__(self, ctx: SimulationContext, clock: Clock = monotonic_ms) -> None:
        self.ctx = ctx
        self.clock = clock
        self.drag = DragState()
        self.timer = LongPressTimer()
        self.state = GestureState.IDLE

    # ── Timer ────────────────────────────────────────────────────────

    def poll(self) -> bool:
        """Fire the long-press timer if it is due; returns ``True`` on promotion."""
        if self.state is not GestureState.PRESSED_ON_NODE:
            return False
        if not self.timer.fire_if_due(self.clock()):
            return False
        self.drag.promoted = True
        self.state = GestureState.LINK_DRAGGING
        logger.debug("long press on node %d promoted to link drag", self.drag.start_node.id)
        return True

    def cancel(self) -> None:
        """Abandon any in-flight gesture."""
        self.timer.cancel()
        self.drag = DragState()
        self.state = GestureState.IDLE

    # ── Pointer events ───────────────────────────────────────────────

    def pointer_down(self, point: Point, invert: bool = False) -> None:
        point = _as_point(point)
        target = self.ctx.graph.find_node_at(point)

        if self.ctx.playing:
            if target is not None:
                stimulate(self.ctx, target, invert)
            return

        if self.state is not GestureState.IDLE:
            # A second press without a release; the earlier gesture is void.
            self.cancel()

        if target is None:
            self.ctx.graph.add_node(point)
            return

        self.drag = DragState(active=True, start_node=target, start=point, current=point)
        self.timer.arm(self.clock(), self.ctx.config.long_press_ms)
        self.state = GestureState.PRESSED_ON_NODE

    def pointer_move(self, point: Point) -> None:
        if self.ctx.playing or not self.drag.active:
            return
        point = _as_point(point)
        self.poll()
        self.drag.current = point
        if (self.state is GestureState.PRESSED_ON_NODE
                and _distance(self.drag.start, point) > self.ctx.config.move_threshold):
            self.timer.cancel()
            self.state = GestureState.DRAGGING

    def pointer_up(self, point: Point) -> None:
        if self.ctx.playing or not self.drag.active:
            return
        self.poll()
        self.timer.cancel()
        drag, state = self.drag, self.state
        self.drag = DragState()
        self.state = GestureState.IDLE

        graph = self.ctx.graph
        start = drag.start_node
        if start is None or start.id not in graph.nodes:
            return
        if state is GestureState.LINK_DRAGGING:
            target = graph.find_node_at(point)
            if target is not None:
                graph.add_edge(start, target)
            else:
                logger.debug("link drag from node %d released over empty canvas", start.id)
        elif _distance(drag.start, point) < self.ctx.config.move_threshold:
            graph.remove_node(start)

    def pointer_leave(self, point: Point) -> None:
        """Leaving the canvas resolves the gesture like a release at *point*."""
        self.pointer_up(point)

    # ── Queries ──────────────────────────────────────────────────────

    def link_preview(self) -> tuple[Point, Point] | None:
        """Origin and pointer position while a link drag is in progress."""
        if self.state is not GestureState.LINK_DRAGGING or self.drag.start_node is None:
            return None
        return self.drag.start_node.position, self.drag.current


def _as_point(point: Point) -> Point:
    return (float(point[0]), float(point[1]))


def _distance(p: Point, q: Point) -> float:
    return math.hypot(p[0] - q[0], p[1] - q[1])
