"""Simulation engine — the signal and heat step functions.

Both steps read a consistent pre-step snapshot of the graph and commit new
node values only after every edge/node has been evaluated, so evaluation
order never leaks into results.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import dataclass

from ..core.context import SimMode, SimulationContext
from ..core.elements import Edge, Node

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepReport:
    """Summary of one tick.

    ``deltas`` maps node id to the input it received this tick: the summed
    delay-line arrivals for a signal tick, the pulse heat added to each
    pulse source for a heat tick.  ``skipped_edges`` counts edges ignored
    because an endpoint no longer exists.
    """

    tick: int
    mode: SimMode
    deltas: dict[int, float]
    skipped_edges: int = 0


def step_signal(ctx: SimulationContext) -> StepReport:
    """Advance impulse propagation by one tick.

    Every edge pushes ``source.signal * weight * transfer`` onto the delay
    line of each direction and pops the sample that finishes crossing this
    tick.  Nodes then leak by ``signal_decay`` and absorb their arrivals.
    """
    graph = ctx.graph
    transfer = ctx.config.signal_transfer
    incoming = {nid: 0.0 for nid in graph.nodes}
    skipped = 0

    for edge in graph.edges.values():
        a = graph.nodes.get(edge.a)
        b = graph.nodes.get(edge.b)
        if a is None or b is None:
            skipped += 1
            continue
        out_a = a.signal * edge.weight * transfer
        out_b = b.signal * edge.weight * transfer
        incoming[b.id] += Edge.transmit(edge.buffer_ab, out_a)
        incoming[a.id] += Edge.transmit(edge.buffer_ba, out_b)

    decay = ctx.config.signal_decay
    for node in graph.nodes.values():
        node.signal = node.signal * decay + incoming[node.id]

    if skipped:
        logger.debug("signal step skipped %d edges with missing endpoints", skipped)
    return StepReport(ctx.tick_count, SimMode.SIGNAL, incoming, skipped)


def pulse_term(ctx: SimulationContext, node: Node) -> float:
    """Heat added to a pulse source this tick; never negative."""
    cfg = ctx.config
    phase = ctx.time * cfg.pulse_frequency + node.id
    return max(0.0, cfg.pulse_base + cfg.pulse_amplitude * math.sin(phase))


def step_heat(ctx: SimulationContext) -> StepReport:
    """Advance diffusion/cooling by one tick, then re-inject pulse sources."""
    graph = ctx.graph
    cfg = ctx.config
    skipped = sum(
        1 for e in graph.edges.values()
        if e.a not in graph.nodes or e.b not in graph.nodes
    )
    next_heat: dict[int, float] = {}

    for node in graph.nodes.values():
        neighbors = graph.neighbors(node)
        if not neighbors:
            next_heat[node.id] = max(0.0, node.heat - cfg.heat_cooling)
            continue
        mean = sum(n.heat for n in neighbors) / len(neighbors)
        value = node.heat + (mean - node.heat) * cfg.heat_diffusion
        boost = cfg.heat_edge_cooling_boost if len(neighbors) <= 1 else 0.0
        next_heat[node.id] = max(0.0, value - cfg.heat_cooling - boost)

    added: dict[int, float] = {}
    for node in graph.nodes.values():
        node.heat = next_heat[node.id]
        if node.pulse_heat:
            added[node.id] = pulse_term(ctx, node)
            node.heat += added[node.id]

    if skipped:
        logger.debug("heat step skipped %d edges with missing endpoints", skipped)
    return StepReport(ctx.tick_count, SimMode.HEAT, added, skipped)


_STEPS = {
    SimMode.SIGNAL: step_signal,
    SimMode.HEAT: step_heat,
}


def step(ctx: SimulationContext) -> StepReport:
    """Run the step function of the active simulation mode."""
    ctx.tick_count += 1
    return _STEPS[ctx.sim_mode](ctx)


# ── Stimuli ──────────────────────────────────────────────────────────

def inject_impulse(ctx: SimulationContext, node: Node, invert: bool = False) -> None:
    """Add a fixed impulse (negated when *invert*) to *node*'s signal."""
    node.signal += -ctx.config.impulse if invert else ctx.config.impulse


def toggle_pulse(node: Node) -> None:
    node.pulse_heat = not node.pulse_heat


def stimulate(ctx: SimulationContext, node: Node, invert: bool = False) -> None:
    """Apply the pointer stimulus of the active simulation mode to *node*."""
    if ctx.sim_mode is SimMode.SIGNAL:
        inject_impulse(ctx, node, invert)
    else:
        toggle_pulse(node)
    logger.debug("stimulated node %d in %s mode", node.id, ctx.sim_mode.value)


class SimulationEngine:
    """Tick-by-tick driver around a :class:`SimulationContext`.

    Optionally records the active field (signal or heat per node) after
    every tick; ``history_limit`` bounds how many ticks are kept.
    """

    def __init__(self, ctx: SimulationContext, history_limit: int | None = 0) -> None:
        self.ctx = ctx
        self.history_limit = history_limit
        self.history: deque[dict[int, float]] = deque(
            maxlen=history_limit if history_limit else None
        )

    def field(self) -> dict[int, float]:
        """Current value of the active field for every node."""
        attr = "signal" if self.ctx.sim_mode is SimMode.SIGNAL else "heat"
        return {nid: getattr(n, attr) for nid, n in self.ctx.graph.nodes.items()}

    def step(self) -> StepReport:
        report = step(self.ctx)
        if self.history_limit != 0:
            self.history.append(self.field())
        return report

    def run(self, num_ticks: int) -> list[StepReport]:
        """Execute *num_ticks* ticks and return their reports."""
        return [self.step() for _ in range(num_ticks)]

    def clear_history(self) -> None:
        self.history.clear()
