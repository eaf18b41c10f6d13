"""Tests for the signal and heat step functions."""

from __future__ import annotations

import math

import numpy as np
import pytest

from pulse_fields.core.config import SimulationConfig
from pulse_fields.core.context import SimMode, SimulationContext
from pulse_fields.core.elements import Edge
from pulse_fields.simulation.engine import (
    SimulationEngine, inject_impulse, pulse_term, step, step_heat,
    step_signal, stimulate, toggle_pulse,
)
from pulse_fields.simulation.generator import generate_graph


def _ctx(seed: int = 0, **overrides) -> SimulationContext:
    return SimulationContext.create(SimulationConfig(**overrides),
                                    rng=np.random.default_rng(seed))


# ── Signal model ─────────────────────────────────────────────────────

class TestSignalStep:
    @pytest.mark.parametrize("delay", [1, 2, 3, 4])
    def test_delay_fidelity(self, delay):
        """A sample emitted on tick T arrives on tick T + delay, never earlier."""
        ctx = _ctx(delay_min=delay, delay_max=delay)
        a = ctx.graph.add_node((0, 0))
        b = ctx.graph.add_node((100, 0))
        edge = ctx.graph.add_edge(a, b)
        a.signal = 1.0

        for _ in range(delay):
            report = step_signal(ctx)
            assert report.deltas[b.id] == 0.0
            assert b.signal == 0.0
        report = step_signal(ctx)
        expected = 1.0 * edge.weight * ctx.config.signal_transfer
        assert report.deltas[b.id] == pytest.approx(expected)
        assert b.signal == pytest.approx(expected)

    def test_delay_lines_keep_length(self):
        """Delay lines hold exactly ``delay`` samples after every tick."""
        ctx = _ctx(seed=4)
        generate_graph(ctx.graph)
        next(iter(ctx.graph)).signal = 1.0
        for _ in range(10):
            step_signal(ctx)
        for e in ctx.graph.edges.values():
            assert len(e.buffer_ab) == e.delay
            assert len(e.buffer_ba) == e.delay

    def test_isolated_node_decays(self):
        """An unlinked node leaks by the decay rate each tick."""
        ctx = _ctx()
        a = ctx.graph.add_node((0, 0))
        a.signal = 1.0
        step_signal(ctx)
        assert a.signal == pytest.approx(0.9)
        step_signal(ctx)
        assert a.signal == pytest.approx(0.81)

    def test_arrivals_sum(self):
        """Arrivals from several edges add up at the receiving node."""
        ctx = _ctx(delay_min=1, delay_max=1)
        hub = ctx.graph.add_node((0, 0))
        left = ctx.graph.add_node((-100, 0))
        right = ctx.graph.add_node((100, 0))
        e1 = ctx.graph.add_edge(left, hub)
        e2 = ctx.graph.add_edge(hub, right)
        left.signal = right.signal = 1.0
        step_signal(ctx)
        report = step_signal(ctx)
        expected = 0.25 * (e1.weight + e2.weight)
        assert report.deltas[hub.id] == pytest.approx(expected)

    def test_edge_order_does_not_matter(self):
        """Edges always read the pre-step signal values."""
        def run(reverse: bool) -> list[float]:
            ctx = _ctx(delay_min=1, delay_max=1)
            nodes = [ctx.graph.add_node((i * 100, 0)) for i in range(4)]
            pairs = list(zip(nodes, nodes[1:]))
            if reverse:
                pairs.reverse()
            for a, b in pairs:
                ctx.graph.add_edge(a, b).weight = 1.0
            nodes[0].signal = 1.0
            nodes[3].signal = -0.5
            for _ in range(6):
                step_signal(ctx)
            return [n.signal for n in nodes]

        assert run(False) == pytest.approx(run(True))

    def test_negative_signal_propagates(self):
        """Negative impulses travel like positive ones."""
        ctx = _ctx(delay_min=1, delay_max=1)
        a = ctx.graph.add_node((0, 0))
        b = ctx.graph.add_node((100, 0))
        ctx.graph.add_edge(a, b)
        a.signal = -1.0
        step_signal(ctx)
        step_signal(ctx)
        assert b.signal < 0

    def test_dangling_edge_skipped(self):
        """A signal edge with a missing endpoint is skipped and counted."""
        ctx = _ctx()
        a = ctx.graph.add_node((0, 0))
        a.signal = 1.0
        ctx.graph.edges[99] = Edge(id=99, a=a.id, b=12345, weight=1.0, delay=1)
        report = step_signal(ctx)
        assert report.skipped_edges == 1
        assert a.signal == pytest.approx(0.9)


# ── Heat model ───────────────────────────────────────────────────────

class TestHeatStep:
    def test_isolated_node_cools(self):
        """An isolated node only loses the cooling term."""
        ctx = _ctx()
        a = ctx.graph.add_node((0, 0))
        a.heat = 0.5
        step_heat(ctx)
        assert a.heat == pytest.approx(0.48)

    def test_isolated_node_clamps_at_zero(self):
        ctx = _ctx()
        a = ctx.graph.add_node((0, 0))
        a.heat = 0.01
        step_heat(ctx)
        assert a.heat == 0.0

    def test_diffusion_with_boundary_boost(self):
        """Degree-one nodes diffuse and cool with the boundary boost."""
        ctx = _ctx()
        a = ctx.graph.add_node((0, 0))
        b = ctx.graph.add_node((100, 0))
        ctx.graph.add_edge(a, b)
        a.heat = 1.0
        step_heat(ctx)
        # degree 1: diffusion, then cooling plus the boundary boost
        assert a.heat == pytest.approx(1.0 - 0.2 - 0.02 - 0.03)
        assert b.heat == pytest.approx(0.2 - 0.02 - 0.03)

    def test_well_connected_node_has_no_boost(self):
        """Nodes with two or more neighbours get plain cooling."""
        ctx = _ctx()
        hub = ctx.graph.add_node((0, 0))
        leaves = [ctx.graph.add_node((100, i * 100)) for i in range(2)]
        for leaf in leaves:
            ctx.graph.add_edge(hub, leaf)
        hub.heat = 1.0
        step_heat(ctx)
        assert hub.heat == pytest.approx(1.0 - 0.2 - 0.02)

    def test_uses_pre_step_snapshot(self):
        """Symmetric inputs stay symmetric: no read-after-write."""
        ctx = _ctx()
        a = ctx.graph.add_node((0, 0))
        b = ctx.graph.add_node((100, 0))
        ctx.graph.add_edge(a, b)
        a.heat = b.heat = 0.5
        step_heat(ctx)
        assert a.heat == pytest.approx(b.heat)

    def test_dangling_edge_skipped(self):
        """An edge whose endpoint vanished is skipped and reported, not followed."""
        ctx = _ctx()
        a = ctx.graph.add_node((0, 0))
        b = ctx.graph.add_node((100, 0))
        ctx.graph.add_edge(a, b)
        a.heat = 1.0
        del ctx.graph.nodes[b.id]
        report = step_heat(ctx)
        assert report.skipped_edges == 1
        assert a.heat == pytest.approx(0.98)

    def test_healthy_graph_skips_nothing(self):
        """A graph built through the public API never reports skipped edges."""
        ctx = _ctx(seed=2)
        generate_graph(ctx.graph)
        assert step_heat(ctx).skipped_edges == 0
        assert step_signal(ctx).skipped_edges == 0

    def test_pulse_adds_oscillating_term(self):
        """Pulse sources add base plus amplitude times the phase sinusoid."""
        ctx = _ctx()
        a = ctx.graph.add_node((0, 0))
        a.pulse_heat = True
        ctx.time = 1000.0
        report = step_heat(ctx)
        expected = 0.08 + 0.08 * math.sin(1000.0 * 0.004 + a.id)
        assert report.deltas[a.id] == pytest.approx(expected)
        assert a.heat == pytest.approx(expected)

    def test_pulse_sources_out_of_phase(self):
        """Distinct node ids shift the pulse phase."""
        ctx = _ctx()
        a = ctx.graph.add_node((0, 0))
        b = ctx.graph.add_node((500, 0))
        assert pulse_term(ctx, a) != pytest.approx(pulse_term(ctx, b))

    def test_heat_bounds_over_time(self):
        """Heat is non-negative before pulses and pulses never subtract."""
        ctx = _ctx(seed=9)
        generate_graph(ctx.graph)
        for node in list(ctx.graph)[::4]:
            node.pulse_heat = True
        list(ctx.graph)[1].heat = 3.0
        for t in range(200):
            ctx.time = t * 31.0
            report = step_heat(ctx)
            for node in ctx.graph:
                base = node.heat - report.deltas.get(node.id, 0.0)
                assert base >= -1e-12
                assert report.deltas.get(node.id, 0.0) >= 0.0
                assert node.heat >= base


# ── Dispatch and stimuli ─────────────────────────────────────────────

class TestDispatch:
    def test_step_follows_mode(self):
        """Only the active model advances."""
        ctx = _ctx()
        a = ctx.graph.add_node((0, 0))
        a.signal, a.heat = 1.0, 1.0
        report = step(ctx)
        assert report.mode is SimMode.SIGNAL
        assert a.heat == 1.0 and a.signal == pytest.approx(0.9)
        ctx.sim_mode = SimMode.HEAT
        report = step(ctx)
        assert report.mode is SimMode.HEAT
        assert a.signal == pytest.approx(0.9)
        assert ctx.tick_count == 2

    def test_impulse_is_additive(self):
        """Impulses accumulate and inversion subtracts."""
        ctx = _ctx()
        a = ctx.graph.add_node((0, 0))
        inject_impulse(ctx, a)
        assert a.signal == pytest.approx(1.2)
        inject_impulse(ctx, a)
        assert a.signal == pytest.approx(2.4)
        inject_impulse(ctx, a, invert=True)
        assert a.signal == pytest.approx(1.2)

    def test_toggle_pulse_needs_only_the_node(self):
        """Pulse flags flip without any simulation context."""
        ctx = _ctx()
        a = ctx.graph.add_node((0, 0))
        toggle_pulse(a)
        assert a.pulse_heat
        toggle_pulse(a)
        assert not a.pulse_heat

    def test_stimulate_in_heat_mode_toggles(self):
        """Heat-mode stimuli toggle the pulse flag and leave signal alone."""
        ctx = _ctx()
        ctx.sim_mode = SimMode.HEAT
        a = ctx.graph.add_node((0, 0))
        stimulate(ctx, a)
        assert a.pulse_heat
        stimulate(ctx, a)
        assert not a.pulse_heat
        assert a.signal == 0.0


class TestSimulationEngine:
    def test_no_history_by_default(self):
        ctx = _ctx()
        ctx.graph.add_node((0, 0))
        engine = SimulationEngine(ctx)
        engine.run(3)
        assert len(engine.history) == 0

    def test_bounded_history(self):
        """History keeps only the most recent ticks."""
        ctx = _ctx()
        a = ctx.graph.add_node((0, 0))
        a.signal = 1.0
        engine = SimulationEngine(ctx, history_limit=3)
        reports = engine.run(5)
        assert len(reports) == 5
        assert len(engine.history) == 3
        assert engine.history[-1][a.id] == pytest.approx(0.9 ** 5)

    def test_unbounded_history(self):
        ctx = _ctx()
        ctx.graph.add_node((0, 0))
        engine = SimulationEngine(ctx, history_limit=None)
        engine.run(7)
        assert len(engine.history) == 7
