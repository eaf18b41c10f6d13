"""Plotly figures of graph snapshots, for notebooks and static HTML."""

from __future__ import annotations

from typing import Any

import plotly.graph_objects as go

from ..core.config import DEFAULT_CONFIG, SimulationConfig
from ..core.snapshot import GraphSnapshot
from .renderer import node_magnitude

_LAYOUT_DEFAULTS = dict(
    template="plotly_dark",
    paper_bgcolor="#0a0a0f",
    plot_bgcolor="#0a0d13",
    font=dict(family="Inter, -apple-system, sans-serif", color="#e8eaed"),
    margin=dict(l=20, r=20, t=50, b=20),
    height=640,
    showlegend=False,
    uirevision="stable",
)

_COLORSCALES = {"signal": "RdBu", "heat": "Inferno"}


def _edge_trace(snapshot: GraphSnapshot) -> go.Scatter:
    xs: list[Any] = []
    ys: list[Any] = []
    for e in snapshot.edges:
        xs += [e.a_pos[0], e.b_pos[0], None]
        ys += [e.a_pos[1], e.b_pos[1], None]
    return go.Scatter(x=xs, y=ys, mode="lines", hoverinfo="skip",
                      line=dict(color="rgba(145,185,230,0.35)", width=2))


def snapshot_figure(
    snapshot: GraphSnapshot,
    *,
    width: float = 960.0,
    height: float = 640.0,
    title: str | None = None,
    config: SimulationConfig = DEFAULT_CONFIG,
) -> go.Figure:
    """Nodes coloured by the active field, edges in a single line trace."""
    values = [snapshot.value_of(n) for n in snapshot.nodes]
    if snapshot.mode == "signal":
        bound = max([1.0] + [abs(v) for v in values])
        cmin, cmax = -bound, bound
    else:
        cmin, cmax = 0.0, max([0.2] + values)

    nodes = go.Scatter(
        x=[n.x for n in snapshot.nodes],
        y=[n.y for n in snapshot.nodes],
        mode="markers",
        marker=dict(
            size=[config.node_radius + node_magnitude(v) * 10 for v in values],
            color=values,
            colorscale=_COLORSCALES[snapshot.mode],
            cmin=cmin,
            cmax=cmax,
            showscale=True,
            line=dict(
                width=[3 if n.pulse_heat else 1 for n in snapshot.nodes],
                color="rgba(145,185,230,0.8)",
            ),
        ),
        text=[f"node {n.id}<br>{snapshot.mode}={v:.3f}" for n, v in zip(snapshot.nodes, values)],
        hoverinfo="text",
    )

    fig = go.Figure(data=[_edge_trace(snapshot), nodes])
    if snapshot.link_preview is not None:
        p = snapshot.link_preview
        fig.add_trace(go.Scatter(x=[p.origin[0], p.pointer[0]], y=[p.origin[1], p.pointer[1]],
                                 mode="lines", line=dict(color="white", dash="dash", width=2)))
    fig.update_layout(
        **_LAYOUT_DEFAULTS,
        title=title or f"{snapshot.mode.title()} — tick {snapshot.tick}",
        xaxis=dict(range=[0, width], visible=False),
        yaxis=dict(range=[height, 0], visible=False, scaleanchor="x"),
    )
    return fig
