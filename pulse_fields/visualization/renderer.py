"""Matplotlib rendering of graph snapshots."""

from __future__ import annotations

from typing import Any

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection

from ..core.config import DEFAULT_CONFIG, SimulationConfig
from ..core.snapshot import GraphSnapshot

BACKGROUND = "#0a0d13"

PALETTE = {
    "signal": {"edge": (90 / 255, 240 / 255, 178 / 255), "node": (90 / 255, 240 / 255, 178 / 255)},
    "heat": {"edge": (255 / 255, 158 / 255, 102 / 255), "node": (255 / 255, 146 / 255, 88 / 255)},
}


def edge_intensity(weight: float) -> float:
    return min(1.0, max(0.2, weight))


def node_magnitude(value: float) -> float:
    return min(1.0, abs(value))


class SnapshotRenderer:
    """Draws a :class:`GraphSnapshot` onto a matplotlib ``Axes``.

    Sizes are given in canvas pixels and converted to points so halos
    grow with ``|value|`` the same way regardless of figure DPI.
    """

    def __init__(self, config: SimulationConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def _marker_area(self, ax: Any, radius_px: np.ndarray) -> np.ndarray:
        # scatter sizes are areas in points^2
        pts = radius_px * 72.0 / ax.figure.dpi
        return (2.0 * pts) ** 2

    def draw(
        self,
        snapshot: GraphSnapshot,
        ax: Any = None,
        *,
        width: float | None = None,
        height: float | None = None,
        title: str | None = None,
    ) -> Any:
        if ax is None:
            _fig, ax = plt.subplots(1, 1, figsize=(9.6, 6.4))
        width = self.config.canvas_width if width is None else width
        height = self.config.canvas_height if height is None else height
        colors = PALETTE[snapshot.mode]

        ax.clear()
        ax.set_facecolor(BACKGROUND)
        ax.set_xlim(0, width)
        ax.set_ylim(height, 0)  # canvas y grows downward
        ax.set_aspect("equal")
        ax.set_xticks([])
        ax.set_yticks([])

        if snapshot.edges:
            segments = [[e.a_pos, e.b_pos] for e in snapshot.edges]
            intensities = np.array([edge_intensity(e.weight) for e in snapshot.edges])
            rgba = np.zeros((len(segments), 4))
            rgba[:, :3] = colors["edge"]
            rgba[:, 3] = 0.15 + intensities * 0.4
            ax.add_collection(LineCollection(segments, colors=rgba,
                                             linewidths=2 + intensities, zorder=1))

        preview = snapshot.link_preview
        if preview is not None:
            ax.plot([preview.origin[0], preview.pointer[0]],
                    [preview.origin[1], preview.pointer[1]],
                    color=(1, 1, 1, 0.4), linewidth=2, linestyle=(0, (6, 6)), zorder=2)

        if snapshot.nodes:
            xs = np.array([n.x for n in snapshot.nodes])
            ys = np.array([n.y for n in snapshot.nodes])
            mags = np.array([node_magnitude(snapshot.value_of(n)) for n in snapshot.nodes])
            halo = np.zeros((len(xs), 4))
            halo[:, :3] = colors["node"]
            halo[:, 3] = 0.2 + mags * 0.7
            r = self.config.node_radius
            ax.scatter(xs, ys, s=self._marker_area(ax, r + mags * 10), c=halo,
                       linewidths=0, zorder=3)
            ax.scatter(xs, ys, s=self._marker_area(ax, np.full(len(xs), r)),
                       c=[(9 / 255, 13 / 255, 19 / 255, 0.85)],
                       edgecolors=[(145 / 255, 185 / 255, 230 / 255, 0.5)],
                       linewidths=2, zorder=4)
            pulsing = [n for n in snapshot.nodes if n.pulse_heat]
            if snapshot.mode == "heat" and pulsing:
                ax.scatter([n.x for n in pulsing], [n.y for n in pulsing], marker="*",
                           s=60, c=[colors["node"]], zorder=5)

        if title is not None:
            ax.set_title(title, color="#e8eaed")
        return ax
