"""Interactive matplotlib editor for the signal/heat graph.

Run with:
    python app.py

Editing: click empty canvas to add a node, tap a node to delete it, hold a
node for a moment and release over another node to link them.  Press Play
to run the simulation; clicks then inject impulses (shift inverts) in
signal mode or toggle pulse sources in heat mode.
"""

from __future__ import annotations

import time
from typing import Any

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.widgets import Button

from ..core.config import DEFAULT_CONFIG, SimulationConfig
from ..core.context import SimMode
from ..core.snapshot import GraphSnapshot
from ..simulation.session import Session
from .renderer import SnapshotRenderer

FRAME_INTERVAL_MS = 16

_BUTTON_STYLE = dict(color="#1b2230", hovercolor="#2a3446")
_ACTIVE_COLOR = "#2f5d4d"


class GraphEditorApp:
    """Input shell: forwards canvas pointer events and button commands to a :class:`Session`."""

    def __init__(self, config: SimulationConfig = DEFAULT_CONFIG, seed: int | None = None) -> None:
        self.config = config
        self.session = Session(config, rng=np.random.default_rng(seed), render=self._draw)
        self.renderer = SnapshotRenderer(config)
        self._t0 = time.monotonic()
        self._pressed = False

        self.fig = plt.figure(figsize=(11, 7.6), facecolor="#0a0a0f")
        self.ax = self.fig.add_axes([0.02, 0.12, 0.96, 0.84])
        self._build_buttons()

        self.fig.canvas.mpl_connect("button_press_event", self.on_press)
        self.fig.canvas.mpl_connect("motion_notify_event", self.on_motion)
        self.fig.canvas.mpl_connect("button_release_event", self.on_release)
        self.fig.canvas.mpl_connect("axes_leave_event", self.on_leave)

        self.anim = FuncAnimation(self.fig, self._on_frame, interval=FRAME_INTERVAL_MS,
                                  cache_frame_data=False)

    # ── Widgets ──────────────────────────────────────────────────────

    def _build_buttons(self) -> None:
        specs = [
            ("Signal", lambda _e: self._set_mode(SimMode.SIGNAL)),
            ("Heat", lambda _e: self._set_mode(SimMode.HEAT)),
            ("Play", self.on_play),
            ("Generate", self.on_generate),
            ("Clear", self.on_clear),
        ]
        self.buttons: dict[str, Button] = {}
        for i, (label, handler) in enumerate(specs):
            bax = self.fig.add_axes([0.02 + i * 0.13, 0.02, 0.12, 0.06])
            btn = Button(bax, label, **_BUTTON_STYLE)
            btn.label.set_color("#e8eaed")
            btn.on_clicked(handler)
            self.buttons[label] = btn
        self._refresh_buttons()

    def _refresh_buttons(self) -> None:
        mode = self.session.ctx.sim_mode
        for label, m in (("Signal", SimMode.SIGNAL), ("Heat", SimMode.HEAT)):
            btn = self.buttons[label]
            btn.color = _ACTIVE_COLOR if mode is m else _BUTTON_STYLE["color"]
            btn.ax.set_facecolor(btn.color)
        self.buttons["Play"].label.set_text("Pause" if self.session.ctx.playing else "Play")

    def _set_mode(self, mode: SimMode) -> None:
        self.session.set_mode(mode)
        self._refresh_buttons()

    def on_play(self, _event: Any) -> None:
        self.session.toggle_play()
        self._refresh_buttons()

    def on_generate(self, _event: Any) -> None:
        self.session.regenerate()

    def on_clear(self, _event: Any) -> None:
        self.session.clear()

    # ── Pointer events ───────────────────────────────────────────────

    def _canvas_point(self, event: Any) -> tuple[float, float] | None:
        if event.inaxes is not self.ax or event.xdata is None or event.ydata is None:
            return None
        return (float(event.xdata), float(event.ydata))

    def on_press(self, event: Any) -> None:
        point = self._canvas_point(event)
        if point is None or event.button != 1:
            return
        self._pressed = True
        invert = bool(event.key) and "shift" in event.key
        self.session.pointer_down(point, invert=invert)

    def on_motion(self, event: Any) -> None:
        point = self._canvas_point(event)
        if point is None or not self._pressed:
            return
        self.session.pointer_move(point)

    def on_release(self, event: Any) -> None:
        if not self._pressed:
            return
        self._pressed = False
        point = self._canvas_point(event)
        if point is None:
            self.session.controller.cancel()
            return
        self.session.pointer_up(point)

    def on_leave(self, event: Any) -> None:
        if event.inaxes is not self.ax or not self._pressed:
            return
        self._pressed = False
        self.session.pointer_leave(self.session.controller.drag.current)

    # ── Frame loop ───────────────────────────────────────────────────

    def _on_frame(self, _frame: int) -> tuple:
        self.session.frame((time.monotonic() - self._t0) * 1000.0)
        return ()

    def _draw(self, snapshot: GraphSnapshot) -> None:
        state = "playing" if snapshot.playing else "editing"
        self.renderer.draw(
            snapshot, self.ax,
            width=self.session.canvas_size[0], height=self.session.canvas_size[1],
            title=f"{snapshot.mode} · {state} · {len(snapshot.nodes)} nodes, {len(snapshot.edges)} edges",
        )

    def show(self) -> None:
        plt.show()


def main(seed: int | None = None) -> None:
    app = GraphEditorApp(seed=seed)
    app.session.regenerate()
    app.show()


if __name__ == "__main__":
    main()
