"""Read-only views of the graph handed to renderers and UI shells."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

Point = tuple[float, float]


@dataclass(frozen=True)
class NodeView:
    id: int
    x: float
    y: float
    signal: float
    heat: float
    pulse_heat: bool


@dataclass(frozen=True)
class EdgeView:
    id: int
    a: int
    b: int
    a_pos: Point
    b_pos: Point
    weight: float
    delay: int


@dataclass(frozen=True)
class LinkPreview:
    origin: Point
    pointer: Point


@dataclass(frozen=True)
class GraphSnapshot:
    """Everything a renderer needs for one frame.

    ``link_preview`` is set only while a link drag is in progress.
    """

    nodes: tuple[NodeView, ...]
    edges: tuple[EdgeView, ...]
    mode: str
    playing: bool
    time: float = 0.0
    tick: int = 0
    link_preview: LinkPreview | None = None

    def value_of(self, node: NodeView) -> float:
        """The field shown for *node* in the active mode."""
        return node.signal if self.mode == "signal" else node.heat

    def to_dict(self) -> dict[str, Any]:
        """JSON-serialisable form."""
        data = asdict(self)
        data["nodes"] = [asdict(n) for n in self.nodes]
        data["edges"] = [asdict(e) for e in self.edges]
        return data
