"""Node and edge records of the editable graph."""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass, field


@dataclass
class Node:
    """A point mass on the canvas.

    Position is fixed at creation; ``signal``, ``heat`` and ``pulse_heat``
    are the dynamic fields rewritten by the simulation and by stimuli.
    """

    id: int
    x: float
    y: float
    signal: float = 0.0
    heat: float = 0.0
    pulse_heat: bool = False

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)

    def distance_to(self, point: tuple[float, float]) -> float:
        return math.hypot(self.x - point[0], self.y - point[1])

    def reset(self) -> None:
        self.signal = 0.0
        self.heat = 0.0
        self.pulse_heat = False


@dataclass
class Edge:
    """An undirected, weighted link carrying one delay line per direction.

    ``buffer_ab`` holds samples travelling from ``a`` to ``b``; both lines
    always hold exactly ``delay`` samples.
    """

    id: int
    a: int
    b: int
    weight: float
    delay: int
    buffer_ab: deque[float] = field(default_factory=deque)
    buffer_ba: deque[float] = field(default_factory=deque)

    def __post_init__(self) -> None:
        if len(self.buffer_ab) != self.delay or len(self.buffer_ba) != self.delay:
            self.reset_buffers()

    @property
    def pair(self) -> frozenset[int]:
        return frozenset((self.a, self.b))

    def touches(self, node_id: int) -> bool:
        return node_id in (self.a, self.b)

    def other(self, node_id: int) -> int:
        return self.b if node_id == self.a else self.a

    def reset_buffers(self) -> None:
        self.buffer_ab = deque([0.0] * self.delay)
        self.buffer_ba = deque([0.0] * self.delay)

    @staticmethod
    def transmit(line: deque[float], sample: float) -> float:
        """Push *sample* onto the tail of *line* and return the sample leaving its head."""
        line.append(sample)
        return line.popleft()
