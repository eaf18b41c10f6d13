"""Procedural demo graphs: greedy spanning construction plus k-nearest links.

The spanning phase repeatedly picks the globally closest (visited,
unvisited) pair by exhaustive search.  Ties resolve to the first pair found
when scanning visited nodes in visit order and unvisited nodes in creation
order, which fixes exactly which edges a seeded run produces.
"""

from __future__ import annotations

import logging
from collections import deque

import numpy as np

from ..core.config import SimulationConfig
from ..core.elements import Edge, Node
from .graph import Graph

logger = logging.getLogger(__name__)


def _distance_matrix(nodes: list[Node]) -> np.ndarray:
    pos = np.array([n.position for n in nodes], dtype=float).reshape(-1, 2)
    return np.linalg.norm(pos[:, None, :] - pos[None, :, :], axis=-1)


def scatter_nodes(
    graph: Graph,
    count: int,
    width: float,
    height: float,
    padding: float,
    rng: np.random.Generator,
) -> list[Node]:
    """Add *count* nodes uniformly inside the padded canvas rectangle."""
    span_x = max(1.0, width - padding * 2)
    span_y = max(1.0, height - padding * 2)
    return [
        graph.add_node((padding + rng.uniform() * span_x, padding + rng.uniform() * span_y))
        for _ in range(count)
    ]


def connect_spanning(graph: Graph, nodes: list[Node]) -> list[Edge]:
    """Join *nodes* into one component, nearest fragment first."""
    if not nodes:
        return []
    dist = _distance_matrix(nodes)
    visited = [0]
    unvisited = list(range(1, len(nodes)))
    created: list[Edge] = []

    while unvisited:
        sub = dist[np.ix_(visited, unvisited)]
        # argmin over the row-major flattening = first-found minimum
        row, col = np.unravel_index(int(np.argmin(sub)), sub.shape)
        a, b = visited[row], unvisited[col]
        edge = graph.add_edge(nodes[a], nodes[b])
        if edge is not None:
            created.append(edge)
        visited.append(b)
        unvisited.pop(col)
    return created


def augment_nearest(graph: Graph, nodes: list[Node], k: int) -> list[Edge]:
    """Link every node to its *k* nearest others, skipping existing pairs."""
    if len(nodes) < 2 or k <= 0:
        return []
    dist = _distance_matrix(nodes)
    created: list[Edge] = []
    for i, node in enumerate(nodes):
        order = [j for j in np.argsort(dist[i], kind="stable") if j != i]
        for j in order[:k]:
            edge = graph.add_edge(node, nodes[j])
            if edge is not None:
                created.append(edge)
    return created


def is_connected(graph: Graph) -> bool:
    """True if every node is reachable from the first one (an empty graph counts)."""
    if not graph.nodes:
        return True
    start = next(iter(graph.nodes))
    seen = {start}
    queue = deque([start])
    while queue:
        for other in graph.neighbors(queue.popleft()):
            if other.id not in seen:
                seen.add(other.id)
                queue.append(other.id)
    return len(seen) == len(graph.nodes)


def generate_graph(
    graph: Graph,
    config: SimulationConfig | None = None,
    rng: np.random.Generator | None = None,
    width: float | None = None,
    height: float | None = None,
) -> Graph:
    """Replace *graph*'s contents with a connected, locally redundant demo graph.

    Parameters
    ----------
    rng:
        Source of node positions; defaults to the graph's own generator,
        which also draws edge weights and delays.
    width, height:
        Canvas size; default to the configured canvas.
    """
    cfg = config or graph.config
    rng = rng or graph.rng
    width = cfg.canvas_width if width is None else width
    height = cfg.canvas_height if height is None else height

    graph.clear()
    nodes = scatter_nodes(graph, cfg.generator_node_count, width, height,
                          cfg.generator_padding, rng)
    spanning = connect_spanning(graph, nodes)
    extra = augment_nearest(graph, nodes, cfg.generator_neighbors)
    graph.reset_simulation()

    logger.info("generated graph: %d nodes, %d spanning + %d local edges",
                len(nodes), len(spanning), len(extra))
    return graph
