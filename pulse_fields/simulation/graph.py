"""Graph topology management.

Owns the nodes and edges of the editable graph, allocates identities,
answers adjacency queries and keeps the structural invariants (no dangling
edges, no self loops, at most one edge per unordered pair).
"""

from __future__ import annotations

import logging
from typing import Iterator, Union

import numpy as np

from ..core.config import DEFAULT_CONFIG, SimulationConfig
from ..core.elements import Edge, Node

logger = logging.getLogger(__name__)

Point = tuple[float, float]
NodeRef = Union[Node, int]


def _node_id(node: NodeRef) -> int:
    return node.id if isinstance(node, Node) else int(node)


class Graph:
    """Nodes and weighted delay-line edges with O(1) identity lookup.

    ``nodes`` and ``edges`` are insertion-ordered dicts, so iteration follows
    creation order.  Identities are allocated from counters that are never
    rewound, even by :meth:`clear`.
    """

    def __init__(
        self,
        config: SimulationConfig = DEFAULT_CONFIG,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config
        self.rng = rng or np.random.default_rng()
        self.nodes: dict[int, Node] = {}
        self.edges: dict[int, Edge] = {}
        self._pairs: dict[frozenset[int], int] = {}
        self._incident: dict[int, list[int]] = {}
        self._next_node_id = 1
        self._next_edge_id = 1

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes.values())

    # ── Structural mutation ──────────────────────────────────────────

    def add_node(self, point: Point) -> Node:
        """Create a node at *point* with zeroed dynamics and return it."""
        node = Node(id=self._next_node_id, x=float(point[0]), y=float(point[1]))
        self._next_node_id += 1
        self.nodes[node.id] = node
        self._incident[node.id] = []
        logger.debug("added node %d at (%.1f, %.1f)", node.id, node.x, node.y)
        return node

    def remove_node(self, node: NodeRef) -> None:
        """Remove a node together with every edge that references it."""
        nid = _node_id(node)
        if nid not in self.nodes:
            logger.debug("ignored removal of unknown node %d", nid)
            return
        for eid in self._incident.pop(nid):
            edge = self.edges.pop(eid)
            del self._pairs[edge.pair]
            other = edge.other(nid)
            if other in self._incident:
                self._incident[other].remove(eid)
        del self.nodes[nid]
        logger.debug("removed node %d", nid)

    def add_edge(self, a: NodeRef, b: NodeRef) -> Edge | None:
        """Link *a* and *b* with a randomly weighted, randomly delayed edge.

        Returns ``None`` without mutating anything for self loops, duplicate
        pairs (in either order) and unknown endpoints.
        """
        aid, bid = _node_id(a), _node_id(b)
        if aid == bid:
            logger.debug("ignored self loop on node %d", aid)
            return None
        if aid not in self.nodes or bid not in self.nodes:
            logger.debug("ignored edge to unknown node (%d, %d)", aid, bid)
            return None
        pair = frozenset((aid, bid))
        if pair in self._pairs:
            logger.debug("ignored duplicate edge (%d, %d)", aid, bid)
            return None

        cfg = self.config
        weight = cfg.weight_min + float(self.rng.random()) * (cfg.weight_max - cfg.weight_min)
        delay = int(self.rng.integers(cfg.delay_min, cfg.delay_max + 1))
        edge = Edge(id=self._next_edge_id, a=aid, b=bid, weight=weight, delay=delay)
        self._next_edge_id += 1

        self.edges[edge.id] = edge
        self._pairs[pair] = edge.id
        self._incident[aid].append(edge.id)
        self._incident[bid].append(edge.id)
        logger.debug("added edge %d (%d-%d) weight=%.3f delay=%d",
                     edge.id, aid, bid, weight, delay)
        return edge

    def clear(self) -> None:
        """Drop every node and edge; identity counters keep counting."""
        self.nodes.clear()
        self.edges.clear()
        self._pairs.clear()
        self._incident.clear()

    def reset_simulation(self) -> None:
        """Zero all dynamic fields and refill every delay line, keeping topology."""
        for node in self.nodes.values():
            node.reset()
        for edge in self.edges.values():
            edge.reset_buffers()

    # ── Queries ──────────────────────────────────────────────────────

    def find_node_at(self, point: Point, radius: float | None = None) -> Node | None:
        """Return the earliest-created node within *radius* of *point*."""
        r = self.config.hit_radius if radius is None else radius
        for node in self.nodes.values():
            if node.distance_to(point) <= r:
                return node
        return None

    def edge_between(self, a: NodeRef, b: NodeRef) -> Edge | None:
        eid = self._pairs.get(frozenset((_node_id(a), _node_id(b))))
        return None if eid is None else self.edges[eid]

    def has_edge(self, a: NodeRef, b: NodeRef) -> bool:
        return frozenset((_node_id(a), _node_id(b))) in self._pairs

    def incident_edges(self, node: NodeRef) -> list[Edge]:
        return [self.edges[eid] for eid in self._incident.get(_node_id(node), [])]

    def neighbors(self, node: NodeRef) -> list[Node]:
        """Adjacent nodes, in edge creation order."""
        nid = _node_id(node)
        out: list[Node] = []
        for edge in self.incident_edges(nid):
            other = self.nodes.get(edge.other(nid))
            if other is not None:
                out.append(other)
        return out

    def degree(self, node: NodeRef) -> int:
        return len(self._incident.get(_node_id(node), []))

    def check_invariants(self) -> list[str]:
        """Describe every structural violation; an empty list means healthy."""
        problems: list[str] = []
        seen: set[frozenset[int]] = set()
        for edge in self.edges.values():
            if edge.a == edge.b:
                problems.append(f"edge {edge.id} is a self loop")
            for end in (edge.a, edge.b):
                if end not in self.nodes:
                    problems.append(f"edge {edge.id} references missing node {end}")
            if edge.pair in seen:
                problems.append(f"edge {edge.id} duplicates pair {sorted(edge.pair)}")
            seen.add(edge.pair)
            if len(edge.buffer_ab) != edge.delay or len(edge.buffer_ba) != edge.delay:
                problems.append(f"edge {edge.id} delay line length differs from delay")
        return problems
