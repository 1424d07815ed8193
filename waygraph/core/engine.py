"""
Graph Engine
============

The object collaborators hold: node/edge CRUD from :class:`GraphStore`
plus the path queries and the JSON codec.
"""

from collections.abc import Hashable
from typing import Optional

from waygraph.core import codec, pathfinder
from waygraph.core.pathfinder import DEFAULT_NEAREST_COUNT, NodePredicate, PathResult
from waygraph.core.store import GraphStore


class GraphEngine(GraphStore):
    """
    Weighted graph with cheapest-path and nearest-ready queries.

    Example
    -------
    >>> engine = GraphEngine()
    >>> engine.add_node("A", {"x": 0, "y": 0, "ready_for_pickup": False})
    >>> engine.add_node("B", {"x": 1, "y": 0, "ready_for_pickup": True})
    >>> engine.add_node("C", {"x": 2, "y": 0, "ready_for_pickup": True})
    >>> engine.add_edge("A", "B", 3)
    True
    >>> engine.add_edge("B", "C", 4)
    True
    >>> engine.add_edge("A", "C", 10)
    True
    >>> engine.find_cheapest_path("A", "C").nodes
    ['A', 'B', 'C']
    >>> engine.find_closest_n_ready("A", 1)
    ['B']
    """

    def find_cheapest_path(self, start: Hashable, end: Hashable) -> PathResult:
        """Cheapest path from ``start`` to ``end``; see :func:`pathfinder.find_cheapest_path`."""
        return pathfinder.find_cheapest_path(self, start, end)

    def find_closest_n_ready(
        self,
        start: Hashable,
        n: int = DEFAULT_NEAREST_COUNT,
    ) -> list[Hashable]:
        """Up to ``n`` ready-for-pickup nodes, nearest to ``start`` first."""
        return pathfinder.find_closest_n_ready(self, start, n)

    def find_closest_n(
        self,
        start: Hashable,
        predicate: NodePredicate,
        n: int = DEFAULT_NEAREST_COUNT,
    ) -> list[Hashable]:
        """Up to ``n`` nodes matching ``predicate``, nearest to ``start`` first."""
        return pathfinder.find_closest_n(self, start, predicate, n)

    def shortest_distances(self, start: Hashable) -> Optional[dict[Hashable, float]]:
        """Distance from ``start`` to every node, or None if ``start`` is absent."""
        if not self.has_node(start):
            return None
        distances, _ = pathfinder.shortest_distances(self, start)
        return distances

    def to_json(self) -> str:
        """Serialize the graph to JSON text. Raises ``EncodeError`` if it cannot be."""
        return codec.serialize(self)

    def load_json(self, text: str) -> None:
        """Replace the graph with one decoded from ``text`` (fail-closed)."""
        codec.deserialize(self, text)
