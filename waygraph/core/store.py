"""
Graph Store
===========

Node and adjacency storage for the weighted graph engine.

Key Design Principles:
1. Edges are undirected; both directions always carry the same weight
2. Iteration order is insertion order and is part of the contract
3. Edges never create nodes; a missing endpoint makes a mutation a no-op
4. Missing nodes are reported through return values, never exceptions
"""

from collections.abc import Hashable, Iterator, Mapping
import logging
from numbers import Real
from typing import Any, Optional

import networkx as nx

from waygraph.core.schema import is_finite_number


logger = logging.getLogger(__name__)

WEIGHT_ATTR = "weight"


def validate_weight(weight: Any) -> float:
    """Return ``weight`` if it is a finite, non-negative number."""
    if isinstance(weight, bool) or not isinstance(weight, Real):
        raise ValueError(f"edge weight must be a number, got {type(weight).__name__}")
    if not is_finite_number(weight):
        raise ValueError(f"edge weight must be finite, got {weight!r}")
    if weight < 0:
        raise ValueError(f"edge weight must be non-negative, got {weight!r}")
    return weight


class GraphStore:
    """
    An undirected weighted graph of opaque node keys with open metadata.

    The store wraps a ``networkx.Graph``. Its adjacency shares one attribute
    record between ``u -> v`` and ``v -> u``, so a weight can never differ
    between the two directions.

    Example
    -------
    >>> store = GraphStore()
    >>> store.add_node("A", {"x": 0, "y": 0, "ready_for_pickup": False})
    >>> store.add_node("B", {"x": 1, "y": 0, "ready_for_pickup": True})
    >>> store.add_edge("A", "B", 3)
    True
    >>> store.neighbors("B")
    {'A': 3}
    """

    def __init__(self):
        self._graph = nx.Graph()

    @property
    def graph(self) -> nx.Graph:
        """Read-only networkx view of the current state."""
        return self._graph.copy(as_view=True)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_node(self, key: Hashable, metadata: Mapping[str, Any]) -> None:
        """
        Insert a node, or replace an existing one.

        Replacing is destructive: the node's metadata becomes ``metadata``
        and every edge touching it is removed from both endpoints. The node
        keeps its position in iteration order.

        Parameters
        ----------
        key : hashable
            Unique node identifier
        metadata : mapping
            Node attributes, copied into the store
        """
        attrs = dict(metadata)

        if key in self._graph:
            self._graph.remove_edges_from(list(self._graph.edges(key)))
            existing = self._graph.nodes[key]
            existing.clear()
            existing.update(attrs)
            logger.debug("Replaced node %r", key)
            return

        self._graph.add_node(key, **attrs)
        logger.debug("Added node %r", key)

    def add_edge(self, start: Hashable, end: Hashable, weight: float) -> bool:
        """
        Set the weight of the edge between two existing nodes.

        Returns
        -------
        bool
            False if either node is missing (nothing changes)

        Raises
        ------
        ValueError
            If ``weight`` is negative, non-finite or not a number
        """
        validate_weight(weight)

        if not self.has_node(start) or not self.has_node(end):
            logger.debug("Skipped edge %r-%r: node not found", start, end)
            return False

        self._graph.add_edge(start, end, **{WEIGHT_ATTR: weight})
        return True

    def delete_edge(self, start: Hashable, end: Hashable) -> bool:
        """Remove the edge between two nodes. Returns False if there was none."""
        if not self.has_node(start) or not self.has_node(end):
            return False

        if not self._graph.has_edge(start, end):
            return False

        self._graph.remove_edge(start, end)
        return True

    def delete_node(self, key: Hashable) -> bool:
        """Remove a node and every edge referencing it. Returns False if absent."""
        if not self.has_node(key):
            return False

        self._graph.remove_node(key)
        logger.debug("Deleted node %r", key)
        return True

    def update_node(self, key: Hashable, metadata: Mapping[str, Any]) -> None:
        """
        Merge ``metadata`` over a node's existing fields.

        An unknown key creates a node whose metadata is exactly ``metadata``,
        with no edges.
        """
        if not self.has_node(key):
            self._graph.add_node(key, **dict(metadata))
            logger.debug("Created node %r from update", key)
            return

        self._graph.nodes[key].update(metadata)

    def clear(self) -> None:
        """Remove every node and edge."""
        self._graph.clear()

    def replace_with(self, other: "GraphStore") -> None:
        """Take over ``other``'s state in a single assignment."""
        self._graph = other._graph

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def has_node(self, key: Hashable) -> bool:
        """Check whether a node exists."""
        return key in self._graph

    def __contains__(self, key: Hashable) -> bool:
        return self.has_node(key)

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def number_of_nodes(self) -> int:
        return self._graph.number_of_nodes()

    def number_of_edges(self) -> int:
        """Number of undirected edges (each pair counted once)."""
        return self._graph.number_of_edges()

    def node_keys(self) -> list[Hashable]:
        """Node keys in iteration order."""
        return list(self._graph.nodes)

    def get_node(self, key: Hashable) -> Optional[dict[str, Any]]:
        """Copy of a node's metadata, or None if absent."""
        if not self.has_node(key):
            return None
        return dict(self._graph.nodes[key])

    def iter_nodes(self) -> Iterator[tuple[Hashable, dict[str, Any]]]:
        """Yield ``(key, metadata)`` pairs in iteration order."""
        for key, attrs in self._graph.nodes(data=True):
            yield key, dict(attrs)

    def neighbors(self, key: Hashable) -> dict[Hashable, float]:
        """Neighbor to weight mapping for a node (empty if absent)."""
        if not self.has_node(key):
            return {}
        return {
            neighbor: data[WEIGHT_ATTR]
            for neighbor, data in self._graph.adj[key].items()
        }

    def adjacency(self) -> Iterator[tuple[Hashable, dict[Hashable, float]]]:
        """Yield ``(key, {neighbor: weight})`` for every node in order."""
        for key in self._graph.nodes:
            yield key, self.neighbors(key)

    def iter_edges(self) -> Iterator[tuple[Hashable, Hashable, float]]:
        """Yield each undirected edge once as ``(u, v, weight)``."""
        for u, v, weight in self._graph.edges(data=WEIGHT_ATTR):
            yield u, v, weight

    def edge_weight(self, start: Hashable, end: Hashable) -> Optional[float]:
        """Weight of the edge between two nodes, or None."""
        if not self.has_node(start) or not self._graph.has_edge(start, end):
            return None
        return self._graph[start][end][WEIGHT_ATTR]

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(nodes={self._graph.number_of_nodes()}, "
            f"edges={self._graph.number_of_edges()})"
        )
