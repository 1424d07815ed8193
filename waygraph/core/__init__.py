"""
Waygraph Core: Weighted Graph Engine
====================================

An in-memory undirected weighted graph with Dijkstra queries and a
fail-closed JSON codec.

Public API:
- GraphEngine: The main engine class (store + queries + codec)
- GraphStore: Node and adjacency CRUD
- PathResult / PathStatus: Cheapest-path outcome
- DecodeError: Raised for malformed serialized graphs
- EncodeError: Raised when a graph cannot be written to the wire shape
"""

from waygraph.core.schema import (
    DecodeError,
    EncodeError,
    GraphError,
    NodeMetadata,
    SnapshotNotFoundError,
)
from waygraph.core.store import GraphStore
from waygraph.core.pathfinder import (
    PathResult,
    PathStatus,
    find_cheapest_path,
    find_closest_n,
    find_closest_n_ready,
    shortest_distances,
)
from waygraph.core.codec import serialize, deserialize
from waygraph.core.engine import GraphEngine

__all__ = [
    "GraphEngine",
    "GraphStore",
    "PathResult",
    "PathStatus",
    "find_cheapest_path",
    "find_closest_n",
    "find_closest_n_ready",
    "shortest_distances",
    "serialize",
    "deserialize",
    "NodeMetadata",
    "GraphError",
    "DecodeError",
    "EncodeError",
    "SnapshotNotFoundError",
]
