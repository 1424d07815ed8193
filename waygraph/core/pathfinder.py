"""
Pathfinder
==========

Dijkstra-based queries over a :class:`~waygraph.core.store.GraphStore`.

Both queries share one shortest-path core. The core selects the next node
by a linear scan of the unvisited set, so a run costs O(V^2). That is fine
for a few hundred nodes, and it gives a fixed tie-break: among equally
distant candidates, the node inserted first wins. Results are therefore
reproducible for a given construction order.
"""

from collections.abc import Callable, Hashable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
import logging
import math
from typing import Any, Optional

from waygraph.core.schema import READY_ATTR
from waygraph.core.store import GraphStore


logger = logging.getLogger(__name__)

DEFAULT_NEAREST_COUNT = 5

NodePredicate = Callable[[Mapping[str, Any]], bool]


class PathStatus(str, Enum):
    """Outcome of a cheapest-path query."""

    FOUND = "found"
    """A path exists; ``nodes`` runs from start to end inclusive."""

    UNREACHABLE = "unreachable"
    """Both nodes exist but no chain of edges connects them."""

    NODE_NOT_FOUND = "node_not_found"
    """The start or end key is not in the graph."""


@dataclass
class PathResult:
    """Result of :func:`find_cheapest_path`."""

    start: Hashable
    end: Hashable
    status: PathStatus
    nodes: list[Hashable] = field(default_factory=list)
    cost: float = math.inf

    @property
    def found(self) -> bool:
        return self.status == PathStatus.FOUND

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def to_dict(self) -> dict[str, Any]:
        """Convert the result to a JSON-serializable dictionary."""
        return {
            "start": self.start,
            "end": self.end,
            "status": self.status.value,
            "nodes": list(self.nodes),
            "cost": self.cost if self.found else None,
        }


def is_ready(metadata: Mapping[str, Any]) -> bool:
    """Default nearest-match predicate: the node has a car ready for pickup."""
    return bool(metadata.get(READY_ATTR, False))


def shortest_distances(
    store: GraphStore,
    start: Hashable,
    stop_at: Optional[Hashable] = None,
) -> tuple[dict[Hashable, float], dict[Hashable, Hashable]]:
    """
    Run Dijkstra from ``start``.

    Parameters
    ----------
    store : GraphStore
        Graph to search
    start : hashable
        Source node; must exist
    stop_at : hashable, optional
        Stop as soon as this node is selected, before relaxing its edges

    Returns
    -------
    tuple[dict, dict]
        ``(distances, previous)``. Unreached nodes keep ``math.inf`` and
        have no entry in ``previous``.
    """
    distances = {key: math.inf for key in store.node_keys()}
    distances[start] = 0
    previous: dict[Hashable, Hashable] = {}

    # insertion-ordered; min() keeps the first of equal candidates
    unvisited = dict.fromkeys(distances)

    while unvisited:
        current = min(unvisited, key=distances.__getitem__)
        if current == stop_at:
            break

        for neighbor, weight in store.neighbors(current).items():
            if neighbor not in unvisited:
                continue
            candidate = distances[current] + weight
            if candidate < distances[neighbor]:
                distances[neighbor] = candidate
                previous[neighbor] = current

        del unvisited[current]

    return distances, previous


def find_cheapest_path(store: GraphStore, start: Hashable, end: Hashable) -> PathResult:
    """
    Find the cheapest path between two nodes.

    Returns
    -------
    PathResult
        ``FOUND`` with the node sequence and total weight, ``UNREACHABLE``
        when ``end`` cannot be reached, or ``NODE_NOT_FOUND``
    """
    if not store.has_node(start) or not store.has_node(end):
        logger.debug("Path %r -> %r: node not found", start, end)
        return PathResult(start=start, end=end, status=PathStatus.NODE_NOT_FOUND)

    distances, previous = shortest_distances(store, start, stop_at=end)

    if math.isinf(distances[end]):
        logger.debug("Path %r -> %r: unreachable", start, end)
        return PathResult(start=start, end=end, status=PathStatus.UNREACHABLE)

    path = [end]
    while path[-1] != start:
        path.append(previous[path[-1]])
    path.reverse()

    return PathResult(
        start=start,
        end=end,
        status=PathStatus.FOUND,
        nodes=path,
        cost=distances[end],
    )


def find_closest_n(
    store: GraphStore,
    start: Hashable,
    predicate: NodePredicate,
    n: int = DEFAULT_NEAREST_COUNT,
) -> list[Hashable]:
    """
    Find up to ``n`` nodes matching ``predicate``, nearest to ``start`` first.

    Candidates are taken in node order and stable-sorted by distance, so
    equally distant nodes keep their insertion order. ``start`` itself is a
    candidate at distance 0. Matching nodes that cannot be reached rank
    after every reachable one.
    """
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")

    if not store.has_node(start):
        return []

    distances, _ = shortest_distances(store, start)

    candidates = [key for key, metadata in store.iter_nodes() if predicate(metadata)]
    candidates.sort(key=distances.__getitem__)

    return candidates[:n]


def find_closest_n_ready(
    store: GraphStore,
    start: Hashable,
    n: int = DEFAULT_NEAREST_COUNT,
) -> list[Hashable]:
    """Find up to ``n`` nodes ready for pickup, nearest to ``start`` first."""
    return find_closest_n(store, start, is_ready, n)
