"""
Graph Codec
===========

JSON serialization of a :class:`~waygraph.core.store.GraphStore`.

Decoding is fail-closed. The text is parsed and validated, then rebuilt
into a detached staging store. The live store takes over the staged state
only after the whole rebuild succeeds. Any error leaves the live graph
exactly as it was.
"""

import json
import logging

from pydantic import ValidationError

from waygraph.core.schema import DecodeError, EncodeError, GraphPayload, metadata_to_wire
from waygraph.core.store import GraphStore


logger = logging.getLogger(__name__)


def serialize(store: GraphStore) -> str:
    """
    Serialize the graph to JSON text.

    Nodes and adjacency lists are written in iteration order. Every edge
    appears twice, once under each endpoint.

    Raises
    ------
    EncodeError
        If the graph holds something the wire shape cannot carry, such as
        a node missing integer ``x``/``y`` or a boolean ready flag.
        Any text returned here is accepted by :func:`deserialize`.
    """
    nodes = [
        [key, metadata_to_wire(metadata)]
        for key, metadata in store.iter_nodes()
    ]
    edges = [
        [key, [[neighbor, weight] for neighbor, weight in neighbors.items()]]
        for key, neighbors in store.adjacency()
    ]
    document = {"nodes": nodes, "edges": edges}

    try:
        GraphPayload.model_validate(document)
        return json.dumps(document)
    except ValidationError as exc:
        logger.warning("Refused to serialize graph: %d validation errors", exc.error_count())
        raise EncodeError(f"graph cannot be serialized: {exc}") from exc
    except (TypeError, ValueError) as exc:
        logger.warning("Refused to serialize graph: %s", exc)
        raise EncodeError(f"graph cannot be serialized: {exc}") from exc


def deserialize(store: GraphStore, text: str) -> None:
    """
    Replace the contents of ``store`` with the graph encoded in ``text``.

    Raises
    ------
    DecodeError
        If the text is not valid JSON, does not match the wire shape, or
        describes an inconsistent graph. ``store`` is left untouched.
    """
    staged = decode(text)
    store.replace_with(staged)
    logger.debug(
        "Loaded graph with %d nodes, %d edges",
        staged.number_of_nodes(),
        staged.number_of_edges(),
    )


def decode(text: str) -> GraphStore:
    """Decode ``text`` into a new, detached store."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError, RecursionError) as exc:
        logger.warning("Rejected graph text: %s", exc)
        raise DecodeError(f"graph text is not valid JSON: {exc}") from exc

    try:
        payload = GraphPayload.model_validate(data)
    except ValidationError as exc:
        logger.warning("Rejected graph payload: %d validation errors", exc.error_count())
        raise DecodeError(f"invalid graph payload: {exc}") from exc

    staged = GraphStore()
    for key, metadata in payload.nodes:
        staged.add_node(key, metadata.to_attributes())

    adjacency = {key: dict(neighbors) for key, neighbors in payload.edges}
    _check_adjacency(staged, adjacency)

    for key, neighbors in adjacency.items():
        for neighbor, weight in neighbors.items():
            staged.add_edge(key, neighbor, weight)

    return staged


def _check_adjacency(staged: GraphStore, adjacency: dict) -> None:
    """Every adjacency entry must name known nodes and have a matching reverse entry."""
    for key, neighbors in adjacency.items():
        if not staged.has_node(key):
            raise _reject(f"edge list for unknown node {key!r}")

        for neighbor, weight in neighbors.items():
            if not staged.has_node(neighbor):
                raise _reject(f"edge {key!r} -> {neighbor!r} references an unknown node")

            reverse = adjacency.get(neighbor, {}).get(key)
            if reverse is None or reverse != weight:
                raise _reject(
                    f"edge {key!r} -> {neighbor!r} has no matching reverse entry "
                    f"(weight {weight!r}, reverse {reverse!r})"
                )


def _reject(message: str) -> DecodeError:
    logger.warning("Rejected graph payload: %s", message)
    return DecodeError(message)
