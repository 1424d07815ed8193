"""
Graph Schema
============

Wire models and error types shared by the graph engine.

The persisted graph is a JSON object of two ordered lists:

    {
      "nodes": [[key, {"x": int, "y": int, "readyForPickup": bool}], ...],
      "edges": [[key, [[neighbor_key, weight], ...]], ...]
    }

Both directions of every edge are present. There is no version field;
anything that does not match this shape is rejected.
"""

import math
from typing import Any, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)


NodeKey = Union[StrictStr, StrictInt]
"""Opaque node identifier as it appears on the wire."""

READY_ATTR = "ready_for_pickup"
"""In-memory metadata field read by the nearest-match query."""

READY_WIRE_ATTR = "readyForPickup"
"""Wire name of :data:`READY_ATTR`."""


class GraphError(Exception):
    """Base class for graph engine errors."""


class DecodeError(GraphError, ValueError):
    """Raised when serialized graph text is malformed or inconsistent."""


class EncodeError(GraphError, ValueError):
    """Raised when a graph holds state that its wire form cannot represent."""


class SnapshotNotFoundError(GraphError, KeyError):
    """Raised when loading a snapshot key that has nothing stored."""


class NodeMetadata(BaseModel):
    """
    Wire form of a node's metadata.

    ``x`` and ``y`` are grid coordinates used only by the drawing layer.
    Unknown fields are kept so metadata stays an open record.
    """

    model_config = ConfigDict(extra="allow")

    x: StrictInt
    """Grid column."""

    y: StrictInt
    """Grid row."""

    ready_for_pickup: StrictBool = Field(alias=READY_WIRE_ATTR)
    """Whether the node has a car ready for pickup."""

    def to_attributes(self) -> dict[str, Any]:
        """Convert to the in-memory metadata mapping."""
        return self.model_dump(by_alias=False)


class GraphPayload(BaseModel):
    """Top-level wire document."""

    model_config = ConfigDict(extra="ignore")

    nodes: list[tuple[NodeKey, NodeMetadata]]
    """Node entries in iteration order."""

    edges: list[tuple[NodeKey, list[tuple[NodeKey, Union[StrictInt, StrictFloat]]]]]
    """Per-node adjacency lists in iteration order."""

    @field_validator("edges")
    @classmethod
    def _validate_weights(cls, value):
        """Weights must be finite and non-negative."""
        for key, neighbors in value:
            for neighbor, weight in neighbors:
                if not is_finite_number(weight):
                    raise ValueError(f"non-finite weight on edge {key!r} -> {neighbor!r}")
                if weight < 0:
                    raise ValueError(f"negative weight on edge {key!r} -> {neighbor!r}")
        return value


def is_finite_number(value) -> bool:
    """``math.isfinite`` that treats ints beyond float range as infinite."""
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def metadata_to_wire(metadata: dict[str, Any]) -> dict[str, Any]:
    """Rename in-memory metadata fields to their wire names."""
    return {
        (READY_WIRE_ATTR if name == READY_ATTR else name): value
        for name, value in metadata.items()
    }
