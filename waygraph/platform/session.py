"""
Editor Session
==============

Application state for the grid editor and the command dispatch that turns
gestures into engine calls.

The session owns the engine together with the UI state the drawing layer
reads: hovered cell, selection, last cheapest path, last nearest-ready
result. Nothing here is global; build one session per editor.

Key bindings:
- "X": clear the graph
- "Escape": clear path and nearest highlights
- "d": delete selected nodes
- "D": delete the edge between two selected nodes
- "e": connect two selected nodes, weighted by grid distance
- "p": cheapest path between two selected nodes
- "c": nearest ready nodes to one selected node
- "k": toggle the ready flag of one selected node
"""

from __future__ import annotations

import logging
from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Any, Optional

from waygraph.core.engine import GraphEngine
from waygraph.core.schema import READY_ATTR
from waygraph.platform.config import Settings
from waygraph.platform.grid import cell_from_point, cell_key, grid_weight
from waygraph.platform.storage import SnapshotStore, load_graph, save_graph


logger = logging.getLogger(__name__)

REQUIRED_SELECTION: dict[str, int] = {
    "D": 2,
    "e": 2,
    "p": 2,
    "c": 1,
    "k": 1,
}
"""Exact selection size each command needs."""

COMMAND_LABELS: dict[str, str] = {
    "X": "clear_graph",
    "Escape": "clear_highlights",
    "d": "delete_nodes",
    "D": "delete_edge",
    "e": "add_edge",
    "p": "cheapest_path",
    "c": "closest_ready",
    "k": "toggle_ready",
}


@dataclass
class CommandResult:
    """Outcome of one key command."""

    key: str
    command: str
    status: str
    reason: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def applied(self) -> bool:
        return self.status == "applied"

    def to_dict(self) -> dict[str, Any]:
        """Convert the result to a JSON-serializable dictionary."""
        return {
            "key": self.key,
            "command": self.command,
            "status": self.status,
            "reason": self.reason,
            "details": self.details,
        }


@dataclass
class EditorSession:
    """Engine plus the editor's UI state."""

    engine: GraphEngine = field(default_factory=GraphEngine)
    grid_size: int = 20
    nearest_count: int = 3
    snapshot_key: str = "graph"
    selection: dict[Hashable, None] = field(default_factory=dict)
    hovered: Optional[tuple[int, int]] = None
    cheapest_path: list[Hashable] = field(default_factory=list)
    closest: list[Hashable] = field(default_factory=list)

    @classmethod
    def from_settings(cls, settings: Settings, engine: Optional[GraphEngine] = None) -> "EditorSession":
        """Create a session configured from :class:`Settings`."""
        return cls(
            engine=engine if engine is not None else GraphEngine(),
            grid_size=settings.grid_size,
            nearest_count=settings.nearest_count,
            snapshot_key=settings.snapshot_key,
        )

    @property
    def selected(self) -> list[Hashable]:
        """Selected node keys in selection order."""
        return list(self.selection)

    # ------------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------------

    def hover(self, px: float, py: float) -> bool:
        """Track the cell under the pointer. Returns True if it changed."""
        cell = cell_from_point(px, py, self.grid_size)
        if cell == self.hovered:
            return False
        self.hovered = cell
        return True

    def click(self, px: float, py: float) -> str:
        """
        Select the node under the pointer, or create one on an empty cell.

        Creating a node clears the selection. Returns the cell's node key.
        """
        x, y = cell_from_point(px, py, self.grid_size)
        key = cell_key(x, y)

        if self.engine.has_node(key):
            self.selection[key] = None
        else:
            self.selection.clear()
            self.engine.add_node(key, {"x": x, "y": y, READY_ATTR: False})

        return key

    # ------------------------------------------------------------------
    # Keyboard input
    # ------------------------------------------------------------------

    def handle_key(self, key: str) -> CommandResult:
        """
        Run the command bound to ``key``.

        A command given the wrong number of selected nodes is rejected and
        the selection is kept. Every other key clears the selection
        afterwards, including unbound ones.
        """
        command = COMMAND_LABELS.get(key)
        if command is None:
            self.selection.clear()
            return CommandResult(key, "none", "ignored", "unbound_key")

        required = REQUIRED_SELECTION.get(key)
        if required is not None and len(self.selection) != required:
            logger.debug("Rejected %s: %d nodes selected", command, len(self.selection))
            return CommandResult(
                key,
                command,
                "rejected",
                "wrong_selection_size",
                {"required": required, "selected": len(self.selection)},
            )

        selected = self.selected
        result = getattr(self, f"_cmd_{command}")(key, command, selected)
        self.selection.clear()
        return result

    def _cmd_clear_graph(self, key, command, selected) -> CommandResult:
        removed = self.engine.number_of_nodes()
        self.engine.clear()
        return CommandResult(key, command, "applied", "graph_cleared", {"nodes_removed": removed})

    def _cmd_clear_highlights(self, key, command, selected) -> CommandResult:
        self.cheapest_path = []
        self.closest = []
        return CommandResult(key, command, "applied", "highlights_cleared")

    def _cmd_delete_nodes(self, key, command, selected) -> CommandResult:
        deleted = [node for node in selected if self.engine.delete_node(node)]
        if not deleted:
            return CommandResult(key, command, "skipped", "nothing_selected")
        return CommandResult(key, command, "applied", "nodes_deleted", {"nodes": deleted})

    def _cmd_delete_edge(self, key, command, selected) -> CommandResult:
        start, end = selected
        if not self.engine.delete_edge(start, end):
            return CommandResult(key, command, "skipped", "no_edge", {"start": start, "end": end})
        return CommandResult(key, command, "applied", "edge_deleted", {"start": start, "end": end})

    def _cmd_add_edge(self, key, command, selected) -> CommandResult:
        start, end = selected
        weight = grid_weight(self.engine.get_node(start), self.engine.get_node(end))
        self.engine.add_edge(start, end, weight)
        return CommandResult(
            key,
            command,
            "applied",
            "edge_added",
            {"start": start, "end": end, "weight": weight},
        )

    def _cmd_cheapest_path(self, key, command, selected) -> CommandResult:
        start, end = selected
        path = self.engine.find_cheapest_path(start, end)
        self.cheapest_path = list(path.nodes)
        if not path.found:
            return CommandResult(key, command, "skipped", path.status.value, path.to_dict())
        return CommandResult(key, command, "applied", "path_found", path.to_dict())

    def _cmd_closest_ready(self, key, command, selected) -> CommandResult:
        (start,) = selected
        self.closest = self.engine.find_closest_n_ready(start, self.nearest_count)
        return CommandResult(
            key,
            command,
            "applied",
            "closest_found",
            {"start": start, "nodes": list(self.closest)},
        )

    def _cmd_toggle_ready(self, key, command, selected) -> CommandResult:
        (node,) = selected
        ready = not self.engine.get_node(node).get(READY_ATTR, False)
        self.engine.update_node(node, {READY_ATTR: ready})
        return CommandResult(key, command, "applied", "ready_toggled", {"node": node, "ready": ready})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, store: SnapshotStore) -> None:
        """Save the graph under the session's snapshot key."""
        save_graph(self.engine, store, self.snapshot_key)

    def load(self, store: SnapshotStore) -> None:
        """
        Load the graph from the session's snapshot key.

        On success the selection and highlights are reset, since they may
        name nodes that no longer exist. Errors propagate and leave the
        session as it was.
        """
        load_graph(self.engine, store, self.snapshot_key)
        self.selection.clear()
        self.cheapest_path = []
        self.closest = []
