"""
Platform layer around the engine: settings, grid helpers, snapshot storage
and the editor session.
"""

from waygraph.platform.config import Settings, configure_logging
from waygraph.platform.grid import cell_from_point, cell_key, grid_weight
from waygraph.platform.storage import (
    FileSnapshotStore,
    MemorySnapshotStore,
    SnapshotStore,
    load_graph,
    save_graph,
)
from waygraph.platform.session import CommandResult, EditorSession

__all__ = [
    "Settings",
    "configure_logging",
    "cell_key",
    "cell_from_point",
    "grid_weight",
    "SnapshotStore",
    "MemorySnapshotStore",
    "FileSnapshotStore",
    "save_graph",
    "load_graph",
    "CommandResult",
    "EditorSession",
]
