"""
Snapshot storage for serialized graphs.

A snapshot store maps a short key to graph JSON text, the way the editor
used browser local storage. Two backends are provided: an in-memory dict
and a directory of ``<key>.json`` files.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from waygraph.core.engine import GraphEngine
from waygraph.core.schema import SnapshotNotFoundError


logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


def validate_key(key: str) -> str:
    """Snapshot keys are restricted so they are safe as file names."""
    if not isinstance(key, str) or not _KEY_PATTERN.match(key) or key in {".", ".."}:
        raise ValueError(f"invalid snapshot key: {key!r}")
    return key


class SnapshotStore:
    """Interface for keyed snapshot text storage."""

    def get(self, key: str) -> str | None:
        raise NotImplementedError

    def put(self, key: str, text: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        raise NotImplementedError

    def keys(self) -> list[str]:
        raise NotImplementedError


class MemorySnapshotStore(SnapshotStore):
    """Simple in-memory snapshot store keyed by name."""

    def __init__(self):
        self._snapshots: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._snapshots.get(validate_key(key))

    def put(self, key: str, text: str) -> None:
        self._snapshots[validate_key(key)] = text

    def delete(self, key: str) -> bool:
        return self._snapshots.pop(validate_key(key), None) is not None

    def keys(self) -> list[str]:
        return list(self._snapshots)


class FileSnapshotStore(SnapshotStore):
    """Snapshot store writing one UTF-8 JSON file per key."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{validate_key(key)}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def put(self, key: str, text: str) -> None:
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)

        # replace() is atomic within one filesystem
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(text, encoding="utf-8")
        tmp_path.replace(path)

    def delete(self, key: str) -> bool:
        path = self._path(key)
        if not path.exists():
            return False
        path.unlink()
        return True

    def keys(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        return sorted(path.stem for path in self.directory.glob("*.json"))


def save_graph(engine: GraphEngine, store: SnapshotStore, key: str = "graph") -> None:
    """
    Serialize ``engine`` and store it under ``key``.

    Raises
    ------
    EncodeError
        If the graph cannot be serialized; nothing is written
    """
    store.put(key, engine.to_json())
    logger.info("Saved graph snapshot %r (%d nodes)", key, engine.number_of_nodes())


def load_graph(engine: GraphEngine, store: SnapshotStore, key: str = "graph") -> None:
    """
    Replace ``engine``'s graph with the snapshot stored under ``key``.

    Raises
    ------
    SnapshotNotFoundError
        If nothing is stored under ``key``
    DecodeError
        If the stored text is not a valid graph; ``engine`` is unchanged
    """
    text = store.get(key)
    if text is None:
        raise SnapshotNotFoundError(key)

    engine.load_json(text)
    logger.info("Loaded graph snapshot %r (%d nodes)", key, engine.number_of_nodes())
