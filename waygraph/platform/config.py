"""
Environment-driven settings for the editor platform layer.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


LOG_FORMAT = "[%(name)s] %(levelname)s %(message)s"


@dataclass(frozen=True)
class Settings:
    """Runtime settings, normally read from the environment or a .env file."""

    storage_dir: Path = Path(".waygraph")
    """Directory used by the file-backed snapshot store."""

    snapshot_key: str = "graph"
    """Key the editor saves to and loads from."""

    nearest_count: int = 3
    """How many ready nodes the nearest query returns in the editor."""

    grid_size: int = 20
    """Cell size in pixels for pointer-to-cell mapping."""

    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Build settings from ``WAYGRAPH_*`` variables.

        With no explicit mapping, a ``.env`` file is loaded first and
        ``os.environ`` is used.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        defaults = cls()
        log_level = environ.get("WAYGRAPH_LOG_LEVEL", defaults.log_level).upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"WAYGRAPH_LOG_LEVEL: unknown level {log_level!r}")

        return cls(
            storage_dir=Path(environ.get("WAYGRAPH_STORAGE_DIR", str(defaults.storage_dir))),
            snapshot_key=environ.get("WAYGRAPH_SNAPSHOT_KEY", defaults.snapshot_key),
            nearest_count=_positive_int(environ, "WAYGRAPH_NEAREST_COUNT", defaults.nearest_count),
            grid_size=_positive_int(environ, "WAYGRAPH_GRID_SIZE", defaults.grid_size),
            log_level=log_level,
        )


def configure_logging(settings: Settings) -> None:
    """Install a root handler at the configured level."""
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)


def _positive_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default

    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name}: expected an integer, got {raw!r}") from exc

    if value <= 0:
        raise ValueError(f"{name}: must be positive, got {value}")
    return value
