"""
Tests for the Editor Session
============================

Pointer and key commands driving the engine, plus snapshot save/load.
"""

import pytest

from waygraph.core.engine import GraphEngine
from waygraph.core.schema import SnapshotNotFoundError
from waygraph.platform.config import Settings
from waygraph.platform.session import EditorSession
from waygraph.platform.storage import MemorySnapshotStore


GRID = 20


def px(cell: int) -> int:
    """Pixel coordinate inside the given cell."""
    return cell * GRID + GRID // 2


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def session() -> EditorSession:
    """
    Session with three nodes placed by clicking:

        "0,0"   "3,4"   "6,0"
    """
    session = EditorSession(grid_size=GRID, nearest_count=2)
    session.click(px(0), px(0))
    session.click(px(3), px(4))
    session.click(px(6), px(0))
    return session


def select(session: EditorSession, *cells) -> None:
    for x, y in cells:
        session.click(px(x), px(y))


# =============================================================================
# Pointer Tests
# =============================================================================

class TestPointer:
    """Tests for click() and hover()."""

    def test_click_empty_cell_adds_node(self):
        session = EditorSession(grid_size=GRID)
        key = session.click(45, 67)

        assert key == "2,3"
        assert session.engine.get_node("2,3") == {"x": 2, "y": 3, "ready_for_pickup": False}
        assert session.selected == []

    def test_click_existing_node_selects_it(self, session):
        select(session, (0, 0), (3, 4))
        assert session.selected == ["0,0", "3,4"]

    def test_click_empty_cell_clears_selection(self, session):
        select(session, (0, 0))
        session.click(px(9), px(9))

        assert session.selected == []
        assert session.engine.has_node("9,9")

    def test_hover_reports_changes(self, session):
        assert session.hover(5, 5) is True
        assert session.hover(7, 9) is False
        assert session.hover(25, 5) is True
        assert session.hovered == (1, 0)


# =============================================================================
# Key Command Tests
# =============================================================================

class TestKeyCommands:
    """Tests for handle_key()."""

    def test_add_edge_uses_grid_weight(self, session):
        select(session, (0, 0), (3, 4))
        result = session.handle_key("e")

        assert result.applied
        assert result.details["weight"] == 5
        assert session.engine.edge_weight("3,4", "0,0") == 5
        assert session.selected == []

    def test_wrong_selection_size_is_rejected(self, session):
        select(session, (0, 0))
        result = session.handle_key("e")

        assert result.status == "rejected"
        assert result.reason == "wrong_selection_size"
        assert result.details == {"required": 2, "selected": 1}
        assert session.selected == ["0,0"]

    def test_cheapest_path(self, session):
        select(session, (0, 0), (3, 4))
        session.handle_key("e")
        select(session, (3, 4), (6, 0))
        session.handle_key("e")
        select(session, (0, 0), (6, 0))
        session.handle_key("e")

        select(session, (0, 0), (6, 0))
        result = session.handle_key("p")

        # direct edge weighs 6, the detour through "3,4" weighs 10
        assert result.applied
        assert session.cheapest_path == ["0,0", "6,0"]
        assert result.details["cost"] == 6

    def test_cheapest_path_unreachable(self, session):
        select(session, (0, 0), (6, 0))
        result = session.handle_key("p")

        assert result.status == "skipped"
        assert result.reason == "unreachable"
        assert session.cheapest_path == []

    def test_toggle_ready_and_closest(self, session):
        for cell in [(3, 4), (6, 0)]:
            select(session, cell)
            assert session.handle_key("k").details["ready"] is True

        select(session, (0, 0), (3, 4))
        session.handle_key("e")
        select(session, (3, 4), (6, 0))
        session.handle_key("e")

        select(session, (0, 0))
        result = session.handle_key("c")

        assert result.applied
        assert session.closest == ["3,4", "6,0"]

    def test_toggle_ready_twice_restores(self, session):
        select(session, (0, 0))
        session.handle_key("k")
        select(session, (0, 0))
        session.handle_key("k")

        assert session.engine.get_node("0,0")["ready_for_pickup"] is False

    def test_escape_clears_highlights(self, session):
        session.cheapest_path = ["0,0"]
        session.closest = ["3,4"]

        assert session.handle_key("Escape").applied
        assert session.cheapest_path == []
        assert session.closest == []

    def test_delete_selected_nodes(self, session):
        select(session, (0, 0), (3, 4))
        session.handle_key("e")
        select(session, (0, 0), (6, 0))
        result = session.handle_key("d")

        assert result.details["nodes"] == ["0,0", "6,0"]
        assert session.engine.node_keys() == ["3,4"]
        assert session.engine.neighbors("3,4") == {}

    def test_delete_with_empty_selection(self, session):
        assert session.handle_key("d").status == "skipped"
        assert len(session.engine) == 3

    def test_delete_edge(self, session):
        select(session, (0, 0), (3, 4))
        session.handle_key("e")
        select(session, (3, 4), (0, 0))
        result = session.handle_key("D")

        assert result.applied
        assert session.engine.number_of_edges() == 0

        select(session, (3, 4), (0, 0))
        assert session.handle_key("D").reason == "no_edge"

    def test_clear_graph(self, session):
        result = session.handle_key("X")

        assert result.details == {"nodes_removed": 3}
        assert len(session.engine) == 0

    def test_unbound_key_clears_selection(self, session):
        select(session, (0, 0))
        result = session.handle_key("q")

        assert result.status == "ignored"
        assert session.selected == []


# =============================================================================
# Persistence Tests
# =============================================================================

class TestSessionPersistence:
    """Tests for save() / load()."""

    def test_save_and_load(self, session):
        store = MemorySnapshotStore()
        session.save(store)

        other = EditorSession(grid_size=GRID)
        other.selection["stale"] = None
        other.cheapest_path = ["stale"]
        other.load(store)

        assert other.engine.node_keys() == ["0,0", "3,4", "6,0"]
        assert other.selected == []
        assert other.cheapest_path == []

    def test_load_without_snapshot(self, session):
        with pytest.raises(SnapshotNotFoundError):
            session.load(MemorySnapshotStore())
        assert len(session.engine) == 3

    def test_from_settings(self):
        settings = Settings.from_env({"WAYGRAPH_GRID_SIZE": "10", "WAYGRAPH_SNAPSHOT_KEY": "lot"})
        engine = GraphEngine()
        session = EditorSession.from_settings(settings, engine)

        assert session.engine is engine
        assert session.grid_size == 10
        assert session.snapshot_key == "lot"
        assert session.nearest_count == 3
