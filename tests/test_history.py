"""Tests for snapshot undo/redo."""

from __future__ import annotations

from drafting_py.core.history import SnapshotHistory
from drafting_py.core.models import Circle, Line
from drafting_py.registry.memory import ShapeRegistry


class TestSnapshotHistory:
    """Tests for the SnapshotHistory class."""

    def test_empty_history(self, registry: ShapeRegistry) -> None:
        """Test nothing to undo or redo initially."""
        history = SnapshotHistory(registry)
        assert not history.can_undo()
        assert not history.can_redo()
        assert history.undo() is False
        assert history.redo() is False

    def test_undo_restores_previous_state(self, registry: ShapeRegistry) -> None:
        """Test undo brings back the saved shapes."""
        history = SnapshotHistory(registry)
        history.save_state()
        registry.add(Line(0, 0, 10, 0, id="first"))

        assert history.undo() is True
        assert len(registry) == 0
        assert history.can_redo()

    def test_redo_reapplies(self, registry: ShapeRegistry) -> None:
        """Test redo restores the undone state."""
        history = SnapshotHistory(registry)
        history.save_state()
        registry.add(Line(0, 0, 10, 0, id="first"))
        history.undo()

        assert history.redo() is True
        assert [s.id for s in registry] == ["first"]
        assert history.undo_count == 1
        assert history.redo_count == 0

    def test_save_clears_redo(self, registry: ShapeRegistry) -> None:
        """Test a new action invalidates redo."""
        history = SnapshotHistory(registry)
        history.save_state()
        registry.add(Line(0, 0, 10, 0))
        history.undo()

        history.save_state()
        registry.add(Circle(0, 0, 5))
        assert not history.can_redo()

    def test_undo_restores_modified_geometry(self, registry: ShapeRegistry) -> None:
        """Test undo reverts an update, not just an add."""
        line = registry.add(Line(0, 0, 10, 0, id="edited"))
        history = SnapshotHistory(registry)
        history.save_state()
        registry.update(line.translate(5, 5))

        history.undo()
        assert registry.get("edited").equals(line)

    def test_max_steps(self, registry: ShapeRegistry) -> None:
        """Test the oldest states are dropped beyond the limit."""
        history = SnapshotHistory(registry, max_steps=3)
        for i in range(5):
            history.save_state()
            registry.add(Line(0, 0, 10, i + 1, id=f"line_{i}"))

        assert history.undo_count == 3
        while history.undo():
            pass
        assert [s.id for s in registry] == ["line_0", "line_1"]

    def test_save_earlier_state(self, registry: ShapeRegistry) -> None:
        """Test a state captured before a mutation is what undo restores."""
        history = SnapshotHistory(registry)
        before = registry.snapshot()
        registry.add(Line(0, 0, 10, 0, id="added"))
        history.save_state(before)

        assert history.undo()
        assert len(registry) == 0
        assert history.redo()
        assert registry.get("added") is not None

    def test_clear(self, registry: ShapeRegistry) -> None:
        """Test clearing both stacks."""
        history = SnapshotHistory(registry)
        history.save_state()
        history.save_state()
        history.undo()
        history.clear()
        assert history.undo_count == 0
        assert history.redo_count == 0
