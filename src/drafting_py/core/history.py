"""Snapshot-based undo/redo for a shape registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from drafting_py.core.models import Shape
    from drafting_py.registry.base import RegistryProtocol

logger = structlog.get_logger(__name__)

DEFAULT_MAX_UNDO_STEPS = 50


class SnapshotHistory:
    """Manages registry snapshots for undo/redo.

    Snapshots are stored in two stacks:
    - undo_stack: Registry states that can be restored by undo
    - redo_stack: Registry states that were undone and can be restored by redo

    Attributes:
        max_steps: Maximum number of snapshots kept on the undo stack.
    """

    def __init__(self, registry: RegistryProtocol, max_steps: int = DEFAULT_MAX_UNDO_STEPS) -> None:
        """Initialize the history.

        Args:
            registry: The registry whose state is captured and restored.
            max_steps: Maximum number of undo steps to keep.
        """
        self.registry = registry
        self.max_steps = max_steps
        self._undo_stack: list[tuple[Shape, ...]] = []
        self._redo_stack: list[tuple[Shape, ...]] = []

    def save_state(self, snapshot: tuple[Shape, ...] | None = None) -> None:
        """Record the registry contents from before a mutation.

        This clears the redo stack since a new action invalidates any
        previously undone states.

        Args:
            snapshot: State captured before a mutation that has since
                succeeded. Defaults to the current registry contents.
        """
        self._undo_stack.append(snapshot if snapshot is not None else self.registry.snapshot())
        self._redo_stack.clear()

        # Limit history size
        if len(self._undo_stack) > self.max_steps:
            self._undo_stack.pop(0)

    def undo(self) -> bool:
        """Restore the most recently saved state.

        Returns:
            True if a state was restored, False if there was nothing to undo.
        """
        if not self._undo_stack:
            return False
        self._redo_stack.append(self.registry.snapshot())
        self.registry.restore(self._undo_stack.pop())
        logger.info("Undo applied", undo_count=self.undo_count, redo_count=self.redo_count)
        return True

    def redo(self) -> bool:
        """Restore the most recently undone state.

        Returns:
            True if a state was restored, False if there was nothing to redo.
        """
        if not self._redo_stack:
            return False
        self._undo_stack.append(self.registry.snapshot())
        self.registry.restore(self._redo_stack.pop())
        logger.info("Redo applied", undo_count=self.undo_count, redo_count=self.redo_count)
        return True

    def can_undo(self) -> bool:
        """Check if there are states to undo."""
        return len(self._undo_stack) > 0

    def can_redo(self) -> bool:
        """Check if there are states to redo."""
        return len(self._redo_stack) > 0

    def clear(self) -> None:
        """Clear all history."""
        self._undo_stack.clear()
        self._redo_stack.clear()

    @property
    def undo_count(self) -> int:
        """Number of states that can be undone."""
        return len(self._undo_stack)

    @property
    def redo_count(self) -> int:
        """Number of states that can be redone."""
        return len(self._redo_stack)
