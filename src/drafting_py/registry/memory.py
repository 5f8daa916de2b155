"""In-memory shape registry for drafting-py."""

from __future__ import annotations

import threading
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

import structlog

from drafting_py.core.models import BoundingBox, Shape, shape_from_dict
from drafting_py.exceptions import (
    DuplicateShapeError,
    InvalidGeometryError,
    InvalidSnapshotError,
    ShapeNotFoundError,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = structlog.get_logger(__name__)


class ShapeRegistry:
    """Copy-on-write in-memory registry of drawing shapes.

    Shapes are kept in an immutable tuple that is swapped as a whole on every
    mutation, so a reader always sees either the state before or after a
    write. Writers serialize on a re-entrant lock. Every shape going in or
    coming out is copied to prevent external modification.

    Note:
        All data is lost when the process stops. Use ``ExportService`` to
        persist a drawing.

    Attributes:
        _shapes: Current immutable sequence of stored shapes.
        _lock: Re-entrant lock serializing writers.
    """

    def __init__(self, shapes: Sequence[Shape] | None = None) -> None:
        """Initialize the registry, optionally with initial shapes.

        Args:
            shapes: Shapes to add, in order.
        """
        self._shapes: tuple[Shape, ...] = ()
        self._lock = threading.RLock()
        for shape in shapes or ():
            self.add(shape)

    def add(self, shape: Shape) -> Shape:
        """Add a shape to the end of the registry.

        Args:
            shape: The shape to add.

        Returns:
            A copy of the stored shape.

        Raises:
            InvalidGeometryError: If the shape fails validation.
            DuplicateShapeError: If a shape with the same ID exists.
        """
        shape.validate()
        with self._lock:
            if any(existing.id == shape.id for existing in self._shapes):
                raise DuplicateShapeError(shape.id)
            self._shapes = (*self._shapes, shape.copy())
        logger.info("Shape added", shape_id=shape.id, shape_type=shape.shape_type.value, count=len(self._shapes))
        return shape.copy()

    def get(self, shape_id: str) -> Shape | None:
        """Retrieve a shape by its ID.

        Args:
            shape_id: The ID of the shape.

        Returns:
            A copy of the shape if found, None otherwise.
        """
        for shape in self._shapes:
            if shape.id == shape_id:
                return shape.copy()
        return None

    def update(self, shape: Shape) -> Shape:
        """Replace the stored shape that has the same ID.

        Args:
            shape: The shape with updated geometry.

        Returns:
            A copy of the updated shape.

        Raises:
            InvalidGeometryError: If the new geometry fails validation.
            ShapeNotFoundError: If no shape has that ID.
        """
        shape.validate()
        with self._lock:
            shapes = list(self._shapes)
            for index, existing in enumerate(shapes):
                if existing.id == shape.id:
                    shapes[index] = shape.copy()
                    break
            else:
                raise ShapeNotFoundError(shape.id)
            self._shapes = tuple(shapes)
        logger.info("Shape updated", shape_id=shape.id)
        return shape.copy()

    def remove(self, shape_id: str) -> bool:
        """Remove a shape from the registry.

        Args:
            shape_id: The ID of the shape to remove.

        Returns:
            True if the shape was removed, False if it did not exist.
        """
        with self._lock:
            remaining = tuple(shape for shape in self._shapes if shape.id != shape_id)
            if len(remaining) == len(self._shapes):
                return False
            self._shapes = remaining
        logger.info("Shape removed", shape_id=shape_id, count=len(remaining))
        return True

    def list_shapes(self) -> list[Shape]:
        """Return copies of all shapes in insertion order."""
        return [shape.copy() for shape in self._shapes]

    def clear(self) -> None:
        """Remove every shape."""
        with self._lock:
            self._shapes = ()
        logger.info("Registry cleared")

    def find_at_point(self, x: float, y: float, tolerance: float = 5.0) -> list[Shape]:
        """Find every shape hit at a point.

        Rectangles are hit anywhere inside their area; the other shapes only
        near their outline.

        Args:
            x: X-coordinate in world units.
            y: Y-coordinate in world units.
            tolerance: Maximum distance from the outline.

        Returns:
            Copies of the matching shapes, ordered by ascending ID.
        """
        hits = [shape.copy() for shape in self._shapes if shape.hit_test(x, y, tolerance)]
        return sorted(hits, key=lambda s: s.id)

    def find_in_rect(self, x: float, y: float, width: float, height: float) -> list[Shape]:
        """Find every shape touching an axis-aligned rectangle.

        Args:
            x: X-coordinate of one corner.
            y: Y-coordinate of one corner.
            width: Horizontal extent, may be negative.
            height: Vertical extent, may be negative.

        Returns:
            Copies of the matching shapes, ordered by ascending ID.
        """
        region = BoundingBox.from_corners(x, y, x + width, y + height)
        hits = [shape.copy() for shape in self._shapes if shape.intersects_rect(region)]
        return sorted(hits, key=lambda s: s.id)

    def snapshot(self) -> tuple[Shape, ...]:
        """Return copies of all shapes for later restore."""
        return tuple(shape.copy() for shape in self._shapes)

    def to_dicts(self) -> list[dict[str, Any]]:
        """Return every shape serialized, in insertion order."""
        return [shape.to_dict() for shape in self._shapes]

    def restore(self, shapes: Sequence[Shape | Mapping[str, Any]]) -> None:
        """Replace the whole registry contents.

        Args:
            shapes: Shapes or serialized shapes, in order.

        Raises:
            InvalidSnapshotError: If the payload is not a sequence, holds
                malformed or invalid shapes, or repeats an ID. The registry
                is left unchanged.
        """
        if isinstance(shapes, str | bytes | Mapping) or not isinstance(shapes, Sequence):
            logger.error("Snapshot rejected", reason="not a sequence", payload_type=type(shapes).__name__)
            msg = f"Snapshot must be a sequence of shapes, got {type(shapes).__name__}"
            raise InvalidSnapshotError(msg)

        restored: list[Shape] = []
        seen: set[str] = set()
        for item in shapes:
            shape = item.copy() if isinstance(item, Shape) else shape_from_dict(item)
            try:
                shape.validate()
            except InvalidGeometryError as e:
                logger.error("Snapshot rejected", reason=str(e), shape_id=shape.id)
                raise InvalidSnapshotError(str(e)) from e
            if shape.id in seen:
                logger.error("Snapshot rejected", reason="duplicate id", shape_id=shape.id)
                msg = f"Snapshot repeats shape ID {shape.id}"
                raise InvalidSnapshotError(msg)
            seen.add(shape.id)
            restored.append(shape)

        with self._lock:
            self._shapes = tuple(restored)
        logger.info("Registry restored", count=len(restored))

    def __len__(self) -> int:
        return len(self._shapes)

    def __iter__(self) -> Iterator[Shape]:
        return iter(self.snapshot())

    def __contains__(self, shape_id: object) -> bool:
        return any(shape.id == shape_id for shape in self._shapes)
