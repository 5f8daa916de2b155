"""Registry protocol definition for drafting-py."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from drafting_py.core.models import Shape


@runtime_checkable
class RegistryProtocol(Protocol):
    """Protocol defining the shape registry interface.

    A registry is the ordered in-memory collection of every shape in a drawing.
    Implementations hand out copies, never their stored instances.
    """

    def add(self, shape: Shape) -> Shape:
        """Add a validated shape.

        Args:
            shape: The shape to add.

        Returns:
            A copy of the stored shape.

        Raises:
            InvalidGeometryError: If the shape fails validation.
            DuplicateShapeError: If a shape with the same ID exists.
        """
        ...

    def get(self, shape_id: str) -> Shape | None:
        """Retrieve a shape by its ID.

        Returns:
            A copy of the shape if found, None otherwise.
        """
        ...

    def update(self, shape: Shape) -> Shape:
        """Replace the stored shape that has the same ID.

        Raises:
            ShapeNotFoundError: If no shape has that ID.
        """
        ...

    def remove(self, shape_id: str) -> bool:
        """Remove a shape.

        Returns:
            True if the shape was removed, False if it did not exist.
        """
        ...

    def list_shapes(self) -> list[Shape]:
        """Return copies of all shapes in insertion order."""
        ...

    def clear(self) -> None:
        """Remove every shape."""
        ...

    def find_at_point(self, x: float, y: float, tolerance: float = 5.0) -> list[Shape]:
        """Return shapes hit at a point, ordered by ascending ID."""
        ...

    def find_in_rect(self, x: float, y: float, width: float, height: float) -> list[Shape]:
        """Return shapes touching a rectangle, ordered by ascending ID."""
        ...

    def snapshot(self) -> tuple[Shape, ...]:
        """Return copies of all shapes for later restore."""
        ...

    def restore(self, shapes: Sequence[Shape | dict[str, Any]]) -> None:
        """Replace the whole registry contents.

        Raises:
            InvalidSnapshotError: If the payload is not a sequence of shapes.
        """
        ...

    def __len__(self) -> int: ...

    def __iter__(self) -> Iterator[Shape]: ...
