"""Custom exceptions for drafting-py."""

from __future__ import annotations


class DraftingError(Exception):
    """Base exception class for all drafting-py errors."""


class InvalidGeometryError(DraftingError):
    """Raised when a shape cannot be built from the requested geometry.

    Zero-length lines, zero-area rectangles, non-positive radii and collinear
    three-point arc requests all end up here. Drafting tools catch it and
    cancel the in-flight operation.

    Attributes:
        shape_type: Name of the shape kind that was being built.
    """

    def __init__(self, shape_type: str, message: str) -> None:
        """Initialize the exception with the shape kind and a reason.

        Args:
            shape_type: Name of the shape kind that was being built.
            message: Description of why the geometry is invalid.
        """
        self.shape_type = shape_type
        super().__init__(f"Invalid {shape_type}: {message}")


class ShapeNotFoundError(DraftingError):
    """Raised when a shape with the specified ID cannot be found.

    Attributes:
        shape_id: The ID of the shape that was not found.
    """

    def __init__(self, shape_id: str) -> None:
        """Initialize the exception with the shape ID.

        Args:
            shape_id: The ID of the shape that was not found.
        """
        self.shape_id = shape_id
        super().__init__(f"Shape with ID {shape_id} not found")


class DuplicateShapeError(DraftingError):
    """Raised when a shape ID is already present in the registry.

    Attributes:
        shape_id: The ID that is already taken.
    """

    def __init__(self, shape_id: str) -> None:
        """Initialize the exception with the shape ID.

        Args:
            shape_id: The ID that is already taken.
        """
        self.shape_id = shape_id
        super().__init__(f"Shape with ID {shape_id} already exists")


class InvalidSnapshotError(DraftingError):
    """Raised when a snapshot or drawing payload is malformed.

    The registry is left untouched whenever this is raised.
    """

    def __init__(self, message: str) -> None:
        """Initialize the exception with a custom message.

        Args:
            message: Description of why the payload was rejected.
        """
        super().__init__(message)


class InvalidConstraintError(DraftingError):
    """Raised when an unknown constraint or snap toggle is requested.

    Attributes:
        name: The constraint name that was requested.
    """

    def __init__(self, name: str) -> None:
        """Initialize the exception.

        Args:
            name: The constraint name that was requested.
        """
        super().__init__(f"Unknown constraint: {name}")
        self.name = name
