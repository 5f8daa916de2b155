"""Core domain models for drafting-py."""

from drafting_py.core.constraints import ConstraintState
from drafting_py.core.history import SnapshotHistory
from drafting_py.core.models import (
    Arc,
    BoundingBox,
    Circle,
    DrawingShape,
    Line,
    Point,
    Rectangle,
    Shape,
    generate_shape_id,
    shape_from_dict,
)
from drafting_py.core.types import ArcMode, CircleMode, ConstraintType, ExportFormat, ShapeType, SnapKind, SnapToggle

__all__ = [
    "Arc",
    "ArcMode",
    "BoundingBox",
    "Circle",
    "CircleMode",
    "ConstraintState",
    "ConstraintType",
    "DrawingShape",
    "ExportFormat",
    "Line",
    "Point",
    "Rectangle",
    "Shape",
    "ShapeType",
    "SnapKind",
    "SnapToggle",
    "SnapshotHistory",
    "generate_shape_id",
    "shape_from_dict",
]
