"""Core type definitions for drafting-py."""

from __future__ import annotations

from enum import StrEnum


class ShapeType(StrEnum):
    """Enumeration of the shape kinds a drawing can hold."""

    LINE = "line"
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    ARC = "arc"


class SnapKind(StrEnum):
    """Enumeration of the snap sources a resolved coordinate can come from."""

    GRID = "grid"
    POINT = "point"
    LINE = "line"


class ConstraintType(StrEnum):
    """Enumeration of directional drafting constraints."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    PARALLEL = "parallel"
    PERPENDICULAR = "perpendicular"


class SnapToggle(StrEnum):
    """Enumeration of the snap sources that can be switched on and off."""

    GRID = "snap_to_grid"
    POINTS = "snap_to_points"
    LINES = "snap_to_lines"


class CircleMode(StrEnum):
    """How the circle tool interprets its two defining points."""

    CENTER_RADIUS = "center-radius"
    DIAMETER = "diameter"


class ArcMode(StrEnum):
    """How the arc tool interprets its three defining points."""

    CENTER = "center"
    THREE_POINT = "three-point"


class ExportFormat(StrEnum):
    """Enumeration of supported drawing export formats."""

    JSON = "json"
    SVG = "svg"
    PNG = "png"
