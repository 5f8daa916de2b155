"""drafting-py: A geometry and snapping core for 2D technical drawing.

This package provides the non-visual heart of a drafting editor: shape
primitives with exact analytic geometry, an ordered shape registry with
spatial queries, a snapping engine with directional constraints, undo/redo
history, interactive drafting tools and SVG/PNG/JSON export.

Key Components:
    - Core Models: Point, Line, Rectangle, Circle, Arc
    - Registry: ShapeRegistry, RegistryProtocol (for custom backends)
    - Services: SnappingEngine, drafting tools, ExportService
    - Session: DraftingSession wiring one drawing together
    - CLI: ``drafting`` command for inspecting, snapping and exporting

Quick Start:
    >>> from drafting_py import DraftingSession
    >>>
    >>> session = DraftingSession()
    >>> tool = session.line_tool()
    >>> tool.begin(0, 0)
    Point(x=0.0, y=0.0)
    >>> line = tool.commit(104, 96).shape
    >>> session.engine.apply_constraints(52, 47)
    Point(x=50.0, y=50.0)
"""

from __future__ import annotations

from drafting_py.config import DraftingConfig
from drafting_py.core import (
    Arc,
    BoundingBox,
    Circle,
    ConstraintState,
    ConstraintType,
    Line,
    Point,
    Rectangle,
    Shape,
    ShapeType,
    SnapKind,
    SnapshotHistory,
    shape_from_dict,
)
from drafting_py.core.logging import configure_logging
from drafting_py.exceptions import (
    DraftingError,
    DuplicateShapeError,
    InvalidConstraintError,
    InvalidGeometryError,
    InvalidSnapshotError,
    ShapeNotFoundError,
)
from drafting_py.registry import RegistryProtocol, ShapeRegistry
from drafting_py.services import (
    ArcTool,
    CircleTool,
    Drawing,
    ExportService,
    LineTool,
    RectangleTool,
    SnappingEngine,
    SnapResult,
    SnapSettings,
    ToolResult,
)
from drafting_py.session import DraftingSession

__all__ = [
    "Arc",
    "ArcTool",
    "BoundingBox",
    "Circle",
    "CircleTool",
    "ConstraintState",
    "ConstraintType",
    "DraftingConfig",
    "DraftingError",
    "DraftingSession",
    "Drawing",
    "DuplicateShapeError",
    "ExportService",
    "InvalidConstraintError",
    "InvalidGeometryError",
    "InvalidSnapshotError",
    "Line",
    "LineTool",
    "Point",
    "Rectangle",
    "RectangleTool",
    "RegistryProtocol",
    "Shape",
    "ShapeNotFoundError",
    "ShapeRegistry",
    "ShapeType",
    "SnapKind",
    "SnapResult",
    "SnapSettings",
    "SnappingEngine",
    "SnapshotHistory",
    "ToolResult",
    "configure_logging",
    "shape_from_dict",
]

__version__ = "0.1.0"
