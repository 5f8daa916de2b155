"""Drafting services for drafting-py."""

from drafting_py.services.export import Drawing, ExportService, drawing_from_shapes
from drafting_py.services.snapping import SnapCandidate, SnappingEngine, SnapResult, SnapSettings
from drafting_py.services.tools import ArcTool, BaseTool, CircleTool, LineTool, RectangleTool, ToolResult

__all__ = [
    "ArcTool",
    "BaseTool",
    "CircleTool",
    "Drawing",
    "ExportService",
    "LineTool",
    "RectangleTool",
    "SnapCandidate",
    "SnapResult",
    "SnapSettings",
    "SnappingEngine",
    "ToolResult",
    "drawing_from_shapes",
]
