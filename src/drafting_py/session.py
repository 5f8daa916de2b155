"""Drafting session: wires one drawing's registry, constraints, snapping and history."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import structlog

from drafting_py.config import DraftingConfig
from drafting_py.core.constraints import ConstraintState
from drafting_py.core.history import SnapshotHistory
from drafting_py.core.models import Point
from drafting_py.core.types import ArcMode, CircleMode
from drafting_py.registry.memory import ShapeRegistry
from drafting_py.services.export import DEFAULT_HEIGHT, DEFAULT_WIDTH, Drawing, drawing_from_shapes
from drafting_py.services.snapping import SnappingEngine, SnapSettings
from drafting_py.services.tools import ArcTool, CircleTool, LineTool, RectangleTool

if TYPE_CHECKING:
    from collections.abc import Iterable

    from drafting_py.core.models import Shape
    from drafting_py.registry.base import RegistryProtocol

logger = structlog.get_logger(__name__)


class DraftingSession:
    """One drawing being edited.

    The session owns exactly one registry, one constraint state, one snapping
    engine and one history, plus the viewport. Tools receive the session and
    reach everything through it.

    Attributes:
        config: The configuration the session was created from.
        session_id: Random ID bound to log lines by the CLI.
        registry: Shapes of the drawing.
        constraints: Directional constraint state.
        engine: Snapping engine over the registry.
        history: Undo/redo snapshots of the registry.
        pan_x: Horizontal viewport offset in world units.
        pan_y: Vertical viewport offset in world units.

    Example:
        >>> session = DraftingSession()
        >>> tool = session.line_tool()
        >>> _ = tool.begin(0, 0)
        >>> tool.commit(100, 0).shape.length
        100.0
    """

    def __init__(self, config: DraftingConfig | None = None, registry: RegistryProtocol | None = None) -> None:
        """Initialize the session.

        Args:
            config: Session configuration; defaults are used if omitted.
            registry: Registry to draft into; a new empty one if omitted.
        """
        self.config = config or DraftingConfig()
        self.session_id = uuid.uuid4().hex
        self.registry: RegistryProtocol = registry if registry is not None else ShapeRegistry()
        self.constraints = ConstraintState()
        self.engine = SnappingEngine(
            self.registry,
            self.constraints,
            SnapSettings(
                snap_to_grid=self.config.snap_to_grid,
                snap_to_points=self.config.snap_to_points,
                snap_to_lines=self.config.snap_to_lines,
                grid_size=self.config.grid_size,
                snap_distance=self.config.snap_distance,
                zoom=self.config.zoom,
            ),
        )
        self.history = SnapshotHistory(self.registry, self.config.max_undo_steps)
        self.pan_x = 0.0
        self.pan_y = 0.0

    @property
    def zoom(self) -> float:
        return self.engine.settings.zoom

    def set_zoom(self, zoom: float) -> None:
        """Change the viewport zoom.

        Raises:
            ValueError: If zoom is not positive.
        """
        if zoom <= 0:
            msg = f"zoom must be positive, got {zoom}"
            raise ValueError(msg)
        self.engine.settings.zoom = zoom
        logger.debug("Zoom changed", zoom=zoom)

    def set_pan(self, pan_x: float, pan_y: float) -> None:
        self.pan_x = pan_x
        self.pan_y = pan_y

    def screen_to_world(self, x: float, y: float) -> Point:
        """Convert screen pixels to world coordinates."""
        return Point(x / self.zoom - self.pan_x, y / self.zoom - self.pan_y)

    def world_to_screen(self, x: float, y: float) -> Point:
        """Convert world coordinates to screen pixels."""
        return Point((x + self.pan_x) * self.zoom, (y + self.pan_y) * self.zoom)

    def line_tool(self, *, continuous: bool = False) -> LineTool:
        return LineTool(self, continuous=continuous)

    def rectangle_tool(self, *, square: bool = False) -> RectangleTool:
        return RectangleTool(self, square=square)

    def circle_tool(self, *, mode: CircleMode | str = CircleMode.CENTER_RADIUS) -> CircleTool:
        return CircleTool(self, mode=mode)

    def arc_tool(self, *, mode: ArcMode | str = ArcMode.CENTER) -> ArcTool:
        return ArcTool(self, mode=mode)

    def shapes_at(self, x: float, y: float, tolerance: float | None = None) -> list[Shape]:
        """Return shapes hit at a world position, using the configured tolerance by default."""
        return self.registry.find_at_point(x, y, self.config.hit_tolerance if tolerance is None else tolerance)

    def move_shapes(self, shape_ids: Iterable[str], dx: float, dy: float) -> list[Shape]:
        """Translate shapes as one undoable step.

        Unknown IDs are skipped.

        Returns:
            Copies of the moved shapes.
        """
        targets = [shape for shape in (self.registry.get(shape_id) for shape_id in shape_ids) if shape is not None]
        if not targets:
            return []
        self.history.save_state()
        moved = [self.registry.update(shape.translate(dx, dy)) for shape in targets]
        logger.info("Shapes moved", count=len(moved), dx=dx, dy=dy)
        return moved

    def remove_shapes(self, shape_ids: Iterable[str]) -> int:
        """Remove shapes as one undoable step.

        Returns:
            Number of shapes removed.
        """
        ids = [shape_id for shape_id in shape_ids if self.registry.get(shape_id) is not None]
        if not ids:
            return 0
        self.history.save_state()
        removed = sum(1 for shape_id in ids if self.registry.remove(shape_id))
        logger.info("Shapes removed", count=removed)
        return removed

    def undo(self) -> bool:
        return self.history.undo()

    def redo(self) -> bool:
        return self.history.redo()

    def load(self, drawing: Drawing) -> None:
        """Replace the drawing contents and forget the history.

        Raises:
            InvalidSnapshotError: If the drawing holds invalid shapes.
        """
        self.registry.restore(drawing.shapes)
        self.history.clear()
        self.constraints.clear()
        logger.info("Drawing loaded", name=drawing.name, count=len(self.registry))

    def to_drawing(self, name: str = "Untitled", width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT) -> Drawing:
        """Return the current contents as a drawing document."""
        return drawing_from_shapes(self.registry.list_shapes(), name=name, width=width, height=height)
