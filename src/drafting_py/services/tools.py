"""Interactive drafting tools.

Every tool follows the same two-stage interaction: ``begin`` anchors the
operation at a snapped position, ``update`` returns a preview for the current
pointer position, and ``commit`` validates and stores the final shape. Instead
of a second click, exact dimensions can be typed in through
``preview_dimensions`` and ``commit_dimensions``. Invalid geometry never
reaches the registry; the operation is cancelled instead.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

import structlog

from drafting_py.core import geometry as geo
from drafting_py.core.models import Arc, Circle, Line, Point, Rectangle
from drafting_py.core.types import ArcMode, CircleMode
from drafting_py.exceptions import DraftingError, InvalidGeometryError

if TYPE_CHECKING:
    from collections.abc import Callable

    from drafting_py.core.models import Shape
    from drafting_py.session import DraftingSession

logger = structlog.get_logger(__name__)

PREVIEW_ID = "preview"


@dataclass(frozen=True)
class ToolResult:
    """Outcome of committing a drafting operation.

    Attributes:
        shape: Copy of the stored shape, None when cancelled.
        cancelled: Whether the operation was aborted.
        reason: Why it was aborted.
    """

    shape: Shape | None = None
    cancelled: bool = False
    reason: str | None = None


class BaseTool(ABC):
    """Base class for the shape-creating tools.

    Attributes:
        session: The drafting session whose registry, snapping engine and
            history the tool works with.
        anchor: First snapped position of the operation in progress.
    """

    name: ClassVar[str]

    def __init__(self, session: DraftingSession) -> None:
        self.session = session
        self.anchor: Point | None = None

    @property
    def active(self) -> bool:
        """Whether an operation is in progress."""
        return self.anchor is not None

    def snap(self, x: float, y: float) -> Point:
        """Resolve a pointer position through the session's snapping engine."""
        return self.session.engine.apply_constraints(x, y)

    def end_point(self, x: float, y: float, *, constrained: bool = False) -> Point:
        """Return the final point for a pointer position.

        Args:
            x: Pointer x in world units.
            y: Pointer y in world units.
            constrained: Whether the tool's modifier constraint is held.
        """
        return self.snap(x, y)

    def begin(self, x: float, y: float) -> Point:
        """Start an operation at a pointer position.

        The snapped position becomes the anchor and the constraint reference
        point.

        Returns:
            The snapped anchor.
        """
        self.anchor = self.snap(x, y)
        self.session.engine.set_reference_point(self.anchor)
        logger.debug("Tool started", tool=self.name, anchor=str(self.anchor))
        return self.anchor.copy()

    def update(self, x: float, y: float, *, constrained: bool = False) -> Shape | None:
        """Return a preview shape for the current pointer position.

        Returns:
            The preview, or None when no operation is in progress or the
            geometry is not drawable yet.
        """
        if self.anchor is None:
            return None
        end = self.end_point(x, y, constrained=constrained)
        return self._preview(lambda: self.build_shape(end, shape_id=PREVIEW_ID))

    def commit(self, x: float, y: float, *, constrained: bool = False) -> ToolResult:
        """Finish the operation and store the shape.

        An undo state is recorded once the shape is stored. On invalid
        geometry the operation is cancelled and the registry is untouched.
        """
        if self.anchor is None:
            return ToolResult(cancelled=True, reason="no operation in progress")
        end = self.end_point(x, y, constrained=constrained)
        return self._finish(lambda: self.build_shape(end))

    def cancel(self) -> None:
        """Abort the operation in progress."""
        if self.anchor is not None:
            logger.info("Drafting operation cancelled", tool=self.name, reason="cancelled by user")
        self.reset()

    def reset(self) -> None:
        """Clear the operation state and the constraint reference point."""
        self.anchor = None
        self.session.engine.set_reference_point(None)

    def after_commit(self, shape: Shape) -> None:
        """Hook run after a shape was stored."""
        self.reset()

    @abstractmethod
    def build_shape(self, end: Point, *, shape_id: str = "") -> Shape:
        """Build the shape from the anchor and the final snapped position.

        Raises:
            InvalidGeometryError: If the points do not describe a valid shape.
        """

    def _preview(self, build: Callable[[], Shape]) -> Shape | None:
        try:
            return build()
        except InvalidGeometryError:
            return None

    def _finish(self, build: Callable[[], Shape]) -> ToolResult:
        """Validate, store and record the shape, or cancel the operation."""
        if self.anchor is None:
            return ToolResult(cancelled=True, reason="no operation in progress")

        registry = self.session.registry
        before = registry.snapshot()
        try:
            shape = build()
            shape.validate()
            stored = registry.add(shape)
        except DraftingError as e:
            logger.warning("Drafting operation cancelled", tool=self.name, reason=str(e))
            self.reset()
            return ToolResult(cancelled=True, reason=str(e))

        self.session.history.save_state(before)
        logger.info("Shape committed", tool=self.name, shape_id=stored.id)
        self.after_commit(stored)
        return ToolResult(shape=stored)


class LineTool(BaseTool):
    """Draws straight lines, optionally chained end to start.

    Attributes:
        continuous: Start each new line at the previous line's end point.
        last_end_point: End of the last committed line in continuous mode.
    """

    name = "line"

    def __init__(self, session: DraftingSession, *, continuous: bool = False) -> None:
        super().__init__(session)
        self.continuous = continuous
        self.last_end_point: Point | None = None

    def begin(self, x: float, y: float) -> Point:
        if self.continuous and self.last_end_point is not None:
            self.anchor = self.last_end_point.copy()
            self.session.engine.set_reference_point(self.anchor)
            return self.anchor.copy()
        return super().begin(x, y)

    def end_point(self, x: float, y: float, *, constrained: bool = False) -> Point:
        """Snap the end point; when constrained, keep the dominant axis only.

        A drag that is wider than tall becomes horizontal, anything else
        vertical.
        """
        end = self.snap(x, y)
        if not constrained or self.anchor is None:
            return end
        if abs(end.x - self.anchor.x) > abs(end.y - self.anchor.y):
            return Point(end.x, self.anchor.y)
        return Point(self.anchor.x, end.y)

    def constrain_end(self, end: Point) -> Point:
        """Apply the parallel and perpendicular constraints to the end point."""
        if self.anchor is None:
            return end
        constraints = self.session.constraints
        end = constraints.apply_parallel_constraint(self.anchor.x, self.anchor.y, end.x, end.y)
        return constraints.apply_perpendicular_constraint(self.anchor.x, self.anchor.y, end.x, end.y)

    def build_shape(self, end: Point, *, shape_id: str = "") -> Line:
        if self.anchor is None:
            raise InvalidGeometryError("line", "no start point")
        line = Line.from_points(self.anchor, self.constrain_end(end), id=shape_id)
        line.validate()
        return line

    def measure(self, x: float, y: float) -> tuple[float, float] | None:
        """Return length and angle in degrees (``[0, 360)``) of the line to a pointer position."""
        if self.anchor is None:
            return None
        end = self.snap(x, y)
        return self.anchor.distance_to(end), math.degrees(geo.normalize_angle(self.anchor.angle_to(end)))

    def line_from_dimensions(self, length: float, angle: float, *, shape_id: str = "") -> Line:
        """Build the line with a typed length and angle in degrees from the anchor.

        Raises:
            InvalidGeometryError: If no line is in progress or the length is not positive.
        """
        if self.anchor is None:
            raise InvalidGeometryError("line", "no start point")
        if not length > 0:
            raise InvalidGeometryError("line", f"length must be positive, got {length}")
        line = Line.from_points(self.anchor, self.anchor.point_at(length, math.radians(angle)), id=shape_id)
        line.validate()
        return line

    def preview_dimensions(self, length: float, angle: float) -> Line | None:
        return self._preview(lambda: self.line_from_dimensions(length, angle, shape_id=PREVIEW_ID))

    def commit_dimensions(self, length: float, angle: float) -> ToolResult:
        """Finish the line with a typed length and angle in degrees."""
        return self._finish(lambda: self.line_from_dimensions(length, angle))

    def after_commit(self, shape: Shape) -> None:
        super().after_commit(shape)
        if self.continuous and isinstance(shape, Line):
            self.last_end_point = shape.end_point

    def cancel(self) -> None:
        """Abort the line in progress and leave continuous mode."""
        if self.last_end_point is not None:
            logger.info("Continuous mode exited", tool=self.name)
        self.last_end_point = None
        super().cancel()


class RectangleTool(BaseTool):
    """Draws rectangles corner to corner.

    Attributes:
        square: Force equal sides, keeping the drag direction. Holding the
            modifier constraint has the same effect for one operation.
    """

    name = "rectangle"

    def __init__(self, session: DraftingSession, *, square: bool = False) -> None:
        super().__init__(session)
        self.square = square

    def end_point(self, x: float, y: float, *, constrained: bool = False) -> Point:
        end = self.snap(x, y)
        if self.anchor is None or not (self.square or constrained):
            return end
        dx = end.x - self.anchor.x
        dy = end.y - self.anchor.y
        side = max(abs(dx), abs(dy))
        return Point(self.anchor.x + math.copysign(side, dx), self.anchor.y + math.copysign(side, dy))

    def build_shape(self, end: Point, *, shape_id: str = "") -> Rectangle:
        if self.anchor is None:
            raise InvalidGeometryError("rectangle", "no first corner")
        rectangle = Rectangle.from_points(self.anchor, end, id=shape_id)
        rectangle.validate()
        return rectangle

    def preview_dimensions(self, width: float, height: float) -> Rectangle | None:
        if self.anchor is None:
            return None
        corner = self.anchor.translate(width, height)
        return self._preview(lambda: self.build_shape(corner, shape_id=PREVIEW_ID))

    def commit_dimensions(self, width: float, height: float) -> ToolResult:
        """Finish the rectangle with typed extents from the first corner.

        Negative extents grow towards the left or top.
        """
        if self.anchor is None:
            return ToolResult(cancelled=True, reason="no operation in progress")
        corner = self.anchor.translate(width, height)
        return self._finish(lambda: self.build_shape(corner))


class CircleTool(BaseTool):
    """Draws circles by center and radius point, or by diameter.

    Attributes:
        mode: How the two points are interpreted.
    """

    name = "circle"

    def __init__(self, session: DraftingSession, *, mode: CircleMode | str = CircleMode.CENTER_RADIUS) -> None:
        super().__init__(session)
        self.mode = CircleMode(mode)

    def set_mode(self, mode: CircleMode | str) -> None:
        """Switch the draw mode.

        Raises:
            ValueError: If the mode is unknown.
        """
        self.mode = CircleMode(mode)
        logger.info("Draw mode set", tool=self.name, mode=self.mode.value)

    def build_shape(self, end: Point, *, shape_id: str = "") -> Circle:
        if self.anchor is None:
            raise InvalidGeometryError("circle", "no first point")
        if self.mode is CircleMode.DIAMETER:
            circle = Circle.from_center_and_radius(
                self.anchor.midpoint_to(end), self.anchor.distance_to(end) / 2, id=shape_id
            )
        else:
            circle = Circle.from_center_and_point(self.anchor, end, id=shape_id)
        circle.validate()
        return circle

    def circle_from_radius(self, radius: float, *, shape_id: str = "") -> Circle:
        """Build a circle of a typed radius centered on the first click."""
        if self.anchor is None:
            raise InvalidGeometryError("circle", "no first point")
        circle = Circle.from_center_and_radius(self.anchor, radius, id=shape_id)
        circle.validate()
        return circle

    def preview_dimensions(self, radius: float) -> Circle | None:
        return self._preview(lambda: self.circle_from_radius(radius, shape_id=PREVIEW_ID))

    def commit_dimensions(self, radius: float) -> ToolResult:
        """Finish the circle with a typed radius around the first click."""
        return self._finish(lambda: self.circle_from_radius(radius))


class ArcTool(BaseTool):
    """Draws arcs from three clicks.

    In ``center`` mode the clicks are center, start and end; the end click
    only sets the direction. Without a start click the arc sweeps a quarter
    turn from the end click. In ``three-point`` mode the clicks are start,
    a point on the arc and end.

    Attributes:
        mode: How the three points are interpreted.
        second_point: The middle click, once given.
    """

    name = "arc"

    def __init__(self, session: DraftingSession, *, mode: ArcMode | str = ArcMode.CENTER) -> None:
        super().__init__(session)
        self.mode = ArcMode(mode)
        self.second_point: Point | None = None

    def set_mode(self, mode: ArcMode | str) -> None:
        """Switch the draw mode.

        Raises:
            ValueError: If the mode is unknown.
        """
        self.mode = ArcMode(mode)
        logger.info("Draw mode set", tool=self.name, mode=self.mode.value)

    def add_point(self, x: float, y: float) -> Point | None:
        """Record the middle click.

        Returns:
            The snapped point, or None when no operation is in progress.
        """
        if self.anchor is None:
            return None
        self.second_point = self.snap(x, y)
        return self.second_point.copy()

    def update(self, x: float, y: float, *, constrained: bool = False) -> Shape | None:
        """Preview the full circle until the middle click, the arc afterwards."""
        if self.anchor is None:
            return None
        if self.second_point is None and self.mode is ArcMode.CENTER:
            preview = Circle.from_center_and_point(self.anchor, self.snap(x, y), id=PREVIEW_ID)
            return preview if preview.radius >= geo.MIN_SIZE else None
        return super().update(x, y, constrained=constrained)

    def build_shape(self, end: Point, *, shape_id: str = "") -> Arc:
        if self.anchor is None:
            raise InvalidGeometryError("arc", "no first point")

        if self.mode is ArcMode.THREE_POINT:
            if self.second_point is None:
                raise InvalidGeometryError("arc", "three-point arc needs a point on the arc")
            arc = Arc.from_three_points(self.anchor, self.second_point, end, id=shape_id)
            if arc is None:
                raise InvalidGeometryError("arc", "points are collinear")
        elif self.second_point is None:
            start_angle = self.anchor.angle_to(end)
            arc = Arc.from_center_radius_and_angles(
                self.anchor, self.anchor.distance_to(end), start_angle, start_angle + math.pi / 2, id=shape_id
            )
        else:
            arc = Arc.from_center_and_points(self.anchor, self.second_point, end, id=shape_id)
        return self._checked(arc)

    def arc_from_dimensions(self, radius: float, start_angle: float, end_angle: float, *, shape_id: str = "") -> Arc:
        """Build an arc around the first click from a typed radius and angles in degrees."""
        if self.anchor is None:
            raise InvalidGeometryError("arc", "no first point")
        arc = Arc.from_center_radius_and_angles(
            self.anchor, radius, math.radians(start_angle), math.radians(end_angle), id=shape_id
        )
        return self._checked(arc)

    def preview_dimensions(self, radius: float, start_angle: float, end_angle: float) -> Arc | None:
        return self._preview(lambda: self.arc_from_dimensions(radius, start_angle, end_angle, shape_id=PREVIEW_ID))

    def commit_dimensions(self, radius: float, start_angle: float, end_angle: float) -> ToolResult:
        """Finish the arc with a typed radius and start/end angles in degrees."""
        return self._finish(lambda: self.arc_from_dimensions(radius, start_angle, end_angle))

    def reset(self) -> None:
        super().reset()
        self.second_point = None

    @staticmethod
    def _checked(arc: Arc) -> Arc:
        arc.validate()
        if arc.angle_span < geo.MIN_SIZE:
            raise InvalidGeometryError("arc", "start and end directions coincide")
        return arc
