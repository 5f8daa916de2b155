"""Core drawing primitives for drafting-py.

Shapes are plain dataclasses with value semantics: every derivation
(translation, grid snapping, resizing) returns a new instance that keeps the
original ``id``. The registry looks shapes up by id instead of sharing mutable
references between the selection, the preview and the drawing.
"""

from __future__ import annotations

import math
import re
import threading
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Self, TypeAlias

from drafting_py.core import geometry as geo
from drafting_py.core.types import ShapeType
from drafting_py.exceptions import InvalidGeometryError, InvalidSnapshotError


class _ShapeIdSequence:
    """Monotonic counter behind shape IDs.

    IDs read back from saved drawings advance the counter past their
    sequence number, so shapes drawn after a load never collide with them.
    """

    _pattern = re.compile(r"^[a-z]+_(\d+)$")

    def __init__(self) -> None:
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            self._last += 1
            return self._last

    def reserve(self, shape_id: str) -> None:
        match = self._pattern.match(shape_id)
        if match is None:
            return
        with self._lock:
            self._last = max(self._last, int(match.group(1)))


_id_sequence = _ShapeIdSequence()


def generate_shape_id(shape_type: ShapeType) -> str:
    """Return a new shape ID such as ``line_00000007``.

    IDs come from a single monotonically increasing counter and are never
    reused, including IDs of shapes loaded from a saved drawing.
    """
    return f"{shape_type.value}_{_id_sequence.next():08d}"


def reserve_shape_id(shape_id: str) -> None:
    """Keep future generated IDs clear of an existing ``<type>_<number>`` ID."""
    _id_sequence.reserve(shape_id)


def _close(a: float, b: float, tolerance: float) -> bool:
    return abs(a - b) <= tolerance


@dataclass
class Point:
    """Represents a point in drawing (world) coordinates.

    Attributes:
        x: X-coordinate position.
        y: Y-coordinate position.
    """

    x: float = 0.0
    y: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Point:
        """Create a point from a mapping with ``x`` and ``y`` keys."""
        return cls(float(data["x"]), float(data["y"]))

    def to_dict(self) -> dict[str, float]:
        """Convert the point to a dictionary."""
        return {"x": self.x, "y": self.y}

    def copy(self) -> Point:
        """Return an independent copy of this point."""
        return Point(self.x, self.y)

    def equals(self, other: Point | None, tolerance: float = geo.DEFAULT_TOLERANCE) -> bool:
        """Check equality with another point within a tolerance."""
        if other is None:
            return False
        return _close(self.x, other.x, tolerance) and _close(self.y, other.y, tolerance)

    def distance_to(self, other: Point) -> float:
        """Distance to another point."""
        return geo.distance(self.x, self.y, other.x, other.y)

    def angle_to(self, other: Point) -> float:
        """Direction to another point in radians."""
        return geo.angle(self.x, self.y, other.x, other.y)

    def angle_degrees_to(self, other: Point) -> float:
        """Direction to another point in degrees."""
        return math.degrees(self.angle_to(other))

    def midpoint_to(self, other: Point) -> Point:
        """Midpoint between this point and another."""
        return Point((self.x + other.x) / 2, (self.y + other.y) / 2)

    def snap_to_grid(self, grid_size: float) -> Point:
        """Return this point rounded to the nearest grid intersection."""
        return Point(geo.snap_value_to_grid(self.x, grid_size), geo.snap_value_to_grid(self.y, grid_size))

    def point_at(self, length: float, direction: float) -> Point:
        """Return the point ``length`` away along ``direction`` (radians)."""
        return Point(*geo.point_at_distance_and_angle(self.x, self.y, length, direction))

    def translate(self, dx: float, dy: float) -> Point:
        """Return this point moved by an offset."""
        return Point(self.x + dx, self.y + dy)

    def __str__(self) -> str:
        return f"({round(self.x, 2)}, {round(self.y, 2)})"


@dataclass
class BoundingBox:
    """Axis-aligned extent of a shape.

    Attributes:
        x: Left edge.
        y: Top edge.
        width: Horizontal extent, never negative.
        height: Vertical extent, never negative.
    """

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_corners(cls, x1: float, y1: float, x2: float, y2: float) -> BoundingBox:
        """Build a box from any two opposite corners."""
        return cls(min(x1, x2), min(y1, y2), abs(x2 - x1), abs(y2 - y1))

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    def contains_point(self, x: float, y: float) -> bool:
        """Check whether a point lies in the box, edges included."""
        return geo.is_point_in_rect(x, y, self.x, self.y, self.width, self.height)

    def intersects(self, other: BoundingBox) -> bool:
        """Check whether two boxes overlap or touch."""
        return geo.rects_intersect(
            self.x, self.y, self.width, self.height, other.x, other.y, other.width, other.height
        )

    def to_dict(self) -> dict[str, float]:
        """Convert the box to a dictionary."""
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass
class Shape(ABC):
    """Base class for all drawing shapes.

    Attributes:
        id: Process-unique identifier, assigned on creation when omitted.
    """

    id: str = field(default="", kw_only=True)

    shape_type: ClassVar[ShapeType]

    def __post_init__(self) -> None:
        """Assign a fresh ID when none was supplied."""
        if not self.id:
            self.id = generate_shape_id(self.shape_type)
        else:
            reserve_shape_id(self.id)

    def copy(self) -> Self:
        """Return an independent copy carrying the same ID."""
        return replace(self)

    @abstractmethod
    def validate(self) -> None:
        """Raise InvalidGeometryError if the shape may not enter a drawing."""

    @abstractmethod
    def hit_test(self, x: float, y: float, tolerance: float) -> bool:
        """Check whether a point hits the shape within a tolerance."""

    @abstractmethod
    def bounding_box(self) -> BoundingBox:
        """Return the axis-aligned extent of the shape."""

    @abstractmethod
    def intersects_rect(self, box: BoundingBox) -> bool:
        """Check whether the shape touches an axis-aligned rectangle."""

    @abstractmethod
    def intersect_line(self, line: Line) -> list[Point]:
        """Return the points where a segment crosses the shape's outline."""

    @abstractmethod
    def snap_points(self) -> list[Point]:
        """Return the canonical snap points in their fixed tie-break order."""

    @abstractmethod
    def nearest_edge_point(self, x: float, y: float) -> Point | None:
        """Project a point onto the shape's outline.

        Returns:
            The closest projection that lies within the outline's bounded
            parameter range, or None if there is none.
        """

    @abstractmethod
    def translate(self, dx: float, dy: float) -> Self:
        """Return the shape moved by an offset."""

    @abstractmethod
    def snap_to_grid(self, grid_size: float) -> Self:
        """Return the shape with its defining values rounded to the grid."""

    @abstractmethod
    def equals(self, other: Shape | None, tolerance: float = geo.DEFAULT_TOLERANCE) -> bool:
        """Compare geometry with another shape, ignoring IDs."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Serialize the shape, tagged with its ``type``."""

    @classmethod
    @abstractmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Rebuild a shape from :meth:`to_dict` output."""

    @abstractmethod
    def to_path_data(self) -> str:
        """Return the SVG path description of the shape."""


@dataclass
class Line(Shape):
    """A straight segment between two points.

    Attributes:
        x1: X-coordinate of the start point.
        y1: Y-coordinate of the start point.
        x2: X-coordinate of the end point.
        y2: Y-coordinate of the end point.
    """

    x1: float = 0.0
    y1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0

    shape_type: ClassVar[ShapeType] = ShapeType.LINE

    @classmethod
    def from_points(cls, start: Point, end: Point, *, id: str = "") -> Line:  # noqa: A002
        """Create a line between two points."""
        return cls(start.x, start.y, end.x, end.y, id=id)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Line:
        return cls(
            float(data["x1"]),
            float(data["y1"]),
            float(data["x2"]),
            float(data["y2"]),
            id=str(data.get("id") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.shape_type.value,
            "id": self.id,
            "x1": self.x1,
            "y1": self.y1,
            "x2": self.x2,
            "y2": self.y2,
        }

    def validate(self) -> None:
        if not geo.is_finite(self.x1, self.y1, self.x2, self.y2):
            raise InvalidGeometryError("line", "coordinates must be finite")
        if self.length < geo.MIN_SIZE:
            raise InvalidGeometryError("line", "cannot create zero-length line")

    @property
    def start_point(self) -> Point:
        return Point(self.x1, self.y1)

    @property
    def end_point(self) -> Point:
        return Point(self.x2, self.y2)

    @property
    def midpoint(self) -> Point:
        return Point((self.x1 + self.x2) / 2, (self.y1 + self.y2) / 2)

    @property
    def length(self) -> float:
        return geo.distance(self.x1, self.y1, self.x2, self.y2)

    @property
    def angle(self) -> float:
        """Direction from start to end in radians."""
        return geo.angle(self.x1, self.y1, self.x2, self.y2)

    @property
    def angle_degrees(self) -> float:
        return math.degrees(self.angle)

    def is_horizontal(self, tolerance: float = 1.0) -> bool:
        """Check whether the line is horizontal within ``tolerance`` degrees."""
        value = abs(self.angle_degrees)
        return value < tolerance or abs(value - 180) < tolerance

    def is_vertical(self, tolerance: float = 1.0) -> bool:
        """Check whether the line is vertical within ``tolerance`` degrees."""
        value = abs(self.angle_degrees)
        return abs(value - 90) < tolerance or abs(value - 270) < tolerance

    def is_point_on_line(self, x: float, y: float, tolerance: float = 5.0) -> bool:
        """Check whether a point lies on the segment within a tolerance."""
        return geo.is_point_on_segment(x, y, self.x1, self.y1, self.x2, self.y2, tolerance)

    def hit_test(self, x: float, y: float, tolerance: float) -> bool:
        return self.is_point_on_line(x, y, tolerance)

    def intersect_with(self, other: Line) -> Point | None:
        """Return the crossing point with another segment, if any."""
        hit = geo.segment_intersection(
            self.x1, self.y1, self.x2, self.y2, other.x1, other.y1, other.x2, other.y2
        )
        return Point(*hit) if hit else None

    def intersect_line(self, line: Line) -> list[Point]:
        hit = self.intersect_with(line)
        return [hit] if hit else []

    def intersects_rect(self, box: BoundingBox) -> bool:
        if box.contains_point(self.x1, self.y1) or box.contains_point(self.x2, self.y2):
            return True
        edges = Rectangle(box.x, box.y, box.width, box.height, id="region").edges()
        return any(
            geo.segment_intersection(self.x1, self.y1, self.x2, self.y2, *edge) is not None for edge in edges
        )

    def bounding_box(self) -> BoundingBox:
        return BoundingBox.from_corners(self.x1, self.y1, self.x2, self.y2)

    def snap_points(self) -> list[Point]:
        return [self.start_point, self.end_point, self.midpoint]

    def nearest_edge_point(self, x: float, y: float) -> Point | None:
        projected = geo.project_point_on_segment(x, y, self.x1, self.y1, self.x2, self.y2)
        return Point(*projected) if projected else None

    def translate(self, dx: float, dy: float) -> Line:
        return replace(self, x1=self.x1 + dx, y1=self.y1 + dy, x2=self.x2 + dx, y2=self.y2 + dy)

    def snap_to_grid(self, grid_size: float) -> Line:
        start = self.start_point.snap_to_grid(grid_size)
        end = self.end_point.snap_to_grid(grid_size)
        return replace(self, x1=start.x, y1=start.y, x2=end.x, y2=end.y)

    def equals(self, other: Shape | None, tolerance: float = geo.DEFAULT_TOLERANCE) -> bool:
        """Compare endpoints, accepting the reversed direction as equal."""
        if not isinstance(other, Line):
            return False
        if self.start_point.equals(other.start_point, tolerance) and self.end_point.equals(
            other.end_point, tolerance
        ):
            return True
        return self.start_point.equals(other.end_point, tolerance) and self.end_point.equals(
            other.start_point, tolerance
        )

    def to_path_data(self) -> str:
        f = geo.format_number
        return f"M {f(self.x1)} {f(self.y1)} L {f(self.x2)} {f(self.y2)}"

    def __str__(self) -> str:
        return f"Line from {self.start_point} to {self.end_point}"


@dataclass
class Rectangle(Shape):
    """An axis-aligned rectangle anchored at its top-left corner.

    Negative extents (a drag towards the top-left) are folded back so that
    ``(x, y)`` is always the top-left corner and both extents are positive.

    Attributes:
        x: X-coordinate of the top-left corner.
        y: Y-coordinate of the top-left corner.
        width: Horizontal extent.
        height: Vertical extent.
    """

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    shape_type: ClassVar[ShapeType] = ShapeType.RECTANGLE

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.width < 0:
            self.x += self.width
            self.width = -self.width
        if self.height < 0:
            self.y += self.height
            self.height = -self.height

    @classmethod
    def from_points(cls, p1: Point, p2: Point, *, id: str = "") -> Rectangle:  # noqa: A002
        """Create a rectangle from two opposite corners in any drag direction."""
        return cls(min(p1.x, p2.x), min(p1.y, p2.y), abs(p2.x - p1.x), abs(p2.y - p1.y), id=id)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Rectangle:
        return cls(
            float(data["x"]),
            float(data["y"]),
            float(data["width"]),
            float(data["height"]),
            id=str(data.get("id") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.shape_type.value,
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }

    def validate(self) -> None:
        if not geo.is_finite(self.x, self.y, self.width, self.height):
            raise InvalidGeometryError("rectangle", "coordinates must be finite")
        if self.width < geo.MIN_SIZE or self.height < geo.MIN_SIZE:
            raise InvalidGeometryError("rectangle", "cannot create zero-area rectangle")

    @property
    def top_left(self) -> Point:
        return Point(self.x, self.y)

    @property
    def top_right(self) -> Point:
        return Point(self.x + self.width, self.y)

    @property
    def bottom_left(self) -> Point:
        return Point(self.x, self.y + self.height)

    @property
    def bottom_right(self) -> Point:
        return Point(self.x + self.width, self.y + self.height)

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def perimeter(self) -> float:
        return 2 * (self.width + self.height)

    def contains_point(self, x: float, y: float) -> bool:
        """Check whether a point is inside the rectangle, edges included."""
        return geo.is_point_in_rect(x, y, self.x, self.y, self.width, self.height)

    def hit_test(self, x: float, y: float, tolerance: float) -> bool:
        return self.contains_point(x, y)

    def contains_rectangle(self, other: Rectangle) -> bool:
        """Check whether another rectangle lies completely inside this one."""
        return (
            other.x >= self.x
            and other.y >= self.y
            and other.x + other.width <= self.x + self.width
            and other.y + other.height <= self.y + self.height
        )

    def intersects_rectangle(self, other: Rectangle) -> bool:
        return self.bounding_box().intersects(other.bounding_box())

    def intersects_line(self, line: Line) -> bool:
        return line.intersects_rect(self.bounding_box())

    def intersects_rect(self, box: BoundingBox) -> bool:
        return self.bounding_box().intersects(box)

    def edges(self) -> list[tuple[float, float, float, float]]:
        """Return the outline as ``(x1, y1, x2, y2)`` tuples: top, right, bottom, left."""
        left, top = self.x, self.y
        right, bottom = self.x + self.width, self.y + self.height
        return [
            (left, top, right, top),
            (right, top, right, bottom),
            (right, bottom, left, bottom),
            (left, bottom, left, top),
        ]

    def edge_lines(self) -> list[Line]:
        """Return the outline as clockwise lines whose IDs derive from this one."""
        names = ("top", "right", "bottom", "left")
        return [Line(*edge, id=f"{self.id}_{name}") for name, edge in zip(names, self.edges(), strict=True)]

    def intersect_line(self, line: Line) -> list[Point]:
        hits: list[Point] = []
        for edge in self.edges():
            hit = geo.segment_intersection(line.x1, line.y1, line.x2, line.y2, *edge)
            if hit is not None and not any(p.equals(Point(*hit)) for p in hits):
                hits.append(Point(*hit))
        return hits

    def bounding_box(self) -> BoundingBox:
        return BoundingBox(self.x, self.y, self.width, self.height)

    def snap_points(self) -> list[Point]:
        return [self.top_left, self.top_right, self.bottom_left, self.bottom_right, self.center]

    def nearest_edge_point(self, x: float, y: float) -> Point | None:
        best: Point | None = None
        best_distance = math.inf
        for edge in self.edges():
            projected = geo.project_point_on_segment(x, y, *edge)
            if projected is None:
                continue
            d = geo.distance(x, y, *projected)
            if d < best_distance:
                best, best_distance = Point(*projected), d
        return best

    def resize(self, width: float, height: float) -> Rectangle:
        """Return the rectangle with new extents, clamped at zero."""
        return replace(self, width=max(0.0, width), height=max(0.0, height))

    def translate(self, dx: float, dy: float) -> Rectangle:
        return replace(self, x=self.x + dx, y=self.y + dy)

    def snap_to_grid(self, grid_size: float) -> Rectangle:
        top_left = self.top_left.snap_to_grid(grid_size)
        bottom_right = self.bottom_right.snap_to_grid(grid_size)
        return replace(
            self,
            x=top_left.x,
            y=top_left.y,
            width=bottom_right.x - top_left.x,
            height=bottom_right.y - top_left.y,
        )

    def equals(self, other: Shape | None, tolerance: float = geo.DEFAULT_TOLERANCE) -> bool:
        if not isinstance(other, Rectangle):
            return False
        return (
            _close(self.x, other.x, tolerance)
            and _close(self.y, other.y, tolerance)
            and _close(self.width, other.width, tolerance)
            and _close(self.height, other.height, tolerance)
        )

    def to_path_data(self) -> str:
        f = geo.format_number
        return (
            f"M {f(self.x)} {f(self.y)} H {f(self.x + self.width)} "
            f"V {f(self.y + self.height)} H {f(self.x)} Z"
        )

    def __str__(self) -> str:
        return (
            f"Rectangle at {self.top_left} with width {round(self.width, 2)} and height {round(self.height, 2)}"
        )


@dataclass
class Circle(Shape):
    """A full circle.

    Attributes:
        cx: X-coordinate of the center.
        cy: Y-coordinate of the center.
        radius: Radius, must be positive to enter a drawing.
    """

    cx: float = 0.0
    cy: float = 0.0
    radius: float = 0.0

    shape_type: ClassVar[ShapeType] = ShapeType.CIRCLE

    @classmethod
    def from_center_and_radius(cls, center: Point, radius: float, *, id: str = "") -> Circle:  # noqa: A002
        return cls(center.x, center.y, radius, id=id)

    @classmethod
    def from_center_and_point(cls, center: Point, point: Point, *, id: str = "") -> Circle:  # noqa: A002
        """Create a circle through ``point`` around ``center``."""
        return cls(center.x, center.y, center.distance_to(point), id=id)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Circle:
        return cls(
            float(data["cx"]),
            float(data["cy"]),
            float(data["radius"]),
            id=str(data.get("id") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.shape_type.value,
            "id": self.id,
            "cx": self.cx,
            "cy": self.cy,
            "radius": self.radius,
        }

    def validate(self) -> None:
        if not geo.is_finite(self.cx, self.cy, self.radius):
            raise InvalidGeometryError("circle", "coordinates must be finite")
        if self.radius < geo.MIN_SIZE:
            raise InvalidGeometryError("circle", "cannot create zero-radius circle")

    @property
    def center(self) -> Point:
        return Point(self.cx, self.cy)

    @property
    def diameter(self) -> float:
        return 2 * self.radius

    @property
    def area(self) -> float:
        return math.pi * self.radius * self.radius

    @property
    def circumference(self) -> float:
        return 2 * math.pi * self.radius

    def contains_point(self, x: float, y: float) -> bool:
        """Check whether a point lies inside the disc."""
        return geo.distance(x, y, self.cx, self.cy) <= self.radius

    def is_point_on_circumference(self, x: float, y: float, tolerance: float = 5.0) -> bool:
        return abs(geo.distance(x, y, self.cx, self.cy) - self.radius) <= tolerance

    def hit_test(self, x: float, y: float, tolerance: float) -> bool:
        return self.is_point_on_circumference(x, y, tolerance)

    def point_at_angle(self, direction: float) -> Point:
        return self.center.point_at(self.radius, direction)

    def angle_of_point(self, point: Point) -> float:
        return geo.angle(self.cx, self.cy, point.x, point.y)

    def intersect_line(self, line: Line) -> list[Point]:
        return _circle_segment_intersections(self.cx, self.cy, self.radius, line)

    def intersects_circle(self, other: Circle) -> bool:
        """Check whether two discs overlap."""
        return geo.distance(self.cx, self.cy, other.cx, other.cy) < self.radius + other.radius

    def intersects_rect(self, box: BoundingBox) -> bool:
        return self.bounding_box().intersects(box)

    def bounding_box(self) -> BoundingBox:
        return BoundingBox(self.cx - self.radius, self.cy - self.radius, self.diameter, self.diameter)

    def snap_points(self) -> list[Point]:
        r = self.radius
        return [
            self.center,
            Point(self.cx + r, self.cy),
            Point(self.cx, self.cy + r),
            Point(self.cx - r, self.cy),
            Point(self.cx, self.cy - r),
        ]

    def nearest_edge_point(self, x: float, y: float) -> Point | None:
        return self.point_at_angle(geo.angle(self.cx, self.cy, x, y))

    def resize(self, radius: float) -> Circle:
        return replace(self, radius=max(0.0, radius))

    def translate(self, dx: float, dy: float) -> Circle:
        return replace(self, cx=self.cx + dx, cy=self.cy + dy)

    def snap_to_grid(self, grid_size: float) -> Circle:
        center = self.center.snap_to_grid(grid_size)
        return replace(self, cx=center.x, cy=center.y, radius=geo.snap_value_to_grid(self.radius, grid_size))

    def equals(self, other: Shape | None, tolerance: float = geo.DEFAULT_TOLERANCE) -> bool:
        if not isinstance(other, Circle):
            return False
        return (
            _close(self.cx, other.cx, tolerance)
            and _close(self.cy, other.cy, tolerance)
            and _close(self.radius, other.radius, tolerance)
        )

    def to_path_data(self) -> str:
        f = geo.format_number
        r = f(self.radius)
        left = f"{f(self.cx - self.radius)} {f(self.cy)}"
        right = f"{f(self.cx + self.radius)} {f(self.cy)}"
        return f"M {left} A {r} {r} 0 1 0 {right} A {r} {r} 0 1 0 {left}"

    def __str__(self) -> str:
        return f"Circle at {self.center} with radius {round(self.radius, 2)}"


@dataclass
class Arc(Shape):
    """A circular arc swept counter-clockwise from ``start_angle`` to ``end_angle``.

    Angles are radians and are kept exactly as given; membership tests
    normalize them on the fly (see :func:`drafting_py.core.geometry.is_angle_between`).

    Attributes:
        cx: X-coordinate of the center.
        cy: Y-coordinate of the center.
        radius: Radius, must be positive to enter a drawing.
        start_angle: Angle where the sweep starts.
        end_angle: Angle where the sweep ends.
    """

    cx: float = 0.0
    cy: float = 0.0
    radius: float = 0.0
    start_angle: float = 0.0
    end_angle: float = 0.0

    shape_type: ClassVar[ShapeType] = ShapeType.ARC

    @staticmethod
    def is_angle_between(value: float, start: float, end: float) -> bool:
        """Check an angle against a counter-clockwise angular domain."""
        return geo.is_angle_between(value, start, end)

    @classmethod
    def from_center_radius_and_angles(
        cls,
        center: Point,
        radius: float,
        start_angle: float,
        end_angle: float,
        *,
        id: str = "",  # noqa: A002
    ) -> Arc:
        return cls(center.x, center.y, radius, start_angle, end_angle, id=id)

    @classmethod
    def from_center_and_points(cls, center: Point, start: Point, end: Point, *, id: str = "") -> Arc:  # noqa: A002
        """Create an arc around ``center`` from the direction of ``start`` to that of ``end``.

        The radius comes from ``start``; ``end`` only contributes its direction.
        """
        return cls(
            center.x,
            center.y,
            center.distance_to(start),
            center.angle_to(start),
            center.angle_to(end),
            id=id,
        )

    @classmethod
    def from_three_points(cls, p1: Point, p2: Point, p3: Point, *, id: str = "") -> Arc | None:  # noqa: A002
        """Create the arc that starts or ends at ``p1``/``p3`` and passes through ``p2``.

        Returns:
            The arc, or None when the three points are collinear.
        """
        if abs(geo.signed_area(p1.x, p1.y, p2.x, p2.y, p3.x, p3.y)) < geo.MIN_SIZE:
            return None

        mid1 = p1.midpoint_to(p2)
        mid2 = p2.midpoint_to(p3)
        slope1 = _bisector_slope(p2.x - p1.x, p2.y - p1.y)
        slope2 = _bisector_slope(p3.x - p2.x, p3.y - p2.y)

        if slope1 is None and slope2 is None:
            return None
        if slope1 is None:
            cx = mid1.x
            cy = slope2 * (cx - mid2.x) + mid2.y  # type: ignore[operator]
        elif slope2 is None:
            cx = mid2.x
            cy = slope1 * (cx - mid1.x) + mid1.y
        else:
            if slope1 == slope2:
                return None
            cx = (mid2.y - mid1.y + slope1 * mid1.x - slope2 * mid2.x) / (slope1 - slope2)
            cy = slope1 * (cx - mid1.x) + mid1.y

        center = Point(cx, cy)
        start = center.angle_to(p1)
        through = center.angle_to(p2)
        end = center.angle_to(p3)
        if not geo.is_angle_between(through, start, end):
            start, end = end, start
        return cls(cx, cy, center.distance_to(p1), start, end, id=id)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Arc:
        return cls(
            float(data["cx"]),
            float(data["cy"]),
            float(data["radius"]),
            float(data["start_angle"]),
            float(data["end_angle"]),
            id=str(data.get("id") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.shape_type.value,
            "id": self.id,
            "cx": self.cx,
            "cy": self.cy,
            "radius": self.radius,
            "start_angle": self.start_angle,
            "end_angle": self.end_angle,
        }

    def validate(self) -> None:
        if not geo.is_finite(self.cx, self.cy, self.radius, self.start_angle, self.end_angle):
            raise InvalidGeometryError("arc", "coordinates must be finite")
        if self.radius < geo.MIN_SIZE:
            raise InvalidGeometryError("arc", "cannot create zero-radius arc")

    @property
    def center(self) -> Point:
        return Point(self.cx, self.cy)

    @property
    def start_point(self) -> Point:
        return self.center.point_at(self.radius, self.start_angle)

    @property
    def end_point(self) -> Point:
        return self.center.point_at(self.radius, self.end_angle)

    @property
    def angle_span(self) -> float:
        """Counter-clockwise sweep in radians, within ``[0, 2π)``."""
        return geo.angle_span(self.start_angle, self.end_angle)

    @property
    def angle_span_degrees(self) -> float:
        return math.degrees(self.angle_span)

    @property
    def length(self) -> float:
        return self.radius * self.angle_span

    @property
    def sector_area(self) -> float:
        return 0.5 * self.radius * self.radius * self.angle_span

    @property
    def large_arc(self) -> bool:
        """Whether the sweep exceeds half a turn (SVG large-arc-flag)."""
        return self.angle_span > math.pi

    def is_point_on_arc(self, x: float, y: float, tolerance: float = 5.0) -> bool:
        """Check the circumference distance, then the angular domain."""
        if abs(geo.distance(x, y, self.cx, self.cy) - self.radius) > tolerance:
            return False
        return geo.is_angle_between(geo.angle(self.cx, self.cy, x, y), self.start_angle, self.end_angle)

    def hit_test(self, x: float, y: float, tolerance: float) -> bool:
        return self.is_point_on_arc(x, y, tolerance)

    def point_at_angle(self, direction: float) -> Point | None:
        """Return the arc point at a direction, or None outside the sweep."""
        if not geo.is_angle_between(direction, self.start_angle, self.end_angle):
            return None
        return self.center.point_at(self.radius, direction)

    def point_at_fraction(self, fraction: float) -> Point:
        """Return the point ``fraction`` of the way along the sweep."""
        return self.center.point_at(self.radius, self.start_angle + fraction * self.angle_span)

    def intersect_line(self, line: Line) -> list[Point]:
        return [
            p
            for p in _circle_segment_intersections(self.cx, self.cy, self.radius, line)
            if geo.is_angle_between(geo.angle(self.cx, self.cy, p.x, p.y), self.start_angle, self.end_angle)
        ]

    def intersects_rect(self, box: BoundingBox) -> bool:
        return self.bounding_box().intersects(box)

    def bounding_box(self) -> BoundingBox:
        """Return the extent, including cardinal extremes inside the sweep."""
        points = [self.start_point, self.end_point]
        points.extend(
            self.center.point_at(self.radius, cardinal)
            for cardinal in geo.CARDINAL_ANGLES
            if geo.is_angle_between(cardinal, self.start_angle, self.end_angle)
        )
        min_x = min(p.x for p in points)
        min_y = min(p.y for p in points)
        max_x = max(p.x for p in points)
        max_y = max(p.y for p in points)
        return BoundingBox(min_x, min_y, max_x - min_x, max_y - min_y)

    def snap_points(self) -> list[Point]:
        return [self.center, self.start_point, self.end_point, self.point_at_fraction(0.5)]

    def nearest_edge_point(self, x: float, y: float) -> Point | None:
        return self.point_at_angle(geo.angle(self.cx, self.cy, x, y))

    def resize(self, radius: float) -> Arc:
        return replace(self, radius=max(0.0, radius))

    def translate(self, dx: float, dy: float) -> Arc:
        return replace(self, cx=self.cx + dx, cy=self.cy + dy)

    def snap_to_grid(self, grid_size: float) -> Arc:
        center = self.center.snap_to_grid(grid_size)
        return replace(self, cx=center.x, cy=center.y, radius=geo.snap_value_to_grid(self.radius, grid_size))

    def equals(self, other: Shape | None, tolerance: float = geo.DEFAULT_TOLERANCE) -> bool:
        if not isinstance(other, Arc):
            return False
        return (
            _close(self.cx, other.cx, tolerance)
            and _close(self.cy, other.cy, tolerance)
            and _close(self.radius, other.radius, tolerance)
            and _close(self.start_angle, other.start_angle, tolerance)
            and _close(self.end_angle, other.end_angle, tolerance)
        )

    def to_path_data(self) -> str:
        f = geo.format_number
        start = self.start_point
        end = self.end_point
        r = f(self.radius)
        large = 1 if self.large_arc else 0
        return f"M {f(start.x)} {f(start.y)} A {r} {r} 0 {large} 1 {f(end.x)} {f(end.y)}"

    def __str__(self) -> str:
        return (
            f"Arc at {self.center} with radius {round(self.radius, 2)}, "
            f"from {round(math.degrees(self.start_angle), 2)}° to {round(math.degrees(self.end_angle), 2)}°"
        )


def _bisector_slope(dx: float, dy: float) -> float | None:
    """Slope of the perpendicular bisector of a segment with direction ``(dx, dy)``.

    Returns None for a vertical bisector (horizontal segment).
    """
    if dy == 0:
        return None
    return -dx / dy


def _circle_segment_intersections(cx: float, cy: float, radius: float, line: Line) -> list[Point]:
    dx = line.x2 - line.x1
    dy = line.y2 - line.y1
    a = dx * dx + dy * dy
    if a == 0:
        return []
    b = 2 * (dx * (line.x1 - cx) + dy * (line.y1 - cy))
    c = (line.x1 - cx) ** 2 + (line.y1 - cy) ** 2 - radius * radius

    discriminant = b * b - 4 * a * c
    if discriminant < 0:
        return []
    if discriminant == 0:
        roots = [-b / (2 * a)]
    else:
        root = math.sqrt(discriminant)
        roots = [(-b + root) / (2 * a), (-b - root) / (2 * a)]
    return [Point(line.x1 + t * dx, line.y1 + t * dy) for t in roots if 0 <= t <= 1]


DrawingShape: TypeAlias = Line | Rectangle | Circle | Arc

SHAPE_CLASSES: dict[ShapeType, type[Shape]] = {
    ShapeType.LINE: Line,
    ShapeType.RECTANGLE: Rectangle,
    ShapeType.CIRCLE: Circle,
    ShapeType.ARC: Arc,
}


def shape_from_dict(data: Any) -> Shape:
    """Rebuild any shape from its serialized form.

    Args:
        data: A mapping produced by ``Shape.to_dict``.

    Returns:
        The reconstructed shape, keeping its original ID.

    Raises:
        InvalidSnapshotError: If the payload is not a mapping, carries an
            unknown ``type`` or misses a field.
    """
    if not isinstance(data, Mapping):
        msg = f"Shape payload must be a mapping, got {type(data).__name__}"
        raise InvalidSnapshotError(msg)
    try:
        shape_type = ShapeType(data["type"])
    except (KeyError, ValueError) as e:
        msg = f"Unknown shape type in payload: {data.get('type')!r}"
        raise InvalidSnapshotError(msg) from e
    try:
        return SHAPE_CLASSES[shape_type].from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        msg = f"Malformed {shape_type.value} payload: {e}"
        raise InvalidSnapshotError(msg) from e
