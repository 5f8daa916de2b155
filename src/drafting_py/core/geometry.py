"""Analytic geometry helpers shared by the shape models and the snapping engine.

Every function here works on raw floats so that the hot paths (hit testing,
snapping) never allocate intermediate objects. Angles are radians measured
with ``atan2`` in drawing coordinates.
"""

from __future__ import annotations

import math

TWO_PI = 2 * math.pi

# Tolerance used by ``equals`` comparisons and serialization round trips.
DEFAULT_TOLERANCE = 0.001

# Smallest length or radius a committed shape may have.
MIN_SIZE = 0.001

# Absorbs float noise in boundary comparisons; never user-visible.
_EPSILON = 1e-9

CARDINAL_ANGLES = (0.0, math.pi / 2, math.pi, 3 * math.pi / 2)


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Return the euclidean distance between two points."""
    return math.hypot(x2 - x1, y2 - y1)


def angle(x1: float, y1: float, x2: float, y2: float) -> float:
    """Return the direction from the first point to the second, in radians."""
    return math.atan2(y2 - y1, x2 - x1)


def normalize_angle(value: float) -> float:
    """Normalize an angle into ``[0, 2π)``."""
    normalized = value % TWO_PI
    # Tiny negative inputs wrap to exactly 2π.
    if normalized >= TWO_PI:
        return 0.0
    return normalized


def is_angle_between(value: float, start: float, end: float) -> bool:
    """Check whether an angle lies in the counter-clockwise sweep ``start -> end``.

    All three angles are normalized into ``[0, 2π)``. When the normalized
    start is greater than the normalized end the domain wraps through zero.

    Args:
        value: The angle to test.
        start: Start of the sweep.
        end: End of the sweep.

    Returns:
        True if the angle is inside the sweep, boundaries included.
    """
    a = normalize_angle(value)
    s = normalize_angle(start)
    e = normalize_angle(end)
    if s <= e:
        return s <= a <= e
    return a >= s or a <= e


def angle_span(start: float, end: float) -> float:
    """Return the counter-clockwise sweep from ``start`` to ``end`` in ``[0, 2π)``."""
    return normalize_angle(normalize_angle(end) - normalize_angle(start))


def point_at_distance_and_angle(x: float, y: float, length: float, direction: float) -> tuple[float, float]:
    """Return the point ``length`` away from ``(x, y)`` along ``direction``."""
    return (x + length * math.cos(direction), y + length * math.sin(direction))


def snap_value_to_grid(value: float, grid_size: float) -> float:
    """Round a value to the nearest multiple of ``grid_size``.

    Halves round up, matching pointer-driven drafting expectations rather than
    Python's banker's rounding. A non-positive grid leaves the value untouched.
    """
    if grid_size <= 0:
        return value
    return math.floor(value / grid_size + 0.5) * grid_size


def segment_parameter(px: float, py: float, x1: float, y1: float, x2: float, y2: float) -> float | None:
    """Return the projection parameter of a point onto the segment's carrier line.

    Returns:
        The unbounded parameter ``t`` (0 at the start, 1 at the end), or None
        for a zero-length segment.
    """
    dx = x2 - x1
    dy = y2 - y1
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return None
    return ((px - x1) * dx + (py - y1) * dy) / length_sq


def project_point_on_segment(
    px: float, py: float, x1: float, y1: float, x2: float, y2: float
) -> tuple[float, float] | None:
    """Project a point onto a segment.

    Returns:
        The foot of the perpendicular, or None if it falls outside the segment
        or the segment has zero length.
    """
    t = segment_parameter(px, py, x1, y1, x2, y2)
    if t is None or t < 0 or t > 1:
        return None
    return (x1 + t * (x2 - x1), y1 + t * (y2 - y1))


def is_point_on_segment(
    px: float, py: float, x1: float, y1: float, x2: float, y2: float, tolerance: float
) -> bool:
    """Check whether a point lies on a segment within a perpendicular tolerance.

    The perpendicular distance must be within ``tolerance`` and the projection
    parameter within ``[0, 1]``. A zero-length segment degrades to a point
    distance check.
    """
    length = distance(x1, y1, x2, y2)
    if length == 0:
        return distance(px, py, x1, y1) <= tolerance + _EPSILON

    cross = abs((py - y1) * (x2 - x1) - (px - x1) * (y2 - y1))
    if cross / length > tolerance + _EPSILON:
        return False

    t = ((px - x1) * (x2 - x1) + (py - y1) * (y2 - y1)) / (length * length)
    return -_EPSILON <= t <= 1 + _EPSILON


def segment_intersection(
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    x3: float,
    y3: float,
    x4: float,
    y4: float,
) -> tuple[float, float] | None:
    """Intersect two segments.

    Returns:
        The intersection point, or None when the segments are parallel or the
        crossing lies outside either of them.
    """
    denominator = (y4 - y3) * (x2 - x1) - (x4 - x3) * (y2 - y1)
    if denominator == 0:
        return None

    ua = ((x4 - x3) * (y1 - y3) - (y4 - y3) * (x1 - x3)) / denominator
    ub = ((x2 - x1) * (y1 - y3) - (y2 - y1) * (x1 - x3)) / denominator
    if 0 <= ua <= 1 and 0 <= ub <= 1:
        return (x1 + ua * (x2 - x1), y1 + ua * (y2 - y1))
    return None


def signed_area(x1: float, y1: float, x2: float, y2: float, x3: float, y3: float) -> float:
    """Return twice the signed area of the triangle through three points."""
    return x1 * (y2 - y3) + x2 * (y3 - y1) + x3 * (y1 - y2)


def is_point_in_rect(px: float, py: float, rx: float, ry: float, rw: float, rh: float) -> bool:
    """Check whether a point lies inside a rectangle, edges included."""
    return rx <= px <= rx + rw and ry <= py <= ry + rh


def rects_intersect(
    x1: float, y1: float, w1: float, h1: float, x2: float, y2: float, w2: float, h2: float
) -> bool:
    """Check whether two axis-aligned rectangles overlap, touching edges included."""
    return not (x1 + w1 < x2 or x2 + w2 < x1 or y1 + h1 < y2 or y2 + h2 < y1)


def is_finite(*values: float) -> bool:
    """Check that every value is a finite number."""
    return all(math.isfinite(v) for v in values)


def format_number(value: float, precision: int = 6) -> str:
    """Format a coordinate for path data without trailing zeros.

    >>> format_number(10.0)
    '10'
    >>> format_number(-0.25)
    '-0.25'
    """
    text = f"{round(value, precision):.{precision}f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text
