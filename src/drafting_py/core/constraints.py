"""Directional drafting constraints.

The constraint state is owned by a drafting session and shared with the
snapping engine and the tools. The horizontal and vertical locks are applied by
the engine; parallel and perpendicular adjust the second point of a line once
both points are known.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import structlog

from drafting_py.core import geometry as geo
from drafting_py.core.models import Line, Point
from drafting_py.core.types import ConstraintType
from drafting_py.exceptions import InvalidConstraintError

if TYPE_CHECKING:
    from drafting_py.core.models import Shape

logger = structlog.get_logger(__name__)


class ConstraintState:
    """Active directional constraints plus their reference geometry.

    Attributes:
        reference_element: Shape the parallel/perpendicular constraints align to.
        reference_point: Anchor the horizontal/vertical constraints lock to.
    """

    def __init__(self) -> None:
        """Initialize with every constraint disabled and no references."""
        self._active: dict[ConstraintType, bool] = dict.fromkeys(ConstraintType, False)
        self.reference_element: Shape | None = None
        self.reference_point: Point | None = None

    def is_active(self, name: ConstraintType | str) -> bool:
        """Check whether a constraint is enabled.

        Raises:
            InvalidConstraintError: If the name is not a known constraint.
        """
        return self._active[self._parse(name)]

    @property
    def active_constraints(self) -> dict[str, bool]:
        """Return a copy of every constraint flag keyed by name."""
        return {constraint.value: enabled for constraint, enabled in self._active.items()}

    def toggle_constraint(self, name: ConstraintType | str, enabled: bool | None = None) -> bool:
        """Enable, disable or flip a constraint.

        Args:
            name: One of ``horizontal``, ``vertical``, ``parallel`` or ``perpendicular``.
            enabled: The new state, or None to flip the current one.

        Returns:
            The constraint's new state.

        Raises:
            InvalidConstraintError: If the name is not a known constraint.
        """
        constraint = self._parse(name)
        new_state = not self._active[constraint] if enabled is None else enabled
        self._active[constraint] = new_state
        logger.info("Constraint toggled", constraint=constraint.value, enabled=new_state)
        return new_state

    def set_reference_element(self, element: Shape | None) -> None:
        """Set the shape the parallel and perpendicular constraints align to."""
        self.reference_element = element.copy() if element is not None else None
        logger.debug("Reference element set", shape_id=element.id if element is not None else None)

    def set_reference_point(self, point: Point | None) -> None:
        """Set the anchor the horizontal and vertical constraints lock to."""
        self.reference_point = point.copy() if point is not None else None
        logger.debug("Reference point set", point=str(point) if point is not None else None)

    def clear(self) -> None:
        """Drop both references, leaving the constraint flags untouched."""
        self.reference_element = None
        self.reference_point = None

    def apply_parallel_constraint(self, x1: float, y1: float, x2: float, y2: float) -> Point:
        """Rotate the second point so the segment runs parallel to the reference line.

        The distance between the two points is preserved.

        Returns:
            The adjusted second point, or the second point unchanged when the
            constraint is off, there is no reference line or it has zero length.
        """
        return self._align(ConstraintType.PARALLEL, 0.0, x1, y1, x2, y2)

    def apply_perpendicular_constraint(self, x1: float, y1: float, x2: float, y2: float) -> Point:
        """Rotate the second point so the segment runs perpendicular to the reference line."""
        return self._align(ConstraintType.PERPENDICULAR, math.pi / 2, x1, y1, x2, y2)

    def _align(
        self, constraint: ConstraintType, offset: float, x1: float, y1: float, x2: float, y2: float
    ) -> Point:
        reference = self.reference_element
        if not self._active[constraint] or not isinstance(reference, Line) or reference.length == 0:
            return Point(x2, y2)
        length = geo.distance(x1, y1, x2, y2)
        return Point(*geo.point_at_distance_and_angle(x1, y1, length, reference.angle + offset))

    @staticmethod
    def _parse(name: ConstraintType | str) -> ConstraintType:
        try:
            return ConstraintType(name)
        except ValueError as e:
            raise InvalidConstraintError(str(name)) from e
