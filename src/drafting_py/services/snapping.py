"""Snapping engine: turns raw pointer positions into drafting coordinates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from drafting_py.core import geometry as geo
from drafting_py.core.constraints import ConstraintState
from drafting_py.core.models import Point
from drafting_py.core.types import ConstraintType, SnapKind, SnapToggle

if TYPE_CHECKING:
    from drafting_py.core.models import Shape
    from drafting_py.registry.base import RegistryProtocol

logger = structlog.get_logger(__name__)


@dataclass
class SnapSettings:
    """Snap toggles and tolerances.

    Attributes:
        snap_to_grid: Round coordinates to the grid.
        snap_to_points: Snap to shape snap points.
        snap_to_lines: Snap onto shape outlines.
        grid_size: Grid spacing in world units.
        snap_distance: Snap tolerance in screen pixels.
        zoom: Current viewport zoom, used to convert the tolerance to world units.
    """

    snap_to_grid: bool = True
    snap_to_points: bool = True
    snap_to_lines: bool = True
    grid_size: float = 10.0
    snap_distance: float = 10.0
    zoom: float = 1.0

    def __post_init__(self) -> None:
        if self.zoom <= 0:
            msg = f"zoom must be positive, got {self.zoom}"
            raise ValueError(msg)

    @property
    def world_snap_distance(self) -> float:
        """Snap tolerance in world units."""
        return self.snap_distance / self.zoom


@dataclass(frozen=True)
class SnapCandidate:
    """A coordinate a pointer position may snap to.

    Attributes:
        point: The snapped coordinate.
        kind: Which snap source produced it.
        source_shape_id: ID of the shape it belongs to, None for grid snaps.
        distance: Distance from the position that was being snapped.
    """

    point: Point
    kind: SnapKind
    source_shape_id: str | None = None
    distance: float = 0.0


@dataclass(frozen=True)
class SnapResult:
    """Outcome of resolving a pointer position.

    Attributes:
        point: Final drafting coordinate.
        raw: The pointer position as given.
        candidate: The last snap that changed the position, if any.
        locked_x: Whether a vertical constraint fixed the x-coordinate.
        locked_y: Whether a horizontal constraint fixed the y-coordinate.
    """

    point: Point
    raw: Point
    candidate: SnapCandidate | None = None
    locked_x: bool = False
    locked_y: bool = False

    @property
    def kind(self) -> SnapKind | None:
        return self.candidate.kind if self.candidate else None


class SnappingEngine:
    """Resolves pointer positions against constraints, the grid and the drawing.

    Resolution order:

    1. Directional locks. With a reference point, ``horizontal`` fixes y and
       ``vertical`` fixes x to the reference.
    2. Grid snap of every coordinate that is not locked.
    3. Point snap (skipped while a lock is active). The closest snap point
       within tolerance wins; ties go to registry order, then point order.
       A point snap ends resolution.
    4. Line snap (skipped while a lock is active). The closest projection
       onto a line, rectangle edge or circle/arc outline within tolerance.

    The engine never mutates the registry.
    """

    def __init__(
        self,
        registry: RegistryProtocol,
        constraints: ConstraintState | None = None,
        settings: SnapSettings | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            registry: Shapes to snap against.
            constraints: Shared constraint state; a private one is created if omitted.
            settings: Snap settings; defaults are used if omitted.
        """
        self.registry = registry
        self.constraints = constraints if constraints is not None else ConstraintState()
        self.settings = settings if settings is not None else SnapSettings()

    def toggle_constraint(self, name: str, enabled: bool | None = None) -> bool:
        """Toggle a snap source or a directional constraint.

        Args:
            name: A snap toggle (``snap_to_grid``, ``snap_to_points``,
                ``snap_to_lines``) or a directional constraint name.
            enabled: The new state, or None to flip the current one.

        Returns:
            The new state.

        Raises:
            InvalidConstraintError: If the name is neither.
        """
        try:
            toggle = SnapToggle(name)
        except ValueError:
            return self.constraints.toggle_constraint(name, enabled)

        current = getattr(self.settings, toggle.value)
        new_state = not current if enabled is None else enabled
        setattr(self.settings, toggle.value, new_state)
        logger.info("Snap toggled", toggle=toggle.value, enabled=new_state)
        return new_state

    def set_reference_element(self, element: Shape | None) -> None:
        """Set the reference shape for parallel/perpendicular constraints."""
        self.constraints.set_reference_element(element)

    def set_reference_point(self, point: Point | None) -> None:
        """Set the reference point for horizontal/vertical constraints."""
        self.constraints.set_reference_point(point)

    def apply_constraints(self, x: float, y: float) -> Point:
        """Return the drafting coordinate for a raw pointer position."""
        return self.resolve(x, y).point

    def resolve(self, x: float, y: float) -> SnapResult:
        """Resolve a pointer position and report which snap won.

        Args:
            x: Pointer x in world units.
            y: Pointer y in world units.

        Returns:
            The resolved position together with the winning snap candidate.
        """
        raw = Point(x, y)
        reference = self.constraints.reference_point
        locked_x = reference is not None and self.constraints.is_active(ConstraintType.VERTICAL)
        locked_y = reference is not None and self.constraints.is_active(ConstraintType.HORIZONTAL)

        rx = reference.x if locked_x else x  # type: ignore[union-attr]
        ry = reference.y if locked_y else y  # type: ignore[union-attr]
        candidate: SnapCandidate | None = None

        if self.settings.snap_to_grid and self.settings.grid_size > 0 and not (locked_x and locked_y):
            grid = self.snap_to_grid(rx, ry)
            gx = rx if locked_x else grid.x
            gy = ry if locked_y else grid.y
            candidate = SnapCandidate(Point(gx, gy), SnapKind.GRID, None, geo.distance(rx, ry, gx, gy))
            rx, ry = gx, gy

        if not (locked_x or locked_y):
            shape_snap = None
            if self.settings.snap_to_points:
                shape_snap = self.snap_to_nearest_point(rx, ry)
            if shape_snap is None and self.settings.snap_to_lines:
                shape_snap = self.snap_to_nearest_line(rx, ry)
            if shape_snap is not None:
                candidate = shape_snap
                rx, ry = shape_snap.point.x, shape_snap.point.y

        result = SnapResult(Point(rx, ry), raw, candidate, locked_x, locked_y)
        logger.debug(
            "Snap resolved",
            raw=str(raw),
            point=str(result.point),
            kind=result.kind.value if result.kind else None,
            source_shape_id=candidate.source_shape_id if candidate else None,
        )
        return result

    def snap_to_grid(self, x: float, y: float) -> Point:
        """Round a position to the nearest grid intersection."""
        return Point(x, y).snap_to_grid(self.settings.grid_size)

    def snap_to_nearest_point(self, x: float, y: float) -> SnapCandidate | None:
        """Find the closest shape snap point within the snap tolerance.

        Returns:
            The winning candidate, or None if no snap point is close enough.
        """
        tolerance = self.settings.world_snap_distance
        best: SnapCandidate | None = None
        for shape in self.registry:
            for point in shape.snap_points():
                d = geo.distance(x, y, point.x, point.y)
                if d <= tolerance and (best is None or d < best.distance):
                    best = SnapCandidate(point, SnapKind.POINT, shape.id, d)
        return best

    def snap_to_nearest_line(self, x: float, y: float) -> SnapCandidate | None:
        """Find the closest projection onto a shape outline within the snap tolerance.

        Returns:
            The winning candidate, or None if no outline is close enough.
        """
        tolerance = self.settings.world_snap_distance
        best: SnapCandidate | None = None
        for shape in self.registry:
            projected = shape.nearest_edge_point(x, y)
            if projected is None:
                continue
            d = geo.distance(x, y, projected.x, projected.y)
            if d <= tolerance and (best is None or d < best.distance):
                best = SnapCandidate(projected, SnapKind.LINE, shape.id, d)
        return best
