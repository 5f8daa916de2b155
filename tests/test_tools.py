"""Tests for the interactive drafting tools."""

from __future__ import annotations

import math

import pytest

from drafting_py.core import models
from drafting_py.core.models import Arc, Circle, Line, Point, Rectangle
from drafting_py.core.types import ArcMode, CircleMode
from drafting_py.session import DraftingSession


class TestLineTool:
    """Tests for the line tool."""

    def test_begin_snaps_and_sets_reference(self, session: DraftingSession) -> None:
        """Test the anchor is snapped and becomes the reference point."""
        tool = session.line_tool()
        assert tool.begin(12, 9) == Point(10, 10)
        assert session.constraints.reference_point == Point(10, 10)
        assert tool.active

    def test_commit_adds_line(self, session: DraftingSession) -> None:
        """Test a committed line lands in the registry."""
        tool = session.line_tool()
        tool.begin(0, 0)
        result = tool.commit(104, 96)

        assert not result.cancelled
        assert isinstance(result.shape, Line)
        assert result.shape.equals(Line(0, 0, 100, 100))
        assert len(session.registry) == 1
        assert not tool.active
        assert session.constraints.reference_point is None

    def test_update_returns_preview(self, session: DraftingSession) -> None:
        """Test previews follow the pointer without touching the registry."""
        tool = session.line_tool()
        assert tool.update(50, 50) is None
        tool.begin(0, 0)
        preview = tool.update(48, 3)
        assert preview is not None
        assert preview.equals(Line(0, 0, 50, 0))
        assert preview.id == "preview"
        assert len(session.registry) == 0

    def test_zero_length_is_cancelled(self, session: DraftingSession) -> None:
        """Test a zero-length line is rejected and nothing is stored."""
        tool = session.line_tool()
        tool.begin(0, 0)
        result = tool.commit(2, 3)

        assert result.cancelled
        assert result.shape is None
        assert "zero-length" in result.reason
        assert len(session.registry) == 0
        assert not session.history.can_undo()

    def test_commit_without_begin(self, session: DraftingSession) -> None:
        """Test committing with nothing in progress is a no-op."""
        assert session.line_tool().commit(10, 10).cancelled

    def test_horizontal_constraint(self, session: DraftingSession) -> None:
        """Test the end point keeps the start's y under a horizontal lock."""
        session.engine.toggle_constraint("horizontal", True)
        tool = session.line_tool()
        tool.begin(0, 0)
        result = tool.commit(73, 41)
        assert result.shape.equals(Line(0, 0, 70, 0))

    def test_parallel_constraint(self, free_session: DraftingSession) -> None:
        """Test the end point is aligned to the reference line."""
        free_session.engine.toggle_constraint("parallel", True)
        free_session.engine.set_reference_element(Line(0, 0, 0, 10))
        tool = free_session.line_tool()
        tool.begin(5, 5)
        result = tool.commit(8, 9)
        assert result.shape.equals(Line(5, 5, 5, 10))

    def test_continuous_mode_chains_lines(self, session: DraftingSession) -> None:
        """Test each new line starts at the previous end point."""
        tool = session.line_tool(continuous=True)
        tool.begin(0, 0)
        tool.commit(100, 0)
        assert tool.last_end_point == Point(100, 0)

        assert tool.begin(500, 500) == Point(100, 0)
        second = tool.commit(100, 100).shape
        assert second.equals(Line(100, 0, 100, 100))

    def test_cancel_exits_continuous_mode(self, session: DraftingSession) -> None:
        """Test cancelling forgets the chain."""
        tool = session.line_tool(continuous=True)
        tool.begin(0, 0)
        tool.commit(100, 0)
        tool.cancel()
        assert tool.last_end_point is None
        assert tool.begin(52, 48) == Point(50, 50)

    def test_commit_is_undoable(self, session: DraftingSession) -> None:
        """Test a committed shape can be undone and redone."""
        tool = session.line_tool()
        tool.begin(0, 0)
        tool.commit(100, 0)
        assert session.undo()
        assert len(session.registry) == 0
        assert session.redo()
        assert len(session.registry) == 1


class TestRectangleTool:
    """Tests for the rectangle tool."""

    def test_corner_to_corner(self, session: DraftingSession) -> None:
        """Test dragging towards the top-left still yields a normalized rectangle."""
        tool = session.rectangle_tool()
        tool.begin(100, 100)
        result = tool.commit(42, 58)
        assert result.shape.equals(Rectangle(40, 60, 60, 40))

    def test_square(self, session: DraftingSession) -> None:
        """Test square mode uses the longer side."""
        tool = session.rectangle_tool(square=True)
        tool.begin(0, 0)
        result = tool.commit(40, -20)
        assert result.shape.equals(Rectangle(0, -40, 40, 40))

    def test_zero_area_is_cancelled(self, session: DraftingSession) -> None:
        """Test a flat rectangle is rejected."""
        tool = session.rectangle_tool()
        tool.begin(0, 0)
        result = tool.commit(50, 2)
        assert result.cancelled
        assert len(session.registry) == 0


class TestCircleTool:
    """Tests for the circle tool."""

    def test_center_radius(self, session: DraftingSession) -> None:
        """Test the first point is the center."""
        tool = session.circle_tool()
        tool.begin(50, 50)
        result = tool.commit(80, 90)
        assert result.shape.equals(Circle(50, 50, 50))

    def test_diameter(self, session: DraftingSession) -> None:
        """Test the two points span the diameter."""
        tool = session.circle_tool(mode="diameter")
        assert tool.mode is CircleMode.DIAMETER
        tool.begin(0, 0)
        result = tool.commit(100, 0)
        assert result.shape.equals(Circle(50, 0, 50))

    def test_invalid_mode(self, session: DraftingSession) -> None:
        """Test unknown modes are refused."""
        with pytest.raises(ValueError, match="ellipse"):
            session.circle_tool().set_mode("ellipse")

    def test_zero_radius_never_stored(self, session: DraftingSession) -> None:
        """Test a zero-radius circle is cancelled."""
        tool = session.circle_tool()
        tool.begin(10, 10)
        assert tool.update(11, 11) is None
        result = tool.commit(11, 11)
        assert result.cancelled
        assert len(session.registry) == 0


class TestArcTool:
    """Tests for the arc tool."""

    def test_center_start_end(self, free_session: DraftingSession) -> None:
        """Test center mode takes radius from the start click."""
        tool = free_session.arc_tool()
        tool.begin(0, 0)
        tool.add_point(10, 0)
        result = tool.commit(0, 30)
        arc = result.shape
        assert isinstance(arc, Arc)
        assert arc.radius == 10
        assert arc.start_angle == 0
        assert arc.end_angle == pytest.approx(math.pi / 2)

    def test_center_mode_previews_circle_first(self, free_session: DraftingSession) -> None:
        """Test the preview is a full circle until the start click."""
        tool = free_session.arc_tool()
        tool.begin(0, 0)
        assert isinstance(tool.update(10, 0), Circle)
        tool.add_point(10, 0)
        assert isinstance(tool.update(0, 10), Arc)

    def test_center_mode_quarter_default(self, free_session: DraftingSession) -> None:
        """Test committing without a start click sweeps a quarter turn."""
        tool = free_session.arc_tool()
        tool.begin(0, 0)
        arc = tool.commit(10, 0).shape
        assert arc.angle_span == pytest.approx(math.pi / 2)

    def test_three_point(self, free_session: DraftingSession) -> None:
        """Test the arc passes through all three clicks."""
        tool = free_session.arc_tool(mode=ArcMode.THREE_POINT)
        tool.begin(0, 0)
        tool.add_point(10, 10)
        arc = tool.commit(20, 0).shape
        for x, y in ((0, 0), (10, 10), (20, 0)):
            assert arc.is_point_on_arc(x, y, 0.001)

    def test_three_point_collinear_cancelled(self, free_session: DraftingSession) -> None:
        """Test collinear clicks are rejected."""
        tool = free_session.arc_tool(mode="three-point")
        tool.begin(0, 0)
        tool.add_point(1, 1)
        result = tool.commit(2, 2)
        assert result.cancelled
        assert "collinear" in result.reason
        assert len(free_session.registry) == 0
        assert tool.second_point is None

    def test_three_point_needs_middle_click(self, free_session: DraftingSession) -> None:
        """Test three-point mode cannot commit after two clicks."""
        tool = free_session.arc_tool(mode="three-point")
        tool.begin(0, 0)
        assert tool.commit(20, 0).cancelled

    def test_zero_radius_cancelled(self, free_session: DraftingSession) -> None:
        """Test a zero-radius arc is rejected."""
        tool = free_session.arc_tool()
        tool.begin(5, 5)
        assert tool.commit(5, 5).cancelled
        assert len(free_session.registry) == 0

    def test_add_point_without_begin(self, free_session: DraftingSession) -> None:
        """Test the middle click is ignored with nothing in progress."""
        assert free_session.arc_tool().add_point(1, 1) is None


class TestCommitSafety:
    """Tests for commits that cannot be stored."""

    def test_duplicate_id_is_cancelled(self, session: DraftingSession, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test an ID clash cancels the commit without an undo state."""
        session.registry.add(Line(500, 500, 600, 500, id="line_taken"))
        monkeypatch.setattr(models, "generate_shape_id", lambda shape_type: "line_taken")

        tool = session.line_tool()
        tool.begin(0, 0)
        result = tool.commit(100, 0)

        assert result.cancelled
        assert "line_taken" in result.reason
        assert len(session.registry) == 1
        assert not session.history.can_undo()
        assert not tool.active

    def test_undo_state_matches_pre_commit(self, session: DraftingSession, sample_circle: Circle) -> None:
        """Test the recorded undo state is the registry before the commit."""
        session.registry.add(sample_circle)
        tool = session.rectangle_tool()
        tool.begin(0, 0)
        tool.commit(20, 20)
        assert session.undo()
        assert [s.id for s in session.registry] == [sample_circle.id]


class TestOrthogonalConstraint:
    """Tests for the modifier constraint while dragging."""

    def test_line_keeps_dominant_axis(self, session: DraftingSession) -> None:
        """Test wide drags become horizontal and tall drags vertical."""
        tool = session.line_tool()
        tool.begin(0, 0)
        assert tool.update(73, 41, constrained=True).equals(Line(0, 0, 70, 0))
        result = tool.commit(38, 91, constrained=True)
        assert result.shape.equals(Line(0, 0, 0, 90))

    def test_equal_extent_is_vertical(self, free_session: DraftingSession) -> None:
        """Test a diagonal drag falls back to vertical."""
        tool = free_session.line_tool()
        tool.begin(0, 0)
        assert tool.commit(30, 30, constrained=True).shape.equals(Line(0, 0, 0, 30))

    def test_unconstrained_by_default(self, free_session: DraftingSession) -> None:
        """Test the end point is free without the modifier."""
        tool = free_session.line_tool()
        tool.begin(0, 0)
        assert tool.commit(30, 20).shape.equals(Line(0, 0, 30, 20))

    def test_rectangle_becomes_square(self, session: DraftingSession) -> None:
        """Test the modifier forces a square rectangle."""
        tool = session.rectangle_tool()
        tool.begin(0, 0)
        assert tool.commit(-40, 20, constrained=True).shape.equals(Rectangle(-40, 0, 40, 40))


class TestTypedDimensions:
    """Tests for committing shapes from typed dimensions."""

    def test_line_length_and_angle(self, session: DraftingSession) -> None:
        """Test the line runs from the anchor at the given angle in degrees."""
        tool = session.line_tool()
        tool.begin(0, 0)
        result = tool.commit_dimensions(length=50, angle=90)
        assert result.shape.equals(Line(0, 0, 0, 50))
        assert len(session.registry) == 1
        assert session.history.can_undo()

    def test_line_dimensions_bypass_snapping(self, session: DraftingSession) -> None:
        """Test typed values are used exactly, not rounded to the grid."""
        tool = session.line_tool()
        tool.begin(0, 0)
        line = tool.commit_dimensions(length=12.5, angle=0).shape
        assert line.equals(Line(0, 0, 12.5, 0))

    def test_line_dimensions_chain_in_continuous_mode(self, session: DraftingSession) -> None:
        """Test a typed line continues the chain."""
        tool = session.line_tool(continuous=True)
        tool.begin(0, 0)
        tool.commit_dimensions(length=30, angle=0)
        assert tool.last_end_point.equals(Point(30, 0))

    @pytest.mark.parametrize("length", [0, -10, float("nan")])
    def test_line_needs_positive_length(self, session: DraftingSession, length: float) -> None:
        """Test non-positive lengths are rejected."""
        tool = session.line_tool()
        tool.begin(0, 0)
        assert tool.commit_dimensions(length=length, angle=0).cancelled
        assert len(session.registry) == 0

    def test_line_measure(self, session: DraftingSession) -> None:
        """Test the length and angle shown for the pointer position."""
        tool = session.line_tool()
        assert tool.measure(10, 10) is None
        tool.begin(0, 0)
        length, angle = tool.measure(0, -52)
        assert length == pytest.approx(50)
        assert angle == pytest.approx(270)

    def test_line_preview(self, session: DraftingSession) -> None:
        """Test previews of typed values use the preview ID."""
        tool = session.line_tool()
        tool.begin(0, 0)
        preview = tool.preview_dimensions(20, 180)
        assert preview.id == "preview"
        assert preview.equals(Line(0, 0, -20, 0))
        assert tool.preview_dimensions(0, 180) is None
        assert len(session.registry) == 0

    def test_without_begin(self, session: DraftingSession) -> None:
        """Test typed dimensions need an operation in progress."""
        assert session.line_tool().commit_dimensions(10, 0).cancelled
        assert session.rectangle_tool().commit_dimensions(10, 10).cancelled
        assert session.circle_tool().commit_dimensions(10).cancelled
        assert session.arc_tool().commit_dimensions(10, 0, 90).cancelled

    def test_rectangle_size(self, session: DraftingSession) -> None:
        """Test negative extents grow towards the top-left."""
        tool = session.rectangle_tool()
        tool.begin(100, 100)
        assert tool.preview_dimensions(-30, 20).equals(Rectangle(70, 100, 30, 20))
        assert tool.commit_dimensions(-30, 20).shape.equals(Rectangle(70, 100, 30, 20))

    def test_rectangle_zero_width(self, session: DraftingSession) -> None:
        """Test a flat typed rectangle is rejected."""
        tool = session.rectangle_tool()
        tool.begin(0, 0)
        assert tool.commit_dimensions(0, 20).cancelled

    def test_circle_radius(self, session: DraftingSession) -> None:
        """Test the circle is centered on the first click."""
        tool = session.circle_tool()
        tool.begin(50, 50)
        assert tool.commit_dimensions(15).shape.equals(Circle(50, 50, 15))

    @pytest.mark.parametrize("radius", [0, -5])
    def test_circle_radius_must_be_positive(self, session: DraftingSession, radius: float) -> None:
        """Test non-positive radii are rejected."""
        tool = session.circle_tool()
        tool.begin(50, 50)
        assert tool.preview_dimensions(radius) is None
        assert tool.commit_dimensions(radius).cancelled
        assert len(session.registry) == 0

    def test_arc_radius_and_angles(self, free_session: DraftingSession) -> None:
        """Test angles are given in degrees around the first click."""
        tool = free_session.arc_tool()
        tool.begin(0, 0)
        arc = tool.commit_dimensions(10, 0, 90).shape
        assert arc.radius == 10
        assert arc.start_angle == 0
        assert arc.end_angle == pytest.approx(math.pi / 2)

    def test_arc_zero_sweep_rejected(self, free_session: DraftingSession) -> None:
        """Test equal start and end angles are rejected."""
        tool = free_session.arc_tool()
        tool.begin(0, 0)
        assert tool.preview_dimensions(10, 45, 45) is None
        result = tool.commit_dimensions(10, 45, 45)
        assert result.cancelled
        assert "coincide" in result.reason


class TestArcSweep:
    """Tests for arcs whose start and end directions coincide."""

    def test_center_mode_same_direction(self, free_session: DraftingSession) -> None:
        """Test an end click in the start direction is rejected."""
        tool = free_session.arc_tool()
        tool.begin(0, 0)
        tool.add_point(10, 0)
        result = tool.commit(30, 0)
        assert result.cancelled
        assert "coincide" in result.reason
        assert len(free_session.registry) == 0
