"""Tests for the drafting command line interface."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest
from click.testing import CliRunner

from drafting_py.cli import cli
from drafting_py.core.models import Circle, Line
from drafting_py.services.export import Drawing, ExportService

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture
def drawing_file(tmp_path: Path) -> Path:
    """Write a small drawing document to disk."""
    drawing = Drawing(
        shapes=[Line(103, 97, 300, 97, id="line_a"), Circle(500, 300, 20, id="circle_b")],
        name="Site plan",
    )
    path = tmp_path / "plan.json"
    path.write_text(ExportService().to_json(drawing), encoding="utf-8")
    return path


class TestInspect:
    """Tests for the inspect command."""

    def test_lists_shapes(self, runner: CliRunner, drawing_file: Path) -> None:
        """Test every shape appears in the table."""
        result = runner.invoke(cli, ["inspect", str(drawing_file)])
        assert result.exit_code == 0, result.output
        assert "Site plan" in result.output
        assert "line_a" in result.output
        assert "circle_b" in result.output

    def test_malformed_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test an unreadable drawing fails with a non-zero exit code."""
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        result = runner.invoke(cli, ["inspect", str(path)])
        assert result.exit_code == 1

    @pytest.mark.parametrize("data", [b"\x80abc", b"\xff\xfe{bad"], ids=["continuation-byte", "bom-like"])
    def test_non_utf8_file(self, runner: CliRunner, tmp_path: Path, data: bytes) -> None:
        """Test a binary file fails cleanly instead of crashing."""
        path = tmp_path / "binary.json"
        path.write_bytes(data)
        result = runner.invoke(cli, ["inspect", str(path)])
        assert result.exit_code == 1
        assert not isinstance(result.exception, UnicodeDecodeError)

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test a missing path is a usage error."""
        result = runner.invoke(cli, ["inspect", str(tmp_path / "nope.json")])
        assert result.exit_code == 2


class TestSnap:
    """Tests for the snap command."""

    def test_point_snap(self, runner: CliRunner, drawing_file: Path) -> None:
        """Test a position near an endpoint snaps onto it."""
        result = runner.invoke(cli, ["snap", str(drawing_file), "104", "96"])
        assert result.exit_code == 0, result.output
        assert "(104, 96) -> (103, 97) via point on line_a" in result.output

    def test_grid_snap(self, runner: CliRunner, drawing_file: Path) -> None:
        """Test a position away from every shape snaps to the grid."""
        result = runner.invoke(cli, ["snap", str(drawing_file), "22", "38", "--grid", "25"])
        assert result.exit_code == 0, result.output
        assert "(22, 38) -> (25, 50) via grid" in result.output

    def test_line_snap(self, runner: CliRunner, drawing_file: Path) -> None:
        """Test projection onto an outline with grid and points off."""
        result = runner.invoke(cli, ["snap", str(drawing_file), "150", "94", "--no-grid", "--no-points"])
        assert result.exit_code == 0, result.output
        assert "(150, 94) -> (150, 97) via line on line_a" in result.output

    def test_everything_off(self, runner: CliRunner, drawing_file: Path) -> None:
        """Test the raw position is returned with every snap disabled."""
        args = ["snap", str(drawing_file), "104.5", "96.5", "--no-grid", "--no-points", "--no-lines"]
        result = runner.invoke(cli, args)
        assert result.exit_code == 0, result.output
        assert "(104.5, 96.5) -> (104.5, 96.5) via no snap" in result.output

    def test_zoom_shrinks_tolerance(self, runner: CliRunner, drawing_file: Path) -> None:
        """Test zooming in puts nearby outlines out of reach."""
        args = ["snap", str(drawing_file), "150", "94", "--no-grid", "--zoom", "4"]
        result = runner.invoke(cli, args)
        assert result.exit_code == 0, result.output
        assert "via no snap" in result.output

    def test_environment_config(
        self, runner: CliRunner, drawing_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test DRAFTING_* variables reach the snapping engine."""
        monkeypatch.setenv("DRAFTING_SNAP_TO_POINTS", "false")
        monkeypatch.setenv("DRAFTING_SNAP_TO_LINES", "false")
        result = runner.invoke(cli, ["snap", str(drawing_file), "104", "96"])
        assert result.exit_code == 0, result.output
        assert "-> (100, 100) via grid" in result.output

    def test_json_logs_flag(self, runner: CliRunner, drawing_file: Path) -> None:
        """Test the global logging flags are accepted."""
        result = runner.invoke(cli, ["--json-logs", "--debug", "snap", str(drawing_file), "0", "0"])
        assert result.exit_code == 0, result.output


class TestExport:
    """Tests for the export command."""

    def test_svg(self, runner: CliRunner, drawing_file: Path, tmp_path: Path) -> None:
        """Test SVG is the default format."""
        output = tmp_path / "plan.svg"
        result = runner.invoke(cli, ["export", str(drawing_file), "-o", str(output)])
        assert result.exit_code == 0, result.output
        assert "Exported 2 shapes" in result.output
        svg = output.read_text(encoding="utf-8")
        assert 'data-id="line_a"' in svg
        assert 'data-type="circle"' in svg

    def test_png(self, runner: CliRunner, drawing_file: Path, tmp_path: Path) -> None:
        """Test PNG export writes image bytes."""
        output = tmp_path / "plan.png"
        result = runner.invoke(cli, ["export", str(drawing_file), "-f", "png", "-o", str(output), "--scale", "0.5"])
        assert result.exit_code == 0, result.output
        assert output.read_bytes().startswith(b"\x89PNG")

    def test_json(self, runner: CliRunner, drawing_file: Path, tmp_path: Path) -> None:
        """Test JSON export writes the same document back."""
        output = tmp_path / "copy.json"
        result = runner.invoke(cli, ["export", str(drawing_file), "--format", "json", "--output", str(output)])
        assert result.exit_code == 0, result.output
        assert json.loads(output.read_text(encoding="utf-8")) == json.loads(drawing_file.read_text(encoding="utf-8"))

    def test_unknown_format(self, runner: CliRunner, drawing_file: Path, tmp_path: Path) -> None:
        """Test unsupported formats are refused."""
        result = runner.invoke(cli, ["export", str(drawing_file), "-f", "pdf", "-o", str(tmp_path / "x.pdf")])
        assert result.exit_code == 2
