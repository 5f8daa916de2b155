"""Pytest configuration and fixtures for drafting-py tests."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import pytest
import structlog

from drafting_py.config import DraftingConfig
from drafting_py.core.models import Arc, Circle, Line, Rectangle
from drafting_py.registry.memory import ShapeRegistry
from drafting_py.session import DraftingSession

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Restore structlog defaults after each test."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


# Registry fixtures


@pytest.fixture
def registry() -> ShapeRegistry:
    """Create a fresh ShapeRegistry instance for each test."""
    return ShapeRegistry()


@pytest.fixture
def session() -> DraftingSession:
    """Create a drafting session with default configuration."""
    return DraftingSession(DraftingConfig())


@pytest.fixture
def free_session() -> DraftingSession:
    """Create a drafting session with every snap source switched off."""
    return DraftingSession(DraftingConfig(snap_to_grid=False, snap_to_points=False, snap_to_lines=False))


# Shape fixtures


@pytest.fixture
def sample_line() -> Line:
    """Create a sample line for testing."""
    return Line(0, 0, 100, 0, id="line_sample")


@pytest.fixture
def sample_rectangle() -> Rectangle:
    """Create a sample rectangle for testing."""
    return Rectangle(10, 20, 100, 50, id="rectangle_sample")


@pytest.fixture
def sample_circle() -> Circle:
    """Create a sample circle for testing."""
    return Circle(50, 50, 25, id="circle_sample")


@pytest.fixture
def sample_arc() -> Arc:
    """Create a quarter arc from east to south for testing."""
    return Arc(0, 0, 10, 0, math.pi / 2, id="arc_sample")
