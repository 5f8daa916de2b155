"""Configuration for drafting sessions."""

from __future__ import annotations

import os
from dataclasses import dataclass

from drafting_py.core.history import DEFAULT_MAX_UNDO_STEPS

ENV_PREFIX = "DRAFTING_"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(ENV_PREFIX + name)
    if value is None or value == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(ENV_PREFIX + name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError as e:
        msg = f"{ENV_PREFIX}{name} must be a number, got {value!r}"
        raise ValueError(msg) from e


@dataclass
class DraftingConfig:
    """Configuration for a drafting session.

    Attributes:
        grid_size: Grid spacing in world units.
        snap_distance: Snap tolerance in screen pixels.
        snap_to_grid: Whether grid snapping starts enabled.
        snap_to_points: Whether point snapping starts enabled.
        snap_to_lines: Whether line snapping starts enabled.
        zoom: Initial viewport zoom. Must be positive.
        max_undo_steps: Maximum number of undo states kept.
        hit_tolerance: Default tolerance for point queries, in world units.
        debug: Enable debug level logging.
        json_logs: Output logs as JSON.

    Example:
        >>> config = DraftingConfig(grid_size=5, snap_to_lines=False)
        >>> config.grid_size
        5
    """

    grid_size: float = 10.0
    snap_distance: float = 10.0
    snap_to_grid: bool = True
    snap_to_points: bool = True
    snap_to_lines: bool = True
    zoom: float = 1.0
    max_undo_steps: int = DEFAULT_MAX_UNDO_STEPS
    hit_tolerance: float = 5.0
    debug: bool = False
    json_logs: bool = False

    def __post_init__(self) -> None:
        if self.zoom <= 0:
            msg = f"zoom must be positive, got {self.zoom}"
            raise ValueError(msg)
        if self.max_undo_steps < 1:
            msg = f"max_undo_steps must be at least 1, got {self.max_undo_steps}"
            raise ValueError(msg)

    @classmethod
    def from_env(cls) -> DraftingConfig:
        """Build a configuration from ``DRAFTING_*`` environment variables.

        Unset variables keep their defaults, e.g. ``DRAFTING_GRID_SIZE=5``
        or ``DRAFTING_SNAP_TO_LINES=false``.

        Raises:
            ValueError: If a numeric variable cannot be parsed.
        """
        defaults = cls()
        return cls(
            grid_size=_env_float("GRID_SIZE", defaults.grid_size),
            snap_distance=_env_float("SNAP_DISTANCE", defaults.snap_distance),
            snap_to_grid=_env_bool("SNAP_TO_GRID", defaults.snap_to_grid),
            snap_to_points=_env_bool("SNAP_TO_POINTS", defaults.snap_to_points),
            snap_to_lines=_env_bool("SNAP_TO_LINES", defaults.snap_to_lines),
            zoom=_env_float("ZOOM", defaults.zoom),
            max_undo_steps=int(_env_float("MAX_UNDO_STEPS", defaults.max_undo_steps)),
            hit_tolerance=_env_float("HIT_TOLERANCE", defaults.hit_tolerance),
            debug=_env_bool("DEBUG", defaults.debug),
            json_logs=_env_bool("JSON_LOGS", defaults.json_logs),
        )
