"""Shape registries for drafting-py."""

from __future__ import annotations

from drafting_py.registry.base import RegistryProtocol
from drafting_py.registry.memory import ShapeRegistry

__all__ = ["RegistryProtocol", "ShapeRegistry"]
