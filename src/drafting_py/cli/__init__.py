"""Command line interface for drafting-py."""

from drafting_py.cli.main import cli

__all__ = ["cli"]
