"""Command line interface for milight."""

from .main import cli

__all__ = ["cli"]
