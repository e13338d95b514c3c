"""Command line surface for nrs."""

from .main import main

__all__ = ["main"]
