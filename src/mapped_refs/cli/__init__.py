"""Command-line interface for mapped references."""

from .main import main

__all__ = ["main"]
