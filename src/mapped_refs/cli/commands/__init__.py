"""Command registration helpers for the CLI."""

from __future__ import annotations

import click

from . import config, documents


def register_all(main: click.Group) -> None:
    """Attach every command group to the root CLI."""
    config.register(main)
    documents.register(main)
