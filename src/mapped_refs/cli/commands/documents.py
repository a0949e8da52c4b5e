"""Commands that read and edit documents through path mappings."""

from __future__ import annotations

from typing import Optional

import click
import yaml

from ...exceptions import MappedRefError
from ...logging import get_logger
from ...refs import AtomicCell, read, reset_ref
from ..utils import (
    CLIError,
    format_value,
    get_config_manager,
    load_document,
    parse_path,
    save_document,
)


def _fail(ctx: click.Context, error: Exception) -> None:
    logger = get_logger(__name__)
    if isinstance(error, CLIError):
        logger.error("CLI error", error=str(error), exit_code=error.exit_code)
        click.echo(f"✗ {error}")
        ctx.exit(error.exit_code)
    logger.error("Mapped reference error", error_code=getattr(error, "error_code", None))
    click.echo(f"✗ {error}")
    ctx.exit(1)


def register(main: click.Group) -> None:
    """Attach document commands to the root CLI."""

    @main.command("get")
    @click.argument("file", type=click.Path(dir_okay=False))
    @click.argument("path")
    @click.pass_context
    def get_value(ctx: click.Context, file: str, path: str) -> None:
        """Print the value at dotted PATH inside FILE."""
        config_manager = get_config_manager(ctx)
        try:
            cell = AtomicCell.from_config(load_document(file), config_manager)
            ref = parse_path(path, cell.read())(cell)
            click.echo(format_value(read(ref)))
        except (CLIError, MappedRefError) as e:
            _fail(ctx, e)

    @main.command("set")
    @click.argument("file", type=click.Path(dir_okay=False))
    @click.argument("path")
    @click.argument("value")
    @click.option(
        "--output",
        "-o",
        type=click.Path(dir_okay=False),
        help="Write the result here instead of FILE",
    )
    @click.pass_context
    def set_value(
        ctx: click.Context, file: str, path: str, value: str, output: Optional[str]
    ) -> None:
        """
        Set the value at dotted PATH inside FILE, adding a missing final key.

        VALUE is parsed as YAML.
        """
        logger = get_logger(__name__)
        config_manager = get_config_manager(ctx)
        try:
            try:
                new_value = yaml.safe_load(value)
            except yaml.YAMLError as e:
                raise CLIError(f"Cannot parse value {value!r}: {e}")

            cell = AtomicCell.from_config(load_document(file), config_manager)
            ref = parse_path(path, cell.read(), create_leaf=True)(cell)
            reset_ref(ref, new_value)

            target = output or file
            save_document(read(cell), target)
        except (CLIError, MappedRefError) as e:
            _fail(ctx, e)
            return

        logger.info("Document updated", path=path, file=target, depth=ref.depth)
        click.echo(f"✓ {path} = {format_value(read(ref))}")
