"""Configuration-related CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import click
import yaml

from ...config import ConfigManager
from ...exceptions import ConfigurationError
from ...logging import get_logger
from ..utils import get_config_manager


def register(main: click.Group) -> None:
    """Attach config-centric commands to the root CLI."""

    @main.command()
    @click.option(
        "--environment",
        type=str,
        help="Environment name to apply environment overrides (development|staging|production)",
    )
    @click.option("--format", "fmt", type=click.Choice(["yaml", "json"]), default="yaml")
    @click.pass_context
    def show_config(ctx: click.Context, environment: Optional[str], fmt: str) -> None:
        """Display the effective configuration."""
        base_cm = get_config_manager(ctx)
        if environment:
            try:
                config_manager = ConfigManager(
                    config_path=base_cm.config_path, environment=environment
                )
            except ConfigurationError as e:
                click.echo(f"✗ {e}")
                ctx.exit(2)
        else:
            config_manager = base_cm

        config_dict = config_manager.get_config_dict()
        if fmt == "json":
            click.echo(json.dumps(config_dict, indent=2))
        else:
            click.echo(f"Configuration file: {config_manager.config_path}")
            click.echo(yaml.safe_dump(config_dict, default_flow_style=False).rstrip())

    @main.command()
    @click.argument("path", required=False, type=click.Path(dir_okay=False))
    @click.option("--force", is_flag=True, help="Overwrite an existing file")
    @click.pass_context
    def init_config(ctx: click.Context, path: Optional[str], force: bool) -> None:
        """Write the current configuration to PATH (defaults to the config file)."""
        logger = get_logger(__name__)
        config_manager = get_config_manager(ctx)
        target = Path(path) if path else config_manager.config_path

        if target.exists() and not force:
            click.echo(f"✗ {target} already exists (use --force to overwrite)")
            ctx.exit(1)

        written = config_manager.save_config(target)
        logger.info("Configuration written", path=str(written))
        click.echo(f"✓ Configuration written to {written}")
