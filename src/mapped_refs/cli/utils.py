"""Shared helpers for the CLI commands."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Union, cast

import click
import yaml

from ..config import ConfigManager
from ..refs.mapping import TransformPair, compose
from ..transforms import index_mapping, sub_mapping


class CLIError(Exception):
    """Base exception for CLI-related errors."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


def get_config_manager(ctx: click.Context) -> ConfigManager:
    """Return the config manager stored on the click context."""
    return cast(ConfigManager, ctx.obj["config"])


def load_document(file_path: Union[str, Path]) -> Any:
    """Load and parse a YAML or JSON document."""
    path = Path(file_path)
    if not path.exists():
        raise CLIError(f"File not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise CLIError(f"Invalid YAML/JSON in {path}: {e}")


def save_document(data: Any, file_path: Union[str, Path]) -> None:
    """Write a document back, as JSON for ``.json`` files and YAML otherwise."""
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            json.dump(data, f, indent=2)
            f.write("\n")
        else:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)


def _path_key(container: Any, segment: str) -> Any:
    if isinstance(container, Mapping) and segment not in container:
        try:
            number = int(segment)
        except ValueError:
            return segment
        if number in container:
            return number
    return segment


def parse_path(path: str, document: Any, create_leaf: bool = False) -> TransformPair:
    """
    Build a transform pair from a dotted path such as ``servers.0.port``.

    Each segment is resolved against the container it lands on in
    ``document``: numeric segments index into lists and tuples, every other
    container is addressed by key (integer keys included). With
    ``create_leaf`` a missing final key reads as None so it can be added.
    """
    segments = [segment for segment in path.split(".") if segment]
    pairs = []
    current = document
    for position, segment in enumerate(segments):
        is_leaf = position == len(segments) - 1
        if isinstance(current, (list, tuple)) and segment.lstrip("-").isdigit():
            index = int(segment)
            pairs.append(index_mapping(index))
            in_range = -len(current) <= index < len(current)
            current = current[index] if in_range else None
            continue

        key = _path_key(current, segment)
        if create_leaf and is_leaf:
            pairs.append(sub_mapping(key, default=None))
        else:
            pairs.append(sub_mapping(key))
        current = current.get(key) if isinstance(current, Mapping) else None
    return compose(*pairs)


def format_value(value: Any) -> str:
    """Render a value for terminal output as YAML, so it can be fed back to ``set``."""
    text = yaml.safe_dump(value, default_flow_style=False, sort_keys=False)
    if text.endswith("\n...\n"):
        text = text[: -len("...\n")]
    return text.rstrip()
