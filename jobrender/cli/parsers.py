"""CLI argument parsers and validators."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import typer
import yaml
from pydantic import ValidationError

from ..core.models import Link
from ..rendering.io import read_yaml


def parse_link(value: str) -> tuple[str, Path]:
    """Parse a link argument in format NAME=FILE."""
    if "=" not in value:
        raise typer.BadParameter(f"Must be NAME=FILE, got: {value!r}")
    name, path = value.split("=", 1)
    if not name:
        raise typer.BadParameter(f"Link name is empty in {value!r}")
    return name, Path(path)


def parse_file_mode(value: str) -> int:
    """Parse octal file mode string."""
    try:
        return int(value, 8)
    except ValueError as e:
        raise typer.BadParameter(f"Invalid octal mode: {value!r}") from e


def _read_mapping(path: Path, what: str) -> dict[str, Any]:
    if not path.is_file():
        raise typer.BadParameter(f"{what} file not found: {path}")
    try:
        data = read_yaml(path)
    except yaml.YAMLError as e:
        raise typer.BadParameter(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise typer.BadParameter(f"{what} file {path} must contain a mapping")
    return data


def load_properties(path: Path | None) -> dict[str, Any]:
    """Load a nested property tree from a YAML file."""
    if path is None:
        return {}
    return _read_mapping(path, "Properties")


def load_link(value: str) -> Link:
    """Load a link from a NAME=FILE argument.

    The file holds ``instances`` and optionally ``properties`` and ``address``.
    """
    name, path = parse_link(value)
    data = _read_mapping(path, "Link")
    if "name" in data:
        raise typer.BadParameter(
            f"Do not include 'name' in {path} - it is taken from the --link flag"
        )
    try:
        return Link.model_validate({"name": name, **data})
    except ValidationError as e:
        raise typer.BadParameter(f"Invalid link file {path}: {e}") from e


_INT_PATTERN = re.compile(r"^-?\d+$")
_FLOAT_PATTERN = re.compile(r"^-?\d+\.\d+$")


def coerce_value(value: str) -> bool | int | float | str:
    """Coerce a string value from the command line to its appropriate type."""
    value_lower = value.lower()

    if value_lower in ("true", "false"):
        return value_lower == "true"

    if _INT_PATTERN.match(value):
        try:
            return int(value)
        except (ValueError, OverflowError):
            return value

    if _FLOAT_PATTERN.match(value):
        try:
            return float(value)
        except (ValueError, OverflowError):
            return value

    return value


def apply_override(properties: dict[str, Any], value: str) -> None:
    """Apply a PATH=VALUE override to a nested property tree in place."""
    if "=" not in value:
        raise typer.BadParameter(f"Must be PATH=VALUE, got: {value!r}")
    path, raw = value.split("=", 1)
    segments = path.split(".")
    if not all(segments):
        raise typer.BadParameter(f"Invalid property path: {path!r}")

    node = properties
    for segment in segments[:-1]:
        child = node.get(segment)
        if not isinstance(child, dict):
            child = {}
            node[segment] = child
        node = child
    node[segments[-1]] = coerce_value(raw)
