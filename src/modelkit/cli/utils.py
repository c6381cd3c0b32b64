"""
modelkit CLI utilities.

Shared helpers used across CLI modules.
"""

from __future__ import annotations

import platform
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path
from typing import Any

import typer
import yaml

from modelkit.core.environment import get_environment_info


def get_version() -> str:
    """Get modelkit version from package metadata."""
    try:
        return _metadata_version("modelkit")
    except PackageNotFoundError:
        return "0.0.0"


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"modelkit {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        for key, setting in get_environment_info().items():
            typer.echo(f"{key}: {setting}")
        raise typer.Exit()


def load_document(path: Path) -> Any:
    """
    Load a YAML (or JSON) document.

    Raises:
        typer.Exit: the file is missing or does not parse
    """
    if not path.exists():
        typer.echo(f"Error: {path} does not exist", err=True)
        raise typer.Exit(code=1)

    try:
        return yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        typer.echo(f"Error: could not parse {path}: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def model_name_for(path: Path) -> str:
    """Derive a class name from a schema file name (``user_account.yaml`` -> ``UserAccount``)."""
    parts = [part for part in path.stem.replace("-", "_").split("_") if part]
    return "".join(part[:1].upper() + part[1:] for part in parts) or "Model"
