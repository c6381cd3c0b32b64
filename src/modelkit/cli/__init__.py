"""
modelkit CLI.

    modelkit show schema.yaml
    modelkit check schema.yaml records.yaml [--storage] [--json]
"""

from __future__ import annotations

import os

import typer

from modelkit.cli.schema import check_command, show_command
from modelkit.cli.utils import get_version, version_callback
from modelkit.core.environment import MODELKIT_LOG_LEVEL_VAR
from modelkit.runtime.logging import setup_logging

# =============================================================================
# Main Application
# =============================================================================

app = typer.Typer(
    help="modelkit - compile model schemas and validate records against them",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    ),
) -> None:
    """modelkit CLI main callback for global options."""
    # CLI defaults to WARNING regardless of MODELKIT_ENV
    setup_logging(level=log_level or os.environ.get(MODELKIT_LOG_LEVEL_VAR) or "WARNING")


app.command(name="show")(show_command)
app.command(name="check")(check_command)


# =============================================================================
# Main Entry Point
# =============================================================================


def main() -> None:
    app(standalone_mode=True)


__all__ = ["app", "main", "get_version"]
