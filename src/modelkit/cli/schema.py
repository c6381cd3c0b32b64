"""
Schema CLI commands.

``show`` compiles a schema file and prints its definitions; ``check``
validates records against it.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from modelkit.cli.utils import load_document, model_name_for
from modelkit.core.errors import DefinitionError, ModelValidationError
from modelkit.runtime.model import Model
from modelkit.specs.definition import CustomRule, Definition

console = Console()


def _build_model(schema_path: Path, name: str | None) -> type[Model]:
    schema = load_document(schema_path)
    if not isinstance(schema, Mapping):
        typer.echo(f"Error: {schema_path} must contain a mapping of field definitions", err=True)
        raise typer.Exit(code=1)

    try:
        return Model.extend({"definition": schema}, name=name or model_name_for(schema_path))
    except DefinitionError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _describe_rules(definition: Definition) -> str:
    described = []
    for rule in definition.validation:
        if isinstance(rule, CustomRule):
            label = getattr(rule.func, "__name__", "custom")
        else:
            label = rule.name
        if rule.params:
            label += "(" + ", ".join(repr(param) for param in rule.params) + ")"
        described.append(label)
    return ", ".join(described)


def show_command(
    schema_path: Path = typer.Argument(..., help="YAML/JSON schema file"),
    name: str | None = typer.Option(None, "--name", "-n", help="Model name (default: from file name)"),
) -> None:
    """Compile a schema and list its field definitions."""
    model = _build_model(schema_path, name)

    table = Table(title=f"{model.__name__} definitions")
    table.add_column("Field", style="cyan")
    table.add_column("Type")
    table.add_column("Default")
    table.add_column("Column")
    table.add_column("PK")
    table.add_column("Rules")

    for field_name, definition in model.definitions().items():
        table.add_row(
            escape(field_name),
            escape(definition.type_name),
            escape(repr(definition.default)),
            escape(definition.column),
            "yes" if definition.primary_key else "",
            escape(_describe_rules(definition)),
        )

    console.print(table)


def check_command(
    schema_path: Path = typer.Argument(..., help="YAML/JSON schema file"),
    data_path: Path = typer.Argument(..., help="YAML/JSON record or list of records"),
    storage: bool = typer.Option(
        False, "--storage", "-s", help="Records are keyed by storage column names"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
    name: str | None = typer.Option(None, "--name", "-n", help="Model name (default: from file name)"),
) -> None:
    """Validate one record or a list of records against a schema."""
    model = _build_model(schema_path, name)

    document = load_document(data_path)
    records = document if isinstance(document, list) else [document]

    results: list[dict[str, Any]] = []
    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            typer.echo(f"Error: record {index} is not a mapping", err=True)
            raise typer.Exit(code=1)

        instance = model.to_model(record) if storage else model(record)
        try:
            instance.validate()
        except ModelValidationError as exc:
            results.append({"record": index, "valid": False, "errors": exc.errors})
        else:
            results.append({"record": index, "valid": True, "errors": {}})

    failed = [result for result in results if not result["valid"]]

    if as_json:
        typer.echo(json.dumps({"model": model.__name__, "results": results}, indent=2, default=str))
    elif failed:
        table = Table(title=f"{model.__name__} validation failures")
        table.add_column("Record", justify="right")
        table.add_column("Field", style="cyan")
        table.add_column("Code", style="red")
        table.add_column("Value")
        table.add_column("Params")
        for result in failed:
            for field_name, failures in result["errors"].items():
                for failure in failures:
                    table.add_row(
                        str(result["record"]),
                        escape(field_name),
                        escape(str(failure["message"])),
                        escape(repr(failure["value"])),
                        escape(repr(failure["params"])) if "params" in failure else "",
                    )
        console.print(table)
    else:
        console.print(f"[green]{len(results)} record(s) valid[/green]")

    if failed:
        raise typer.Exit(code=1)
