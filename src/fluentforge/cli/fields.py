"""
Property (declared field) commands for the fluentforge CLI.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from fluentforge.core import resolver
from fluentforge.core.ir import DeclaredField, FieldType, FieldUsage
from fluentforge.core.manifest_import import parse_default

from .common import DEFAULT_DOCUMENT, DocumentOption, apply, console, fail, open_document, open_session

field_app = typer.Typer(
    help="Manage the control's declared properties",
    no_args_is_help=True,
)


@field_app.command("add")
def field_add(
    name: Annotated[str, typer.Argument(help="Property name (identifier)")],
    field_type: Annotated[
        str, typer.Option("--type", "-t", help="Property type, e.g. SingleLine.Text or Decimal")
    ] = FieldType.SINGLE_LINE_TEXT.value,
    usage: Annotated[FieldUsage, typer.Option("--usage", "-u", help="input, output or bound")] = FieldUsage.BOUND,
    display_name: Annotated[str, typer.Option("--display-name", help="Human-readable label")] = "",
    description: Annotated[str | None, typer.Option("--description", help="Description")] = None,
    required: Annotated[bool, typer.Option("--required", help="Host must supply a value")] = False,
    default: Annotated[str | None, typer.Option("--default", help="Default value")] = None,
    document_path: DocumentOption = Path(DEFAULT_DOCUMENT),
) -> None:
    """Declare a new property."""
    session = open_session(document_path)
    declared = DeclaredField(
        name=name,
        display_name=display_name,
        description=description,
        type=field_type,
        usage=usage,
        required=required,
        default_value=parse_default(default, field_type) if default is not None else None,
    )
    apply(session.add_field(declared), session, document_path)
    console.print(f"[green]Added[/green] property {escape(name)} ({escape(resolver.field_type_label(field_type))})")


@field_app.command("update")
def field_update(
    name: Annotated[str, typer.Argument(help="Property to change")],
    rename: Annotated[str | None, typer.Option("--rename", help="New name (bindings follow)")] = None,
    field_type: Annotated[str | None, typer.Option("--type", "-t", help="New property type")] = None,
    usage: Annotated[FieldUsage | None, typer.Option("--usage", "-u", help="input, output or bound")] = None,
    display_name: Annotated[str | None, typer.Option("--display-name", help="Human-readable label")] = None,
    required: Annotated[bool | None, typer.Option("--required/--optional", help="Required flag")] = None,
    document_path: DocumentOption = Path(DEFAULT_DOCUMENT),
) -> None:
    """Change a property. A type change drops bindings that no longer fit."""
    session = open_session(document_path)
    changes = {
        key: value
        for key, value in (
            ("name", rename),
            ("type", field_type),
            ("usage", usage),
            ("display_name", display_name),
            ("required", required),
        )
        if value is not None
    }
    if not changes:
        raise fail("Nothing to change")
    result = apply(session.update_field(name, **changes), session, document_path)
    console.print(f"[green]Updated[/green] property {escape(rename or name)}")
    if result.pruned:
        console.print(f"[yellow]Removed {result.pruned} incompatible binding(s)[/yellow]")


@field_app.command("remove")
def field_remove(
    name: Annotated[str, typer.Argument(help="Property to remove")],
    document_path: DocumentOption = Path(DEFAULT_DOCUMENT),
) -> None:
    """Remove a property and every binding that refers to it."""
    session = open_session(document_path)
    result = apply(session.remove_field(name), session, document_path)
    console.print(f"[green]Removed[/green] property {escape(name)}")
    if result.pruned:
        console.print(f"[yellow]Removed {result.pruned} binding(s) to {escape(name)}[/yellow]")


@field_app.command("types")
def field_types() -> None:
    """List property types and the widgets that can present them."""
    table = Table(title="Property Types")
    table.add_column("Type")
    table.add_column("Label")
    table.add_column("Recommended")
    table.add_column("Compatible widgets")
    for field_type in FieldType:
        info = resolver.info_for(field_type.value)
        table.add_row(
            field_type.value,
            info.label,
            info.recommended.value,
            ", ".join(sorted(resolver.compatible_widgets(field_type.value))),
        )
    console.print(table)


@field_app.command("samples")
def field_samples(document_path: DocumentOption = Path(DEFAULT_DOCUMENT)) -> None:
    """Print mock prop values for previewing the control."""
    document = open_document(document_path)
    console.print_json(json.dumps(resolver.sample_props(document), default=str))
