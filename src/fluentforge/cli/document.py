"""
Document commands for the fluentforge CLI.

- new: Create an empty designer document
- catalog: List the widget palette
- tree: Show fields and the widget tree of a document
- validate: Check a document for problems
- generate: Write the PCF control files
- import-manifest: Create a document from an existing ControlManifest.Input.xml
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from fluentforge.core import catalog, resolver
from fluentforge.core.errors import FluentForgeError
from fluentforge.core.ir import Document, WidgetNode
from fluentforge.core.manifest_import import import_manifest
from fluentforge.core.validator import validate_document
from fluentforge.stacks.base.utils import write_file
from fluentforge.stacks.pcf import generate_control

from .common import (
    DEFAULT_DOCUMENT,
    DocumentOption,
    console,
    fail,
    load_config_for,
    open_document,
    print_diagnostics,
    write_document,
)


def new_command(
    path: Annotated[Path, typer.Argument(help="Document to create")] = Path(DEFAULT_DOCUMENT),
    identifier: Annotated[str | None, typer.Option("--identifier", "-i", help="Control name")] = None,
    namespace: Annotated[str | None, typer.Option("--namespace", "-n", help="Control namespace")] = None,
    display_name: Annotated[str | None, typer.Option("--display-name", help="Human-readable name")] = None,
    force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite an existing document")] = False,
) -> None:
    """Create an empty designer document (defaults from fluentforge.toml)."""
    if path.exists() and not force:
        raise fail(f"{path} already exists. Use --force to overwrite.")

    metadata = load_config_for(path).document.to_metadata()
    changes = {
        key: value
        for key, value in (
            ("identifier", identifier),
            ("namespace", namespace),
            ("display_name", display_name),
        )
        if value is not None
    }
    if changes:
        metadata = metadata.model_copy(update=changes)

    write_document(Document(metadata=metadata), path)
    console.print(f"[green]Created[/green] {escape(str(path))} ({escape(metadata.qualified_name)})")


def catalog_command(
    category: Annotated[
        str | None, typer.Option("--category", "-c", help="Only show one palette category")
    ] = None,
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """List the widgets available in the palette."""
    groups = catalog.palette()
    if category:
        groups = [(cat, members) for cat, members in groups if cat.value == category]
        if not groups:
            choices = ", ".join(c.value for c in catalog.WidgetCategory)
            raise fail(f"Unknown category {category!r} (choose from {choices})")

    if output_json:
        payload = [
            {
                "type": d.type.value,
                "category": cat.value,
                "display_name": d.display_name,
                "supports_children": d.supports_children,
                "bindable": {name: role.value for name, role in d.bindable_props.items()},
                "field_types": resolver.compatible_field_types(d.type.value),
            }
            for cat, members in groups
            for d in members
        ]
        console.print_json(json.dumps(payload))
        return

    table = Table(title="Widget Catalog")
    table.add_column("Category", style="dim")
    table.add_column("Type")
    table.add_column("Description")
    table.add_column("Bindable")
    table.add_column("Children")

    for cat, members in groups:
        for definition in members:
            table.add_row(
                catalog.CATEGORY_LABELS[cat],
                definition.type.value,
                definition.description,
                ", ".join(definition.bindable_props),
                "yes" if definition.supports_children else "",
            )

    console.print(table)


def _node_label(node: WidgetNode) -> str:
    label = f"[bold]{escape(node.type)}[/bold] [dim]{escape(node.id)}[/dim]"
    if not catalog.is_known_widget(node.type):
        label += " [red](unknown type)[/red]"
    for binding in node.bindings:
        label += f" [cyan]{escape(binding.target)}→{escape(binding.field)}[/cyan]"
    return label


def tree_command(document_path: DocumentOption = Path(DEFAULT_DOCUMENT)) -> None:
    """Show a document's fields and widget tree."""
    document = open_document(document_path)
    metadata = document.metadata

    console.print(f"[bold]{escape(metadata.display_name)}[/bold] ({escape(metadata.qualified_name)} v{escape(metadata.version)})")

    if document.fields:
        table = Table(title="Properties")
        table.add_column("Name")
        table.add_column("Type")
        table.add_column("Usage")
        table.add_column("Required")
        for declared in document.fields:
            table.add_row(
                declared.name,
                declared.type,
                declared.usage.value,
                "yes" if declared.required else "",
            )
        console.print(table)
    else:
        console.print("[dim]No properties declared.[/dim]")

    root = Tree("[bold]Widgets[/bold]")
    branches = {}
    for node, _ in document.tree.walk():
        parent_id = document.tree.parent_of(node.id)
        parent = branches.get(parent_id, root) if parent_id else root
        branches[node.id] = parent.add(_node_label(node))
    if not document.tree.roots:
        root.add("[dim]No widgets yet[/dim]")
    console.print(root)


def validate_command(document_path: DocumentOption = Path(DEFAULT_DOCUMENT)) -> None:
    """Check a document for problems. Exits with code 1 when errors are found."""
    errors, warnings = validate_document(open_document(document_path))
    print_diagnostics(errors, warnings)
    if errors:
        raise typer.Exit(code=1)


def generate_command(
    document_path: DocumentOption = Path(DEFAULT_DOCUMENT),
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output directory (default: [output] directory from config)"),
    ] = None,
    strict: Annotated[bool, typer.Option("--strict", help="Refuse to generate when validation finds errors")] = False,
) -> None:
    """Generate ControlManifest.Input.xml, the view module and index.ts."""
    document = open_document(document_path)
    config = load_config_for(document_path)

    if strict:
        errors, warnings = validate_document(document)
        if errors:
            print_diagnostics(errors, warnings)
            raise typer.Exit(code=1)

    try:
        code = generate_control(document, config.generation)
    except FluentForgeError as e:
        raise fail(str(e)) from e

    output_dir = output or document_path.resolve().parent / config.output.directory

    for relative, content in code.files().items():
        target = output_dir / relative
        try:
            write_file(target, content)
        except OSError as e:
            raise fail(f"Cannot write {target}: {e.strerror or e}") from e
        console.print(f"  [green]wrote[/green] {escape(str(target))}")

    for warning in code.warnings:
        console.print(f"[yellow]WARNING:[/yellow] {escape(warning)}")

    console.print(f"[green]Generated[/green] {code.identifier} ({len(code.files())} files)")


def import_manifest_command(
    manifest: Annotated[Path, typer.Argument(help="ControlManifest.Input.xml to import")],
    document_path: DocumentOption = Path(DEFAULT_DOCUMENT),
    force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite an existing document")] = False,
) -> None:
    """Create a document whose metadata and properties come from an existing manifest."""
    if document_path.exists() and not force:
        raise fail(f"{document_path} already exists. Use --force to overwrite.")

    try:
        imported = import_manifest(manifest)
    except FluentForgeError as e:
        raise fail(str(e)) from e

    write_document(imported.to_document(), document_path)

    for warning in imported.warnings:
        console.print(f"[yellow]WARNING:[/yellow] {escape(warning)}")
    console.print(
        f"[green]Imported[/green] {escape(imported.metadata.qualified_name)} "
        f"with {len(imported.fields)} properties into {escape(str(document_path))}"
    )
