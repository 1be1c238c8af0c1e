"""
Widget tree commands for the fluentforge CLI.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from fluentforge.core import catalog
from fluentforge.core.mutations import create_widget, widget_for_field

from .common import (
    DEFAULT_DOCUMENT,
    DocumentOption,
    apply,
    console,
    fail,
    open_session,
    parse_assignments,
)

widget_app = typer.Typer(
    help="Edit the widget tree",
    no_args_is_help=True,
)

PropOption = Annotated[
    list[str] | None,
    typer.Option("--prop", "-p", help="Prop as key=value (JSON values accepted); repeatable"),
]
LayoutOption = Annotated[
    list[str] | None,
    typer.Option("--layout", "-l", help="Inline style as key=value; repeatable"),
]


@widget_app.command("add")
def widget_add(
    widget_type: Annotated[
        str | None, typer.Argument(help="Widget type (see 'fluentforge catalog')")
    ] = None,
    parent: Annotated[str | None, typer.Option("--parent", help="Container widget id")] = None,
    for_field: Annotated[
        str | None,
        typer.Option("--for-field", help="Add the recommended widget, bound to this property"),
    ] = None,
    props: PropOption = None,
    layout: LayoutOption = None,
    document_path: DocumentOption = Path(DEFAULT_DOCUMENT),
) -> None:
    """Add a widget at the end of the roots or of a container."""
    session = open_session(document_path)

    if for_field:
        declared = session.document.field(for_field)
        if declared is None:
            raise fail(f"Property {for_field!r} is not declared")
        instance = widget_for_field(declared)
    elif widget_type:
        if not catalog.is_known_widget(widget_type):
            raise fail(f"Unknown widget type {widget_type!r}")
        instance = create_widget(widget_type)
    else:
        raise fail("Give a widget type or --for-field")

    instance.props.update(parse_assignments(props))
    instance.layout.update(parse_assignments(layout))

    result = apply(session.add_widget(instance, parent_id=parent), session, document_path)
    console.print(f"[green]Added[/green] {escape(instance.type)} {result.node_id}")


@widget_app.command("set")
def widget_set(
    node_id: Annotated[str, typer.Argument(help="Widget id")],
    props: PropOption = None,
    layout: LayoutOption = None,
    document_path: DocumentOption = Path(DEFAULT_DOCUMENT),
) -> None:
    """Update props or inline style (a null value removes the key)."""
    session = open_session(document_path)
    prop_patch = parse_assignments(props)
    layout_patch = parse_assignments(layout)
    if not prop_patch and not layout_patch:
        raise fail("Nothing to change")
    apply(
        session.update_widget(node_id, props=prop_patch or None, layout=layout_patch or None),
        session,
        document_path,
    )
    console.print(f"[green]Updated[/green] {escape(node_id)}")


@widget_app.command("remove")
def widget_remove(
    node_id: Annotated[str, typer.Argument(help="Widget id")],
    document_path: DocumentOption = Path(DEFAULT_DOCUMENT),
) -> None:
    """Remove a widget and everything inside it."""
    session = open_session(document_path)
    result = apply(session.remove_widget(node_id), session, document_path)
    if result.changed:
        console.print(f"[green]Removed[/green] {escape(node_id)}")
    else:
        console.print(f"[dim]{escape(node_id)} not found; nothing removed[/dim]")


@widget_app.command("move")
def widget_move(
    node_id: Annotated[str, typer.Argument(help="Widget id")],
    parent: Annotated[str | None, typer.Option("--parent", help="New container id (default: roots)")] = None,
    index: Annotated[int, typer.Option("--index", help="Position among the new siblings")] = 0,
    document_path: DocumentOption = Path(DEFAULT_DOCUMENT),
) -> None:
    """Move a widget (with its subtree) to a new container and position."""
    session = open_session(document_path)
    apply(session.move_widget(node_id, parent, index), session, document_path)
    console.print(f"[green]Moved[/green] {escape(node_id)} to {escape(parent or 'roots')} at {index}")


@widget_app.command("bind")
def widget_bind(
    node_id: Annotated[str, typer.Argument(help="Widget id")],
    field_name: Annotated[str, typer.Argument(help="Declared property")],
    target: Annotated[
        str | None, typer.Option("--target", help="Widget prop to bind (default: primary bindable prop)")
    ] = None,
    document_path: DocumentOption = Path(DEFAULT_DOCUMENT),
) -> None:
    """Bind a widget prop to a declared property."""
    session = open_session(document_path)
    node = session.document.tree.get(node_id)
    if node is None:
        raise fail(f"Widget {node_id!r} not found")
    if target is None and catalog.is_known_widget(node.type):
        target = catalog.definition_of(node.type).primary_binding
    if target is None:
        raise fail(f"{node.type} has no bindable props")
    apply(session.bind(node_id, target, field_name), session, document_path)
    console.print(f"[green]Bound[/green] {escape(node_id)}.{escape(target)} → {escape(field_name)}")


@widget_app.command("unbind")
def widget_unbind(
    node_id: Annotated[str, typer.Argument(help="Widget id")],
    target: Annotated[str, typer.Argument(help="Bound widget prop")],
    document_path: DocumentOption = Path(DEFAULT_DOCUMENT),
) -> None:
    """Remove the binding on one widget prop."""
    session = open_session(document_path)
    apply(session.unbind(node_id, target), session, document_path)
    console.print(f"[green]Unbound[/green] {escape(node_id)}.{escape(target)}")
