"""Shared CLI helpers: console, logging, document loading and diagnostics."""

from __future__ import annotations

import json
import logging
import os
import platform
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape

from fluentforge._version import get_version
from fluentforge.core.config import DesignerConfig, find_config, load_config
from fluentforge.core.document_io import load_document, save_document
from fluentforge.core.errors import FluentForgeError
from fluentforge.core.ir import Document
from fluentforge.core.mutations import MutationResult
from fluentforge.core.session import DesignerSession

console = Console()
err_console = Console(stderr=True)

DEFAULT_DOCUMENT = "fluentforge.json"

DocumentOption = Annotated[
    Path,
    typer.Option("--document", "-d", help="Designer document (JSON)"),
]


def configure_logging() -> None:
    """Configure stdlib logging from the ``LOG_LEVEL`` environment variable."""
    log_level = os.getenv("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"fluentforge version {get_version()}")
        typer.echo(f"  Python:        {platform.python_implementation()} {platform.python_version()}")
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        raise typer.Exit()


def fail(message: str) -> typer.Exit:
    """Print an error and return the exit exception for the caller to raise."""
    err_console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)
    return typer.Exit(code=1)


def load_config_for(document_path: Path) -> DesignerConfig:
    """Load the ``fluentforge.toml`` nearest to the document."""
    try:
        return load_config(find_config(document_path.resolve().parent))
    except FluentForgeError as e:
        raise fail(str(e)) from e


def open_document(path: Path) -> Document:
    if not path.exists():
        raise fail(f"Document not found: {path} (create one with 'fluentforge new')")
    try:
        return load_document(path)
    except FluentForgeError as e:
        raise fail(str(e)) from e


def open_session(path: Path) -> DesignerSession:
    config = load_config_for(path)
    return DesignerSession(open_document(path), history_capacity=config.history.capacity)


def write_document(document: Document, path: Path) -> None:
    try:
        save_document(document, path)
    except FluentForgeError as e:
        raise fail(str(e)) from e


def apply(result: MutationResult, session: DesignerSession, path: Path) -> MutationResult:
    """Exit on a rejected edit; otherwise save the session's document."""
    if not result.success:
        raise fail(str(result.fault))
    if result.changed:
        write_document(session.document, path)
    return result


def parse_value(raw: str) -> Any:
    """Interpret a command-line value as JSON, falling back to the raw string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def parse_assignments(items: list[str] | None) -> dict[str, Any]:
    """Parse repeated ``key=value`` options."""
    values: dict[str, Any] = {}
    for item in items or []:
        key, sep, raw = item.partition("=")
        if not sep or not key:
            raise fail(f"Expected key=value, got {item!r}")
        values[key.strip()] = parse_value(raw)
    return values


def print_diagnostics(errors: list[str], warnings: list[str]) -> None:
    """Print validation diagnostics in human-readable format."""
    if errors:
        err_console.print("[red]Validation failed:[/red]\n")
        for err in errors:
            err_console.print(f"ERROR: {err}", markup=False)

    if warnings:
        console.print("[yellow]Validation warnings:[/yellow]\n")
        for warn in warnings:
            console.print(f"WARNING: {warn}", markup=False)

    if not errors and not warnings:
        console.print("OK: document is valid.")
