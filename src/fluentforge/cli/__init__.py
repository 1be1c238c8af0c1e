"""
fluentforge CLI.

- document.py: new, catalog, tree, validate, generate, import-manifest
- fields.py: the ``field`` sub-app (declared properties)
- widgets.py: the ``widget`` sub-app (tree edits and bindings)
- common.py: shared helpers

The CLI owns all file I/O; the core only works on in-memory documents.
"""

from __future__ import annotations

import typer

from fluentforge.cli.common import configure_logging, version_callback
from fluentforge.cli.document import (
    catalog_command,
    generate_command,
    import_manifest_command,
    new_command,
    tree_command,
    validate_command,
)
from fluentforge.cli.fields import field_app
from fluentforge.cli.widgets import widget_app

app = typer.Typer(
    help="""fluentforge: design Fluent UI PCF controls and generate their code

Typical flow:
  fluentforge new
  fluentforge field add amount --type Decimal
  fluentforge widget add --for-field amount
  fluentforge generate
""",
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
) -> None:
    """fluentforge CLI main callback for global options."""
    configure_logging()


app.command(name="new")(new_command)
app.command(name="catalog")(catalog_command)
app.command(name="tree")(tree_command)
app.command(name="validate")(validate_command)
app.command(name="generate")(generate_command)
app.command(name="import-manifest")(import_manifest_command)

app.add_typer(field_app, name="field")
app.add_typer(widget_app, name="widget")


def main() -> None:
    app()


__all__ = ["app", "main", "field_app", "widget_app"]
