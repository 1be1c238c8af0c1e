"""
fluentforge - visual designer core for Power Apps Component Framework controls.

Holds a designer document (Fluent UI v9 widgets bound to typed control
fields), edits it with linear undo/redo, and generates the manifest, React
view module and host adapter of a PCF control.
"""

from __future__ import annotations

from ._version import get_version

# Re-export commonly used types for convenience
from .core import ir
from .core.errors import (
    ConfigError,
    DocumentError,
    FluentForgeError,
    GenerationError,
    ManifestImportError,
    UnknownWidgetTypeError,
)
from .core.session import DesignerSession

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "DesignerSession",
    "FluentForgeError",
    "DocumentError",
    "ManifestImportError",
    "UnknownWidgetTypeError",
    "ConfigError",
    "GenerationError",
]
