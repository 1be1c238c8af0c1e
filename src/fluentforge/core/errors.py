"""
Error types for fluentforge documents, catalog lookups and configuration.

Expected validation faults raised by editing operations are *not* exceptions:
they come back as ``MutationResult`` values carrying a ``FaultKind``. The
exception hierarchy below is reserved for hard faults (corrupt files, a
catalog lookup for a type that does not exist, bad configuration, a target
the generators cannot emit).
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class FluentForgeError(Exception):
    """Base exception for all fluentforge errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class DocumentError(FluentForgeError):
    """
    Raised when a persisted designer document cannot be loaded or saved.

    Examples:
    - File is not valid JSON
    - Top-level structure is missing ``metadata``
    - A widget entry has no ``type``
    """

    pass


class ManifestImportError(FluentForgeError):
    """
    Raised when an existing control manifest cannot be imported.

    Examples:
    - Malformed XML
    - No ``<control>`` element
    """

    pass


class UnknownWidgetTypeError(FluentForgeError):
    """
    Raised when the widget catalog is asked for a type it does not define.

    This is an authoring error: callers that must degrade gracefully (code
    generation, validation) check ``is_known_widget`` first.
    """

    def __init__(self, widget_type: str):
        self.widget_type = widget_type
        super().__init__(f"Unknown widget type: {widget_type!r}")


class ConfigError(FluentForgeError):
    """Raised when ``fluentforge.toml`` contains invalid values."""

    pass


class GenerationError(FluentForgeError):
    """
    Raised when code generation cannot produce a usable control.

    Document problems only warn; this is for targets the generators cannot
    emit at all, such as an unsupported control type.
    """

    pass


class FaultKind(str, Enum):
    """Kinds of recoverable faults reported by document mutations."""

    NOT_FOUND = "not_found"
    INVALID_PARENT = "invalid_parent"
    CYCLE_DETECTED = "cycle_detected"
    INCOMPATIBLE_BINDING = "incompatible_binding"
    UNKNOWN_WIDGET_TYPE = "unknown_widget_type"
    UNKNOWN_FIELD_TYPE = "unknown_field_type"
    INVALID_PROPERTY = "invalid_property"
    DUPLICATE_FIELD = "duplicate_field"
    INVALID_FIELD = "invalid_field"


@dataclass(frozen=True)
class Fault:
    """A rejected mutation: what went wrong and a human-readable reason."""

    kind: FaultKind
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


@dataclass
class ErrorContext:
    """
    Location information for an error raised while reading a file.

    Attributes:
        file: Path to the file being read
        line: Line number (1-indexed), 0 when unknown
        column: Column number (1-indexed), 0 when unknown
        detail: Optional extra detail (e.g. the offending JSON path)
    """

    file: Path
    line: int = 0
    column: int = 0
    detail: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "doc.json:10:5 (widgets[2].type)"
        """
        location = str(self.file)
        if self.line:
            location += f":{self.line}:{self.column}"
        if self.detail:
            location += f" ({self.detail})"
        return location


def make_document_error(
    message: str,
    file: Path,
    line: int = 0,
    column: int = 0,
    detail: str | None = None,
) -> DocumentError:
    """
    Helper to create a DocumentError with context.

    Args:
        message: Error description
        file: Document path
        line: Line number, if known
        column: Column number, if known
        detail: Optional location detail inside the document

    Returns:
        DocumentError with context
    """
    context = ErrorContext(file=file, line=line, column=column, detail=detail)
    return DocumentError(message, context)
