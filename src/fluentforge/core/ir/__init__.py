"""
fluentforge Intermediate Representation (IR) types.

This package contains the document model: declared fields, widget nodes,
the widget tree arena and document metadata.

All types are re-exported from this package.
"""

from .document import (
    Document,
    DocumentMetadata,
)
from .fields import (
    KNOWN_FIELD_TYPES,
    DeclaredField,
    FieldType,
    FieldUsage,
    is_identifier,
    state_key,
)
from .tree import (
    WidgetTree,
)
from .widgets import (
    Binding,
    WidgetInstance,
    WidgetNode,
    new_widget_id,
)

__all__ = [
    # Document
    "Document",
    "DocumentMetadata",
    # Fields
    "DeclaredField",
    "FieldType",
    "FieldUsage",
    "KNOWN_FIELD_TYPES",
    "is_identifier",
    "state_key",
    # Widgets
    "Binding",
    "WidgetInstance",
    "WidgetNode",
    "WidgetTree",
    "new_widget_id",
]
