"""
Field-type compatibility resolver.

Maps each declared field type to the widgets that can present it, the value
kind the generated view works with, and an illustrative sample value.

All lookups are pure. An unknown field type resolves to ``FALLBACK`` instead
of raising, so a document written against a newer field-type list still
opens and generates.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from .catalog import WidgetType
from .ir.fields import FieldType

if TYPE_CHECKING:
    from .ir.document import Document


class DisplayType(str, Enum):
    """Value kinds the generated view module uses for a field."""

    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    REFERENCE = "reference"
    UNKNOWN = "unknown"


TS_TYPES: dict[DisplayType, str] = {
    DisplayType.TEXT: "string",
    DisplayType.NUMBER: "number",
    DisplayType.BOOLEAN: "boolean",
    DisplayType.DATE: "Date",
    DisplayType.REFERENCE: "ComponentFramework.LookupValue",
    DisplayType.UNKNOWN: "unknown",
}


class FieldTypeInfo(BaseModel):
    """Resolver row for one field type."""

    label: str
    category: str
    recommended: WidgetType
    compatible: frozenset[WidgetType]
    display: DisplayType
    sample: Any = None

    model_config = ConfigDict(frozen=True)


W = WidgetType

_TEXT_DISPLAY = frozenset({W.TEXT})

FIELD_TYPES: dict[str, FieldTypeInfo] = {
    FieldType.SINGLE_LINE_TEXT.value: FieldTypeInfo(
        label="Single Line Text",
        category="text",
        recommended=W.INPUT,
        compatible=frozenset({W.INPUT, W.TEXTAREA, W.TEXT, W.LABEL, W.BADGE, W.MESSAGE_BAR}),
        display=DisplayType.TEXT,
        sample="Sample text",
    ),
    FieldType.SINGLE_LINE_EMAIL.value: FieldTypeInfo(
        label="Email",
        category="text",
        recommended=W.INPUT,
        compatible=frozenset({W.INPUT, W.TEXT, W.LINK}),
        display=DisplayType.TEXT,
        sample="user@example.com",
    ),
    FieldType.SINGLE_LINE_PHONE.value: FieldTypeInfo(
        label="Phone",
        category="text",
        recommended=W.INPUT,
        compatible=frozenset({W.INPUT, W.TEXT, W.LINK}),
        display=DisplayType.TEXT,
        sample="+1 (555) 123-4567",
    ),
    FieldType.SINGLE_LINE_URL.value: FieldTypeInfo(
        label="URL",
        category="text",
        recommended=W.INPUT,
        compatible=frozenset({W.INPUT, W.TEXT, W.LINK, W.IMAGE}),
        display=DisplayType.TEXT,
        sample="https://example.com",
    ),
    FieldType.MULTIPLE.value: FieldTypeInfo(
        label="Multiple Lines",
        category="text",
        recommended=W.TEXTAREA,
        compatible=frozenset({W.TEXTAREA, W.TEXT}),
        display=DisplayType.TEXT,
        sample="This is a longer text\nthat spans multiple lines.",
    ),
    FieldType.WHOLE_NONE.value: FieldTypeInfo(
        label="Whole Number",
        category="number",
        recommended=W.SPIN_BUTTON,
        compatible=frozenset({W.INPUT, W.SPIN_BUTTON, W.SLIDER, W.TEXT, W.PROGRESS_BAR}),
        display=DisplayType.NUMBER,
        sample=42,
    ),
    FieldType.DECIMAL.value: FieldTypeInfo(
        label="Decimal",
        category="number",
        recommended=W.INPUT,
        compatible=frozenset({W.INPUT, W.SPIN_BUTTON, W.SLIDER, W.TEXT, W.PROGRESS_BAR}),
        display=DisplayType.NUMBER,
        sample=123.45,
    ),
    FieldType.CURRENCY.value: FieldTypeInfo(
        label="Currency",
        category="number",
        recommended=W.INPUT,
        compatible=frozenset({W.INPUT, W.TEXT}),
        display=DisplayType.NUMBER,
        sample=1234.56,
    ),
    FieldType.FP.value: FieldTypeInfo(
        label="Floating Point",
        category="number",
        recommended=W.INPUT,
        compatible=frozenset({W.INPUT, W.SPIN_BUTTON, W.SLIDER, W.TEXT, W.PROGRESS_BAR}),
        display=DisplayType.NUMBER,
        sample=3.14159,
    ),
    FieldType.TWO_OPTIONS.value: FieldTypeInfo(
        label="Two Options (Yes/No)",
        category="boolean",
        recommended=W.SWITCH,
        compatible=frozenset({W.SWITCH, W.CHECKBOX, W.TEXT, W.BADGE}),
        display=DisplayType.BOOLEAN,
        sample=True,
    ),
    FieldType.DATE_ONLY.value: FieldTypeInfo(
        label="Date Only",
        category="datetime",
        recommended=W.INPUT,
        compatible=frozenset({W.INPUT, W.TEXT}),
        display=DisplayType.DATE,
        sample="2024-01-15",
    ),
    FieldType.DATE_AND_TIME.value: FieldTypeInfo(
        label="Date and Time",
        category="datetime",
        recommended=W.INPUT,
        compatible=frozenset({W.INPUT, W.TEXT}),
        display=DisplayType.DATE,
        sample="2024-01-15T09:30:00.000Z",
    ),
    FieldType.OPTION_SET.value: FieldTypeInfo(
        label="Option Set",
        category="choice",
        recommended=W.DROPDOWN,
        compatible=frozenset({W.DROPDOWN, W.COMBOBOX, W.TEXT, W.BADGE}),
        display=DisplayType.NUMBER,
        sample=1,
    ),
    FieldType.ENUM.value: FieldTypeInfo(
        label="Enum",
        category="choice",
        recommended=W.DROPDOWN,
        compatible=frozenset({W.DROPDOWN, W.COMBOBOX, W.TEXT}),
        display=DisplayType.NUMBER,
        sample=0,
    ),
    FieldType.LOOKUP_SIMPLE.value: FieldTypeInfo(
        label="Lookup",
        category="reference",
        recommended=W.COMBOBOX,
        compatible=frozenset({W.COMBOBOX, W.TEXT}),
        display=DisplayType.REFERENCE,
        sample={
            "id": "00000000-0000-0000-0000-000000000001",
            "name": "Sample Record",
            "entityType": "account",
        },
    ),
}

FALLBACK = FieldTypeInfo(
    label="Unknown",
    category="unknown",
    recommended=W.INPUT,
    compatible=frozenset({W.INPUT, W.TEXT}),
    display=DisplayType.UNKNOWN,
    sample=None,
)


def info_for(field_type: str) -> FieldTypeInfo:
    """Resolver row for ``field_type`` (``FALLBACK`` when unknown)."""
    return FIELD_TYPES.get(str(_value(field_type)), FALLBACK)


def _value(field_type: Any) -> Any:
    return field_type.value if isinstance(field_type, Enum) else field_type


def recommended_widget(field_type: str) -> str:
    """First-choice widget type for a new binding to ``field_type``."""
    return info_for(field_type).recommended.value


def compatible_widgets(field_type: str) -> frozenset[str]:
    """Widget types that may be bound to a field of ``field_type``."""
    return frozenset(w.value for w in info_for(field_type).compatible)


def is_compatible(widget_type: str, field_type: str) -> bool:
    """Whether a widget of ``widget_type`` may bind a field of ``field_type``."""
    return str(_value(widget_type)) in compatible_widgets(field_type)


def display_type(field_type: str) -> DisplayType:
    """Value kind the generated view uses for ``field_type``."""
    return info_for(field_type).display


def ts_type(field_type: str) -> str:
    """TypeScript type emitted for ``field_type``."""
    return TS_TYPES[display_type(field_type)]


def sample_value(field_type: str) -> Any:
    """Illustrative value for previews; never persisted."""
    return info_for(field_type).sample


def compatible_field_types(widget_type: str) -> list[str]:
    """Reverse lookup: field types a widget of ``widget_type`` can bind to."""
    return [ft for ft, info in FIELD_TYPES.items() if str(_value(widget_type)) in compatible_widgets(ft)]


def field_type_label(field_type: str) -> str:
    return info_for(field_type).label


def sample_props(document: Document) -> dict[str, Any]:
    """
    Mock prop bag for previews: every field mapped to its sample value.

    A field's declared default wins over the type's sample.
    """
    return {
        declared.name: declared.default_value if declared.default_value is not None else sample_value(declared.type)
        for declared in document.fields
    }
