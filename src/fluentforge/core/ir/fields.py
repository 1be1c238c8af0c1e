"""
Declared field definitions for the fluentforge IR.

A declared field is a named, typed value slot the generated control exposes
to its host. Fields live beside the widget tree; widgets refer to them through
bindings.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class FieldType(str, Enum):
    """Property types a control field can be declared with."""

    SINGLE_LINE_TEXT = "SingleLine.Text"
    SINGLE_LINE_EMAIL = "SingleLine.Email"
    SINGLE_LINE_PHONE = "SingleLine.Phone"
    SINGLE_LINE_URL = "SingleLine.URL"
    MULTIPLE = "Multiple"
    WHOLE_NONE = "Whole.None"
    DECIMAL = "Decimal"
    CURRENCY = "Currency"
    FP = "FP"
    TWO_OPTIONS = "TwoOptions"
    DATE_ONLY = "DateAndTime.DateOnly"
    DATE_AND_TIME = "DateAndTime.DateAndTime"
    ENUM = "Enum"
    OPTION_SET = "OptionSet"
    LOOKUP_SIMPLE = "Lookup.Simple"


class FieldUsage(str, Enum):
    """Direction of the data flowing through a field."""

    INPUT = "input"  # host -> control
    OUTPUT = "output"  # control -> host
    BOUND = "bound"  # both directions

    @property
    def reads_input(self) -> bool:
        return self in (FieldUsage.INPUT, FieldUsage.BOUND)

    @property
    def writes_output(self) -> bool:
        return self in (FieldUsage.OUTPUT, FieldUsage.BOUND)


KNOWN_FIELD_TYPES: frozenset[str] = frozenset(t.value for t in FieldType)


def is_identifier(name: str) -> bool:
    """Check whether ``name`` is safe to use as a TypeScript/XML identifier."""
    return bool(IDENTIFIER_RE.match(name))


def state_key(name: str) -> str:
    """
    Key under which a field's generated state setter is named.

    The view pairs each bound field with ``set<Name>``, so ``amount`` and
    ``Amount`` would share ``setAmount``; fields with equal keys clash.
    """
    return name[:1].upper() + name[1:]


class DeclaredField(BaseModel):
    """
    A typed field declared on the document.

    ``type`` is kept as a plain string so that documents referencing a field
    type unknown to this version still load; the resolver falls back for
    those and the validator flags them.

    Attributes:
        name: Unique, identifier-safe field name
        display_name: Human-readable label
        description: Optional description
        type: One of the ``FieldType`` values
        usage: input, output or bound
        required: Whether the host must supply a value
        default_value: Optional default, shape depends on ``type``
    """

    name: str
    display_name: str = ""
    description: str | None = None
    type: str = FieldType.SINGLE_LINE_TEXT.value
    usage: FieldUsage = FieldUsage.BOUND
    required: bool = False
    default_value: Any = None

    model_config = ConfigDict(frozen=True)

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> Any:
        """Accept ``FieldType`` members as well as raw strings."""
        if isinstance(v, FieldType):
            return v.value
        return v

    @property
    def label(self) -> str:
        """Display name, falling back to the field name."""
        return self.display_name or self.name

    @property
    def is_known_type(self) -> bool:
        return self.type in KNOWN_FIELD_TYPES
