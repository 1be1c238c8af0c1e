"""
Widget node definitions for the fluentforge IR.

Two shapes describe the same widget:

- ``WidgetNode`` is the arena record: children are referenced by id. The
  document tree stores these.
- ``WidgetInstance`` is the nested form used at the edges (JSON files, the
  input of ``add_widget``), where children are embedded recursively.
"""

from __future__ import annotations

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def new_widget_id() -> str:
    """Generate a fresh, globally unique widget id."""
    return f"w-{uuid.uuid4().hex[:12]}"


class Binding(BaseModel):
    """Link from a widget property to a declared field."""

    target: str  # widget property, e.g. "value"
    field: str  # declared field name

    model_config = ConfigDict(frozen=True)


class WidgetNode(BaseModel):
    """
    One widget in the tree arena.

    Nodes are immutable; every edit produces a new record. ``children`` is
    ``None`` for leaf widget types and a (possibly empty) tuple of child ids
    for types that support children.
    """

    id: str
    type: str
    props: dict[str, Any] = Field(default_factory=dict)
    children: tuple[str, ...] | None = None
    bindings: tuple[Binding, ...] = ()
    layout: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def binding_for(self, target: str) -> Binding | None:
        """Return the binding on ``target``, if any."""
        for binding in self.bindings:
            if binding.target == target:
                return binding
        return None

    @property
    def bound_fields(self) -> list[str]:
        return [b.field for b in self.bindings]


class WidgetInstance(BaseModel):
    """
    Nested widget description.

    ``id`` is optional: ``add_widget`` always assigns fresh ids, while
    document loading keeps the ids found in the file.
    """

    id: str | None = None
    type: str
    props: dict[str, Any] = Field(default_factory=dict)
    children: list[WidgetInstance] | None = None
    bindings: list[Binding] = Field(default_factory=list)
    layout: dict[str, Any] = Field(default_factory=dict)

    def walk(self):
        """Yield this instance and all descendants in document order."""
        yield self
        for child in self.children or []:
            yield from child.walk()
