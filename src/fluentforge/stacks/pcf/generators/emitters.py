"""
Per-widget JSX emitters.

``EMITTERS`` maps every catalog widget type to a small function that renders
one node (and, for containers, its children) as JSX lines. The view module
generator walks the tree through ``EmitContext.render``; unknown widget types
never reach an emitter and are replaced by a JSX comment instead.

Literal props are rendered per their kind:

- strings as ``key="value"`` (or ``key={'...'}`` when they need escaping)
- ``True`` as a bare attribute, ``False`` omitted
- numbers as ``key={n}``

A bound prop shows the field's state value. Interactive binding roles also get
an update handler that writes local state and notifies the host.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ....core import catalog, ir, resolver
from ....core.catalog import BindingRole, WidgetType
from ...base.utils import js_literal, js_string
from ..naming import setter_name

ROOT_INDENT = 8
INDENT_STEP = 2

_ATTR_UNSAFE = frozenset('"&{}<>\n\r')
_TEXT_UNSAFE = frozenset("{}<>&\n\r")

# Handler prop and payload expression for each interactive role
HANDLERS: dict[BindingRole, tuple[str, str]] = {
    BindingRole.VALUE: ("onChange", "data.value"),
    BindingRole.CHECKED: ("onChange", "data.checked"),
    BindingRole.SELECTION: ("onOptionSelect", "data.optionValue"),
}

# State value used instead of the raw payload; SpinButton reports undefined mid-edit
STATE_PAYLOADS: dict[tuple[str, BindingRole], str] = {
    ("SpinButton", BindingRole.VALUE): "data.value ?? 0",
}

FLEX_CLASS = "ff-flex"
GRID_CLASS = "ff-grid"


@dataclass
class EmitContext:
    """State shared by the emitters during one view-module generation."""

    tree: ir.WidgetTree
    fields: dict[str, ir.DeclaredField]
    warnings: list[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        if message not in self.warnings:
            self.warnings.append(message)

    def render(self, node_id: str, indent: int) -> list[str]:
        node = self.tree.nodes[node_id]
        emitter = EMITTERS.get(node.type)
        if emitter is None:
            self.warn(f"Widget {node.id} has unknown type '{node.type}' and was skipped")
            label = node.type.replace("*/", "* /")
            return [f"{' ' * indent}{{/* Unsupported widget: {label} */}}"]
        return emitter(self, node, indent)

    def render_children(self, node: ir.WidgetNode, indent: int) -> list[str]:
        lines: list[str] = []
        for child_id in node.children or ():
            lines.extend(self.render(child_id, indent))
        return lines

    def live_bindings(self, node: ir.WidgetNode) -> list[ir.Binding]:
        """Bindings whose field is declared; the rest are reported and dropped."""
        live = []
        for binding in node.bindings:
            declared = self.fields.get(binding.field)
            if declared is None:
                self.warn(
                    f"Widget {node.id} binds '{binding.target}' to undeclared field '{binding.field}'"
                )
                continue
            if not resolver.is_compatible(node.type, declared.type):
                self.warn(
                    f"Widget {node.id} ({node.type}) is bound to incompatible field "
                    f"'{declared.name}' ({declared.type})"
                )
            live.append(binding)
        return live


Emitter = Callable[[EmitContext, ir.WidgetNode, int], list[str]]


# =============================================================================
# Rendering helpers
# =============================================================================


def render_literal_attr(key: str, value: Any) -> str | None:
    """Render one literal prop as a JSX attribute, or None when it is omitted."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return key if value else None
    if isinstance(value, str):
        if _ATTR_UNSAFE.intersection(value):
            return f"{key}={{{js_string(value)}}}"
        return f'{key}="{value}"'
    if isinstance(value, int | float):
        return f"{key}={{{json.dumps(value)}}}"
    return f"{key}={{{js_literal(value)}}}"


def render_text(value: Any) -> str:
    """Render literal JSX children text."""
    if not isinstance(value, str):
        return f"{{{js_literal(value)}}}"
    if _TEXT_UNSAFE.intersection(value) or value != value.strip():
        return f"{{{js_string(value)}}}"
    return value


def render_style(style: dict[str, Any]) -> str | None:
    if not style:
        return None
    return f"style={{{js_literal(style)}}}"


def render_handler(role: BindingRole, field_name: str, widget_type: str = "") -> str:
    handler, payload = HANDLERS[role]
    state = STATE_PAYLOADS.get((widget_type, role), payload)
    return (
        f"{handler}={{(_, data) => {{ {setter_name(field_name)}({state}); "
        f"props.onChange?.({js_string(field_name)}, {payload}); }}}}"
    )


def build_attributes(
    ctx: EmitContext,
    node: ir.WidgetNode,
    skip: frozenset[str] = frozenset(),
    style: dict[str, Any] | None = None,
) -> list[str]:
    """
    Attributes for ``node``: literal props, inline style, then bindings.

    Literal props are sorted by name. A bound prop is rendered from its
    binding only, never from the literal value. Targets in ``skip`` are
    handled by the emitter itself.
    """
    bindings = [b for b in ctx.live_bindings(node) if b.target not in skip]
    bound_targets = {b.target for b in bindings}

    attrs: list[str] = []
    for key in sorted(node.props):
        if key in skip or key in bound_targets:
            continue
        rendered = render_literal_attr(key, node.props[key])
        if rendered:
            attrs.append(rendered)

    rendered_style = render_style({**(style or {}), **node.layout})
    if rendered_style:
        attrs.append(rendered_style)

    roles = catalog.CATALOG[node.type].bindable_props if catalog.is_known_widget(node.type) else {}
    for binding in bindings:
        attrs.append(f"{binding.target}={{{binding.field}}}")
        role = roles.get(binding.target)
        if role is not None and role.is_interactive:
            attrs.append(render_handler(role, binding.field, node.type))
    return attrs


def _join(attrs: list[str]) -> str:
    return "".join(f" {attr}" for attr in attrs)


def _content(ctx: EmitContext, node: ir.WidgetNode, fallback: str) -> str:
    for binding in ctx.live_bindings(node):
        if binding.target == "children":
            return f"{{{binding.field}}}"
    value = node.props.get("children")
    if value is None or value == "":
        return fallback
    return render_text(value)


def _container(ctx: EmitContext, node: ir.WidgetNode, indent: int, tag: str, attrs: list[str]) -> list[str]:
    spaces = " " * indent
    children = ctx.render_children(node, indent + INDENT_STEP)
    if not children:
        return [f"{spaces}<{tag}{_join(attrs)} />"]
    return [f"{spaces}<{tag}{_join(attrs)}>", *children, f"{spaces}</{tag}>"]


def _options(node: ir.WidgetNode) -> list[str]:
    raw = node.props.get("options", catalog.DEFAULT_OPTIONS)
    if not isinstance(raw, str):
        return []
    return [label.strip() for label in raw.split(",") if label.strip()]


# =============================================================================
# Emitters
# =============================================================================


def emit_leaf(ctx: EmitContext, node: ir.WidgetNode, indent: int) -> list[str]:
    """Self-closing widget, e.g. ``<Input value={name} ... />``."""
    return [f"{' ' * indent}<{node.type}{_join(build_attributes(ctx, node))} />"]


def emit_text_content(ctx: EmitContext, node: ir.WidgetNode, indent: int) -> list[str]:
    """Widget whose ``children`` prop is its text content."""
    attrs = build_attributes(ctx, node, skip=frozenset({"children"}))
    content = _content(ctx, node, catalog.CATALOG[node.type].display_name)
    return [f"{' ' * indent}<{node.type}{_join(attrs)}>{content}</{node.type}>"]


def emit_message_bar(ctx: EmitContext, node: ir.WidgetNode, indent: int) -> list[str]:
    spaces = " " * indent
    attrs = build_attributes(ctx, node, skip=frozenset({"children"}))
    content = _content(ctx, node, "Message")
    return [
        f"{spaces}<MessageBar{_join(attrs)}>",
        f"{spaces}  <MessageBarBody>{content}</MessageBarBody>",
        f"{spaces}</MessageBar>",
    ]


def emit_option_list(ctx: EmitContext, node: ir.WidgetNode, indent: int) -> list[str]:
    """Dropdown or Combobox with one ``<Option>`` per configured label."""
    spaces = " " * indent
    attrs = build_attributes(ctx, node, skip=frozenset({"options"}))
    options = _options(node)
    if not options:
        return [f"{spaces}<{node.type}{_join(attrs)} />"]
    lines = [f"{spaces}<{node.type}{_join(attrs)}>"]
    for position, label in enumerate(options, start=1):
        lines.append(f'{spaces}  <Option value="{position}">{render_text(label)}</Option>')
    lines.append(f"{spaces}</{node.type}>")
    return lines


def emit_stack(ctx: EmitContext, node: ir.WidgetNode, indent: int) -> list[str]:
    """Stack is a plain flex ``div``; its props become the inline style."""
    props = node.props
    style: dict[str, Any] = {
        "display": "flex",
        "flexDirection": props.get("direction") or "column",
        "gap": props.get("gap") or "8px",
    }
    if props.get("wrap"):
        style["flexWrap"] = "wrap"
    for key in ("alignItems", "justifyContent"):
        if props.get(key):
            style[key] = props[key]
    style.update(node.layout)
    return _container(ctx, node, indent, "div", [f"style={{{js_literal(style)}}}"])


def emit_flex(ctx: EmitContext, node: ir.WidgetNode, indent: int) -> list[str]:
    style: dict[str, Any] = {"gap": node.props.get("gap") or "8px"}
    style.update(node.layout)
    return _container(ctx, node, indent, "div", [f'className="{FLEX_CLASS}"', f"style={{{js_literal(style)}}}"])


def emit_grid(ctx: EmitContext, node: ir.WidgetNode, indent: int) -> list[str]:
    columns = node.props.get("columns")
    if not isinstance(columns, int) or isinstance(columns, bool) or columns < 1:
        columns = 2
    style: dict[str, Any] = {
        "gridTemplateColumns": f"repeat({columns}, minmax(0, 1fr))",
        "gap": node.props.get("gap") or "8px",
    }
    style.update(node.layout)
    return _container(ctx, node, indent, "div", [f'className="{GRID_CLASS}"', f"style={{{js_literal(style)}}}"])


def emit_card(ctx: EmitContext, node: ir.WidgetNode, indent: int) -> list[str]:
    return _container(ctx, node, indent, "Card", build_attributes(ctx, node))


EMITTERS: dict[str, Emitter] = {
    WidgetType.INPUT.value: emit_leaf,
    WidgetType.TEXTAREA.value: emit_leaf,
    WidgetType.CHECKBOX.value: emit_leaf,
    WidgetType.SWITCH.value: emit_leaf,
    WidgetType.DROPDOWN.value: emit_option_list,
    WidgetType.COMBOBOX.value: emit_option_list,
    WidgetType.SPIN_BUTTON.value: emit_leaf,
    WidgetType.SLIDER.value: emit_leaf,
    WidgetType.BUTTON.value: emit_text_content,
    WidgetType.LINK.value: emit_text_content,
    WidgetType.TEXT.value: emit_text_content,
    WidgetType.LABEL.value: emit_text_content,
    WidgetType.BADGE.value: emit_text_content,
    WidgetType.IMAGE.value: emit_leaf,
    WidgetType.DIVIDER.value: emit_leaf,
    WidgetType.STACK.value: emit_stack,
    WidgetType.FLEX.value: emit_flex,
    WidgetType.GRID.value: emit_grid,
    WidgetType.CARD.value: emit_card,
    WidgetType.SPINNER.value: emit_leaf,
    WidgetType.PROGRESS_BAR.value: emit_leaf,
    WidgetType.MESSAGE_BAR.value: emit_message_bar,
}
