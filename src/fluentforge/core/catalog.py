"""
Widget catalog.

Static registry of every widget type the designer can place on the canvas.
Each definition describes:

- default props for newly created widgets
- the editable-prop schema used for validation and the property inspector
- which props accept a field binding, and the role each one plays
- whether the widget can hold children
- the Fluent UI names the generated view module must import
- the auxiliary stylesheet the widget needs, if any

The catalog is pure data. Lookups for a type that is not defined raise
``UnknownWidgetTypeError``; code that must keep going checks
``is_known_widget`` first.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .errors import UnknownWidgetTypeError


class WidgetType(str, Enum):
    """Widget types available in the palette."""

    INPUT = "Input"
    TEXTAREA = "Textarea"
    CHECKBOX = "Checkbox"
    SWITCH = "Switch"
    DROPDOWN = "Dropdown"
    COMBOBOX = "Combobox"
    SPIN_BUTTON = "SpinButton"
    SLIDER = "Slider"
    BUTTON = "Button"
    LINK = "Link"
    TEXT = "Text"
    LABEL = "Label"
    BADGE = "Badge"
    IMAGE = "Image"
    DIVIDER = "Divider"
    STACK = "Stack"
    FLEX = "Flex"
    GRID = "Grid"
    CARD = "Card"
    SPINNER = "Spinner"
    PROGRESS_BAR = "ProgressBar"
    MESSAGE_BAR = "MessageBar"


class WidgetCategory(str, Enum):
    """Palette categories, declared in display order."""

    INPUTS = "inputs"
    BUTTONS = "buttons"
    DISPLAY = "display"
    LAYOUT = "layout"
    FEEDBACK = "feedback"


CATEGORY_LABELS: dict[WidgetCategory, str] = {
    WidgetCategory.INPUTS: "Inputs",
    WidgetCategory.BUTTONS: "Actions",
    WidgetCategory.DISPLAY: "Display",
    WidgetCategory.LAYOUT: "Layout",
    WidgetCategory.FEEDBACK: "Feedback",
}


class PropKind(str, Enum):
    """Value kinds an editable prop can hold."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ENUM = "enum"
    COLOR = "color"


class BindingRole(str, Enum):
    """
    How a bound prop behaves in the generated view.

    The three interactive roles each get one fixed update-handler shape;
    display targets are rendered from state without a handler.
    """

    VALUE = "value"
    CHECKED = "checked"
    SELECTION = "selection"
    DISPLAY = "display"

    @property
    def is_interactive(self) -> bool:
        return self is not BindingRole.DISPLAY


class PropSpec(BaseModel):
    """Schema of one editable prop."""

    name: str
    display_name: str
    kind: PropKind
    options: tuple[str, ...] = ()
    default: Any = None

    model_config = ConfigDict(frozen=True)

    def accepts(self, value: Any) -> bool:
        """Check ``value`` against this prop's kind (and option set for enums)."""
        if self.kind is PropKind.BOOLEAN:
            return isinstance(value, bool)
        if self.kind is PropKind.NUMBER:
            return isinstance(value, int | float) and not isinstance(value, bool)
        if self.kind is PropKind.ENUM:
            return isinstance(value, str) and value in self.options
        # string and color
        return isinstance(value, str)


class WidgetDefinition(BaseModel):
    """Catalog entry for one widget type."""

    type: WidgetType
    display_name: str
    description: str
    category: WidgetCategory
    icon: str
    default_props: dict[str, Any] = Field(default_factory=dict)
    editable_props: tuple[PropSpec, ...] = ()
    bindable_props: dict[str, BindingRole] = Field(default_factory=dict)
    supports_children: bool = False
    imports: tuple[str, ...] = ()
    stylesheet: str | None = None

    model_config = ConfigDict(frozen=True)

    def prop_spec(self, name: str) -> PropSpec | None:
        for spec in self.editable_props:
            if spec.name == name:
                return spec
        return None

    def is_bindable(self, prop: str) -> bool:
        return prop in self.bindable_props

    @property
    def primary_binding(self) -> str | None:
        """First bindable prop, used when binding a field with one gesture."""
        return next(iter(self.bindable_props), None)


def _p(name: str, display_name: str, kind: PropKind, default: Any = None, *options: str) -> PropSpec:
    return PropSpec(name=name, display_name=display_name, kind=kind, options=options, default=default)


S, N, B, E = PropKind.STRING, PropKind.NUMBER, PropKind.BOOLEAN, PropKind.ENUM

_APPEARANCE = ("outline", "underline", "filled-darker", "filled-lighter")
_SIZES = ("small", "medium", "large")

LAYOUT_STYLESHEET = "css/layout.css"

# Comma-separated option labels for Dropdown and Combobox
DEFAULT_OPTIONS = "Option 1, Option 2, Option 3"


_DEFINITIONS: tuple[WidgetDefinition, ...] = (
    # ============ INPUTS ============
    WidgetDefinition(
        type=WidgetType.INPUT,
        display_name="Input",
        description="Single-line text input field",
        category=WidgetCategory.INPUTS,
        icon="TextBox",
        default_props={"placeholder": "Enter text...", "appearance": "outline"},
        editable_props=(
            _p("placeholder", "Placeholder", S, ""),
            _p("appearance", "Appearance", E, "outline", *_APPEARANCE),
            _p("size", "Size", E, "medium", *_SIZES),
            _p("disabled", "Disabled", B, False),
            _p("type", "Type", E, "text", "text", "password", "email", "number", "tel", "url"),
        ),
        bindable_props={"value": BindingRole.VALUE},
        imports=("Input",),
    ),
    WidgetDefinition(
        type=WidgetType.TEXTAREA,
        display_name="Textarea",
        description="Multi-line text input",
        category=WidgetCategory.INPUTS,
        icon="TextBox",
        default_props={"placeholder": "Enter text...", "resize": "vertical"},
        editable_props=(
            _p("placeholder", "Placeholder", S, ""),
            _p("resize", "Resize", E, "vertical", "none", "horizontal", "vertical", "both"),
            _p("size", "Size", E, "medium", *_SIZES),
            _p("disabled", "Disabled", B, False),
        ),
        bindable_props={"value": BindingRole.VALUE},
        imports=("Textarea",),
    ),
    WidgetDefinition(
        type=WidgetType.CHECKBOX,
        display_name="Checkbox",
        description="Checkbox for boolean values",
        category=WidgetCategory.INPUTS,
        icon="Checkbox",
        default_props={"label": "Checkbox label"},
        editable_props=(
            _p("label", "Label", S, "Checkbox"),
            _p("size", "Size", E, "medium", "medium", "large"),
            _p("disabled", "Disabled", B, False),
        ),
        bindable_props={"checked": BindingRole.CHECKED},
        imports=("Checkbox",),
    ),
    WidgetDefinition(
        type=WidgetType.SWITCH,
        display_name="Switch",
        description="Toggle switch for on/off values",
        category=WidgetCategory.INPUTS,
        icon="ToggleSwitch",
        default_props={"label": "Toggle"},
        editable_props=(
            _p("label", "Label", S, "Toggle"),
            _p("labelPosition", "Label Position", E, "after", "above", "after", "before"),
            _p("disabled", "Disabled", B, False),
        ),
        bindable_props={"checked": BindingRole.CHECKED},
        imports=("Switch",),
    ),
    WidgetDefinition(
        type=WidgetType.DROPDOWN,
        display_name="Dropdown",
        description="Dropdown selection list",
        category=WidgetCategory.INPUTS,
        icon="DropdownList",
        default_props={"placeholder": "Select an option", "options": DEFAULT_OPTIONS},
        editable_props=(
            _p("placeholder", "Placeholder", S, "Select..."),
            _p("options", "Options", S, DEFAULT_OPTIONS),
            _p("appearance", "Appearance", E, "outline", *_APPEARANCE),
            _p("disabled", "Disabled", B, False),
            _p("multiselect", "Multi-select", B, False),
        ),
        bindable_props={"selectedOptions": BindingRole.SELECTION, "value": BindingRole.SELECTION},
        imports=("Dropdown", "Option"),
    ),
    WidgetDefinition(
        type=WidgetType.COMBOBOX,
        display_name="Combobox",
        description="Searchable dropdown with autocomplete",
        category=WidgetCategory.INPUTS,
        icon="Search",
        default_props={"placeholder": "Search...", "options": DEFAULT_OPTIONS},
        editable_props=(
            _p("placeholder", "Placeholder", S, "Search..."),
            _p("options", "Options", S, DEFAULT_OPTIONS),
            _p("appearance", "Appearance", E, "outline", *_APPEARANCE),
            _p("disabled", "Disabled", B, False),
            _p("freeform", "Allow Freeform", B, False),
        ),
        bindable_props={"selectedOptions": BindingRole.SELECTION, "value": BindingRole.SELECTION},
        imports=("Combobox", "Option"),
    ),
    WidgetDefinition(
        type=WidgetType.SPIN_BUTTON,
        display_name="Spin Button",
        description="Numeric input with increment/decrement buttons",
        category=WidgetCategory.INPUTS,
        icon="NumberField",
        default_props={"min": 0, "max": 100, "step": 1},
        editable_props=(
            _p("min", "Minimum", N, 0),
            _p("max", "Maximum", N, 100),
            _p("step", "Step", N, 1),
            _p("disabled", "Disabled", B, False),
        ),
        bindable_props={"value": BindingRole.VALUE},
        imports=("SpinButton",),
    ),
    WidgetDefinition(
        type=WidgetType.SLIDER,
        display_name="Slider",
        description="Slider for selecting a value in a range",
        category=WidgetCategory.INPUTS,
        icon="Slider",
        default_props={"min": 0, "max": 100, "step": 1},
        editable_props=(
            _p("min", "Minimum", N, 0),
            _p("max", "Maximum", N, 100),
            _p("step", "Step", N, 1),
            _p("disabled", "Disabled", B, False),
            _p("vertical", "Vertical", B, False),
        ),
        bindable_props={"value": BindingRole.VALUE},
        imports=("Slider",),
    ),
    # ============ ACTIONS ============
    WidgetDefinition(
        type=WidgetType.BUTTON,
        display_name="Button",
        description="Clickable button",
        category=WidgetCategory.BUTTONS,
        icon="Button",
        default_props={"children": "Button", "appearance": "secondary"},
        editable_props=(
            _p("children", "Text", S, "Button"),
            _p("appearance", "Appearance", E, "secondary", "secondary", "primary", "outline", "subtle", "transparent"),
            _p("size", "Size", E, "medium", *_SIZES),
            _p("shape", "Shape", E, "rounded", "rounded", "circular", "square"),
            _p("disabled", "Disabled", B, False),
        ),
        imports=("Button",),
    ),
    WidgetDefinition(
        type=WidgetType.LINK,
        display_name="Link",
        description="Hyperlink",
        category=WidgetCategory.BUTTONS,
        icon="Link",
        default_props={"children": "Link text", "href": "#"},
        editable_props=(
            _p("children", "Text", S, "Link"),
            _p("href", "URL", S, "#"),
            _p("appearance", "Appearance", E, "default", "default", "subtle"),
            _p("inline", "Inline", B, False),
        ),
        bindable_props={"href": BindingRole.DISPLAY, "children": BindingRole.DISPLAY},
        imports=("Link",),
    ),
    # ============ DISPLAY ============
    WidgetDefinition(
        type=WidgetType.TEXT,
        display_name="Text",
        description="Display text content",
        category=WidgetCategory.DISPLAY,
        icon="Text",
        default_props={"children": "Text content"},
        editable_props=(
            _p("children", "Content", S, "Text"),
            _p("size", "Size", E, "300", "100", "200", "300", "400", "500", "600", "700", "800", "900", "1000"),
            _p("weight", "Weight", E, "regular", "regular", "medium", "semibold", "bold"),
            _p("align", "Align", E, "start", "start", "center", "end", "justify"),
        ),
        bindable_props={"children": BindingRole.DISPLAY},
        imports=("Text",),
    ),
    WidgetDefinition(
        type=WidgetType.LABEL,
        display_name="Label",
        description="Label for form fields",
        category=WidgetCategory.DISPLAY,
        icon="Label",
        default_props={"children": "Label"},
        editable_props=(
            _p("children", "Text", S, "Label"),
            _p("size", "Size", E, "medium", *_SIZES),
            _p("weight", "Weight", E, "regular", "regular", "semibold"),
            _p("required", "Required", B, False),
        ),
        bindable_props={"children": BindingRole.DISPLAY},
        imports=("Label",),
    ),
    WidgetDefinition(
        type=WidgetType.BADGE,
        display_name="Badge",
        description="Status badge or tag",
        category=WidgetCategory.DISPLAY,
        icon="Badge",
        default_props={"children": "Badge", "appearance": "filled"},
        editable_props=(
            _p("children", "Text", S, "Badge"),
            _p("appearance", "Appearance", E, "filled", "filled", "ghost", "outline", "tint"),
            _p(
                "color", "Color", E, "brand",
                "brand", "danger", "important", "informative", "severe", "subtle", "success", "warning",
            ),
            _p("size", "Size", E, "medium", "tiny", "extra-small", "small", "medium", "large", "extra-large"),
            _p("shape", "Shape", E, "circular", "circular", "rounded", "square"),
        ),
        bindable_props={"children": BindingRole.DISPLAY},
        imports=("Badge",),
    ),
    WidgetDefinition(
        type=WidgetType.IMAGE,
        display_name="Image",
        description="Display an image",
        category=WidgetCategory.DISPLAY,
        icon="Image",
        default_props={"src": "", "alt": "Image"},
        editable_props=(
            _p("src", "Source URL", S, ""),
            _p("alt", "Alt Text", S, "Image"),
            _p("fit", "Fit", E, "default", "none", "center", "contain", "cover", "default"),
            _p("shape", "Shape", E, "square", "circular", "rounded", "square"),
            _p("bordered", "Bordered", B, False),
        ),
        bindable_props={"src": BindingRole.DISPLAY},
        imports=("Image",),
    ),
    WidgetDefinition(
        type=WidgetType.DIVIDER,
        display_name="Divider",
        description="Visual separator between content",
        category=WidgetCategory.DISPLAY,
        icon="Line",
        editable_props=(
            _p("vertical", "Vertical", B, False),
            _p("appearance", "Appearance", E, "default", "default", "subtle", "brand", "strong"),
            _p("inset", "Inset", B, False),
        ),
        imports=("Divider",),
    ),
    # ============ LAYOUT ============
    WidgetDefinition(
        type=WidgetType.STACK,
        display_name="Stack",
        description="Vertical or horizontal container",
        category=WidgetCategory.LAYOUT,
        icon="Stack",
        default_props={"direction": "column", "gap": "8px"},
        editable_props=(
            _p("direction", "Direction", E, "column", "row", "column"),
            _p("gap", "Gap", S, "8px"),
            _p("wrap", "Wrap", B, False),
            _p("alignItems", "Align Items", E, "stretch", "start", "center", "end", "stretch"),
            _p("justifyContent", "Justify", E, "start", "start", "center", "end", "space-between", "space-around"),
        ),
        supports_children=True,
    ),
    WidgetDefinition(
        type=WidgetType.FLEX,
        display_name="Flex",
        description="Wrapping flex container",
        category=WidgetCategory.LAYOUT,
        icon="Stack",
        default_props={"gap": "8px"},
        editable_props=(_p("gap", "Gap", S, "8px"),),
        supports_children=True,
        stylesheet=LAYOUT_STYLESHEET,
    ),
    WidgetDefinition(
        type=WidgetType.GRID,
        display_name="Grid",
        description="Grid layout",
        category=WidgetCategory.LAYOUT,
        icon="Grid",
        default_props={"columns": 2, "gap": "8px"},
        editable_props=(
            _p("columns", "Columns", N, 2),
            _p("gap", "Gap", S, "8px"),
        ),
        supports_children=True,
        stylesheet=LAYOUT_STYLESHEET,
    ),
    WidgetDefinition(
        type=WidgetType.CARD,
        display_name="Card",
        description="Container with visual boundaries",
        category=WidgetCategory.LAYOUT,
        icon="Card",
        default_props={"appearance": "filled"},
        editable_props=(
            _p("appearance", "Appearance", E, "filled", "filled", "filled-alternative", "outline", "subtle"),
            _p("orientation", "Orientation", E, "vertical", "horizontal", "vertical"),
            _p("size", "Size", E, "medium", *_SIZES),
        ),
        supports_children=True,
        imports=("Card",),
    ),
    # ============ FEEDBACK ============
    WidgetDefinition(
        type=WidgetType.SPINNER,
        display_name="Spinner",
        description="Loading spinner",
        category=WidgetCategory.FEEDBACK,
        icon="Spinner",
        default_props={"size": "medium"},
        editable_props=(
            _p(
                "size", "Size", E, "medium",
                "extra-tiny", "tiny", "extra-small", "small", "medium", "large", "extra-large", "huge",
            ),
            _p("label", "Label", S, ""),
            _p("labelPosition", "Label Position", E, "after", "above", "below", "before", "after"),
        ),
        imports=("Spinner",),
    ),
    WidgetDefinition(
        type=WidgetType.PROGRESS_BAR,
        display_name="Progress Bar",
        description="Progress indicator",
        category=WidgetCategory.FEEDBACK,
        icon="ProgressBar",
        default_props={"value": 0.5},
        editable_props=(
            _p("value", "Value (0-1)", N, 0.5),
            _p("max", "Max", N, 1),
            _p("thickness", "Thickness", E, "medium", "medium", "large"),
            _p("color", "Color", E, "brand", "brand", "error", "warning", "success"),
        ),
        bindable_props={"value": BindingRole.DISPLAY},
        imports=("ProgressBar",),
    ),
    WidgetDefinition(
        type=WidgetType.MESSAGE_BAR,
        display_name="Message Bar",
        description="Informational message banner",
        category=WidgetCategory.FEEDBACK,
        icon="Message",
        default_props={"intent": "info", "children": "Message content"},
        editable_props=(
            _p("children", "Message", S, "Message"),
            _p("intent", "Intent", E, "info", "info", "warning", "error", "success"),
            _p("shape", "Shape", E, "rounded", "rounded", "square"),
        ),
        bindable_props={"children": BindingRole.DISPLAY},
        imports=("MessageBar", "MessageBarBody"),
    ),
)

CATALOG: dict[str, WidgetDefinition] = {d.type.value: d for d in _DEFINITIONS}


def is_known_widget(widget_type: str) -> bool:
    """Check whether ``widget_type`` has a catalog entry."""
    return widget_type in CATALOG


def definition_of(widget_type: str) -> WidgetDefinition:
    """
    Look up the catalog entry for a widget type.

    Raises:
        UnknownWidgetTypeError: if the type is not in the catalog
    """
    try:
        return CATALOG[widget_type]
    except KeyError:
        raise UnknownWidgetTypeError(widget_type) from None


def widget_types() -> list[str]:
    """All catalog widget types, in declaration order."""
    return list(CATALOG)


def palette() -> list[tuple[WidgetCategory, list[WidgetDefinition]]]:
    """Widget definitions grouped by category, categories in palette order."""
    grouped: list[tuple[WidgetCategory, list[WidgetDefinition]]] = []
    for category in WidgetCategory:
        members = [d for d in _DEFINITIONS if d.category is category]
        if members:
            grouped.append((category, members))
    return grouped


def validate_props(widget_type: str, props: dict[str, Any]) -> list[str]:
    """
    Check prop values against the editable-prop schema.

    Props that are not in the schema are accepted untouched. ``None`` values
    are ignored (they mean "unset" in a patch).

    Returns:
        List of problems, empty when every value is acceptable
    """
    definition = definition_of(widget_type)
    problems: list[str] = []
    for name, value in props.items():
        if value is None:
            continue
        spec = definition.prop_spec(name)
        if spec is None or spec.accepts(value):
            continue
        if spec.kind is PropKind.ENUM:
            problems.append(
                f"{widget_type}.{name} must be one of {', '.join(spec.options)}; got {value!r}"
            )
        else:
            problems.append(f"{widget_type}.{name} expects a {spec.kind.value}; got {value!r}")
    return problems
