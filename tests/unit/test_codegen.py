"""Tests for view module generation."""

import re

import pytest

from fluentforge.core.ir import Binding, DeclaredField, Document, WidgetInstance, WidgetTree
from fluentforge.core.mutations import create_widget, insert_widget
from fluentforge.stacks.pcf import generate_control
from fluentforge.stacks.pcf.generators.emitters import render_literal_attr, render_text
from fluentforge.stacks.pcf.generators.view import collect_bound_fields, collect_imports


def _document(widgets: list[WidgetInstance], fields: tuple[DeclaredField, ...] = ()) -> Document:
    return Document(fields=fields, tree=WidgetTree.from_nested(widgets))


def _imports(component: str) -> list[str]:
    block = re.search(r"import \{\n(.*?)\n\} from '@fluentui/react-components';", component, re.S)
    assert block is not None
    return [line.strip() for line in block.group(1).split(",\n")]


class TestBoundInput:
    def test_one_state_hook_and_one_handler(self, amount_document: Document) -> None:
        component = generate_control(amount_document).component
        assert component.count("React.useState(") == 1
        assert "const [amount, setAmount] = React.useState(props.amount);" in component
        handler = "onChange={(_, data) => { setAmount(data.value); props.onChange?.('amount', data.value); }}"
        assert component.count(handler) == 1
        assert "value={amount}" in component

    def test_props_interface(self, amount_document: Document) -> None:
        component = generate_control(amount_document).component
        assert "export interface AmountEditorProps {" in component
        assert "  amount?: number;" in component
        assert "  onChange?: (propertyName: string, value: unknown) => void;" in component

    def test_component_shell(self, amount_document: Document) -> None:
        component = generate_control(amount_document).component
        assert component.startswith("import * as React from 'react';\n")
        assert "export const AmountEditor: React.FC<AmountEditorProps> = (props) => {" in component
        assert "<FluentProvider theme={webLightTheme}>" in component
        assert component.endswith("export default AmountEditor;\n")

    def test_literal_props_sorted(self, amount_document: Document) -> None:
        component = generate_control(amount_document).component
        assert '        <Input appearance="outline" placeholder="Enter text..." value={amount} ' in component

    def test_required_field_is_not_optional(self) -> None:
        document = Document(fields=(DeclaredField(name="title", required=True),))
        assert "  title: string;" in generate_control(document).component

    def test_unbound_field_has_no_state(self) -> None:
        document = Document(fields=(DeclaredField(name="title"),))
        component = generate_control(document).component
        assert "useState" not in component
        assert "  title?: string;" in component


class TestDeterminism:
    def test_same_document_same_output(self, amount_document: Document) -> None:
        first = generate_control(amount_document)
        second = generate_control(amount_document.model_copy(deep=True))
        assert first.files() == second.files()

    def test_prop_insertion_order_does_not_matter(self) -> None:
        a = _document([WidgetInstance(id="x", type="Input", props={"placeholder": "p", "appearance": "filled-darker"})])
        b = _document([WidgetInstance(id="x", type="Input", props={"appearance": "filled-darker", "placeholder": "p"})])
        assert generate_control(a).component == generate_control(b).component

    def test_layout_and_object_prop_order_does_not_matter(self) -> None:
        a = _document([WidgetInstance(id="x", type="Input", layout={"width": "10px", "color": "red"})])
        b = _document([WidgetInstance(id="x", type="Input", layout={"color": "red", "width": "10px"})])
        assert a == b
        component = generate_control(a).component
        assert component == generate_control(b).component
        assert "style={{ color: 'red', width: '10px' }}" in component


class TestImports:
    def test_imports_sorted_and_distinct(self) -> None:
        document = _document(
            [
                WidgetInstance(type="Input"),
                WidgetInstance(type="Input"),
                WidgetInstance(type="Dropdown"),
                WidgetInstance(type="Button", props={"children": "Go"}),
            ]
        )
        imports = _imports(generate_control(document).component)
        assert imports == sorted(imports)
        assert imports == ["Button", "Dropdown", "FluentProvider", "Input", "Option", "webLightTheme"]

    def test_layout_only_containers_import_nothing_extra(self) -> None:
        assert collect_imports(WidgetTree.from_nested([WidgetInstance(type="Stack", children=[])])) == [
            "FluentProvider",
            "webLightTheme",
        ]

    def test_unknown_type_adds_no_import(self) -> None:
        tree = WidgetTree.from_nested([WidgetInstance(type="Carousel")])
        assert "Carousel" not in collect_imports(tree)


class TestUnknownAndDangling:
    def test_unknown_widget_becomes_comment(self) -> None:
        document = _document([WidgetInstance(id="x", type="Carousel")])
        code = generate_control(document)
        assert "{/* Unsupported widget: Carousel */}" in code.component
        assert any("Carousel" in warning for warning in code.warnings)

    def test_binding_to_missing_field_is_skipped(self) -> None:
        document = _document([WidgetInstance(id="x", type="Input", bindings=[Binding(target="value", field="ghost")])])
        code = generate_control(document)
        assert "ghost" not in code.component
        assert "useState" not in code.component
        assert any("undeclared field 'ghost'" in warning for warning in code.warnings)

    def test_incompatible_binding_is_emitted_with_warning(self) -> None:
        document = _document(
            [WidgetInstance(id="x", type="Switch", bindings=[Binding(target="checked", field="amount")])],
            fields=(DeclaredField(name="amount", type="Decimal"),),
        )
        code = generate_control(document)
        assert "checked={amount}" in code.component
        assert any("incompatible" in warning for warning in code.warnings)

    def test_empty_tree_placeholder(self) -> None:
        code = generate_control(Document())
        assert "{/* No components designed yet */}" in code.component
        assert code.warnings == ()


class TestEmitters:
    def test_checkbox_handler_uses_checked(self) -> None:
        document = _document(
            [WidgetInstance(type="Checkbox", bindings=[Binding(target="checked", field="active")])],
            fields=(DeclaredField(name="active", type="TwoOptions"),),
        )
        component = generate_control(document).component
        assert "setActive(data.checked); props.onChange?.('active', data.checked);" in component

    def test_spin_button_state_falls_back_to_zero(self) -> None:
        document = _document(
            [WidgetInstance(type="SpinButton", bindings=[Binding(target="value", field="count")])],
            fields=(DeclaredField(name="count", type="Whole.None"),),
        )
        component = generate_control(document).component
        assert "onChange={(_, data) => { setCount(data.value ?? 0); props.onChange?.('count', data.value); }}" in component

    def test_dropdown_options_and_selection_handler(self) -> None:
        document = _document(
            [
                WidgetInstance(
                    type="Dropdown",
                    props={"options": "Red, Green"},
                    bindings=[Binding(target="selectedOptions", field="colour")],
                )
            ],
            fields=(DeclaredField(name="colour", type="OptionSet"),),
        )
        component = generate_control(document).component
        assert '<Option value="1">Red</Option>' in component
        assert '<Option value="2">Green</Option>' in component
        assert "onOptionSelect={(_, data) => { setColour(data.optionValue);" in component
        assert "options=" not in component

    def test_display_binding_has_no_handler(self) -> None:
        document = _document(
            [WidgetInstance(type="Text", bindings=[Binding(target="children", field="title")])],
            fields=(DeclaredField(name="title"),),
        )
        component = generate_control(document).component
        assert "<Text>{title}</Text>" in component
        assert "props.onChange?.(" not in component

    def test_text_content_from_props(self) -> None:
        document = _document([WidgetInstance(type="Button", props={"children": "Save", "appearance": "primary"})])
        assert '<Button appearance="primary">Save</Button>' in generate_control(document).component

    def test_message_bar_wraps_body(self) -> None:
        document = _document([WidgetInstance(type="MessageBar", props={"intent": "warning", "children": "Careful"})])
        component = generate_control(document).component
        assert '<MessageBar intent="warning">' in component
        assert "<MessageBarBody>Careful</MessageBarBody>" in component

    def test_stack_nesting_and_indentation(self) -> None:
        document = _document(
            [WidgetInstance(type="Stack", props={"direction": "row", "gap": "4px"}, children=[WidgetInstance(type="Divider")])]
        )
        component = generate_control(document).component
        assert "        <div style={{ display: 'flex', flexDirection: 'row', gap: '4px' }}>" in component
        assert "          <Divider />" in component
        assert "        </div>" in component

    def test_empty_container_self_closes(self) -> None:
        document = _document([WidgetInstance(type="Card", props={"appearance": "outline"}, children=[])])
        assert '        <Card appearance="outline" />' in generate_control(document).component

    def test_grid_columns(self) -> None:
        document = _document([WidgetInstance(type="Grid", props={"columns": 3}, children=[])])
        component = generate_control(document).component
        assert 'className="ff-grid"' in component
        assert "gridTemplateColumns: 'repeat(3, minmax(0, 1fr))'" in component

    def test_layout_merges_into_style(self) -> None:
        document = _document([WidgetInstance(type="Input", layout={"width": "100%"})])
        assert "style={{ width: '100%' }}" in generate_control(document).component

    def test_unsafe_text_is_escaped(self) -> None:
        document = _document([WidgetInstance(type="Text", props={"children": "a < b {c}"})])
        assert "<Text>{'a < b {c}'}</Text>" in generate_control(document).component


class TestRenderHelpers:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("Name", 'placeholder="Name"'),
            ('say "hi"', "placeholder={'say \"hi\"'}"),
            (True, "placeholder"),
            (False, None),
            ("", None),
            (3, "placeholder={3}"),
            (0.5, "placeholder={0.5}"),
        ],
    )
    def test_render_literal_attr(self, value: object, expected: str | None) -> None:
        assert render_literal_attr("placeholder", value) == expected

    def test_render_text(self) -> None:
        assert render_text("Hello") == "Hello"
        assert render_text(" padded ") == "{' padded '}"
        assert render_text("it's") == "it's"
        assert render_text(42) == "{42}"


class TestCollectBoundFields:
    def test_declaration_order(self) -> None:
        fields = (DeclaredField(name="b"), DeclaredField(name="a"), DeclaredField(name="unused"))
        document = Document(fields=fields)
        for name in ("a", "b"):
            widget = create_widget("Input")
            widget.bindings = [Binding(target="value", field=name)]
            result = insert_widget(document, widget)
            assert result.document is not None
            document = result.document
        assert [f.name for f in collect_bound_fields(document)] == ["b", "a"]
