"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from fluentforge.cli import app
from fluentforge.core.document_io import load_document


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def doc_path(tmp_path: Path, cli_runner: CliRunner) -> Path:
    """A fresh document created through ``fluentforge new``."""
    path = tmp_path / "control.json"
    result = cli_runner.invoke(app, ["new", str(path), "--identifier", "AmountEditor", "--namespace", "Contoso"])
    assert result.exit_code == 0, result.output
    return path


def _invoke(cli_runner: CliRunner, doc_path: Path, *args: str):
    return cli_runner.invoke(app, [*args, "--document", str(doc_path)])


class TestNewCommand:
    def test_creates_document(self, doc_path: Path) -> None:
        document = load_document(doc_path)
        assert document.metadata.qualified_name == "Contoso.AmountEditor"
        assert document.fields == ()

    def test_refuses_to_overwrite(self, cli_runner: CliRunner, doc_path: Path) -> None:
        result = cli_runner.invoke(app, ["new", str(doc_path)])
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_force_overwrites(self, cli_runner: CliRunner, doc_path: Path) -> None:
        result = cli_runner.invoke(app, ["new", str(doc_path), "--force"])
        assert result.exit_code == 0
        assert load_document(doc_path).metadata.identifier == "MyControl"

    def test_uses_config_defaults(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "fluentforge.toml").write_text('[document]\nnamespace = "Fabrikam"\n', encoding="utf-8")
        path = tmp_path / "doc.json"
        result = cli_runner.invoke(app, ["new", str(path)])
        assert result.exit_code == 0, result.output
        assert load_document(path).metadata.namespace == "Fabrikam"


class TestFieldCommands:
    def test_add_field(self, cli_runner: CliRunner, doc_path: Path) -> None:
        result = _invoke(cli_runner, doc_path, "field", "add", "amount", "--type", "Decimal", "--default", "2.5")
        assert result.exit_code == 0, result.output
        declared = load_document(doc_path).field("amount")
        assert declared is not None
        assert declared.type == "Decimal"
        assert declared.default_value == 2.5

    def test_add_duplicate_field(self, cli_runner: CliRunner, doc_path: Path) -> None:
        _invoke(cli_runner, doc_path, "field", "add", "amount")
        result = _invoke(cli_runner, doc_path, "field", "add", "amount")
        assert result.exit_code == 1
        assert "duplicate_field" in result.output

    def test_add_unknown_type(self, cli_runner: CliRunner, doc_path: Path) -> None:
        result = _invoke(cli_runner, doc_path, "field", "add", "where", "--type", "Geo.Point")
        assert result.exit_code == 1
        assert load_document(doc_path).fields == ()

    def test_update_rename(self, cli_runner: CliRunner, doc_path: Path) -> None:
        _invoke(cli_runner, doc_path, "field", "add", "amount", "--type", "Decimal")
        _invoke(cli_runner, doc_path, "widget", "add", "--for-field", "amount")
        result = _invoke(cli_runner, doc_path, "field", "update", "amount", "--rename", "total", "--required")
        assert result.exit_code == 0, result.output
        document = load_document(doc_path)
        assert document.field_names == ["total"]
        assert document.field("total").required
        node = document.tree.nodes[document.tree.roots[0]]
        assert node.bound_fields == ["total"]

    def test_update_without_changes(self, cli_runner: CliRunner, doc_path: Path) -> None:
        _invoke(cli_runner, doc_path, "field", "add", "amount")
        result = _invoke(cli_runner, doc_path, "field", "update", "amount")
        assert result.exit_code == 1
        assert "Nothing to change" in result.output

    def test_remove_field_prunes_bindings(self, cli_runner: CliRunner, doc_path: Path) -> None:
        _invoke(cli_runner, doc_path, "field", "add", "amount", "--type", "Decimal")
        _invoke(cli_runner, doc_path, "widget", "add", "--for-field", "amount")
        result = _invoke(cli_runner, doc_path, "field", "remove", "amount")
        assert result.exit_code == 0, result.output
        assert "Removed 1 binding" in result.output
        document = load_document(doc_path)
        assert document.fields == ()
        assert document.tree.nodes[document.tree.roots[0]].bindings == ()

    def test_types(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["field", "types"])
        assert result.exit_code == 0
        assert "Decimal" in result.output

    def test_samples(self, cli_runner: CliRunner, doc_path: Path) -> None:
        _invoke(cli_runner, doc_path, "field", "add", "active", "--type", "TwoOptions")
        result = _invoke(cli_runner, doc_path, "field", "samples")
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"active": True}


class TestWidgetCommands:
    def test_add_with_props_and_layout(self, cli_runner: CliRunner, doc_path: Path) -> None:
        result = _invoke(
            cli_runner, doc_path, "widget", "add", "Grid", "--prop", "columns=3", "--layout", "width=100%"
        )
        assert result.exit_code == 0, result.output
        document = load_document(doc_path)
        node = document.tree.nodes[document.tree.roots[0]]
        assert node.type == "Grid"
        assert node.props["columns"] == 3
        assert node.layout == {"width": "100%"}

    def test_add_into_container(self, cli_runner: CliRunner, doc_path: Path) -> None:
        _invoke(cli_runner, doc_path, "widget", "add", "Stack")
        stack = load_document(doc_path).tree.roots[0]
        result = _invoke(cli_runner, doc_path, "widget", "add", "Input", "--parent", stack)
        assert result.exit_code == 0, result.output
        assert len(load_document(doc_path).tree.children_of(stack)) == 1

    def test_add_unknown_type(self, cli_runner: CliRunner, doc_path: Path) -> None:
        result = _invoke(cli_runner, doc_path, "widget", "add", "Carousel")
        assert result.exit_code == 1
        assert "Unknown widget type" in result.output

    def test_add_needs_type_or_field(self, cli_runner: CliRunner, doc_path: Path) -> None:
        result = _invoke(cli_runner, doc_path, "widget", "add")
        assert result.exit_code == 1

    def test_invalid_prop_is_rejected(self, cli_runner: CliRunner, doc_path: Path) -> None:
        result = _invoke(cli_runner, doc_path, "widget", "add", "Input", "--prop", "appearance=glossy")
        assert result.exit_code == 1
        assert "invalid_property" in result.output
        assert len(load_document(doc_path).tree) == 0

    def test_bad_assignment(self, cli_runner: CliRunner, doc_path: Path) -> None:
        result = _invoke(cli_runner, doc_path, "widget", "add", "Input", "--prop", "appearance")
        assert result.exit_code == 1
        assert "Expected key=value" in result.output

    def test_set_and_unset_prop(self, cli_runner: CliRunner, doc_path: Path) -> None:
        _invoke(cli_runner, doc_path, "widget", "add", "Input")
        node_id = load_document(doc_path).tree.roots[0]
        _invoke(cli_runner, doc_path, "widget", "set", node_id, "--prop", "disabled=true")
        result = _invoke(cli_runner, doc_path, "widget", "set", node_id, "--prop", "placeholder=null")
        assert result.exit_code == 0, result.output
        props = load_document(doc_path).tree.nodes[node_id].props
        assert props["disabled"] is True
        assert "placeholder" not in props

    def test_move_into_own_subtree(self, cli_runner: CliRunner, doc_path: Path) -> None:
        _invoke(cli_runner, doc_path, "widget", "add", "Stack")
        outer = load_document(doc_path).tree.roots[0]
        _invoke(cli_runner, doc_path, "widget", "add", "Card", "--parent", outer)
        inner = load_document(doc_path).tree.children_of(outer)[0]
        result = _invoke(cli_runner, doc_path, "widget", "move", outer, "--parent", inner)
        assert result.exit_code == 1
        assert "cycle_detected" in result.output

    def test_move_to_root(self, cli_runner: CliRunner, doc_path: Path) -> None:
        _invoke(cli_runner, doc_path, "widget", "add", "Stack")
        stack = load_document(doc_path).tree.roots[0]
        _invoke(cli_runner, doc_path, "widget", "add", "Input", "--parent", stack)
        leaf = load_document(doc_path).tree.children_of(stack)[0]
        result = _invoke(cli_runner, doc_path, "widget", "move", leaf)
        assert result.exit_code == 0, result.output
        assert load_document(doc_path).tree.roots == (leaf, stack)

    def test_remove_missing_is_not_an_error(self, cli_runner: CliRunner, doc_path: Path) -> None:
        result = _invoke(cli_runner, doc_path, "widget", "remove", "w-nothing")
        assert result.exit_code == 0
        assert "nothing removed" in result.output

    def test_bind_and_unbind(self, cli_runner: CliRunner, doc_path: Path) -> None:
        _invoke(cli_runner, doc_path, "field", "add", "title")
        _invoke(cli_runner, doc_path, "widget", "add", "Text")
        node_id = load_document(doc_path).tree.roots[0]
        result = _invoke(cli_runner, doc_path, "widget", "bind", node_id, "title")
        assert result.exit_code == 0, result.output
        assert load_document(doc_path).tree.nodes[node_id].bound_fields == ["title"]
        result = _invoke(cli_runner, doc_path, "widget", "unbind", node_id, "children")
        assert result.exit_code == 0, result.output
        assert load_document(doc_path).tree.nodes[node_id].bindings == ()

    def test_bind_incompatible(self, cli_runner: CliRunner, doc_path: Path) -> None:
        _invoke(cli_runner, doc_path, "field", "add", "amount", "--type", "Decimal")
        _invoke(cli_runner, doc_path, "widget", "add", "Switch")
        node_id = load_document(doc_path).tree.roots[0]
        result = _invoke(cli_runner, doc_path, "widget", "bind", node_id, "amount")
        assert result.exit_code == 1
        assert "incompatible_binding" in result.output


class TestDocumentCommands:
    def test_generate_writes_files(self, cli_runner: CliRunner, doc_path: Path, tmp_path: Path) -> None:
        _invoke(cli_runner, doc_path, "field", "add", "amount", "--type", "Decimal")
        _invoke(cli_runner, doc_path, "widget", "add", "--for-field", "amount")
        out = tmp_path / "out"
        result = _invoke(cli_runner, doc_path, "generate", "--output", str(out))
        assert result.exit_code == 0, result.output
        assert sorted(p.name for p in out.iterdir()) == ["AmountEditor.tsx", "ControlManifest.Input.xml", "index.ts"]
        component = (out / "AmountEditor.tsx").read_text(encoding="utf-8")
        assert "const [amount, setAmount] = React.useState(props.amount);" in component

    def test_generate_default_output_dir(self, cli_runner: CliRunner, doc_path: Path, tmp_path: Path) -> None:
        _invoke(cli_runner, doc_path, "widget", "add", "Flex")
        result = _invoke(cli_runner, doc_path, "generate")
        assert result.exit_code == 0, result.output
        assert (tmp_path / "generated" / "css" / "layout.css").exists()

    def test_generate_strict_refuses_invalid(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "doc.json"
        path.write_text(json.dumps({"metadata": {"version": "1"}}), encoding="utf-8")
        result = cli_runner.invoke(app, ["generate", "--document", str(path), "--strict"])
        assert result.exit_code == 1
        assert "Validation failed" in result.output
        assert not (tmp_path / "generated").exists()

    def test_generate_prints_warnings(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "doc.json"
        path.write_text(json.dumps({"widgets": [{"id": "x", "type": "Carousel"}]}), encoding="utf-8")
        result = cli_runner.invoke(app, ["generate", "--document", str(path)])
        assert result.exit_code == 0, result.output
        assert "WARNING:" in result.output

    def test_validate_ok(self, cli_runner: CliRunner, doc_path: Path) -> None:
        result = _invoke(cli_runner, doc_path, "validate")
        assert result.exit_code == 0
        assert "OK: document is valid." in result.output

    def test_validate_errors(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "doc.json"
        path.write_text(json.dumps({"fields": [{"name": "class"}]}), encoding="utf-8")
        result = cli_runner.invoke(app, ["validate", "--document", str(path)])
        assert result.exit_code == 1
        assert "ERROR: Property 'class' is a reserved word" in result.output

    def test_missing_document(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(app, ["validate", "--document", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "Document not found" in result.output

    def test_corrupt_document(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "doc.json"
        path.write_text("{", encoding="utf-8")
        result = cli_runner.invoke(app, ["tree", "--document", str(path)])
        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_tree(self, cli_runner: CliRunner, doc_path: Path) -> None:
        _invoke(cli_runner, doc_path, "field", "add", "amount", "--type", "Decimal")
        _invoke(cli_runner, doc_path, "widget", "add", "Stack")
        result = _invoke(cli_runner, doc_path, "tree")
        assert result.exit_code == 0, result.output
        assert "Properties" in result.output
        assert "Widgets" in result.output
        assert "Stack" in result.output

    def test_catalog_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["catalog", "--json", "--category", "layout"])
        assert result.exit_code == 0, result.output
        types = [entry["type"] for entry in json.loads(result.output)]
        assert types == ["Stack", "Flex", "Grid", "Card"]

    def test_catalog_unknown_category(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["catalog", "--category", "toys"])
        assert result.exit_code == 1

    def test_import_manifest(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        manifest = tmp_path / "ControlManifest.Input.xml"
        manifest.write_text(
            '<manifest><control namespace="Contoso" constructor="Rating" version="1.0.0">'
            '<property name="score" of-type="Whole.None" usage="bound"/></control></manifest>',
            encoding="utf-8",
        )
        path = tmp_path / "doc.json"
        result = cli_runner.invoke(app, ["import-manifest", str(manifest), "--document", str(path)])
        assert result.exit_code == 0, result.output
        document = load_document(path)
        assert document.metadata.qualified_name == "Contoso.Rating"
        assert document.field_names == ["score"]

    def test_import_invalid_manifest(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        manifest = tmp_path / "bad.xml"
        manifest.write_text("<manifest>", encoding="utf-8")
        result = cli_runner.invoke(app, ["import-manifest", str(manifest), "--document", str(tmp_path / "d.json")])
        assert result.exit_code == 1
        assert "Invalid XML" in result.output


class TestVersion:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "fluentforge version" in result.output
