"""Tests for importing an existing ControlManifest.Input.xml."""

from pathlib import Path

import pytest

from fluentforge.core.errors import ManifestImportError
from fluentforge.core.ir import Document, FieldUsage
from fluentforge.core.manifest_import import import_manifest, parse_default, parse_manifest
from fluentforge.stacks.pcf import generate_control

MANIFEST = """<?xml version="1.0" encoding="utf-8" ?>
<manifest>
  <control namespace="Contoso" constructor="Rating" version="2.1.0"
           display-name-key="Star Rating" description-key="Rates things" control-type="virtual">
    <property name="score" display-name-key="Score" of-type="Whole.None" usage="bound" required="true" default-value="3" />
    <property name="label" of-type="SingleLine.Text" usage="input" />
    <property name="enabled" of-type="TwoOptions" usage="input" default-value="false" />
    <property name="anything" of-type-group="numbers" usage="bound" />
    <property name="weird" of-type="Decimal" usage="sideways" />
    <property display-name-key="Nameless" of-type="Decimal" />
    <property name="score" of-type="Decimal" />
    <resources>
      <code path="index.ts" order="1"/>
      <css path="css/rating.css" order="1"/>
      <platform-library name="React" version="16.14.0"/>
      <platform-library name="Fluent" version="9.46.2"/>
    </resources>
  </control>
</manifest>
"""


class TestParseManifest:
    def test_metadata(self) -> None:
        metadata = parse_manifest(MANIFEST).metadata
        assert metadata.namespace == "Contoso"
        assert metadata.identifier == "Rating"
        assert metadata.version == "2.1.0"
        assert metadata.display_name == "Star Rating"
        assert metadata.description == "Rates things"

    def test_fields(self) -> None:
        fields = {f.name: f for f in parse_manifest(MANIFEST).fields}
        assert list(fields) == ["score", "label", "enabled", "anything", "weird"]
        assert fields["score"].type == "Whole.None"
        assert fields["score"].required
        assert fields["score"].default_value == 3
        assert fields["score"].display_name == "Score"
        assert fields["label"].usage is FieldUsage.INPUT
        assert fields["enabled"].default_value is False

    def test_type_group_falls_back_to_text(self) -> None:
        imported = parse_manifest(MANIFEST)
        anything = next(f for f in imported.fields if f.name == "anything")
        assert anything.type == "SingleLine.Text"
        assert any("type group" in warning for warning in imported.warnings)

    def test_bad_usage_becomes_bound(self) -> None:
        imported = parse_manifest(MANIFEST)
        weird = next(f for f in imported.fields if f.name == "weird")
        assert weird.usage is FieldUsage.BOUND
        assert any("unknown usage 'sideways'" in warning for warning in imported.warnings)

    def test_nameless_and_duplicate_skipped(self) -> None:
        warnings = parse_manifest(MANIFEST).warnings
        assert "Property without a name skipped" in warnings
        assert "Duplicate property 'score' skipped" in warnings

    def test_resources(self) -> None:
        imported = parse_manifest(MANIFEST)
        assert imported.control_type == "virtual"
        assert imported.platform_libraries == {"React": "16.14.0", "Fluent": "9.46.2"}
        assert imported.stylesheets == ["css/rating.css"]

    def test_namespaced_xml(self) -> None:
        text = (
            '<manifest xmlns="urn:example"><control namespace="N" constructor="C" version="1.0.0">'
            '<property name="x" of-type="Decimal" usage="bound"/></control></manifest>'
        )
        imported = parse_manifest(text)
        assert imported.metadata.identifier == "C"
        assert [f.name for f in imported.fields] == ["x"]

    def test_minimal_control_defaults(self) -> None:
        imported = parse_manifest('<manifest><control constructor="Bare"/></manifest>')
        assert imported.metadata.display_name == "Bare"
        assert imported.metadata.version == "1.0.0"
        assert imported.control_type == "standard"
        assert imported.fields == []

    def test_invalid_xml(self) -> None:
        with pytest.raises(ManifestImportError) as exc_info:
            parse_manifest("<manifest><control></manifest>", source=Path("bad.xml"))
        assert exc_info.value.context is not None
        assert exc_info.value.context.line == 1
        assert "bad.xml:1:" in str(exc_info.value)

    def test_missing_control(self) -> None:
        with pytest.raises(ManifestImportError, match="No <control> element"):
            parse_manifest("<manifest />")

    def test_to_document_has_empty_tree(self) -> None:
        document = parse_manifest(MANIFEST).to_document()
        assert isinstance(document, Document)
        assert len(document.fields) == 5
        assert len(document.tree) == 0


class TestRegeneration:
    def test_generated_manifest_imports_back(self, amount_document: Document) -> None:
        imported = parse_manifest(generate_control(amount_document).manifest)
        original = amount_document.metadata
        assert imported.metadata.qualified_name == original.qualified_name
        assert imported.metadata.version == original.version
        # An empty description is written as the display name
        assert imported.metadata.description == original.display_name
        assert tuple(imported.fields) == amount_document.fields
        assert imported.warnings == []


class TestParseDefault:
    @pytest.mark.parametrize(
        ("raw", "field_type", "expected"),
        [
            ("true", "TwoOptions", True),
            ("0", "TwoOptions", False),
            ("12", "Whole.None", 12),
            ("2", "OptionSet", 2),
            ("1.5", "Decimal", 1.5),
            ("abc", "Decimal", "abc"),
            ("hello", "SingleLine.Text", "hello"),
        ],
    )
    def test_conversion(self, raw: str, field_type: str, expected: object) -> None:
        assert parse_default(raw, field_type) == expected


class TestImportManifest:
    def test_reads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "ControlManifest.Input.xml"
        path.write_text(MANIFEST, encoding="utf-8")
        assert import_manifest(path).metadata.identifier == "Rating"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestImportError, match="Cannot read manifest"):
            import_manifest(tmp_path / "missing.xml")
