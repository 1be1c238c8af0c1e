"""
Manifest generator for PCF controls.

Generates ControlManifest.Input.xml, the metadata document the packaging
tool reads to learn the control's properties and resources.
"""

import json
import logging
from typing import Any

from ....core import catalog, ir
from ...base import Generator, GeneratorResult
from ...base.utils import escape_xml
from ..naming import INDEX_FILENAME, MANIFEST_FILENAME, control_name

logger = logging.getLogger(__name__)


def collect_stylesheets(tree: ir.WidgetTree) -> list[str]:
    """Distinct auxiliary stylesheets needed by the widgets in ``tree``, sorted."""
    stylesheets: set[str] = set()
    for widget_type in tree.widget_types():
        if not catalog.is_known_widget(widget_type):
            continue
        stylesheet = catalog.definition_of(widget_type).stylesheet
        if stylesheet:
            stylesheets.add(stylesheet)
    return sorted(stylesheets)


def format_default(value: Any) -> str:
    """Render a field default as manifest attribute text."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, int | float):
        return json.dumps(value)
    return json.dumps(value, sort_keys=True, default=str)


class ManifestGenerator(Generator):
    """
    Generate the control manifest.

    Creates:
    - ControlManifest.Input.xml

    Shares the sorted stylesheet list as the ``stylesheets`` artifact.
    """

    def generate(self) -> GeneratorResult:
        result = GeneratorResult()

        metadata = self.document.metadata
        name = control_name(metadata)
        if name != metadata.identifier:
            result.add_warning(f"Identifier '{metadata.identifier}' is not a valid name; using '{name}'")

        for declared in self.document.fields:
            if not declared.is_known_type:
                result.add_warning(f"Field '{declared.name}' has unknown type '{declared.type}'")

        stylesheets = collect_stylesheets(self.document.tree)
        result.add_artifact("stylesheets", stylesheets)
        result.add_file(MANIFEST_FILENAME, self._build_manifest(name, stylesheets))

        logger.debug(f"Manifest generated with {len(self.document.fields)} properties")
        return result

    def _build_manifest(self, name: str, stylesheets: list[str]) -> str:
        metadata = self.document.metadata
        description = metadata.description or metadata.display_name

        lines = [
            '<?xml version="1.0" encoding="utf-8" ?>',
            "<manifest>",
            f'  <control namespace="{escape_xml(metadata.namespace)}"',
            f'           constructor="{escape_xml(name)}"',
            f'           version="{escape_xml(metadata.version)}"',
            f'           display-name-key="{escape_xml(metadata.display_name)}"',
            f'           description-key="{escape_xml(description)}"',
            f'           control-type="{escape_xml(self.config.control_type)}">',
            "",
            "    <!-- Property definitions -->",
        ]

        if self.document.fields:
            lines.extend(self._build_property(declared) for declared in self.document.fields)
        else:
            lines.append("    <!-- No properties defined -->")

        lines.extend(["", "    <resources>", f'      <code path="{INDEX_FILENAME}" order="1"/>'])
        for stylesheet in stylesheets:
            lines.append(f'      <css path="{escape_xml(stylesheet)}" order="1"/>')
        if self.config.control_type == "virtual":
            lines.append(f'      <platform-library name="React" version="{escape_xml(self.config.react_version)}"/>')
            lines.append(f'      <platform-library name="Fluent" version="{escape_xml(self.config.fluent_version)}"/>')
        lines.extend(
            [
                "    </resources>",
                "  </control>",
                "</manifest>",
                "",
            ]
        )
        return "\n".join(lines)

    def _build_property(self, declared: ir.DeclaredField) -> str:
        attrs = [
            f'name="{escape_xml(declared.name)}"',
            f'display-name-key="{escape_xml(declared.label)}"',
        ]
        if declared.description:
            attrs.append(f'description-key="{escape_xml(declared.description)}"')
        attrs.extend(
            [
                f'of-type="{escape_xml(declared.type)}"',
                f'usage="{declared.usage.value}"',
                f'required="{"true" if declared.required else "false"}"',
            ]
        )
        if declared.default_value is not None:
            attrs.append(f'default-value="{escape_xml(format_default(declared.default_value))}"')
        return f"    <property {' '.join(attrs)} />"
