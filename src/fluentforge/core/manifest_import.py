"""
Import of an existing ControlManifest.Input.xml.

Control attributes become document metadata and each ``<property>`` becomes
a declared field. The widget tree starts empty; it is not part of the
manifest.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ErrorContext, ManifestImportError
from .ir import DeclaredField, Document, DocumentMetadata, FieldType, FieldUsage, is_identifier

logger = logging.getLogger(__name__)

_NUMERIC_TYPES = {
    FieldType.WHOLE_NONE.value: int,
    FieldType.OPTION_SET.value: int,
    FieldType.ENUM.value: int,
    FieldType.DECIMAL.value: float,
    FieldType.CURRENCY.value: float,
    FieldType.FP.value: float,
}


@dataclass
class ImportedManifest:
    """Result of reading a manifest."""

    metadata: DocumentMetadata
    fields: list[DeclaredField]
    control_type: str = "standard"
    platform_libraries: dict[str, str] = field(default_factory=dict)
    stylesheets: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_document(self) -> Document:
        return Document(metadata=self.metadata, fields=tuple(self.fields))


def _local(tag: str) -> str:
    """Tag name without an XML namespace."""
    return tag.rsplit("}", 1)[-1]


def _find_all(element: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in element.iter() if _local(child.tag) == name]


def parse_default(raw: str, field_type: str) -> Any:
    """Convert a ``default-value`` attribute to the field type's value shape."""
    if field_type == FieldType.TWO_OPTIONS.value:
        lowered = raw.strip().lower()
        if lowered in ("true", "1", "yes"):
            return True
        if lowered in ("false", "0", "no"):
            return False
        return raw
    converter = _NUMERIC_TYPES.get(field_type)
    if converter is not None:
        try:
            return converter(raw.strip())
        except ValueError:
            return raw
    return raw


def parse_manifest(text: str, source: Path | None = None) -> ImportedManifest:
    """
    Parse manifest XML.

    Args:
        text: Contents of ControlManifest.Input.xml
        source: Path used in error messages

    Returns:
        ImportedManifest with metadata, fields and warnings

    Raises:
        ManifestImportError: if the XML is malformed or has no ``<control>``
    """
    file = source or Path("<memory>")
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        line, column = e.position
        raise ManifestImportError(
            f"Invalid XML: {e}",
            ErrorContext(file=file, line=line, column=column + 1),
        ) from e

    controls = [root] if _local(root.tag) == "control" else _find_all(root, "control")
    if not controls:
        raise ManifestImportError("No <control> element found in manifest", ErrorContext(file=file))
    control = controls[0]

    defaults = DocumentMetadata()
    metadata = DocumentMetadata(
        namespace=control.get("namespace") or defaults.namespace,
        identifier=control.get("constructor") or defaults.identifier,
        display_name=control.get("display-name-key") or control.get("constructor") or defaults.display_name,
        description=control.get("description-key") or "",
        version=control.get("version") or "1.0.0",
    )

    imported = ImportedManifest(
        metadata=metadata,
        fields=[],
        control_type=control.get("control-type") or "standard",
    )

    seen: set[str] = set()
    for element in _find_all(control, "property"):
        declared = _read_property(element, imported.warnings)
        if declared is None:
            continue
        if declared.name in seen:
            imported.warnings.append(f"Duplicate property '{declared.name}' skipped")
            continue
        seen.add(declared.name)
        imported.fields.append(declared)

    for element in _find_all(control, "platform-library"):
        name = element.get("name")
        if name:
            imported.platform_libraries[name] = element.get("version") or ""

    for element in _find_all(control, "css"):
        path = element.get("path")
        if path:
            imported.stylesheets.append(path)

    for warning in imported.warnings:
        logger.warning(f"{file}: {warning}")
    logger.debug(f"Imported {len(imported.fields)} properties from {file}")
    return imported


def _read_property(element: ET.Element, warnings: list[str]) -> DeclaredField | None:
    name = (element.get("name") or "").strip()
    if not name:
        warnings.append("Property without a name skipped")
        return None
    if not is_identifier(name):
        warnings.append(f"Property '{name}' is not a valid identifier and was skipped")
        return None

    field_type = element.get("of-type")
    if not field_type:
        # Type groups are not modelled; fall back to plain text
        field_type = FieldType.SINGLE_LINE_TEXT.value
        if element.get("of-type-group"):
            warnings.append(f"Property '{name}' uses a type group; imported as {field_type}")

    usage_raw = element.get("usage") or FieldUsage.BOUND.value
    try:
        usage = FieldUsage(usage_raw)
    except ValueError:
        warnings.append(f"Property '{name}' has unknown usage '{usage_raw}'; imported as bound")
        usage = FieldUsage.BOUND

    raw_default = element.get("default-value")
    return DeclaredField(
        name=name,
        display_name=element.get("display-name-key") or "",
        description=element.get("description-key") or None,
        type=field_type,
        usage=usage,
        required=element.get("required") == "true",
        default_value=parse_default(raw_default, field_type) if raw_default else None,
    )


def import_manifest(path: Path) -> ImportedManifest:
    """
    Read and parse a manifest file.

    Raises:
        ManifestImportError: if the file cannot be read or parsed
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestImportError(f"Cannot read manifest: {e.strerror or e}", ErrorContext(file=path)) from e
    return parse_manifest(text, source=path)
