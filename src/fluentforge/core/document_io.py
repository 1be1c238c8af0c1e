"""
JSON persistence for designer documents.

Documents are stored with the widget tree in nested form:

    {
      "metadata": {"namespace": "Contoso", "identifier": "AmountEditor", ...},
      "fields": [{"name": "amount", "type": "Decimal", "usage": "bound"}],
      "widgets": [
        {"id": "w-1a2b3c4d5e6f", "type": "Stack", "props": {...}, "children": [...]}
      ]
    }

Widget ids are kept on load. Unknown widget and field types are kept as
well; ``validate_document`` reports them.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .errors import DocumentError, ErrorContext, make_document_error
from .ir import DeclaredField, Document, DocumentMetadata, WidgetInstance, WidgetTree

logger = logging.getLogger(__name__)


def document_to_dict(document: Document) -> dict[str, Any]:
    """Serialize a document to plain JSON-compatible data."""
    return {
        "metadata": document.metadata.model_dump(mode="json"),
        "fields": [declared.model_dump(mode="json", exclude_none=True) for declared in document.fields],
        "widgets": [
            instance.model_dump(mode="json", exclude_none=True) for instance in document.tree.to_nested()
        ],
    }


def document_from_dict(data: Any, source: Path | None = None) -> Document:
    """
    Build a document from data produced by ``document_to_dict``.

    Raises:
        DocumentError: if the structure or a value is invalid
    """
    file = source or Path("<memory>")
    if not isinstance(data, dict):
        raise make_document_error("Document must be a JSON object", file)

    try:
        metadata = DocumentMetadata.model_validate(data.get("metadata", {}))
        fields = tuple(DeclaredField.model_validate(item) for item in data.get("fields", []))
        instances = [WidgetInstance.model_validate(item) for item in data.get("widgets", [])]
    except ValidationError as e:
        first = e.errors()[0]
        detail = ".".join(str(part) for part in first["loc"]) or None
        raise DocumentError(
            f"Invalid document: {first['msg']}",
            ErrorContext(file=file, detail=detail),
        ) from e
    except TypeError as e:
        raise make_document_error(f"Invalid document: {e}", file) from e

    return Document(metadata=metadata, fields=fields, tree=WidgetTree.from_nested(instances))


def load_document(path: Path) -> Document:
    """
    Load a designer document from a JSON file.

    Raises:
        DocumentError: if the file cannot be read or is not a valid document
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise make_document_error(f"Cannot read document: {e.strerror or e}", path) from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise make_document_error(f"Invalid JSON: {e.msg}", path, line=e.lineno, column=e.colno) from e

    document = document_from_dict(data, source=path)
    logger.debug(f"Loaded {path}: {len(document.fields)} fields, {len(document.tree)} widgets")
    return document


def dump_document(document: Document) -> str:
    """Render a document as stable, indented JSON text."""
    return json.dumps(document_to_dict(document), indent=2, ensure_ascii=False) + "\n"


def save_document(document: Document, path: Path) -> None:
    """
    Write a document to ``path`` as JSON, creating parent directories.

    Raises:
        DocumentError: if the file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_document(document), encoding="utf-8")
    except OSError as e:
        raise make_document_error(f"Cannot write document: {e.strerror or e}", path) from e
    logger.debug(f"Saved {path}")
