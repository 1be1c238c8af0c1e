"""Shared pytest fixtures for fluentforge tests."""

from pathlib import Path

import pytest

from fluentforge.core import ir
from fluentforge.core.document_io import save_document
from fluentforge.core.mutations import create_widget, insert_widget
from fluentforge.core.session import DesignerSession


@pytest.fixture
def amount_field() -> ir.DeclaredField:
    """Return a bound decimal field."""
    return ir.DeclaredField(
        name="amount",
        display_name="Amount",
        type=ir.FieldType.DECIMAL,
        usage=ir.FieldUsage.BOUND,
    )


@pytest.fixture
def metadata() -> ir.DocumentMetadata:
    return ir.DocumentMetadata(
        namespace="Contoso",
        identifier="AmountEditor",
        display_name="Amount Editor",
        version="1.0.0",
    )


@pytest.fixture
def empty_document(metadata: ir.DocumentMetadata) -> ir.Document:
    return ir.Document(metadata=metadata)


@pytest.fixture
def amount_document(metadata: ir.DocumentMetadata, amount_field: ir.DeclaredField) -> ir.Document:
    """One decimal field and one root Input bound to it on ``value``."""
    document = ir.Document(metadata=metadata, fields=(amount_field,))
    widget = create_widget("Input")
    widget.bindings = [ir.Binding(target="value", field="amount")]
    result = insert_widget(document, widget)
    assert result.document is not None
    return result.document


@pytest.fixture
def session(metadata: ir.DocumentMetadata) -> DesignerSession:
    return DesignerSession(ir.Document(metadata=metadata))


@pytest.fixture
def document_file(tmp_path: Path, amount_document: ir.Document) -> Path:
    """The amount document saved as JSON in a temporary directory."""
    path = tmp_path / "fluentforge.json"
    save_document(amount_document, path)
    return path
