"""
Document-level types for the fluentforge IR.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field

from .fields import DeclaredField
from .tree import WidgetTree

VERSION_RE = re.compile(r"^\d+\.\d+\.\d+$")


class DocumentMetadata(BaseModel):
    """
    Identity of the generated control.

    Attributes:
        namespace: Control namespace in the manifest
        identifier: Control constructor name; also names the view module
        display_name: Human-readable control name
        description: Control description
        version: ``X.Y.Z`` version string
    """

    namespace: str = "PCFControls"
    identifier: str = "MyControl"
    display_name: str = "My Control"
    description: str = ""
    version: str = "0.0.1"

    model_config = ConfigDict(frozen=True)

    @property
    def qualified_name(self) -> str:
        """Fully-qualified control name, ``<namespace>.<identifier>``."""
        return f"{self.namespace}.{self.identifier}"

    @property
    def has_valid_version(self) -> bool:
        return bool(VERSION_RE.match(self.version))


class Document(BaseModel):
    """
    The designer document: metadata, declared fields and the widget tree.

    Selection state is not part of the document; see
    ``fluentforge.core.session.Selection``.
    """

    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)
    fields: tuple[DeclaredField, ...] = ()
    tree: WidgetTree = Field(default_factory=WidgetTree)

    model_config = ConfigDict(frozen=True)

    def field(self, name: str) -> DeclaredField | None:
        """Look up a declared field by name."""
        for declared in self.fields:
            if declared.name == name:
                return declared
        return None

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]
