"""
PCF virtual React control stack.

Turns a designer document into the files of a Power Apps Component Framework
control:

- ControlManifest.Input.xml (metadata document)
- <Identifier>.tsx (view module)
- index.ts (host adapter)
- auxiliary stylesheets, when layout widgets need them

Generation is pure and deterministic: equal documents give byte-identical
output, and problems in the document (unknown widget types, bindings to
missing fields) degrade to warnings instead of aborting.
"""

import logging
from dataclasses import dataclass, field

from ...core import ir
from ...core.config import GenerationConfig
from ...core.errors import GenerationError
from ..base import CompositeGenerator, Generator
from .generators import (
    HostAdapterGenerator,
    ManifestGenerator,
    StylesheetGenerator,
    ViewModuleGenerator,
)
from .naming import INDEX_FILENAME, MANIFEST_FILENAME, component_filename, control_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedCode:
    """The generated control, as text."""

    identifier: str
    manifest: str
    component: str
    index: str
    stylesheets: dict[str, str] = field(default_factory=dict)
    warnings: tuple[str, ...] = ()

    @property
    def manifest_filename(self) -> str:
        return MANIFEST_FILENAME

    @property
    def component_filename(self) -> str:
        return component_filename(self.identifier)

    @property
    def index_filename(self) -> str:
        return INDEX_FILENAME

    def files(self) -> dict[str, str]:
        """All generated files keyed by relative path, in a fixed order."""
        files = {
            self.manifest_filename: self.manifest,
            self.component_filename: self.component,
            self.index_filename: self.index,
        }
        for path in sorted(self.stylesheets):
            files[path] = self.stylesheets[path]
        return files


class PcfControlGenerator(CompositeGenerator):
    """Runs every PCF generator over one document."""

    def get_generators(self) -> list[Generator]:
        return [
            ManifestGenerator(self.document, self.config),
            ViewModuleGenerator(self.document, self.config),
            HostAdapterGenerator(self.document, self.config),
            StylesheetGenerator(self.document, self.config),
        ]


def generate_control(document: ir.Document, config: GenerationConfig | None = None) -> GeneratedCode:
    """
    Generate the control artifacts for ``document``.

    Args:
        document: Designer document
        config: Target platform settings (defaults when omitted)

    Returns:
        GeneratedCode with the three artifacts, stylesheets and warnings

    Raises:
        GenerationError: if a generator could not produce its artifact
    """
    result = PcfControlGenerator(document, config).generate()
    if not result.success:
        raise GenerationError("; ".join(result.errors))
    name = control_name(document.metadata)
    files = dict(result.files)

    manifest = files.pop(MANIFEST_FILENAME)
    component = files.pop(component_filename(name))
    index = files.pop(INDEX_FILENAME)

    for warning in result.warnings:
        logger.info(f"Generation warning: {warning}")

    return GeneratedCode(
        identifier=name,
        manifest=manifest,
        component=component,
        index=index,
        stylesheets=files,
        warnings=tuple(result.warnings),
    )


__all__ = ["GeneratedCode", "PcfControlGenerator", "generate_control"]
