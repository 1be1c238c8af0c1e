"""
Generator building blocks shared by every output stack.

A stack is a tree of generators. Leaf generators each own one artifact (the
manifest, the view module, the host adapter, ...) and a composite runs its
children in order and folds their output together.

Generators are pure: they return file contents as strings in a
``GeneratorResult`` and never write to disk. Writing is left to the caller
(the CLI, or a host embedding the designer).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from ...core import ir
from ...core.config import GenerationConfig

logger = logging.getLogger(__name__)


@dataclass
class GeneratorResult:
    """
    Output of one generator run.

    Attributes:
        files: Relative path -> file text
        artifacts: Values later generators may read (e.g. the stylesheet list)
        errors: Problems that make the output unusable; a composite stops on these
        warnings: Problems that were worked around, deduplicated, in first-seen order
    """

    files: dict[str, str] = field(default_factory=dict)
    artifacts: dict[str, Any] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def add_file(self, path: str, content: str) -> None:
        if path in self.files:
            logger.debug(f"Replacing generated file {path}")
        self.files[path] = content

    def add_artifact(self, key: str, value: Any) -> None:
        self.artifacts[key] = value

    def add_error(self, error: str) -> None:
        self.errors.append(error)

    def add_warning(self, warning: str) -> None:
        if warning not in self.warnings:
            self.warnings.append(warning)

    def merge(self, other: GeneratorResult) -> None:
        """Fold ``other`` into this result; later files and artifacts win."""
        self.files.update(other.files)
        self.artifacts.update(other.artifacts)
        self.errors.extend(other.errors)
        for warning in other.warnings:
            self.add_warning(warning)


class Generator(ABC):
    """
    One artifact producer.

    Subclasses implement ``generate`` and read the designer document and the
    target settings from ``self.document`` and ``self.config``. Inside a
    composite, ``self.artifacts`` holds what earlier siblings shared. Equal
    inputs must give byte-identical files.
    """

    def __init__(self, document: ir.Document, config: GenerationConfig | None = None):
        self.document = document
        self.config = config or GenerationConfig()
        self.artifacts: dict[str, Any] = {}

    @abstractmethod
    def generate(self) -> GeneratorResult:
        """Produce this generator's files, artifacts and diagnostics."""


class CompositeGenerator(Generator):
    """
    Runs child generators in order and merges their results.

    Each child sees the artifacts of the children before it. A child that
    reports errors ends the run; the children after it are skipped.

    Example:
        class ControlGenerator(CompositeGenerator):
            def get_generators(self) -> list[Generator]:
                return [ManifestGenerator(self.document, self.config)]
    """

    @abstractmethod
    def get_generators(self) -> list[Generator]:
        """Children to run, in order."""

    def generate(self) -> GeneratorResult:
        combined = GeneratorResult()
        for child in self.get_generators():
            child.artifacts = dict(combined.artifacts)
            result = child.generate()
            logger.debug(
                f"{type(child).__name__}: {len(result.files)} file(s), {len(result.warnings)} warning(s)"
            )
            combined.merge(result)
            if not result.success:
                logger.debug(f"{type(child).__name__} failed; skipping remaining generators")
                break
        return combined
