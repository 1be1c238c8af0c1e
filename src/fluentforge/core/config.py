"""
Project configuration (``fluentforge.toml``).

Example:

    [document]
    namespace = "Contoso"
    identifier = "AmountEditor"
    version = "1.0.0"

    [history]
    capacity = 100

    [generation]
    react_version = "18.2.0"
    fluent_version = "9"
    control_type = "virtual"

    [output]
    directory = "generated"

Every section and key is optional; a missing file yields the defaults.
"""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigError, ErrorContext
from .ir import DocumentMetadata

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "fluentforge.toml"

CONTROL_TYPES = ("virtual", "standard")


@dataclass
class DocumentDefaults:
    """Metadata used for documents created with ``fluentforge new``."""

    namespace: str = "PCFControls"
    identifier: str = "MyControl"
    display_name: str = "My Control"
    description: str = ""
    version: str = "0.0.1"

    def to_metadata(self) -> DocumentMetadata:
        return DocumentMetadata(
            namespace=self.namespace,
            identifier=self.identifier,
            display_name=self.display_name,
            description=self.description,
            version=self.version,
        )


@dataclass
class HistoryConfig:
    capacity: int = 50


@dataclass
class GenerationConfig:
    """Target platform settings for generated code."""

    react_version: str = "18.2.0"
    fluent_version: str = "9"
    control_type: str = "virtual"  # "virtual" | "standard"


@dataclass
class OutputConfig:
    directory: str = "generated"


@dataclass
class DesignerConfig:
    document: DocumentDefaults = field(default_factory=DocumentDefaults)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def load_config(path: Path) -> DesignerConfig:
    """
    Load configuration from ``path``.

    Returns:
        DesignerConfig, all defaults when the file does not exist

    Raises:
        ConfigError: if the file is not valid TOML or holds invalid values
    """
    if not path.exists():
        logger.debug(f"No config at {path}; using defaults")
        return DesignerConfig()

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML: {e}", ErrorContext(file=path)) from e

    document_data = data.get("document", {})
    history_data = data.get("history", {})
    generation_data = data.get("generation", {})
    output_data = data.get("output", {})

    document = DocumentDefaults(
        namespace=document_data.get("namespace", "PCFControls"),
        identifier=document_data.get("identifier", "MyControl"),
        display_name=document_data.get("display_name", "My Control"),
        description=document_data.get("description", ""),
        version=document_data.get("version", "0.0.1"),
    )

    capacity = history_data.get("capacity", 50)
    if not isinstance(capacity, int) or capacity < 1:
        raise ConfigError(
            f"history.capacity must be a positive integer, got {capacity!r}",
            ErrorContext(file=path, detail="history.capacity"),
        )

    control_type = generation_data.get("control_type", "virtual")
    if control_type not in CONTROL_TYPES:
        raise ConfigError(
            f"generation.control_type must be one of {', '.join(CONTROL_TYPES)}, got {control_type!r}",
            ErrorContext(file=path, detail="generation.control_type"),
        )

    generation = GenerationConfig(
        react_version=str(generation_data.get("react_version", "18.2.0")),
        fluent_version=str(generation_data.get("fluent_version", "9")),
        control_type=control_type,
    )

    return DesignerConfig(
        document=document,
        history=HistoryConfig(capacity=capacity),
        generation=generation,
        output=OutputConfig(directory=output_data.get("directory", "generated")),
    )


def find_config(start: Path) -> Path:
    """Return the nearest ``fluentforge.toml`` at or above ``start`` (or the would-be path in ``start``)."""
    current = start.resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return current / CONFIG_FILENAME
