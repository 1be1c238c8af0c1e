"""
Names shared by the three control artifacts.

The manifest, view module and host adapter refer to each other by name; all
of them derive those names here so they cannot drift apart.
"""

from ...core.ir import DocumentMetadata, state_key
from ..base.utils import to_identifier

MANIFEST_FILENAME = "ControlManifest.Input.xml"
INDEX_FILENAME = "index.ts"


def control_name(metadata: DocumentMetadata) -> str:
    """Identifier of the generated view (also the manifest constructor)."""
    return to_identifier(metadata.identifier)


def component_filename(name: str) -> str:
    return f"{name}.tsx"


def adapter_class_name(name: str) -> str:
    return f"{name}Control"


def props_interface_name(name: str) -> str:
    return f"{name}Props"


def setter_name(field_name: str) -> str:
    """State setter paired with a bound field, e.g. ``amount`` -> ``setAmount``."""
    return f"set{state_key(field_name)}"
