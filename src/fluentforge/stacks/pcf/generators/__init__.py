"""
Generators for PCF controls.

Each generator creates specific artifacts:
- ManifestGenerator: ControlManifest.Input.xml
- ViewModuleGenerator: the React view module (<Identifier>.tsx)
- HostAdapterGenerator: the framework adapter (index.ts)
- StylesheetGenerator: auxiliary CSS required by layout widgets
"""

from .adapter import HostAdapterGenerator
from .manifest import ManifestGenerator
from .stylesheet import StylesheetGenerator
from .view import ViewModuleGenerator

__all__ = [
    "ManifestGenerator",
    "ViewModuleGenerator",
    "HostAdapterGenerator",
    "StylesheetGenerator",
]
