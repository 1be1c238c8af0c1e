"""
Base classes and helpers shared by code-generation stacks.
"""

from .generator import CompositeGenerator, Generator, GeneratorResult
from .utils import (
    escape_xml,
    js_key,
    js_literal,
    js_string,
    to_identifier,
    write_file,
)

__all__ = [
    "Generator",
    "CompositeGenerator",
    "GeneratorResult",
    "escape_xml",
    "js_key",
    "js_literal",
    "js_string",
    "to_identifier",
    "write_file",
]
