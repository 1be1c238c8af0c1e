"""
Text helpers for the generators, plus the one file-writing helper the CLI uses.

Everything here is a pure string transform except ``write_file``:

- XML attribute escaping for the manifest
- JavaScript literals and identifiers for the view module and host adapter
"""

import json
import re
from pathlib import Path
from typing import Any

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9_]")


def write_file(path: Path, content: str) -> None:
    """Write ``content`` as UTF-8, creating missing parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def escape_xml(value: str) -> str:
    """Escape ``& < > " '`` for use in XML text and attribute values."""
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def to_identifier(name: str, fallback: str = "MyControl") -> str:
    """
    Turn ``name`` into a safe TypeScript identifier.

    Invalid characters become underscores and a leading digit gets an
    underscore prefix.
    """
    cleaned = _UNSAFE_CHARS_RE.sub("_", name.strip())
    if not cleaned:
        return fallback
    if cleaned[0].isdigit():
        cleaned = "_" + cleaned
    return cleaned


def js_string(value: str) -> str:
    """Render a single-quoted JavaScript string literal."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )
    return f"'{escaped}'"


def js_key(key: str) -> str:
    """Render an object key, quoting it when it is not a plain identifier."""
    return key if _IDENTIFIER_RE.match(key) else js_string(key)


def js_literal(value: Any) -> str:
    """
    Render a Python value as a JavaScript literal.

    Strings are single-quoted, dicts become object literals with their keys
    sorted, so equal dicts always render the same, and other values fall back to JSON.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return js_string(value)
    if isinstance(value, int | float):
        return json.dumps(value)
    if isinstance(value, dict):
        if not value:
            return "{}"
        items = sorted(value.items(), key=lambda kv: str(kv[0]))
        body = ", ".join(f"{js_key(str(k))}: {js_literal(v)}" for k, v in items)
        return f"{{ {body} }}"
    if isinstance(value, list | tuple):
        return "[" + ", ".join(js_literal(v) for v in value) + "]"
    return json.dumps(value, sort_keys=True, default=str)
