"""
Semantic validation for designer documents.

Mutations keep a live document consistent, but documents loaded from disk
or imported from a manifest can still hold problems: unknown types,
dangling bindings, names that would not compile. These checks find them
without changing anything.

Errors make the generated control unusable; warnings flag output that
degrades (skipped widgets, fallback types).
"""

from . import catalog, resolver
from .ir import Document, is_identifier, state_key

# =============================================================================
# Validation Constants
# =============================================================================

# Names that cannot be used as field names in the generated TypeScript
TS_RESERVED_WORDS = frozenset(
    {
        "break",
        "case",
        "catch",
        "class",
        "const",
        "continue",
        "debugger",
        "default",
        "delete",
        "do",
        "else",
        "enum",
        "export",
        "extends",
        "false",
        "finally",
        "for",
        "function",
        "if",
        "import",
        "in",
        "instanceof",
        "new",
        "null",
        "return",
        "super",
        "switch",
        "this",
        "throw",
        "true",
        "try",
        "typeof",
        "var",
        "void",
        "while",
        "with",
        "let",
        "static",
        "yield",
        "await",
    }
)

# Names the generated view module already uses
GENERATED_NAMES = frozenset({"props", "onChange", "React"})


def validate_metadata(document: Document) -> tuple[list[str], list[str]]:
    """
    Validate control identity.

    Checks:
    - Namespace and identifier are present and identifier-safe
    - Version is ``X.Y.Z``
    - Display name is present

    Returns:
        Tuple of (errors, warnings)
    """
    errors: list[str] = []
    warnings: list[str] = []
    metadata = document.metadata

    if not metadata.namespace:
        errors.append("Namespace is required")
    elif not is_identifier(metadata.namespace):
        errors.append(
            f"Namespace '{metadata.namespace}' must start with a letter and contain "
            f"only letters, digits and underscores"
        )

    if not metadata.identifier:
        errors.append("Identifier is required")
    elif not is_identifier(metadata.identifier):
        errors.append(
            f"Identifier '{metadata.identifier}' must start with a letter and contain "
            f"only letters, digits and underscores"
        )

    if not metadata.has_valid_version:
        errors.append(f"Version '{metadata.version}' must be in format X.Y.Z (e.g., 1.0.0)")

    if not metadata.display_name:
        warnings.append("Display name is empty")

    return errors, warnings


def validate_fields(document: Document) -> tuple[list[str], list[str]]:
    """
    Validate declared fields.

    Checks:
    - Names are identifier-safe, unique, and not reserved
    - No two names map to the same state setter
    - Types are known

    Returns:
        Tuple of (errors, warnings)
    """
    errors: list[str] = []
    warnings: list[str] = []

    names = [f.name for f in document.fields]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        errors.append(f"Duplicate property names: {', '.join(duplicates)}")

    by_key: dict[str, list[str]] = {}
    for name in dict.fromkeys(names):
        by_key.setdefault(state_key(name), []).append(name)
    for key, group in by_key.items():
        if len(group) > 1:
            errors.append(f"Properties {', '.join(group)} would all generate set{key}")

    for declared in document.fields:
        if not is_identifier(declared.name):
            errors.append(f"Property '{declared.name}' is not a valid identifier")
        elif declared.name in TS_RESERVED_WORDS:
            errors.append(f"Property '{declared.name}' is a reserved word")
        elif declared.name in GENERATED_NAMES:
            errors.append(f"Property '{declared.name}' clashes with a name used by the generated view")

        if not declared.is_known_type:
            warnings.append(
                f"Property '{declared.name}' has unknown type '{declared.type}'; "
                f"it will be generated as '{resolver.ts_type(declared.type)}'"
            )

    return errors, warnings


def validate_tree(document: Document) -> tuple[list[str], list[str]]:
    """
    Validate the widget tree.

    Checks:
    - Every referenced node exists and is referenced once
    - Widget types are in the catalog
    - Leaf widgets have no children
    - Bindings target bindable props and declared, compatible fields

    Returns:
        Tuple of (errors, warnings)
    """
    errors: list[str] = []
    warnings: list[str] = []
    tree = document.tree

    referenced = list(tree.roots)
    for node in tree.nodes.values():
        referenced.extend(node.children or ())
    seen: set[str] = set()
    for node_id in referenced:
        if node_id not in tree.nodes:
            errors.append(f"Widget id '{node_id}' is referenced but not defined")
        elif node_id in seen:
            errors.append(f"Widget id '{node_id}' appears more than once in the tree")
        seen.add(node_id)

    for node in tree.nodes.values():
        if not catalog.is_known_widget(node.type):
            warnings.append(f"Widget {node.id} has unknown type '{node.type}' and will be skipped")
            continue

        definition = catalog.definition_of(node.type)
        if node.children and not definition.supports_children:
            errors.append(f"Widget {node.id} ({node.type}) cannot contain children")

        for problem in catalog.validate_props(node.type, node.props):
            warnings.append(f"Widget {node.id}: {problem}")

        targets = [b.target for b in node.bindings]
        for target in sorted({t for t in targets if targets.count(t) > 1}):
            errors.append(f"Widget {node.id} binds '{target}' more than once")

        for binding in node.bindings:
            if not definition.is_bindable(binding.target):
                errors.append(f"Widget {node.id} ({node.type}) cannot bind property '{binding.target}'")
                continue
            declared = document.field(binding.field)
            if declared is None:
                errors.append(
                    f"Widget {node.id} binds '{binding.target}' to undeclared property '{binding.field}'"
                )
            elif not resolver.is_compatible(node.type, declared.type):
                errors.append(
                    f"Widget {node.id} ({node.type}) is not compatible with property "
                    f"'{declared.name}' of type {declared.type}"
                )

    return errors, warnings


def validate_document(document: Document) -> tuple[list[str], list[str]]:
    """
    Run every document check.

    Returns:
        Tuple of (errors, warnings)
    """
    errors: list[str] = []
    warnings: list[str] = []
    for check in (validate_metadata, validate_fields, validate_tree):
        check_errors, check_warnings = check(document)
        errors.extend(check_errors)
        warnings.extend(check_warnings)
    return errors, warnings
