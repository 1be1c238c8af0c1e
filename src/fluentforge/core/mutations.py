"""
Document mutation engine.

Every structural or field edit to a designer document goes through one of
the functions in this module. Each function is pure: it takes a ``Document``
and returns a ``MutationResult`` holding either the new document or a
``Fault`` explaining why the edit was rejected. Because documents are
immutable, a rejected edit can never leave a half-applied tree behind.

Expected validation failures are reported through the result, never raised.
History and selection are not handled here; see ``fluentforge.core.session``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from . import catalog, resolver
from .errors import Fault, FaultKind
from .ir import (
    KNOWN_FIELD_TYPES,
    Binding,
    DeclaredField,
    Document,
    WidgetInstance,
    WidgetNode,
    WidgetTree,
    is_identifier,
    new_widget_id,
    state_key,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MutationResult:
    """
    Outcome of a document mutation.

    Attributes:
        document: The new document on success, ``None`` on failure
        fault: Why the mutation was rejected, ``None`` on success
        changed: False when the mutation succeeded as a no-op
        node_id: Id of the inserted widget, for ``insert_widget``
        pruned: Number of bindings removed as a side effect
    """

    document: Document | None = None
    fault: Fault | None = None
    changed: bool = True
    node_id: str | None = None
    pruned: int = 0

    @property
    def success(self) -> bool:
        return self.fault is None

    @classmethod
    def failed(cls, kind: FaultKind, message: str) -> MutationResult:
        logger.debug(f"Mutation rejected ({kind.value}): {message}")
        return cls(fault=Fault(kind, message))

    @classmethod
    def unchanged(cls, document: Document) -> MutationResult:
        return cls(document=document, changed=False)


# =============================================================================
# Validation helpers
# =============================================================================


def check_bindings(
    widget_type: str,
    bindings: Iterable[Binding],
    fields: Iterable[DeclaredField],
) -> Fault | None:
    """
    Validate bindings for a widget of ``widget_type``.

    A binding is accepted when its target is a bindable prop of the widget
    type, the target is not bound twice, the field exists, and the resolver
    marks the field type compatible with the widget type.
    """
    definition = catalog.definition_of(widget_type)
    by_name = {f.name: f for f in fields}
    seen: set[str] = set()
    for binding in bindings:
        if not definition.is_bindable(binding.target):
            return Fault(
                FaultKind.INCOMPATIBLE_BINDING,
                f"{widget_type}.{binding.target} does not accept a binding",
            )
        if binding.target in seen:
            return Fault(
                FaultKind.INCOMPATIBLE_BINDING,
                f"{widget_type}.{binding.target} is bound more than once",
            )
        seen.add(binding.target)
        declared = by_name.get(binding.field)
        if declared is None:
            return Fault(
                FaultKind.INCOMPATIBLE_BINDING,
                f"Field {binding.field!r} is not declared",
            )
        if not resolver.is_compatible(widget_type, declared.type):
            return Fault(
                FaultKind.INCOMPATIBLE_BINDING,
                f"{widget_type} cannot present a {declared.type} field ({binding.field!r})",
            )
    return None


def _check_node(instance: WidgetInstance, fields: tuple[DeclaredField, ...]) -> Fault | None:
    if not catalog.is_known_widget(instance.type):
        return Fault(FaultKind.UNKNOWN_WIDGET_TYPE, f"Unknown widget type: {instance.type!r}")
    definition = catalog.definition_of(instance.type)
    if instance.children and not definition.supports_children:
        return Fault(FaultKind.INVALID_PARENT, f"{instance.type} cannot contain children")
    problems = catalog.validate_props(instance.type, instance.props)
    if problems:
        return Fault(FaultKind.INVALID_PROPERTY, "; ".join(problems))
    return check_bindings(instance.type, instance.bindings, fields)


def _check_parent(tree: WidgetTree, parent_id: str | None) -> Fault | None:
    if parent_id is None:
        return None
    parent = tree.get(parent_id)
    if parent is None:
        return Fault(FaultKind.INVALID_PARENT, f"Parent widget {parent_id!r} does not exist")
    if not catalog.is_known_widget(parent.type) or not catalog.definition_of(parent.type).supports_children:
        return Fault(FaultKind.INVALID_PARENT, f"{parent.type} widget {parent_id!r} cannot contain children")
    return None


def _merge(current: dict[str, Any], patch: dict[str, Any]) -> dict[str, Any]:
    """Merge ``patch`` into a copy of ``current``; ``None`` deletes a key."""
    merged = dict(current)
    for key, value in patch.items():
        if value is None:
            merged.pop(key, None)
        else:
            merged[key] = value
    return merged


# =============================================================================
# Widget mutations
# =============================================================================


def create_widget(widget_type: str) -> WidgetInstance:
    """
    Build a new widget from catalog defaults.

    Raises:
        UnknownWidgetTypeError: if ``widget_type`` is not in the catalog
    """
    definition = catalog.definition_of(widget_type)
    return WidgetInstance(
        type=definition.type.value,
        props=dict(definition.default_props),
        children=[] if definition.supports_children else None,
    )


def widget_for_field(declared: DeclaredField) -> WidgetInstance:
    """Build a widget of the recommended type, bound to ``declared`` on its primary prop."""
    widget = create_widget(resolver.recommended_widget(declared.type))
    target = catalog.definition_of(widget.type).primary_binding
    if target is not None:
        widget.bindings = [Binding(target=target, field=declared.name)]
    return widget


def insert_widget(
    document: Document,
    instance: WidgetInstance,
    parent_id: str | None = None,
) -> MutationResult:
    """
    Append ``instance`` (and any embedded children) under ``parent_id``.

    The inserted widgets always receive fresh ids; ids on ``instance`` are
    ignored. With no ``parent_id`` the widget becomes the last root.
    """
    tree = document.tree
    fault = _check_parent(tree, parent_id)
    if fault:
        return MutationResult(fault=fault)
    for item in instance.walk():
        fault = _check_node(item, document.fields)
        if fault:
            return MutationResult(fault=fault)

    nodes = dict(tree.nodes)
    parents = dict(tree.parents)

    def build(item: WidgetInstance, parent: str | None) -> str:
        node_id = new_widget_id()
        while node_id in nodes:
            node_id = new_widget_id()
        supports_children = catalog.definition_of(item.type).supports_children
        # Reserve the id before descending
        nodes[node_id] = WidgetNode(id=node_id, type=item.type)
        parents[node_id] = parent
        children = None
        if supports_children:
            children = tuple(build(child, node_id) for child in item.children or [])
        nodes[node_id] = WidgetNode(
            id=node_id,
            type=item.type,
            props=dict(item.props),
            children=children,
            bindings=tuple(item.bindings),
            layout=dict(item.layout),
        )
        return node_id

    new_id = build(instance, parent_id)
    new_tree = WidgetTree(nodes=nodes, roots=tree.roots, parents=parents)
    new_tree = new_tree.with_children(parent_id, new_tree.children_of(parent_id) + (new_id,))
    logger.debug(f"Inserted {instance.type} {new_id} under {parent_id or 'root'}")
    return MutationResult(document=document.model_copy(update={"tree": new_tree}), node_id=new_id)


def update_widget(
    document: Document,
    node_id: str,
    props: dict[str, Any] | None = None,
    bindings: list[Binding] | None = None,
    layout: dict[str, Any] | None = None,
) -> MutationResult:
    """
    Patch a widget's props, bindings and layout.

    ``props`` and ``layout`` are merged into the current values (``None``
    deletes a key). ``bindings``, when given, replaces the full binding list.
    The widget's type and children are never touched.
    """
    node = document.tree.get(node_id)
    if node is None:
        return MutationResult.failed(FaultKind.NOT_FOUND, f"Widget {node_id!r} not found")
    if not catalog.is_known_widget(node.type):
        return MutationResult.failed(FaultKind.UNKNOWN_WIDGET_TYPE, f"Unknown widget type: {node.type!r}")

    update: dict[str, Any] = {}
    if props is not None:
        problems = catalog.validate_props(node.type, props)
        if problems:
            return MutationResult.failed(FaultKind.INVALID_PROPERTY, "; ".join(problems))
        update["props"] = _merge(node.props, props)
    if bindings is not None:
        fault = check_bindings(node.type, bindings, document.fields)
        if fault:
            return MutationResult(fault=fault)
        update["bindings"] = tuple(bindings)
    if layout is not None:
        update["layout"] = _merge(node.layout, layout)

    if not update:
        return MutationResult.unchanged(document)
    new_tree = document.tree.with_node(node.model_copy(update=update))
    return MutationResult(document=document.model_copy(update={"tree": new_tree}))


def bind_widget(document: Document, node_id: str, target: str, field_name: str) -> MutationResult:
    """Bind ``target`` on a widget to a field, replacing any binding on that target."""
    node = document.tree.get(node_id)
    if node is None:
        return MutationResult.failed(FaultKind.NOT_FOUND, f"Widget {node_id!r} not found")
    bindings = [b for b in node.bindings if b.target != target]
    bindings.append(Binding(target=target, field=field_name))
    return update_widget(document, node_id, bindings=bindings)


def unbind_widget(document: Document, node_id: str, target: str) -> MutationResult:
    """Remove the binding on ``target``; a no-op if the target is not bound."""
    node = document.tree.get(node_id)
    if node is None:
        return MutationResult.failed(FaultKind.NOT_FOUND, f"Widget {node_id!r} not found")
    if node.binding_for(target) is None:
        return MutationResult.unchanged(document)
    return update_widget(document, node_id, bindings=[b for b in node.bindings if b.target != target])


def _detach(tree: WidgetTree, node_id: str) -> WidgetTree:
    parent_id = tree.parent_of(node_id)
    siblings = tuple(c for c in tree.children_of(parent_id) if c != node_id)
    return tree.with_children(parent_id, siblings)


def delete_widget(document: Document, node_id: str) -> MutationResult:
    """
    Remove a widget and its whole subtree.

    Removing an id that is not in the tree succeeds without changes.
    """
    tree = document.tree
    if node_id not in tree:
        return MutationResult.unchanged(document)

    doomed = tree.subtree_ids(node_id)
    detached = _detach(tree, node_id)
    nodes = {k: v for k, v in detached.nodes.items() if k not in doomed}
    parents = {k: v for k, v in detached.parents.items() if k not in doomed}
    new_tree = WidgetTree(nodes=nodes, roots=detached.roots, parents=parents)
    logger.debug(f"Removed widget {node_id} ({len(doomed)} node(s))")
    return MutationResult(document=document.model_copy(update={"tree": new_tree}))


def move_widget(
    document: Document,
    node_id: str,
    new_parent_id: str | None,
    index: int,
) -> MutationResult:
    """
    Move a widget (with its subtree) under ``new_parent_id`` at ``index``.

    ``None`` as parent moves the widget to the root list. ``index`` is
    clamped to the sibling count after the widget has been detached.
    """
    tree = document.tree
    if node_id not in tree:
        return MutationResult.failed(FaultKind.NOT_FOUND, f"Widget {node_id!r} not found")
    if new_parent_id is not None and tree.is_within(new_parent_id, node_id):
        return MutationResult.failed(
            FaultKind.CYCLE_DETECTED,
            f"Cannot move {node_id!r} into its own subtree ({new_parent_id!r})",
        )
    fault = _check_parent(tree, new_parent_id)
    if fault:
        return MutationResult(fault=fault)

    detached = _detach(tree, node_id)
    siblings = list(detached.children_of(new_parent_id))
    position = max(0, min(index, len(siblings)))
    siblings.insert(position, node_id)
    moved = detached.with_children(new_parent_id, tuple(siblings))
    parents = dict(moved.parents)
    parents[node_id] = new_parent_id
    new_tree = moved.model_copy(update={"parents": parents})
    if new_tree == tree:
        return MutationResult.unchanged(document)
    return MutationResult(document=document.model_copy(update={"tree": new_tree}))


# =============================================================================
# Field mutations
# =============================================================================


def _check_field(declared: DeclaredField, others: Iterable[DeclaredField]) -> Fault | None:
    if not is_identifier(declared.name):
        return Fault(FaultKind.INVALID_FIELD, f"Field name {declared.name!r} is not a valid identifier")
    for other in others:
        if other.name == declared.name:
            return Fault(FaultKind.DUPLICATE_FIELD, f"Field {declared.name!r} already exists")
        if state_key(other.name) == state_key(declared.name):
            return Fault(
                FaultKind.DUPLICATE_FIELD,
                f"Field {declared.name!r} clashes with {other.name!r} (both generate set{state_key(declared.name)})",
            )
    if declared.type not in KNOWN_FIELD_TYPES:
        return Fault(FaultKind.UNKNOWN_FIELD_TYPE, f"Unknown field type: {declared.type!r}")
    return None


def _rewrite_bindings(
    tree: WidgetTree,
    rewrite: Callable[[WidgetNode, Binding], Binding | None],
) -> tuple[WidgetTree, int]:
    """Apply ``rewrite`` to every binding; ``None`` drops it. Returns (tree, dropped)."""
    nodes = dict(tree.nodes)
    dropped = 0
    touched = False
    for node in tree.nodes.values():
        new_bindings = []
        for binding in node.bindings:
            replacement = rewrite(node, binding)
            if replacement is None:
                dropped += 1
            else:
                new_bindings.append(replacement)
        if tuple(new_bindings) != node.bindings:
            nodes[node.id] = node.model_copy(update={"bindings": tuple(new_bindings)})
            touched = True
    if not touched:
        return tree, 0
    return tree.model_copy(update={"nodes": nodes}), dropped


def insert_field(document: Document, declared: DeclaredField) -> MutationResult:
    """Append a declared field after validating its name and type."""
    fault = _check_field(declared, document.fields)
    if fault:
        return MutationResult(fault=fault)
    return MutationResult(document=document.model_copy(update={"fields": document.fields + (declared,)}))


def update_field(document: Document, name: str, changes: dict[str, Any]) -> MutationResult:
    """
    Edit a declared field.

    Renaming rewrites every binding that referenced the old name. Changing
    the type drops bindings whose widget cannot present the new type.
    """
    current = document.field(name)
    if current is None:
        return MutationResult.failed(FaultKind.NOT_FOUND, f"Field {name!r} not found")
    try:
        updated = DeclaredField.model_validate({**current.model_dump(), **changes})
    except PydanticValidationError as e:
        return MutationResult.failed(FaultKind.INVALID_FIELD, str(e))

    others = [f for f in document.fields if f.name != name]
    fault = _check_field(updated, others)
    if fault:
        return MutationResult(fault=fault)

    def rewrite(node: WidgetNode, binding: Binding) -> Binding | None:
        if binding.field != name:
            return binding
        if updated.type != current.type and not resolver.is_compatible(node.type, updated.type):
            return None
        if updated.name != name:
            return binding.model_copy(update={"field": updated.name})
        return binding

    tree, pruned = _rewrite_bindings(document.tree, rewrite)
    if pruned:
        logger.info(f"Field {name!r} changed to {updated.type}; dropped {pruned} incompatible binding(s)")
    fields = tuple(updated if f.name == name else f for f in document.fields)
    return MutationResult(
        document=document.model_copy(update={"fields": fields, "tree": tree}),
        pruned=pruned,
    )


def delete_field(document: Document, name: str) -> MutationResult:
    """Remove a declared field and every binding that referenced it."""
    if document.field(name) is None:
        return MutationResult.failed(FaultKind.NOT_FOUND, f"Field {name!r} not found")
    tree, pruned = _rewrite_bindings(
        document.tree,
        lambda _node, binding: None if binding.field == name else binding,
    )
    if pruned:
        logger.info(f"Field {name!r} removed; dropped {pruned} binding(s)")
    fields = tuple(f for f in document.fields if f.name != name)
    return MutationResult(
        document=document.model_copy(update={"fields": fields, "tree": tree}),
        pruned=pruned,
    )
