"""
Widget tree arena.

The tree is stored flat: a mapping of node id to ``WidgetNode`` plus the
ordered tuple of root ids and a parent index. Nodes reference their children
by id, so structural questions (is X inside Y? where does X live?) are id
walks rather than recursive searches, and a new tree version can share every
node record it did not touch with the previous one.

``WidgetTree`` values are never edited in place. The helpers prefixed with
``with_`` return new trees; the validated editing operations built on them
live in ``fluentforge.core.mutations``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field

from .widgets import WidgetInstance, WidgetNode, new_widget_id

logger = logging.getLogger(__name__)


class WidgetTree(BaseModel):
    """
    Immutable arena of widget nodes.

    Attributes:
        nodes: Node id -> node record
        roots: Ordered ids of the top-level widgets
        parents: Node id -> parent id (``None`` for roots)
    """

    nodes: dict[str, WidgetNode] = Field(default_factory=dict)
    roots: tuple[str, ...] = ()
    parents: dict[str, str | None] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def get(self, node_id: str) -> WidgetNode | None:
        return self.nodes.get(node_id)

    def parent_of(self, node_id: str) -> str | None:
        """Return the parent id of ``node_id`` (``None`` for roots)."""
        return self.parents.get(node_id)

    def children_of(self, parent_id: str | None) -> tuple[str, ...]:
        """Return the ordered child ids of ``parent_id``, or the roots for ``None``."""
        if parent_id is None:
            return self.roots
        node = self.nodes.get(parent_id)
        if node is None or node.children is None:
            return ()
        return node.children

    def ancestors(self, node_id: str) -> Iterator[str]:
        """Yield the ids of every ancestor of ``node_id``, nearest first."""
        current = self.parents.get(node_id)
        while current is not None:
            yield current
            current = self.parents.get(current)

    def is_within(self, node_id: str, ancestor_id: str) -> bool:
        """True when ``node_id`` is ``ancestor_id`` or lies in its subtree."""
        if node_id == ancestor_id:
            return True
        return any(a == ancestor_id for a in self.ancestors(node_id))

    def subtree_ids(self, node_id: str) -> list[str]:
        """Return ``node_id`` and all its descendants in document order."""
        result: list[str] = []
        stack = [node_id]
        while stack:
            current = stack.pop()
            node = self.nodes.get(current)
            if node is None:
                continue
            result.append(current)
            if node.children:
                stack.extend(reversed(node.children))
        return result

    def walk(self) -> Iterator[tuple[WidgetNode, int]]:
        """Yield ``(node, depth)`` for every node in document order."""
        stack: list[tuple[str, int]] = [(r, 0) for r in reversed(self.roots)]
        while stack:
            node_id, depth = stack.pop()
            node = self.nodes[node_id]
            yield node, depth
            if node.children:
                stack.extend((c, depth + 1) for c in reversed(node.children))

    def widget_types(self) -> set[str]:
        """Distinct widget types used anywhere in the tree."""
        return {node.type for node in self.nodes.values()}

    # ------------------------------------------------------------------
    # Structural edits (return new trees)
    # ------------------------------------------------------------------

    def with_node(self, node: WidgetNode) -> WidgetTree:
        """Return a tree where the record for ``node.id`` is replaced."""
        nodes = dict(self.nodes)
        nodes[node.id] = node
        return self.model_copy(update={"nodes": nodes})

    def with_children(self, parent_id: str | None, children: tuple[str, ...]) -> WidgetTree:
        """Return a tree where ``parent_id``'s child list (or the roots) is replaced."""
        if parent_id is None:
            return self.model_copy(update={"roots": children})
        parent = self.nodes[parent_id]
        return self.with_node(parent.model_copy(update={"children": children}))

    # ------------------------------------------------------------------
    # Nested form
    # ------------------------------------------------------------------

    def to_nested(self) -> list[WidgetInstance]:
        """Convert the arena into nested ``WidgetInstance`` values."""
        return [self._nest(root_id) for root_id in self.roots]

    def _nest(self, node_id: str) -> WidgetInstance:
        node = self.nodes[node_id]
        children = None
        if node.children is not None:
            children = [self._nest(child_id) for child_id in node.children]
        return WidgetInstance(
            id=node.id,
            type=node.type,
            props=dict(node.props),
            children=children,
            bindings=list(node.bindings),
            layout=dict(node.layout),
        )

    @classmethod
    def from_nested(cls, instances: list[WidgetInstance], fresh_ids: bool = False) -> WidgetTree:
        """
        Build an arena from nested instances.

        Args:
            instances: Root widgets, children embedded
            fresh_ids: Always assign new ids (ids in ``instances`` are ignored)

        Returns:
            New WidgetTree. Missing or duplicate ids are replaced with fresh ones.
        """
        nodes: dict[str, WidgetNode] = {}
        parents: dict[str, str | None] = {}

        def build(instance: WidgetInstance, parent_id: str | None) -> str:
            node_id = instance.id
            if fresh_ids or not node_id:
                node_id = new_widget_id()
            elif node_id in nodes:
                replacement = new_widget_id()
                logger.warning(f"Duplicate widget id {node_id!r}, reassigned to {replacement!r}")
                node_id = replacement
            # Reserve the id before recursing so descendants cannot reuse it
            nodes[node_id] = WidgetNode(id=node_id, type=instance.type)
            parents[node_id] = parent_id
            child_ids = None
            if instance.children is not None:
                child_ids = tuple(build(child, node_id) for child in instance.children)
            nodes[node_id] = WidgetNode(
                id=node_id,
                type=instance.type,
                props=dict(instance.props),
                children=child_ids,
                bindings=tuple(instance.bindings),
                layout=dict(instance.layout),
            )
            return node_id

        roots = tuple(build(instance, None) for instance in instances)
        return cls(nodes=nodes, roots=roots, parents=parents)
