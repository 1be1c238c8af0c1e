"""
Designer editing session.

A session composes three independently testable parts:

- the live ``Document`` (metadata, fields, widget tree)
- a ``Selection`` (selected and hovered widget ids, never generated)
- a ``HistoryManager`` of undo snapshots

Every document edit runs the matching function from
``fluentforge.core.mutations``. When it succeeds with a change, the
pre-image is recorded in history and the new document becomes live, so each
successful edit is exactly one undo step.

Sessions are single-writer. Callers that share one across threads must
serialize calls themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from . import mutations
from .history import DEFAULT_CAPACITY, HistoryManager, Snapshot
from .ir import Binding, DeclaredField, Document, DocumentMetadata, WidgetInstance
from .mutations import MutationResult

if TYPE_CHECKING:
    from ..stacks.pcf import GeneratedCode
    from .config import GenerationConfig

logger = logging.getLogger(__name__)


@dataclass
class Selection:
    """Ephemeral pointer state of the canvas."""

    selected_id: str | None = None
    hovered_id: str | None = None

    def forget(self, removed: set[str]) -> None:
        """Clear pointers that refer to any of the ``removed`` ids."""
        if self.selected_id in removed:
            self.selected_id = None
        if self.hovered_id in removed:
            self.hovered_id = None


class DesignerSession:
    """
    Editing session over one designer document.

    Example:
        session = DesignerSession()
        stack = session.add_widget(create_widget("Stack")).node_id
        session.add_widget(create_widget("Input"), parent_id=stack)
        session.undo()
    """

    def __init__(
        self,
        document: Document | None = None,
        history_capacity: int = DEFAULT_CAPACITY,
    ):
        self.document = document or Document()
        self.selection = Selection()
        self.history = HistoryManager(capacity=history_capacity)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _snapshot(self) -> Snapshot:
        return Snapshot(tree=self.document.tree, fields=self.document.fields)

    def _commit(self, label: str, result: MutationResult) -> MutationResult:
        if not result.success:
            logger.info(f"{label} rejected: {result.fault}")
            return result
        if not result.changed:
            return result
        assert result.document is not None
        self.history.record(label, self._snapshot())
        self.document = result.document
        return result

    def _restore(self, snapshot: Snapshot) -> None:
        self.document = self.document.model_copy(update={"tree": snapshot.tree, "fields": snapshot.fields})
        stale = {i for i in (self.selection.selected_id, self.selection.hovered_id) if i is not None}
        self.selection.forget({i for i in stale if i not in snapshot.tree})

    # ------------------------------------------------------------------
    # Widgets
    # ------------------------------------------------------------------

    def add_widget(self, widget: WidgetInstance, parent_id: str | None = None) -> MutationResult:
        return self._commit("Add component", mutations.insert_widget(self.document, widget, parent_id))

    def update_widget(
        self,
        node_id: str,
        props: dict[str, Any] | None = None,
        bindings: list[Binding] | None = None,
        layout: dict[str, Any] | None = None,
    ) -> MutationResult:
        result = mutations.update_widget(self.document, node_id, props=props, bindings=bindings, layout=layout)
        return self._commit("Update component", result)

    def bind(self, node_id: str, target: str, field_name: str) -> MutationResult:
        return self._commit("Update component", mutations.bind_widget(self.document, node_id, target, field_name))

    def unbind(self, node_id: str, target: str) -> MutationResult:
        return self._commit("Update component", mutations.unbind_widget(self.document, node_id, target))

    def remove_widget(self, node_id: str) -> MutationResult:
        removed = set(self.document.tree.subtree_ids(node_id))
        result = self._commit("Remove component", mutations.delete_widget(self.document, node_id))
        if result.changed:
            self.selection.forget(removed)
        return result

    def move_widget(self, node_id: str, new_parent_id: str | None, index: int) -> MutationResult:
        return self._commit(
            "Move component",
            mutations.move_widget(self.document, node_id, new_parent_id, index),
        )

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    def add_field(self, declared: DeclaredField) -> MutationResult:
        return self._commit("Add property", mutations.insert_field(self.document, declared))

    def update_field(self, name: str, **changes: Any) -> MutationResult:
        return self._commit("Update property", mutations.update_field(self.document, name, changes))

    def remove_field(self, name: str) -> MutationResult:
        return self._commit("Remove property", mutations.delete_field(self.document, name))

    # ------------------------------------------------------------------
    # Metadata and selection (not undoable)
    # ------------------------------------------------------------------

    def set_metadata(self, **changes: Any) -> DocumentMetadata:
        metadata = DocumentMetadata.model_validate({**self.document.metadata.model_dump(), **changes})
        self.document = self.document.model_copy(update={"metadata": metadata})
        return metadata

    def select(self, node_id: str | None) -> None:
        if node_id is not None and node_id not in self.document.tree:
            node_id = None
        self.selection.selected_id = node_id

    def hover(self, node_id: str | None) -> None:
        if node_id is not None and node_id not in self.document.tree:
            node_id = None
        self.selection.hovered_id = node_id

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def undo(self) -> bool:
        """Undo one step. Returns False (and does nothing) at the oldest state."""
        snapshot = self.history.undo(self._snapshot())
        if snapshot is None:
            return False
        self._restore(snapshot)
        return True

    def redo(self) -> bool:
        """Redo one step. Returns False (and does nothing) at the newest state."""
        snapshot = self.history.redo()
        if snapshot is None:
            return False
        self._restore(snapshot)
        return True

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def generate(self, config: GenerationConfig | None = None) -> GeneratedCode:
        """Generate the control artifacts from the current document."""
        from ..stacks.pcf import generate_control

        return generate_control(self.document, config)
