"""
Linear undo/redo history for designer sessions.

Entries hold *pre-image* snapshots: ``record`` is called with the state as it
was just before a mutation, so each entry is the state one undo step returns
to. The state at the head is not stored until the first ``undo`` after a
mutation; at that point it is kept aside so ``redo`` can come back to it.

The pydantic models are frozen, but their ``props``, ``layout`` and arena
mappings are plain dicts. Snapshots are therefore deep-copied on the way in
and on the way out, so neither later edits to the live document nor edits to
a restored state can reach a stored entry.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from .ir import DeclaredField, WidgetTree

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 50


@dataclass(frozen=True)
class Snapshot:
    """The undoable part of a document: widget tree and declared fields."""

    tree: WidgetTree
    fields: tuple[DeclaredField, ...]

    def copy(self) -> Snapshot:
        """Structurally independent copy."""
        return Snapshot(
            tree=self.tree.model_copy(deep=True),
            fields=tuple(f.model_copy(deep=True) for f in self.fields),
        )


@dataclass(frozen=True)
class HistoryEntry:
    """One undo step."""

    label: str
    snapshot: Snapshot
    timestamp: float = field(default_factory=time.time)


class HistoryManager:
    """
    Bounded linear history with a cursor.

    ``cursor`` counts the entries that are currently "applied": entries
    before the cursor can be undone, entries from the cursor on (plus the
    saved head) can be redone.

    Example:
        history = HistoryManager()
        history.record("Add component", before)
        restored = history.undo(current)   # -> before
        history.redo()                     # -> current
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self.capacity = capacity
        self._entries: list[HistoryEntry] = []
        self._cursor = 0
        self._head: Snapshot | None = None

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._entries)

    def record(self, label: str, snapshot: Snapshot) -> HistoryEntry:
        """
        Record the state before a mutation.

        Any redo branch beyond the cursor is discarded. Once the capacity is
        exceeded the oldest entry is dropped for good.
        """
        if self._cursor < len(self._entries):
            logger.debug(f"Discarding {len(self._entries) - self._cursor} redo entr(ies)")
        del self._entries[self._cursor :]
        self._head = None

        entry = HistoryEntry(label=label, snapshot=snapshot.copy())
        self._entries.append(entry)
        if len(self._entries) > self.capacity:
            evicted = self._entries.pop(0)
            logger.debug(f"History full; evicted {evicted.label!r}")
        self._cursor = len(self._entries)
        return entry

    def undo(self, current: Snapshot) -> Snapshot | None:
        """
        Step back one entry.

        Args:
            current: The live state, saved as the redo target when undoing
                from the head

        Returns:
            Snapshot to restore, or ``None`` when there is nothing to undo
        """
        if not self.can_undo:
            return None
        if self._cursor == len(self._entries):
            self._head = current.copy()
        self._cursor -= 1
        entry = self._entries[self._cursor]
        logger.debug(f"Undo {entry.label!r}")
        return entry.snapshot.copy()

    def redo(self) -> Snapshot | None:
        """
        Step forward one entry.

        Returns:
            Snapshot to restore, or ``None`` when already at the newest state
        """
        if not self.can_redo:
            return None
        logger.debug(f"Redo {self._entries[self._cursor].label!r}")
        self._cursor += 1
        if self._cursor == len(self._entries):
            return self._head.copy() if self._head is not None else None
        return self._entries[self._cursor].snapshot.copy()

    def clear(self) -> None:
        self._entries.clear()
        self._cursor = 0
        self._head = None
