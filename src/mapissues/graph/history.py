"""Edit history over graph snapshots.

History keeps a stack of Graph snapshots. The bottom entry is the base graph
(the data as loaded); every ``perform()`` pushes a new snapshot produced by
an action, ``undo()``/``redo()`` move the head pointer, and ``changes()``
diffs the head against the base to report what the session has touched.

Interactive modes use ``replace()`` to rewrite the head while a gesture is
in progress (e.g. dragging a node) and ``pop()`` to cancel it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mapissues.events import Channel
from mapissues.graph.graph import Graph
from mapissues.observability.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    Action = Callable[[Graph], Graph]

log = get_logger(__name__)


@dataclass(frozen=True)
class ChangeSet:
    """Entity IDs touched by the edit session.

    Attributes:
        created: IDs present in the head graph but not the base.
        modified: IDs present in both whose snapshot differs.
        deleted: IDs present in the base graph but not the head.
    """

    created: tuple[str, ...] = ()
    modified: tuple[str, ...] = ()
    deleted: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.created or self.modified or self.deleted)

    @property
    def summary(self) -> str:
        return (
            f"{len(self.created)} created, {len(self.modified)} modified, "
            f"{len(self.deleted)} deleted"
        )


def difference(base: Graph, head: Graph) -> ChangeSet:
    """Compute the change set between two snapshots.

    Ordering follows the head graph for created/modified and the base graph
    for deleted, so the result is deterministic for a given pair.
    """
    created: list[str] = []
    modified: list[str] = []
    for entity in head:
        before = base.get_entity(entity.id)
        if before is None:
            created.append(entity.id)
        elif before is not entity and before != entity:
            modified.append(entity.id)
    deleted = [entity.id for entity in base if not head.has_entity(entity.id)]
    return ChangeSet(created=tuple(created), modified=tuple(modified), deleted=tuple(deleted))


@dataclass(frozen=True)
class HistoryEntry:
    graph: Graph
    annotation: str | None = None


class History:
    """Undo/redo stack of graph snapshots.

    Channels:
        changed: published with the current ChangeSet after every perform,
            replace, pop, undo and redo.
        undone: published after a successful undo.
        redone: published after a successful redo.
    """

    def __init__(self, base: Graph | None = None) -> None:
        if base is None:
            base = Graph.empty()
        self._stack: list[HistoryEntry] = [HistoryEntry(base)]
        self._index = 0
        self.changed: Channel[ChangeSet] = Channel("change")
        self.undone: Channel[ChangeSet] = Channel("undone")
        self.redone: Channel[ChangeSet] = Channel("redone")

    # -- Snapshots -------------------------------------------------------------

    def base(self) -> Graph:
        """The graph as it was when the session started."""
        return self._stack[0].graph

    def graph(self) -> Graph:
        """The current head snapshot."""
        return self._stack[self._index].graph

    def changes(self) -> ChangeSet:
        return difference(self.base(), self.graph())

    # -- Editing ---------------------------------------------------------------

    def perform(self, action: Action, annotation: str | None = None) -> ChangeSet:
        """Apply an action to the head graph and push the result.

        Any redo entries above the head are discarded.
        """
        graph = action(self.graph())
        del self._stack[self._index + 1 :]
        self._stack.append(HistoryEntry(graph, annotation))
        self._index += 1
        log.debug("history_perform", annotation=annotation, index=self._index)
        return self._emit_change()

    def replace(self, action: Action, annotation: str | None = None) -> ChangeSet:
        """Apply an action and overwrite the head entry instead of pushing.

        Used for continuous gestures where only the final state should be
        undoable as one step.
        """
        graph = action(self.graph())
        del self._stack[self._index + 1 :]
        if self._index == 0:
            self._stack.append(HistoryEntry(graph, annotation))
            self._index = 1
        else:
            self._stack[self._index] = HistoryEntry(graph, annotation)
        return self._emit_change()

    def pop(self) -> ChangeSet:
        """Drop the head entry without keeping it for redo."""
        if self._index > 0:
            del self._stack[self._index :]
            self._index -= 1
        return self._emit_change()

    def undo(self) -> bool:
        """Move the head back one entry.

        Returns:
            False if there was nothing to undo.
        """
        if not self.can_undo:
            return False
        annotation = self._stack[self._index].annotation
        self._index -= 1
        log.debug("history_undo", annotation=annotation, index=self._index)
        changes = self._emit_change()
        self.undone.publish(changes)
        return True

    def redo(self) -> bool:
        """Move the head forward one entry.

        Returns:
            False if there was nothing to redo.
        """
        if not self.can_redo:
            return False
        self._index += 1
        log.debug("history_redo", annotation=self._stack[self._index].annotation)
        changes = self._emit_change()
        self.redone.publish(changes)
        return True

    def reset(self, base: Graph | None = None) -> None:
        """Start a fresh session, optionally from a new base graph."""
        self._stack = [HistoryEntry(base if base is not None else self.base())]
        self._index = 0
        self._emit_change()

    # -- Introspection ---------------------------------------------------------

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._stack) - 1

    def undo_annotation(self) -> str | None:
        return self._stack[self._index].annotation if self.can_undo else None

    def redo_annotation(self) -> str | None:
        return self._stack[self._index + 1].annotation if self.can_redo else None

    def __len__(self) -> int:
        return len(self._stack)

    def _emit_change(self) -> ChangeSet:
        changes = self.changes()
        self.changed.publish(changes)
        return changes
