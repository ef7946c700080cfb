"""Editing session context.

EditContext bundles the pieces an editing front end needs: the history of
graph snapshots, the preference store, and the issue manager. Every
committed change (perform, pop, undo, redo) triggers a validation pass, so
subscribers to ``manager.reload`` always see issues for the current graph.

``replace()`` is for in-progress gestures such as dragging a node; it does
not validate; the gesture's final ``perform()`` does.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mapissues.graph.history import History
from mapissues.observability.logging import get_logger
from mapissues.preferences import MemoryPreferenceStore
from mapissues.validation.manager import IssueManager

if TYPE_CHECKING:
    from collections.abc import Callable

    from mapissues.config import ValidationConfig
    from mapissues.graph.entity import AnyEntity
    from mapissues.graph.graph import Graph
    from mapissues.graph.history import ChangeSet
    from mapissues.preferences import PreferenceStore
    from mapissues.validation.registry import CheckRegistry

log = get_logger(__name__)


class EditContext:
    """An editing session over one base graph.

    Args:
        base: Graph as loaded, before any edits.
        preferences: Persistent settings. Defaults to in-memory.
        config: Validation settings.
        registry: Checks to run (defaults to the built-in catalogue).
        auto_validate: Validate after every committed change.
    """

    def __init__(
        self,
        base: Graph | None = None,
        *,
        preferences: PreferenceStore | None = None,
        config: ValidationConfig | None = None,
        registry: CheckRegistry | None = None,
        auto_validate: bool = True,
    ) -> None:
        self.history = History(base)
        self.preferences = preferences if preferences is not None else MemoryPreferenceStore()
        self.manager = IssueManager(
            self.history,
            registry=registry,
            preferences=self.preferences,
            config=config,
        )
        self.auto_validate = auto_validate

    # -- Graph access ----------------------------------------------------------

    def graph(self) -> Graph:
        return self.history.graph()

    def has_entity(self, entity_id: str) -> bool:
        return self.history.graph().has_entity(entity_id)

    def entity(self, entity_id: str) -> AnyEntity:
        return self.history.graph().entity(entity_id)

    # -- Editing ---------------------------------------------------------------

    def perform(self, action: Callable[[Graph], Graph], annotation: str | None = None) -> ChangeSet:
        changes = self.history.perform(action, annotation)
        self._after_commit()
        return changes

    def replace(self, action: Callable[[Graph], Graph], annotation: str | None = None) -> ChangeSet:
        return self.history.replace(action, annotation)

    def pop(self) -> ChangeSet:
        changes = self.history.pop()
        self._after_commit()
        return changes

    def undo(self) -> bool:
        if not self.history.undo():
            return False
        self._after_commit()
        return True

    def redo(self) -> bool:
        if not self.history.redo():
            return False
        self._after_commit()
        return True

    def validate(self) -> None:
        self.manager.validate()

    def _after_commit(self) -> None:
        if self.auto_validate:
            self.manager.validate()
        else:
            log.debug("validation_deferred")
