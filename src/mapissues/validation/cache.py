"""Per-entity issue cache.

Maps entity ID -> the issues every entity check produced for that entity's
current snapshot. The issue manager invalidates the whole cache at the start
of each validation pass; entries are then repopulated for the affected
entities during the pass, and lazily for anything queried afterwards.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mapissues.validation.issue import Issue
    from mapissues.validation.registry import CheckContext, CheckRegistry


class EntityIssueCache:
    """Memoizes entity check results by entity ID."""

    def __init__(self, registry: CheckRegistry) -> None:
        self._registry = registry
        self._entries: dict[str, list[Issue]] = {}

    def get(self, entity_id: str, context: CheckContext) -> list[Issue]:
        """Return the issues for an entity, running the checks on a miss.

        An entity missing from the graph yields an empty list and is not
        cached, since the ID may come back later with different data.
        """
        cached = self._entries.get(entity_id)
        if cached is not None:
            return cached
        entity = context.graph.get_entity(entity_id)
        if entity is None:
            return []
        issues = self._registry.run_entity_checks(entity, context)
        self._entries[entity_id] = issues
        return issues

    def put(self, entity_id: str, issues: list[Issue]) -> None:
        self._entries[entity_id] = issues

    def invalidate_all(self) -> None:
        self._entries = {}

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
