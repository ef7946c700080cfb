"""Sessions that delete an unusually large number of entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mapissues.validation.checks.base import global_check
from mapissues.validation.issue import Issue

if TYPE_CHECKING:
    from mapissues.graph.history import ChangeSet
    from mapissues.validation.registry import CheckContext


@global_check("many_deletions")
def check_many_deletions(changes: ChangeSet, context: CheckContext) -> list[Issue]:
    """More deletions in one session than the configured threshold."""
    threshold = context.config.get_many_deletions_threshold()
    count = len(changes.deleted)
    if count <= threshold:
        return []
    return [
        Issue(
            kind="many_deletions",
            severity="warning",
            message=f"You're deleting {count} features",
            hint="Make sure the deletions are intended before saving",
        )
    ]
