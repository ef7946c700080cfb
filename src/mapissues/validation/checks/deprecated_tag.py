"""Outdated tags with a documented replacement."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mapissues.validation.checks.base import entity_check
from mapissues.validation.issue import Issue

if TYPE_CHECKING:
    from mapissues.graph.entity import AnyEntity
    from mapissues.validation.registry import CheckContext


def upgrade_tags(
    tags: dict[str, str], deprecated: dict[str, dict[str, str]]
) -> dict[str, str]:
    """Return a copy of ``tags`` with every deprecated tag replaced.

    >>> upgrade_tags({"highway": "ford"}, {"highway=ford": {"ford": "yes"}})
    {'ford': 'yes'}
    """
    upgraded = dict(tags)
    for key, value in tags.items():
        replacement = deprecated.get(f"{key}={value}")
        if replacement is None:
            continue
        if key not in replacement:
            upgraded.pop(key, None)
        upgraded.update(replacement)
    return upgraded


@entity_check("deprecated_tag")
def check_deprecated_tag(entity: AnyEntity, context: CheckContext) -> list[Issue]:
    """Entity uses tags that have been replaced."""
    deprecated = context.config.deprecated_tags
    found = [f"{k}={v}" for k, v in entity.tags.items() if f"{k}={v}" in deprecated]
    if not found:
        return []

    upgraded = upgrade_tags(entity.tags, deprecated)
    added = sorted(f"{k}={v}" for k, v in upgraded.items() if entity.tags.get(k) != v)
    return [
        Issue(
            kind="deprecated_tag",
            severity="warning",
            message=f"{entity.id} has outdated tags: {', '.join(found)}",
            entity_ids=(entity.id,),
            hint=f"Upgrade to {', '.join(added)}" if added else "Remove the outdated tags",
        )
    ]
