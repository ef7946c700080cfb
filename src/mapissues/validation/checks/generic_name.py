"""Names that describe the feature type instead of naming the feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mapissues.validation.checks.base import entity_check, primary_tag
from mapissues.validation.issue import Issue

if TYPE_CHECKING:
    from mapissues.graph.entity import AnyEntity
    from mapissues.validation.registry import CheckContext


def _normalize(text: str) -> str:
    return " ".join(text.replace("_", " ").lower().split())


@entity_check("generic_name")
def check_generic_name(entity: AnyEntity, context: CheckContext) -> list[Issue]:
    """Name is a placeholder or repeats the feature type."""
    name = entity.tags.get("name")
    if not name:
        return []

    generic = context.config.is_generic_name(name)
    if not generic:
        tag = primary_tag(entity.tags)
        generic = tag is not None and _normalize(tag[1]) == _normalize(name)
    if not generic:
        return []

    return [
        Issue(
            kind="generic_name",
            severity="warning",
            message=f"{entity.id} has the generic name {name!r}",
            entity_ids=(entity.id,),
            hint="Remove the name or replace it with the feature's real name",
        )
    ]
