"""Multipolygons tagged the old way, on the outer ring instead of the relation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mapissues.graph.entity import Relation
from mapissues.validation.checks.base import (
    entity_check,
    relation_has_feature_tags,
    tagged_outer_way,
)
from mapissues.validation.issue import Issue

if TYPE_CHECKING:
    from mapissues.graph.entity import AnyEntity
    from mapissues.validation.registry import CheckContext


@entity_check("old_multipolygon")
def check_old_multipolygon(entity: AnyEntity, context: CheckContext) -> list[Issue]:
    """Multipolygon feature tags sit on the outer way."""
    if not isinstance(entity, Relation) or not entity.is_multipolygon:
        return []
    if relation_has_feature_tags(entity):
        return []

    outer = tagged_outer_way(entity, context.graph)
    if outer is None:
        return []

    return [
        Issue(
            kind="old_multipolygon",
            severity="warning",
            message=f"{entity.id} has its tags on outer way {outer.id}",
            entity_ids=(entity.id, outer.id),
            hint="Move the tags from the outer way to the relation",
        )
    ]
