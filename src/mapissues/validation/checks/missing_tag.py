"""Ways and relations that don't say what they are."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mapissues.graph.entity import Relation, Way
from mapissues.validation.checks.base import (
    entity_check,
    relation_has_feature_tags,
    tagged_outer_way,
)
from mapissues.validation.issue import Issue, Severity

if TYPE_CHECKING:
    from mapissues.graph.entity import AnyEntity
    from mapissues.validation.registry import CheckContext


def _issue(entity_id: str, severity: Severity, message: str) -> Issue:
    return Issue(
        kind="missing_tag",
        severity=severity,
        message=message,
        entity_ids=(entity_id,),
        hint="Choose a feature type for it",
    )


@entity_check("missing_tag")
def check_missing_tag(entity: AnyEntity, context: CheckContext) -> list[Issue]:
    """Way or relation has no descriptive tags.

    Untagged nodes are vertices of ways and are never flagged. Untagged ways
    that belong to a relation take their meaning from it.
    """
    graph = context.graph

    if isinstance(entity, Way):
        if entity.has_interesting_tags() or graph.parent_relations(entity):
            return []
        return [_issue(entity.id, "warning", f"{entity.id} has no tags")]

    if isinstance(entity, Relation):
        if "type" not in entity.tags:
            return [_issue(entity.id, "error", f"{entity.id} has no relation type")]
        if relation_has_feature_tags(entity):
            return []
        if (
            entity.is_multipolygon
            and context.is_enabled("old_multipolygon")
            and tagged_outer_way(entity, graph) is not None
        ):
            return []
        return [_issue(entity.id, "warning", f"{entity.id} has only a type tag")]

    return []
