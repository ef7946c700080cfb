"""Routable highways that don't connect to any other highway."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mapissues.graph.entity import Way
from mapissues.validation.checks.base import entity_check, is_routable
from mapissues.validation.issue import Issue

if TYPE_CHECKING:
    from mapissues.graph.entity import AnyEntity
    from mapissues.validation.registry import CheckContext


@entity_check("disconnected_way")
def check_disconnected_way(entity: AnyEntity, context: CheckContext) -> list[Issue]:
    """Highway shares no node with another highway."""
    if not isinstance(entity, Way) or not is_routable(entity):
        return []

    graph = context.graph
    for node_id in entity.nodes:
        for parent in graph.parent_ways(node_id):
            if parent.id != entity.id and "highway" in parent.tags:
                return []

    return [
        Issue(
            kind="disconnected_way",
            severity="warning",
            message=f"{entity.id} is disconnected from other roads and paths",
            entity_ids=(entity.id,),
            hint="Connect an end of the way to a nearby road or path",
        )
    ]
