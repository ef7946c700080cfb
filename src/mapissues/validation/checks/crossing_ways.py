"""Highways that cross each other without a junction node."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mapissues.graph.entity import Way
from mapissues.validation.checks.base import entity_check, is_routable, routable_ways
from mapissues.validation.checks.geometry import Segment, segments_cross, way_segments
from mapissues.validation.issue import Issue

if TYPE_CHECKING:
    from mapissues.graph.entity import AnyEntity
    from mapissues.validation.registry import CheckContext


def _level(way: Way) -> tuple[int, bool, bool]:
    """Vertical placement: (layer, on a bridge, in a tunnel)."""
    try:
        layer = int(way.tags.get("layer", "0"))
    except ValueError:
        layer = 0
    return (
        layer,
        way.tags.get("bridge", "no") != "no",
        way.tags.get("tunnel", "no") != "no",
    )


def _any_crossing(ours: list[Segment], theirs: list[Segment]) -> bool:
    for a in ours:
        for b in theirs:
            if a.shares_node(b):
                continue
            if segments_cross(a.start, a.end, b.start, b.end):
                return True
    return False


@entity_check("crossing_ways")
def check_crossing_ways(entity: AnyEntity, context: CheckContext) -> list[Issue]:
    """Highway segments intersect another highway's without sharing a node.

    Ways on different layers, bridges and tunnels are allowed to pass over
    or under each other. Both ways are referenced, so the issue has the same
    identity whichever of the two was re-checked.
    """
    if not isinstance(entity, Way) or not is_routable(entity):
        return []

    graph = context.graph
    ours = way_segments(entity, graph)
    if not ours:
        return []

    level = _level(entity)
    issues: list[Issue] = []
    for other in routable_ways(graph):
        if other.id == entity.id or _level(other) != level:
            continue
        if _any_crossing(ours, way_segments(other, graph)):
            issues.append(
                Issue(
                    kind="crossing_ways",
                    severity="warning",
                    message=f"{entity.id} crosses {other.id}",
                    entity_ids=(entity.id, other.id),
                    hint="Connect the ways where they cross, or tag a bridge or tunnel",
                )
            )
    return issues
