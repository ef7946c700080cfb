"""Highway ends that stop just short of another highway."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mapissues.graph.entity import Node, Way
from mapissues.validation.checks.base import entity_check, is_routable, routable_ways
from mapissues.validation.checks.geometry import distance_to_segment_m, way_segments
from mapissues.validation.issue import Issue

if TYPE_CHECKING:
    from mapissues.graph.entity import AnyEntity
    from mapissues.graph.graph import Graph
    from mapissues.validation.registry import CheckContext


def _loose_ends(way: Way, graph: Graph) -> list[Node]:
    """End nodes with a location that no other highway shares."""
    if len(way.nodes) < 2 or way.is_closed:
        return []
    ends: list[Node] = []
    for node_id in dict.fromkeys((way.nodes[0], way.nodes[-1])):
        node = graph.get_entity(node_id)
        if not isinstance(node, Node) or node.loc is None:
            continue
        if any(p.id != way.id and is_routable(p) for p in graph.parent_ways(node)):
            continue
        ends.append(node)
    return ends


@entity_check("almost_junction")
def check_almost_junction(entity: AnyEntity, context: CheckContext) -> list[Issue]:
    """Highway end lies within a few metres of another highway it doesn't join."""
    if not isinstance(entity, Way) or not is_routable(entity):
        return []

    graph = context.graph
    ends = _loose_ends(entity, graph)
    if not ends:
        return []

    threshold = context.config.almost_junction_distance
    issues: list[Issue] = []
    for other in routable_ways(graph):
        if other.id == entity.id:
            continue
        segments = way_segments(other, graph)
        near = any(
            distance_to_segment_m(end.loc, s.start, s.end) <= threshold
            for end in ends
            if end.loc is not None and not other.contains(end.id)
            for s in segments
        )
        if near:
            issues.append(
                Issue(
                    kind="almost_junction",
                    severity="warning",
                    message=f"{entity.id} is very close but not connected to {other.id}",
                    entity_ids=(entity.id, other.id),
                    hint="Extend the way to join the nearby road or path",
                )
            )
    return issues
