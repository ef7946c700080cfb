"""Change propagation.

Works out which entities need re-checking after an edit. A check on a way
depends on its nodes, and a check on a relation depends on its members, so
the literal edit is widened by one level in each direction:

1. every created or modified entity;
2. the parent ways of every node in (1);
3. the parent relations of every non-relation in (1) and (2).

Relations of relations are not followed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mapissues.graph.entity import Node, Relation

if TYPE_CHECKING:
    from mapissues.graph.graph import Graph
    from mapissues.graph.history import ChangeSet


def expand(changes: ChangeSet, graph: Graph) -> list[str]:
    """Return the IDs whose cached issues may be stale.

    IDs are deduplicated and ordered by first appearance, so repeated passes
    over the same change set visit entities in the same order. IDs not
    present in the graph are skipped.
    """
    affected: dict[str, None] = {}

    for entity_id in (*changes.created, *changes.modified):
        entity = graph.get_entity(entity_id)
        if entity is None:
            continue
        affected.setdefault(entity.id)
        if isinstance(entity, Node):
            for way in graph.parent_ways(entity):
                affected.setdefault(way.id)

    for entity_id in list(affected):
        entity = graph.get_entity(entity_id)
        if entity is None or isinstance(entity, Relation):
            continue
        for relation in graph.parent_relations(entity):
            affected.setdefault(relation.id)

    return list(affected)
