"""Module-level registry for the built-in check catalogue.

Check modules register via the ``@entity_check`` / ``@global_check``
decorators at import time::

    @entity_check("missing_tag")
    def check_missing_tag(entity, context):
        ...

``get_registry()`` returns the populated registry once
``mapissues.validation.checks`` has been imported.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mapissues.graph.entity import Way, is_interesting_key
from mapissues.validation.registry import CheckRegistry

if TYPE_CHECKING:
    from collections.abc import Callable

    from mapissues.graph.entity import Relation
    from mapissues.graph.graph import Graph

_registry = CheckRegistry()


def entity_check(
    name: str, *, description: str = ""
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    return _registry.entity_check(name, description=description)


def global_check(
    name: str, *, description: str = ""
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    return _registry.global_check(name, description=description)


def get_registry() -> CheckRegistry:
    return _registry


def relation_has_feature_tags(relation: Relation) -> bool:
    """True if the relation has interesting tags besides ``type``."""
    return any(key != "type" and is_interesting_key(key) for key in relation.tags)


def tagged_outer_way(relation: Relation, graph: Graph) -> Way | None:
    """Return the single outer way of a relation if it carries feature tags."""
    outers = [m for m in relation.members_by_role("outer") if m.type == "way"]
    if len(outers) != 1:
        return None
    outer = graph.get_entity(outers[0].id)
    if isinstance(outer, Way) and outer.has_interesting_tags():
        return outer
    return None


def primary_tag(tags: dict[str, str]) -> tuple[str, str] | None:
    """Return the first feature-defining tag, if any.

    >>> primary_tag({"name": "Joe's", "amenity": "cafe"})
    ('amenity', 'cafe')
    """
    for key in PRIMARY_KEYS:
        value = tags.get(key)
        if value and value != "no":
            return key, value
    return None


PRIMARY_KEYS = (
    "amenity",
    "shop",
    "tourism",
    "leisure",
    "building",
    "highway",
    "railway",
    "waterway",
    "natural",
    "landuse",
    "historic",
    "office",
    "craft",
    "man_made",
    "place",
)

ROUTABLE_HIGHWAYS = frozenset(
    {
        "motorway",
        "trunk",
        "primary",
        "secondary",
        "tertiary",
        "residential",
        "unclassified",
        "living_street",
        "service",
        "road",
        "track",
        "motorway_link",
        "trunk_link",
        "primary_link",
        "secondary_link",
        "tertiary_link",
        "path",
        "footway",
        "cycleway",
        "bridleway",
        "pedestrian",
        "steps",
    }
)


def is_routable(entity: object) -> bool:
    """True for ways tagged with a routable ``highway`` value."""
    return isinstance(entity, Way) and entity.tags.get("highway") in ROUTABLE_HIGHWAYS


def routable_ways(graph: Graph) -> list[Way]:
    return [e for e in graph.entities() if isinstance(e, Way) and is_routable(e)]
