"""Unclosed ways carrying tags that only make sense on areas."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mapissues.graph.entity import Way
from mapissues.validation.checks.base import entity_check
from mapissues.validation.issue import Issue

if TYPE_CHECKING:
    from mapissues.graph.entity import AnyEntity
    from mapissues.validation.registry import CheckContext

# key -> values implying an area; None means any value except "no".
AREA_TAGS: dict[str, frozenset[str] | None] = {
    "area": frozenset({"yes"}),
    "building": None,
    "landuse": None,
    "amenity": frozenset({"parking", "school", "hospital", "university", "grave_yard"}),
    "leisure": frozenset(
        {"park", "pitch", "playground", "garden", "swimming_pool", "sports_centre"}
    ),
    "natural": frozenset({"wood", "water", "wetland", "scrub", "grassland", "heath", "beach"}),
}


def area_tag(tags: dict[str, str]) -> str | None:
    """Return the first tag implying an area, as "key=value"."""
    for key, values in AREA_TAGS.items():
        value = tags.get(key)
        if value is None or value == "no":
            continue
        if values is None or value in values:
            return f"{key}={value}"
    return None


@entity_check("tag_suggests_area")
def check_tag_suggests_area(entity: AnyEntity, context: CheckContext) -> list[Issue]:
    """Area tag on a way that isn't closed."""
    if not isinstance(entity, Way) or entity.is_closed:
        return []
    tag = area_tag(entity.tags)
    if tag is None:
        return []
    # Ring segments of a multipolygon are legitimately open.
    if any(rel.is_multipolygon for rel in context.graph.parent_relations(entity)):
        return []

    return [
        Issue(
            kind="tag_suggests_area",
            severity="warning",
            message=f"{entity.id} should be a closed area based on the tag {tag}",
            entity_ids=(entity.id,),
            hint="Close the way or remove the area tag",
        )
    ]
