"""Planar geometry on node locations.

Locations are ``(lon, lat)`` in degrees. Distances are approximated on a
local equirectangular projection, which is accurate to well under a metre
at the few-metre scale the checks work at.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, NamedTuple

from mapissues.graph.entity import Node

if TYPE_CHECKING:
    from mapissues.graph.entity import Way
    from mapissues.graph.graph import Graph

Point = tuple[float, float]

EARTH_RADIUS_M = 6_371_008.8


class Segment(NamedTuple):
    """One edge of a way between two located nodes."""

    start_id: str
    start: Point
    end_id: str
    end: Point

    def shares_node(self, other: Segment) -> bool:
        return bool({self.start_id, self.end_id} & {other.start_id, other.end_id})


def way_segments(way: Way, graph: Graph) -> list[Segment]:
    """Consecutive node pairs of a way whose nodes both have a location.

    Missing nodes and nodes without a location break the way into pieces
    rather than being bridged over.
    """
    segments: list[Segment] = []
    previous: Node | None = None
    for node_id in way.nodes:
        node = graph.get_entity(node_id)
        if not isinstance(node, Node) or node.loc is None:
            previous = None
            continue
        if previous is not None and previous.loc is not None and previous.id != node.id:
            segments.append(Segment(previous.id, previous.loc, node.id, node.loc))
        previous = node
    return segments


def _orientation(a: Point, b: Point, c: Point) -> float:
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def segments_cross(p1: Point, p2: Point, q1: Point, q2: Point) -> bool:
    """True if the open segments p1-p2 and q1-q2 cross at a single point.

    Touching at an endpoint and collinear overlap do not count.

    >>> segments_cross((0, -1), (0, 1), (-1, 0), (1, 0))
    True
    >>> segments_cross((0, 0), (1, 0), (1, 0), (2, 1))
    False
    """
    d1 = _orientation(q1, q2, p1)
    d2 = _orientation(q1, q2, p2)
    d3 = _orientation(p1, p2, q1)
    d4 = _orientation(p1, p2, q2)
    return d1 * d2 < 0 and d3 * d4 < 0


def _project(point: Point, origin_lat: float) -> tuple[float, float]:
    x = math.radians(point[0]) * EARTH_RADIUS_M * math.cos(math.radians(origin_lat))
    y = math.radians(point[1]) * EARTH_RADIUS_M
    return x, y


def distance_to_segment_m(point: Point, start: Point, end: Point) -> float:
    """Approximate distance in metres from a point to a segment."""
    px, py = _project(point, point[1])
    ax, ay = _project(start, point[1])
    bx, by = _project(end, point[1])
    dx, dy = bx - ax, by - ay
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        t = 0.0
    else:
        t = max(0.0, min(1.0, ((px - ax) * dx + (py - ay) * dy) / length_sq))
    return math.hypot(px - (ax + t * dx), py - (ay + t * dy))
