"""Tests for entity value models."""

from __future__ import annotations

import pytest
from pydantic import TypeAdapter, ValidationError

from mapissues.graph.entity import Entity, Member, Node, Relation, Way, is_interesting_key


class TestNode:
    def test_defaults(self) -> None:
        node = Node(id="n1")
        assert node.type == "node"
        assert node.loc is None
        assert node.tags == {}

    def test_is_frozen(self) -> None:
        node = Node(id="n1")
        with pytest.raises(ValidationError):
            node.id = "n2"  # type: ignore[misc]

    def test_update_returns_new_snapshot(self) -> None:
        node = Node(id="n1", loc=(0.0, 0.0))
        moved = node.update(loc=(1.0, 1.0))

        assert moved is not node
        assert moved.id == "n1"
        assert moved.loc == (1.0, 1.0)
        assert node.loc == (0.0, 0.0)

    def test_equal_snapshots_compare_equal(self) -> None:
        assert Node(id="n1", tags={"a": "b"}) == Node(id="n1", tags={"a": "b"})
        assert Node(id="n1") != Node(id="n1", tags={"a": "b"})

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Node(id="")


class TestWay:
    def test_is_closed(self) -> None:
        assert Way(id="w1", nodes=("n1", "n2", "n3", "n1")).is_closed
        assert not Way(id="w1", nodes=("n1", "n2", "n3")).is_closed
        assert not Way(id="w1", nodes=("n1",)).is_closed
        assert not Way(id="w1").is_closed

    def test_list_nodes_coerced_to_tuple(self) -> None:
        way = Way(id="w1", nodes=["n1", "n2"])  # type: ignore[arg-type]
        assert way.nodes == ("n1", "n2")

    def test_contains(self) -> None:
        way = Way(id="w1", nodes=("n1", "n2"))
        assert way.contains("n1")
        assert not way.contains("n3")


class TestRelation:
    def test_is_multipolygon(self) -> None:
        assert Relation(id="r1", tags={"type": "multipolygon"}).is_multipolygon
        assert not Relation(id="r1", tags={"type": "route"}).is_multipolygon

    def test_members(self) -> None:
        relation = Relation(
            id="r1",
            members=(
                Member(id="w1", type="way", role="outer"),
                Member(id="w2", type="way", role="inner"),
            ),
        )
        assert relation.has_member("w2")
        assert not relation.has_member("w3")
        assert [m.id for m in relation.members_by_role("outer")] == ["w1"]

    def test_member_type_validated(self) -> None:
        with pytest.raises(ValidationError):
            Member(id="x1", type="area")  # type: ignore[arg-type]


class TestInterestingTags:
    def test_is_interesting_key(self) -> None:
        assert is_interesting_key("highway")
        assert not is_interesting_key("source")
        assert not is_interesting_key("tiger:county")
        assert not is_interesting_key("created_by")

    def test_has_interesting_tags(self) -> None:
        assert Way(id="w1", tags={"building": "yes"}).has_interesting_tags()
        assert not Way(id="w1", tags={"source": "survey"}).has_interesting_tags()
        assert not Way(id="w1").has_interesting_tags()


class TestDiscriminatedEntity:
    def test_parses_by_type(self) -> None:
        adapter = TypeAdapter(list[Entity])
        entities = adapter.validate_python(
            [
                {"type": "node", "id": "n1", "loc": [0, 0]},
                {"type": "way", "id": "w1", "nodes": ["n1"]},
                {"type": "relation", "id": "r1", "members": [{"id": "w1", "type": "way"}]},
            ]
        )
        assert isinstance(entities[0], Node)
        assert isinstance(entities[1], Way)
        assert isinstance(entities[2], Relation)
        assert entities[0].loc == (0.0, 0.0)

    def test_unknown_type_rejected(self) -> None:
        adapter = TypeAdapter(Entity)
        with pytest.raises(ValidationError):
            adapter.validate_python({"type": "area", "id": "a1"})

    def test_extra_fields_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Node(id="n1", colour="red")  # type: ignore[call-arg]
