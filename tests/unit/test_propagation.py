"""Tests for change propagation to dependent entities."""

from __future__ import annotations

from mapissues.graph import ChangeSet, Graph, Member, Node, Relation, Way
from mapissues.validation.propagation import expand


class TestExpand:
    def test_node_pulls_in_parent_ways_and_their_relations(self, road_graph: Graph) -> None:
        assert expand(ChangeSet(modified=("n1",)), road_graph) == ["n1", "w1", "r1"]

    def test_shared_node_pulls_in_every_parent_way(self, road_graph: Graph) -> None:
        assert expand(ChangeSet(modified=("n2",)), road_graph) == ["n2", "w1", "w2", "r1"]

    def test_way_pulls_in_parent_relation(self, road_graph: Graph) -> None:
        assert expand(ChangeSet(modified=("w1",)), road_graph) == ["w1", "r1"]

    def test_way_does_not_pull_in_its_nodes(self, road_graph: Graph) -> None:
        assert "n1" not in expand(ChangeSet(modified=("w1",)), road_graph)

    def test_created_and_modified_both_expanded(self, road_graph: Graph) -> None:
        result = expand(ChangeSet(created=("n3",), modified=("w1",)), road_graph)
        assert result == ["n3", "w2", "w1", "r1"]

    def test_deleted_ids_ignored(self, road_graph: Graph) -> None:
        assert expand(ChangeSet(deleted=("n1",)), road_graph) == []

    def test_ids_missing_from_graph_skipped(self, road_graph: Graph) -> None:
        assert expand(ChangeSet(modified=("n99", "w2")), road_graph) == ["w2"]

    def test_no_duplicates(self, road_graph: Graph) -> None:
        result = expand(ChangeSet(modified=("n1", "n2", "w1")), road_graph)
        assert len(result) == len(set(result))
        assert result == ["n1", "w1", "n2", "w2", "r1"]

    def test_relations_of_relations_not_followed(self) -> None:
        graph = Graph.from_entities(
            [
                Node(id="n1"),
                Relation(id="r1", members=(Member(id="n1", type="node"),), tags={"type": "site"}),
                Relation(
                    id="r2", members=(Member(id="r1", type="relation"),), tags={"type": "site"}
                ),
            ]
        )
        assert expand(ChangeSet(modified=("n1",)), graph) == ["n1", "r1"]
        assert expand(ChangeSet(modified=("r1",)), graph) == ["r1"]

    def test_empty_change_set(self, road_graph: Graph) -> None:
        assert expand(ChangeSet(), road_graph) == []

    def test_deterministic(self, road_graph: Graph) -> None:
        changes = ChangeSet(modified=("n2", "w1"))
        assert expand(changes, road_graph) == expand(changes, road_graph)

    def test_node_relation_membership(self) -> None:
        graph = Graph.from_entities(
            [
                Node(id="n1"),
                Way(id="w1", nodes=("n1",)),
                Relation(id="r1", members=(Member(id="n1", type="node"),), tags={"type": "site"}),
            ]
        )
        assert expand(ChangeSet(modified=("n1",)), graph) == ["n1", "w1", "r1"]
