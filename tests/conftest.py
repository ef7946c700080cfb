"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from mapissues.graph import Graph, Member, Node, Relation, Way


@pytest.fixture(autouse=True)
def isolate_user_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep preference files and env overrides out of the real home directory.

    Tests that exercise the YAML preference store or the CLI would otherwise
    read and write ~/.config/mapissues.
    """
    config_dir = tmp_path / "user_config"
    monkeypatch.setenv("MAPISSUES_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("MAPISSUES_MANY_DELETIONS", raising=False)
    return config_dir


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def road_graph() -> Graph:
    """n1 - n2 - n3 with a road w1 over n1,n2 and a footway w2 over n2,n3.

    r1 is a route relation containing w1.
    """
    return Graph.from_entities(
        [
            Node(id="n1", loc=(0.0, 0.0)),
            Node(id="n2", loc=(1.0, 0.0)),
            Node(id="n3", loc=(2.0, 0.0)),
            Way(id="w1", nodes=("n1", "n2"), tags={"highway": "residential"}),
            Way(id="w2", nodes=("n2", "n3"), tags={"highway": "footway"}),
            Relation(
                id="r1",
                members=(Member(id="w1", type="way"),),
                tags={"type": "route", "route": "bus"},
            ),
        ]
    )
