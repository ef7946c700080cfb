"""Tests for validation configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from mapissues.config import (
    DEFAULT_DEPRECATED_TAGS,
    DEFAULT_MANY_DELETIONS_THRESHOLD,
    ConfigError,
    ValidationConfig,
    load_config,
)

if TYPE_CHECKING:
    from pathlib import Path

# --- Tests for ValidationConfig ---


class TestValidationConfig:
    """Tests for ValidationConfig class."""

    def test_defaults(self) -> None:
        config = ValidationConfig()

        assert config.many_deletions_threshold == DEFAULT_MANY_DELETIONS_THRESHOLD
        assert config.enabled_checks is None
        assert config.disabled_checks == []
        assert "highway=ford" in config.deprecated_tags

    def test_defaults_not_shared(self) -> None:
        a = ValidationConfig()
        a.generic_names.append("thing")
        a.deprecated_tags["x=y"] = {"x": "z"}

        b = ValidationConfig()
        assert "thing" not in b.generic_names
        assert "x=y" not in b.deprecated_tags

    def test_is_generic_name_case_insensitive(self) -> None:
        config = ValidationConfig(generic_names=["Shop"])
        assert config.is_generic_name("shop")
        assert config.is_generic_name("  SHOP ")
        assert not config.is_generic_name("Shop Around The Corner")

    def test_env_overrides_threshold(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAPISSUES_MANY_DELETIONS", "5")
        assert ValidationConfig(many_deletions_threshold=50).get_many_deletions_threshold() == 5

    def test_invalid_env_value_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAPISSUES_MANY_DELETIONS", "lots")
        assert ValidationConfig(many_deletions_threshold=50).get_many_deletions_threshold() == 50


class TestFromDict:
    def test_empty_dict_gives_defaults(self) -> None:
        assert ValidationConfig.from_dict({}) == ValidationConfig()

    def test_all_fields(self) -> None:
        config = ValidationConfig.from_dict(
            {
                "many_deletions_threshold": 10,
                "generic_names": ["thing"],
                "enabled_checks": ["missing_tag"],
                "disabled_checks": ["generic_name"],
            }
        )

        assert config.many_deletions_threshold == 10
        assert config.generic_names == ["thing"]
        assert config.enabled_checks == ["missing_tag"]
        assert config.disabled_checks == ["generic_name"]

    def test_deprecated_tags_merged_over_defaults(self) -> None:
        config = ValidationConfig.from_dict(
            {
                "deprecated_tags": {
                    "landuse=meadow_orchard": {"landuse": "orchard"},
                    "highway=ford": {"ford": "stepping_stones"},
                }
            }
        )

        assert config.deprecated_tags["landuse=meadow_orchard"] == {"landuse": "orchard"}
        assert config.deprecated_tags["highway=ford"] == {"ford": "stepping_stones"}
        assert len(config.deprecated_tags) == len(DEFAULT_DEPRECATED_TAGS) + 1

    def test_negative_threshold_rejected(self) -> None:
        with pytest.raises(ValueError, match="many_deletions_threshold"):
            ValidationConfig.from_dict({"many_deletions_threshold": -1})

    def test_almost_junction_distance(self) -> None:
        assert ValidationConfig().almost_junction_distance == 5.0
        config = ValidationConfig.from_dict({"almost_junction_distance": 2})
        assert config.almost_junction_distance == 2.0
        with pytest.raises(ValueError, match="almost_junction_distance"):
            ValidationConfig.from_dict({"almost_junction_distance": -0.5})

    def test_deprecated_key_without_value_rejected(self) -> None:
        with pytest.raises(ValueError, match="key=value"):
            ValidationConfig.from_dict({"deprecated_tags": {"highway": {"ford": "yes"}}})


class TestLoadConfig:
    def test_none_returns_defaults(self) -> None:
        assert load_config(None) == ValidationConfig()

    def test_loads_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "mapissues.yaml"
        path.write_text(
            "many_deletions_threshold: 3\n"
            "disabled_checks: [generic_name]\n"
            "deprecated_tags:\n"
            '  "shop=fishmonger": {shop: seafood}\n'
        )

        config = load_config(path)

        assert config.many_deletions_threshold == 3
        assert config.disabled_checks == ["generic_name"]
        assert config.deprecated_tags["shop=fishmonger"] == {"shop": "seafood"}

    def test_empty_file_returns_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "mapissues.yaml"
        path.write_text("")
        assert load_config(path) == ValidationConfig()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="File not found"):
            load_config(tmp_path / "nope.yaml")

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "mapissues.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "mapissues.yaml"
        path.write_text("many_deletions_threshold: [unclosed\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert exc_info.value.path == path

    def test_invalid_value_wrapped(self, tmp_path: Path) -> None:
        path = tmp_path / "mapissues.yaml"
        path.write_text("many_deletions_threshold: -4\n")
        with pytest.raises(ConfigError, match="must be >= 0"):
            load_config(path)
