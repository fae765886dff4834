"""Tests for configuration models and the YAML loader."""

import pytest
import yaml
from pydantic import ValidationError

from feedrank.config import (
    CONFIG_ENV_VAR,
    Config,
    ConfigModel,
    GeoPolicy,
    RankingConfig,
    default_config_path,
    load_config,
    save_config,
)


def test_default_weights_sum_to_one():
    config = RankingConfig()
    total = (
        config.interest_weight
        + config.geo_weight
        + config.temporal_weight
        + config.popularity_weight
        + config.behavioral_weight
        + config.diversity_weight
    )
    assert total == pytest.approx(1.0)


def test_weights_must_sum_to_one():
    with pytest.raises(ValidationError, match="sum to 1.0"):
        RankingConfig(interest_weight=0.5)


def test_rebalanced_weights_accepted():
    config = RankingConfig(interest_weight=0.40, popularity_weight=0.10)
    assert config.interest_weight == 0.40


def test_save_and_load(tmp_path):
    path = tmp_path / "nested" / "config.yaml"
    config = ConfigModel(ranking={"geo_policy": "radius", "category_cap": 2})

    save_config(config, path)
    loaded = load_config(path)

    assert loaded.ranking.geo_policy == GeoPolicy.RADIUS
    assert loaded.ranking.category_cap == 2
    assert loaded.safety.report_threshold == 5


def test_partial_yaml_uses_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"safety": {"report_threshold": 2}}))

    config = load_config(path)

    assert config.safety.report_threshold == 2
    assert config.ranking.category_cap == 3


def test_empty_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(path) == ConfigModel()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("ranking: [unclosed")
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_config(path)


def test_invalid_values(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"ranking": {"geo_weight": 0.9}}))
    with pytest.raises(ValueError, match="Invalid configuration"):
        load_config(path)


def test_manager_falls_back_to_defaults(tmp_path):
    assert Config(tmp_path / "absent.yaml").config == ConfigModel()


def test_default_path_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "custom.yaml"))
    assert default_config_path() == tmp_path / "custom.yaml"

    monkeypatch.delenv(CONFIG_ENV_VAR)
    assert default_config_path().name == "config.yaml"
