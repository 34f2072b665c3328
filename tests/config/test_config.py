"""Tests for configuration loading."""

import pytest

from modelfit.catalog.candidate import TradeoffMode
from modelfit.catalog.leaderboard import LeaderboardClient
from modelfit.config.loader import ConfigError, load_config, save_config
from modelfit.config.schema import ModelfitConfig
from modelfit.factory import create_ranker


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "missing.yaml")

    assert config == ModelfitConfig()
    assert config.selection.mode == TradeoffMode.BALANCED
    assert config.gpu.partial_strategy == "best"
    assert config.catalog.mb_per_billion == 700
    assert config.engine.base_url == "http://localhost:8000/v1"


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "modelfit.yaml"
    path.write_text("")

    assert load_config(path) == ModelfitConfig()


def test_partial_config(tmp_path):
    path = tmp_path / "modelfit.yaml"
    path.write_text(
        """
gpu:
  name: NVIDIA GeForce RTX 4090
  tier: 3
selection:
  mode: quality
catalog:
  author: someone
  min_quality: true
"""
    )

    config = load_config(path)

    assert config.gpu.name == "NVIDIA GeForce RTX 4090"
    assert config.gpu.tier == 3
    assert config.selection.mode == TradeoffMode.QUALITY
    assert config.catalog.author == "someone"
    assert config.catalog.min_quality
    assert config.catalog.limit == 50


def test_invalid_yaml(tmp_path):
    path = tmp_path / "modelfit.yaml"
    path.write_text("gpu: [unclosed")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(path)


def test_top_level_must_be_mapping(tmp_path):
    path = tmp_path / "modelfit.yaml"
    path.write_text("- just\n- a list\n")

    with pytest.raises(ConfigError, match="mapping"):
        load_config(path)


@pytest.mark.parametrize(
    "content",
    [
        "gpu:\n  tier: 7\n",
        "selection:\n  mode: fastest\n",
        "gpu:\n  partial_strategy: random\n",
        "engine:\n  temperature: 3.5\n",
    ],
)
def test_validation_errors(tmp_path, content):
    path = tmp_path / "modelfit.yaml"
    path.write_text(content)

    with pytest.raises(ConfigError, match="validation failed"):
        load_config(path)


def test_save_and_reload(tmp_path):
    path = tmp_path / "nested" / "modelfit.yaml"
    config = ModelfitConfig()
    config.selection.mode = TradeoffMode.SPEED
    config.gpu.name = "Apple M2"

    save_config(config, path)
    reloaded = load_config(path)

    assert reloaded == config
    assert "mode: speed" in path.read_text()


def test_quality_ranking_implies_leaderboard():
    config = ModelfitConfig.model_validate({"catalog": {"rank_by_quality": True}})

    ranker = create_ranker(config)

    assert ranker.rank_by_quality
    assert not ranker.min_quality
    assert isinstance(ranker.leaderboard, LeaderboardClient)
    assert create_ranker(ModelfitConfig()).leaderboard is None
