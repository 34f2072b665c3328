"""Shared fixtures for CLI tests."""

from pathlib import Path
from unittest.mock import patch

import pytest

from modelfit.catalog.candidate import ModelCandidate


@pytest.fixture
def tmp_config_path(tmp_path: Path) -> Path:
    """Provide a config path that does not exist, so defaults apply."""
    return tmp_path / "modelfit.yaml"


@pytest.fixture
def catalog_candidates():
    return [
        ModelCandidate.from_id("Qwen2.5-7B-Instruct-q4f16_1-MLC", 1714521600000),
        ModelCandidate.from_id("Llama-3.2-1B-Instruct-q4f16_1-MLC", 1714521600000),
        ModelCandidate.from_id("Llama-3.1-70B-Instruct-q4f16_1-MLC", 1714521600000),
    ]


@pytest.fixture
def mock_catalog(fake_ranker, catalog_candidates):
    """Serve a fixed catalog to every command."""
    ranker = fake_ranker(catalog_candidates)
    with (
        patch("modelfit.factory.create_ranker", return_value=ranker),
        patch("modelfit.cli.select_cmd.create_ranker", return_value=ranker),
    ):
        yield ranker


@pytest.fixture
def mock_empty_catalog(fake_ranker):
    """Serve an empty catalog, as when the catalog is unreachable."""
    ranker = fake_ranker([])
    with (
        patch("modelfit.factory.create_ranker", return_value=ranker),
        patch("modelfit.cli.select_cmd.create_ranker", return_value=ranker),
    ):
        yield ranker
