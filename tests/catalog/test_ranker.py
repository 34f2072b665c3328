"""Tests for ranking catalog candidates."""

from unittest.mock import AsyncMock

import pytest

from modelfit.catalog.candidate import ModelCandidate, TradeoffMode
from modelfit.catalog.client import CatalogClient, CatalogError
from modelfit.catalog.leaderboard import FALLBACK_LEADERBOARD, LeaderboardClient
from modelfit.catalog.ranker import (
    FALLBACK_MODELS,
    MS_PER_DAY,
    CatalogRanker,
    fits,
    rank_candidates,
    score,
)

NOW = 1_000 * MS_PER_DAY


def _candidate(model_id, age_days=None, quality=None, memory=None):
    last_modified = None if age_days is None else NOW - int(age_days * MS_PER_DAY)
    candidate = ModelCandidate.from_id(model_id, last_modified_ms=last_modified)
    if memory is not None:
        candidate = ModelCandidate(
            candidate.id, candidate.params_b, memory, candidate.last_modified_ms
        )
    return candidate.with_quality(quality)


def _ids(ranked):
    return [c.id for c in ranked]


# -- Memory filter ------------------------------------------------------------


def test_fits_is_strict_at_the_margin():
    candidate = _candidate("Model-7B-q4f16_1-MLC", memory=5400)

    assert not fits(candidate, 6000)
    assert fits(candidate, 6001)


def test_qwen_7b_against_two_budgets():
    qwen = ModelCandidate.from_id("Qwen2.5-7B-Instruct-q4f16_1-MLC")
    assert qwen.estimated_memory_mb == pytest.approx(4900)

    assert _ids(rank_candidates([qwen], 6000, "balanced", NOW)) == [qwen.id]
    assert _ids(rank_candidates([qwen], 5000, "balanced", NOW)) == []


def test_no_budget_disables_filter():
    big = _candidate("Llama-3.1-70B-Instruct-q4f16_1-MLC")
    assert _ids(rank_candidates([big], None, "speed", NOW)) == [big.id]


# -- Scoring ------------------------------------------------------------------


def test_score_formula():
    candidate = _candidate("Model-4B-q4f16_1-MLC", age_days=2)

    assert score(candidate, TradeoffMode.SPEED, NOW) == pytest.approx(0.25)
    assert score(candidate, TradeoffMode.QUALITY, NOW) == pytest.approx(0.5)
    assert score(candidate, TradeoffMode.BALANCED, NOW) == pytest.approx(0.375)


def test_age_floored_at_one_day():
    fresh = _candidate("Model-4B-q4f16_1-MLC", age_days=0.1)
    future = _candidate("Model-4B-q4f16_1-MLC", age_days=-3)

    assert score(fresh, TradeoffMode.QUALITY, NOW) == pytest.approx(1.0)
    assert score(future, TradeoffMode.QUALITY, NOW) == pytest.approx(1.0)


def test_unknown_recency_contributes_nothing():
    candidate = _candidate("Model-4B-q4f16_1-MLC")
    assert score(candidate, TradeoffMode.QUALITY, NOW) == 0.0
    assert score(candidate, TradeoffMode.BALANCED, NOW) == pytest.approx(0.125)


def test_speed_mode_prefers_smaller_models():
    small = _candidate("Model-1B-q4f16_1-MLC", age_days=10)
    large = _candidate("Model-8B-q4f16_1-MLC", age_days=10)

    assert _ids(rank_candidates([large, small], 100_000, "speed", NOW)) == [small.id, large.id]


def test_quality_mode_never_prefers_smaller_at_equal_recency():
    small = _candidate("Model-1B-q4f16_1-MLC", age_days=10)
    large = _candidate("Model-8B-q4f16_1-MLC", age_days=10)

    ranked = _ids(rank_candidates([small, large], 100_000, "quality", NOW))

    assert ranked == [large.id, small.id]


def test_quality_mode_prefers_recent_models():
    old = _candidate("Model-1B-q4f16_1-MLC", age_days=300)
    recent = _candidate("Model-8B-q4f16_1-MLC", age_days=2)

    assert _ids(rank_candidates([old, recent], 100_000, "quality", NOW))[0] == recent.id


def test_ties_prefer_quality_score_then_id():
    a = _candidate("Alpha-8B-q4f16_1-MLC", age_days=5)
    b = _candidate("Beta-8B-q4f16_1-MLC", age_days=5, quality=70)
    c = _candidate("Gamma-8B-q4f16_1-MLC", age_days=5)

    ranked = _ids(rank_candidates([c, a, b], 100_000, "balanced", NOW))

    assert ranked == [b.id, a.id, c.id]


def test_ranking_is_single_pass():
    ranked = rank_candidates(FALLBACK_MODELS, None, "speed", NOW)

    assert next(ranked).id == "Phi-3-mini-4k-instruct-q4f16_1-MLC"
    assert len(list(ranked)) == 2
    assert list(ranked) == []


# -- CatalogRanker ------------------------------------------------------------


@pytest.mark.asyncio
async def test_catalog_ranker_ranks_fetched_candidates():
    client = CatalogClient()
    client.fetch_candidates = AsyncMock(
        return_value=[
            _candidate("Model-8B-q4f16_1-MLC"),
            _candidate("Model-1B-q4f16_1-MLC"),
            _candidate("Model-70B-q4f16_1-MLC"),
        ]
    )

    ranked = await CatalogRanker(client).rank(8192, TradeoffMode.SPEED)

    assert _ids(ranked) == ["Model-1B-q4f16_1-MLC", "Model-8B-q4f16_1-MLC"]


@pytest.mark.asyncio
async def test_catalog_ranker_network_failure_is_empty():
    client = CatalogClient()
    client.fetch_candidates = AsyncMock(side_effect=CatalogError("offline"))

    ranked = await CatalogRanker(client).rank(24576, "balanced")

    assert list(ranked) == []


@pytest.mark.asyncio
async def test_catalog_ranker_min_quality_filter():
    client = CatalogClient()
    client.fetch_candidates = AsyncMock(
        return_value=[
            ModelCandidate.from_id("gemma-2-9b-it-q4f16_1-MLC"),
            ModelCandidate.from_id("TinyLlama-1.1B-Chat-v1.0-q4f16_1-MLC"),
            ModelCandidate.from_id("Llama-3.2-1B-Instruct-q4f16_1-MLC"),
        ]
    )
    leaderboard = LeaderboardClient()
    leaderboard.fetch_entries = AsyncMock(return_value=list(FALLBACK_LEADERBOARD))

    ranker = CatalogRanker(client, leaderboard=leaderboard, min_quality=True)
    ranked = list(await ranker.rank(None, "balanced"))

    assert [c.id for c in ranked] == ["gemma-2-9b-it-q4f16_1-MLC"]
    assert ranked[0].quality_score == 74


@pytest.mark.asyncio
async def test_catalog_ranker_orders_by_quality_when_enabled():
    candidates = [
        ModelCandidate("Unscored-3B", 3, 2100),
        ModelCandidate("Small-1B", 1, 700, quality_score=40),
        ModelCandidate("Mid-4B", 4, 2800, quality_score=82),
        ModelCandidate("Large-14B", 14, 9800, quality_score=90),
    ]
    client = CatalogClient()
    client.fetch_candidates = AsyncMock(return_value=candidates)

    by_quality = CatalogRanker(client, rank_by_quality=True)
    default = CatalogRanker(client)

    ranked = [c.id for c in await by_quality.rank(5000, "speed")]

    # Large-14B needs 9800 MB and stays filtered out
    assert ranked == ["Mid-4B", "Small-1B", "Unscored-3B"]
    assert [c.id for c in await default.rank(5000, "speed")][0] == "Small-1B"
