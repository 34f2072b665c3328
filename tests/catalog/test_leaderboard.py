"""Tests for leaderboard quality scores."""

import math

import pytest
import respx
from httpx import Response

from modelfit.catalog.candidate import ModelCandidate, TradeoffMode
from modelfit.catalog.leaderboard import (
    FALLBACK_LEADERBOARD,
    LEADERBOARD_URL,
    LeaderboardClient,
    LeaderboardEntry,
    base_model_name,
    enrich,
    find_entry,
    meets_quality,
    min_quality_score,
    parse_entries,
    quality_value,
    sort_by_quality,
)


def _candidate(model_id, score=None):
    return ModelCandidate.from_id(model_id).with_quality(score)


def test_base_model_name():
    assert base_model_name("Llama-3.1-8B-Instruct-q4f16_1-MLC") == "Llama-3.1-8B-Instruct"
    assert base_model_name("Mistral-7B-Instruct-v0.3-MLC") == "Mistral-7B-Instruct-v0.3"
    assert base_model_name("Qwen2.5-7B-Instruct-AWQ") == "Qwen2.5-7B-Instruct"
    assert base_model_name("gemma-2-9b-it") == "gemma-2-9b-it"


def test_find_entry_exact_base_and_fuzzy():
    entries = list(FALLBACK_LEADERBOARD)

    assert find_entry("gemma-2-9b-it", entries).score == 74
    assert find_entry("mlc-ai/gemma-2-9b-it-q4f16_1-MLC", entries).score == 74
    # Squashed names: "metallama318binstruct" contains "llama318binstruct"
    fuzzy = find_entry("Meta-Llama-3.1-8B-Instruct-q4f16_1-MLC", entries)
    assert fuzzy.model == "Llama-3.1-8B-Instruct"


def test_find_entry_miss():
    assert find_entry("Llama-3.2-1B-Instruct-q4f16_1-MLC", list(FALLBACK_LEADERBOARD)) is None


def test_enrich_keeps_unmatched_candidates():
    candidates = [
        ModelCandidate.from_id("gemma-2-9b-it-q4f16_1-MLC"),
        ModelCandidate.from_id("Llama-3.2-1B-Instruct-q4f16_1-MLC"),
    ]

    enriched = enrich(candidates, FALLBACK_LEADERBOARD)

    assert [c.id for c in enriched] == [c.id for c in candidates]
    assert enriched[0].quality_score == 74
    assert enriched[1].quality_score is None


def test_quality_thresholds():
    assert min_quality_score(TradeoffMode.SPEED) == 50
    assert min_quality_score("balanced") == 60
    assert min_quality_score(TradeoffMode.QUALITY) == 70

    assert meets_quality(_candidate("gemma-2-9b-it-q4f16_1-MLC", 60), "balanced")
    assert not meets_quality(_candidate("gemma-2-9b-it-q4f16_1-MLC", 65), "quality")
    assert not meets_quality(_candidate("gemma-2-9b-it-q4f16_1-MLC"), "speed")


def test_parse_entries_skips_bad_records():
    data = [
        {"model": "Custom-7B", "score": 77.5, "params": 7, "license": "mit"},
        {"model": "NoScore-3B"},
        {"score": 50},
        "garbage",
    ]

    assert parse_entries(data) == [LeaderboardEntry("Custom-7B", 77.5, 7, "mit")]
    assert parse_entries({"model": "x", "score": 1}) == []


@pytest.mark.asyncio
@respx.mock
async def test_fetch_entries_from_records():
    respx.get(LEADERBOARD_URL).mock(
        return_value=Response(200, json=[{"model": "Custom-7B", "score": 77}])
    )

    entries = await LeaderboardClient().fetch_entries()

    assert entries == [LeaderboardEntry("Custom-7B", 77.0)]


@pytest.mark.asyncio
@respx.mock
async def test_fetch_entries_falls_back_on_error():
    respx.get(LEADERBOARD_URL).mock(return_value=Response(500))

    entries = await LeaderboardClient().fetch_entries()

    assert entries == list(FALLBACK_LEADERBOARD)


@pytest.mark.asyncio
@respx.mock
async def test_fetch_entries_falls_back_on_dataset_metadata():
    respx.get(LEADERBOARD_URL).mock(
        return_value=Response(200, json={"id": "open-llm-leaderboard/results"})
    )

    entries = await LeaderboardClient().fetch_entries()

    assert len(entries) == len(FALLBACK_LEADERBOARD)


def _sized(model_id, params_b, score=None):
    return ModelCandidate(model_id, params_b, params_b * 700).with_quality(score)


@pytest.mark.parametrize(
    "mode,expected",
    [
        (TradeoffMode.SPEED, ["Mid-4B", "Small-1B", "Large-14B", "Unscored-3B"]),
        (TradeoffMode.BALANCED, ["Small-1B", "Mid-4B", "Large-14B", "Unscored-3B"]),
        (TradeoffMode.QUALITY, ["Large-14B", "Mid-4B", "Small-1B", "Unscored-3B"]),
    ],
)
def test_sort_by_quality_per_mode(mode, expected):
    candidates = [
        _sized("Unscored-3B", 3),
        _sized("Small-1B", 1, 40),
        _sized("Mid-4B", 4, 82),
        _sized("Large-14B", 14, 90),
    ]

    assert [c.id for c in sort_by_quality(candidates, mode)] == expected


def test_quality_value():
    small = _sized("Small-1B", 1, 40)

    assert quality_value(small, "speed") == 40
    assert quality_value(small, "balanced") == pytest.approx(40 / math.log(2))
    assert quality_value(_sized("Mid-4B", 4, 82), "speed") == pytest.approx(41)
    assert quality_value(_sized("Large-14B", 14, 90), "quality") == 90
    assert quality_value(_sized("Unscored-3B", 3), "quality") is None
