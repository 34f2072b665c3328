"""Quality scores from the Open LLM Leaderboard."""

import logging
import math
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import httpx

from modelfit.catalog.candidate import ModelCandidate, TradeoffMode
from modelfit.catalog.client import short_id

logger = logging.getLogger(__name__)

LEADERBOARD_URL = "https://huggingface.co/api/datasets/open-llm-leaderboard/results"

QUALITY_THRESHOLDS = {
    TradeoffMode.SPEED: 50,
    TradeoffMode.BALANCED: 60,
    TradeoffMode.QUALITY: 70,
}

_RUNTIME_SUFFIXES = (
    re.compile(r"-q\d+f\d+_\d+-MLC$"),
    re.compile(r"-MLC$"),
    re.compile(r"-GGUF$"),
    re.compile(r"-AWQ$"),
    re.compile(r"-GPTQ$"),
)
_FUZZY_STRIP = re.compile(r"[-_.]")


@dataclass(frozen=True)
class LeaderboardEntry:
    """Aggregate leaderboard result for one base model."""

    model: str
    score: float
    params_b: float | None = None
    license: str | None = None


# Known results, used whenever the dataset cannot be read
FALLBACK_LEADERBOARD = (
    LeaderboardEntry("Llama-3.1-70B-Instruct", 85, 70, "llama3.1"),
    LeaderboardEntry("Qwen2.5-72B-Instruct", 84, 72, "apache-2.0"),
    LeaderboardEntry("Llama-3.1-8B-Instruct", 78, 8, "llama3.1"),
    LeaderboardEntry("Qwen2.5-14B-Instruct", 81, 14, "apache-2.0"),
    LeaderboardEntry("Qwen2.5-32B-Instruct", 83, 32, "apache-2.0"),
    LeaderboardEntry("gemma-2-27b-it", 80, 27, "gemma"),
    LeaderboardEntry("Yi-1.5-34B-Chat", 79, 34, "yi"),
    LeaderboardEntry("Qwen2.5-7B-Instruct", 75, 7, "apache-2.0"),
    LeaderboardEntry("gemma-2-9b-it", 74, 9, "gemma"),
    LeaderboardEntry("Llama-3-8B-Instruct", 72, 8, "llama3"),
    LeaderboardEntry("Yi-1.5-9B-Chat", 71, 9, "yi"),
    LeaderboardEntry("Qwen2.5-3B-Instruct", 68, 3, "apache-2.0"),
    LeaderboardEntry("Phi-3-mini-4k-instruct", 65, 3.8, "mit"),
    LeaderboardEntry("Qwen2.5-1.5B-Instruct", 62, 1.5, "apache-2.0"),
    LeaderboardEntry("TinyLlama-1.1B-Chat-v1.0", 45, 1.1, "apache-2.0"),
)


def min_quality_score(mode: TradeoffMode | str) -> int:
    """Minimum leaderboard score a candidate needs in ``mode``."""
    return QUALITY_THRESHOLDS[TradeoffMode(mode)]


def meets_quality(candidate: ModelCandidate, mode: TradeoffMode | str) -> bool:
    if candidate.quality_score is None:
        return False
    return candidate.quality_score >= min_quality_score(mode)


def quality_value(candidate: ModelCandidate, mode: TradeoffMode | str) -> float | None:
    """Leaderboard score weighed against model size for ``mode``.

    Speed divides the score by the square root of the parameter count,
    balanced by ``log(params_b + 1)``; quality uses the raw score.
    """
    quality = candidate.quality_score
    if quality is None:
        return None
    mode = TradeoffMode(mode)
    if mode == TradeoffMode.SPEED:
        return quality / math.sqrt(candidate.params_b)
    if mode == TradeoffMode.BALANCED:
        return quality / math.log(candidate.params_b + 1)
    return quality


def sort_by_quality(
    candidates: Iterable[ModelCandidate], mode: TradeoffMode | str
) -> list[ModelCandidate]:
    """Order candidates by ``quality_value``, best first.

    Unscored candidates go last and, like equal values, keep their order.
    """

    def sort_key(candidate: ModelCandidate) -> tuple:
        value = quality_value(candidate, mode)
        return (value is None, -value if value is not None else 0.0)

    return sorted(candidates, key=sort_key)


def base_model_name(model_id: str) -> str:
    """Strip runtime packaging suffixes from a model identifier.

    ``"Llama-3.1-8B-Instruct-q4f16_1-MLC"`` becomes ``"Llama-3.1-8B-Instruct"``.
    """
    name = model_id
    for pattern in _RUNTIME_SUFFIXES:
        name = pattern.sub("", name)
    return name


def _fuzzy_key(name: str) -> str:
    return _FUZZY_STRIP.sub("", name.lower())


def find_fuzzy_match(
    name: str, entries: Iterable[LeaderboardEntry]
) -> LeaderboardEntry | None:
    """First entry whose squashed name contains, or is contained in, ``name``."""
    key = _fuzzy_key(name)
    if not key:
        return None
    for entry in entries:
        entry_key = _fuzzy_key(entry.model)
        if entry_key in key or key in entry_key:
            return entry
    return None


def find_entry(
    model_id: str,
    entries: list[LeaderboardEntry],
    by_name: dict[str, LeaderboardEntry] | None = None,
) -> LeaderboardEntry | None:
    """Find the leaderboard entry for a catalog model.

    Tries the exact name, then the base name, then a fuzzy match.
    """
    if by_name is None:
        by_name = _index(entries)
    name = short_id(model_id)
    base = base_model_name(name)
    entry = by_name.get(name) or by_name.get(base)
    if entry is None:
        entry = find_fuzzy_match(base, entries)
    return entry


def enrich(
    candidates: Iterable[ModelCandidate], entries: Iterable[LeaderboardEntry]
) -> list[ModelCandidate]:
    """Attach leaderboard scores; unmatched candidates keep ``quality_score=None``."""
    entries = list(entries)
    by_name = _index(entries)
    enriched = []
    for candidate in candidates:
        entry = find_entry(candidate.id, entries, by_name)
        if entry is None:
            logger.debug("No leaderboard score for %s", candidate.id)
            enriched.append(candidate)
        else:
            enriched.append(candidate.with_quality(entry.score))
    return enriched


def parse_entries(data: Any) -> list[LeaderboardEntry]:
    """Read ``[{"model": ..., "score": ...}, ...]`` records, skipping bad ones."""
    if not isinstance(data, list):
        return []
    entries = []
    for record in data:
        if not isinstance(record, dict):
            continue
        model = record.get("model")
        score = record.get("score")
        if not isinstance(model, str) or not isinstance(score, (int, float)):
            continue
        entries.append(
            LeaderboardEntry(
                model=model,
                score=float(score),
                params_b=record.get("params"),
                license=record.get("license"),
            )
        )
    return entries


def _index(entries: Iterable[LeaderboardEntry]) -> dict[str, LeaderboardEntry]:
    by_name: dict[str, LeaderboardEntry] = {}
    for entry in entries:
        by_name.setdefault(entry.model, entry)
    return by_name


class LeaderboardClient:
    """Loads leaderboard scores, falling back to the bundled table."""

    def __init__(self, url: str = LEADERBOARD_URL, timeout: float = 10.0):
        self.url = url
        self.timeout = timeout

    async def fetch_entries(self) -> list[LeaderboardEntry]:
        """Fetch leaderboard entries.

        The endpoint is expected to serve score records; anything else
        (including the dataset's own metadata) falls back to
        ``FALLBACK_LEADERBOARD``. Never raises.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.url)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.warning("Failed to fetch leaderboard data, using bundled scores: %s", e)
            return list(FALLBACK_LEADERBOARD)

        entries = parse_entries(data)
        if not entries:
            logger.info("Leaderboard response has no score records, using bundled scores")
            return list(FALLBACK_LEADERBOARD)

        logger.debug("Loaded %d leaderboard entries", len(entries))
        return entries
