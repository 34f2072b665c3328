"""Rank catalog models against a memory budget and a trade-off mode."""

import logging
import time
from collections.abc import Iterable, Iterator

from modelfit.catalog.candidate import ModelCandidate, TradeoffMode
from modelfit.catalog.client import CatalogClient, CatalogError
from modelfit.catalog.leaderboard import (
    LeaderboardClient,
    enrich,
    meets_quality,
    sort_by_quality,
)

logger = logging.getLogger(__name__)

# Candidates must stay under this share of the budget
SAFETY_MARGIN = 0.9
MS_PER_DAY = 86_400_000

FALLBACK_MODELS = (
    ModelCandidate("Llama-3-8B-Instruct-q4f16_1-MLC", params_b=8, estimated_memory_mb=5600),
    ModelCandidate("Phi-3-mini-4k-instruct-q4f16_1-MLC", params_b=3.8, estimated_memory_mb=2660),
    ModelCandidate("gemma-2-9b-it-q4f16_1-MLC", params_b=9, estimated_memory_mb=6300),
)


def current_time_ms() -> int:
    return int(time.time() * 1000)


def fits(candidate: ModelCandidate, budget_mb: float) -> bool:
    """True if the candidate stays strictly under 90% of the budget."""
    return candidate.estimated_memory_mb < budget_mb * SAFETY_MARGIN


def score(candidate: ModelCandidate, mode: TradeoffMode, now_ms: int) -> float:
    """Blend recency and smallness according to the mode's recency weight.

    ``w * (1 / age_days) + (1 - w) * (1 / params_b)`` with ``age_days``
    floored at one day. A candidate with no known modification time adds
    nothing to the recency term.
    """
    weight = mode.recency_weight
    recency = 0.0
    if candidate.last_modified_ms is not None:
        age_days = max(1.0, (now_ms - candidate.last_modified_ms) / MS_PER_DAY)
        recency = 1.0 / age_days
    return weight * recency + (1.0 - weight) * (1.0 / candidate.params_b)


def rank_candidates(
    candidates: Iterable[ModelCandidate],
    budget_mb: float | None,
    mode: TradeoffMode | str,
    now_ms: int | None = None,
) -> Iterator[ModelCandidate]:
    """Filter candidates by budget and order them best first.

    Ties on score prefer a higher quality score, then more parameters,
    then the identifier.

    Args:
        candidates: Candidates to rank
        budget_mb: Memory budget; None disables the memory filter
        mode: Trade-off mode
        now_ms: Reference time in epoch ms (current time if None)

    Returns:
        Single-pass iterator over the ranked candidates
    """
    mode = TradeoffMode(mode)
    if now_ms is None:
        now_ms = current_time_ms()

    survivors = [c for c in candidates if budget_mb is None or fits(c, budget_mb)]

    def sort_key(candidate: ModelCandidate) -> tuple:
        quality = candidate.quality_score
        return (
            -score(candidate, mode, now_ms),
            -quality if quality is not None else float("inf"),
            -candidate.params_b,
            candidate.id,
        )

    return iter(sorted(survivors, key=sort_key))


class CatalogRanker:
    """Fetches the catalog once per call and ranks what fits.

    Network failures are logged and produce an empty ranking; retrying or
    falling back is left to the caller.
    """

    def __init__(
        self,
        client: CatalogClient | None = None,
        leaderboard: LeaderboardClient | None = None,
        min_quality: bool = False,
        rank_by_quality: bool = False,
    ):
        """Initialize the ranker.

        Args:
            client: Catalog client (default catalog if None)
            leaderboard: Score source; candidates are not enriched if None
            min_quality: Drop candidates below the mode's quality threshold
            rank_by_quality: Order fitting candidates by leaderboard score for
                the mode instead of by recency and size
        """
        self.client = client or CatalogClient()
        self.leaderboard = leaderboard
        self.min_quality = min_quality
        self.rank_by_quality = rank_by_quality

    async def fetch_candidates(self) -> list[ModelCandidate]:
        """Fetch candidates, returning [] if the catalog is unreachable."""
        try:
            candidates = await self.client.fetch_candidates()
        except CatalogError as e:
            logger.warning("Catalog unavailable: %s", e)
            return []

        if self.leaderboard is not None and candidates:
            candidates = enrich(candidates, await self.leaderboard.fetch_entries())
        return candidates

    async def rank(
        self, budget_mb: float | None, mode: TradeoffMode | str
    ) -> Iterator[ModelCandidate]:
        """Rank the live catalog for a budget and mode."""
        mode = TradeoffMode(mode)
        candidates = await self.fetch_candidates()
        if self.min_quality:
            candidates = [c for c in candidates if meets_quality(c, mode)]
        ranked = rank_candidates(candidates, budget_mb, mode)
        if self.rank_by_quality:
            return iter(sort_by_quality(ranked, mode))
        return ranked
