"""Remote model catalog: fetching, scoring and ranking candidates."""

from modelfit.catalog.candidate import (
    MB_PER_BILLION_PARAMS,
    ModelCandidate,
    TradeoffMode,
    parse_param_count,
)
from modelfit.catalog.client import CatalogClient, CatalogError
from modelfit.catalog.leaderboard import LeaderboardClient, enrich, min_quality_score
from modelfit.catalog.ranker import FALLBACK_MODELS, CatalogRanker, fits, rank_candidates, score

__all__ = [
    "FALLBACK_MODELS",
    "MB_PER_BILLION_PARAMS",
    "CatalogClient",
    "CatalogError",
    "CatalogRanker",
    "LeaderboardClient",
    "ModelCandidate",
    "TradeoffMode",
    "enrich",
    "fits",
    "min_quality_score",
    "parse_param_count",
    "rank_candidates",
    "score",
]
