"""Factory functions for building components from configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from modelfit.catalog.client import CatalogClient
from modelfit.catalog.leaderboard import LeaderboardClient
from modelfit.catalog.ranker import CatalogRanker
from modelfit.gpu.database import load_database
from modelfit.gpu.resolver import GPUResolver
from modelfit.llm.openai_compat import OpenAICompatibleEngine
from modelfit.selection.policy import SelectionPolicy

if TYPE_CHECKING:
    from modelfit.config.schema import ModelfitConfig


def create_resolver(config: ModelfitConfig) -> GPUResolver:
    """Create a GPU resolver over the configured reference database.

    Raises:
        OSError: If a configured database file cannot be read
        json.JSONDecodeError: If a configured database file is not JSON
    """
    database = load_database(config.gpu.database_path)
    return GPUResolver(database, partial_strategy=config.gpu.partial_strategy)


def create_ranker(config: ModelfitConfig) -> CatalogRanker:
    """Create a catalog ranker from ``config.catalog``."""
    catalog = config.catalog
    client = CatalogClient(
        base_url=catalog.base_url,
        author=catalog.author,
        limit=catalog.limit,
        quantization=catalog.quantization,
        library=catalog.library,
        timeout=catalog.timeout,
        mb_per_billion=catalog.mb_per_billion,
    )
    # Quality filtering and ordering need scores, so both imply enrichment
    leaderboard = None
    if catalog.enrich_scores or catalog.min_quality or catalog.rank_by_quality:
        leaderboard = LeaderboardClient(timeout=catalog.timeout)
    return CatalogRanker(
        client,
        leaderboard=leaderboard,
        min_quality=catalog.min_quality,
        rank_by_quality=catalog.rank_by_quality,
    )


def create_policy(config: ModelfitConfig, resolver: GPUResolver | None = None) -> SelectionPolicy:
    """Create the selection policy, reusing ``resolver`` if given."""
    return SelectionPolicy(resolver or create_resolver(config), create_ranker(config))


def create_engine(config: ModelfitConfig) -> OpenAICompatibleEngine:
    """Create the inference engine from ``config.engine``."""
    engine = config.engine
    return OpenAICompatibleEngine(
        base_url=engine.base_url,
        api_key=engine.api_key,
        timeout=engine.timeout,
        max_retries=engine.max_retries,
        temperature=engine.temperature,
        max_tokens=engine.max_tokens,
    )
