"""Choose the model to load for a GPU and a trade-off mode."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from modelfit.catalog.candidate import ModelCandidate, TradeoffMode
from modelfit.catalog.ranker import FALLBACK_MODELS, CatalogRanker, rank_candidates
from modelfit.gpu.profile import CapabilityProfile
from modelfit.gpu.resolver import GPUResolver

logger = logging.getLogger(__name__)

STATUS_UNIDENTIFIED = "Insufficient VRAM: GPU could not be identified."
STATUS_INSUFFICIENT = "Insufficient VRAM."
STATUS_FALLBACK = "Using fallback models."


@dataclass
class SelectionResult:
    """Outcome of one selection attempt.

    ``chosen_model_id`` is None exactly when no model can be loaded; the
    reason is in ``status``.
    """

    chosen_model_id: str | None
    candidates: list[ModelCandidate] = field(default_factory=list)
    profile: CapabilityProfile | None = None
    budget_mb: int | None = None
    used_fallback: bool = False
    status: str = ""

    @property
    def insufficient(self) -> bool:
        return self.chosen_model_id is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "chosen_model_id": self.chosen_model_id,
            "candidates": [c.to_dict() for c in self.candidates],
            "profile": self.profile.to_dict() if self.profile is not None else None,
            "budget_mb": self.budget_mb,
            "used_fallback": self.used_fallback,
            "insufficient": self.insufficient,
            "status": self.status,
        }


class SelectionPolicy:
    """Resolves the GPU, ranks the catalog and picks the top candidate.

    When the live catalog yields nothing that fits, the built-in fallback
    models are ranked against the same budget. Lookup, parse and network
    problems never raise out of ``select``.
    """

    def __init__(
        self,
        resolver: GPUResolver,
        ranker: CatalogRanker,
        fallback_models: Iterable[ModelCandidate] = FALLBACK_MODELS,
    ):
        self.resolver = resolver
        self.ranker = ranker
        self.fallback_models = tuple(fallback_models)

    async def select(
        self,
        gpu_name: str,
        tier: int,
        mode: TradeoffMode | str = TradeoffMode.BALANCED,
    ) -> SelectionResult:
        """Select a model for this GPU.

        Args:
            gpu_name: GPU identifier from the hardware probe
            tier: Performance tier from the hardware probe
            mode: Trade-off between speed and quality

        Returns:
            SelectionResult with the chosen model, or an insufficient result
        """
        mode = TradeoffMode(mode)

        profile = self.resolver.resolve_or_estimate(gpu_name, tier)
        if profile is None:
            logger.warning("No GPU name available, cannot select a model")
            return SelectionResult(chosen_model_id=None, status=STATUS_UNIDENTIFIED)

        budget_mb = profile.memory_mb
        logger.info("Memory budget for %r: %d MB", gpu_name, budget_mb)

        candidates = list(await self.ranker.rank(budget_mb, mode))
        used_fallback = False

        if not candidates:
            logger.info("No catalog model fits %d MB, trying fallback models", budget_mb)
            candidates = list(rank_candidates(self.fallback_models, budget_mb, mode))
            used_fallback = True

        if not candidates:
            return SelectionResult(
                chosen_model_id=None,
                profile=profile,
                budget_mb=budget_mb,
                used_fallback=used_fallback,
                status=STATUS_INSUFFICIENT,
            )

        chosen = candidates[0].id
        status = f"Selected {chosen}."
        if used_fallback:
            status = f"{STATUS_FALLBACK} {status}"
        logger.info(status)

        return SelectionResult(
            chosen_model_id=chosen,
            candidates=candidates,
            profile=profile,
            budget_mb=budget_mb,
            used_fallback=used_fallback,
            status=status,
        )
