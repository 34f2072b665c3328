"""Catalog model candidates and parameter-count parsing."""

import logging
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

# Rough footprint of 4-bit quantized weights
MB_PER_BILLION_PARAMS = 700

_PARAM_COUNT = re.compile(r"(\d+(?:\.\d+)?)[bB](?![a-zA-Z0-9])")


class TradeoffMode(str, Enum):
    """How selection trades inference speed against output quality."""

    SPEED = "speed"
    BALANCED = "balanced"
    QUALITY = "quality"

    @property
    def recency_weight(self) -> float:
        """Weight of the recency term in the ranking score."""
        return _RECENCY_WEIGHTS[self]


_RECENCY_WEIGHTS = {
    TradeoffMode.SPEED: 0.0,
    TradeoffMode.BALANCED: 0.5,
    TradeoffMode.QUALITY: 1.0,
}


def parse_param_count(model_id: str) -> float | None:
    """Extract the parameter count, in billions, from a model identifier.

    Takes the first decimal number directly followed by ``B`` (or ``b``)
    that is not itself followed by a letter or digit, so
    ``"Qwen2.5-7B-Instruct-q4f16_1-MLC"`` gives 7.0 and
    ``"gemma-2-9b-it-q4f16_1-MLC"`` gives 9.0.

    Args:
        model_id: Catalog model identifier

    Returns:
        Parameter count in billions, or None if absent or zero
    """
    match = _PARAM_COUNT.search(model_id)
    if match is None:
        return None
    value = float(match.group(1))
    return value if value > 0 else None


@dataclass(frozen=True)
class ModelCandidate:
    """A catalog model that may be loaded.

    Attributes:
        id: Model identifier without the owner prefix
        params_b: Parameter count in billions
        estimated_memory_mb: Estimated memory needed to load the model
        last_modified_ms: Last-modified time as epoch milliseconds, if known
        quality_score: Leaderboard score, if known
    """

    id: str
    params_b: float
    estimated_memory_mb: float
    last_modified_ms: int | None = None
    quality_score: float | None = None

    def __post_init__(self) -> None:
        if self.params_b <= 0:
            raise ValueError(f"params_b must be positive, got {self.params_b}")

    @classmethod
    def from_id(
        cls,
        model_id: str,
        last_modified_ms: int | None = None,
        mb_per_billion: float = MB_PER_BILLION_PARAMS,
    ) -> "ModelCandidate | None":
        """Build a candidate from its identifier.

        Returns:
            The candidate, or None when no parameter count can be parsed
        """
        params = parse_param_count(model_id)
        if params is None:
            logger.debug("Discarding %s: no parameter count in identifier", model_id)
            return None
        return cls(
            id=model_id,
            params_b=params,
            estimated_memory_mb=params * mb_per_billion,
            last_modified_ms=last_modified_ms,
        )

    def with_quality(self, score: float | None) -> "ModelCandidate":
        return replace(self, quality_score=score)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "params_b": self.params_b,
            "estimated_memory_mb": self.estimated_memory_mb,
            "last_modified_ms": self.last_modified_ms,
            "quality_score": self.quality_score,
        }
