"""Resolve free-text GPU identifiers to capability profiles."""

import logging
from typing import Literal

from modelfit.gpu import rules
from modelfit.gpu.database import ReferenceDatabase, load_default
from modelfit.gpu.normalize import variations
from modelfit.gpu.profile import (
    CapabilityProfile,
    GPUMemory,
    PlatformClass,
    Vendor,
    clamp_tier,
)

logger = logging.getLogger(__name__)

PartialStrategy = Literal["first", "best"]


class GPUResolver:
    """Looks GPU names up in the reference database, estimating on a miss.

    Lookup runs in two passes over the name's variations: an exact key
    match, then a partial (substring) match. The partial pass either takes
    the first matching key in database order (``"first"``) or the key with
    the longest overlap (``"best"``, ties broken by database order).

    No method raises for any string input.
    """

    def __init__(
        self,
        database: ReferenceDatabase | None = None,
        partial_strategy: PartialStrategy = "best",
    ):
        """Initialize the resolver.

        Args:
            database: Reference database (bundled database if None)
            partial_strategy: How the partial-match pass picks among candidates
        """
        self.database = database if database is not None else load_default()
        self.partial_strategy = partial_strategy

    def resolve(self, raw_name: str) -> CapabilityProfile | None:
        """Look a GPU up in the database.

        Args:
            raw_name: GPU identifier as reported by the platform

        Returns:
            The stored profile, or None on an empty name or a miss
        """
        key = self.match_key(raw_name)
        if key is None:
            return None
        return self.database[key]

    def match_key(self, raw_name: str) -> str | None:
        """Return the database key ``raw_name`` resolves to, if any."""
        if not raw_name or not raw_name.strip():
            return None

        names = variations(raw_name)

        for name in names:
            if name in self.database:
                return name

        key = self._partial_match(names)
        if key is None:
            logger.debug("No database match for GPU %r", raw_name)
        else:
            logger.debug("Partial match for GPU %r: %r", raw_name, key)
        return key

    def _partial_match(self, names: list[str]) -> str | None:
        best_key = None
        best_overlap = 0

        for key in self.database:
            overlap = 0
            for name in names:
                if key in name:
                    overlap = max(overlap, len(key))
                elif name in key:
                    overlap = max(overlap, len(name))

            if not overlap:
                continue
            if self.partial_strategy == "first":
                return key
            if overlap > best_overlap:
                best_key, best_overlap = key, overlap

        return best_key

    def estimate(self, raw_name: str, tier: int) -> CapabilityProfile:
        """Synthesize a profile from name cues and the hardware tier.

        Vendor and platform come from keyword cues in the lowercased name
        (the vendor token normalization strips is itself a cue); memory comes
        from a fixed (platform, tier) table.

        Args:
            raw_name: GPU identifier as reported by the platform
            tier: Performance tier from the hardware probe

        Returns:
            Estimated profile with architecture and year unset
        """
        name = raw_name.lower().strip()
        tier = clamp_tier(tier)
        platform = self._platform_cue(name)
        return CapabilityProfile(
            vendor=self._vendor_cue(name),
            platform=platform,
            memory=GPUMemory.for_platform(platform, estimate_memory_mb(platform, tier)),
            tier=tier,
        )

    def resolve_or_estimate(self, raw_name: str, tier: int) -> CapabilityProfile | None:
        """Resolve a GPU, falling back to a heuristic estimate.

        Returns:
            A profile for any non-empty name, blank ones included; None only
            for an empty name
        """
        if not raw_name:
            return None

        profile = self.resolve(raw_name)
        if profile is not None:
            return profile

        profile = self.estimate(raw_name, tier)
        logger.info(
            "GPU %r not in database, estimated %s %s with %d MB",
            raw_name,
            profile.vendor.value,
            profile.platform.value,
            profile.memory_mb,
        )
        return profile

    def memory_budget_mb(self, raw_name: str, tier: int) -> int | None:
        """Memory budget in MB for a GPU, or None for an empty name."""
        profile = self.resolve_or_estimate(raw_name, tier)
        return profile.memory_mb if profile is not None else None

    def vendor_of(self, raw_name: str) -> Vendor:
        """Vendor from the database, else from name cues."""
        profile = self.resolve(raw_name)
        if profile is not None:
            return profile.vendor
        return self._vendor_cue(raw_name.lower())

    def platform_of(self, raw_name: str) -> PlatformClass:
        """Platform class from the database, else from name cues."""
        profile = self.resolve(raw_name)
        if profile is not None:
            return profile.platform
        return self._platform_cue(raw_name.lower())

    @staticmethod
    def _vendor_cue(name: str) -> Vendor:
        return rules.first_match(rules.CUE_VENDOR_RULES, name, Vendor.UNKNOWN)

    @staticmethod
    def _platform_cue(name: str) -> PlatformClass:
        return rules.first_match(rules.CUE_PLATFORM_RULES, name, PlatformClass.DESKTOP)


def estimate_memory_mb(platform: PlatformClass, tier: int) -> int:
    """Fallback memory estimate from platform class and tier alone."""
    table = rules.FALLBACK_MEMORY_MB[platform]
    return table.get(tier, table[rules.ANY_TIER])
