"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncIterator

import pytest

from modelfit.catalog.candidate import ModelCandidate
from modelfit.catalog.ranker import rank_candidates
from modelfit.config.schema import ModelfitConfig
from modelfit.gpu.database import ReferenceDatabase
from modelfit.gpu.profile import CapabilityProfile, GPUMemory, PlatformClass, Vendor
from modelfit.gpu.resolver import GPUResolver
from modelfit.llm.client import EngineLoadError, Message


class FakeRanker:
    """Ranker serving a fixed candidate list instead of the live catalog."""

    def __init__(self, candidates: list[ModelCandidate] | None = None):
        self.candidates = candidates or []
        self.calls: list[tuple] = []

    async def rank(self, budget_mb, mode):
        self.calls.append((budget_mb, mode))
        return rank_candidates(self.candidates, budget_mb, mode)


class FakeChat:
    """Chat engine replaying canned deltas, then raising ``error`` if set."""

    def __init__(self, model_id: str, deltas: list[str], error: Exception | None = None):
        self.model_id = model_id
        self.deltas = deltas
        self.error = error
        self.requests: list[list[Message]] = []

    async def stream_chat(
        self, messages, temperature=None, max_tokens=None
    ) -> AsyncIterator[str]:
        self.requests.append(list(messages))
        for delta in self.deltas:
            yield delta
        if self.error is not None:
            raise self.error


class FakeEngine:
    """Inference engine that loads instantly, or fails with ``error``."""

    def __init__(
        self,
        deltas: list[str] | None = None,
        error: str | None = None,
        stream_error: Exception | None = None,
    ):
        self.deltas = deltas or ["Hello", "!"]
        self.error = error
        self.stream_error = stream_error
        self.loaded: list[str] = []
        self.chat: FakeChat | None = None

    async def load(self, model_id, progress=None):
        self.loaded.append(model_id)
        if progress is not None:
            progress(0.5, "Fetching weights...")
        if self.error is not None:
            raise EngineLoadError(self.error)
        self.chat = FakeChat(model_id, self.deltas, self.stream_error)
        return self.chat


def make_profile(
    size_mb: int = 8192,
    vendor: Vendor = Vendor.NVIDIA,
    platform: PlatformClass = PlatformClass.DESKTOP,
    tier: int = 2,
    **kwargs,
) -> CapabilityProfile:
    return CapabilityProfile(
        vendor=vendor,
        platform=platform,
        memory=GPUMemory.for_platform(platform, size_mb),
        tier=tier,
        **kwargs,
    )


@pytest.fixture
def default_config() -> ModelfitConfig:
    """Provide a default configuration for tests."""
    return ModelfitConfig()


@pytest.fixture
def small_database() -> ReferenceDatabase:
    """A tiny database whose key order is known."""
    return ReferenceDatabase(
        {
            "nvidia geforce rtx 4070": make_profile(12288, tier=3),
            "nvidia geforce rtx 4070 ti": make_profile(12288, tier=3, fps=183),
            "apple m2": make_profile(
                8192, vendor=Vendor.APPLE, platform=PlatformClass.MOBILE, tier=2
            ),
        }
    )


@pytest.fixture
def resolver() -> GPUResolver:
    """Resolver over the bundled reference database."""
    return GPUResolver()


@pytest.fixture
def fake_ranker():
    """Factory for rankers serving fixed candidates."""
    return FakeRanker


@pytest.fixture
def fake_engine():
    """Factory for fake inference engines."""
    return FakeEngine


@pytest.fixture
def profile_factory():
    return make_profile
