"""Capability profile data types for resolved GPUs."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Vendor(str, Enum):
    """GPU vendors known to the reference database."""

    NVIDIA = "nvidia"
    AMD = "amd"
    INTEL = "intel"
    APPLE = "apple"
    QUALCOMM = "qualcomm"
    ARM = "arm"
    IMAGINATION = "imagination"
    SAMSUNG = "samsung"
    UNKNOWN = "unknown"


class PlatformClass(str, Enum):
    """Where the GPU lives and how it gets its memory."""

    DESKTOP = "desktop"  # Discrete card with dedicated VRAM
    MOBILE = "mobile"  # Phone/tablet SoC, unified memory
    INTEGRATED = "integrated"  # CPU-package GPU sharing system memory


DEFAULT_FPS = 30
MIN_TIER = 0
MAX_TIER = 3


@dataclass(frozen=True)
class GPUMemory:
    """Memory available to a GPU.

    Exactly one of ``vram_mb`` (discrete) or ``unified_mb`` (shared) is set.
    """

    vram_mb: int | None = None
    unified_mb: int | None = None
    memory_type: str | None = None

    def __post_init__(self) -> None:
        if (self.vram_mb is None) == (self.unified_mb is None):
            raise ValueError("GPUMemory needs exactly one of vram_mb or unified_mb")
        size = self.vram_mb if self.vram_mb is not None else self.unified_mb
        if size is None or size <= 0:
            raise ValueError(f"GPU memory must be positive, got {size}")

    @property
    def size_mb(self) -> int:
        """Memory budget in MB regardless of kind."""
        return self.vram_mb if self.vram_mb is not None else self.unified_mb  # type: ignore[return-value]

    @property
    def is_unified(self) -> bool:
        return self.unified_mb is not None

    @classmethod
    def for_platform(
        cls, platform: PlatformClass, size_mb: int, memory_type: str | None = None
    ) -> "GPUMemory":
        """Build discrete memory for desktops and unified memory otherwise."""
        if platform == PlatformClass.DESKTOP:
            return cls(vram_mb=size_mb, memory_type=memory_type)
        return cls(unified_mb=size_mb, memory_type=memory_type)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.vram_mb is not None:
            data["vram"] = self.vram_mb
        if self.unified_mb is not None:
            data["unified"] = self.unified_mb
        if self.memory_type is not None:
            data["type"] = self.memory_type
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GPUMemory":
        return cls(
            vram_mb=data.get("vram"),
            unified_mb=data.get("unified"),
            memory_type=data.get("type"),
        )


@dataclass(frozen=True)
class CapabilityProfile:
    """Resolved description of a GPU.

    Attributes:
        vendor: GPU vendor
        platform: Platform class (desktop, mobile, integrated)
        memory: Memory budget, discrete or unified
        tier: Coarse performance tier, 0 (weakest) to 3
        fps: Average benchmark FPS, 30 when no samples were available
        architecture: Optional architecture label (e.g. "Ada Lovelace")
        year: Optional release year
    """

    vendor: Vendor
    platform: PlatformClass
    memory: GPUMemory
    tier: int
    fps: int = DEFAULT_FPS
    architecture: str | None = None
    year: int | None = None

    @property
    def memory_mb(self) -> int:
        return self.memory.size_mb

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the reference database artifact shape."""
        data: dict[str, Any] = {
            "vendor": self.vendor.value,
            "platform": self.platform.value,
            "memory": self.memory.to_dict(),
            "performance": {"tier": self.tier, "fps": self.fps},
        }
        if self.architecture is not None:
            data["architecture"] = self.architecture
        if self.year is not None:
            data["year"] = self.year
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CapabilityProfile":
        """Parse an entry of the reference database artifact.

        Raises:
            ValueError: If the vendor/platform is unknown or memory is malformed
        """
        performance = data.get("performance", {})
        return cls(
            vendor=Vendor(data["vendor"]),
            platform=PlatformClass(data["platform"]),
            memory=GPUMemory.from_dict(data["memory"]),
            tier=int(performance.get("tier", 1)),
            fps=int(performance.get("fps", DEFAULT_FPS)),
            architecture=data.get("architecture"),
            year=data.get("year"),
        )


def clamp_tier(tier: int) -> int:
    """Clamp a tier value into the supported 0..3 range."""
    return max(MIN_TIER, min(MAX_TIER, int(tier)))
