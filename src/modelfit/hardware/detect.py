"""Hardware detection for automatic model selection."""

import logging
import platform
import subprocess
from dataclasses import dataclass

from modelfit.gpu.resolver import GPUResolver

logger = logging.getLogger(__name__)

DEFAULT_TIER = 1
PROBE_TIMEOUT = 5


@dataclass
class HardwareInfo:
    """What the host reports about its GPU."""

    gpu_name: str
    tier: int


def _run(args: list[str]) -> str | None:
    """Run a probe command, returning stdout on success."""
    try:
        result = subprocess.run(args, capture_output=True, text=True, timeout=PROBE_TIMEOUT)
    except (OSError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return result.stdout


def _get_apple_chip_name() -> str:
    """Get the Apple Silicon chip name (e.g. "Apple M2 Pro").

    Returns:
        Chip name, or "" if unavailable
    """
    output = _run(["sysctl", "-n", "machdep.cpu.brand_string"])
    return output.strip() if output else ""


def _get_nvidia_name() -> str:
    """Get the first NVIDIA GPU's name.

    Returns:
        GPU name, or "" if no NVIDIA GPU detected
    """
    output = _run(["nvidia-smi", "--query-gpu=name", "--format=csv,noheader"])
    if not output:
        return ""
    lines = output.strip().splitlines()
    return lines[0].strip() if lines else ""


def _get_amd_name() -> str:
    """Get the first AMD GPU's product name.

    Returns:
        GPU name, or "" if no AMD GPU detected
    """
    output = _run(["rocm-smi", "--showproductname"])
    if not output:
        return ""

    # Lines look like "GPU[0]  : Card series:  Radeon RX 7900 XTX"
    for line in output.splitlines():
        if "Card series" in line:
            name = line.split("Card series:", 1)[-1].strip()
            if name:
                return name
    return ""


def probe_gpu_name() -> str:
    """Ask the host for its GPU name.

    Returns:
        GPU name as reported by the platform, or "" if nothing is found
    """
    if platform.system() == "Darwin" and platform.machine() in ("arm64", "aarch64"):
        name = _get_apple_chip_name()
        if name:
            return name

    for probe in (_get_nvidia_name, _get_amd_name):
        name = probe()
        if name:
            return name

    logger.info("No GPU found by host probes")
    return ""


def probe_hardware(
    resolver: GPUResolver,
    gpu_name: str | None = None,
    tier: int | None = None,
    default_tier: int = DEFAULT_TIER,
) -> HardwareInfo:
    """Determine the GPU name and performance tier.

    Args:
        resolver: Resolver used to look the tier up in the reference database
        gpu_name: Name override; the host is probed if None
        tier: Tier override
        default_tier: Tier used when the GPU is not in the database

    Returns:
        HardwareInfo for the host
    """
    name = gpu_name if gpu_name is not None else probe_gpu_name()

    if tier is None:
        profile = resolver.resolve(name)
        tier = profile.tier if profile is not None else default_tier

    logger.debug("Hardware: gpu=%r tier=%d", name, tier)
    return HardwareInfo(gpu_name=name, tier=tier)
