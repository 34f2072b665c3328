"""Build the reference database from a GPU benchmark corpus.

The corpus is a directory of JSON benchmark files in the detect-gpu layout:
each file is ``[version, entry, entry, ...]`` and each entry is
``[name, model, searchTerms, tier, benchmarks]`` where every benchmark
sample is ``[width, height, fps, device?]``. Files prefixed with ``m-`` hold
mobile GPUs.
"""

import json
import logging
import math
import re
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from modelfit.gpu import rules
from modelfit.gpu.database import ReferenceDatabase
from modelfit.gpu.profile import (
    DEFAULT_FPS,
    CapabilityProfile,
    GPUMemory,
    PlatformClass,
    Vendor,
)

logger = logging.getLogger(__name__)

DEFAULT_TIER = 1
MIN_NAME_LENGTH = 3
UNKNOWN_MARKERS = ("???",)

_WHITESPACE = re.compile(r"\s+")
_BRACKETS = re.compile(r"[()\[\]]")
_DASH = re.compile(r"\s*-\s*")
_SLASH = re.compile(r"\s*/\s*")
_EXPLICIT_MEMORY = re.compile(r"(\d+)\s*(gb|mb)", re.IGNORECASE)


def normalize_corpus_name(name: str) -> str:
    """Normalize a corpus GPU name into a database key."""
    name = _WHITESPACE.sub(" ", name.lower().strip())
    name = _BRACKETS.sub("", name)
    name = _DASH.sub(" ", name)
    name = _SLASH.sub(" ", name)
    return _WHITESPACE.sub(" ", name).strip()


def is_valid_name(name: Any) -> bool:
    if not isinstance(name, str) or len(name) < MIN_NAME_LENGTH:
        return False
    if name.strip().lower() == "unknown":
        return False
    return not any(marker in name for marker in UNKNOWN_MARKERS)


def infer_vendor(name: str) -> Vendor:
    return rules.first_match(rules.CORPUS_VENDOR_RULES, name, Vendor.UNKNOWN)


def infer_platform(name: str, file_name: str = "") -> PlatformClass:
    if file_name.startswith(rules.MOBILE_FILE_PREFIX):
        return PlatformClass.MOBILE
    return rules.first_match(rules.CORPUS_PLATFORM_RULES, name, PlatformClass.DESKTOP)


def estimate_memory(
    vendor: Vendor, platform: PlatformClass, tier: int, name: str
) -> GPUMemory:
    """Estimate GPU memory, preferring an explicit size in the name.

    Args:
        vendor: Inferred vendor
        platform: Inferred platform class
        tier: Benchmark tier
        name: Normalized GPU name

    Returns:
        VRAM for desktop GPUs, unified memory for mobile/integrated ones
    """
    match = _EXPLICIT_MEMORY.search(name)
    if match:
        amount = int(match.group(1))
        size_mb = amount * 1024 if match.group(2).lower() == "gb" else amount
        if size_mb > 0:
            if platform == PlatformClass.DESKTOP:
                return GPUMemory(vram_mb=size_mb, memory_type="GDDR6")
            memory_type = "LPDDR5" if platform == PlatformClass.MOBILE else "DDR4"
            return GPUMemory(unified_mb=size_mb, memory_type=memory_type)

    table = rules.corpus_memory_table(vendor, platform, name)
    estimate = rules.for_tier(table, tier)
    return GPUMemory.for_platform(platform, estimate.size_for(name), estimate.memory_type)


def infer_architecture(vendor: Vendor, name: str) -> str | None:
    vendor_rules = rules.ARCHITECTURE_RULES.get(vendor, [])
    return rules.first_match(vendor_rules, name, rules.GENERIC_ARCHITECTURE.get(vendor))


def infer_year(vendor: Vendor, name: str) -> int | None:
    return rules.first_match(rules.YEAR_RULES.get(vendor, []), name)


def average_fps(samples: Iterable[Any]) -> int:
    """Mean of the FPS element of each benchmark sample, rounded half up."""
    values = [
        sample[2]
        for sample in samples
        if isinstance(sample, (list, tuple))
        and len(sample) >= 3
        and isinstance(sample[2], (int, float))
    ]
    if not values:
        return DEFAULT_FPS
    return int(math.floor(sum(values) / len(values) + 0.5))


def build_profile(
    name: str, tier: int | None, samples: Iterable[Any] | None, file_name: str = ""
) -> CapabilityProfile:
    """Infer a capability profile for one normalized corpus name."""
    tier = DEFAULT_TIER if tier is None else int(tier)
    vendor = infer_vendor(name)
    platform = infer_platform(name, file_name)
    return CapabilityProfile(
        vendor=vendor,
        platform=platform,
        memory=estimate_memory(vendor, platform, tier, name),
        tier=tier,
        fps=average_fps(samples or []),
        architecture=infer_architecture(vendor, name),
        year=infer_year(vendor, name),
    )


def build_from_entries(rows: Iterable[tuple[str, Any]]) -> ReferenceDatabase:
    """Build a database from ``(file_name, entry)`` rows.

    The first entry seen for a normalized name wins; later duplicates are
    dropped.
    """
    profiles: dict[str, CapabilityProfile] = {}
    skipped = 0

    for file_name, entry in rows:
        if not isinstance(entry, (list, tuple)) or len(entry) < 5:
            skipped += 1
            continue

        name, _model, _search_terms, tier, samples = entry[:5]
        if not is_valid_name(name):
            skipped += 1
            continue

        key = normalize_corpus_name(name)
        if key in profiles:
            logger.debug("Duplicate GPU %r in %s, keeping first", key, file_name)
            continue

        profiles[key] = build_profile(key, tier, samples, file_name)

    logger.info("Built GPU database with %d entries (%d skipped)", len(profiles), skipped)
    return ReferenceDatabase(profiles)


def read_corpus(corpus_dir: str | Path) -> Iterator[tuple[str, Any]]:
    """Yield ``(file_name, entry)`` rows from every benchmark file.

    Unreadable files are logged and skipped.
    """
    files = sorted(Path(corpus_dir).glob("*.json"))
    logger.info("Processing %d benchmark files...", len(files))

    for path in files:
        logger.debug("Processing %s", path.name)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to process %s: %s", path.name, e)
            continue

        if not isinstance(data, list) or len(data) < 2:
            continue

        # First element is the corpus version
        for entry in data[1:]:
            yield path.name, entry


def build_database(corpus_dir: str | Path) -> ReferenceDatabase:
    """Build a reference database from a benchmark corpus directory.

    Raises:
        FileNotFoundError: If ``corpus_dir`` does not exist
    """
    corpus_dir = Path(corpus_dir)
    if not corpus_dir.is_dir():
        raise FileNotFoundError(f"Benchmark corpus not found: {corpus_dir}")
    return build_from_entries(read_corpus(corpus_dir))
