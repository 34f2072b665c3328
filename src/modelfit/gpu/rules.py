"""Ordered heuristic rule tables for GPU name inference.

Every heuristic in this module is data: an ordered list of ``Rule`` pairs
evaluated first-match-wins against a lowercased GPU name. Order matters:
"7900 xtx" must come before "7900 xt", NVIDIA keywords before AMD's "rx",
and so on.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from modelfit.gpu.profile import PlatformClass, Vendor

Predicate = Callable[[str], bool]


@dataclass(frozen=True)
class Rule:
    """A ``(predicate, result)`` pair."""

    predicate: Predicate
    result: Any


def contains_any(*keywords: str) -> Predicate:
    """Match names containing at least one keyword."""
    return lambda name: any(keyword in name for keyword in keywords)


def contains_all(*keywords: str) -> Predicate:
    """Match names containing every keyword."""
    return lambda name: all(keyword in name for keyword in keywords)


def always(name: str) -> bool:
    return True


def first_match(rules: Iterable[Rule], name: str, default: Any = None) -> Any:
    """Return the result of the first rule whose predicate accepts ``name``."""
    for rule in rules:
        if rule.predicate(name):
            return rule.result
    return default


def keyword_rules(table: Iterable[tuple[Any, tuple[str, ...]]]) -> list[Rule]:
    """Build ``contains_any`` rules from ``(result, keywords)`` rows."""
    return [Rule(contains_any(*keywords), result) for result, keywords in table]


# -- Vendor -------------------------------------------------------------------

# Keywords used when building the reference database from the benchmark corpus
CORPUS_VENDOR_RULES = keyword_rules(
    [
        (Vendor.NVIDIA, ("nvidia", "geforce", "rtx", "gtx", "quadro", "tesla")),
        (Vendor.AMD, ("amd", "radeon", "rx", "ati", "firepro")),
        (Vendor.INTEL, ("intel", "arc", "iris", "uhd", "hd graphics")),
        (Vendor.APPLE, ("apple", "m1", "m2", "m3", "m4", "a1", "a15", "a16", "a17")),
        (Vendor.QUALCOMM, ("adreno",)),
        (Vendor.ARM, ("mali",)),
        (Vendor.IMAGINATION, ("powervr",)),
        (Vendor.SAMSUNG, ("samsung", "xclipse")),
    ]
)

# Narrower cue set used at runtime when a name misses the database
CUE_VENDOR_RULES = keyword_rules(
    [
        (Vendor.NVIDIA, ("nvidia", "geforce", "rtx", "gtx")),
        (Vendor.AMD, ("amd", "radeon", "rx")),
        (Vendor.INTEL, ("intel", "arc", "iris", "uhd")),
        (Vendor.APPLE, ("apple", "m1", "m2", "m3", "m4")),
        (Vendor.QUALCOMM, ("adreno",)),
        (Vendor.ARM, ("mali",)),
        (Vendor.IMAGINATION, ("powervr",)),
    ]
)


# -- Platform -----------------------------------------------------------------

CORPUS_PLATFORM_RULES = [
    Rule(
        contains_any(
            "mobile", "adreno", "mali", "powervr", "apple a1", "samsung", "xclipse"
        ),
        PlatformClass.MOBILE,
    ),
    Rule(
        contains_any("iris", "uhd", "hd graphics", "integrated"),
        PlatformClass.INTEGRATED,
    ),
    Rule(contains_all("vega", "graphics"), PlatformClass.INTEGRATED),
]

CUE_PLATFORM_RULES = [
    Rule(
        contains_any("apple", "adreno", "mali", "powervr", "mobile"),
        PlatformClass.MOBILE,
    ),
    Rule(contains_any("iris", "uhd", "integrated"), PlatformClass.INTEGRATED),
]

# Benchmark files named "m-*.json" only contain mobile GPUs
MOBILE_FILE_PREFIX = "m-"


# -- Architecture and release year ---------------------------------------------

ARCHITECTURE_RULES: dict[Vendor, list[Rule]] = {
    Vendor.NVIDIA: keyword_rules(
        [
            ("Ada Lovelace", ("rtx 40",)),
            ("Ampere", ("rtx 30",)),
            ("Turing", ("rtx 20", "gtx 16")),
            ("Pascal", ("gtx 10",)),
            ("Maxwell", ("gtx 9",)),
        ]
    ),
    Vendor.AMD: keyword_rules(
        [
            ("RDNA 3", ("rx 7",)),
            ("RDNA 2", ("rx 6",)),
            ("RDNA", ("rx 5",)),
            ("Vega", ("vega",)),
        ]
    ),
    Vendor.INTEL: keyword_rules(
        [
            ("Xe HPG", ("arc",)),
            ("Xe LP", ("iris",)),
            ("Gen 9-12", ("uhd",)),
        ]
    ),
    Vendor.APPLE: keyword_rules(
        [
            ("Apple Silicon M4", ("m4",)),
            ("Apple Silicon M3", ("m3",)),
            ("Apple Silicon M2", ("m2",)),
            ("Apple Silicon M1", ("m1",)),
            ("Apple A17", ("a17",)),
            ("Apple A16", ("a16",)),
            ("Apple A15", ("a15",)),
        ]
    ),
    Vendor.QUALCOMM: keyword_rules(
        [
            ("Adreno 700", ("adreno 7",)),
            ("Adreno 600", ("adreno 6",)),
            ("Adreno 500", ("adreno 5",)),
        ]
    ),
    Vendor.ARM: keyword_rules(
        [
            ("Valhall", ("mali-g7", "mali g7")),
            ("Bifrost", ("mali-g5", "mali-g3", "mali g5", "mali g3")),
        ]
    ),
}

# Label used when no generation keyword matched
GENERIC_ARCHITECTURE: dict[Vendor, str] = {
    Vendor.NVIDIA: "NVIDIA GPU",
    Vendor.AMD: "AMD GPU",
    Vendor.INTEL: "Intel GPU",
    Vendor.APPLE: "Apple GPU",
    Vendor.QUALCOMM: "Adreno GPU",
    Vendor.ARM: "Mali GPU",
}

YEAR_RULES: dict[Vendor, list[Rule]] = {
    Vendor.NVIDIA: keyword_rules(
        [
            (2022, ("rtx 40",)),
            (2020, ("rtx 30",)),
            (2018, ("rtx 20",)),
            (2019, ("gtx 16",)),
            (2016, ("gtx 10",)),
        ]
    ),
    Vendor.AMD: keyword_rules(
        [
            (2022, ("rx 7",)),
            (2020, ("rx 6",)),
            (2019, ("rx 5",)),
        ]
    ),
    Vendor.APPLE: keyword_rules(
        [
            (2024, ("m4",)),
            (2023, ("m3",)),
            (2022, ("m2",)),
            (2020, ("m1",)),
            (2023, ("a17",)),
            (2022, ("a16",)),
            (2021, ("a15",)),
        ]
    ),
}


# -- Memory -------------------------------------------------------------------

# Fallback key for tiers a table does not list explicitly
ANY_TIER = -1


@dataclass(frozen=True)
class MemoryEstimate:
    """Estimated memory size for one tier, with optional per-name overrides."""

    size_mb: int
    memory_type: str
    by_name: tuple[Rule, ...] = ()

    def size_for(self, name: str) -> int:
        return first_match(self.by_name, name, self.size_mb)


TierTable = dict[int, MemoryEstimate]


def for_tier(table: TierTable, tier: int) -> MemoryEstimate:
    return table.get(tier, table[ANY_TIER])


def _named(*pairs: tuple[str, int]) -> tuple[Rule, ...]:
    return tuple(Rule(contains_any(keyword), size) for keyword, size in pairs)


# Desktop GPUs: vendor -> generation rules -> tier table
DESKTOP_MEMORY_RULES: dict[Vendor, list[Rule]] = {
    Vendor.NVIDIA: [
        Rule(
            contains_any("rtx 40"),
            {
                3: MemoryEstimate(
                    12288, "GDDR6X", _named(("4090", 24576), ("4080", 16384))
                ),
                2: MemoryEstimate(8192, "GDDR6"),
                ANY_TIER: MemoryEstimate(6144, "GDDR6"),
            },
        ),
        Rule(
            contains_any("rtx 30"),
            {
                3: MemoryEstimate(
                    8192, "GDDR6X", _named(("3090", 24576), ("3080", 10240))
                ),
                2: MemoryEstimate(8192, "GDDR6", _named(("3060", 12288))),
                ANY_TIER: MemoryEstimate(6144, "GDDR6"),
            },
        ),
        Rule(
            always,
            {
                3: MemoryEstimate(11264, "GDDR5X"),
                2: MemoryEstimate(8192, "GDDR5"),
                1: MemoryEstimate(6144, "GDDR5"),
                ANY_TIER: MemoryEstimate(4096, "GDDR5"),
            },
        ),
    ],
    Vendor.AMD: [
        Rule(
            contains_any("rx 7"),
            {
                3: MemoryEstimate(
                    16384, "GDDR6", _named(("7900 xtx", 24576), ("7900 xt", 20480))
                ),
                2: MemoryEstimate(12288, "GDDR6"),
                ANY_TIER: MemoryEstimate(8192, "GDDR6"),
            },
        ),
        Rule(
            contains_any("rx 6"),
            {
                3: MemoryEstimate(16384, "GDDR6"),
                2: MemoryEstimate(12288, "GDDR6", _named(("6600", 8192))),
                ANY_TIER: MemoryEstimate(8192, "GDDR6"),
            },
        ),
        Rule(
            always,
            {
                3: MemoryEstimate(8192, "GDDR5"),
                2: MemoryEstimate(6144, "GDDR5"),
                1: MemoryEstimate(4096, "GDDR5"),
                ANY_TIER: MemoryEstimate(2048, "GDDR5"),
            },
        ),
    ],
    Vendor.INTEL: [
        Rule(
            always,
            {
                3: MemoryEstimate(8192, "GDDR6", _named(("a770", 16384))),
                2: MemoryEstimate(8192, "GDDR6", _named(("a770", 16384))),
                1: MemoryEstimate(6144, "GDDR6"),
                ANY_TIER: MemoryEstimate(4096, "GDDR6"),
            },
        ),
    ],
}

UNKNOWN_DESKTOP_MEMORY: TierTable = {
    3: MemoryEstimate(12288, "GDDR6"),
    2: MemoryEstimate(8192, "GDDR6"),
    1: MemoryEstimate(6144, "GDDR5"),
    ANY_TIER: MemoryEstimate(4096, "GDDR5"),
}

MOBILE_MEMORY: dict[Vendor, TierTable] = {
    Vendor.APPLE: {
        3: MemoryEstimate(16384, "Unified"),
        2: MemoryEstimate(8192, "Unified"),
        1: MemoryEstimate(6144, "Unified"),
        ANY_TIER: MemoryEstimate(4096, "Unified"),
    },
    Vendor.QUALCOMM: {
        3: MemoryEstimate(12288, "LPDDR5"),
        2: MemoryEstimate(8192, "LPDDR5"),
        1: MemoryEstimate(6144, "LPDDR4X"),
        ANY_TIER: MemoryEstimate(4096, "LPDDR4X"),
    },
}

OTHER_MOBILE_MEMORY: TierTable = {
    3: MemoryEstimate(8192, "LPDDR5"),
    2: MemoryEstimate(6144, "LPDDR5"),
    1: MemoryEstimate(4096, "LPDDR4X"),
    ANY_TIER: MemoryEstimate(2048, "LPDDR4"),
}

INTEGRATED_MEMORY: TierTable = {
    3: MemoryEstimate(4096, "DDR4/DDR5"),
    2: MemoryEstimate(4096, "DDR4/DDR5"),
    1: MemoryEstimate(2048, "DDR4/DDR5"),
    ANY_TIER: MemoryEstimate(1024, "DDR4"),
}

# Runtime fallback when a name misses the database: (platform, tier) only
FALLBACK_MEMORY_MB: dict[PlatformClass, dict[int, int]] = {
    PlatformClass.MOBILE: {3: 8192, 2: 6144, 1: 4096, ANY_TIER: 2048},
    PlatformClass.INTEGRATED: {2: 4096, 1: 2048, ANY_TIER: 1024},
    PlatformClass.DESKTOP: {3: 12288, 2: 8192, 1: 6144, ANY_TIER: 4096},
}


def corpus_memory_table(vendor: Vendor, platform: PlatformClass, name: str) -> TierTable:
    """Pick the tier table used to estimate memory for a corpus entry."""
    if platform == PlatformClass.MOBILE:
        return MOBILE_MEMORY.get(vendor, OTHER_MOBILE_MEMORY)
    if platform == PlatformClass.INTEGRATED:
        return INTEGRATED_MEMORY
    generations = DESKTOP_MEMORY_RULES.get(vendor)
    if generations is None:
        return UNKNOWN_DESKTOP_MEMORY
    return first_match(generations, name, UNKNOWN_DESKTOP_MEMORY)
