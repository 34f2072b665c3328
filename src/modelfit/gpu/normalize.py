"""GPU name normalization and lookup variations.

Platforms report GPUs as noisy free text ("NVIDIA GeForce RTX 4090",
"ANGLE (Apple, Apple M2, OpenGL 4.1)", "Intel(R) Iris(R) Xe Graphics").
These helpers turn such strings into a canonical form plus a handful of
alternate spellings worth probing against the reference database.
"""

import re

_BRACKETS = re.compile(r"[()\[\]]")
_WHITESPACE = re.compile(r"\s+")
_VENDOR_PREFIX = re.compile(r"^(nvidia|amd|intel|apple|qualcomm|arm)\s+")
_GENERIC_SUFFIX = re.compile(r"\s+(graphics|gpu|processor)$")
_APPLE_PREFIX = re.compile(r"apple\s+")

# Vendors tried as explicit prefixes for every name
PREFIX_VENDORS = ("nvidia", "amd", "intel", "apple")

_APPLE_SILICON_TOKENS = ("apple", "m1", "m2", "m3", "m4")


def normalize(raw: str) -> str:
    """Return the canonical lookup form of a GPU name.

    Lowercases, drops brackets, collapses whitespace, then strips leading
    vendor tokens and trailing generic suffixes until nothing changes, so
    ``normalize(normalize(x)) == normalize(x)``.

    Args:
        raw: GPU identifier as reported by the platform

    Returns:
        Normalized name ("" for blank input)
    """
    name = _BRACKETS.sub("", raw.lower())
    name = _WHITESPACE.sub(" ", name).strip()

    previous = None
    while name != previous:
        previous = name
        name = _VENDOR_PREFIX.sub("", name)
        name = _GENERIC_SUFFIX.sub("", name)

    return name


def variations(raw: str) -> list[str]:
    """Generate name spellings to probe, normalized form first.

    Args:
        raw: GPU identifier as reported by the platform

    Returns:
        De-duplicated variations in probe order ([] for blank input)
    """
    original = raw.lower().strip()
    if not original:
        return []

    normalized = normalize(raw)
    if not normalized:
        return [original]

    found = [normalized, original]

    for vendor in PREFIX_VENDORS:
        if vendor not in normalized:
            found.append(f"{vendor} {normalized}")

    if "geforce" in normalized:
        found.append(normalized.replace("geforce ", "", 1))
        found.append(f"nvidia {normalized}")

    if "radeon" in normalized:
        found.append(normalized.replace("radeon ", "", 1))
        found.append(f"amd {normalized}")

    if "arc" in normalized:
        found.append(f"intel {normalized}")

    if any(token in normalized for token in _APPLE_SILICON_TOKENS):
        bare = _APPLE_PREFIX.sub("", normalized, count=1)
        found.append(bare)
        found.append(f"apple {bare}")

    # dict preserves first-seen order
    return [name for name in dict.fromkeys(found) if name]
