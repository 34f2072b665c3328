"""Tests for GPU name normalization and variations."""

import pytest

from modelfit.gpu.normalize import normalize, variations

NAMES = [
    "NVIDIA GeForce RTX 4090",
    "ANGLE (NVIDIA, NVIDIA GeForce RTX 3060 Direct3D11 vs_5_0 ps_5_0, D3D11)",
    "ANGLE (Apple, Apple M2, OpenGL 4.1)",
    "Intel(R) Iris(R) Xe Graphics",
    "AMD Radeon RX 7900 XTX",
    "Apple M1 Max",
    "Adreno (TM) 740",
    "Mali-G78",
    "nvidia nvidia graphics gpu",
    "  Intel   UHD   Graphics 630  ",
    "[Apple] GPU",
    "Graphics",
    "",
]


@pytest.mark.parametrize("name", NAMES)
def test_normalize_is_idempotent(name):
    once = normalize(name)
    assert normalize(once) == once


def test_normalize_strips_vendor_and_suffix():
    assert normalize("NVIDIA GeForce RTX 4090") == "geforce rtx 4090"
    assert normalize("Intel Iris Xe Graphics") == "iris xe"
    assert normalize("Apple M2 GPU") == "m2"


def test_normalize_removes_brackets_and_collapses_whitespace():
    assert normalize("Intel(R)   UHD [Graphics]  630") == "intelr uhd graphics 630"


def test_normalize_repeats_until_stable():
    assert normalize("NVIDIA NVIDIA GeForce GTX 970 Graphics GPU") == "geforce gtx 970"
    assert normalize("AMD Radeon Graphics Processor") == "radeon"


def test_variations_start_with_normalized_then_original():
    found = variations("NVIDIA GeForce RTX 4090")
    assert found[0] == "geforce rtx 4090"
    assert found[1] == "nvidia geforce rtx 4090"


def test_variations_add_vendor_prefixes():
    found = variations("GeForce RTX 3060")
    assert "nvidia geforce rtx 3060" in found
    assert "amd geforce rtx 3060" in found
    assert "rtx 3060" in found


def test_variations_radeon_and_arc():
    found = variations("Radeon RX 6600")
    assert "rx 6600" in found
    assert "amd radeon rx 6600" in found

    assert "intel arc a770" in variations("Arc A770")


def test_variations_apple_silicon():
    found = variations("Apple M3 Max")
    assert "m3 max" in found
    assert "apple m3 max" in found


def test_variations_are_unique_and_non_empty():
    found = variations("NVIDIA GeForce RTX 4090")
    assert len(found) == len(set(found))
    assert all(found)


def test_variations_blank_input():
    assert variations("") == []
    assert variations("   ") == []


def test_variations_when_normalized_form_is_empty():
    assert variations("[ ]") == ["[ ]"]
