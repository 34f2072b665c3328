"""Tests for the reference database and capability profiles."""

import json

import pytest

from modelfit.gpu.database import ReferenceDatabase, load_database, load_default
from modelfit.gpu.profile import CapabilityProfile, GPUMemory, PlatformClass, Vendor


def test_bundled_database_loads():
    database = load_default()

    assert len(database) > 20
    assert "nvidia geforce rtx 4090" in database
    assert load_database() is database


def test_bundled_entries_have_one_memory_kind():
    for name, profile in load_default().items():
        memory = profile.memory
        assert (memory.vram_mb is None) != (memory.unified_mb is None), name
        assert memory.is_unified == (profile.platform != PlatformClass.DESKTOP), name
        assert 0 <= profile.tier <= 3, name


def test_memory_requires_exactly_one_kind():
    with pytest.raises(ValueError):
        GPUMemory()
    with pytest.raises(ValueError):
        GPUMemory(vram_mb=4096, unified_mb=4096)
    with pytest.raises(ValueError):
        GPUMemory(vram_mb=0)


def test_profile_to_dict_matches_artifact_shape():
    profile = CapabilityProfile(
        vendor=Vendor.APPLE,
        platform=PlatformClass.MOBILE,
        memory=GPUMemory(unified_mb=8192, memory_type="Unified"),
        tier=2,
        fps=60,
        year=2022,
    )

    assert profile.to_dict() == {
        "vendor": "apple",
        "platform": "mobile",
        "memory": {"unified": 8192, "type": "Unified"},
        "performance": {"tier": 2, "fps": 60},
        "year": 2022,
    }
    assert CapabilityProfile.from_dict(profile.to_dict()) == profile


def test_from_dict_skips_malformed_entries():
    data = {
        "good gpu": {
            "vendor": "nvidia",
            "platform": "desktop",
            "memory": {"vram": 8192},
            "performance": {"tier": 2, "fps": 90},
        },
        "bad vendor": {"vendor": "acme", "platform": "desktop", "memory": {"vram": 1}},
        "no memory": {"vendor": "amd", "platform": "desktop"},
        "both kinds": {
            "vendor": "amd",
            "platform": "desktop",
            "memory": {"vram": 1024, "unified": 1024},
        },
    }

    database = ReferenceDatabase.from_dict(data)

    assert list(database) == ["good gpu"]


def test_json_artifact_preserves_order(tmp_path, small_database):
    path = tmp_path / "nested" / "gpus.json"
    small_database.to_json(path)

    loaded = load_database(path)

    assert list(loaded) == list(small_database)
    assert loaded["apple m2"] == small_database["apple m2"]
    assert json.loads(path.read_text())["apple m2"]["memory"] == {"unified": 8192}


def test_vendor_counts(small_database):
    assert small_database.vendor_counts() == {"nvidia": 2, "apple": 1}
