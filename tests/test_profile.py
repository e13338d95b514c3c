"""Tests for the registry profile model and its JSON store."""

import json
from pathlib import Path

import pytest

from nrs_core import (
    DEFAULT_REGISTRIES,
    CorruptProfile,
    DuplicateRegistryName,
    InvalidRegistryUrl,
    ProfileStore,
    RegistryNotFound,
    RegistryProfile,
)


def test_defaults_seed_builtin_registries() -> None:
    profile = RegistryProfile.defaults()
    assert profile.builtin_registries["npm"] == "https://registry.npmjs.org/"
    assert profile.registry_order == [name for name, _ in DEFAULT_REGISTRIES]
    assert profile.custom_registries == {}
    assert profile.current is None


def test_add_rejects_non_http_url_and_leaves_profile_unchanged() -> None:
    profile = RegistryProfile.defaults()
    before = profile.to_dict()
    for url in ("ftp://example.com/", "registry.example.com", ""):
        with pytest.raises(InvalidRegistryUrl):
            profile.add("bad", url)
    assert profile.to_dict() == before


def test_add_existing_url_is_a_noop() -> None:
    profile = RegistryProfile.defaults()
    before = profile.to_dict()
    assert profile.add("mirror", "https://registry.npmjs.org/") == "npm"
    assert profile.to_dict() == before


def test_add_rejects_taken_name() -> None:
    profile = RegistryProfile.defaults()
    with pytest.raises(DuplicateRegistryName):
        profile.add("npm", "https://other.example.com/")


def test_add_appends_to_order() -> None:
    profile = RegistryProfile.defaults()
    assert profile.add("corp", "https://npm.corp.example/") is None
    assert profile.custom_registries == {"corp": "https://npm.corp.example/"}
    assert profile.registry_order[-1] == "corp"


def test_edit_updates_the_owning_mapping() -> None:
    profile = RegistryProfile.defaults()
    profile.add("corp", "https://npm.corp.example/")

    profile.edit("npm", "https://npm.proxy.example/")
    profile.edit("corp", "http://npm.corp.example:8080/")

    assert profile.builtin_registries["npm"] == "https://npm.proxy.example/"
    assert profile.custom_registries["corp"] == "http://npm.corp.example:8080/"
    assert "npm" not in profile.custom_registries

    with pytest.raises(RegistryNotFound):
        profile.edit("missing", "https://x.example/")
    with pytest.raises(InvalidRegistryUrl):
        profile.edit("corp", "npm.corp.example")


def test_remove_clears_current_and_order() -> None:
    profile = RegistryProfile.defaults()
    profile.select("yarn")

    profile.remove("yarn")

    assert profile.current is None
    assert "yarn" not in profile.registry_order
    assert "yarn" not in profile
    with pytest.raises(RegistryNotFound):
        profile.remove("yarn")


def test_default_sort_puts_unordered_names_last() -> None:
    profile = RegistryProfile.defaults()
    profile.custom_registries["stray"] = "https://a.example/"
    names = [name for name, _ in profile.sorted_items("default")]
    assert names[: len(DEFAULT_REGISTRIES)] == [name for name, _ in DEFAULT_REGISTRIES]
    assert names[-1] == "stray"

    by_url = [url for _, url in profile.sorted_items("url")]
    assert by_url == sorted(by_url)
    with pytest.raises(ValueError):
        profile.sorted_items("size")


def test_reset_keeps_custom_registries_unless_all() -> None:
    profile = RegistryProfile.defaults()
    profile.add("corp", "https://npm.corp.example/")
    profile.edit("npm", "https://npm.proxy.example/")
    profile.select("corp")

    kept = profile.reset(keep_custom=True)
    assert kept.custom_registries == {"corp": "https://npm.corp.example/"}
    assert kept.builtin_registries["npm"] == "https://registry.npmjs.org/"
    assert kept.current == "corp"
    assert kept.registry_order == sorted(kept.names())

    wiped = profile.reset(keep_custom=False)
    assert wiped.to_dict() == RegistryProfile.defaults().to_dict()


def test_store_round_trip(tmp_path: Path) -> None:
    store = ProfileStore(tmp_path / ".nrsrc")
    profile = store.load()
    profile.add("corp", "https://npm.corp.example/")
    profile.select("corp")
    store.save(profile)

    loaded = store.load()
    assert loaded.builtin_registries == profile.builtin_registries
    assert loaded.custom_registries == profile.custom_registries
    assert set(loaded.registry_order) == set(profile.registry_order)
    assert loaded.current == "corp"
    assert list(tmp_path.iterdir()) == [tmp_path / ".nrsrc"]


def test_store_writes_expected_json_keys(tmp_path: Path) -> None:
    store = ProfileStore(tmp_path / ".nrsrc")
    store.save(RegistryProfile.defaults())
    data = json.loads((tmp_path / ".nrsrc").read_text(encoding="utf-8"))
    assert set(data) == {"registries", "custom_registries", "registry_order", "current"}
    assert data["current"] is None


def test_store_rebuilds_empty_order_and_drops_unknown_current(tmp_path: Path) -> None:
    path = tmp_path / ".nrsrc"
    path.write_text(
        json.dumps(
            {
                "registries": {"npm": "https://registry.npmjs.org/"},
                "custom_registries": {"corp": "https://npm.corp.example/"},
                "registry_order": [],
                "current": "ghost",
            }
        ),
        encoding="utf-8",
    )
    profile = ProfileStore(path).load()
    assert profile.registry_order == ["corp", "npm"]
    assert profile.current is None


@pytest.mark.parametrize(
    "payload",
    [
        b"{not json",
        b"[1, 2]",
        b'{"registries": ["npm"]}',
        b'{"registries": {"n\xff": "https://x/"}}',
    ],
)
def test_store_rejects_corrupt_profile(tmp_path: Path, payload: bytes) -> None:
    path = tmp_path / ".nrsrc"
    path.write_bytes(payload)
    with pytest.raises(CorruptProfile):
        ProfileStore(path).load()
