"""Tests for matching the live .npmrc registry against the profile."""

from nrs_core import RegistryProfile, derive_registry_name, reconcile


def test_derive_registry_name_uses_host() -> None:
    assert derive_registry_name("https://npm.corp.example:8443/repo/", set()) == "npm-corp-example-8443"
    assert derive_registry_name("http://localhost:4873", set()) == "localhost-4873"


def test_derive_registry_name_avoids_collisions() -> None:
    taken = {"npm-corp-example", "npm-corp-example-1"}
    assert derive_registry_name("https://npm.corp.example/", taken) == "npm-corp-example-2"


def test_reconcile_matches_builtin_registry() -> None:
    profile = RegistryProfile.defaults()
    assert reconcile(profile, "https://registry.npmjs.org/") is False
    assert profile.current == "npm"


def test_reconcile_prefers_builtin_over_custom() -> None:
    profile = RegistryProfile.defaults()
    profile.custom_registries["alias"] = "https://registry.yarnpkg.com/"
    reconcile(profile, "https://registry.yarnpkg.com/")
    assert profile.current == "yarn"


def test_reconcile_records_unknown_url() -> None:
    profile = RegistryProfile.defaults()
    profile.custom_registries["npm-corp-example"] = "https://npm.corp.example/old/"
    before = dict(profile.custom_registries)

    assert reconcile(profile, "https://npm.corp.example/new/") is True

    added = set(profile.custom_registries) - set(before)
    assert added == {"npm-corp-example-1"}
    assert profile.custom_registries["npm-corp-example-1"] == "https://npm.corp.example/new/"
    assert profile.registry_order[-1] == "npm-corp-example-1"
    assert profile.current == "npm-corp-example-1"


def test_reconcile_without_line_keeps_current() -> None:
    profile = RegistryProfile.defaults()
    profile.select("taobao")
    assert reconcile(profile, None) is False
    assert profile.current == "taobao"
    assert reconcile(profile, "") is False
    assert profile.current == "taobao"
