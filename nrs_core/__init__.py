"""Core pieces of nrs: profile store, .npmrc editing, probing and reconciliation."""

from .errors import (
    CorruptProfile,
    DuplicateRegistryName,
    HomeDirectoryUnavailable,
    InvalidRegistryUrl,
    IOFailure,
    NetworkFailure,
    NrsError,
    RegistryNotFound,
)
from .paths import NrsPaths
from .probe import ProbeResult, RegistryProber
from .profile import DEFAULT_REGISTRIES, ProfileStore, RegistryProfile
from .reconcile import derive_registry_name, reconcile
from .settings import Settings, load_settings
from .switcher import RegistrySwitcher

__all__ = [
    "CorruptProfile",
    "DuplicateRegistryName",
    "HomeDirectoryUnavailable",
    "InvalidRegistryUrl",
    "IOFailure",
    "NetworkFailure",
    "NrsError",
    "RegistryNotFound",
    "NrsPaths",
    "ProbeResult",
    "RegistryProber",
    "DEFAULT_REGISTRIES",
    "ProfileStore",
    "RegistryProfile",
    "derive_registry_name",
    "reconcile",
    "Settings",
    "load_settings",
    "RegistrySwitcher",
]
