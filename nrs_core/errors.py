"""Typed errors raised by the nrs core."""

from __future__ import annotations


class NrsError(RuntimeError):
    """Base nrs error."""


class IOFailure(NrsError):
    """Reading or writing the profile or an .npmrc failed."""


class CorruptProfile(NrsError):
    """The persisted profile is not valid JSON or not a JSON object."""


class NetworkFailure(NrsError):
    """A reachability probe could not complete."""


class HomeDirectoryUnavailable(NrsError):
    """The user's home directory could not be determined."""

    def __init__(self) -> None:
        super().__init__("home directory not found")


class RegistryNotFound(NrsError):
    """Raised when a registry name is unknown to the profile."""

    def __init__(self, name: str) -> None:
        super().__init__(f"registry not found: {name}")
        self.name = name


class InvalidRegistryUrl(NrsError):
    """Raised when a registry URL does not start with http:// or https://."""

    def __init__(self, url: str) -> None:
        super().__init__(f"invalid registry URL: {url}")
        self.url = url


class DuplicateRegistryName(NrsError):
    """Raised when ``add`` is given a name that is already registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"registry '{name}' already exists; use 'nrs edit' to change its URL")
        self.name = name
