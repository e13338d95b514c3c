"""The named-registry profile and its JSON store."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Mapping

from .errors import (
    CorruptProfile,
    DuplicateRegistryName,
    InvalidRegistryUrl,
    IOFailure,
    RegistryNotFound,
)

log = logging.getLogger(__name__)

DEFAULT_REGISTRIES: tuple[tuple[str, str], ...] = (
    ("npm", "https://registry.npmjs.org/"),
    ("yarn", "https://registry.yarnpkg.com/"),
    ("taobao", "https://registry.npmmirror.com/"),
    ("tencent", "https://mirrors.cloud.tencent.com/npm/"),
    ("npmMirror", "https://skimdb.npmjs.com/registry/"),
    ("github", "https://npm.pkg.github.com/"),
)

SORT_KEYS = ("name", "url", "default")


def is_registry_url(url: str) -> bool:
    return url.startswith("http://") or url.startswith("https://")


def _ensure_mapping(data: Any, key: str) -> dict[str, str]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise CorruptProfile(f"expected mapping for '{key}' in profile")
    return {str(name): str(url) for name, url in data.items()}


@dataclass
class RegistryProfile:
    builtin_registries: dict[str, str] = field(default_factory=dict)
    custom_registries: dict[str, str] = field(default_factory=dict)
    registry_order: list[str] = field(default_factory=list)
    current: str | None = None

    @classmethod
    def defaults(cls) -> "RegistryProfile":
        return cls(
            builtin_registries=dict(DEFAULT_REGISTRIES),
            registry_order=[name for name, _ in DEFAULT_REGISTRIES],
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RegistryProfile":
        if not isinstance(data, Mapping):
            raise CorruptProfile("expected a JSON object for the profile")
        order = data.get("registry_order") or []
        if not isinstance(order, list):
            raise CorruptProfile("expected a list for 'registry_order' in profile")
        profile = cls(
            builtin_registries=_ensure_mapping(data.get("registries"), "registries"),
            custom_registries=_ensure_mapping(data.get("custom_registries"), "custom_registries"),
            registry_order=[str(name) for name in order],
        )
        current = data.get("current")
        if current is not None and str(current) in profile:
            profile.current = str(current)
        return profile

    def to_dict(self) -> dict[str, Any]:
        return {
            "registries": dict(self.builtin_registries),
            "custom_registries": dict(self.custom_registries),
            "registry_order": list(self.registry_order),
            "current": self.current,
        }

    # ------------------------ lookup ------------------------

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield every ``(name, url)``, built-in registries first."""
        yield from self.builtin_registries.items()
        yield from self.custom_registries.items()

    def names(self) -> list[str]:
        return [name for name, _ in self.items()]

    def __contains__(self, name: object) -> bool:
        return name in self.builtin_registries or name in self.custom_registries

    def url_for(self, name: str) -> str:
        if name in self.builtin_registries:
            return self.builtin_registries[name]
        if name in self.custom_registries:
            return self.custom_registries[name]
        raise RegistryNotFound(name)

    def find_by_url(self, url: str) -> str | None:
        for name, registry_url in self.items():
            if registry_url == url:
                return name
        return None

    # ------------------------ order -------------------------

    def normalize_order(self) -> None:
        if not self.registry_order:
            self.registry_order = sorted(self.names())

    def _append_to_order(self, name: str) -> None:
        if name not in self.registry_order:
            self.registry_order.append(name)

    def sorted_items(self, sort: str = "name") -> list[tuple[str, str]]:
        entries = list(self.items())
        if sort == "name":
            return sorted(entries, key=lambda entry: entry[0])
        if sort == "url":
            return sorted(entries, key=lambda entry: entry[1])
        if sort == "default":
            positions = {name: index for index, name in enumerate(self.registry_order)}
            missing = len(positions)
            return sorted(entries, key=lambda entry: positions.get(entry[0], missing))
        raise ValueError(f"unknown sort order: {sort}")

    # ----------------------- mutation -----------------------

    def add(self, name: str, url: str) -> str | None:
        """Insert a custom registry.

        Returns the name already holding ``url`` when the URL is known, in
        which case nothing changes.
        """
        if not is_registry_url(url):
            raise InvalidRegistryUrl(url)
        existing = self.find_by_url(url)
        if existing is not None:
            return existing
        if name in self:
            raise DuplicateRegistryName(name)
        self.custom_registries[name] = url
        self._append_to_order(name)
        return None

    def add_discovered(self, name: str, url: str) -> None:
        self.custom_registries[name] = url
        self._append_to_order(name)
        self.current = name

    def edit(self, name: str, new_url: str) -> None:
        if name not in self:
            raise RegistryNotFound(name)
        if not is_registry_url(new_url):
            raise InvalidRegistryUrl(new_url)
        if name in self.builtin_registries:
            self.builtin_registries[name] = new_url
        else:
            self.custom_registries[name] = new_url
        self._append_to_order(name)

    def remove(self, name: str) -> None:
        removed_builtin = self.builtin_registries.pop(name, None) is not None
        removed_custom = self.custom_registries.pop(name, None) is not None
        if not removed_builtin and not removed_custom:
            raise RegistryNotFound(name)
        self.registry_order = [entry for entry in self.registry_order if entry != name]
        if self.current == name:
            self.current = None

    def select(self, name: str) -> str:
        url = self.url_for(name)
        self.current = name
        self._append_to_order(name)
        return url

    def reset(self, *, keep_custom: bool) -> "RegistryProfile":
        fresh = RegistryProfile.defaults()
        if keep_custom:
            fresh.custom_registries = dict(self.custom_registries)
            fresh.registry_order = sorted(fresh.names())
            fresh.current = self.current
        return fresh


class ProfileStore:
    """Load and persist a :class:`RegistryProfile` as JSON."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> RegistryProfile:
        if not self.path.exists():
            log.debug("no profile at %s, using defaults", self.path)
            profile = RegistryProfile.defaults()
        else:
            try:
                raw = self.path.read_text(encoding="utf-8")
            except UnicodeDecodeError as exc:
                raise CorruptProfile(f"malformed profile {self.path}: {exc}") from exc
            except OSError as exc:
                raise IOFailure(f"cannot read profile {self.path}: {exc}") from exc
            try:
                data = json.loads(raw)
            except json.JSONDecodeError as exc:
                raise CorruptProfile(f"malformed profile {self.path}: {exc}") from exc
            profile = RegistryProfile.from_dict(data)
        profile.normalize_order()
        return profile

    def save(self, profile: RegistryProfile) -> None:
        payload = json.dumps(profile.to_dict(), indent=2)
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f"{self.path.name}.", suffix=".tmp", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise IOFailure(f"cannot write profile {self.path}: {exc}") from exc
        log.debug("saved profile to %s", self.path)
