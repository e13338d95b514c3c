"""Registry switching primitives behind the nrs commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from . import npmrc
from .npmrc import LineRemoval
from .paths import NrsPaths
from .probe import ProbeResult, RegistryProber
from .profile import ProfileStore, RegistryProfile
from .reconcile import reconcile
from .settings import Settings, load_settings

__all__ = [
    "DoctorReport",
    "PruneReport",
    "RegistryEntry",
    "RegistryProbe",
    "RegistrySwitcher",
    "SwitchResult",
]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryEntry:
    name: str | None
    url: str
    current: bool = False


@dataclass(frozen=True)
class SwitchResult:
    name: str
    url: str
    npmrc_path: Path
    backup_path: Path | None = None


@dataclass(frozen=True)
class RegistryProbe:
    name: str | None
    result: ProbeResult
    current: bool = False

    @property
    def url(self) -> str:
        return self.result.url


@dataclass
class PruneReport:
    local: bool
    dry_run: bool
    probes: list[RegistryProbe] = field(default_factory=list)
    unreachable: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    npmrc_change: LineRemoval = LineRemoval.UNCHANGED


@dataclass(frozen=True)
class DoctorReport:
    npmrc_path: Path
    npmrc_exists: bool
    builtin_count: int
    custom_count: int
    current: str | None

    @property
    def total(self) -> int:
        return self.builtin_count + self.custom_count


class RegistrySwitcher:
    """Own the profile for one invocation.

    Construction loads the profile, reconciles it against the global .npmrc
    and saves it back; every mutation saves again.
    """

    def __init__(
        self,
        paths: NrsPaths | None = None,
        *,
        settings: Settings | None = None,
        prober: RegistryProber | None = None,
    ) -> None:
        self.paths = paths or NrsPaths()
        self.settings = settings or load_settings(self.paths)
        self.prober = prober or RegistryProber(timeout=self.settings.probe_timeout)
        self.store = ProfileStore(self.paths.profile_path())
        self.profile = self._load()

    def _load(self) -> RegistryProfile:
        profile = self.store.load()
        live_url = npmrc.read_registry_url(self.paths.npmrc_path())
        reconcile(profile, live_url)
        self.store.save(profile)
        return profile

    def _persist(self) -> None:
        self.store.save(self.profile)

    # ------------------------ queries ------------------------

    def list_registries(self, sort: str = "name") -> list[RegistryEntry]:
        return [
            RegistryEntry(name=name, url=url, current=name == self.profile.current)
            for name, url in self.profile.sorted_items(sort)
        ]

    def current(self, *, local: bool = False) -> RegistryEntry | None:
        if local:
            url = npmrc.read_registry_url(self.paths.npmrc_path(local=True))
            if url is None:
                return None
            return RegistryEntry(name=self.profile.find_by_url(url), url=url)
        if self.profile.current is None:
            return None
        return RegistryEntry(
            name=self.profile.current,
            url=self.profile.url_for(self.profile.current),
            current=True,
        )

    def show(self, *, local: bool = False) -> str | None:
        return npmrc.read_text(self.paths.npmrc_path(local=local))

    def doctor(self) -> DoctorReport:
        path = self.paths.npmrc_path()
        return DoctorReport(
            npmrc_path=path,
            npmrc_exists=path.exists(),
            builtin_count=len(self.profile.builtin_registries),
            custom_count=len(self.profile.custom_registries),
            current=self.profile.current,
        )

    # ----------------------- mutations -----------------------

    def add(self, name: str, url: str) -> str | None:
        """Register a custom registry; return the existing name if ``url`` is taken."""
        existing = self.profile.add(name, url)
        if existing is not None:
            if existing != name:
                log.info("registry URL %s already exists as %s", url, existing)
            return existing
        self._persist()
        return None

    def edit(self, name: str, new_url: str) -> None:
        self.profile.edit(name, new_url)
        self._persist()

    def remove(self, name: str) -> None:
        self.profile.remove(name)
        self._persist()

    def use(self, name: str, *, backup: bool = False, local: bool = False) -> SwitchResult:
        url = self.profile.select(name)
        self._persist()
        path = self.paths.npmrc_path(local=local)
        written_backup = npmrc.set_registry_line(path, url, backup=backup)
        return SwitchResult(name=name, url=url, npmrc_path=path, backup_path=written_backup)

    def reset(self, *, confirm: bool, all_registries: bool = False) -> bool:
        if not confirm:
            return False
        self.profile = self.profile.reset(keep_custom=not all_registries)
        self._persist()
        return True

    # ---------------------- reachability ----------------------

    def _probe(self, name: str | None, url: str) -> RegistryProbe:
        current = name is not None and name == self.profile.current
        return RegistryProbe(name=name, result=self.prober.probe(url), current=current)

    def test(self, name: str | None = None, *, local: bool = False) -> list[RegistryProbe]:
        if local:
            url = npmrc.read_registry_url(self.paths.npmrc_path(local=True))
            if url is None:
                return []
            return [self._probe(self.profile.find_by_url(url), url)]
        if name:
            return [self._probe(name, self.profile.url_for(name))]
        return [
            self._probe(entry_name, url)
            for entry_name, url in self.profile.sorted_items("name")
        ]

    def prune(self, *, local: bool = False, dry_run: bool = False) -> PruneReport:
        report = PruneReport(local=local, dry_run=dry_run)
        if local:
            self._prune_local(report)
        else:
            self._prune_custom(report)
        return report

    def _prune_local(self, report: PruneReport) -> None:
        path = self.paths.npmrc_path(local=True)
        url = npmrc.read_registry_url(path)
        if url is None:
            return
        probe = self._probe(self.profile.find_by_url(url), url)
        report.probes.append(probe)
        if probe.result.reachable:
            return
        report.unreachable.append(url)
        if not report.dry_run:
            report.npmrc_change = npmrc.remove_registry_line(path)

    def _prune_custom(self, report: PruneReport) -> None:
        for name in sorted(self.profile.custom_registries):
            probe = self._probe(name, self.profile.custom_registries[name])
            report.probes.append(probe)
            if not probe.result.reachable:
                report.unreachable.append(name)
        if report.dry_run or not report.unreachable:
            return
        was_current = self.profile.current
        self._remove_many(report.unreachable)
        report.removed = list(report.unreachable)
        if was_current is not None and was_current in report.removed:
            report.npmrc_change = npmrc.remove_registry_line(self.paths.npmrc_path())

    def _remove_many(self, names: Sequence[str]) -> None:
        for name in names:
            self.profile.remove(name)
            log.debug("pruned unreachable registry %s", name)
        self._persist()
