"""Locations of the nrs profile, the settings file and the .npmrc files."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from platformdirs import user_config_dir

from .errors import HomeDirectoryUnavailable

APP_NAME = "nrs"
PROFILE_FILE_NAME = ".nrsrc"
NPMRC_FILE_NAME = ".npmrc"
SETTINGS_FILE_NAME = "config.toml"
BACKUP_SUFFIX = ".bak"

HOME_ENV = "NRS_HOME"
SETTINGS_ENV = "NRS_CONFIG"


@dataclass(frozen=True)
class NrsPaths:
    """Resolve per-user and per-directory paths, honoring overrides."""

    home_override: Path | None = None
    cwd_override: Path | None = None
    env: Mapping[str, str] = field(default_factory=lambda: os.environ)

    def home(self) -> Path:
        if self.home_override:
            return Path(self.home_override).expanduser()
        if value := self.env.get(HOME_ENV):
            return Path(value).expanduser()
        try:
            return Path.home()
        except RuntimeError as exc:
            raise HomeDirectoryUnavailable() from exc

    def cwd(self) -> Path:
        return Path(self.cwd_override) if self.cwd_override else Path.cwd()

    def profile_path(self) -> Path:
        return self.home() / PROFILE_FILE_NAME

    def npmrc_path(self, local: bool = False) -> Path:
        if local:
            return self.cwd() / NPMRC_FILE_NAME
        return self.home() / NPMRC_FILE_NAME

    def settings_path(self) -> Path:
        if value := self.env.get(SETTINGS_ENV):
            return Path(value).expanduser()
        return Path(user_config_dir(APP_NAME, appauthor=False)) / SETTINGS_FILE_NAME


def backup_path(path: Path) -> Path:
    """Return the sibling backup location for ``path`` (``.npmrc`` -> ``.npmrc.bak``)."""

    return path.with_name(path.name + BACKUP_SUFFIX)
