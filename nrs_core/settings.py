"""User settings for nrs, read from an optional TOML file and the environment."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .paths import NrsPaths

DEFAULT_PROBE_TIMEOUT = 10.0
DEFAULT_LOG_LEVEL = "WARNING"

LOG_LEVEL_ENV = "NRS_LOG_LEVEL"
PROBE_TIMEOUT_ENV = "NRS_PROBE_TIMEOUT"

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL


def _load_toml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        log.warning("ignoring unreadable settings file %s: %s", path, exc)
        return {}
    return data


def _table(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    return value if isinstance(value, Mapping) else {}


def _as_timeout(value: Any, fallback: float) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        return fallback
    return timeout if timeout > 0 else fallback


def load_settings(
    paths: NrsPaths | None = None,
    env: Mapping[str, str] | None = None,
) -> Settings:
    """Return settings using environment, settings file, defaults order."""

    paths = paths or NrsPaths()
    env = os.environ if env is None else env
    data = _load_toml(paths.settings_path())
    probe = _table(data, "probe")
    logging_table = _table(data, "logging")

    timeout = _as_timeout(probe.get("timeout_seconds"), DEFAULT_PROBE_TIMEOUT)
    if value := env.get(PROBE_TIMEOUT_ENV):
        timeout = _as_timeout(value, timeout)

    level = str(logging_table.get("level") or DEFAULT_LOG_LEVEL)
    if value := env.get(LOG_LEVEL_ENV):
        level = value
    return Settings(probe_timeout=timeout, log_level=level.upper())
