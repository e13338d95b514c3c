"""Read and rewrite the ``registry=`` line of an .npmrc file."""

from __future__ import annotations

import logging
import shutil
from enum import Enum
from pathlib import Path

from .errors import IOFailure
from .paths import backup_path

__all__ = [
    "LineRemoval",
    "read_registry_url",
    "read_text",
    "remove_registry_line",
    "set_registry_line",
]

REGISTRY_PREFIX = "registry="

log = logging.getLogger(__name__)


class LineRemoval(str, Enum):
    UNCHANGED = "unchanged"
    REWRITTEN = "rewritten"
    DELETED = "deleted"


def _is_registry_line(line: str) -> bool:
    return line.strip().startswith(REGISTRY_PREFIX)


def read_text(path: Path) -> str | None:
    # newline="" keeps \r and other separators as written
    try:
        with path.open(encoding="utf-8", newline="") as handle:
            return handle.read()
    except FileNotFoundError:
        return None
    except UnicodeDecodeError as exc:
        raise IOFailure(f"cannot decode {path} as UTF-8: {exc}") from exc
    except OSError as exc:
        raise IOFailure(f"cannot read {path}: {exc}") from exc


def _read_lines(path: Path) -> list[str]:
    """Split on ``\\n`` only; a trailing newline does not add an empty line."""
    text = read_text(path)
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def _write_lines(path: Path, lines: list[str]) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines) + "\n", encoding="utf-8", newline="")
    except OSError as exc:
        raise IOFailure(f"cannot write {path}: {exc}") from exc


def read_registry_url(path: Path) -> str | None:
    for line in _read_lines(path):
        if _is_registry_line(line):
            return line.strip()[len(REGISTRY_PREFIX):].strip()
    return None


def set_registry_line(path: Path, url: str, *, backup: bool = False) -> Path | None:
    """Replace every ``registry=`` line in ``path`` with ``registry=<url>``.

    Other lines keep their text and order. When ``backup`` is set and the file
    exists it is copied next to itself first; the backup path is returned.
    """
    lines = [line for line in _read_lines(path) if not _is_registry_line(line)]
    written_backup: Path | None = None
    if backup and path.exists():
        written_backup = backup_path(path)
        try:
            shutil.copyfile(path, written_backup)
        except OSError as exc:
            raise IOFailure(f"cannot back up {path}: {exc}") from exc
        log.debug("backed up %s to %s", path, written_backup)
    lines.append(f"{REGISTRY_PREFIX}{url}")
    _write_lines(path, lines)
    log.debug("set %s%s in %s", REGISTRY_PREFIX, url, path)
    return written_backup


def remove_registry_line(path: Path) -> LineRemoval:
    """Drop every ``registry=`` line; delete the file when nothing else remains."""
    if not path.exists():
        return LineRemoval.UNCHANGED
    lines = _read_lines(path)
    kept = [line for line in lines if not _is_registry_line(line)]
    if len(kept) == len(lines):
        return LineRemoval.UNCHANGED
    if not kept:
        try:
            path.unlink()
        except OSError as exc:
            raise IOFailure(f"cannot remove {path}: {exc}") from exc
        return LineRemoval.DELETED
    _write_lines(path, kept)
    return LineRemoval.REWRITTEN
