"""File-backed key-value storage: one file per key in a directory."""

from __future__ import annotations

import re
from pathlib import Path

from cinelink_search.errors import StorageError

_KEY_RE = re.compile(r"[A-Za-z0-9_.-]+")


class JsonFileStorage:
    """Directory of ``<key>.json`` files holding opaque string values.

    The directory is created on demand; unreadable files read as missing.
    """

    _SUFFIX = ".json"

    def __init__(self, storage_dir: str | Path) -> None:
        self._dir = Path(storage_dir)
        self._dir.mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._dir

    def _path_for(self, key: str) -> Path:
        if not _KEY_RE.fullmatch(key):
            raise ValueError(f"Invalid storage key {key!r}")
        return self._dir / f"{key}{self._SUFFIX}"

    async def get_item(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None

    async def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        tmp = path.with_suffix(".tmp")
        try:
            tmp.write_text(value, encoding="utf-8")
            tmp.replace(path)
        except OSError as exc:
            raise StorageError(f"Failed to write {key!r}: {exc}") from exc

    async def remove_item(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)

    async def clear(self) -> None:
        for f in self._dir.glob(f"*{self._SUFFIX}"):
            f.unlink(missing_ok=True)
