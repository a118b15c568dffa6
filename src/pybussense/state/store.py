"""Key-value stores backing the history cache.

A store only moves bytes; serialization lives in
:class:`pybussense.models.history.HistoryRecord`.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Protocol

from pybussense.exceptions import CacheReadError, CacheWriteError

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class HistoryStore(Protocol):
    """Structural store interface used by :class:`HistoryCache`.

    Implementations may raise on failure; the cache treats every failure
    as soft.
    """

    async def get(self, key: str) -> bytes | None:
        ...

    async def put(self, key: str, value: bytes) -> None:
        ...


class InMemoryHistoryStore:
    """Dict-backed store, for tests and single-process deployments."""

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}

    async def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    async def put(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)


class FileHistoryStore:
    """One file per key under a cache directory.

    Blocking file I/O runs in a worker thread. Writes go to a temporary
    file that replaces the target, so readers never see a partial record.
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        safe = _UNSAFE_KEY_CHARS.sub("_", key.strip())
        if not safe or safe in {".", ".."}:
            raise ValueError(f"invalid cache key {key!r}")
        return self._directory / safe

    def _read(self, key: str) -> bytes | None:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise CacheReadError(f"Cannot read {path}: {exc}", key=key) from exc

    def _write(self, key: str, value: bytes) -> None:
        path = self.path_for(key)
        tmp = path.with_name(f".{path.name}.tmp")
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(value)
            tmp.replace(path)
        except OSError as exc:
            raise CacheWriteError(f"Cannot write {path}: {exc}", key=key) from exc

    async def get(self, key: str) -> bytes | None:
        return await asyncio.to_thread(self._read, key)

    async def put(self, key: str, value: bytes) -> None:
        await asyncio.to_thread(self._write, key, value)
