from __future__ import annotations

import copy
import threading
from typing import Any

from vectorindex.contracts.storage.index_store import IndexStore


class InMemoryIndexStore(IndexStore):
    """
    Simple in-memory index store.

    - Process-local, not shared across processes.
    - Thread-safe via RLock.
    - Stores deep copies, so callers cannot mutate persisted records in place.
    """

    def __init__(self):
        self._data: dict[str, dict[str, Any]] = {}
        self._lock = threading.RLock()

    async def put(self, name: str, record: dict[str, Any]) -> None:
        with self._lock:
            self._data[name] = copy.deepcopy(record)

    async def get(self, name: str) -> dict[str, Any] | None:
        with self._lock:
            record = self._data.get(name)
            return copy.deepcopy(record) if record is not None else None

    async def delete(self, name: str) -> None:
        with self._lock:
            self._data.pop(name, None)

    async def list(self) -> list[str]:
        with self._lock:
            return sorted(self._data.keys())
