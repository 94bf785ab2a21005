from typing import Any, Protocol

"""
Index store interface for persisting whole VectorIndex snapshots.

One database, one container inside it; each record is keyed by a caller-chosen
name and holds the full serialized index:

    {"name": str, "dimensions": int, "vectors": list[list[float]], "metadata": list[dict]}

Typical implementations include:
- InMemoryIndexStore: process-local store for tests or ephemeral use
- SQLiteIndexStore: durable store on a local SQLite file
"""


class IndexStore(Protocol):
    async def put(self, name: str, record: dict[str, Any]) -> None: ...
    async def get(self, name: str) -> dict[str, Any] | None: ...
    async def delete(self, name: str) -> None: ...

    # Optional
    async def list(self) -> list[str]: ...
