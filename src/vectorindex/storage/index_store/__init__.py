from .inmem_store import InMemoryIndexStore
from .sqlite_store import SQLiteIndexStore

__all__ = ["InMemoryIndexStore", "SQLiteIndexStore"]
