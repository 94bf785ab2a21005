import os

from vectorindex.config.config import AppSettings
from vectorindex.contracts.storage.index_store import IndexStore
from vectorindex.storage.index_store.inmem_store import InMemoryIndexStore
from vectorindex.storage.index_store.sqlite_store import SQLiteIndexStore


def build_index_store(cfg: AppSettings) -> IndexStore:
    """
    Decide which index store backend to use based on AppSettings.storage.
    """
    st_cfg = cfg.storage

    if st_cfg.backend == "memory":
        return InMemoryIndexStore()

    if st_cfg.backend == "sqlite":
        root = os.path.abspath(cfg.root)
        path = os.path.join(root, st_cfg.sqlite.dir, f"{st_cfg.db_name}.sqlite")
        return SQLiteIndexStore(path, container=st_cfg.container)

    raise ValueError(f"Unknown index store backend: {st_cfg.backend!r}")
