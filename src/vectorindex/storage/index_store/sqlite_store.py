from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
import re
import sqlite3
import threading
import time
from typing import Any

from vectorindex.contracts.storage.index_store import IndexStore

logger = logging.getLogger(__name__)

_IDENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class SQLiteIndexStore(IndexStore):
    """
    Durable index store on a single SQLite file.

    - One table per container (default "indices"), created lazily on first write.
    - Reads never create the table; a missing table reads as "no record".
    - Single connection per instance, thread-safe via RLock.
    - Blocking calls run in a worker thread (asyncio.to_thread).
    - Records are JSON-serialized dicts.
    """

    def __init__(self, path: str, *, container: str = "indices"):
        if not _IDENT.match(container):
            raise ValueError(f"Invalid container name: {container!r}")
        self.path = Path(path)
        self.container = container
        self._db: sqlite3.Connection | None = None
        self._ready = False
        self._lock = threading.RLock()

    def _connect(self) -> sqlite3.Connection:
        if self._db is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._db = sqlite3.connect(
                str(self.path),
                check_same_thread=False,  # guarded by RLock
                isolation_level=None,  # autocommit
            )
            self._db.execute("PRAGMA journal_mode=WAL;")
            self._db.execute("PRAGMA synchronous=NORMAL;")
        return self._db

    def _ensure_container(self, db: sqlite3.Connection) -> None:
        if self._ready:
            return
        db.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self.container} (
                name       TEXT PRIMARY KEY,
                data_json  TEXT NOT NULL,
                updated_at REAL NOT NULL
            )
            """
        )
        self._ready = True

    def _has_container(self, db: sqlite3.Connection) -> bool:
        if self._ready:
            return True
        row = db.execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
            (self.container,),
        ).fetchone()
        self._ready = row is not None
        return self._ready

    # --------- sync ---------
    def _put_sync(self, name: str, record: dict[str, Any]) -> None:
        payload = json.dumps(record, ensure_ascii=False)
        now = time.time()
        with self._lock:
            db = self._connect()
            self._ensure_container(db)
            db.execute(
                f"""
                INSERT INTO {self.container} (name, data_json, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(name) DO UPDATE SET
                    data_json = excluded.data_json,
                    updated_at = excluded.updated_at
                """,
                (name, payload, now),
            )

    def _get_sync(self, name: str) -> dict[str, Any] | None:
        if not self.path.exists():
            return None
        with self._lock:
            db = self._connect()
            if not self._has_container(db):
                return None
            row = db.execute(
                f"SELECT data_json FROM {self.container} WHERE name = ?",
                (name,),
            ).fetchone()
        if not row:
            return None
        return json.loads(row[0])

    def _delete_sync(self, name: str) -> None:
        if not self.path.exists():
            return
        with self._lock:
            db = self._connect()
            if not self._has_container(db):
                return
            db.execute(f"DELETE FROM {self.container} WHERE name = ?", (name,))

    def _list_sync(self) -> list[str]:
        if not self.path.exists():
            return []
        with self._lock:
            db = self._connect()
            if not self._has_container(db):
                return []
            rows = db.execute(f"SELECT name FROM {self.container} ORDER BY name").fetchall()
        return [r[0] for r in rows]

    # --------- async API ---------
    async def put(self, name: str, record: dict[str, Any]) -> None:
        await asyncio.to_thread(self._put_sync, name, record)
        logger.debug("put %s/%s", self.container, name)

    async def get(self, name: str) -> dict[str, Any] | None:
        return await asyncio.to_thread(self._get_sync, name)

    async def delete(self, name: str) -> None:
        await asyncio.to_thread(self._delete_sync, name)
        logger.debug("delete %s/%s", self.container, name)

    async def list(self) -> list[str]:
        return await asyncio.to_thread(self._list_sync)

    def close(self) -> None:
        with self._lock:
            if self._db is not None:
                self._db.close()
                self._db = None
                self._ready = False
