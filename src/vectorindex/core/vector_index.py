from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
from typing import Any

import numpy as np

from vectorindex.config.config import AppSettings
from vectorindex.contracts.storage.index_store import IndexStore
from vectorindex.core.errors import DimensionMismatch, PersistenceError
from vectorindex.core.similarity import cosine_similarities, cosine_similarity

logger = logging.getLogger(__name__)


def _check_int(value: Any, name: str, *, minimum: int) -> int:
    # bool is an int subclass; floats are rejected rather than truncated
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value!r}")
    return int(value)


class VectorIndex:
    """
    Brute-force cosine-similarity index over fixed-dimension vectors.

    - Vectors are stored as float32 copies, in insertion order; position is identity.
    - metadata[i] describes vectors[i]; the two lists always grow in lockstep.
    - No per-entry deletion; `clear()` resets everything but `dimensions`.
    - save/load/delete go through an async IndexStore (one record per index name).

    Search results are flat dicts: {"score": float, "index": int, **metadata}.
    Metadata keys are merged last, so a metadata field named "score" or "index"
    shadows the computed value. Callers should not rely on that behaviour.

    Single owner only: await save/load/delete before issuing further add/search.
    """

    def __init__(
        self,
        dimensions: int,
        *,
        store: IndexStore | None = None,
        default_k: int = 5,
    ):
        self.dimensions = _check_int(dimensions, "dimensions", minimum=1)
        self.default_k = _check_int(default_k, "default_k", minimum=0)
        self.vectors: list[np.ndarray] = []
        self.metadata: list[dict[str, Any]] = []
        self._store = store
        self._owns_store = False

    @classmethod
    def from_settings(cls, cfg: AppSettings, *, store: IndexStore | None = None) -> "VectorIndex":
        """Index sized by `cfg.index`; the store is built from `cfg.storage` unless given."""
        owns_store = store is None
        if owns_store:
            from vectorindex.storage.factory import build_index_store

            store = build_index_store(cfg)
        index = cls(cfg.index.dimensions, store=store, default_k=cfg.index.default_k)
        index._owns_store = owns_store
        return index

    # --------- helpers ---------
    @property
    def store(self) -> IndexStore:
        if self._store is None:
            # late import; settings are only read when no store was injected
            from vectorindex.config.runtime import get_settings
            from vectorindex.storage.factory import build_index_store

            self._store = build_index_store(get_settings())
            self._owns_store = True
        return self._store

    def close(self) -> None:
        """Close the store if this index built it; injected stores belong to the caller."""
        if self._owns_store and self._store is not None:
            close = getattr(self._store, "close", None)
            if close is not None:
                close()
            self._store = None
            self._owns_store = False

    def _as_vector(self, vector: Sequence[float] | np.ndarray) -> np.ndarray:
        v = np.array(vector, dtype=np.float32)
        if v.ndim != 1:
            raise DimensionMismatch(self.dimensions, tuple(int(n) for n in v.shape))
        if v.shape[0] != self.dimensions:
            raise DimensionMismatch(self.dimensions, int(v.shape[0]))
        return v

    @staticmethod
    def cosine_similarity(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> float:
        return cosine_similarity(a, b)

    # --------- in-memory API ---------
    def add(
        self,
        vector: Sequence[float] | np.ndarray,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        v = self._as_vector(vector)
        self.vectors.append(v)
        self.metadata.append(dict(metadata or {}))

    def search(
        self, query_vector: Sequence[float] | np.ndarray, k: int | None = None
    ) -> list[dict[str, Any]]:
        """Top-k entries by cosine similarity; `k` defaults to `default_k` (5)."""
        q = self._as_vector(query_vector)
        if k is None:
            k = self.default_k
        if k < 0:
            raise ValueError(f"k must be non-negative, got {k}")
        if k == 0 or not self.vectors:
            return []

        scores = cosine_similarities(np.stack(self.vectors, axis=0), q)
        # stable sort keeps insertion order for equal scores
        order = np.argsort(-scores, kind="stable")[:k]

        results: list[dict[str, Any]] = []
        for i in order.tolist():
            results.append({"score": float(scores[i]), "index": i, **self.metadata[i]})
        return results

    def size(self) -> int:
        return len(self.vectors)

    def __len__(self) -> int:
        return self.size()

    def clear(self) -> None:
        self.vectors = []
        self.metadata = []

    # --------- persistence ---------
    def to_record(self, name: str) -> dict[str, Any]:
        return {
            "name": name,
            "dimensions": self.dimensions,
            "vectors": [v.tolist() for v in self.vectors],
            "metadata": [dict(m) for m in self.metadata],
        }

    async def save(self, name: str) -> None:
        """Upsert the full index state under `name`."""
        record = self.to_record(name)
        try:
            await self.store.put(name, record)
        except Exception as e:
            raise PersistenceError("save", name) from e
        logger.debug("Saved index %r (%d vectors, dim=%d)", name, len(self.vectors), self.dimensions)

    async def load(self, name: str) -> bool:
        """
        Replace this index with the record stored under `name`.

        Returns False (never raises) when the record is missing, malformed, or
        the store faults; the current state is kept in that case.
        """
        try:
            record = await self.store.get(name)
        except Exception as e:
            logger.warning("Failed to load index %r: %s", name, e)
            return False
        if record is None:
            return False

        try:
            dimensions = _check_int(record["dimensions"], "dimensions", minimum=1)
            vectors = [np.asarray(v, dtype=np.float32) for v in record["vectors"]]
            metadata = [dict(m) for m in record["metadata"]]
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            logger.warning("Stored index %r is malformed: %s", name, e)
            return False

        if len(vectors) != len(metadata):
            logger.warning("Stored index %r is malformed: inconsistent sizes", name)
            return False
        if any(v.ndim != 1 or v.shape[0] != dimensions for v in vectors):
            logger.warning("Stored index %r is malformed: vector length != %d", name, dimensions)
            return False

        self.dimensions = dimensions
        self.vectors = vectors
        self.metadata = metadata
        return True

    async def delete(self, name: str) -> None:
        """Remove the record stored under `name` (no-op if absent)."""
        try:
            await self.store.delete(name)
        except Exception as e:
            raise PersistenceError("delete", name) from e
