from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Any

from vectorindex.config.config import AppSettings
from vectorindex.contracts.services.embedding import EmbeddingClientProtocol
from vectorindex.core.vector_index import VectorIndex
from vectorindex.services.logger.base import LoggerService


class CorpusIndex:
    """
    Text-level facade over a VectorIndex: embeds with the given client, keeps
    one index persisted under `name`.

    Typical startup:

        corpus = CorpusIndex.from_settings("ml-quizzes-index", get_settings(), embedder)
        from_cache = await corpus.warm_start(questions)
        hits = await corpus.query("what is overfitting?", k=3)
        corpus.close()
    """

    def __init__(
        self,
        name: str,
        index: VectorIndex,
        embedder: EmbeddingClientProtocol,
        *,
        logger_service: LoggerService | None = None,
    ):
        dims = getattr(embedder, "dimensions", None)
        if dims is not None and dims != index.dimensions:
            raise ValueError(
                f"Embedder produces {dims}-dim vectors but index {name!r} expects {index.dimensions}"
            )
        self.name = name
        self.index = index
        self.embedder = embedder
        self._log = (
            logger_service.for_index(name) if logger_service else logging.getLogger(__name__)
        )

    @classmethod
    def from_settings(
        cls,
        name: str,
        cfg: AppSettings,
        embedder: EmbeddingClientProtocol,
        *,
        logger_service: LoggerService | None = None,
    ) -> "CorpusIndex":
        """Index sized and stored per `cfg.index` / `cfg.storage`; closed by `close()`."""
        return cls(name, VectorIndex.from_settings(cfg), embedder, logger_service=logger_service)

    async def warm_start(self, texts: Sequence[str]) -> bool:
        """
        Load the persisted index, or rebuild it from `texts` and save it.

        Returns True if served from the store, False if rebuilt.
        """
        loaded = await self.index.load(self.name)
        if loaded and self.index.size() > 0:
            self._log.info("Loaded %d vectors from store", self.index.size())
            return True

        self.index.clear()
        for i, text in enumerate(texts):
            self._log.debug("Embedding %d/%d", i + 1, len(texts))
            vector = await self.embedder.embed_one(text)
            self.index.add(vector, {"id": i, "text": text})

        await self.index.save(self.name)
        self._log.info("Indexed %d texts", self.index.size())
        return False

    async def add_text(self, text: str, **metadata: Any) -> None:
        vector = await self.embedder.embed_one(text)
        self.index.add(vector, {"text": text, **metadata})

    async def query(self, text: str, k: int | None = None) -> list[dict[str, Any]]:
        """Embed `text` and search; `k` defaults to the index default_k."""
        vector = await self.embedder.embed_one(text)
        results = self.index.search(vector, k)
        self._log.debug("Query returned %d results", len(results))
        return results

    async def save(self) -> None:
        await self.index.save(self.name)

    async def reset(self) -> None:
        """Drop in-memory entries and the persisted record."""
        self.index.clear()
        await self.index.delete(self.name)

    def close(self) -> None:
        self.index.close()
