# vectorindex/services/embedding/generic_embed_client.py
from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
import hashlib
import os
from typing import Any

import httpx
import numpy as np

from vectorindex.config.config import EmbeddingSettings
from vectorindex.contracts.services.embedding import EmbeddingClientProtocol
from vectorindex.core.errors import EmbeddingError

_OPENAI_LIKE = {"openai", "openrouter", "lmstudio", "ollama"}


@dataclass
class GenericEmbeddingClient(EmbeddingClientProtocol):
    """
    Provider-agnostic embedding client.

    provider: one of {"openai","openrouter","lmstudio","ollama","hash"}

    Configuration (env defaults, but can be passed directly):

    - OPENAI_API_KEY / OPENAI_BASE_URL
    - OPENROUTER_API_KEY
    - LMSTUDIO_BASE_URL (default http://localhost:1234/v1)
    - OLLAMA_BASE_URL   (default http://localhost:11434/v1)

    The "hash" provider needs no network: it derives a deterministic unit
    vector of `dimensions` floats from the text. Useful offline and in tests.
    """

    provider: str | None = None
    model: str | None = None
    base_url: str | None = None
    api_key: str | None = None
    timeout: float = 60.0
    dimensions: int = 384

    # injectable for tests (httpx.MockTransport)
    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        self.provider = (self.provider or os.getenv("EMBED_PROVIDER") or "hash").lower()
        if self.provider not in _OPENAI_LIKE and self.provider != "hash":
            raise ValueError(f"Unknown embedding provider: {self.provider}")

        self.model = self.model or os.getenv("EMBED_MODEL") or "text-embedding-3-small"

        if self.api_key is None:
            self.api_key = os.getenv("OPENAI_API_KEY") or os.getenv("OPENROUTER_API_KEY")

        # Base URL defaults per provider
        if self.base_url is None:
            self.base_url = {
                "openai": os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1"),
                "openrouter": "https://openrouter.ai/api/v1",
                "lmstudio": os.getenv("LMSTUDIO_BASE_URL", "http://localhost:1234/v1"),
                "ollama": os.getenv("OLLAMA_BASE_URL", "http://localhost:11434/v1"),
                "hash": "",
            }[self.provider]
        self.base_url = self.base_url.rstrip("/")

        self._client: httpx.AsyncClient | None = None
        self._bound_loop: asyncio.AbstractEventLoop | None = None

    @classmethod
    def from_settings(cls, cfg: EmbeddingSettings, **kw: Any) -> "GenericEmbeddingClient":
        return cls(
            provider=cfg.provider,
            model=cfg.model,
            base_url=cfg.base_url,
            api_key=cfg.api_key.get_secret_value() if cfg.api_key else None,
            timeout=cfg.timeout,
            dimensions=cfg.dimensions,
            **kw,
        )

    # ------------ client management -----------------

    async def _ensure_client(self) -> httpx.AsyncClient:
        """
        Ensure we have an httpx.AsyncClient bound to the *current* event loop.

        A client created on another loop is dropped, not closed: httpx expects
        aclose() on the loop that created it.
        """
        loop = asyncio.get_running_loop()
        if self._client is None or self._bound_loop is not loop:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self.transport)
            self._bound_loop = loop
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            self._bound_loop = None

    # ------------ public API ------------------------

    async def embed(self, texts: Sequence[str]) -> list[list[float]]:
        """Batch embedding; output order matches `texts`."""
        if isinstance(texts, str) or any(not isinstance(t, str) for t in texts):
            raise TypeError("embed(texts) expects Sequence[str]")
        if len(texts) == 0:
            return []

        if self.provider == "hash":
            return [self._embed_hash(t) for t in texts]
        return await self._embed_openai_like(texts)

    async def embed_one(self, text: str) -> list[float]:
        res = await self.embed([text])
        return res[0]

    # ------------ provider-specific helpers ------------------------

    def _headers_openai_like(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _embed_openai_like(self, texts: Sequence[str]) -> list[list[float]]:
        client = await self._ensure_client()
        url = f"{self.base_url}/embeddings"
        body: dict[str, Any] = {
            "model": self.model,
            "input": list(texts),
            "encoding_format": "float",
        }

        try:
            r = await client.post(url, headers=self._headers_openai_like(), json=body)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise EmbeddingError(
                f"Embeddings request failed ({e.response.status_code}): {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise EmbeddingError(f"Embeddings request failed: {e}") from e

        items = r.json().get("data", []) or []
        # OpenAI-compatible servers may return items out of order; "index" is authoritative
        items = sorted(items, key=lambda d: d.get("index", 0))
        embs = [d.get("embedding") for d in items]
        if len(embs) != len(texts) or any(e is None for e in embs):
            raise EmbeddingError(
                f"Embeddings response shape mismatch: got {len(embs)} items for {len(texts)} inputs"
            )
        return embs  # type: ignore[return-value]

    def _embed_hash(self, text: str) -> list[float]:
        # 8 float32-sized chunks per sha256 digest
        n_blocks = -(-self.dimensions // 8)
        raw = b"".join(
            hashlib.sha256(f"{i}:{text}".encode("utf-8")).digest() for i in range(n_blocks)
        )
        ints = np.frombuffer(raw, dtype=np.uint32)[: self.dimensions]
        vec = ints.astype(np.float64) / float(2**32) * 2.0 - 1.0
        norm = float(np.linalg.norm(vec))
        if norm > 0:
            vec = vec / norm
        return vec.astype(np.float32).tolist()
