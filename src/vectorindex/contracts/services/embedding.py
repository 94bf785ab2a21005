from collections.abc import Sequence
from typing import Protocol


class EmbeddingClientProtocol(Protocol):
    async def embed(self, texts: Sequence[str]) -> list[list[float]]: ...
    async def embed_one(self, text: str) -> list[float]: ...
