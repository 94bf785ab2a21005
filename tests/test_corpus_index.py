import pytest

from vectorindex.core.vector_index import VectorIndex
from vectorindex.services.embedding.generic_embed_client import GenericEmbeddingClient
from vectorindex.services.logger.std import LoggingConfig, StdLoggerService
from vectorindex.services.retrieval.corpus_index import CorpusIndex
from vectorindex.storage.index_store.inmem_store import InMemoryIndexStore
from vectorindex.storage.index_store.sqlite_store import SQLiteIndexStore

QUIZZES = [
    "What is the difference between supervised and unsupervised learning?",
    "Explain the concept of overfitting in machine learning models.",
    "What is gradient descent and how does it optimize neural networks?",
]


class CountingEmbedder:
    def __init__(self, dims=16):
        self.inner = GenericEmbeddingClient(provider="hash", dimensions=dims)
        self.calls = 0

    async def embed(self, texts):
        self.calls += len(texts)
        return await self.inner.embed(texts)

    async def embed_one(self, text):
        self.calls += 1
        return await self.inner.embed_one(text)


@pytest.mark.asyncio
async def test_warm_start_builds_then_serves_from_store(tmp_path):
    store = SQLiteIndexStore(str(tmp_path / "VectorIndexDB.sqlite"))
    embedder = CountingEmbedder()

    first = CorpusIndex("ml-quizzes-index", VectorIndex(16, store=store), embedder)
    assert await first.warm_start(QUIZZES) is False
    assert first.index.size() == 3
    assert embedder.calls == 3
    assert first.index.metadata[1] == {"id": 1, "text": QUIZZES[1]}

    second = CorpusIndex("ml-quizzes-index", VectorIndex(16, store=store), embedder)
    assert await second.warm_start(QUIZZES) is True
    assert embedder.calls == 3  # nothing re-embedded
    assert second.index.metadata == first.index.metadata


@pytest.mark.asyncio
async def test_warm_start_rebuilds_when_stored_index_is_empty():
    store = InMemoryIndexStore()
    await VectorIndex(16, store=store).save("empty")

    corpus = CorpusIndex("empty", VectorIndex(16, store=store), CountingEmbedder())
    assert await corpus.warm_start(QUIZZES) is False
    assert corpus.index.size() == 3


@pytest.mark.asyncio
async def test_query_finds_exact_text_first():
    corpus = CorpusIndex("q", VectorIndex(16, store=InMemoryIndexStore()), CountingEmbedder())
    await corpus.warm_start(QUIZZES)

    hits = await corpus.query(QUIZZES[2], k=2)
    assert len(hits) == 2
    assert hits[0]["id"] == 2
    assert hits[0]["index"] == 2
    assert hits[0]["score"] == pytest.approx(1.0, abs=1e-5)


@pytest.mark.asyncio
async def test_add_text_save_and_reset():
    store = InMemoryIndexStore()
    corpus = CorpusIndex("notes", VectorIndex(16, store=store), CountingEmbedder())

    await corpus.add_text("hello", source="manual")
    assert corpus.index.metadata == [{"text": "hello", "source": "manual"}]

    await corpus.save()
    assert await store.list() == ["notes"]

    await corpus.reset()
    assert corpus.index.size() == 0
    assert await store.get("notes") is None


@pytest.mark.asyncio
async def test_uses_logger_service_when_given(tmp_path):
    svc = StdLoggerService.build(
        LoggingConfig(root_ns="vectorindex_test_corpus", log_dir=str(tmp_path), level="DEBUG")
    )
    corpus = CorpusIndex(
        "logged",
        VectorIndex(16, store=InMemoryIndexStore()),
        CountingEmbedder(),
        logger_service=svc,
    )
    await corpus.warm_start(QUIZZES[:1])
    for h in svc.base().handlers:
        h.flush()

    text = (tmp_path / "vectorindex.log").read_text(encoding="utf-8")
    assert "Indexed 1 texts" in text
    assert "logged" in text


@pytest.mark.asyncio
async def test_from_settings_sizes_index_and_honours_default_k(tmp_path):
    from vectorindex.config.config import AppSettings

    cfg = AppSettings(root=str(tmp_path), index={"dimensions": 16, "default_k": 2})
    embedder = GenericEmbeddingClient(provider="hash", dimensions=16)

    corpus = CorpusIndex.from_settings("quiz", cfg, embedder)
    try:
        assert corpus.index.dimensions == 16
        await corpus.warm_start(QUIZZES)
        assert len(await corpus.query(QUIZZES[0])) == 2
    finally:
        corpus.close()
    assert (tmp_path / "db" / "VectorIndexDB.sqlite").exists()


def test_embedder_dimension_mismatch_rejected():
    from vectorindex.config.config import AppSettings

    cfg = AppSettings(index={"dimensions": 768}, storage={"backend": "memory"})
    embedder = GenericEmbeddingClient(provider="hash", dimensions=384)
    with pytest.raises(ValueError, match="384"):
        CorpusIndex.from_settings("quiz", cfg, embedder)
