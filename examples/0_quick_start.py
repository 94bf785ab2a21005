import asyncio

from vectorindex import CorpusIndex, GenericEmbeddingClient
from vectorindex.config import get_settings
from vectorindex.services.logger import LoggingConfig, StdLoggerService

QUIZZES = [
    "What is the difference between supervised and unsupervised learning?",
    "Explain the concept of overfitting in machine learning models.",
    "What is gradient descent and how does it optimize neural networks?",
    "Describe the bias-variance tradeoff in machine learning.",
    "How does a convolutional neural network process images?",
]


async def main() -> None:
    cfg = get_settings()
    logs = StdLoggerService.build(LoggingConfig.from_cfg(cfg))

    # hash provider by default; set VECTORINDEX_EMBEDDING__PROVIDER=openai for real embeddings
    embedder = GenericEmbeddingClient.from_settings(cfg.embedding)
    corpus = CorpusIndex.from_settings("ml-quizzes-index", cfg, embedder, logger_service=logs)

    from_cache = await corpus.warm_start(QUIZZES)
    print(f"index ready: {corpus.index.size()} vectors (cached={from_cache})")

    for hit in await corpus.query("How do models avoid memorizing training data?"):
        print(f"{hit['score']:.3f}  #{hit['index']}  {hit['text']}")

    corpus.close()
    await embedder.aclose()
    logs.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
