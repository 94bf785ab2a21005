__version__ = "0.1.0"

# Core
from .core.vector_index import VectorIndex  # in-memory cosine index with async persistence
from .core.similarity import cosine_similarity

# Errors
from .core.errors import VectorIndexError, DimensionMismatch, PersistenceError, EmbeddingError

# Stores
from .storage.index_store import InMemoryIndexStore, SQLiteIndexStore
from .storage.factory import build_index_store

# Services
from .services.embedding.generic_embed_client import GenericEmbeddingClient
from .services.retrieval.corpus_index import CorpusIndex

__all__ = [
    # Core
    "VectorIndex", "cosine_similarity",
    # Errors
    "VectorIndexError", "DimensionMismatch", "PersistenceError", "EmbeddingError",
    # Stores
    "InMemoryIndexStore", "SQLiteIndexStore", "build_index_store",
    # Services
    "GenericEmbeddingClient", "CorpusIndex",
]
