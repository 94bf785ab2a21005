from __future__ import annotations


class VectorIndexError(Exception):
    """Base class for all vectorindex errors."""


class DimensionMismatch(VectorIndexError, ValueError):
    """
    Raised by `VectorIndex.add` / `VectorIndex.search` when the input vector
    length differs from the index dimensionality. The index is left untouched.
    """

    def __init__(self, expected: int, actual: int | tuple[int, ...]):
        self.expected = expected
        self.actual = actual
        got = f"shape {actual}" if isinstance(actual, tuple) else actual
        super().__init__(f"Vector dimension mismatch: expected {expected}, got {got}")


class PersistenceError(VectorIndexError):
    """
    Raised when the backing store faults during `save` or `delete`.
    Always chained to the underlying storage exception.
    """

    def __init__(self, operation: str, name: str, message: str | None = None):
        self.operation = operation
        self.name = name
        super().__init__(message or f"Failed to {operation} index {name!r}")


class EmbeddingError(VectorIndexError):
    """Embedding provider request failed or returned an unexpected shape."""
