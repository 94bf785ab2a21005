from __future__ import annotations

from collections.abc import Sequence

import numpy as np


def cosine_similarity(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> float:
    """
    Cosine similarity of two equal-length vectors.

    Accumulates in float64. Returns exactly 0.0 when either vector has zero
    magnitude instead of dividing by zero.
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    magnitude = float(np.linalg.norm(va)) * float(np.linalg.norm(vb))
    if magnitude == 0.0:
        return 0.0
    return float(np.dot(va, vb) / magnitude)


def cosine_similarities(matrix: np.ndarray, query: Sequence[float] | np.ndarray) -> np.ndarray:
    """
    Score every row of `matrix` (n, d) against `query` (d,) in one pass.

    Rows (or a query) with zero magnitude score 0.0, same policy as
    `cosine_similarity`.
    """
    x = np.asarray(matrix, dtype=np.float64)
    q = np.asarray(query, dtype=np.float64)
    if x.shape[0] == 0:
        return np.zeros(0, dtype=np.float64)

    row_norms = np.linalg.norm(x, axis=1)
    magnitudes = row_norms * float(np.linalg.norm(q))
    dots = x @ q

    scores = np.zeros_like(dots)
    nonzero = magnitudes != 0.0
    scores[nonzero] = dots[nonzero] / magnitudes[nonzero]
    return scores
