import numpy as np
import pytest

from vectorindex.core.errors import DimensionMismatch
from vectorindex.core.vector_index import VectorIndex


def test_add_and_search_returns_metadata_merged_with_score_and_index():
    index = VectorIndex(3)
    index.add([1, 0, 0], {"id": 1})
    index.add([0, 1, 0], {"id": 2})

    results = index.search([1, 0, 0], 1)
    assert results == [{"score": pytest.approx(1.0), "index": 0, "id": 1}]


def test_parallel_vectors_of_different_magnitude_score_one():
    index = VectorIndex(3)
    index.add([3, 4, 0], {})
    assert index.search([3, 4, 0], 1)[0]["score"] == pytest.approx(1.0)
    assert index.search([6, 8, 0], 1)[0]["score"] == pytest.approx(1.0)


def test_add_grows_size_by_one_and_default_metadata_is_empty():
    index = VectorIndex(2)
    assert index.size() == 0
    index.add([0.5, 0.5])
    assert index.size() == 1
    assert len(index) == 1
    assert index.search([0.5, 0.5], 5) == [{"score": pytest.approx(1.0), "index": 0}]


def test_add_dimension_mismatch_leaves_state_unchanged():
    index = VectorIndex(3)
    index.add([1, 2, 3], {"id": "a"})

    with pytest.raises(DimensionMismatch) as exc:
        index.add([1, 2], {"id": "b"})

    assert exc.value.expected == 3
    assert exc.value.actual == 2
    assert "expected 3, got 2" in str(exc.value)
    assert index.size() == 1
    assert len(index.metadata) == 1


def test_dimension_mismatch_is_a_value_error():
    index = VectorIndex(4)
    with pytest.raises(ValueError):
        index.add([1.0])


def test_search_dimension_mismatch():
    index = VectorIndex(3)
    index.add([1, 0, 0])
    with pytest.raises(DimensionMismatch):
        index.search([1, 0], 1)


def test_search_empty_index_returns_empty_list():
    index = VectorIndex(3)
    assert index.search([1, 0, 0]) == []
    assert index.search([1, 0, 0], 100) == []


def test_search_k_zero_and_negative():
    index = VectorIndex(2)
    index.add([1, 0])
    assert index.search([1, 0], 0) == []
    with pytest.raises(ValueError):
        index.search([1, 0], -1)


def test_search_sorted_descending_and_bounded_by_k_and_size():
    rng = np.random.default_rng(7)
    index = VectorIndex(8)
    for i in range(20):
        index.add(rng.normal(size=8), {"id": i})

    q = rng.normal(size=8)
    for k in (1, 5, 20, 50):
        results = index.search(q, k)
        assert len(results) == min(k, index.size())
        scores = [r["score"] for r in results]
        assert scores == sorted(scores, reverse=True)


def test_ties_keep_insertion_order():
    index = VectorIndex(2)
    index.add([1, 0], {"id": "first"})
    index.add([0, 1], {"id": "other"})
    index.add([2, 0], {"id": "second"})

    results = index.search([1, 0], 3)
    assert [r["id"] for r in results] == ["first", "second", "other"]


def test_zero_vector_scores_exactly_zero():
    index = VectorIndex(3)
    index.add([0, 0, 0], {"id": "zero"})
    index.add([0, 0, 1], {"id": "z"})

    results = index.search([1, 0, 0], 2)
    assert all(r["score"] == 0.0 for r in results)

    # zero query against anything
    assert index.search([0, 0, 0], 2)[0]["score"] == 0.0


def test_negative_similarity_ranks_last():
    index = VectorIndex(2)
    index.add([-1, 0], {"id": "opposite"})
    index.add([1, 1], {"id": "diag"})
    results = index.search([1, 0], 2)
    assert [r["id"] for r in results] == ["diag", "opposite"]
    assert results[1]["score"] == pytest.approx(-1.0)


def test_vectors_are_defensive_float32_copies():
    index = VectorIndex(3)
    src = np.array([1.0, 2.0, 3.0], dtype=np.float64)
    meta = {"id": 1}
    index.add(src, meta)

    src[0] = 100.0
    meta["id"] = 999

    assert index.vectors[0].dtype == np.float32
    assert index.vectors[0].tolist() == [1.0, 2.0, 3.0]
    assert index.metadata[0] == {"id": 1}


def test_scores_are_python_floats():
    index = VectorIndex(2)
    index.add([1, 2])
    score = index.search([1, 2], 1)[0]["score"]
    assert type(score) is float


def test_clear_preserves_dimensions():
    index = VectorIndex(3)
    index.add([1, 2, 3])
    index.add([4, 5, 6])
    index.clear()
    assert index.size() == 0
    assert index.dimensions == 3
    assert index.search([1, 2, 3]) == []


def test_non_positive_dimensions_rejected():
    with pytest.raises(ValueError):
        VectorIndex(0)
    with pytest.raises(ValueError):
        VectorIndex(-3)


def test_two_dimensional_input_reports_shape():
    index = VectorIndex(3)
    with pytest.raises(DimensionMismatch) as exc:
        index.add([[1, 2, 3]])
    assert exc.value.actual == (1, 3)
    assert "got shape (1, 3)" in str(exc.value)
    assert index.size() == 0


def test_non_integral_dimensions_rejected():
    with pytest.raises(TypeError):
        VectorIndex(3.7)
    with pytest.raises(TypeError):
        VectorIndex(True)
    assert VectorIndex(np.int64(4)).dimensions == 4


def test_search_uses_default_k_when_k_omitted():
    index = VectorIndex(2, default_k=2)
    for i in range(4):
        index.add([1, i], {"id": i})
    assert len(index.search([1, 0])) == 2
    assert len(index.search([1, 0], 3)) == 3

    assert len(VectorIndex(2).search([1, 0])) == 0
    with pytest.raises(ValueError):
        VectorIndex(2, default_k=-1)


def test_from_settings_uses_index_section():
    from vectorindex.config.config import AppSettings
    from vectorindex.storage.index_store.inmem_store import InMemoryIndexStore

    cfg = AppSettings(index={"dimensions": 4, "default_k": 1}, storage={"backend": "memory"})
    index = VectorIndex.from_settings(cfg)
    assert index.dimensions == 4
    assert index.default_k == 1
    assert isinstance(index.store, InMemoryIndexStore)

    index.add([1, 0, 0, 0])
    index.add([0, 1, 0, 0])
    assert len(index.search([1, 0, 0, 0])) == 1
