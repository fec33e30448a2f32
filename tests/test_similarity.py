import math

import pytest

from pdf_rag_server.documents.models import Chunk
from pdf_rag_server.documents.similarity import (
    DimensionMismatchError,
    cosine_similarity,
    find_similar_chunks,
)


def _chunk(cid, embedding):
    return Chunk(id=cid, text=f"text {cid}", embedding=embedding)


# ---------------------------------------------------------------------
# cosine_similarity
# ---------------------------------------------------------------------

def test_identical_vectors_score_one():
    v = [0.3, -1.2, 4.0, 0.01]
    assert cosine_similarity(v, v) == pytest.approx(1.0)


def test_opposite_vectors_score_minus_one():
    v = [0.3, -1.2, 4.0]
    assert cosine_similarity(v, [-x for x in v]) == pytest.approx(-1.0)


def test_orthogonal_vectors_score_zero():
    assert cosine_similarity([1, 0, 0], [0, 5, 0]) == 0.0


def test_score_is_scale_invariant():
    assert cosine_similarity([1, 2], [10, 20]) == pytest.approx(1.0)
    assert cosine_similarity([1, 0], [1, 1]) == pytest.approx(1 / math.sqrt(2))


def test_zero_vector_scores_zero_not_nan():
    assert cosine_similarity([0, 0, 0], [1, 2, 3]) == 0.0
    assert cosine_similarity([1, 2, 3], [0, 0, 0]) == 0.0


def test_empty_vectors_score_zero():
    assert cosine_similarity([], []) == 0.0


def test_mismatched_lengths_raise():
    with pytest.raises(DimensionMismatchError):
        cosine_similarity([1, 2, 3], [1, 2])


# ---------------------------------------------------------------------
# find_similar_chunks
# ---------------------------------------------------------------------

def test_results_sorted_descending():
    chunks = [
        _chunk("low", [0.0, 1.0]),
        _chunk("high", [1.0, 0.0]),
        _chunk("mid", [1.0, 1.0]),
    ]
    results = find_similar_chunks([1.0, 0.0], chunks, top_k=3)

    assert [r.id for r in results] == ["high", "mid", "low"]
    assert results[0].similarity == pytest.approx(1.0)
    assert results[0].text == "text high"


def test_ties_keep_original_order():
    chunks = [
        _chunk("first", [1.0, 1.0]),
        _chunk("best", [1.0, 0.0]),
        _chunk("second", [2.0, 2.0]),
        _chunk("third", [0.5, 0.5]),
    ]
    results = find_similar_chunks([1.0, 0.0], chunks, top_k=10)

    assert [r.id for r in results] == ["best", "first", "second", "third"]


def test_truncates_to_top_k_and_chunk_count():
    chunks = [_chunk(str(i), [1.0, float(i)]) for i in range(5)]

    assert len(find_similar_chunks([1.0, 0.0], chunks, top_k=2)) == 2
    assert len(find_similar_chunks([1.0, 0.0], chunks, top_k=50)) == 5


def test_non_positive_top_k_returns_nothing():
    chunks = [_chunk("a", [1.0])]

    assert find_similar_chunks([1.0], chunks, top_k=0) == []
    assert find_similar_chunks([1.0], chunks, top_k=-3) == []


def test_no_chunks_returns_nothing():
    assert find_similar_chunks([1.0, 0.0], [], top_k=3) == []


def test_dimension_mismatch_propagates():
    with pytest.raises(DimensionMismatchError):
        find_similar_chunks([1.0, 0.0, 0.0], [_chunk("a", [1.0, 0.0])])


def test_doc1_scenario(doc1):
    results = find_similar_chunks([1.0, 0.0], doc1.chunks, top_k=2)

    assert [(r.text, r.similarity) for r in results] == [("a", 1.0), ("b", 0.0)]
    assert [r.text for r in find_similar_chunks([1.0, 0.0], doc1.chunks, top_k=1)] == ["a"]
