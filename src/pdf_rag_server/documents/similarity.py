"""
Cosine Similarity Ranking

Pure functions for scoring chunk embeddings against a query vector and
selecting the top-K matches. No index structure is involved: every chunk of
the document is scored on each query.
"""

from __future__ import annotations

from typing import List, Sequence

import numpy as np

from .models import Chunk, ScoredChunk


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class DimensionMismatchError(ValueError):
    """Raised when two vectors of different lengths are compared."""


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Return the cosine similarity of two vectors.

    Returns 0.0 when either vector is empty or has zero magnitude.

    Raises
    ------
    DimensionMismatchError
        If the vectors differ in length.
    """
    if len(a) != len(b):
        raise DimensionMismatchError(
            f"Vectors must have the same length ({len(a)} != {len(b)})."
        )

    if len(a) == 0:
        return 0.0

    va = np.asarray(a, dtype="float64")
    vb = np.asarray(b, dtype="float64")

    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    score = float(np.dot(va, vb)) / (norm_a * norm_b)
    # Floating-point drift can push identical vectors marginally past 1.0
    return max(-1.0, min(1.0, score))


def find_similar_chunks(
    query_vector: Sequence[float],
    chunks: Sequence[Chunk],
    top_k: int = 3,
) -> List[ScoredChunk]:
    """
    Rank chunks by cosine similarity to a query vector.

    Parameters
    ----------
    query_vector : Sequence[float]
        Embedding of the query text.

    chunks : Sequence[Chunk]
        Candidate chunks, in document order.

    top_k : int
        Maximum number of results. Zero or negative yields no results.

    Returns
    -------
    List[ScoredChunk]
        At most `top_k` chunks, highest similarity first. Chunks with equal
        scores keep their document order.
    """
    if top_k <= 0 or not chunks:
        return []

    scored = [
        ScoredChunk(
            id=chunk.id,
            text=chunk.text,
            similarity=cosine_similarity(query_vector, chunk.embedding),
        )
        for chunk in chunks
    ]

    # sorted() is stable, also with reverse=True
    scored = sorted(scored, key=lambda s: s.similarity, reverse=True)
    return scored[:top_k]
