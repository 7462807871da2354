"""Cosine similarity ranking of chunks against a query vector."""

import math
from collections.abc import Sequence

from ws_search.models import Chunk, ScoredChunk


def cosine_similarity(vec1: dict[str, float], vec2: dict[str, float]) -> float:
    """Cosine similarity of two sparse vectors, 0.0 when either is empty.

    Terms missing from both vectors contribute nothing to the dot product or
    the norms, so iterating over the key union is enough.
    """
    dot = 0.0
    norm1 = 0.0
    norm2 = 0.0
    for term in vec1.keys() | vec2.keys():
        v1 = vec1.get(term, 0.0)
        v2 = vec2.get(term, 0.0)
        dot += v1 * v2
        norm1 += v1 * v1
        norm2 += v2 * v2

    if norm1 == 0.0 or norm2 == 0.0:
        return 0.0

    similarity = dot / (math.sqrt(norm1) * math.sqrt(norm2))
    # Float drift can push identical vectors just past 1.0
    return min(max(similarity, 0.0), 1.0)


def score_chunks(query: dict[str, float], corpus: Sequence[Chunk]) -> list[ScoredChunk]:
    """Score every chunk in corpus order."""
    return [ScoredChunk(chunk=chunk, score=cosine_similarity(query, chunk.tfidf)) for chunk in corpus]


def rank(query: dict[str, float], corpus: Sequence[Chunk], top_k: int) -> list[ScoredChunk]:
    """Return the top_k chunks with positive similarity, best first.

    Ties keep corpus order.
    """
    if top_k <= 0:
        return []
    scored = [s for s in score_chunks(query, corpus) if s.score > 0]
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored[:top_k]
