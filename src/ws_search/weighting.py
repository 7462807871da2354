"""TF-IDF term weighting."""

import math
from collections import Counter
from collections.abc import Iterable, Sequence

from ws_search.models import Chunk
from ws_search.tokenizer import tokenize


def compute_term_frequency(tokens: Iterable[str]) -> dict[str, float]:
    """Count tokens and scale so the most frequent one has TF 1.0."""
    counts = Counter(tokens)
    if not counts:
        return {}
    max_count = max(counts.values())
    return {token: count / max_count for token, count in counts.items()}


def compute_idf(chunks: Sequence[Chunk], smoothing: int = 1) -> dict[str, float]:
    """Inverse document frequency over a chunk corpus.

    idf[t] = ln(N / (docFreq[t] + smoothing)). With the default smoothing a
    term found in every chunk gets a small negative weight, and a corpus of
    one chunk gives every term ln(1/2).
    """
    n = len(chunks)
    if n == 0:
        return {}

    doc_freq: Counter[str] = Counter()
    for chunk in chunks:
        doc_freq.update(set(chunk.tokens))

    return {token: math.log(n / (df + smoothing)) for token, df in doc_freq.items()}


def compute_tfidf(tf: dict[str, float], idf: dict[str, float]) -> dict[str, float]:
    """Multiply TF by IDF; terms unknown to the IDF table weigh nothing."""
    weights: dict[str, float] = {}
    for token, freq in tf.items():
        weight = freq * idf.get(token, 0.0)
        if weight != 0.0:
            weights[token] = weight
    return weights


def weight_chunks(chunks: Sequence[Chunk], idf: dict[str, float]) -> list[Chunk]:
    """Return copies of chunks carrying their TF-IDF vectors."""
    return [chunk.with_tfidf(compute_tfidf(compute_term_frequency(chunk.tokens), idf)) for chunk in chunks]


def vectorize_query(query: str, idf: dict[str, float]) -> dict[str, float]:
    """Build a query vector against an existing IDF table."""
    return compute_tfidf(compute_term_frequency(tokenize(query)), idf)
