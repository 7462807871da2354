"""Tokenization for lexical retrieval."""

import re

_NON_WORD = re.compile(r"[^\w\s]+")

MIN_TOKEN_LENGTH = 3


def tokenize(text: str) -> list[str]:
    """Lowercase text, strip punctuation and drop tokens shorter than 3 chars."""
    cleaned = _NON_WORD.sub(" ", text.lower())
    return [t for t in cleaned.split() if len(t) >= MIN_TOKEN_LENGTH]
