"""Reduce an oversized file to the parts most relevant to a query."""

import logging

from ws_search.chunker import chunk_code
from ws_search.models import Chunk, CompactResult, CompactStats
from ws_search.ranker import score_chunks
from ws_search.weighting import compute_idf, vectorize_query, weight_chunks

logger = logging.getLogger(__name__)

COMPACT_MAX_CHARS = 8000
COMPACT_CHUNK_SIZE = 1000
COMPACT_OVERLAP = 200

TRUNCATION_MARKER = "\n... [truncated]"


def gap_marker(first_line: int, last_line: int) -> str:
    """Marker for omitted zero-based lines, rendered 1-based and inclusive."""
    return f"\n... [lines {first_line + 1}-{last_line + 1} omitted] ...\n"


def truncate(content: str, max_chars: int) -> CompactResult:
    return CompactResult(content=content[:max_chars] + TRUNCATION_MARKER, is_full_file=False)


def select_chunks(chunks: list[Chunk], scores: list[float], max_chars: int) -> list[Chunk]:
    """Greedy pick by descending score under a size budget, returned in file order.

    A chunk that doesn't fit is skipped; smaller, lower ranked chunks may
    still be taken after it.
    """
    by_score = sorted(range(len(chunks)), key=lambda i: scores[i], reverse=True)

    picked: list[int] = []
    total = 0
    for i in by_score:
        size = len(chunks[i].content)
        if total + size > max_chars:
            continue
        picked.append(i)
        total += size

    return sorted((chunks[i] for i in picked), key=lambda c: c.key)


def stitch(lines: list[str], selected: list[Chunk]) -> str:
    """Join selected chunks top to bottom, marking the lines left out.

    Lines shared by overlapping neighbours are written once.
    """
    parts: list[str] = []
    last_end = -1

    for chunk in selected:
        if chunk.start_line > last_end + 1:
            parts.append(gap_marker(last_end + 1, chunk.start_line - 1))
        first = max(chunk.start_line, last_end + 1)
        if first <= chunk.end_line:
            parts.append("\n".join(lines[first : chunk.end_line + 1]))
        last_end = max(last_end, chunk.end_line)

    if last_end < len(lines) - 1:
        parts.append(gap_marker(last_end + 1, len(lines) - 1))

    return "\n".join(parts)


def compact_file(
    content: str,
    query: str,
    file_label: str,
    max_chars: int = COMPACT_MAX_CHARS,
    chunk_size: int = COMPACT_CHUNK_SIZE,
    overlap: int = COMPACT_OVERLAP,
) -> CompactResult:
    """Fit a file into max_chars by keeping the chunks closest to the query.

    Small files come back untouched with is_full_file set. Larger ones are
    chunked and scored against an IDF computed over the file's own chunks.
    Never raises; any failure degrades to plain truncation.
    """
    if len(content) <= max_chars:
        return CompactResult(content=content, is_full_file=True)

    try:
        lines = content.split("\n")
        chunks = chunk_code(content, file_label, chunk_size, overlap)

        # File-local statistic: terms found in every chunk weigh zero
        idf = compute_idf(chunks, smoothing=0)
        weighted = weight_chunks(chunks, idf)
        query_vector = vectorize_query(query, idf)
        scores = [s.score for s in score_chunks(query_vector, weighted)]

        selected = select_chunks(weighted, scores, max_chars)
        if not selected:
            logger.debug("No chunk of %s fits in %d chars, truncating", file_label, max_chars)
            return truncate(content, max_chars)

        result = stitch(lines, selected)
    except Exception:
        logger.warning("Compaction failed for %s, truncating", file_label, exc_info=True)
        return truncate(content, max_chars)

    logger.debug(
        "Compacted %s: %d chars -> %d chars (%d/%d chunks)",
        file_label,
        len(content),
        len(result),
        len(selected),
        len(chunks),
    )
    return CompactResult(
        content=result,
        is_full_file=False,
        stats=CompactStats(
            original_size=len(content),
            result_size=len(result),
            chunks_selected=len(selected),
            total_chunks=len(chunks),
        ),
    )
