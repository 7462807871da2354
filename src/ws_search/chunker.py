"""Line-based chunking of source files."""

from ws_search.models import Chunk
from ws_search.tokenizer import tokenize

CHUNK_SIZE = 1500  # bytes, approximately
CHUNK_OVERLAP = 200

# Overlap is carried as whole lines, assuming ~50 chars per line
OVERLAP_LINE_WIDTH = 50


def overlap_lines(overlap: int) -> int:
    """Number of trailing lines carried into the next chunk."""
    return max(overlap // OVERLAP_LINE_WIDTH, 0)


def make_chunk(lines: list[str], file_path: str, start_line: int, end_line: int) -> Chunk:
    content = "\n".join(lines)
    return Chunk(
        content=content,
        file_path=file_path,
        start_line=start_line,
        end_line=end_line,
        tokens=tuple(tokenize(content)),
    )


def chunk_code(
    content: str,
    file_path: str,
    chunk_size: int = CHUNK_SIZE,
    overlap: int = CHUNK_OVERLAP,
) -> list[Chunk]:
    """Split file content into overlapping chunks of roughly chunk_size bytes.

    Lines accumulate until their size (each counted with its newline) reaches
    chunk_size. The closed chunk's last few lines seed the next one, so
    neighbouring chunks share a little context. Line numbers are zero-based
    and inclusive.
    """
    if not content:
        return []

    lines = content.split("\n")
    keep = overlap_lines(overlap)

    chunks: list[Chunk] = []
    current: list[str] = []
    current_size = 0
    start_line = 0
    last_emitted = -1

    for i, line in enumerate(lines):
        current.append(line)
        current_size += len(line) + 1

        if current_size >= chunk_size:
            chunks.append(make_chunk(current, file_path, start_line, i))
            last_emitted = i

            current = current[-keep:] if keep else []
            current_size = sum(len(carried) + 1 for carried in current)
            start_line = i - len(current) + 1

    # Flush the tail, unless it is only overlap from the last chunk
    if current and last_emitted < len(lines) - 1:
        chunks.append(make_chunk(current, file_path, start_line, len(lines) - 1))

    return chunks
