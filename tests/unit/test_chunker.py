"""Tests for the chunker module."""

from ws_search.chunker import chunk_code, overlap_lines
from ws_search.tokenizer import tokenize


def make_lines(count: int, width: int = 49) -> list[str]:
    """Lines that each cost width + 1 bytes including the newline."""
    return [f"line{i:04d} " + "x" * (width - 9) for i in range(count)]


def test_chunk_empty_file():
    """Test that an empty file yields no chunks."""
    assert chunk_code("", "empty.js") == []


def test_chunk_short_file_is_one_chunk():
    """Test that a file under the budget becomes a single chunk."""
    content = "def main():\n    print('hello world')\n"
    chunks = chunk_code(content, "main.py")

    assert len(chunks) == 1
    chunk = chunks[0]
    assert chunk.content == content
    assert chunk.file_path == "main.py"
    assert chunk.start_line == 0
    assert chunk.end_line == len(content.split("\n")) - 1


def test_chunk_long_file_overlaps():
    """Test chunk boundaries and line-based overlap on a long file."""
    lines = make_lines(100)
    chunks = chunk_code("\n".join(lines), "big.py", chunk_size=1500, overlap=200)

    spans = [(c.start_line, c.end_line) for c in chunks]
    assert spans == [(0, 29), (26, 55), (52, 81), (78, 99)]

    # Each chunk's content matches its line range
    for chunk in chunks:
        assert chunk.content == "\n".join(lines[chunk.start_line : chunk.end_line + 1])


def test_chunk_covers_every_line():
    """Test that no line is skipped between chunks."""
    lines = [("word " * (i % 17)).strip() for i in range(400)]
    chunks = chunk_code("\n".join(lines), "mixed.py", chunk_size=300, overlap=100)

    covered = set()
    for chunk in chunks:
        assert chunk.start_line <= chunk.end_line
        covered.update(range(chunk.start_line, chunk.end_line + 1))
    assert covered == set(range(len(lines)))


def test_chunk_no_tail_of_only_overlap():
    """Test that a chunk closing on the last line leaves no overlap-only tail."""
    lines = make_lines(30)
    chunks = chunk_code("\n".join(lines), "exact.py", chunk_size=1500, overlap=200)

    assert [(c.start_line, c.end_line) for c in chunks] == [(0, 29)]


def test_chunk_zero_overlap():
    """Test that chunks are adjacent when overlap is below one line."""
    lines = make_lines(60)
    chunks = chunk_code("\n".join(lines), "adjacent.py", chunk_size=1500, overlap=10)

    assert overlap_lines(10) == 0
    assert [(c.start_line, c.end_line) for c in chunks] == [(0, 29), (30, 59)]


def test_chunk_tokens_match_content():
    """Test that every chunk carries tokens of its own content."""
    lines = make_lines(70)
    for chunk in chunk_code("\n".join(lines), "tokens.py"):
        assert list(chunk.tokens) == tokenize(chunk.content)
        assert chunk.tfidf == {}


def test_chunk_key_identifies_span():
    """Test that a chunk's key is its file and line span, unique per file."""
    lines = make_lines(100)
    chunks = chunk_code("\n".join(lines), "big.py", chunk_size=1500, overlap=200)

    keys = [c.key for c in chunks]
    assert keys[0] == ("big.py", 0, 29)
    assert len(set(keys)) == len(chunks)
    assert keys == sorted(keys)
    assert chunks[0].with_tfidf({"line0000": 1.0}).key == chunks[0].key
