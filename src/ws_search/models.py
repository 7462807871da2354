"""Data models for ws-search."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class SourceFile:
    """A candidate source file found in a workspace."""

    path: str  # relative to the workspace root
    full_path: Path
    size: int
    ext: str


@dataclass(frozen=True)
class Chunk:
    """A contiguous slice of a file's lines, the unit of retrieval."""

    content: str
    file_path: str
    start_line: int
    end_line: int
    tokens: tuple[str, ...] = ()
    tfidf: dict[str, float] = field(default_factory=dict, compare=False, hash=False)

    @property
    def key(self) -> tuple[str, int, int]:
        return (self.file_path, self.start_line, self.end_line)

    def with_tfidf(self, tfidf: dict[str, float]) -> "Chunk":
        """Return a copy of this chunk carrying the given weights."""
        return replace(self, tfidf=tfidf)


@dataclass(frozen=True)
class ScoredChunk:
    """A chunk paired with its similarity to a query."""

    chunk: Chunk
    score: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "filePath": self.chunk.file_path,
            "startLine": self.chunk.start_line,
            "endLine": self.chunk.end_line,
            "content": self.chunk.content,
            "score": self.score,
        }


@dataclass(frozen=True)
class WorkspaceIndex:
    """The complete, immutable corpus for one workspace."""

    workspace: str
    chunks: tuple[Chunk, ...]
    idf: dict[str, float]
    file_count: int = 0
    built_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


@dataclass(frozen=True)
class BuildStats:
    chunk_count: int
    file_count: int
    duration_ms: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "chunkCount": self.chunk_count,
            "fileCount": self.file_count,
            "durationMs": self.duration_ms,
        }


@dataclass(frozen=True)
class CompactStats:
    original_size: int
    result_size: int
    chunks_selected: int
    total_chunks: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "originalSize": self.original_size,
            "resultSize": self.result_size,
            "chunksSelected": self.chunks_selected,
            "totalChunks": self.total_chunks,
        }


@dataclass(frozen=True)
class CompactResult:
    """Output of single-file context compaction."""

    content: str
    is_full_file: bool
    stats: CompactStats | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"content": self.content, "isFullFile": self.is_full_file}
        if self.stats is not None:
            data["stats"] = self.stats.to_dict()
        return data


class ErrorKind(str, Enum):
    NO_INDEX = "no_index"
    WORKSPACE_UNREADABLE = "workspace_unreadable"
    BUILD_FAILED = "build_failed"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "kind": self.kind.value}
