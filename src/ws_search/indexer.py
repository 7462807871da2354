"""Workspace indexing and search over the in-memory TF-IDF corpus."""

import logging
import threading
import time
from collections.abc import Sequence
from pathlib import Path

from ws_search.chunker import CHUNK_OVERLAP, CHUNK_SIZE, chunk_code
from ws_search.exceptions import WorkspaceUnreadableError
from ws_search.models import (
    BuildStats,
    Chunk,
    Err,
    ErrorKind,
    Ok,
    ScoredChunk,
    SourceFile,
    WorkspaceIndex,
)
from ws_search.ranker import rank
from ws_search.scanner import MAX_FILE_SIZE, discover_files
from ws_search.storage import write_manifest
from ws_search.weighting import compute_idf, vectorize_query, weight_chunks

logger = logging.getLogger(__name__)

MAX_FILES = 500
DEFAULT_TOP_K = 10

NO_INDEX_MESSAGE = "No index available"


class IndexStore:
    """In-memory indexes keyed by normalized workspace path.

    Lookups and swaps go through one short-lived lock. Builds take a
    per-workspace lock, so rebuilding one workspace never blocks another and
    readers always see a complete index.
    """

    def __init__(self) -> None:
        self._indexes: dict[str, WorkspaceIndex] = {}
        self._build_locks: dict[str, threading.RLock] = {}
        self._lock = threading.Lock()

    @staticmethod
    def normalize(workspace: Path | str) -> str:
        return str(Path(workspace).expanduser().resolve())

    def get(self, workspace: Path | str) -> WorkspaceIndex | None:
        key = self.normalize(workspace)
        with self._lock:
            return self._indexes.get(key)

    def put(self, index: WorkspaceIndex) -> None:
        """Replace the workspace's index with a fully built one."""
        with self._lock:
            self._indexes[index.workspace] = index

    def drop(self, workspace: Path | str) -> bool:
        key = self.normalize(workspace)
        with self._lock:
            return self._indexes.pop(key, None) is not None

    def workspaces(self) -> list[str]:
        with self._lock:
            return sorted(self._indexes)

    def build_lock(self, workspace: Path | str) -> threading.RLock:
        key = self.normalize(workspace)
        with self._lock:
            return self._build_locks.setdefault(key, threading.RLock())


def read_source(source: SourceFile) -> str | None:
    """Read a file as UTF-8, or None if it can't be read."""
    try:
        return source.full_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Skipping unreadable file %s: %s", source.path, e)
        return None


def build_corpus(
    workspace: str,
    files: Sequence[SourceFile],
    max_files: int = MAX_FILES,
    max_file_size: int = MAX_FILE_SIZE,
    chunk_size: int = CHUNK_SIZE,
    overlap: int = CHUNK_OVERLAP,
) -> WorkspaceIndex:
    """Chunk and weight files into a complete WorkspaceIndex.

    Files past max_files are ignored. Oversized and unreadable files are
    skipped.
    """
    raw_chunks: list[Chunk] = []
    file_count = 0

    for source in files[:max_files]:
        if source.size >= max_file_size:
            logger.debug("Skipping large file %s (%d bytes)", source.path, source.size)
            continue
        content = read_source(source)
        if content is None:
            continue
        file_count += 1
        raw_chunks.extend(chunk_code(content, source.path, chunk_size, overlap))

    idf = compute_idf(raw_chunks)
    chunks = weight_chunks(raw_chunks, idf)

    return WorkspaceIndex(
        workspace=workspace,
        chunks=tuple(chunks),
        idf=idf,
        file_count=file_count,
    )


def normalize_workspace(workspace: Path | str) -> str | Err:
    """Normalize a workspace path, or return an error for an unusable one."""
    try:
        if "\x00" in str(workspace):
            raise ValueError("embedded null byte")
        return IndexStore.normalize(workspace)
    except (OSError, ValueError, RuntimeError) as e:
        logger.error("Invalid workspace path %r: %s", workspace, e)
        return Err(ErrorKind.WORKSPACE_UNREADABLE, f"Invalid workspace path: {e}")


def build_index(
    store: IndexStore,
    workspace: Path | str,
    files: Sequence[SourceFile] | None = None,
    max_files: int = MAX_FILES,
    max_file_size: int = MAX_FILE_SIZE,
    save_manifest: bool = True,
) -> Ok[BuildStats] | Err:
    """Build or rebuild the index for a workspace.

    Args:
        store: Store that receives the finished index.
        workspace: Workspace root directory.
        files: Candidate files. Discovered from the workspace when omitted.
        max_files: Files beyond this many are silently skipped.
        max_file_size: Files of this many bytes or more are skipped.
        save_manifest: Write the status manifest into the workspace.
    """
    key = normalize_workspace(workspace)
    if isinstance(key, Err):
        return key
    start_time = time.perf_counter()

    with store.build_lock(key):
        try:
            if files is None:
                files = discover_files(key, max_file_size=max_file_size)
            elif not Path(key).is_dir():
                raise WorkspaceUnreadableError(key, "not a directory")
            index = build_corpus(key, files, max_files=max_files, max_file_size=max_file_size)
        except WorkspaceUnreadableError as e:
            logger.error("Error building index: %s", e)
            return Err(ErrorKind.WORKSPACE_UNREADABLE, str(e))
        except Exception as e:
            logger.exception("Error building index for %s", key)
            return Err(ErrorKind.BUILD_FAILED, str(e))

        store.put(index)

    if save_manifest:
        try:
            write_manifest(key, index.file_count, len(index.chunks))
        except OSError as e:
            logger.warning("Could not write index manifest for %s: %s", key, e)

    duration_ms = int((time.perf_counter() - start_time) * 1000)
    logger.info(
        "Indexed %d chunks from %d files in %dms", len(index.chunks), index.file_count, duration_ms
    )
    return Ok(BuildStats(chunk_count=len(index.chunks), file_count=index.file_count, duration_ms=duration_ms))


def ensure_index(store: IndexStore, workspace: Path | str) -> Ok[WorkspaceIndex] | Err:
    """Return the workspace's index, building it first if there is none."""
    key = normalize_workspace(workspace)
    if isinstance(key, Err):
        return key

    index = store.get(key)
    if index is not None:
        return Ok(index)

    with store.build_lock(key):
        # Another caller may have finished a build while we waited
        index = store.get(key)
        if index is None:
            result = build_index(store, key)
            if isinstance(result, Err):
                return result
            index = store.get(key)

    if index is None:
        return Err(ErrorKind.NO_INDEX, NO_INDEX_MESSAGE)
    return Ok(index)


def search(
    store: IndexStore,
    workspace: Path | str,
    query: str,
    top_k: int = DEFAULT_TOP_K,
    rebuild_on_miss: bool = True,
) -> Ok[list[ScoredChunk]] | Err:
    """Rank the workspace's chunks against a query.

    With rebuild_on_miss, a workspace that has never been indexed is built
    first. That is a convenience only; it does not refresh a stale index.
    """
    key = normalize_workspace(workspace)
    if isinstance(key, Err):
        return key

    if rebuild_on_miss:
        result = ensure_index(store, key)
        if isinstance(result, Err):
            return result
        index: WorkspaceIndex | None = result.value
    else:
        index = store.get(key)

    if index is None or not index.chunks:
        return Err(ErrorKind.NO_INDEX, NO_INDEX_MESSAGE)

    query_vector = vectorize_query(query, index.idf)
    if not query_vector:
        return Ok([])
    return Ok(rank(query_vector, index.chunks, top_k))
