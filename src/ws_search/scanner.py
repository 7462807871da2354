"""Workspace file discovery."""

import logging
import os
from pathlib import Path

from ws_search.exceptions import WorkspaceUnreadableError
from ws_search.models import SourceFile

logger = logging.getLogger(__name__)

MAX_DEPTH = 10
MAX_FILE_SIZE = 500_000  # bytes

IGNORE_DIRS = frozenset(
    {
        "node_modules",
        ".git",
        "dist",
        "build",
        ".next",
        "__pycache__",
        "venv",
        ".venv",
        "coverage",
        ".nyc_output",
        "vendor",
        "target",
        ".idea",
        ".vscode",
    }
)

IGNORE_FILES = frozenset(
    {
        ".DS_Store",
        "package-lock.json",
        "bun.lock",
        "yarn.lock",
        "pnpm-lock.yaml",
        ".env",
        ".env.local",
    }
)

CODE_EXTENSIONS = frozenset(
    {
        ".js", ".jsx", ".ts", ".tsx", ".py", ".java", ".c", ".cpp", ".h", ".hpp",
        ".go", ".rs", ".rb", ".php", ".swift", ".kt", ".scala", ".vue", ".svelte",
        ".css", ".scss", ".less", ".html", ".json", ".yaml", ".yml", ".md", ".sql",
        ".sh", ".bash", ".zsh", ".ps1", ".r", ".lua", ".dart", ".ex", ".exs",
        ".erl", ".hs", ".ml", ".clj", ".elm",
    }
)


def is_ignored(name: str) -> bool:
    return name in IGNORE_DIRS or name in IGNORE_FILES or name.startswith(".")


def discover_files(
    workspace: Path | str,
    max_depth: int = MAX_DEPTH,
    max_file_size: int = MAX_FILE_SIZE,
) -> list[SourceFile]:
    """Find indexable source files under a workspace, in a stable order.

    Raises:
        WorkspaceUnreadableError: If the root is not a readable directory.
    """
    root = Path(workspace)
    if not root.is_dir():
        raise WorkspaceUnreadableError(str(workspace), "not a directory")

    try:
        entries = sorted(os.scandir(root), key=lambda e: e.name)
    except OSError as e:
        raise WorkspaceUnreadableError(str(workspace), e.strerror or str(e)) from e

    files: list[SourceFile] = []
    _scan(root, entries, files, 0, max_depth, max_file_size)
    return files


def _scan(
    root: Path,
    entries: list[os.DirEntry],
    files: list[SourceFile],
    depth: int,
    max_depth: int,
    max_file_size: int,
) -> None:
    for entry in entries:
        if is_ignored(entry.name):
            continue

        full_path = Path(entry.path)
        try:
            if entry.is_dir(follow_symlinks=False):
                if depth >= max_depth:
                    continue
                try:
                    children = sorted(os.scandir(full_path), key=lambda e: e.name)
                except OSError as e:
                    logger.debug("Skipping unreadable directory %s: %s", full_path, e)
                    continue
                _scan(root, children, files, depth + 1, max_depth, max_file_size)

            elif entry.is_file():
                ext = full_path.suffix.lower()
                if ext not in CODE_EXTENSIONS:
                    continue
                size = entry.stat().st_size
                if size >= max_file_size:
                    logger.debug("Skipping large file %s (%d bytes)", full_path, size)
                    continue
                files.append(
                    SourceFile(
                        path=full_path.relative_to(root).as_posix(),
                        full_path=full_path,
                        size=size,
                        ext=ext,
                    )
                )
        except OSError as e:
            logger.debug("Skipping %s: %s", full_path, e)
