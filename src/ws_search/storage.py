"""Index manifest written into each workspace.

The manifest is a status artifact only. It is never loaded back into the
in-memory index and may be deleted at any time.
"""

import json
import time
from pathlib import Path
from typing import Any

MANIFEST_DIR = ".ws-search"
MANIFEST_NAME = "index.json"


def get_manifest_path(workspace: Path | str) -> Path:
    return Path(workspace) / MANIFEST_DIR / MANIFEST_NAME


def manifest_exists(workspace: Path | str) -> bool:
    """Check if a manifest has been written for the workspace."""
    return get_manifest_path(workspace).exists()


def write_manifest(workspace: Path | str, file_count: int, chunk_count: int) -> Path:
    """Write {files, chunks, updatedAt} into the workspace metadata directory."""
    path = get_manifest_path(workspace)
    path.parent.mkdir(parents=True, exist_ok=True)
    manifest = {
        "files": file_count,
        "chunks": chunk_count,
        "updatedAt": int(time.time() * 1000),
    }
    path.write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    return path


def read_manifest(workspace: Path | str) -> dict[str, Any] | None:
    """Read the manifest, or None if it is missing or unreadable."""
    path = get_manifest_path(workspace)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    return data


def get_index_stats(workspace: Path | str) -> dict[str, Any]:
    """Get index statistics for display."""
    path = get_manifest_path(workspace)
    manifest = read_manifest(workspace)
    if manifest is None:
        return {
            "file_count": 0,
            "chunk_count": 0,
            "manifest_path": str(path),
            "last_indexed": None,
            "manifest_size_human": _format_size(0),
        }

    return {
        "file_count": manifest.get("files", 0),
        "chunk_count": manifest.get("chunks", 0),
        "manifest_path": str(path),
        "last_indexed": manifest.get("updatedAt"),
        "manifest_size_human": _format_size(path.stat().st_size),
    }


def _format_size(size_bytes: int) -> str:
    """Format byte size as human-readable string."""
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"
