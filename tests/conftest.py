"""Pytest fixtures for ws-search tests."""

import tempfile
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_workspace(temp_dir):
    """Create a small workspace of source files."""
    files = {
        "src/db.py": (
            "import sqlite3\n\n"
            "def connect_database(path):\n"
            "    return sqlite3.connect(path)\n\n"
            "def close_database(conn):\n"
            "    conn.close()\n"
        ),
        "src/auth.py": (
            "def login(username, password):\n"
            "    token = issue_token(username)\n"
            "    return token\n\n"
            "def logout(token):\n"
            "    revoke_token(token)\n"
        ),
        "web/app.js": (
            "function renderDashboard(user) {\n"
            "  return `<div>${user.name}</div>`;\n"
            "}\n"
        ),
        "README.md": "# Sample project\n\nUtilities for the sample workspace.\n",
        # Not indexed: unknown extension, ignored dir, dotfile
        "notes.txt": "database database database\n",
        "node_modules/lib/index.js": "module.exports = function database() {};\n",
        ".hidden.py": "secret_database = 1\n",
    }
    for rel, content in files.items():
        path = temp_dir / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return temp_dir


@pytest.fixture
def database_workspace():
    """Three files that all mention 'database' at different densities.

    Lives in its own directory so it never overlaps sample_workspace.
    """
    files = {
        "heavy.py": "database database database query\n",
        "medium.py": "database schema migration rollback\n",
        "light.py": "database render template layout widget button\n",
    }
    with tempfile.TemporaryDirectory() as tmpdir:
        workspace = Path(tmpdir)
        for name, content in files.items():
            (workspace / name).write_text(content)
        yield workspace
