"""Integration tests for the CLI."""

import json
import subprocess
import sys


def run_cli(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "ws_search.cli", *args],
        capture_output=True,
        text=True,
    )


def test_cli_help():
    """Test that --help works."""
    result = run_cli("--help")
    assert result.returncode == 0
    assert "search" in result.stdout
    assert "index" in result.stdout
    assert "compact" in result.stdout
    assert "status" in result.stdout


def test_cli_version():
    """Test that --version works."""
    result = run_cli("--version")
    assert result.returncode == 0
    assert "ws-search" in result.stdout


def test_cli_index_json(sample_workspace):
    result = run_cli("index", str(sample_workspace), "--json")

    assert result.returncode == 0
    data = json.loads(result.stdout)
    assert data["chunkCount"] == 4
    assert data["fileCount"] == 4
    assert (sample_workspace / ".ws-search" / "index.json").exists()


def test_cli_index_missing_workspace(temp_dir):
    result = run_cli("index", str(temp_dir / "missing"))

    assert result.returncode == 1
    assert "Error" in result.stdout


def test_search_json_output(database_workspace):
    """Test that search with --json outputs valid JSON."""
    result = run_cli("search", "database", "--workspace", str(database_workspace), "--json")

    assert result.returncode == 0
    data = json.loads(result.stdout)
    assert data["query"] == "database"
    assert data["total_results"] == 3
    assert "search_time_ms" in data
    assert [r["filePath"] for r in data["results"]] == ["heavy.py", "medium.py", "light.py"]
    assert data["results"][0]["rank"] == 1


def test_search_human_output(database_workspace):
    result = run_cli("search", "schema", "-w", str(database_workspace))

    assert result.returncode == 0
    assert "medium.py" in result.stdout
    assert "Found 1 results" in result.stdout


def test_search_empty_query(database_workspace):
    result = run_cli("search", "   ", "-w", str(database_workspace))
    assert result.returncode == 1


def test_search_empty_workspace(temp_dir):
    result = run_cli("search", "anything", "-w", str(temp_dir), "--json")

    assert result.returncode == 1
    assert json.loads(result.stdout)["error"] == "No index available"


def test_cli_compact(temp_dir):
    target = temp_dir / "big.py"
    lines = [f"    value_{i} = compute(value_{i - 1})" for i in range(1, 600)]
    lines[300] = "    token = refresh_oauth_token(session)"
    target.write_text("\n".join(lines))

    result = run_cli("compact", str(target), "refresh oauth token", "--max-chars", "2000", "--json")

    assert result.returncode == 0
    data = json.loads(result.stdout)
    assert data["isFullFile"] is False
    assert "refresh_oauth_token" in data["content"]
    assert data["stats"]["chunksSelected"] >= 1


def test_cli_status(sample_workspace):
    """Test that status reads the manifest written by index."""
    run_cli("index", str(sample_workspace))
    result = run_cli("status", "--workspace", str(sample_workspace))

    assert result.returncode == 0
    assert "Files indexed: 4" in result.stdout
    assert "Chunks indexed: 4" in result.stdout
    assert "Manifest path:" in result.stdout
