"""CLI for ws-search."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from ws_search import __version__
from ws_search.indexer import MAX_FILES, IndexStore

app = typer.Typer(
    name="ws-search",
    help="Search a local code workspace with TF-IDF retrieval.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

# One store per process; the CLI is its only owner
store = IndexStore()


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def version_callback(value: bool) -> None:
    if value:
        console.print(f"ws-search {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-V", callback=version_callback, is_eager=True),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging")
    ] = False,
) -> None:
    """Search a local code workspace."""
    configure_logging(verbose)


@app.command()
def index(
    workspace: Annotated[
        Path, typer.Argument(help="Workspace root directory")
    ] = Path("."),
    max_files: Annotated[
        int, typer.Option("--max-files", help="Maximum number of files to index")
    ] = MAX_FILES,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Build or rebuild the index for a workspace."""
    from ws_search.indexer import build_index
    from ws_search.models import Err

    result = build_index(store, workspace, max_files=max_files)

    if isinstance(result, Err):
        if json_output:
            console.print_json(data=result.to_dict())
        else:
            console.print(f"[red]Error: {escape(result.message)}[/red]")
        raise typer.Exit(1)

    stats = result.value
    if json_output:
        console.print_json(data=stats.to_dict())
    else:
        console.print(
            f"[green]Indexed {stats.chunk_count} chunks from {stats.file_count} files "
            f"in {stats.duration_ms}ms[/green]"
        )


@app.command()
def search(
    query: Annotated[str, typer.Argument(help="Search query")],
    workspace: Annotated[
        Path, typer.Option("--workspace", "-w", help="Workspace root directory")
    ] = Path("."),
    limit: Annotated[int, typer.Option("--limit", "-n", help="Number of results")] = 10,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Search a workspace for code relevant to a query."""
    if not query.strip():
        console.print("[red]Error: Query required[/red]")
        raise typer.Exit(1)

    from ws_search.searcher import perform_search

    if not perform_search(store, workspace, query, limit=limit, json_output=json_output):
        raise typer.Exit(1)


@app.command()
def compact(
    file: Annotated[
        Path, typer.Argument(help="File to compact", exists=True, dir_okay=False, readable=True)
    ],
    query: Annotated[str, typer.Argument(help="What the compacted file should focus on")],
    max_chars: Annotated[
        int, typer.Option("--max-chars", "-m", help="Character budget for the output")
    ] = 8000,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Reduce a large file to the parts most relevant to a query."""
    from ws_search.compactor import compact_file

    try:
        content = file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Error: cannot read {file}: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    result = compact_file(content, query, file.name, max_chars=max_chars)

    if json_output:
        console.print_json(data=result.to_dict())
        return

    # Plain write so code isn't treated as Rich markup
    console.out(result.content, highlight=False)
    if result.stats:
        s = result.stats
        err_console.print(
            f"[dim]{s.original_size} -> {s.result_size} chars, "
            f"{s.chunks_selected}/{s.total_chunks} chunks[/dim]"
        )


@app.command()
def status(
    workspace: Annotated[
        Path, typer.Option("--workspace", "-w", help="Workspace root directory")
    ] = Path("."),
) -> None:
    """Show the last build's manifest for a workspace."""
    from ws_search.storage import get_index_stats

    stats = get_index_stats(workspace)
    console.print(f"Files indexed: {stats['file_count']}")
    console.print(f"Chunks indexed: {stats['chunk_count']}")
    console.print(f"Manifest path: {stats['manifest_path']}")
    if stats["last_indexed"]:
        updated = datetime.fromtimestamp(stats["last_indexed"] / 1000, tz=timezone.utc)
        console.print(f"Last indexed: {updated.isoformat()}")
        console.print(f"Manifest size: {stats['manifest_size_human']}")


if __name__ == "__main__":
    app()
