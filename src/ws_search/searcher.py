"""Search presentation for the command line."""

import re
import time
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from ws_search.indexer import IndexStore, normalize_workspace, search
from ws_search.models import Err, ScoredChunk
from ws_search.tokenizer import MIN_TOKEN_LENGTH

console = Console()

PREVIEW_CHARS = 500


def highlight_matches(text: str, query: str) -> str:
    """Highlight query terms in (already escaped) text using Rich markup.

    All terms go through one pass, so markup added for one term is never
    matched by another.
    """
    # Skip very short terms to avoid too many highlights
    terms = {term for term in query.lower().split() if len(term) >= MIN_TOKEN_LENGTH}
    if not terms:
        return text

    # Longest first so "database" wins over "data"
    alternation = "|".join(re.escape(escape(t)) for t in sorted(terms, key=len, reverse=True))
    pattern = re.compile(alternation, re.IGNORECASE)
    return pattern.sub(lambda m: f"[bold yellow]{m.group()}[/bold yellow]", text)


def format_human_output(results: list[ScoredChunk], query: str, search_time_ms: int) -> None:
    """Format results for human-readable output."""
    if not results:
        console.print("[yellow]No results found. Try a different query.[/yellow]")
        return

    for i, result in enumerate(results, 1):
        chunk = result.chunk

        text = chunk.content
        truncated = len(text) > PREVIEW_CHARS
        text = highlight_matches(escape(text[:PREVIEW_CHARS]), query)
        if truncated:
            remaining = len(chunk.content) - PREVIEW_CHARS
            text += f"\n[dim][truncated - {remaining} more chars][/dim]"

        header = Text()
        header.append(f"[{i}] ", style="bold cyan")
        header.append(chunk.file_path, style="green")
        header.append(f" | lines {chunk.start_line + 1}-{chunk.end_line + 1}", style="dim")
        header.append(f" | {int(result.score * 100)}%", style="dim")

        console.print(Panel(text, title=header, title_align="left"))
        console.print()

    console.print("─" * 50)
    console.print(f"Found {len(results)} results in {search_time_ms}ms")


def format_json_output(results: list[ScoredChunk], query: str, search_time_ms: int) -> None:
    """Format results as JSON for programmatic use."""
    output = {
        "results": [dict(result.to_dict(), rank=i + 1) for i, result in enumerate(results)],
        "query": query,
        "total_results": len(results),
        "search_time_ms": search_time_ms,
    }
    console.print_json(data=output)


def perform_search(
    store: IndexStore,
    workspace: Path,
    query: str,
    limit: int = 10,
    json_output: bool = False,
) -> bool:
    """Perform a search and display results. Returns False on failure."""
    start_time = time.time()

    key = normalize_workspace(workspace)
    if not json_output and not isinstance(key, Err) and store.get(key) is None:
        console.print("[yellow]No index found, building index first...[/yellow]")

    result = search(store, workspace, query, top_k=limit)
    search_time_ms = int((time.time() - start_time) * 1000)

    if isinstance(result, Err):
        if json_output:
            console.print_json(data=result.to_dict())
        else:
            console.print(f"[red]Error: {escape(result.message)}[/red]")
        return False

    if json_output:
        format_json_output(result.value, query, search_time_ms)
    else:
        format_human_output(result.value, query, search_time_ms)
    return True
