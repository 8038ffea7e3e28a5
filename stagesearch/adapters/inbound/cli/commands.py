"""CLI interface for stagesearch."""

import json
import os

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ....config.logging import setup_logging
from ....config.settings import settings
from ....core.domain import SearchContext, Stage
from ....core.services import ReindexOptions, SearchPageConfig, query_params
from ...common.exception_handler import format_exception_json

app = typer.Typer(
    name="stagesearch",
    help="stagesearch - stage-aware search indexing for versioned content",
    add_completion=False,
)

console = Console(force_terminal=True, legacy_windows=False)

# Determine if we're in debug mode (shows full stack traces)
DEBUG_MODE = os.getenv("DEBUG", "false").lower() == "true"


@app.callback()
def main() -> None:
    setup_logging(settings.log_level, json_format=settings.log_json)


def handle_cli_error(exc: Exception) -> None:
    """Print an error with its code, or the full JSON in debug mode.

    Args:
        exc: The exception to handle.
    """
    error_data = format_exception_json(exc, include_trace=DEBUG_MODE)

    if DEBUG_MODE:
        console.print(
            Panel(
                json.dumps(error_data, indent=2, default=str),
                title="[bold red]Error Details[/]",
                border_style="red",
            )
        )
    else:
        error_type = error_data["error"]["type"]
        error_msg = error_data["error"]["message"]
        error_code = error_data["error"].get("code", "UNKNOWN")
        location = error_data.get("location", {})

        console.print(f"\n[red]Error [{error_code}]:[/] {error_msg}")
        console.print(f"[dim]Type: {error_type}[/]")

        if location:
            loc_str = f"{location.get('file', '?')}:{location.get('line', '?')} in {location.get('method', '?')}"
            console.print(f"[dim]Location: {loc_str}[/]")

        console.print("[dim]Set DEBUG=true for full details[/]")


def _print_line(line: str) -> None:
    # Record titles may contain square brackets
    console.print(line, markup=False, highlight=False)


@app.command()
def reindex(
    rebuild: bool = typer.Option(False, "--rebuild", help="Delete the index and redefine its mapping"),
    reindex_all: bool = typer.Option(
        False, "--reindex", help="Re-index every record of every indexable type"
    ),
    remove: str | None = typer.Option(
        None, "--remove", help="Remove documents matching ID,TYPE", metavar="ID,TYPE"
    ),
    confirm: bool = typer.Option(False, "--confirm", help="Actually delete what --remove matched"),
) -> None:
    """Rebuild, refresh or prune the search index."""
    from ....composition.container import get_reindex_task

    options = ReindexOptions(rebuild=rebuild, reindex=reindex_all, remove=remove, confirm=confirm)

    try:
        task = get_reindex_task()
        # The operator shell holds the admin capability
        report = task.run(options, privileged=True, emit=_print_line)
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    if report.abort:
        handle_cli_error(report.abort)

    summary = f"\n[bold]Indexed:[/] {report.indexed}"
    if report.failures:
        summary += f"  [yellow]Failed: {len(report.failures)}[/]"
    if report.matched:
        summary += f"  [bold]Matched:[/] {len(report.matched)}  [bold]Removed:[/] {report.removed}"
    console.print(summary)


@app.command()
def status() -> None:
    """Show the configured index and the record types it holds."""
    from ....composition.container import get_content_store, get_document_store

    console.print("[bold]stagesearch Status[/]\n")
    console.print(f"Elasticsearch: {settings.elasticsearch_url}")
    console.print(f"Index: {settings.index_name}")

    if settings.has_admin_token:
        console.print("✅ Admin token configured")
    else:
        console.print("⚪ Admin token not set (the HTTP reindex endpoint is disabled)")

    try:
        exists = get_document_store().index_exists()
        console.print("✅ Index exists" if exists else "⚪ Index not created yet (run 'stagesearch reindex')")

        content_store = get_content_store()
        table = Table(title="Record types")
        table.add_column("Type")
        table.add_column("Indexed")
        for name, record_type in sorted(content_store.registered_types().items()):
            table.add_row(name, "no (supporting)" if record_type.supporting_type else "yes")
        console.print(table)
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)


@app.command()
def search(
    text: str = typer.Argument("", help="Text to search for"),
    stage: str = typer.Option(None, "--stage", help="Live or Stage (default: content store stage)"),
    filters: list[str] = typer.Option(
        [], "--filter", help="Restrict results, as field=value (repeatable)"
    ),
    limit: int = typer.Option(10, "--limit", min=1, help="Results per page"),
) -> None:
    """Run a search and list the resolved records."""
    from ....composition.container import get_search_service

    try:
        query_string = ""
        for item in filters:
            field, sep, value = item.partition("=")
            if not sep or not field:
                raise typer.BadParameter(f"Filter must look like field=value, got {item!r}")
            query_string = query_params.with_filter(query_string, field, value)

        context = SearchContext(
            stage=Stage.parse(stage) if stage else None,
            query_string=query_string,
        )
        config = SearchPageConfig(results_per_page=limit)

        with console.status("[bold green]Searching...[/]"):
            results = get_search_service().search(config, text, context)
            items = list(results.items)
    except typer.BadParameter:
        raise
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    if not items:
        console.print("[yellow]No results[/]")
        return

    table = Table(title=f"{results.total_results} results ({results.time_taken} ms)")
    table.add_column("Score", justify="right")
    table.add_column("Record")
    table.add_column("Title")
    for item in items:
        score = f"{item.score:.2f}" if item.score is not None else "-"
        table.add_row(score, repr(item.record), item.title or "")
    console.print(table)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Interface to bind"),
    port: int = typer.Option(8000, help="Port to listen on"),
) -> None:
    """Serve the operator HTTP API."""
    import uvicorn

    console.print(f"[bold]Serving stagesearch API on http://{host}:{port}[/] (docs at /docs)")
    uvicorn.run(
        "stagesearch.adapters.inbound.api.main:app",
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    app()
