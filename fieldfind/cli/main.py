"""FieldFind (ffind) - field-level search CLI."""

import copy
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from fieldfind.core.config import ConfigLoader
from fieldfind.core.engine import SearchEngine
from fieldfind.core.query import paginate
from fieldfind.core.registry import ComponentRegistry
from fieldfind.core.user_config import UserConfig
from fieldfind.models.search import DateRange, SearchOptions, SearchResult

app = typer.Typer(
    name="ffind",
    help="FieldFind - search nested application records",
    add_completion=False,
)
filters_app = typer.Typer(help="Manage saved filters")
app.add_typer(filters_app, name="filters")

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_engine(config: Optional[Path], scope: Optional[str], prefs: UserConfig) -> SearchEngine:
    """Load configuration, build the engine and initialize it for a scope."""
    cfg = ConfigLoader.merge(ConfigLoader.load(config), prefs.engine_overrides())

    level = cfg.get('logging', {}).get('level')
    if level and logging.getLogger().level > logging.DEBUG:
        logging.getLogger().setLevel(level.upper())

    engine = SearchEngine.from_config(cfg, ComponentRegistry())
    engine.initialize(scope or prefs.identity.scope_id)
    return engine


def _build_options(
    query: str,
    prefs: UserConfig,
    fuzzy: Optional[bool] = None,
    limit: Optional[int] = None,
    sort: Optional[str] = None,
    sections: Optional[List[str]] = None,
    field_types: Optional[List[str]] = None,
    status: Optional[str] = None,
    modified_by: Optional[str] = None,
    tags: Optional[List[str]] = None,
    attachments: Optional[bool] = None,
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
) -> SearchOptions:
    date_range = None
    if since or until:
        date_range = DateRange(
            start=since or datetime.min,
            end=until.replace(hour=23, minute=59, second=59) if until else datetime.max,
        )

    return SearchOptions(
        query=query,
        sections=list(sections) if sections else None,
        field_types=list(field_types) if field_types else None,
        date_range=date_range,
        completion_status=status,
        modified_by=modified_by,
        tags=list(tags) if tags else None,
        has_attachments=attachments,
        fuzzy_search=prefs.search.fuzzy if fuzzy is None else fuzzy,
        max_results=limit if limit is not None else prefs.search.default_limit,
        sort_by=sort or prefs.search.sort_by,
    )


def _apply_quick_filter(engine: SearchEngine, options: SearchOptions, label: str) -> SearchOptions:
    for quick in engine.get_quick_filters():
        if quick.label.lower() == label.lower():
            # Preset fields override the ones given on the command line
            merged = options.filters()
            merged.update(copy.deepcopy(quick.options))
            return SearchOptions(
                query=options.query,
                fuzzy_search=options.fuzzy_search,
                max_results=options.max_results,
                sort_by=options.sort_by,
                **merged,
            )

    labels = ", ".join(q.label for q in engine.get_quick_filters())
    console.print(f"[red]Unknown quick filter:[/red] {label}")
    console.print(f"Available: {labels}")
    raise typer.Exit(1)


def print_results(results: List[SearchResult], show_scores: bool = True, show_context: bool = True) -> None:
    """Render results as a rich table."""
    if not results:
        console.print("[yellow]No results found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("#", style="dim", width=4)
    if show_scores:
        table.add_column("Score", style="cyan", width=7)
    table.add_column("Section", style="magenta")
    table.add_column("Field", style="green")
    table.add_column("Type", style="yellow")
    if show_context:
        table.add_column("Context", style="white")

    for i, result in enumerate(results, 1):
        row = [str(i)]
        if show_scores:
            row.append(f"{result.match_score:.1f}")
        row.extend([result.section_name, result.field_name, result.field_type])
        if show_context:
            row.append(escape(result.context))
        table.add_row(*row)

    console.print(table)


@app.command()
def search(
    query: str = typer.Argument(..., help="Search query"),
    fuzzy: Optional[bool] = typer.Option(None, "--fuzzy/--exact", help="Fuzzy subsequence matching"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Max results (0 = no limit)"),
    sort: Optional[str] = typer.Option(None, "--sort", help="relevance, date or section"),
    section: Optional[List[str]] = typer.Option(None, "--section", "-s", help="Restrict to section id (repeatable)"),
    field_type: Optional[List[str]] = typer.Option(None, "--type", "-t", help="Restrict to field type (repeatable)"),
    status: Optional[str] = typer.Option(None, "--status", help="complete, incomplete or partial"),
    modified_by: Optional[str] = typer.Option(None, "--modified-by", help="Last editor"),
    tag: Optional[List[str]] = typer.Option(None, "--tag", help="Tag (repeatable)"),
    attachments: Optional[bool] = typer.Option(None, "--attachments/--no-attachments", help="Attachment presence"),
    since: Optional[datetime] = typer.Option(None, "--since", formats=["%Y-%m-%d"], help="Modified on/after"),
    until: Optional[datetime] = typer.Option(None, "--until", formats=["%Y-%m-%d"], help="Modified on/before"),
    quick: Optional[str] = typer.Option(None, "--quick", "-q", help="Apply a quick filter by label"),
    page: int = typer.Option(1, "--page", "-p", help="Result page"),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
    scope: Optional[str] = typer.Option(None, "--scope", help="Filter scope (organization id)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Custom config file"),
):
    """
    Search indexed fields and documents.

    Examples:
        ffind search "health initiative"
        ffind search "helth" --fuzzy
        ffind search "board" --section governance --sort section
        ffind search "report" --quick "Has Attachments"
    """
    try:
        prefs = UserConfig.load()
        engine = _load_engine(config, scope, prefs)

        options = _build_options(
            query, prefs, fuzzy, limit, sort, section, field_type,
            status, modified_by, tag, attachments, since, until,
        )
        if quick:
            options = _apply_quick_filter(engine, options, quick)

        results = engine.search(options)
        engine.close()

    except (ValueError, FileNotFoundError, ImportError, TypeError) as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        raise typer.Exit(1)

    if as_json:
        console.print_json(json.dumps([r.to_dict() for r in results], default=str))
        return

    result_page = paginate(results, page, prefs.search.per_page)
    if results:
        console.print(
            f"\n[bold]Found {len(results)} results[/bold] "
            f"[dim](page {result_page.page}/{result_page.total_pages})[/dim]\n"
        )
    print_results(result_page.results, prefs.ui.show_scores, prefs.ui.show_context)


@app.command()
def suggest(
    partial: str = typer.Argument(..., help="Partial query"),
    scope: Optional[str] = typer.Option(None, "--scope", help="Filter scope (organization id)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Custom config file"),
):
    """Show autosuggestions for a partial query."""
    try:
        prefs = UserConfig.load()
        engine = _load_engine(config, scope, prefs)
        suggestions = engine.suggest(partial)
        engine.close()
    except (ValueError, FileNotFoundError, ImportError, TypeError) as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not suggestions:
        console.print("[yellow]No suggestions.[/yellow]")
        return

    for suggestion in suggestions:
        console.print(f"  • {suggestion}")


@app.command()
def stats(
    scope: Optional[str] = typer.Option(None, "--scope", help="Filter scope (organization id)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Custom config file"),
):
    """Build the index and show statistics."""
    try:
        prefs = UserConfig.load()
        engine = _load_engine(config, scope, prefs)
        index_stats = engine.get_statistics()
        engine.close()
    except (ValueError, FileNotFoundError, ImportError, TypeError) as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        raise typer.Exit(1)

    table = Table(title="Index Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Scope", index_stats['scope_id'])
    table.add_row("Total Entries", str(index_stats['total_entries']))
    table.add_row("Documents", str(index_stats['total_documents']))
    table.add_row("Saved Filters", str(index_stats['saved_filters']))
    table.add_row("Fingerprint", index_stats['fingerprint'][:16])

    if index_stats['sections']:
        table.add_row("", "")
        table.add_row("[bold]Sections[/bold]", "")
        for section_id, count in sorted(index_stats['sections'].items()):
            table.add_row(f"  {section_id}", str(count))

    if index_stats['type_distribution']:
        table.add_row("", "")
        table.add_row("[bold]Field Types[/bold]", "")
        for type_name, count in sorted(index_stats['type_distribution'].items()):
            table.add_row(f"  {type_name}", str(count))

    console.print(table)


@app.command()
def index(
    scope: Optional[str] = typer.Option(None, "--scope", help="Filter scope (organization id)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Custom config file"),
):
    """Rebuild the index from the record store and report what was indexed."""
    try:
        prefs = UserConfig.load()
        engine = _load_engine(config, scope, prefs)
        index_stats = engine.get_statistics()
        engine.close()
    except (ValueError, FileNotFoundError, ImportError, TypeError) as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(
        f"[green]✓[/green] Indexed {index_stats['total_entries']} entries "
        f"({index_stats['total_documents']} documents)"
    )
    console.print(f"[dim]Fingerprint: {index_stats['fingerprint'][:16]}[/dim]")


@app.command()
def quick(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Custom config file"),
):
    """List the built-in quick filters."""
    engine = SearchEngine(config=ConfigLoader.load(config).get('search', {}))

    table = Table(title="Quick Filters")
    table.add_column("Label", style="cyan")
    table.add_column("Options", style="green")

    for quick_filter in engine.get_quick_filters():
        options = ", ".join(f"{key}={value}" for key, value in quick_filter.options.items())
        table.add_row(quick_filter.label, options)

    console.print(table)


@filters_app.command("list")
def filters_list(
    scope: Optional[str] = typer.Option(None, "--scope", help="Filter scope (organization id)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Custom config file"),
):
    """List saved filters."""
    prefs = UserConfig.load()
    try:
        engine = _load_engine(config, scope, prefs)
    except (ValueError, FileNotFoundError, ImportError, TypeError) as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        raise typer.Exit(1)

    saved = engine.get_saved_filters()
    engine.close()

    if not saved:
        console.print("[yellow]No saved filters.[/yellow]")
        return

    table = Table(title=f"Saved Filters ({engine.scope_id})")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Query", style="green")
    table.add_column("Saved", style="yellow")
    table.add_column("By", style="magenta")

    for item in saved:
        table.add_row(item.id, item.name, item.query, item.saved_at.strftime("%Y-%m-%d %H:%M"), item.saved_by)

    console.print(table)


@filters_app.command("save")
def filters_save(
    name: str = typer.Argument(..., help="Filter name"),
    query: str = typer.Argument("", help="Search query"),
    section: Optional[List[str]] = typer.Option(None, "--section", "-s", help="Section id (repeatable)"),
    field_type: Optional[List[str]] = typer.Option(None, "--type", "-t", help="Field type (repeatable)"),
    status: Optional[str] = typer.Option(None, "--status", help="complete, incomplete or partial"),
    modified_by: Optional[str] = typer.Option(None, "--modified-by", help="Last editor"),
    tag: Optional[List[str]] = typer.Option(None, "--tag", help="Tag (repeatable)"),
    attachments: Optional[bool] = typer.Option(None, "--attachments/--no-attachments", help="Attachment presence"),
    since: Optional[datetime] = typer.Option(None, "--since", formats=["%Y-%m-%d"], help="Modified on/after"),
    until: Optional[datetime] = typer.Option(None, "--until", formats=["%Y-%m-%d"], help="Modified on/before"),
    scope: Optional[str] = typer.Option(None, "--scope", help="Filter scope (organization id)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Custom config file"),
):
    """
    Save a named filter.

    Examples:
        ffind filters save "Board emails" board --type email --section governance
    """
    prefs = UserConfig.load()
    try:
        engine = _load_engine(config, scope, prefs)
        options = _build_options(
            query, prefs, sections=section, field_types=field_type, status=status,
            modified_by=modified_by, tags=tag, attachments=attachments, since=since, until=until,
        )
    except (ValueError, FileNotFoundError, ImportError, TypeError) as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        raise typer.Exit(1)

    filter_id = engine.save_filter(name, options, prefs.identity.user_id)
    engine.close()
    console.print(f"[green]✓[/green] Saved filter [bold]{name}[/bold] ({filter_id})")


@filters_app.command("apply")
def filters_apply(
    filter_id: str = typer.Argument(..., help="Saved filter id"),
    page: int = typer.Option(1, "--page", "-p", help="Result page"),
    scope: Optional[str] = typer.Option(None, "--scope", help="Filter scope (organization id)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Custom config file"),
):
    """Run the search stored in a saved filter."""
    prefs = UserConfig.load()
    try:
        engine = _load_engine(config, scope, prefs)
    except (ValueError, FileNotFoundError, ImportError, TypeError) as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        raise typer.Exit(1)

    options = engine.apply_saved_filter(filter_id)
    if options is None:
        engine.close()
        console.print(f"[red]Saved filter not found:[/red] {filter_id}")
        raise typer.Exit(1)

    options.fuzzy_search = prefs.search.fuzzy
    options.max_results = prefs.search.default_limit
    results = engine.search(options)
    engine.close()

    result_page = paginate(results, page, prefs.search.per_page)
    print_results(result_page.results, prefs.ui.show_scores, prefs.ui.show_context)


@filters_app.command("delete")
def filters_delete(
    filter_id: str = typer.Argument(..., help="Saved filter id"),
    scope: Optional[str] = typer.Option(None, "--scope", help="Filter scope (organization id)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Custom config file"),
):
    """Delete a saved filter."""
    prefs = UserConfig.load()
    try:
        engine = _load_engine(config, scope, prefs)
    except (ValueError, FileNotFoundError, ImportError, TypeError) as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        raise typer.Exit(1)

    deleted = engine.delete_saved_filter(filter_id)
    engine.close()

    if not deleted:
        console.print(f"[yellow]No saved filter with id {filter_id}[/yellow]")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Deleted {filter_id}")


@app.command()
def interactive(
    scope: Optional[str] = typer.Option(None, "--scope", help="Filter scope (organization id)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Custom config file"),
):
    """
    Launch the interactive search prompt.

    Features:
    - Type a query and press Enter
    - Slash commands (/help, /fuzzy, /sort, /limit, /quick, /stats, /exit)
    - ?partial shows suggestions
    """
    from fieldfind.tui.app import run_interactive
    run_interactive(config_path=config, scope=scope)


@app.command()
def version():
    """Show version information."""
    from fieldfind import __version__, __full_name__
    console.print(f"{__full_name__} (ffind) v{__version__}")
    console.print("Field-level search over nested application records")


if __name__ == "__main__":
    app()
