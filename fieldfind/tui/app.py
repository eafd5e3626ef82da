"""Minimal interactive prompt for FieldFind."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from fieldfind.core.config import ConfigLoader
from fieldfind.core.engine import SearchEngine
from fieldfind.core.registry import ComponentRegistry
from fieldfind.core.user_config import UserConfig
from fieldfind.models.search import SORT_KEYS, SearchOptions, SearchResult

console = Console()


class SessionState:
    """Options carried between queries in one interactive session."""

    def __init__(self, prefs: UserConfig):
        self.fuzzy = prefs.search.fuzzy
        self.sort_by = prefs.search.sort_by
        self.limit = prefs.search.default_limit
        self.filters: dict = {}  # active quick/saved filter fields
        self.filter_label: Optional[str] = None

    def options(self, query: str) -> SearchOptions:
        return SearchOptions(
            query=query,
            fuzzy_search=self.fuzzy,
            sort_by=self.sort_by,
            max_results=self.limit,
            **copy.deepcopy(self.filters),
        )

    def describe(self) -> str:
        mode = "fuzzy" if self.fuzzy else "exact"
        active = self.filter_label or "none"
        return f"Mode: {mode} | Sort: {self.sort_by} | Limit: {self.limit} | Filter: {active}"


def _print_help(state: SessionState) -> None:
    console.print(
        Panel(
            "\n".join(
                [
                    "Commands:",
                    "  /help              Show this help",
                    "  /stats             Index statistics",
                    "  /fuzzy on|off      Toggle fuzzy matching",
                    "  /sort KEY          relevance, date or section",
                    "  /limit N           Change result limit",
                    "  /quick [LABEL]     List quick filters or activate one",
                    "  /filters           List saved filters",
                    "  /apply ID          Activate a saved filter",
                    "  /save NAME         Save the active filter with the last query",
                    "  /clear             Drop the active filter",
                    "  /exit              Quit",
                    "",
                    "Syntax:",
                    "  query              Search",
                    "  ?partial           Suggestions",
                    "",
                    state.describe(),
                ]
            ),
            title="Help",
            expand=False,
        )
    )


def _print_stats(engine: SearchEngine) -> None:
    stats = engine.get_statistics()
    table = Table(title="Index", header_style="bold cyan")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Entries", str(stats["total_entries"]))
    table.add_row("Documents", str(stats["total_documents"]))
    table.add_row("Saved filters", str(stats["saved_filters"]))

    for section_id, count in sorted(stats["sections"].items()):
        table.add_row(f"  {section_id}", str(count))

    console.print(table)


def _print_results(results: List[SearchResult]) -> None:
    if not results:
        console.print("[yellow]No results found[/yellow]")
        return

    table = Table(
        show_header=True,
        header_style="bold cyan",
        box=None,
        title="Results",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Score", style="cyan", width=7)
    table.add_column("Section", style="magenta", width=18)
    table.add_column("Field", style="green", width=22)
    table.add_column("Context", style="white")

    for i, result in enumerate(results, 1):
        table.add_row(
            str(i),
            f"{result.match_score:.1f}",
            result.section_name,
            result.field_name,
            escape(result.context),
        )

    console.print(table)


def _handle_command(raw: str, engine: SearchEngine, state: SessionState, prefs: UserConfig, last_query: str) -> None:
    parts = raw.split(maxsplit=1)
    command = parts[0].lower()
    arg = parts[1].strip() if len(parts) > 1 else ""

    if command == "/help":
        _print_help(state)
    elif command == "/stats":
        _print_stats(engine)
    elif command == "/fuzzy":
        if arg in {"on", "off"}:
            state.fuzzy = arg == "on"
            console.print(f"[green]Fuzzy matching {arg}[/green]")
        else:
            console.print("[yellow]Usage: /fuzzy on|off[/yellow]")
    elif command == "/sort":
        if arg in SORT_KEYS:
            state.sort_by = arg
            console.print(f"[green]Sort: {arg}[/green]")
        else:
            console.print(f"[yellow]Valid sort keys: {', '.join(SORT_KEYS)}[/yellow]")
    elif command == "/limit":
        if arg.isdigit():
            state.limit = max(1, min(200, int(arg)))
            console.print(f"[green]Limit set to {state.limit}[/green]")
        else:
            console.print("[yellow]Usage: /limit 10[/yellow]")
    elif command == "/quick":
        quick_filters = engine.get_quick_filters()
        if not arg:
            for quick in quick_filters:
                console.print(f"  • {quick.label}")
            return
        for quick in quick_filters:
            if quick.label.lower() == arg.lower():
                state.filters = copy.deepcopy(quick.options)
                state.filter_label = quick.label
                console.print(f"[green]Quick filter: {quick.label}[/green]")
                return
        console.print("[yellow]Unknown quick filter. Use /quick to list them[/yellow]")
    elif command == "/filters":
        saved = engine.get_saved_filters()
        if not saved:
            console.print("[dim]No saved filters[/dim]")
        for item in saved:
            console.print(f"  [dim]{item.id}[/dim]  {item.name}  [green]{item.query}[/green]")
    elif command == "/apply":
        options = engine.apply_saved_filter(arg)
        if options is None:
            console.print(f"[yellow]Saved filter not found: {arg}[/yellow]")
            return
        state.filters = options.filters()
        state.filter_label = arg
        _print_results(engine.search(state.options(options.query)))
    elif command == "/save":
        if not arg:
            console.print("[yellow]Usage: /save NAME[/yellow]")
            return
        filter_id = engine.save_filter(arg, state.options(last_query), prefs.identity.user_id)
        console.print(f"[green]✓ Saved {arg} ({filter_id})[/green]")
    elif command == "/clear":
        state.filters = {}
        state.filter_label = None
        console.print("[green]Filter cleared[/green]")
    else:
        console.print("[yellow]Unknown command. Use /help[/yellow]")


def run_interactive(config_path: Optional[Path] = None, scope: Optional[str] = None) -> None:
    """Entry point for `ffind interactive`."""
    console.print(
        Panel(
            "\n".join(
                [
                    "FieldFind - interactive mode",
                    "Type a query and press Enter.",
                    "Commands: /help, /stats, /fuzzy on|off, /sort, /quick, /exit",
                    "Tip: ?partial shows suggestions.",
                ]
            ),
            title="ffind",
            expand=False,
        )
    )

    try:
        cfg = ConfigLoader.load(config_path)
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[red]Error loading config:[/red] {exc}")
        return

    prefs = UserConfig.load()
    cfg = ConfigLoader.merge(cfg, prefs.engine_overrides())

    try:
        engine = SearchEngine.from_config(cfg, ComponentRegistry())
    except (ImportError, TypeError) as exc:
        console.print(f"[red]Could not start the engine:[/red] {exc}")
        return

    engine.initialize(scope or prefs.identity.scope_id)
    state = SessionState(prefs)
    last_query = ""

    stats = engine.get_statistics()
    console.print(
        f"[dim]{stats['total_entries']} entries | "
        f"{stats['total_documents']} documents | scope {stats['scope_id']}[/dim]"
    )

    try:
        while True:
            try:
                raw_query = Prompt.ask("[bold magenta]search[/bold magenta]").strip()
            except (KeyboardInterrupt, EOFError):
                console.print("\n[dim]Exiting...[/dim]")
                break

            if not raw_query:
                continue

            lowered = raw_query.lower()
            if lowered in {"exit", "/exit", "quit", "/quit", ":q"}:
                break

            if raw_query.startswith("/"):
                _handle_command(raw_query, engine, state, prefs, last_query)
                continue

            if raw_query.startswith("?"):
                suggestions = engine.suggest(raw_query[1:].strip())
                if suggestions:
                    console.print("  " + " | ".join(escape(s) for s in suggestions))
                else:
                    console.print("[dim]No suggestions[/dim]")
                continue

            last_query = raw_query
            _print_results(engine.search(state.options(raw_query)))
    finally:
        engine.close()
