#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
ProtocolSearch - Enhanced CLI Interface
A rich command-line interface for searching the protocol catalog
"""

import argparse
import sys
import time
import traceback
from typing import List, Optional, Tuple

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.syntax import Syntax
from rich.markup import escape
from rich import box

from ProtocolSearch.config import load_config, resolve_index_path
from ProtocolSearch.preprocessing.document import CATEGORIES, Protocol
from ProtocolSearch.ranking.ranker import MAX_RESULTS
from ProtocolSearch.session import SearchSession

# Initialize rich console
console = Console()


class ProtocolSearchCLI:
    def __init__(self, config: Optional[dict] = None, output: Optional[Console] = None, debug: bool = False):
        """Initialize the CLI interface"""
        self.debug = debug
        self.config = config or load_config()
        self.console = output or console
        self.session = SearchSession()
        self.pdf_path = self.config["pdf_path"]
        self.excerpt_length = self.config["display"]["excerpt_length"]

    def print_header(self):
        """Display the application header"""
        self.console.print(Panel(
            "[bold blue]ACT Protocols[/bold blue] [yellow]Search[/yellow]",
            border_style="blue",
            subtitle="Search titles and excerpts. Filter by category.",
            width=80
        ))

    def load_catalog(self, index_path: str) -> bool:
        """Load the protocol index"""
        self.console.print(f"Loading protocol index from: [cyan]{escape(index_path)}[/cyan]")

        with self.console.status("Loading protocols..."):
            loaded = self.session.load(index_path)

        if loaded:
            self.console.print(f"[green]Successfully loaded [bold]{len(self.session.catalog)}[/bold] protocols[/green]")
        else:
            self.console.print("[bold red]Could not load the protocol index.[/bold red] Searching an empty catalog.")
        return loaded

    def toggle_category(self, category: str) -> bool:
        active = self.session.toggle_category(category)
        state = "[green]on[/green]" if active else "[dim]off[/dim]"
        self.console.print(f"Filter [cyan]{category}[/cyan]: {state}")
        return active

    def search(self, query: str) -> List[Tuple[Protocol, int]]:
        """Run a search with the current filters"""
        self.session.set_query(query)

        if self.debug:
            terms = ", ".join(self.session.query_terms()) or "<none>"
            self.console.print(f"[yellow]Query terms:[/yellow] [green]{escape(terms)}[/green]")

        try:
            start_time = time.time()
            results = self.session.results()
            execution_time = time.time() - start_time
        except Exception as e:
            self.console.print(f"[bold red]Error during search:[/bold red] {escape(str(e))}")
            self.console.print(Syntax(traceback.format_exc(), "python", theme="monokai", line_numbers=True))
            return []

        if query.strip():
            self.console.print(f"[green]Found {len(results)} protocol(s) in {execution_time:.6f} seconds[/green]")
        return results

    def render_filters(self) -> str:
        parts = []
        for category in CATEGORIES:
            if category in self.session.active_categories:
                parts.append(f"[black on green] {category} [/black on green]")
            else:
                parts.append(f"[dim]{category}[/dim]")
        return " ".join(parts)

    def display_results(self, results: List[Tuple[Protocol, int]]):
        """Display search results in a formatted way"""
        if not results:
            self.console.print("[yellow]No matches.[/yellow]")
            self.console.print(f"[dim]{escape(self.session.footer())}[/dim]")
            return

        ranked = bool(self.session.query.strip()) and any(score for _, score in results)
        title = f"[bold]Showing {len(results)} protocol(s)"
        if ranked:
            title += " ranked by relevance"
        title += "[/bold]"

        table = Table(
            box=box.HEAVY_EDGE,
            show_header=True,
            header_style="bold magenta",
            title=title,
            title_style="yellow"
        )
        table.add_column("#", style="dim", width=4)
        table.add_column("Protocol", style="cyan bold")
        table.add_column("Pages", style="green", no_wrap=True)
        if ranked:
            table.add_column("Score", style="yellow", width=7)
        table.add_column("Excerpt", no_wrap=False)
        table.add_column("PDF", no_wrap=True)

        for i, (protocol, score) in enumerate(results):
            excerpt = protocol.excerpt.replace('\n', ' ')
            if len(excerpt) > self.excerpt_length:
                excerpt = excerpt[:self.excerpt_length] + "..."

            heading = f"{escape(protocol.title) or '[dim]<No title>[/dim]'}\n[dim]{escape(protocol.category)}"
            if protocol.number:
                heading += f" • {escape(protocol.number)}"
            heading += "[/dim]"

            link = protocol.pdf_link(self.pdf_path)
            row = [str(i + 1), heading, protocol.page_range]
            if ranked:
                row.append(str(score))
            row.extend([escape(excerpt), f"[link={link}]Open PDF ↗[/link]"])

            # Highlight the row for the top result
            table.add_row(*row, style="on blue" if ranked and i == 0 else "")

        self.console.print(table)
        if len(results) == MAX_RESULTS:
            total = self.session.match_count()
            if total > MAX_RESULTS:
                self.console.print(f"[dim]Showing the first {MAX_RESULTS} of {total} matches. Refine the search to narrow them down.[/dim]")
        self.console.print(f"[dim]{escape(self.session.footer())}[/dim]")

    def show_catalog_info(self):
        catalog = self.session.catalog
        table = Table(title="[bold]Catalog[/bold]", box=box.ROUNDED, show_header=True, header_style="bold magenta")
        table.add_column("Category", style="cyan")
        table.add_column("Protocols", style="green", justify="right")

        for category in catalog.categories_in_use():
            count = sum(1 for protocol in catalog if protocol.category == category)
            table.add_row(escape(category), str(count))

        self.console.print(table)
        self.console.print(f"[dim]{escape(self.session.footer())}[/dim]")

    def interactive_mode(self):
        """Run the application in interactive mode"""
        while True:
            self.console.rule("[bold blue]ProtocolSearch[/bold blue]")
            self.console.print(f"Filters: {self.render_filters()}")

            menu_table = Table(show_header=False, box=box.SIMPLE)
            menu_table.add_column("Option", style="dim")
            menu_table.add_column("Description", style="yellow")

            menu_table.add_row("1", "Search")
            menu_table.add_row("2", "Toggle Category Filter")
            menu_table.add_row("3", "Clear Filters")
            menu_table.add_row("4", "Show Catalog Info")
            menu_table.add_row("5", "Quit")

            self.console.print("\n[bold cyan]Available Actions:[/bold cyan]")
            self.console.print(menu_table)

            choice = self.console.input("\n[bold cyan]Enter choice (1-5): [/bold cyan]").strip()

            if choice == '5' or choice.lower() == 'quit':
                break

            if choice == '1':
                query = self.console.input("\n[bold cyan]Search terms (e.g. 'sepsis', 'RSI', 'SVT'): [/bold cyan]")
                self.display_results(self.search(query))
            elif choice == '2':
                for i, category in enumerate(CATEGORIES, 1):
                    self.console.print(f"  [dim]{i}.[/dim] {category}")
                selection = self.console.input("[bold cyan]Category number: [/bold cyan]").strip()
                if selection.isdigit() and 1 <= int(selection) <= len(CATEGORIES):
                    self.toggle_category(CATEGORIES[int(selection) - 1])
                else:
                    self.console.print("[bold red]Invalid category number.[/bold red]")
            elif choice == '3':
                self.session.clear_categories()
                self.console.print("[green]Filters cleared.[/green]")
            elif choice == '4':
                self.show_catalog_info()
            else:
                self.console.print("[bold red]Invalid choice. Please enter a number between 1 and 5.[/bold red]")


def main(argv=None):
    """Main entry point for the CLI application"""
    parser = argparse.ArgumentParser(
        description='ProtocolSearch - Search medical protocol titles and excerpts'
    )
    parser.add_argument('--index', help='Path to the protocol index JSON file')
    parser.add_argument('--query', help='Query string to search for')
    parser.add_argument('--category', action='append', choices=CATEGORIES, default=[],
                        help='Only show protocols in this category (repeatable)')
    parser.add_argument('--pdf', help='Base path of the protocols PDF used for page links')
    parser.add_argument('--config', help='Path to a config JSON file')
    parser.add_argument('--interactive', action='store_true',
                        help='Run in interactive mode')
    parser.add_argument('--debug', action='store_true',
                        help='Show the terms each query is reduced to')
    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.pdf:
        config["pdf_path"] = args.pdf

    app = ProtocolSearchCLI(config=config, debug=args.debug)

    console.print("\n")
    app.print_header()

    app.load_catalog(args.index or resolve_index_path(config["index_path"]))
    for category in sorted(set(args.category)):
        app.toggle_category(category)

    # Run in interactive mode if specified or if no query was given
    if args.interactive or args.query is None:
        app.interactive_mode()
        return 0

    app.display_results(app.search(args.query))
    return 0


if __name__ == "__main__":
    sys.exit(main())
