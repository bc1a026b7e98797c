import os
import json
from typing import Any, Dict, List

from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from lms.book import BookSnapshot

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LMS_CLI_OUTPUT"
OUTPUT_MODES = ("plain", "json", "rich")

_console = Console()


def set_output_mode(mode: str) -> bool:
    mode = (mode or "").lower().strip()
    if mode in OUTPUT_MODES:
        os.environ[OUTPUT_MODE_ENV] = mode
        return True
    return False


def get_output_mode() -> str:
    mode = os.environ.get(OUTPUT_MODE_ENV, "plain").lower()
    return mode if mode in OUTPUT_MODES else "plain"


def format_book_line(book: BookSnapshot) -> str:
    return (f"{book.isbn} - {book.title} by {book.author} [{book.genre}] "
            f"{book.available}/{book.total} available (borrowed {book.borrowed})")


def build_book_table(books: List[BookSnapshot], title: str = "📚 Catalog") -> Table:
    table = Table(title=title, show_lines=True, header_style="bold cyan")
    table.add_column("ISBN", style="magenta", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Author", style="white")
    table.add_column("Genre", style="white")
    table.add_column("Available", justify="right", style="green")
    table.add_column("Total", justify="right")
    table.add_column("Borrowed", justify="right", style="yellow")
    for b in books:
        table.add_row(b.isbn, b.title, b.author, b.genre, str(b.available), str(b.total), str(b.borrowed))
    return table


def print_book_list(books: List[BookSnapshot], title: str = "📚 Catalog") -> None:
    """Print books in the current output mode.
    - plain: one ``format_book_line`` per book, or 'No books in catalog.'
    - json: JSON array of snapshots
    - rich: Rich table
    """
    mode = get_output_mode()

    if not books:
        print("No books in catalog.")
        return

    if mode == "json":
        print(json.dumps([b.model_dump() for b in books], ensure_ascii=False))
    elif mode == "rich":
        _console.print(build_book_table(books, title))
    else:
        for b in books:
            print(format_book_line(b))


def build_stats_panel(stats: Dict[str, Any]) -> Panel:
    content = (f"[bold]Total Books:[/] {stats['total_books']}\n"
               f"[bold]Unique Authors:[/] {stats['unique_authors']}\n"
               f"[bold]Available Copies:[/] {stats['available_copies']}/{stats['total_copies']}\n"
               f"[bold]Borrowed Copies:[/] {stats['borrowed_copies']}")
    return Panel.fit(content, title="📊 Stats", border_style="blue")


def print_stats_result(stats: Dict[str, Any]) -> None:
    mode = get_output_mode()

    if not stats or not stats.get("total_books"):
        print("No statistics available.")
        return

    if mode == "json":
        print(json.dumps(stats, ensure_ascii=False))
    elif mode == "rich":
        _console.print(build_stats_panel(stats))
    else:
        print(f"Total Books: {stats['total_books']}")
        print(f"Unique Authors: {stats['unique_authors']}")
        print(f"Total Copies: {stats['total_copies']}")
        print(f"Borrowed Copies: {stats['borrowed_copies']}")
        print(f"Available Copies: {stats['available_copies']}")
