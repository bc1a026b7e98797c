import logging
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from config import settings
from lms.catalog import Catalog, LendingResult, SearchField
from lms.loaders import CatalogLoadError, LoaderKind
from lms.ui_helpers import build_book_table, build_stats_panel, print_book_list, print_stats_result, set_output_mode
from lms.validators import CountValidator, TextValidator

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.WARNING),
    format="%(levelname)s: %(name)s: %(message)s",
)
logger = logging.getLogger("lms.cli")

APP_NAME = settings.app_name

console = Console()

SOURCE_CHOICES = [kind.value for kind in LoaderKind]
FIELD_CHOICES = [field.value for field in SearchField]


def _resolve_locator(source: str, path: Optional[str]) -> str:
    return path if path is not None else settings.locator_for(source)


def load_catalog(source: str, path: Optional[str]) -> Catalog:
    """Build a catalog for a one-shot command, exiting with code 1 if the load fails."""
    catalog = Catalog()
    try:
        catalog.load(source, _resolve_locator(source, path), encoding=settings.file_encoding)
    except CatalogLoadError as e:
        logger.error(f"Load failed: {e}")
        print(f"Failed to load data: {e}")
        raise typer.Exit(code=1)
    return catalog


def describe_lending(action: str, result: LendingResult, isbn: str, title: Optional[str]) -> str:
    """Status line shown after a borrow or return."""
    if result is LendingResult.NOT_FOUND:
        return f"Book with ISBN {isbn} not found."
    if result is LendingResult.NO_COPIES_AVAILABLE:
        return f"No copies available for {title}"
    if result is LendingResult.NOTHING_TO_RETURN:
        return f"All copies are already available for {title}"
    verb = "borrowed" if action == "borrow" else "returned"
    return f"Book {verb}: {title} (ISBN: {isbn})"


# --- Typer CLI App ---
app = typer.Typer(help=f"{APP_NAME} CLI")

SourceOption = typer.Option(
    settings.default_source, "--source", "-s", help="Data source: file | database"
)
PathOption = typer.Option(
    None, "--path", "-p", help="File path or connection string (default from config)"
)


@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
):
    """Global options for the CLI. Without a command the interactive menu starts."""
    if output and not set_output_mode(output):
        print(f"Unknown output mode: {output}")
        raise typer.Exit(code=2)
    if ctx.invoked_subcommand is None:
        source = settings.default_source
        run_menu(Catalog(), source, settings.locator_for(source))


@app.command("list")
def cli_list(source: str = SourceOption, path: Optional[str] = PathOption):
    """List every book in load order."""
    catalog = load_catalog(source, path)
    print_book_list(catalog.get_all_books())


@app.command("search")
def cli_search(
    field: str = typer.Argument(..., help="Title | Author | Genre | ISBN"),
    term: str = typer.Argument(..., help="Search term"),
    source: str = SourceOption,
    path: Optional[str] = PathOption,
):
    """Search by title, author or genre (substring) or by ISBN (exact)."""
    if SearchField.parse(field) is None:
        print(f"Search field must be one of: {', '.join(FIELD_CHOICES)}")
        raise typer.Exit(code=1)
    if TextValidator.is_blank(term):
        print("Please enter a search term")
        raise typer.Exit(code=1)
    catalog = load_catalog(source, path)
    print_book_list(catalog.search_books(field, TextValidator.clean(term)), title=f"🔎 {field}: {term}")


@app.command("top")
def cli_top(
    count: Optional[str] = typer.Argument(None, help="How many books to show"),
    source: str = SourceOption,
    path: Optional[str] = PathOption,
):
    """Show the most borrowed books."""
    try:
        n = CountValidator.parse_count(count) if count is not None else settings.top_default
    except ValueError as e:
        print(str(e))
        raise typer.Exit(code=1)
    catalog = load_catalog(source, path)
    print_book_list(catalog.top_borrowed(n), title=f"🏆 Top {n} Borrowed")


@app.command("stats")
def cli_stats(source: str = SourceOption, path: Optional[str] = PathOption):
    """Show title and copy counts."""
    catalog = load_catalog(source, path)
    print_stats_result(catalog.get_statistics())


@app.command("menu")
def cli_menu(source: str = SourceOption, path: Optional[str] = PathOption):
    """Start the interactive menu, where borrow and return are available."""
    run_menu(Catalog(), source, _resolve_locator(source, path))


# --- Interactive menu ---
def try_load(catalog: Catalog, source: str, locator: str) -> bool:
    """Load into the session catalog; on failure the previous books stay in place."""
    try:
        with console.status("[bold green]Loading books..."):
            count = catalog.load(source, locator, encoding=settings.file_encoding)
    except CatalogLoadError as e:
        logger.error(f"Load failed: {e}")
        console.print(f"[bold red]Failed to load data:[/] {escape(str(e))}")
        return False
    console.print(f"[green]Data loaded successfully from: {escape(source)} ({count} books)[/]")
    return True


def show_all(catalog: Catalog) -> None:
    books = catalog.get_all_books()
    if not books:
        console.print("[yellow]No books in catalog.[/]")
        return
    console.print(build_book_table(books))
    console.print(f"[dim]Displaying all books: {len(books)} books[/]")


def search(catalog: Catalog) -> None:
    field = Prompt.ask("Search by", choices=FIELD_CHOICES, default=SearchField.TITLE.value)
    term = TextValidator.clean(Prompt.ask("Search term", default=""))
    if not term:
        console.print("[bold red]Please enter a search term[/]")
        return
    results = catalog.search_books(field, term)
    if results:
        console.print(build_book_table(results, title=f"🔎 {escape(field)}: {escape(term)}"))
    console.print(f"Search completed: {len(results)} results found for {field}: {escape(term)}")


def lend(catalog: Catalog, action: str) -> None:
    isbn = TextValidator.clean(Prompt.ask(f"ISBN of the book to {action}"))
    if not isbn:
        console.print(f"[bold red]Please enter the ISBN of a book to {action}[/]")
        return
    if action == "borrow":
        result = catalog.borrow_book(isbn)
    else:
        result = catalog.return_book(isbn)
    book = catalog.find_by_isbn(isbn)
    message = escape(describe_lending(action, result, book.isbn if book else isbn, book.title if book else None))
    console.print(f"[green]{message}[/]" if result else f"[bold red]{message}[/]")


def top(catalog: Catalog) -> None:
    raw = Prompt.ask("Number of top borrowed books to show", default=str(settings.top_default))
    try:
        n = CountValidator.parse_count(raw)
    except ValueError as e:
        console.print(f"[bold red]{e}[/]")
        return
    books = catalog.top_borrowed(n)
    if books:
        console.print(build_book_table(books, title=f"🏆 Top {n} Borrowed"))
    console.print(f"Displaying top {n} borrowed books")


def stats(catalog: Catalog) -> None:
    console.print(build_stats_panel(catalog.get_statistics()))


def reload(catalog: Catalog, source: str) -> str:
    source = Prompt.ask("Data source", choices=SOURCE_CHOICES, default=source)
    locator = Prompt.ask("Path" if source == LoaderKind.FILE.value else "Connection",
                         default=settings.locator_for(source))
    try_load(catalog, source, locator)
    return source


def run_menu(catalog: Catalog, source: str, locator: str) -> None:
    """Simple interactive menu over one catalog kept in memory for the session."""
    def render_menu() -> None:
        menu_items = [
            ("1", "Display all books", "📚"),
            ("2", "Search books", "🔎"),
            ("3", "Borrow a book", "📤"),
            ("4", "Return a book", "📥"),
            ("5", "Top borrowed books", "🏆"),
            ("6", "Show statistics", "📊"),
            ("7", "Load data", "🔄"),
            ("0", "Exit", "🚪"),
        ]

        table = Table.grid(padding=(0, 2))
        table.add_column(justify="right", style="bold cyan", width=4)
        table.add_column(justify="left", style="white")
        for key, label, icon in menu_items:
            table.add_row(f"[reverse]{key}[/]", f"{icon} {label}")

        console.print(Panel(table, title=APP_NAME, border_style="cyan", box=box.HEAVY, padding=(1, 2)))

    try_load(catalog, source, locator)
    while True:
        render_menu()
        choice = Prompt.ask("Choose an option", choices=["1", "2", "3", "4", "5", "6", "7", "0"], default="1")

        if choice == "1":
            show_all(catalog)
        elif choice == "2":
            search(catalog)
        elif choice == "3":
            lend(catalog, "borrow")
        elif choice == "4":
            lend(catalog, "return")
        elif choice == "5":
            top(catalog)
        elif choice == "6":
            stats(catalog)
        elif choice == "7":
            source = reload(catalog, source)
        elif choice == "0":
            console.print("[green]Goodbye![/]")
            break
        print()  # blank line between actions


if __name__ == "__main__":
    app()
