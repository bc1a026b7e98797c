import json

from typer.testing import CliRunner

from main import app, describe_lending
from lms.catalog import LendingResult

runner = CliRunner()


def run_menu_with(books_file, keys):
    return runner.invoke(app, ["menu", "--path", str(books_file)], input="\n".join(keys) + "\n")


def test_list_plain(books_file):
    result = runner.invoke(app, ["list", "--path", str(books_file)])
    assert result.exit_code == 0
    assert "B1 - Title One by Author A [Fiction] 3/3 available (borrowed 0)" in result.stdout
    assert "B2 - Title Two by Author B [Tech] 2/2 available (borrowed 0)" in result.stdout


def test_list_json(books_file):
    result = runner.invoke(app, ["--output", "json", "list", "-p", str(books_file)])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [b["isbn"] for b in payload] == ["B1", "B2"]
    assert payload[0] == {"isbn": "B1", "title": "Title One", "author": "Author A", "genre": "Fiction",
                          "available": 3, "total": 3, "borrowed": 0}


def test_list_from_database_stub():
    result = runner.invoke(app, ["list", "--source", "database"])
    assert result.exit_code == 0
    assert "100 - Database Book 1" in result.stdout
    assert "101 - Database Book 2" in result.stdout


def test_list_empty_file(write_books):
    result = runner.invoke(app, ["list", "-p", str(write_books(""))])
    assert result.exit_code == 0
    assert "No books in catalog." in result.stdout


def test_list_missing_file_fails(tmp_path):
    result = runner.invoke(app, ["list", "-p", str(tmp_path / "missing.txt")])
    assert result.exit_code == 1
    assert "Failed to load data" in result.stdout


def test_list_malformed_file_fails(write_books):
    path = write_books("B3,Bad,AuthorC,Genre,notanumber\n")
    result = runner.invoke(app, ["list", "-p", str(path)])
    assert result.exit_code == 1
    assert "Invalid copy count 'notanumber'" in result.stdout


def test_unknown_output_mode(books_file):
    result = runner.invoke(app, ["-o", "xml", "list", "-p", str(books_file)])
    assert result.exit_code == 2
    assert "Unknown output mode: xml" in result.stdout


def test_search_title(books_file):
    result = runner.invoke(app, ["search", "Title", "one", "-p", str(books_file)])
    assert result.exit_code == 0
    assert "Title One" in result.stdout
    assert "Title Two" not in result.stdout


def test_search_isbn_exact(books_file):
    result = runner.invoke(app, ["search", "isbn", "b2", "-p", str(books_file)])
    assert result.exit_code == 0
    assert "B2 - Title Two" in result.stdout
    assert "B1 -" not in result.stdout


def test_search_blank_term(books_file):
    result = runner.invoke(app, ["search", "Title", "   ", "-p", str(books_file)])
    assert result.exit_code == 1
    assert "Please enter a search term" in result.stdout


def test_search_unknown_field(books_file):
    result = runner.invoke(app, ["search", "Publisher", "x", "-p", str(books_file)])
    assert result.exit_code == 1
    assert "Search field must be one of: Title, Author, Genre, ISBN" in result.stdout


def test_top_limits_results(books_file):
    result = runner.invoke(app, ["top", "1", "-p", str(books_file)])
    assert result.exit_code == 0
    assert "B1 - Title One" in result.stdout
    assert "B2 -" not in result.stdout


def test_top_rejects_non_numeric(books_file):
    result = runner.invoke(app, ["top", "abc", "-p", str(books_file)])
    assert result.exit_code == 1
    assert "Please enter a valid number" in result.stdout


def test_stats(books_file):
    result = runner.invoke(app, ["stats", "-p", str(books_file)])
    assert result.exit_code == 0
    assert "Total Books: 2" in result.stdout
    assert "Total Copies: 5" in result.stdout


def test_menu_borrow_and_exhaust(books_file):
    result = run_menu_with(books_file, ["3", "B2", "3", "b2", "3", "B2", "0"])
    assert result.exit_code == 0
    assert "Data loaded successfully from: file (2 books)" in result.stdout
    assert result.stdout.count("Book borrowed: Title Two (ISBN: B2)") == 2
    assert "No copies available for Title Two" in result.stdout
    assert "Goodbye!" in result.stdout


def test_menu_return_messages(books_file):
    result = run_menu_with(books_file, ["4", "B1", "3", "B1", "4", "B1", "0"])
    assert result.exit_code == 0
    assert "All copies are already available for Title One" in result.stdout
    assert "Book returned: Title One (ISBN: B1)" in result.stdout


def test_menu_unknown_isbn(books_file):
    result = run_menu_with(books_file, ["3", "ZZZ", "0"])
    assert result.exit_code == 0
    assert "Book with ISBN ZZZ not found." in result.stdout


def test_menu_search(books_file):
    result = run_menu_with(books_file, ["2", "Author", "b", "0"])
    assert result.exit_code == 0
    assert "Search completed: 1 results found for Author: b" in result.stdout


def test_menu_top_rejects_non_numeric(books_file):
    result = run_menu_with(books_file, ["5", "xyz", "0"])
    assert result.exit_code == 0
    assert "Please enter a valid number" in result.stdout


def test_menu_failed_reload_keeps_books(books_file, tmp_path):
    missing = str(tmp_path / "missing.txt")
    result = run_menu_with(books_file, ["7", "file", missing, "1", "0"])
    assert result.exit_code == 0
    assert "Failed to load data" in result.stdout
    assert "Displaying all books: 2 books" in result.stdout


def test_menu_reload_from_database(books_file):
    result = run_menu_with(books_file, ["7", "database", "", "1", "0"])
    assert result.exit_code == 0
    assert "Data loaded successfully from: database (2 books)" in result.stdout
    assert "Displaying all books: 2 books" in result.stdout


def test_no_command_starts_menu(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, [], input="0\n")
    assert result.exit_code == 0
    assert "Goodbye!" in result.stdout


def test_describe_lending():
    assert describe_lending("borrow", LendingResult.SUCCESS, "B1", "T") == "Book borrowed: T (ISBN: B1)"
    assert describe_lending("return", LendingResult.SUCCESS, "B1", "T") == "Book returned: T (ISBN: B1)"
    assert describe_lending("borrow", LendingResult.NO_COPIES_AVAILABLE, "B1", "T") == "No copies available for T"
    assert describe_lending("return", LendingResult.NOTHING_TO_RETURN, "B1", "T") == \
        "All copies are already available for T"
    assert describe_lending("borrow", LendingResult.NOT_FOUND, "X", None) == "Book with ISBN X not found."


def latin1_file(tmp_path):
    path = tmp_path / "latin1.txt"
    path.write_bytes("B9,Caf\xe9,Author,Genre,1\n".encode("latin-1"))
    return str(path)


def test_list_undecodable_file_fails(tmp_path):
    result = runner.invoke(app, ["list", "-p", latin1_file(tmp_path)])
    assert result.exit_code == 1
    assert "Failed to load data" in result.stdout


def test_menu_undecodable_reload_keeps_session(books_file, tmp_path):
    result = run_menu_with(books_file, ["3", "B1", "7", "file", latin1_file(tmp_path), "6", "0"])
    assert result.exit_code == 0
    assert result.exception is None
    assert "Failed to load data" in result.stdout
    assert "Borrowed Copies: 1" in result.stdout
    assert "Goodbye!" in result.stdout
