import pytest

from lms.catalog import Catalog
from lms.ui_helpers import OUTPUT_MODE_ENV

SAMPLE_LINES = "B1,Title One,Author A,Fiction,3\nB2,Title Two,Author B,Tech,2\n"


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # Each test starts in plain mode regardless of the developer's shell
    monkeypatch.delenv(OUTPUT_MODE_ENV, raising=False)
    yield
    monkeypatch.delenv(OUTPUT_MODE_ENV, raising=False)


@pytest.fixture
def books_file(tmp_path):
    path = tmp_path / "books.txt"
    path.write_text(SAMPLE_LINES, encoding="utf-8")
    return path


@pytest.fixture
def write_books(tmp_path):
    """Write arbitrary file content and return its path."""
    def _write(content: str, name: str = "custom.txt"):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def catalog(books_file):
    cat = Catalog()
    cat.load("file", str(books_file))
    return cat
