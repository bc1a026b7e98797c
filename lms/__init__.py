"""LMS Catalog - Core Package

This package contains the core modules:
- Book records and read-only snapshots (book.py)
- File and stub database loaders (loaders.py)
- The in-memory catalog and lending logic (catalog.py)
- CLI output and input helpers (ui_helpers.py, validators.py)
"""

from lms.book import Book, BookSnapshot
from lms.catalog import Catalog, LendingResult, SearchField
from lms.loaders import (
    AbstractDataLoader,
    CatalogLoadError,
    DatabaseDataLoader,
    FileDataLoader,
    LoaderKind,
    create_loader,
)

__all__ = [
    "AbstractDataLoader",
    "Book",
    "BookSnapshot",
    "Catalog",
    "CatalogLoadError",
    "DatabaseDataLoader",
    "FileDataLoader",
    "LendingResult",
    "LoaderKind",
    "SearchField",
    "create_loader",
]
