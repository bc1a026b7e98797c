"""Data loaders that materialize the initial book collection.

Two sources are supported: a comma-delimited text file and a placeholder
"database" that hands back fixed sample records. Both implement
``AbstractDataLoader.load_books`` and either return a complete list of new
``Book`` objects or raise ``CatalogLoadError``.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import List

from lms.book import Book

logger = logging.getLogger(__name__)

FIELD_COUNT = 5
_INT_PATTERN = re.compile(r"[+-]?\d+")


class LoaderKind(str, Enum):
    FILE = "file"
    DATABASE = "database"


class AbstractDataLoader(ABC):
    """Produces a fresh collection of books from some source."""

    @abstractmethod
    def load_books(self) -> List[Book]:
        raise NotImplementedError


class FileDataLoader(AbstractDataLoader):
    """Reads ``isbn,title,author,genre,totalCopies`` lines from a text file.

    Lines with fewer than five fields are skipped. A copy count that is not an
    integer (or is negative) aborts the whole load.
    """

    def __init__(self, file_path: str, encoding: str = "utf-8") -> None:
        self.file_path = file_path
        self.encoding = encoding

    def load_books(self) -> List[Book]:
        books: List[Book] = []
        try:
            with open(self.file_path, "r", encoding=self.encoding) as f:
                for line_no, line in enumerate(f, 1):
                    book = self._parse_line(line.rstrip("\r\n"), line_no)
                    if book is not None:
                        books.append(book)
        except (OSError, UnicodeError, LookupError) as exc:
            # UnicodeError: bytes invalid for the encoding; LookupError: unknown codec name
            reason = getattr(exc, "strerror", None) or exc
            raise CatalogLoadError(f"Cannot read {self.file_path}: {reason}") from exc
        logger.info(f"Loaded {len(books)} books from {self.file_path}")
        return books

    def _parse_line(self, line: str, line_no: int) -> Book | None:
        parts = [part.strip() for part in line.split(",")]
        if len(parts) < FIELD_COUNT:
            logger.debug(f"Skipping line {line_no} of {self.file_path}: {len(parts)} field(s)")
            return None

        isbn, title, author, genre, raw_total = parts[:FIELD_COUNT]
        if not _INT_PATTERN.fullmatch(raw_total):
            raise CatalogLoadError(
                f"Invalid copy count {raw_total!r} on line {line_no} of {self.file_path}"
            )
        try:
            return Book(isbn, title, author, genre, int(raw_total))
        except ValueError as exc:
            raise CatalogLoadError(f"{exc} on line {line_no} of {self.file_path}") from exc


class DatabaseDataLoader(AbstractDataLoader):
    """Placeholder for a real store; always returns the same two records."""

    SAMPLE_RECORDS = (
        ("100", "Database Book 1", "DB Author 1", "Technical", 3),
        ("101", "Database Book 2", "DB Author 2", "Fiction", 5),
    )

    def __init__(self, connection_string: str) -> None:
        self.connection_string = connection_string

    def load_books(self) -> List[Book]:
        logger.info(f"Database loader is a stub; ignoring {self.connection_string!r}")
        return [Book(*record) for record in self.SAMPLE_RECORDS]


def create_loader(kind: LoaderKind | str, locator: str, encoding: str = "utf-8") -> AbstractDataLoader:
    """Build the loader for ``kind`` reading from ``locator``."""
    try:
        kind = LoaderKind(str(getattr(kind, "value", kind)).lower())
    except ValueError as exc:
        raise CatalogLoadError(f"Unknown data source: {kind}") from exc

    if kind is LoaderKind.DATABASE:
        return DatabaseDataLoader(locator)
    if not locator or not locator.strip():
        raise CatalogLoadError("Please specify a file path")
    return FileDataLoader(locator.strip(), encoding=encoding)


class CatalogLoadError(Exception):
    """Raised when a source cannot be read or holds a malformed record."""
