from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from lms.book import Book, BookSnapshot
from lms.loaders import AbstractDataLoader, LoaderKind, create_loader

logger = logging.getLogger(__name__)


class SearchField(str, Enum):
    TITLE = "Title"
    AUTHOR = "Author"
    GENRE = "Genre"
    ISBN = "ISBN"

    @classmethod
    def parse(cls, value: "SearchField | str") -> Optional["SearchField"]:
        """Resolve a member from itself or its name, ignoring case. None if unknown."""
        if isinstance(value, cls):
            return value
        wanted = str(value or "").strip().casefold()
        for member in cls:
            if member.value.casefold() == wanted:
                return member
        return None


class LendingResult(Enum):
    """Outcome of a borrow or return request. Truthy only on success."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    NO_COPIES_AVAILABLE = "no_copies_available"
    NOTHING_TO_RETURN = "nothing_to_return"

    def __bool__(self) -> bool:
        return self is LendingResult.SUCCESS


class Catalog:
    """Owns the in-memory book collection and the lending operations on it.

    Callers only ever receive ``BookSnapshot`` copies, so copy accounting can
    only change through ``borrow_book`` and ``return_book``.
    """

    def __init__(self) -> None:
        self._books: List[Book] = []

    def __len__(self) -> int:
        return len(self._books)

    # ------------------------- Loading ------------------------- #
    def load_from_source(self, loader: AbstractDataLoader) -> int:
        """Replace the whole collection with the loader's output.

        The current collection is only swapped once the loader has returned,
        so a failing loader leaves it untouched.
        """
        books = list(loader.load_books())
        self._warn_on_duplicates(books)
        self._books = books
        logger.info(f"Catalog now holds {len(books)} books")
        return len(books)

    def load(self, kind: LoaderKind | str, locator: str, encoding: str = "utf-8") -> int:
        return self.load_from_source(create_loader(kind, locator, encoding=encoding))

    # ------------------------- Queries ------------------------- #
    def get_all_books(self) -> List[BookSnapshot]:
        return [book.snapshot() for book in self._books]

    def find_by_isbn(self, isbn: str) -> Optional[BookSnapshot]:
        book = self._find(isbn)
        return book.snapshot() if book else None

    def search_books(self, field: SearchField | str, term: str) -> List[BookSnapshot]:
        """Title/Author/Genre match on substring, ISBN on the whole value; both ignore case.

        An unrecognized field matches nothing.
        """
        search_field = SearchField.parse(field)
        if search_field is None:
            return []
        if search_field is SearchField.ISBN:
            return [b.snapshot() for b in self._books if b.matches_isbn(term)]

        needle = (term or "").casefold()
        attr = search_field.name.lower()
        return [b.snapshot() for b in self._books if needle in getattr(b, attr).casefold()]

    def top_borrowed(self, n: int) -> List[BookSnapshot]:
        if n <= 0:
            return []
        # sorted() is stable, also with reverse=True
        ranked = sorted(self._books, key=lambda b: b.borrowed_copies, reverse=True)
        return [b.snapshot() for b in ranked[:n]]

    def get_statistics(self) -> Dict[str, Any]:
        total = sum(b.total_copies for b in self._books)
        borrowed = sum(b.borrowed_copies for b in self._books)
        return {
            "total_books": len(self._books),
            "unique_authors": len({b.author.casefold() for b in self._books}),
            "total_copies": total,
            "borrowed_copies": borrowed,
            "available_copies": total - borrowed,
        }

    # ------------------------- Lending ------------------------- #
    def borrow_book(self, isbn: str) -> LendingResult:
        book = self._find(isbn)
        if book is None:
            return LendingResult.NOT_FOUND
        if book.available_copies <= 0:
            return LendingResult.NO_COPIES_AVAILABLE
        book.borrow()
        logger.info(f"Borrowed {book.isbn}: {book.borrowed_copies}/{book.total_copies} out")
        return LendingResult.SUCCESS

    def return_book(self, isbn: str) -> LendingResult:
        book = self._find(isbn)
        if book is None:
            return LendingResult.NOT_FOUND
        if book.borrowed_copies <= 0:
            return LendingResult.NOTHING_TO_RETURN
        book.return_book()
        logger.info(f"Returned {book.isbn}: {book.borrowed_copies}/{book.total_copies} out")
        return LendingResult.SUCCESS

    # ------------------------- Utilities ------------------------- #
    def _find(self, isbn: str) -> Optional[Book]:
        # First match wins when ISBNs repeat.
        for book in self._books:
            if book.matches_isbn(isbn):
                return book
        return None

    @staticmethod
    def _warn_on_duplicates(books: List[Book]) -> None:
        seen = set()
        for book in books:
            key = book.isbn.casefold()
            if key in seen:
                logger.warning(f"Duplicate ISBN {book.isbn}; lookups use the first record")
            seen.add(key)
