from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BookSnapshot(BaseModel):
    """Read-only view of a book's copy accounting, safe to hand to callers."""

    model_config = ConfigDict(frozen=True)

    isbn: str
    title: str
    author: str
    genre: str
    available: int
    total: int
    borrowed: int


class Book:
    """Represents a single title in the catalog and tracks its copies."""

    def __init__(self, isbn: str, title: str, author: str, genre: str, total_copies: int) -> None:
        if total_copies < 0:
            raise ValueError(f"Total copies cannot be negative: {total_copies}")
        self.isbn = isbn.strip()
        self.title = title.strip()
        self.author = author.strip()
        self.genre = genre.strip()
        self._total_copies = total_copies
        self._borrowed_copies = 0

    @property
    def total_copies(self) -> int:
        return self._total_copies

    @property
    def borrowed_copies(self) -> int:
        return self._borrowed_copies

    @property
    def available_copies(self) -> int:
        return self._total_copies - self._borrowed_copies

    def borrow(self) -> None:
        # No-op when every copy is out; Catalog reports the failure.
        if self._borrowed_copies < self._total_copies:
            self._borrowed_copies += 1

    def return_book(self) -> None:
        if self._borrowed_copies > 0:
            self._borrowed_copies -= 1

    def matches_isbn(self, isbn: str) -> bool:
        return self.isbn.casefold() == (isbn or "").casefold()

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} (ISBN: {self.isbn})"

    def __repr__(self) -> str:  # pragma: no cover
        return (f"Book(isbn={self.isbn!r}, title={self.title!r}, "
                f"borrowed={self._borrowed_copies}/{self._total_copies})")

    def to_dict(self) -> dict:
        return {
            "isbn": self.isbn,
            "title": self.title,
            "author": self.author,
            "genre": self.genre,
            "available": self.available_copies,
            "total": self._total_copies,
            "borrowed": self._borrowed_copies,
        }

    def snapshot(self) -> BookSnapshot:
        return BookSnapshot(**self.to_dict())
