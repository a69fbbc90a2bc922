"""
In-memory book store.
Owns the catalog collection and serialises every read and write behind a lock.
"""

import asyncio
from typing import Any, Dict, Iterable, List, Optional, Tuple

import structlog

from catalog.exceptions import BookNotFoundError, BookValidationError
from catalog.models import (
    Book, BookQueryParams, DEFAULT_LANGUAGE, PLACEHOLDER_IMAGE,
    build_book, merge_book
)
from utilities.logger import CatalogLogger

logger = structlog.get_logger(__name__)


class BookStore:
    """
    Process-local book collection.

    Identifiers come from a counter that only moves forward, so an id freed by
    a delete is never handed out again.
    """

    def __init__(
        self,
        books: Optional[Iterable[Book]] = None,
        default_language: str = DEFAULT_LANGUAGE,
        placeholder_image: str = PLACEHOLDER_IMAGE,
    ):
        """
        Initialize the store.

        Args:
            books: Initial collection (seed data)
            default_language: Language given to created books that name none
            placeholder_image: Image given to created books that name none
        """
        self.default_language = default_language
        self.placeholder_image = placeholder_image
        self.audit = CatalogLogger("catalog.store")
        self._lock = asyncio.Lock()
        self._books: List[Book] = []
        self._next_id = 1
        self._install(books or [])

    def _install(self, books: Iterable[Book]) -> None:
        books = list(books)
        seen = set()
        for book in books:
            if book.id in seen:
                raise ValueError(f"Duplicate book id in seed data: {book.id}")
            seen.add(book.id)
        self._books = books
        self._next_id = max(seen, default=0) + 1
        self.audit.log_seed_loaded(len(self._books), self._next_id)

    def _index_of(self, book_id: int) -> int:
        for index, book in enumerate(self._books):
            if book.id == book_id:
                return index
        return -1

    async def reset(self, books: Iterable[Book]) -> None:
        """Replace the whole collection and restart id assignment after it."""
        async with self._lock:
            self._install(books)

    async def count(self) -> int:
        async with self._lock:
            return len(self._books)

    async def list_books(self, query: BookQueryParams) -> Tuple[List[Book], int]:
        """
        Filter the collection and apply the head-limit.

        Args:
            query: Filters and limit

        Returns:
            Tuple of (books up to the limit, total matches before truncation)
        """
        async with self._lock:
            matched = [book for book in self._books if query.matches(book)]
        logger.debug(
            "Books filtered",
            total=len(matched),
            limit=query.limit,
            filters=query.model_dump(exclude_none=True, exclude={"limit"})
        )
        return matched[:query.limit], len(matched)

    async def get_book(self, book_id: int) -> Book:
        """
        Get a single book by id.

        Raises:
            BookNotFoundError: If no book has this id
        """
        async with self._lock:
            index = self._index_of(book_id)
            if index == -1:
                raise BookNotFoundError(book_id)
            return self._books[index]

    async def list_genres(self) -> List[str]:
        """Sorted distinct genres of the current collection."""
        async with self._lock:
            return sorted({book.genre for book in self._books})

    async def list_authors(self) -> List[str]:
        """Sorted distinct authors of the current collection."""
        async with self._lock:
            return sorted({book.author for book in self._books})

    async def create_book(self, payload: Dict[str, Any]) -> Book:
        """
        Create a book from a request payload and append it.

        Args:
            payload: Request body; title, author, genre and price are required

        Returns:
            The stored book

        Raises:
            BookValidationError: If the payload is incomplete or malformed
        """
        async with self._lock:
            try:
                book = build_book(
                    payload,
                    self._next_id,
                    default_language=self.default_language,
                    placeholder_image=self.placeholder_image,
                )
            except BookValidationError as e:
                self.audit.log_rejected("create", e.message)
                raise
            self._books.append(book)
            self._next_id += 1

        self.audit.log_book_created(book.id, book.title)
        return book

    async def update_book(self, book_id: int, payload: Dict[str, Any]) -> Book:
        """
        Shallow-merge a payload over an existing book.

        Raises:
            BookNotFoundError: If no book has this id
            BookValidationError: If the merged record is invalid; the stored
                book is left as it was
        """
        async with self._lock:
            index = self._index_of(book_id)
            if index == -1:
                self.audit.log_rejected("update", "not found", book_id=book_id)
                raise BookNotFoundError(book_id)
            try:
                updated = merge_book(self._books[index], payload)
            except BookValidationError as e:
                self.audit.log_rejected("update", e.message, book_id=book_id)
                raise
            self._books[index] = updated

        self.audit.log_book_updated(book_id, list(payload.keys()))
        return updated

    async def delete_book(self, book_id: int) -> Book:
        """
        Remove a book from the collection.

        Returns:
            The removed book

        Raises:
            BookNotFoundError: If no book has this id
        """
        async with self._lock:
            index = self._index_of(book_id)
            if index == -1:
                self.audit.log_rejected("delete", "not found", book_id=book_id)
                raise BookNotFoundError(book_id)
            deleted = self._books.pop(index)

        self.audit.log_book_deleted(deleted.id, deleted.title)
        return deleted
