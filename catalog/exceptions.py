"""
Domain exceptions raised by the catalog store.
"""


class CatalogError(Exception):
    """Base class for catalog errors that map onto an HTTP status."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BookValidationError(CatalogError):
    """Raised when a create or update payload cannot become a book."""

    status_code = 400


class BookNotFoundError(CatalogError):
    """Raised when no book carries the requested identifier."""

    status_code = 404

    def __init__(self, book_id=None):
        super().__init__("Book not found")
        self.book_id = book_id
