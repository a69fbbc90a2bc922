"""
Pydantic models for book records held in the catalog.
Implements the Book schema plus the coercion rules applied to create payloads.
"""

import math
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from catalog.exceptions import BookValidationError

DEFAULT_LANGUAGE = "English"
PLACEHOLDER_IMAGE = "https://images.pexels.com/photos/159711/books-bookstore-book-reading-159711.jpeg"
REQUIRED_CREATE_FIELDS = ("title", "author", "genre", "price")
LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")

# snake_case attribute -> wire name, for the fields whose names differ
WIRE_ALIASES = {
    "published_year": "publishedYear",
    "created_at": "createdAt",
}


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 text with a trailing Z."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def is_present(value: Any) -> bool:
    """A payload value counts as present unless missing, null or an empty string."""
    if value is None:
        return False
    if isinstance(value, str) and value == "":
        return False
    return True


def coerce_int(value: Any, default: int) -> int:
    """
    Coerce a payload value to an integer.

    Text is read up to the first non-digit, so "12abc" and "12.7" give 12.

    Args:
        value: Raw payload value (int, float or numeric text)
        default: Value used when the input is absent, not numeric or not finite

    Returns:
        Parsed integer, or default
    """
    if not is_present(value) or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    match = LEADING_INT.match(str(value))
    if not match:
        return default
    return int(match.group(1))


def coerce_float(value: Any, default: Optional[float] = None) -> Optional[float]:
    """Coerce a payload value to a finite float, returning default otherwise."""
    if not is_present(value) or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


class Book(BaseModel):
    """
    Book record as stored in the catalog and returned on the wire.

    Attribute names are snake_case; serialisation uses the camelCase wire
    names. Fields outside the schema, supplied through updates, are kept.
    """
    id: int = Field(..., ge=1, description="Sequential book identifier")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    isbn: str = Field(default="", description="ISBN")
    published_year: int = Field(..., alias="publishedYear", description="Year of publication")
    genre: str = Field(..., description="Book genre")
    price: float = Field(..., ge=0, allow_inf_nan=False, description="Price")
    description: str = Field(default="", description="Book description")
    pages: int = Field(default=0, ge=0, description="Number of pages")
    publisher: str = Field(default="", description="Publisher")
    language: str = Field(default=DEFAULT_LANGUAGE, description="Language")
    rating: float = Field(default=0, ge=0, allow_inf_nan=False, description="Average rating")
    stock: int = Field(default=0, ge=0, description="Copies in stock")
    image: str = Field(default=PLACEHOLDER_IMAGE, description="Cover image URL")
    created_at: str = Field(default_factory=utc_timestamp, alias="createdAt", description="Creation timestamp")

    model_config = {
        "populate_by_name": True,
        "extra": "allow",
        "json_schema_extra": {
            "example": {
                "id": 1,
                "title": "The Left Hand of Darkness",
                "author": "Ursula K. Le Guin",
                "isbn": "9780441478125",
                "publishedYear": 1969,
                "genre": "Sci-Fi",
                "price": 14.99,
                "description": "A human envoy on a world whose people have no fixed sex.",
                "pages": 304,
                "publisher": "Ace Books",
                "language": "English",
                "rating": 4.5,
                "stock": 12,
                "image": PLACEHOLDER_IMAGE,
                "createdAt": "2024-01-15T10:30:00.000Z"
            }
        }
    }

    @field_validator("title", "author", "genre")
    @classmethod
    def validate_not_blank(cls, v):
        """Ensure the identifying text fields are not empty."""
        if not v:
            raise ValueError("must not be empty")
        return v

    def to_wire(self) -> Dict[str, Any]:
        """Serialise to a JSON-ready dict using wire names."""
        return self.model_dump(mode="json", by_alias=True)

    def matches_search(self, term: str) -> bool:
        """Case-insensitive substring match across title, author, description and genre."""
        term = term.lower()
        return any(
            term in (value or "").lower()
            for value in (self.title, self.author, self.description, self.genre)
        )


def to_wire_keys(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Rename snake_case attribute keys in a payload to their wire names."""
    return {WIRE_ALIASES.get(key, key): value for key, value in payload.items()}


def build_book(
    payload: Dict[str, Any],
    book_id: int,
    default_language: str = DEFAULT_LANGUAGE,
    placeholder_image: str = PLACEHOLDER_IMAGE,
) -> Book:
    """
    Build a new Book from a create payload.

    Args:
        payload: Request body
        book_id: Identifier assigned by the store
        default_language: Language used when the payload has none
        placeholder_image: Image used when the payload has none

    Returns:
        The coerced Book

    Raises:
        BookValidationError: If a required field is missing or price is not a
            non-negative number
    """
    payload = to_wire_keys(payload)
    if not all(is_present(payload.get(field)) for field in REQUIRED_CREATE_FIELDS):
        raise BookValidationError("Title, author, genre, and price are required")

    price = coerce_float(payload.get("price"))
    if price is None or price < 0:
        raise BookValidationError("Price must be a non-negative number")

    try:
        return Book(
            id=book_id,
            title=str(payload["title"]),
            author=str(payload["author"]),
            isbn=str(payload.get("isbn") or ""),
            published_year=coerce_int(payload.get("publishedYear"), datetime.now(timezone.utc).year),
            genre=str(payload["genre"]),
            price=price,
            description=str(payload.get("description") or ""),
            pages=coerce_int(payload.get("pages"), 0),
            publisher=str(payload.get("publisher") or ""),
            language=str(payload.get("language") or default_language),
            rating=coerce_float(payload.get("rating"), 0),
            stock=coerce_int(payload.get("stock"), 0),
            image=str(payload.get("image") or placeholder_image),
            created_at=utc_timestamp(),
        )
    except ValidationError as e:
        raise BookValidationError(f"Invalid book data: {_summarise(e)}")


def merge_book(existing: Book, payload: Dict[str, Any]) -> Book:
    """
    Shallow-merge an update payload over an existing book.

    Every key in the payload overwrites the stored value; omitted keys are
    preserved. The identifier always comes from the existing record.

    Raises:
        BookValidationError: If the merged record is not a valid Book
    """
    merged = existing.to_wire()
    merged.update(to_wire_keys(payload))
    merged["id"] = existing.id
    try:
        return Book.model_validate(merged)
    except ValidationError as e:
        raise BookValidationError(f"Invalid book data: {_summarise(e)}")


def _summarise(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        parts.append(f"{location}: {item.get('msg')}")
    return "; ".join(parts)


class BookQueryParams(BaseModel):
    """Filters for book listing. All supplied filters must hold for a book to match."""
    search: Optional[str] = Field(None, description="Substring across title, author, description and genre")
    author: Optional[str] = Field(None, description="Author substring")
    genre: Optional[str] = Field(None, description="Exact genre, case-insensitive")
    min_price: Optional[float] = Field(None, description="Inclusive lower price bound")
    max_price: Optional[float] = Field(None, description="Inclusive upper price bound")
    year: Optional[int] = Field(None, description="Exact published year")
    limit: int = Field(22, ge=0, description="Maximum number of books returned")

    @field_validator("search", "author", "genre", "min_price", "max_price", "year", mode="before")
    @classmethod
    def blank_as_missing(cls, v):
        """Empty query values mean the filter was not supplied."""
        if v == "":
            return None
        return v

    def matches(self, book: Book) -> bool:
        """Check a book against every supplied filter."""
        if self.search and not book.matches_search(self.search):
            return False
        if self.author and self.author.lower() not in book.author.lower():
            return False
        if self.genre and book.genre.lower() != self.genre.lower():
            return False
        if self.min_price is not None and book.price < self.min_price:
            return False
        if self.max_price is not None and book.price > self.max_price:
            return False
        if self.year is not None and book.published_year != self.year:
            return False
        return True
