"""
Seed data source for the in-memory catalog.
Loads the initial collection from a JSON file, or falls back to the built-in list.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import structlog

from catalog.models import Book

logger = structlog.get_logger(__name__)


SEED_BOOKS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "title": "The Great Gatsby",
        "author": "F. Scott Fitzgerald",
        "isbn": "9780743273565",
        "publishedYear": 1925,
        "genre": "Fiction",
        "price": 10.99,
        "description": "A portrait of the Jazz Age told through the eyes of Nick Carraway.",
        "pages": 180,
        "publisher": "Scribner",
        "language": "English",
        "rating": 4.4,
        "stock": 25,
        "createdAt": "2024-01-01T00:00:00.000Z"
    },
    {
        "id": 2,
        "title": "To Kill a Mockingbird",
        "author": "Harper Lee",
        "isbn": "9780061120084",
        "publishedYear": 1960,
        "genre": "Fiction",
        "price": 12.49,
        "description": "A lawyer defends a Black man falsely accused in a small Alabama town.",
        "pages": 336,
        "publisher": "Harper Perennial",
        "language": "English",
        "rating": 4.8,
        "stock": 30,
        "createdAt": "2024-01-01T00:00:00.000Z"
    },
    {
        "id": 3,
        "title": "Dune",
        "author": "Frank Herbert",
        "isbn": "9780441172719",
        "publishedYear": 1965,
        "genre": "Sci-Fi",
        "price": 18.99,
        "description": "Politics, religion and ecology on the desert planet Arrakis.",
        "pages": 688,
        "publisher": "Ace Books",
        "language": "English",
        "rating": 4.7,
        "stock": 18,
        "createdAt": "2024-01-01T00:00:00.000Z"
    },
    {
        "id": 4,
        "title": "Foundation",
        "author": "Isaac Asimov",
        "isbn": "9780553293357",
        "publishedYear": 1951,
        "genre": "Sci-Fi",
        "price": 8.99,
        "description": "A mathematician plans to shorten the dark age after a galactic empire falls.",
        "pages": 255,
        "publisher": "Bantam Spectra",
        "language": "English",
        "rating": 4.3,
        "stock": 12,
        "createdAt": "2024-01-01T00:00:00.000Z"
    },
    {
        "id": 5,
        "title": "Pride and Prejudice",
        "author": "Jane Austen",
        "isbn": "9780141439518",
        "publishedYear": 1813,
        "genre": "Romance",
        "price": 7.99,
        "description": "Elizabeth Bennet and Mr. Darcy misjudge each other in Regency England.",
        "pages": 480,
        "publisher": "Penguin Classics",
        "language": "English",
        "rating": 4.6,
        "stock": 40,
        "createdAt": "2024-01-01T00:00:00.000Z"
    },
    {
        "id": 6,
        "title": "The Hobbit",
        "author": "J.R.R. Tolkien",
        "isbn": "9780547928227",
        "publishedYear": 1937,
        "genre": "Fantasy",
        "price": 14.99,
        "description": "Bilbo Baggins is swept into a quest to reclaim a dwarven treasure.",
        "pages": 310,
        "publisher": "Houghton Mifflin",
        "language": "English",
        "rating": 4.7,
        "stock": 22,
        "createdAt": "2024-01-01T00:00:00.000Z"
    },
    {
        "id": 7,
        "title": "Sapiens",
        "author": "Yuval Noah Harari",
        "isbn": "9780062316097",
        "publishedYear": 2011,
        "genre": "History",
        "price": 22.99,
        "description": "A brief history of humankind from the Stone Age to the present.",
        "pages": 464,
        "publisher": "Harper",
        "language": "English",
        "rating": 4.5,
        "stock": 15,
        "createdAt": "2024-01-01T00:00:00.000Z"
    },
    {
        "id": 8,
        "title": "The Murder of Roger Ackroyd",
        "author": "Agatha Christie",
        "isbn": "9780062073563",
        "publishedYear": 1926,
        "genre": "Mystery",
        "price": 9.99,
        "description": "Hercule Poirot investigates a death in the village of King's Abbot.",
        "pages": 312,
        "publisher": "William Morrow",
        "language": "English",
        "rating": 4.2,
        "stock": 9,
        "createdAt": "2024-01-01T00:00:00.000Z"
    },
]


def parse_seed_books(records: List[Dict[str, Any]]) -> List[Book]:
    """
    Turn raw seed records into Books.

    Records without an ``id`` are numbered after the highest id seen so far.

    Args:
        records: List of book dicts using wire names

    Returns:
        List of Book objects in input order
    """
    books = []
    next_id = 1
    for record in records:
        record = dict(record)
        if "id" not in record:
            record["id"] = next_id
        book = Book.model_validate(record)
        next_id = max(next_id, book.id + 1)
        books.append(book)
    return books


def load_seed_books(path: Optional[Union[str, Path]] = None) -> List[Book]:
    """
    Load the initial catalog.

    Args:
        path: Optional JSON file holding a list of book objects

    Returns:
        List of seed books
    """
    if not path:
        logger.info("Using built-in seed books", count=len(SEED_BOOKS))
        return parse_seed_books(SEED_BOOKS)

    seed_path = Path(path)
    with seed_path.open("r", encoding="utf-8") as f:
        records = json.load(f)

    if not isinstance(records, list):
        raise ValueError(f"Seed file {seed_path} must contain a JSON list of books")

    books = parse_seed_books(records)
    logger.info("Loaded seed books from file", path=str(seed_path), count=len(books))
    return books
