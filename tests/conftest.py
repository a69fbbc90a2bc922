"""
Pytest configuration and shared fixtures.
"""

import pytest
from fastapi.testclient import TestClient

from api.config import config as api_config
from api.main import app, get_book_store
from catalog.models import Book
from catalog.store import BookStore

ADMIN_KEY = "bk_admin_test_key"
USER_KEY = "bk_user_test_key"


@pytest.fixture
def sample_books():
    """Three seed books, two of them sharing the Fiction genre."""
    return [
        Book(
            id=1,
            title="The Great Gatsby",
            author="F. Scott Fitzgerald",
            isbn="9780743273565",
            published_year=1925,
            genre="Fiction",
            price=10.99,
            description="A portrait of the Jazz Age.",
            pages=180,
            publisher="Scribner",
            rating=4.4,
            stock=25,
            created_at="2024-01-01T00:00:00.000Z"
        ),
        Book(
            id=2,
            title="Dune",
            author="Frank Herbert",
            published_year=1965,
            genre="Sci-Fi",
            price=18.99,
            description="Politics and ecology on the desert planet Arrakis.",
            pages=688,
            created_at="2024-01-01T00:00:00.000Z"
        ),
        Book(
            id=3,
            title="Beloved",
            author="Toni Morrison",
            published_year=1987,
            genre="Fiction",
            price=15.50,
            description="A formerly enslaved woman haunted in Ohio.",
            pages=324,
            created_at="2024-01-01T00:00:00.000Z"
        ),
    ]


@pytest.fixture
def book_store(sample_books):
    """Store seeded with the sample books."""
    return BookStore(sample_books)


@pytest.fixture
def api_keys(monkeypatch):
    """Configure one admin key and one ordinary key."""
    monkeypatch.setattr(api_config, "admin_api_keys", ADMIN_KEY)
    monkeypatch.setattr(api_config, "api_keys", USER_KEY)
    return {"admin": ADMIN_KEY, "user": USER_KEY}


@pytest.fixture
def admin_headers(api_keys):
    return {"Authorization": f"Bearer {api_keys['admin']}"}


@pytest.fixture
def user_headers(api_keys):
    return {"Authorization": f"Bearer {api_keys['user']}"}


@pytest.fixture
def client(book_store):
    """Test client whose requests hit the sample store."""
    app.dependency_overrides[get_book_store] = lambda: book_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def new_book_payload():
    return {
        "title": "The Dispossessed",
        "author": "Ursula K. Le Guin",
        "genre": "Utopian",
        "price": 13.5,
        "publishedYear": 1974,
        "pages": 387
    }
