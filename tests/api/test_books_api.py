"""
Tests for the FastAPI application.
"""

from fastapi.testclient import TestClient

from api.main import app


def catalog_size(client):
    return client.get("/health").json()["catalog_size"]


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "timestamp" in data
    assert "version" in data
    assert data["catalog_size"] == 3


class TestReadEndpoints:
    """Public read endpoints."""

    def test_list_books(self, client):
        response = client.get("/books")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["showing"] == 3
        assert data["books"][0]["publishedYear"] == 1925

    def test_list_books_with_filters(self, client):
        response = client.get("/books?genre=fiction&minPrice=11&maxPrice=20")
        assert response.status_code == 200
        data = response.json()
        assert [b["title"] for b in data["books"]] == ["Beloved"]
        assert data["total"] == 1

    def test_list_books_search_and_year(self, client):
        data = client.get("/books", params={"search": "ARRAKIS", "year": 1965}).json()
        assert [b["id"] for b in data["books"]] == [2]

    def test_list_books_limit(self, client):
        data = client.get("/books?limit=2").json()
        assert data["total"] == 3
        assert data["showing"] == 2
        assert len(data["books"]) == 2

    def test_list_books_zero_limit(self, client):
        data = client.get("/books?limit=0").json()
        assert data["books"] == []
        assert data["total"] == 3
        assert data["showing"] == 0

    def test_invalid_query_param(self, client):
        response = client.get("/books?minPrice=cheap")
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request parameters"

    def test_negative_limit(self, client):
        assert client.get("/books?limit=-1").status_code == 400

    def test_get_book(self, client):
        response = client.get("/books/2")
        assert response.status_code == 200
        assert response.json()["title"] == "Dune"

    def test_get_book_not_found(self, client):
        response = client.get("/books/999")
        assert response.status_code == 404
        assert response.json() == {"message": "Book not found"}

    def test_get_book_non_numeric_id(self, client):
        assert client.get("/books/abc").status_code == 404

    def test_get_book_non_ascii_digit_id(self, client):
        response = client.get("/books/%C2%B2")
        assert response.status_code == 404
        assert response.json() == {"message": "Book not found"}

    def test_blank_filters_ignored(self, client):
        response = client.get("/books?search=&author=&genre=&minPrice=&maxPrice=&year=&limit=")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["showing"] == 3

    def test_blank_filter_alongside_real_one(self, client):
        data = client.get("/books?genre=Sci-Fi&minPrice=&year=").json()
        assert [b["title"] for b in data["books"]] == ["Dune"]

    def test_genres(self, client):
        response = client.get("/books/meta/genres")
        assert response.status_code == 200
        assert response.json() == ["Fiction", "Sci-Fi"]

    def test_authors(self, client):
        response = client.get("/books/meta/authors")
        assert response.status_code == 200
        assert response.json() == ["F. Scott Fitzgerald", "Frank Herbert", "Toni Morrison"]


class TestAuthGates:
    """Authentication and admin checks on mutating endpoints."""

    def test_create_requires_auth(self, client, api_keys, new_book_payload):
        response = client.post("/books", json=new_book_payload)
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert "message" in response.json()

    def test_invalid_key(self, client, api_keys):
        response = client.delete("/books/1", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid API key"

    def test_non_admin_forbidden(self, client, user_headers):
        response = client.put("/books/1", json={"price": 1}, headers=user_headers)
        assert response.status_code == 403
        assert response.json()["message"] == "Admin access required"
        assert client.get("/books/1").json()["price"] == 10.99

    def test_no_keys_configured(self, client, monkeypatch):
        from api.config import config as api_config
        monkeypatch.setattr(api_config, "admin_api_keys", "")
        monkeypatch.setattr(api_config, "api_keys", "")
        response = client.delete("/books/1", headers={"Authorization": "Bearer anything"})
        assert response.status_code == 401


class TestMutations:
    """Admin create, update and delete."""

    def test_create_book(self, client, admin_headers, new_book_payload):
        response = client.post("/books", json=new_book_payload, headers=admin_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Book created successfully"
        assert data["book"]["id"] == 4
        assert data["book"]["language"] == "English"
        assert data["book"]["rating"] == 0
        assert catalog_size(client) == 4

    def test_created_genre_in_metadata(self, client, admin_headers, new_book_payload):
        client.post("/books", json=new_book_payload, headers=admin_headers)
        assert client.get("/books/meta/genres").json() == ["Fiction", "Sci-Fi", "Utopian"]

    def test_create_with_non_finite_numbers(self, client, admin_headers):
        response = client.post(
            "/books",
            json={"title": "X", "author": "Y", "genre": "Z", "price": 1, "pages": "Infinity", "stock": "1e999"},
            headers=admin_headers
        )
        assert response.status_code == 201
        assert response.json()["book"]["pages"] == 0
        assert response.json()["book"]["stock"] == 1

    def test_create_with_infinite_price(self, client, admin_headers):
        response = client.post(
            "/books",
            json={"title": "X", "author": "Y", "genre": "Z", "price": "Infinity"},
            headers=admin_headers
        )
        assert response.status_code == 400
        assert catalog_size(client) == 3

    def test_delete_non_ascii_digit_id(self, client, admin_headers):
        response = client.delete("/books/%C2%B2", headers=admin_headers)
        assert response.status_code == 404
        assert catalog_size(client) == 3

    def test_create_missing_fields(self, client, admin_headers):
        response = client.post("/books", json={"title": "X"}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Title, author, genre, and price are required"
        assert catalog_size(client) == 3

    def test_create_without_body(self, client, admin_headers):
        response = client.post("/books", headers=admin_headers)
        assert response.status_code == 400
        assert catalog_size(client) == 3

    def test_update_book(self, client, admin_headers):
        response = client.put("/books/1", json={"id": 77, "price": 8.5}, headers=admin_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Book updated successfully"
        assert data["book"]["id"] == 1
        assert data["book"]["price"] == 8.5
        assert data["book"]["title"] == "The Great Gatsby"
        assert client.get("/books/77").status_code == 404

    def test_update_not_found(self, client, admin_headers):
        response = client.put("/books/999", json={"title": "X"}, headers=admin_headers)
        assert response.status_code == 404
        assert catalog_size(client) == 3

    def test_update_invalid_value(self, client, admin_headers):
        response = client.put("/books/1", json={"price": -5}, headers=admin_headers)
        assert response.status_code == 400
        assert client.get("/books/1").json()["price"] == 10.99

    def test_update_infinite_price(self, client, admin_headers):
        response = client.put("/books/1", json={"price": "inf"}, headers=admin_headers)
        assert response.status_code == 400
        assert client.get("/books/1").json()["price"] == 10.99

    def test_delete_book(self, client, admin_headers):
        response = client.delete("/books/2", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Book deleted successfully"
        assert data["book"]["title"] == "Dune"
        assert client.get("/books/2").status_code == 404
        assert catalog_size(client) == 2

    def test_delete_not_found(self, client, admin_headers):
        response = client.delete("/books/999", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Book not found"
        assert catalog_size(client) == 3

    def test_id_not_reused_after_delete(self, client, admin_headers, new_book_payload):
        client.delete("/books/3", headers=admin_headers)
        response = client.post("/books", json=new_book_payload, headers=admin_headers)
        assert response.json()["book"]["id"] == 4


class TestServerFaults:
    """Unexpected exceptions are mapped to 500 with the operation's message."""

    def test_genres_fault(self, book_store, monkeypatch):
        async def broken():
            raise RuntimeError("genre index corrupted")

        monkeypatch.setattr(book_store, "list_genres", broken)
        from api.main import get_book_store
        app.dependency_overrides[get_book_store] = lambda: book_store
        try:
            response = TestClient(app, raise_server_exceptions=False).get("/books/meta/genres")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {
            "message": "Failed to fetch genres",
            "error": "genre index corrupted"
        }

    def test_create_fault(self, client, admin_headers, book_store, monkeypatch):
        async def broken(payload):
            raise RuntimeError("disk full")

        monkeypatch.setattr(book_store, "create_book", broken)
        faulty_client = TestClient(app, raise_server_exceptions=False)
        response = faulty_client.post(
            "/books",
            json={"title": "X", "author": "Y", "genre": "Z", "price": 1},
            headers=admin_headers
        )

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to create book"
        assert response.json()["error"] == "disk full"
