"""
FastAPI main application for the Bookstore Catalog API.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog
from fastapi import Body, Depends, FastAPI, Query, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.auth import Caller, require_admin
from api.config import config as api_config
from api.models import (
    BookListResponse, BookMutationResponse, ErrorResponse, HealthResponse
)
from catalog.exceptions import BookNotFoundError, CatalogError
from catalog.models import BookQueryParams
from catalog.seed import load_seed_books
from catalog.store import BookStore
from utilities.config import config
from utilities.logger import setup_logging

logger = structlog.get_logger(__name__)

# Message returned with a 500, keyed by route name
FAILURE_MESSAGES = {
    "list_books": "Failed to fetch books",
    "get_book": "Failed to fetch book",
    "list_genres": "Failed to fetch genres",
    "list_authors": "Failed to fetch authors",
    "create_book": "Failed to create book",
    "update_book": "Failed to update book",
    "delete_book": "Failed to delete book",
}


def build_store() -> BookStore:
    """Create the catalog store from the configured seed source."""
    return BookStore(
        load_seed_books(config.get_seed_file_path()),
        default_language=config.default_language,
        placeholder_image=config.placeholder_image,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.get_log_file_path(),
        debug=config.debug
    )
    logger.info("Starting Bookstore Catalog API")

    if getattr(app.state, "store", None) is None:
        app.state.store = build_store()
    logger.info("Catalog ready", books=await app.state.store.count())

    yield

    logger.info("Shutting down Bookstore Catalog API")


def get_book_store(request: Request) -> BookStore:
    """Dependency returning the store owned by the application."""
    return request.app.state.store


def parse_book_id(book_id: str) -> int:
    """Path ids that are not positive integers name no book."""
    if not (book_id.isascii() and book_id.isdigit()):
        raise BookNotFoundError(book_id)
    return int(book_id)


# Create FastAPI application
app = FastAPI(
    title=api_config.api_title,
    description="""
    REST API for the bookstore catalog.

    ## Features

    * **Browse**: List, search and filter books by author, genre, price and year
    * **Metadata**: Distinct genres and authors
    * **Administration**: Create, update and delete books

    ## Authentication

    Read endpoints are public. Create, update and delete require an admin API key:

    ```
    Authorization: Bearer your_admin_api_key
    ```
    """,
    version=api_config.api_version,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=api_config.cors_origins,
    allow_credentials=api_config.cors_allow_credentials,
    allow_methods=api_config.cors_allow_methods,
    allow_headers=api_config.cors_allow_headers,
)


def _error_content(message: str, **extra) -> Dict[str, Any]:
    return ErrorResponse(message=message, **extra).model_dump(exclude_none=True)


# Exception handlers
@app.exception_handler(CatalogError)
async def catalog_exception_handler(request: Request, exc: CatalogError):
    """Handle catalog domain errors (validation, not found)."""
    logger.info(
        "Catalog request rejected",
        path=request.url.path,
        status_code=exc.status_code,
        message=exc.message
    )
    return JSONResponse(status_code=exc.status_code, content=_error_content(exc.message))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions, including those raised by the auth gates."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(str(exc.detail)),
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle malformed query parameters and bodies."""
    logger.info("Invalid request", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_content("Invalid request parameters", errors=jsonable_encoder(exc.errors()))
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected faults with the failing operation's message."""
    route_name = getattr(request.scope.get("route"), "name", None) or getattr(
        request.scope.get("endpoint"), "__name__", None
    )
    message = FAILURE_MESSAGES.get(route_name, "Internal server error")
    logger.error("Unhandled exception", error=str(exc), path=request.url.path, message=message)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_content(message, error=str(exc))
    )


# Health check endpoint (no authentication required)
@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(store: BookStore = Depends(get_book_store)):
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=api_config.api_version,
        catalog_size=await store.count()
    )


# Books endpoints
@app.get("/books", response_model=BookListResponse, tags=["Books"])
async def list_books(
    search: Optional[str] = None,
    author: Optional[str] = None,
    genre: Optional[str] = None,
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    year: Optional[str] = None,
    limit: Optional[str] = None,
    store: BookStore = Depends(get_book_store)
):
    """
    List books matching every supplied filter, truncated to a head-limit.

    - **search**: Substring across title, author, description and genre
    - **author**: Author substring
    - **genre**: Exact genre (case-insensitive)
    - **minPrice** / **maxPrice**: Inclusive price bounds
    - **year**: Exact published year
    - **limit**: Maximum books returned (default 22)

    Blank values are ignored.
    """
    try:
        query_params = BookQueryParams(
            search=search,
            author=author,
            genre=genre,
            min_price=min_price,
            max_price=max_price,
            year=year,
            limit=config.default_limit if limit in (None, "") else limit
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))
    books, total = await store.list_books(query_params)

    return JSONResponse(
        content=BookListResponse(
            books=[book.to_wire() for book in books],
            total=total,
            showing=len(books)
        ).model_dump()
    )


@app.get("/books/meta/genres", tags=["Metadata"])
async def list_genres(store: BookStore = Depends(get_book_store)):
    """Sorted distinct genres."""
    return JSONResponse(content=await store.list_genres())


@app.get("/books/meta/authors", tags=["Metadata"])
async def list_authors(store: BookStore = Depends(get_book_store)):
    """Sorted distinct authors."""
    return JSONResponse(content=await store.list_authors())


@app.get("/books/{book_id}", tags=["Books"])
async def get_book(book_id: str, store: BookStore = Depends(get_book_store)):
    """
    Get a single book by ID.

    - **book_id**: Numeric book identifier
    """
    book = await store.get_book(parse_book_id(book_id))
    return JSONResponse(content=book.to_wire())


@app.post("/books", status_code=status.HTTP_201_CREATED, response_model=BookMutationResponse, tags=["Books"])
async def create_book(
    payload: Optional[Dict[str, Any]] = Body(None),
    caller: Caller = Depends(require_admin),
    store: BookStore = Depends(get_book_store)
):
    """
    Create a book (admin only).

    Title, author, genre and price are required; other fields take defaults.
    """
    book = await store.create_book(payload or {})
    logger.info("Book created via API", book_id=book.id, role=caller.role)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=BookMutationResponse(message="Book created successfully", book=book.to_wire()).model_dump()
    )


@app.put("/books/{book_id}", response_model=BookMutationResponse, tags=["Books"])
async def update_book(
    book_id: str,
    payload: Optional[Dict[str, Any]] = Body(None),
    caller: Caller = Depends(require_admin),
    store: BookStore = Depends(get_book_store)
):
    """
    Update a book (admin only).

    Supplied fields overwrite the stored values; the id never changes.
    """
    book = await store.update_book(parse_book_id(book_id), payload or {})
    return JSONResponse(
        content=BookMutationResponse(message="Book updated successfully", book=book.to_wire()).model_dump()
    )


@app.delete("/books/{book_id}", response_model=BookMutationResponse, tags=["Books"])
async def delete_book(
    book_id: str,
    caller: Caller = Depends(require_admin),
    store: BookStore = Depends(get_book_store)
):
    """Delete a book (admin only)."""
    book = await store.delete_book(parse_book_id(book_id))
    return JSONResponse(
        content=BookMutationResponse(message="Book deleted successfully", book=book.to_wire()).model_dump()
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=api_config.host,
        port=api_config.port,
        reload=api_config.debug,
        log_level="info"
    )
