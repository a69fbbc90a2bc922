"""
API response models for the FastAPI application.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class BookListResponse(BaseModel):
    """Response model for a filtered, head-limited book list."""
    books: List[Dict[str, Any]] = Field(..., description="Books up to the limit")
    total: int = Field(..., description="Number of matching books before the limit")
    showing: int = Field(..., description="Number of books returned")


class BookMutationResponse(BaseModel):
    """Response model for create, update and delete."""
    message: str = Field(..., description="Outcome message")
    book: Dict[str, Any] = Field(..., description="The affected book")


class ErrorResponse(BaseModel):
    """Error response model."""
    message: str = Field(..., description="Error message")
    error: Optional[str] = Field(None, description="Underlying error text on server faults")
    errors: Optional[List[Dict[str, Any]]] = Field(None, description="Field-level validation errors")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    catalog_size: int = Field(..., description="Number of books in the catalog")
