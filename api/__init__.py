"""
FastAPI RESTful API for the Bookstore Catalog.

This module provides a REST API for:
- Book catalog browsing, search and filtering
- Genre and author metadata
- Admin-only book creation, update and deletion
"""
