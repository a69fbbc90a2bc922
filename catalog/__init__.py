"""
Catalog package for the bookstore API.

This package contains:
- Book record model and payload coercion
- Domain exceptions
- Seed data source
- In-memory book store
"""

__version__ = "1.0.0"
