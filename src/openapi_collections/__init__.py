"""Import OpenAPI documents into endpoint collections and keep them in sync."""

__version__ = "0.1.0"
