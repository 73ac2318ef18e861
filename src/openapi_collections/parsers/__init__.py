"""Parsers for OpenAPI documents."""

from .examples import build_example, schema_example
from .openapi import OpenApiParser
from .refs import resolve_ref

__all__ = ["OpenApiParser", "build_example", "resolve_ref", "schema_example"]
