"""Cursor-based (keyset) pagination over ordered relational data."""

from .errors import (
    PaginationError,
    InvalidOrderError,
    InvalidCursorError,
    InvalidPerPageError
)
from .pagination import (
    Direction,
    OrderDirection,
    OrderColumn,
    OrderSpec,
    Cursor,
    Page,
    PaginatedResponse,
    PaginationParams,
    Paginator,
    build_keyset_predicate,
    paginate
)
from .relation import Relation, InMemoryRelation, PostgresRelation

__version__ = "1.0.0"

__all__ = [
    "PaginationError",
    "InvalidOrderError",
    "InvalidCursorError",
    "InvalidPerPageError",
    "Direction",
    "OrderDirection",
    "OrderColumn",
    "OrderSpec",
    "Cursor",
    "Page",
    "PaginatedResponse",
    "PaginationParams",
    "Paginator",
    "build_keyset_predicate",
    "paginate",
    "Relation",
    "InMemoryRelation",
    "PostgresRelation"
]
