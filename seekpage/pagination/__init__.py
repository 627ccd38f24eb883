"""Pagination module for cursor-based (keyset) pagination."""

from .order import Direction, OrderDirection, OrderColumn, OrderSpec
from .cursor import Cursor, CursorValue
from .predicate import (
    ComparisonOperator,
    Comparison,
    And,
    Or,
    Predicate,
    build_keyset_predicate
)
from .params import PaginationParams, create_link_header
from .page import Page, PaginatedResponse
from .paginator import Paginator, paginate

__all__ = [
    "Direction",
    "OrderDirection",
    "OrderColumn",
    "OrderSpec",
    "Cursor",
    "CursorValue",
    "ComparisonOperator",
    "Comparison",
    "And",
    "Or",
    "Predicate",
    "build_keyset_predicate",
    "PaginationParams",
    "create_link_header",
    "Page",
    "PaginatedResponse",
    "Paginator",
    "paginate"
]
