"""Error types and Problem Details rendering for seekpage."""

from .exceptions import (
    PaginationError,
    InvalidOrderError,
    InvalidCursorError,
    InvalidPerPageError
)
from .problem_details import (
    ProblemDetail,
    ProblemDetailException,
    BadRequestError,
    create_problem_response
)
from .handlers import register_exception_handlers

__all__ = [
    "PaginationError",
    "InvalidOrderError",
    "InvalidCursorError",
    "InvalidPerPageError",
    "ProblemDetail",
    "ProblemDetailException",
    "BadRequestError",
    "create_problem_response",
    "register_exception_handlers"
]
