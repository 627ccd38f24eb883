"""Exception types raised by the pagination core."""


class PaginationError(Exception):
    """Base exception for pagination failures caused by caller input."""

    code = "pagination_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidOrderError(PaginationError):
    """The order specification is empty, malformed or names an unknown column."""

    code = "invalid_order"


class InvalidCursorError(PaginationError):
    """A cursor token could not be decoded or does not fit the active order."""

    code = "invalid_cursor"


class InvalidPerPageError(PaginationError):
    """The requested page size is negative."""

    code = "invalid_per_page"
