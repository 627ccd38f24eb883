"""Page of results returned by the paginator."""

from typing import Any, Dict, Generic, Iterator, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, Field

from .params import create_link_header

RecordT = TypeVar("RecordT")
ItemT = TypeVar("ItemT")


class PaginatedResponse(BaseModel, Generic[ItemT]):
    """Response model for a page of keyset-paginated data."""

    items: List[ItemT] = Field(description="Records on this page, in sort order")
    first_cursor: Optional[str] = Field(default=None, description="Cursor of the first record")
    last_cursor: Optional[str] = Field(default=None, description="Cursor of the last record")
    has_next_page: bool = Field(description="Whether records exist after this page")
    has_previous_page: bool = Field(description="Whether records exist before this page")


class Page(Generic[RecordT]):
    """Immutable snapshot of one page.

    ``first_cursor`` and ``last_cursor`` always refer to the first and last of
    ``records`` in the caller's sort order, and are ``None`` exactly when the
    page is empty.
    """

    __slots__ = ("_records", "_has_next_page", "_has_previous_page", "_first_cursor", "_last_cursor")

    def __init__(
        self,
        records: Sequence[RecordT],
        has_next_page: bool,
        has_previous_page: bool,
        first_cursor: Optional[str],
        last_cursor: Optional[str]
    ):
        self._records = tuple(records)
        self._has_next_page = has_next_page
        self._has_previous_page = has_previous_page
        self._first_cursor = first_cursor
        self._last_cursor = last_cursor

    @property
    def records(self) -> List[RecordT]:
        return list(self._records)

    @property
    def has_next_page(self) -> bool:
        return self._has_next_page

    @property
    def has_previous_page(self) -> bool:
        return self._has_previous_page

    @property
    def first_cursor(self) -> Optional[str]:
        return self._first_cursor

    @property
    def last_cursor(self) -> Optional[str]:
        return self._last_cursor

    @property
    def size(self) -> int:
        return len(self._records)

    @property
    def is_empty(self) -> bool:
        return not self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[RecordT]:
        return iter(self._records)

    def __repr__(self) -> str:
        return (
            f"Page(size={self.size}, has_next_page={self._has_next_page}, "
            f"has_previous_page={self._has_previous_page})"
        )

    def to_response(self) -> PaginatedResponse:
        """Convert to the serialisable response model."""
        return PaginatedResponse(
            items=list(self._records),
            first_cursor=self._first_cursor,
            last_cursor=self._last_cursor,
            has_next_page=self._has_next_page,
            has_previous_page=self._has_previous_page
        )

    def link_header(self, base_url: str, params: Dict[str, Any]) -> Optional[str]:
        """RFC 8288 ``Link`` header pointing at the neighbouring pages."""
        return create_link_header(
            base_url,
            params,
            next_cursor=self._last_cursor if self._has_next_page else None,
            prev_cursor=self._first_cursor if self._has_previous_page else None
        )
