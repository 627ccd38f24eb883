"""Keyset (seek method) paginator."""

import logging
from typing import TYPE_CHECKING, Any, Generic, Optional, TypeVar

from ..errors.exceptions import InvalidOrderError, InvalidPerPageError
from .cursor import Cursor
from .order import Direction, OrderSpec
from .page import Page
from .predicate import build_keyset_predicate

if TYPE_CHECKING:
    from ..relation.protocol import Relation

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")

DEFAULT_PER_PAGE = 20


class Paginator(Generic[RecordT]):
    """Fetches pages of a relation by comparing sort keys against a cursor.

    The relation, order and page size are fixed at construction, so one
    instance can serve concurrent ``paginate`` calls.

    Args:
        relation: Base relation; it is re-ordered by ``order``
        order: Anything ``OrderSpec.from_value`` accepts
        per_page: Maximum number of records per page

    Raises:
        InvalidOrderError: If the order is empty or names an unknown column
        InvalidPerPageError: If ``per_page`` is negative
    """

    def __init__(self, relation: "Relation[RecordT]", order: Any, per_page: int = DEFAULT_PER_PAGE):
        self._relation = relation
        self._order = OrderSpec.from_value(order)
        self._per_page = per_page

        self._validate_order()
        if per_page < 0:
            raise InvalidPerPageError(f"per_page must be zero or greater, got {per_page}")

        # Fetches and probes all start from the validated order
        self._ordered = relation.order_by(self._order)

    @property
    def relation(self) -> "Relation[RecordT]":
        return self._relation

    @property
    def order(self) -> OrderSpec:
        return self._order

    @property
    def per_page(self) -> int:
        return self._per_page

    async def paginate(
        self,
        cursor: Optional[str] = None,
        direction: Direction = Direction.FORWARD
    ) -> Page[RecordT]:
        """Fetch the page beyond ``cursor`` in ``direction``.

        Without a cursor, forward returns the first page and backward the
        last. Records always come back in the relation's own order.

        Raises:
            InvalidCursorError: If the cursor cannot be decoded or lacks an order column
        """
        direction = Direction(direction)
        relation = self._ordered

        # Backward walks the reversed order outward from the cursor
        if direction is Direction.BACKWARD:
            relation = relation.reverse_order()

        if cursor is not None:
            decoded = Cursor.decode(cursor).require(self._order.column_names)
            relation = relation.filter(build_keyset_predicate(self._order, decoded, direction))

        # One extra row tells us whether another page exists
        records = list(await relation.limit(self._per_page + 1).to_list())
        has_more = len(records) > self._per_page
        records = records[:self._per_page]

        if direction is Direction.BACKWARD:
            records.reverse()

        logger.debug(
            f"Fetched {len(records)} records {direction.value} "
            f"(cursor={'yes' if cursor else 'no'}, has_more={has_more})"
        )

        if not records:
            return Page(
                records=[],
                has_next_page=False,
                has_previous_page=False,
                first_cursor=None,
                last_cursor=None
            )

        # The cursor's own row may have been deleted since it was issued, so
        # the opposite side is checked with a query rather than inferred.
        if direction is Direction.FORWARD:
            has_next_page = has_more
            has_previous_page = await self._page_exists(records[0], Direction.BACKWARD)
        else:
            has_previous_page = has_more
            has_next_page = await self._page_exists(records[-1], Direction.FORWARD)

        return Page(
            records=records,
            has_next_page=has_next_page,
            has_previous_page=has_previous_page,
            first_cursor=self.cursor_for(records[0]),
            last_cursor=self.cursor_for(records[-1])
        )

    def cursor_for(self, record: RecordT) -> str:
        """Encode the cursor token pointing at ``record``."""
        return Cursor.from_record(record, self._order.column_names).encode()

    async def _page_exists(self, record: RecordT, direction: Direction) -> bool:
        relation = self._ordered
        if direction is Direction.BACKWARD:
            relation = relation.reverse_order()

        boundary = Cursor.from_record(record, self._order.column_names)
        relation = relation.filter(build_keyset_predicate(self._order, boundary, direction))
        exists = await relation.limit(1).exists()

        logger.debug(f"Existence probe {direction.value}: {exists}")
        return exists

    def _validate_order(self) -> None:
        if self._order.is_empty():
            raise InvalidOrderError("Order must be specified for cursor-based pagination")

        available = self._relation.column_names()
        for column in self._order.column_names:
            if column not in available:
                raise InvalidOrderError(f"Column '{column}' does not exist on the relation")

        # An unordered relation is the caller's responsibility; a conflicting one is a bug
        declared = self._relation.current_order()
        if not declared.is_empty() and declared != self._order:
            raise InvalidOrderError(
                f"Relation is ordered by '{declared.to_sort_string()}' "
                f"but pagination order is '{self._order.to_sort_string()}'"
            )


async def paginate(
    relation: "Relation[RecordT]",
    *,
    per_page: int = DEFAULT_PER_PAGE,
    direction: Direction = Direction.FORWARD,
    cursor: Optional[str] = None
) -> Page[RecordT]:
    """Paginate ``relation`` using the sort order it already carries."""
    paginator = Paginator(relation, order=relation.current_order(), per_page=per_page)
    return await paginator.paginate(cursor=cursor, direction=direction)
