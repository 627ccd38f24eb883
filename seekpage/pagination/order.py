"""Sort order types used by keyset pagination."""

from collections.abc import Mapping
from enum import Enum
from typing import Any, List, Tuple

from pydantic import BaseModel, Field

from ..errors.exceptions import InvalidOrderError


class Direction(str, Enum):
    """Direction of travel through the result set."""

    FORWARD = "forward"
    BACKWARD = "backward"


class OrderDirection(str, Enum):
    """Declared sort direction of a single column."""

    ASC = "asc"
    DESC = "desc"

    def reversed(self) -> "OrderDirection":
        return OrderDirection.DESC if self is OrderDirection.ASC else OrderDirection.ASC

    @classmethod
    def from_value(cls, value: Any) -> "OrderDirection":
        """Coerce ``asc``/``desc`` (any case) or a member into an OrderDirection.

        Raises:
            InvalidOrderError: If the value names no known direction
        """
        if isinstance(value, OrderDirection):
            return value
        if isinstance(value, str) and value.lower() in ("asc", "desc"):
            return cls(value.lower())
        raise InvalidOrderError(f"Invalid order direction: {value!r}")


class OrderColumn(BaseModel, frozen=True):
    """One ``(column, direction)`` entry of an order specification."""

    column: str = Field(min_length=1, description="Column name")
    direction: OrderDirection = Field(default=OrderDirection.ASC, description="Sort direction")


class OrderSpec(BaseModel, frozen=True):
    """Ordered list of columns defining the total sort order.

    Position in ``columns`` is significant: earlier columns take lexicographic
    priority over later ones when comparing against a cursor.
    """

    columns: Tuple[OrderColumn, ...] = ()

    @property
    def column_names(self) -> List[str]:
        return [entry.column for entry in self.columns]

    def is_empty(self) -> bool:
        return not self.columns

    def reversed(self) -> "OrderSpec":
        """Return the same columns with every direction flipped."""
        return OrderSpec(
            columns=tuple(
                OrderColumn(column=entry.column, direction=entry.direction.reversed())
                for entry in self.columns
            )
        )

    def to_sort_string(self) -> str:
        """Render as ``-created_at,id`` (the form accepted by ``parse``)."""
        return ",".join(
            f"-{entry.column}" if entry.direction is OrderDirection.DESC else entry.column
            for entry in self.columns
        )

    @classmethod
    def parse(cls, value: str) -> "OrderSpec":
        """Parse a sort string such as ``-created_at,id`` or ``created_at:desc,id:asc``.

        Raises:
            InvalidOrderError: If a term is empty or names an unknown direction
        """
        entries = []
        for term in value.split(","):
            term = term.strip()
            if not term:
                raise InvalidOrderError(f"Empty column in order string: {value!r}")
            if ":" in term:
                column, _, direction = term.partition(":")
                entries.append((column.strip(), OrderDirection.from_value(direction.strip())))
            elif term.startswith("-"):
                entries.append((term[1:].strip(), OrderDirection.DESC))
            else:
                entries.append((term.lstrip("+").strip(), OrderDirection.ASC))
        return cls._from_pairs(entries)

    @classmethod
    def from_value(cls, value: Any) -> "OrderSpec":
        """Build an OrderSpec from the shapes callers commonly attach to a query.

        Accepts an OrderSpec, a mapping of column to direction, a sort string,
        or a sequence whose items are column names, ``(column, direction)``
        pairs or OrderColumn instances.

        Raises:
            InvalidOrderError: For unsupported shapes, bad directions or duplicates
        """
        if isinstance(value, OrderSpec):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        if isinstance(value, Mapping):
            return cls._from_pairs(
                (str(column), OrderDirection.from_value(direction))
                for column, direction in value.items()
            )
        if isinstance(value, (list, tuple)):
            entries = []
            for item in value:
                if isinstance(item, OrderColumn):
                    entries.append((item.column, item.direction))
                elif isinstance(item, str):
                    entries.append((item, OrderDirection.ASC))
                elif isinstance(item, (list, tuple)) and len(item) == 2:
                    entries.append((str(item[0]), OrderDirection.from_value(item[1])))
                else:
                    raise InvalidOrderError(
                        f"Unsupported order format: {type(item).__name__}. "
                        "Please use column names or (column, direction) pairs."
                    )
            return cls._from_pairs(entries)
        raise InvalidOrderError(
            f"Unsupported order format: {type(value).__name__}. "
            "Please use a mapping, a sort string or a sequence of columns."
        )

    @classmethod
    def _from_pairs(cls, pairs) -> "OrderSpec":
        columns = []
        seen = set()
        for column, direction in pairs:
            if not column:
                raise InvalidOrderError("Order column name must not be empty")
            if column in seen:
                raise InvalidOrderError(f"Column '{column}' appears more than once in the order")
            seen.add(column)
            columns.append(OrderColumn(column=column, direction=direction))
        return cls(columns=tuple(columns))
