"""Boundary predicates for keyset pagination.

Given an order ``[(c0, d0), ..., (cn-1, dn-1)]`` and cursor values ``v0..vn-1``
the rows strictly beyond the cursor are selected by::

    (c0 op v0)
    OR (c0 = v0 AND c1 op v1)
    OR ...
    OR (c0 = v0 AND ... AND cn-2 = vn-2 AND cn-1 op vn-1)

where ``op`` is ``>`` or ``<`` depending on the column direction and the
direction of travel.
"""

from enum import Enum
from typing import Literal, Tuple, Union

from pydantic import BaseModel

from ..errors.exceptions import InvalidCursorError
from .cursor import Cursor, CursorValue
from .order import Direction, OrderDirection, OrderSpec


class ComparisonOperator(str, Enum):
    """Operators a relation adapter has to support."""

    EQ = "eq"
    GT = "gt"
    LT = "lt"


class Comparison(BaseModel, frozen=True):
    """``column <op> value`` leaf."""

    kind: Literal["comparison"] = "comparison"
    column: str
    op: ComparisonOperator
    value: CursorValue


class And(BaseModel, frozen=True):
    """Conjunction of predicates."""

    kind: Literal["and"] = "and"
    terms: Tuple["Predicate", ...]


class Or(BaseModel, frozen=True):
    """Disjunction of predicates."""

    kind: Literal["or"] = "or"
    terms: Tuple["Predicate", ...]


Predicate = Union[Comparison, And, Or]

And.model_rebuild()
Or.model_rebuild()


def comparison_operator(order_direction: OrderDirection, direction: Direction) -> ComparisonOperator:
    """Pick ``gt``/``lt`` for a column given the direction of travel."""
    ascending = order_direction is OrderDirection.ASC
    if direction is Direction.FORWARD:
        return ComparisonOperator.GT if ascending else ComparisonOperator.LT
    return ComparisonOperator.LT if ascending else ComparisonOperator.GT


def _conjunction(terms) -> Predicate:
    return terms[0] if len(terms) == 1 else And(terms=tuple(terms))


def build_keyset_predicate(order: OrderSpec, cursor: Cursor, direction: Direction) -> Predicate:
    """Build the predicate selecting rows strictly beyond ``cursor``.

    Raises:
        InvalidCursorError: If the cursor lacks a value for an order column
    """
    missing = [column for column in order.column_names if column not in cursor]
    if missing:
        raise InvalidCursorError(f"Cursor is missing values for: {', '.join(missing)}")

    clauses = []
    for index, entry in enumerate(order.columns):
        terms = [
            Comparison(column=previous.column, op=ComparisonOperator.EQ, value=cursor[previous.column])
            for previous in order.columns[:index]
        ]
        terms.append(Comparison(
            column=entry.column,
            op=comparison_operator(entry.direction, direction),
            value=cursor[entry.column]
        ))
        clauses.append(_conjunction(terms))

    return clauses[0] if len(clauses) == 1 else Or(terms=tuple(clauses))
