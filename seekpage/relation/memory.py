"""Relation adapter over an in-memory sequence of records."""

import dataclasses
from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Generic, Iterable, List, Optional, Set, Tuple, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..errors.exceptions import InvalidCursorError
from ..pagination.cursor import read_field
from ..pagination.order import OrderDirection, OrderSpec
from ..pagination.predicate import And, Comparison, ComparisonOperator, Or, Predicate

RecordT = TypeVar("RecordT")


@lru_cache(maxsize=None)
def _type_adapter(tp: type) -> TypeAdapter:
    return TypeAdapter(tp)


def coerce_to_field_type(sample: Any, value: Any) -> Any:
    """Convert a cursor value to the type of the record field it is compared with.

    Cursor values travel as JSON scalars, so a ``datetime`` field is compared
    with an ISO 8601 string, a ``UUID`` with its string form and so on.
    Values that cannot be converted are returned unchanged.
    """
    if value is None or sample is None or type(value) is type(sample):
        return value
    if isinstance(value, (int, float)) and isinstance(sample, (int, float)):
        return value
    try:
        return _type_adapter(type(sample)).validate_python(value)
    except ValidationError:
        return value


def infer_column_names(record: Any) -> Set[str]:
    """Column names of a mapping, pydantic model, dataclass or plain object."""
    if isinstance(record, Mapping):
        return set(record.keys())
    if isinstance(record, BaseModel):
        return set(type(record).model_fields)
    if dataclasses.is_dataclass(record):
        return {field.name for field in dataclasses.fields(record)}
    return set(vars(record))


class InMemoryRelation(Generic[RecordT]):
    """Filters, sorts and limits a Python sequence like a database relation.

    Args:
        records: Rows as mappings, pydantic models, dataclasses or objects
        order: Sort order, anything ``OrderSpec.from_value`` accepts
        columns: Available column names; inferred from the first record if omitted
    """

    __slots__ = ("_records", "_order", "_columns", "_predicates", "_limit")

    def __init__(
        self,
        records: Iterable[RecordT],
        order: Any = None,
        columns: Optional[Iterable[str]] = None
    ):
        self._records: Tuple[RecordT, ...] = tuple(records)
        self._order = OrderSpec() if order is None else OrderSpec.from_value(order)
        self._columns = set(columns) if columns is not None else None
        self._predicates: Tuple[Predicate, ...] = ()
        self._limit: Optional[int] = None

    def _replace(self, **changes) -> "InMemoryRelation[RecordT]":
        relation = type(self)(self._records, self._order, self._columns)
        relation._predicates = changes.get("predicates", self._predicates)
        relation._limit = changes.get("limit", self._limit)
        if "order" in changes:
            relation._order = changes["order"]
        return relation

    def order_by(self, order: Any) -> "InMemoryRelation[RecordT]":
        return self._replace(order=OrderSpec.from_value(order))

    def reverse_order(self) -> "InMemoryRelation[RecordT]":
        return self._replace(order=self._order.reversed())

    def filter(self, predicate: Predicate) -> "InMemoryRelation[RecordT]":
        return self._replace(predicates=self._predicates + (predicate,))

    def limit(self, n: int) -> "InMemoryRelation[RecordT]":
        if self._limit is not None:
            n = min(n, self._limit)
        return self._replace(limit=n)

    def column_names(self) -> Set[str]:
        if self._columns is not None:
            return set(self._columns)
        if not self._records:
            # No sample row to inspect; the declared order is all we know
            return set(self._order.column_names)
        return infer_column_names(self._records[0])

    def current_order(self) -> OrderSpec:
        return self._order

    async def to_list(self) -> List[RecordT]:
        return self._evaluate()

    async def exists(self) -> bool:
        if self._limit == 0:
            return False
        return any(self._matches_all(record) for record in self._records)

    def _evaluate(self) -> List[RecordT]:
        rows = [record for record in self._records if self._matches_all(record)]

        # Stable sorts from the least significant column up give a
        # lexicographic order with mixed directions
        for entry in reversed(self._order.columns):
            rows.sort(
                key=lambda record, column=entry.column: read_field(record, column),
                reverse=entry.direction is OrderDirection.DESC
            )

        if self._limit is not None:
            rows = rows[:self._limit]
        return rows

    def _matches_all(self, record: RecordT) -> bool:
        return all(self._matches(predicate, record) for predicate in self._predicates)

    def _matches(self, predicate: Predicate, record: RecordT) -> bool:
        if isinstance(predicate, And):
            return all(self._matches(term, record) for term in predicate.terms)
        if isinstance(predicate, Or):
            return any(self._matches(term, record) for term in predicate.terms)
        return self._compare(predicate, record)

    @staticmethod
    def _compare(comparison: Comparison, record: RecordT) -> bool:
        field = read_field(record, comparison.column)
        value = coerce_to_field_type(field, comparison.value)

        # NULL never orders against anything
        if field is None or value is None:
            return comparison.op is ComparisonOperator.EQ and field is None and value is None
        if comparison.op is ComparisonOperator.EQ:
            return field == value
        try:
            if comparison.op is ComparisonOperator.GT:
                return field > value
            return field < value
        except TypeError:
            raise InvalidCursorError(
                f"Cursor value {comparison.value!r} cannot be compared with column "
                f"'{comparison.column}' of type {type(field).__name__}"
            )
