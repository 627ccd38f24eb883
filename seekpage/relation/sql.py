"""Compile predicates and orders into PostgreSQL text with numbered parameters."""

from collections.abc import Mapping
from typing import Any, List, Optional

from ..pagination.order import OrderDirection, OrderSpec
from ..pagination.predicate import And, Comparison, ComparisonOperator, Or, Predicate

OPERATORS = {
    ComparisonOperator.EQ: "=",
    ComparisonOperator.GT: ">",
    ComparisonOperator.LT: "<",
}


def quote_identifier(name: str) -> str:
    """Double-quote an identifier, escaping embedded quotes."""
    return '"' + name.replace('"', '""') + '"'


def qualified_table(table: str, schema_name: str = "public") -> str:
    return f"{quote_identifier(schema_name)}.{quote_identifier(table)}"


def as_text(value: Any) -> Optional[str]:
    """Render a cursor scalar in PostgreSQL's text input format."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def compile_order(order: OrderSpec) -> str:
    """``ORDER BY`` clause for ``order``, or an empty string."""
    if order.is_empty():
        return ""
    terms = ", ".join(
        f"{quote_identifier(entry.column)} {'DESC' if entry.direction is OrderDirection.DESC else 'ASC'}"
        for entry in order.columns
    )
    return f"ORDER BY {terms}"


def compile_predicate(
    predicate: Predicate,
    params: List[Any],
    column_types: Mapping[str, str]
) -> str:
    """Render ``predicate`` as SQL, appending bound values to ``params``.

    Values are bound as text and cast to the column's declared type, so JSON
    scalars decoded from a cursor compare correctly with timestamp, uuid or
    numeric columns. Columns with no known type are bound as-is.
    """
    if isinstance(predicate, And):
        return "(" + " AND ".join(compile_predicate(term, params, column_types) for term in predicate.terms) + ")"
    if isinstance(predicate, Or):
        return "(" + " OR ".join(compile_predicate(term, params, column_types) for term in predicate.terms) + ")"
    return _compile_comparison(predicate, params, column_types)


def _compile_comparison(
    comparison: Comparison,
    params: List[Any],
    column_types: Mapping[str, str]
) -> str:
    column = quote_identifier(comparison.column)

    if comparison.value is None and comparison.op is ComparisonOperator.EQ:
        return f"{column} IS NULL"

    column_type = column_types.get(comparison.column)
    if column_type:
        params.append(as_text(comparison.value))
        placeholder = f"${len(params)}::text::{column_type}"
    else:
        params.append(comparison.value)
        placeholder = f"${len(params)}"

    return f"{column} {OPERATORS[comparison.op]} {placeholder}"
