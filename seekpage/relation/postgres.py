"""PostgreSQL relation adapter using asyncpg."""

import logging
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, Set, Tuple, TypeVar

from asyncpg import Pool

from ..pagination.order import OrderSpec
from ..pagination.predicate import Predicate
from .sql import compile_order, compile_predicate, qualified_table, quote_identifier

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")

COLUMNS_QUERY = """
    SELECT a.attname AS name, format_type(a.atttypid, a.atttypmod) AS type
    FROM pg_attribute a
    JOIN pg_class c ON c.oid = a.attrelid
    JOIN pg_namespace n ON n.oid = c.relnamespace
    WHERE n.nspname = $1 AND c.relname = $2 AND a.attnum > 0 AND NOT a.attisdropped
    ORDER BY a.attnum
"""


class PostgresRelation(Generic[RecordT]):
    """A table (optionally pre-filtered) in PostgreSQL, viewed as a relation.

    Build one with ``from_table`` so column names and types are known. Every
    refining method returns a new relation; queries run only in ``to_list``
    and ``exists``, each on its own pooled connection. Driver errors
    propagate unchanged.
    """

    __slots__ = (
        "_pool", "_table", "_schema_name", "_columns", "_order",
        "_where", "_predicates", "_limit", "_record_factory"
    )

    def __init__(
        self,
        pool: Pool,
        table: str,
        columns: Dict[str, str],
        schema_name: str = "public",
        order: Any = None,
        where: Optional[Dict[str, Any]] = None,
        record_factory: Optional[Callable[[Dict[str, Any]], RecordT]] = None
    ):
        self._pool = pool
        self._table = table
        self._schema_name = schema_name
        self._columns = dict(columns)
        self._order = OrderSpec() if order is None else OrderSpec.from_value(order)
        self._where = dict(where or {})
        self._predicates: Tuple[Predicate, ...] = ()
        self._limit: Optional[int] = None
        self._record_factory = record_factory

    @classmethod
    async def from_table(
        cls,
        pool: Pool,
        table: str,
        schema_name: str = "public",
        order: Any = None,
        where: Optional[Dict[str, Any]] = None,
        columns: Optional[Iterable[str]] = None,
        record_factory: Optional[Callable[[Dict[str, Any]], RecordT]] = None
    ) -> "PostgresRelation[RecordT]":
        """Introspect ``schema_name.table`` and return a relation over it.

        ``columns`` restricts the selected columns to a subset of the table's.

        Raises:
            LookupError: If the table does not exist, has no columns, or lacks
                one of ``columns``
        """
        async with pool.acquire() as conn:
            rows = await conn.fetch(COLUMNS_QUERY, schema_name, table)

        if not rows:
            raise LookupError(f"Table {schema_name}.{table} does not exist or has no columns")

        table_columns = {row["name"]: row["type"] for row in rows}
        if columns is None:
            columns = table_columns
        else:
            columns = list(columns)
            missing = [name for name in columns if name not in table_columns]
            if missing:
                raise LookupError(f"Columns not found on {schema_name}.{table}: {', '.join(missing)}")
            columns = {name: table_columns[name] for name in columns}

        logger.debug(f"Introspected {len(columns)} columns on {schema_name}.{table}")

        return cls(
            pool,
            table,
            columns,
            schema_name=schema_name,
            order=order,
            where=where,
            record_factory=record_factory
        )

    def _replace(self, **changes) -> "PostgresRelation[RecordT]":
        relation = type(self)(
            self._pool,
            self._table,
            self._columns,
            schema_name=self._schema_name,
            order=changes.get("order", self._order),
            where=self._where,
            record_factory=self._record_factory
        )
        relation._predicates = changes.get("predicates", self._predicates)
        relation._limit = changes.get("limit", self._limit)
        return relation

    def order_by(self, order: Any) -> "PostgresRelation[RecordT]":
        return self._replace(order=OrderSpec.from_value(order))

    def reverse_order(self) -> "PostgresRelation[RecordT]":
        return self._replace(order=self._order.reversed())

    def filter(self, predicate: Predicate) -> "PostgresRelation[RecordT]":
        return self._replace(predicates=self._predicates + (predicate,))

    def limit(self, n: int) -> "PostgresRelation[RecordT]":
        if self._limit is not None:
            n = min(n, self._limit)
        return self._replace(limit=n)

    def column_names(self) -> Set[str]:
        return set(self._columns)

    def current_order(self) -> OrderSpec:
        return self._order

    def build_select(self) -> Tuple[str, List[Any]]:
        """SQL and parameters for materialising this relation."""
        columns = ", ".join(quote_identifier(name) for name in self._columns)
        params: List[Any] = []
        query_parts = [f"SELECT {columns} FROM {qualified_table(self._table, self._schema_name)}"]  # noqa: S608

        where_clause = self._build_where(params)
        if where_clause:
            query_parts.append(where_clause)

        order_clause = compile_order(self._order)
        if order_clause:
            query_parts.append(order_clause)

        if self._limit is not None:
            query_parts.append(f"LIMIT {int(self._limit)}")

        return " ".join(query_parts), params

    def build_exists(self) -> Tuple[str, List[Any]]:
        """SQL and parameters for checking that at least one row matches."""
        params: List[Any] = []
        query_parts = [f"SELECT 1 FROM {qualified_table(self._table, self._schema_name)}"]  # noqa: S608

        where_clause = self._build_where(params)
        if where_clause:
            query_parts.append(where_clause)

        if self._limit is not None:
            query_parts.append(f"LIMIT {int(self._limit)}")

        return f"SELECT EXISTS ({' '.join(query_parts)})", params

    async def to_list(self) -> List[RecordT]:
        query, params = self.build_select()
        logger.debug(f"Fetching rows: {query} {params}")

        async with self._pool.acquire() as conn:
            rows = await conn.fetch(query, *params)

        records = [dict(row) for row in rows]
        if self._record_factory:
            return [self._record_factory(record) for record in records]
        return records

    async def exists(self) -> bool:
        query, params = self.build_exists()
        logger.debug(f"Checking existence: {query} {params}")

        async with self._pool.acquire() as conn:
            return bool(await conn.fetchval(query, *params))

    def _build_where(self, params: List[Any]) -> str:
        conditions = []
        for key, value in self._where.items():
            if value is None:
                conditions.append(f"{quote_identifier(key)} IS NULL")
            else:
                params.append(value)
                conditions.append(f"{quote_identifier(key)} = ${len(params)}")

        for predicate in self._predicates:
            conditions.append(compile_predicate(predicate, params, self._columns))

        return "WHERE " + " AND ".join(conditions) if conditions else ""
