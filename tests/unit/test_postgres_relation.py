"""Tests for the asyncpg-backed relation with a mocked pool."""

from unittest.mock import MagicMock

import asyncpg
import pytest

from seekpage.pagination import (
    Comparison,
    ComparisonOperator,
    Cursor,
    Direction,
    Paginator
)
from seekpage.relation import PostgresRelation, Relation
from seekpage.relation.postgres import COLUMNS_QUERY


USER_COLUMNS = {"id": "bigint", "name": "text"}


def make_relation(pool, **kwargs):
    return PostgresRelation(pool, "users", USER_COLUMNS, **kwargs)


class TestFromTable:
    """Test table introspection."""

    @pytest.mark.asyncio
    async def test_from_table(self, mock_db_pool):
        """Test columns and types are read from the catalog."""
        pool, conn = mock_db_pool
        conn.fetch.return_value = [
            {"name": "id", "type": "bigint"},
            {"name": "created_at", "type": "timestamp with time zone"},
        ]

        relation = await PostgresRelation.from_table(pool, "posts", order="-created_at,-id")

        conn.fetch.assert_called_once_with(COLUMNS_QUERY, "public", "posts")
        assert relation.column_names() == {"id", "created_at"}
        assert relation.current_order().to_sort_string() == "-created_at,-id"
        assert isinstance(relation, Relation)

    @pytest.mark.asyncio
    async def test_column_subset(self, mock_db_pool):
        """Test selecting a subset of the table's columns."""
        pool, conn = mock_db_pool
        conn.fetch.return_value = [
            {"name": "id", "type": "bigint"},
            {"name": "body", "type": "text"},
            {"name": "title", "type": "text"},
        ]

        relation = await PostgresRelation.from_table(pool, "posts", columns=["title", "id"])
        query, _ = relation.build_select()

        assert query == 'SELECT "title", "id" FROM "public"."posts"'

        with pytest.raises(LookupError, match="summary"):
            await PostgresRelation.from_table(pool, "posts", columns=["id", "summary"])

    @pytest.mark.asyncio
    async def test_missing_table(self, mock_db_pool):
        """Test an unknown table raises LookupError."""
        pool, conn = mock_db_pool
        conn.fetch.return_value = []

        with pytest.raises(LookupError, match="app.missing"):
            await PostgresRelation.from_table(pool, "missing", schema_name="app")


class TestBuildSelect:
    """Test generated SELECT statements."""

    def test_plain_select(self):
        query, params = make_relation(MagicMock()).build_select()

        assert query == 'SELECT "id", "name" FROM "public"."users"'
        assert params == []

    def test_keyset_select(self):
        """Test filter, order and limit compose in order."""
        relation = (
            make_relation(MagicMock(), order={"id": "asc"})
            .filter(Comparison(column="id", op=ComparisonOperator.GT, value=5))
            .limit(6)
        )

        query, params = relation.build_select()

        assert query == (
            'SELECT "id", "name" FROM "public"."users" '
            'WHERE "id" > $1::text::bigint ORDER BY "id" ASC LIMIT 6'
        )
        assert params == ["5"]

    def test_where_parameters_come_first(self):
        """Test fixed conditions bind before predicate parameters."""
        relation = make_relation(
            MagicMock(),
            order={"id": "asc"},
            where={"name": "alice", "deleted_at": None}
        ).filter(Comparison(column="id", op=ComparisonOperator.LT, value=9))

        query, params = relation.build_select()

        assert query == (
            'SELECT "id", "name" FROM "public"."users" '
            'WHERE "name" = $1 AND "deleted_at" IS NULL AND "id" < $2::text::bigint '
            'ORDER BY "id" ASC'
        )
        assert params == ["alice", "9"]

    def test_reverse_order(self):
        relation = make_relation(MagicMock(), order={"id": "asc"}).reverse_order()

        query, _ = relation.build_select()

        assert query.endswith('ORDER BY "id" DESC')

    def test_build_exists(self):
        """Test the existence query wraps a limited subselect."""
        relation = (
            make_relation(MagicMock(), schema_name="app", order={"id": "asc"})
            .filter(Comparison(column="id", op=ComparisonOperator.GT, value=3))
            .limit(1)
        )

        query, params = relation.build_exists()

        assert query == (
            'SELECT EXISTS (SELECT 1 FROM "app"."users" '
            'WHERE "id" > $1::text::bigint LIMIT 1)'
        )
        assert params == ["3"]


class TestExecution:
    """Test queries are sent through the pool."""

    @pytest.mark.asyncio
    async def test_to_list(self, mock_db_pool):
        pool, conn = mock_db_pool
        conn.fetch.return_value = [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]

        records = await make_relation(pool, order={"id": "asc"}).limit(2).to_list()

        assert records == [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]
        conn.fetch.assert_called_once_with(
            'SELECT "id", "name" FROM "public"."users" ORDER BY "id" ASC LIMIT 2'
        )

    @pytest.mark.asyncio
    async def test_record_factory(self, mock_db_pool):
        """Test rows are passed through the record factory."""
        pool, conn = mock_db_pool
        conn.fetch.return_value = [{"id": 1, "name": "a"}]

        records = await make_relation(pool, record_factory=lambda row: row["name"]).to_list()

        assert records == ["a"]

    @pytest.mark.asyncio
    async def test_exists(self, mock_db_pool):
        pool, conn = mock_db_pool
        conn.fetchval.return_value = True

        result = await make_relation(pool).limit(1).exists()

        assert result is True
        conn.fetchval.assert_called_once_with(
            'SELECT EXISTS (SELECT 1 FROM "public"."users" LIMIT 1)'
        )

    @pytest.mark.asyncio
    async def test_database_error_propagates(self, mock_db_pool):
        """Test driver errors are not wrapped."""
        pool, conn = mock_db_pool
        conn.fetch.side_effect = asyncpg.PostgresError("Database error")

        with pytest.raises(asyncpg.PostgresError):
            await make_relation(pool).to_list()


class TestPaginatorOverPostgres:
    """Test the paginator drives the SQL adapter."""

    @pytest.mark.asyncio
    async def test_forward_page_after_cursor(self, mock_db_pool):
        """Test a cursor page issues one SELECT and one backward probe."""
        pool, conn = mock_db_pool
        conn.fetch.return_value = [{"id": i, "name": f"User {i}"} for i in range(6, 12)]
        conn.fetchval.return_value = True
        paginator = Paginator(make_relation(pool, order={"id": "asc"}), {"id": "asc"}, per_page=5)

        page = await paginator.paginate(cursor=Cursor(values={"id": 5}).encode())

        assert [r["id"] for r in page] == [6, 7, 8, 9, 10]
        assert page.has_next_page is True
        assert page.has_previous_page is True
        conn.fetch.assert_called_once_with(
            'SELECT "id", "name" FROM "public"."users" '
            'WHERE "id" > $1::text::bigint ORDER BY "id" ASC LIMIT 6',
            "5"
        )
        conn.fetchval.assert_called_once_with(
            'SELECT EXISTS (SELECT 1 FROM "public"."users" '
            'WHERE "id" < $1::text::bigint LIMIT 1)',
            "6"
        )

    @pytest.mark.asyncio
    async def test_backward_page(self, mock_db_pool):
        """Test backward travel reverses the query order and the rows."""
        pool, conn = mock_db_pool
        conn.fetch.return_value = [{"id": 4, "name": "d"}, {"id": 3, "name": "c"}]
        conn.fetchval.return_value = True
        paginator = Paginator(make_relation(pool, order={"id": "asc"}), {"id": "asc"}, per_page=2)

        page = await paginator.paginate(
            cursor=Cursor(values={"id": 5}).encode(),
            direction=Direction.BACKWARD
        )

        assert [r["id"] for r in page] == [3, 4]
        assert page.has_previous_page is False
        assert page.has_next_page is True
        query = conn.fetch.call_args.args[0]
        assert 'WHERE "id" < $1::text::bigint ORDER BY "id" DESC LIMIT 3' in query
