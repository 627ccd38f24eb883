"""Pytest configuration and shared fixtures for the seekpage tests."""

import logging
from typing import Any, Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest

from seekpage.relation import InMemoryRelation

from .helpers import MockContextManager


# Disable logging for cleaner test output
logging.getLogger("asyncio").setLevel(logging.WARNING)
logging.getLogger("asyncpg").setLevel(logging.WARNING)


@pytest.fixture
def mock_db_pool():
    """Mock asyncpg pool whose acquire() yields an AsyncMock connection."""
    pool = MagicMock()
    conn = AsyncMock()
    pool.acquire.return_value = MockContextManager(conn)
    return pool, conn


@pytest.fixture
def users() -> List[Dict[str, Any]]:
    """25 users with ids 1..25."""
    return [
        {"id": i, "name": f"User {i - 1}", "age": 19 + i}
        for i in range(1, 26)
    ]


@pytest.fixture
def users_relation(users) -> InMemoryRelation:
    return InMemoryRelation(users, order={"id": "asc"})


@pytest.fixture
def tied_users() -> List[Dict[str, Any]]:
    """Ten users whose ages repeat: 20, 20, 20, 30, 30, 30, 40, 40, 40, 50."""
    ages = [20, 20, 20, 30, 30, 30, 40, 40, 40, 50]
    return [
        {"id": i + 1, "name": f"User {i}", "age": age}
        for i, age in enumerate(ages)
    ]
