"""Test doubles shared across the test suite."""

from typing import List


def ids(records) -> List[int]:
    """IDs of a page or list of row dicts, in order."""
    return [record["id"] for record in records]


class RecordingRelation:
    """Delegating relation that records the fetches and probes it runs."""

    def __init__(self, inner, calls=None):
        self._inner = inner
        self.calls = calls if calls is not None else []

    def _wrap(self, inner):
        return RecordingRelation(inner, self.calls)

    def order_by(self, order):
        return self._wrap(self._inner.order_by(order))

    def reverse_order(self):
        return self._wrap(self._inner.reverse_order())

    def filter(self, predicate):
        return self._wrap(self._inner.filter(predicate))

    def limit(self, n):
        return self._wrap(self._inner.limit(n))

    async def to_list(self):
        self.calls.append("to_list")
        return await self._inner.to_list()

    async def exists(self):
        self.calls.append("exists")
        return await self._inner.exists()

    def column_names(self):
        return self._inner.column_names()

    def current_order(self):
        return self._inner.current_order()


class MockContextManager:
    """Async context manager handing out a mocked connection."""

    def __init__(self, conn):
        self.conn = conn

    async def __aenter__(self):
        return self.conn

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False
