"""Relation adapters the paginator runs queries through."""

from .protocol import Relation
from .memory import InMemoryRelation
from .postgres import PostgresRelation

__all__ = [
    "Relation",
    "InMemoryRelation",
    "PostgresRelation"
]
