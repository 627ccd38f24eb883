"""Contract a storage adapter implements for the paginator."""

from typing import Any, List, Protocol, Set, TypeVar, runtime_checkable

from ..pagination.order import OrderSpec
from ..pagination.predicate import Predicate

RecordT_co = TypeVar("RecordT_co", covariant=True)


@runtime_checkable
class Relation(Protocol[RecordT_co]):
    """Ordered, filterable, limitable view over a data source.

    Every refining method returns a new relation and leaves the receiver
    unchanged, so a single base relation can be refined concurrently.
    """

    def order_by(self, order: Any) -> "Relation[RecordT_co]":
        """Return the relation sorted by ``order``, replacing any existing order."""
        ...

    def reverse_order(self) -> "Relation[RecordT_co]":
        """Return the same relation with every order direction flipped."""
        ...

    def filter(self, predicate: Predicate) -> "Relation[RecordT_co]":
        """Return the relation additionally constrained by ``predicate``."""
        ...

    def limit(self, n: int) -> "Relation[RecordT_co]":
        """Return the relation capped at ``n`` rows."""
        ...

    async def to_list(self) -> List[RecordT_co]:
        """Materialise matching rows in order."""
        ...

    async def exists(self) -> bool:
        """Whether at least one row matches, without materialising rows."""
        ...

    def column_names(self) -> Set[str]:
        """Names of the columns available on the record shape."""
        ...

    def current_order(self) -> OrderSpec:
        """The sort order attached to this relation."""
        ...
