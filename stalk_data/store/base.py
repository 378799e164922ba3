"""
Port for the document store collaborator.

The access layer only reads: point lookups by slash-separated path and scans
of a collection, optionally ordered by document id and capped. Adapters
translate their store's "missing index" diagnostics into MissingIndexError;
every other failure propagates unchanged.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class DocumentSnapshot:
    """Result of a document read."""
    id: str
    exists: bool
    data: dict[str, Any] = field(default_factory=dict)
    path: Optional[str] = None

    @classmethod
    def missing(cls, path: str) -> "DocumentSnapshot":
        """Snapshot for a path with no document."""
        return cls(id=path.rsplit("/", 1)[-1], exists=False, path=path)


class DocumentStore(ABC):
    """Read-only async document store interface."""

    @abstractmethod
    async def get(self, path: str) -> DocumentSnapshot:
        """
        Read one document.

        Args:
            path: Slash-separated document path (e.g. 'stocks/AAPL')

        Returns:
            Snapshot with exists=False when nothing is stored at the path
        """
        ...

    @abstractmethod
    async def scan(
        self,
        collection_path: str,
        *,
        order_by_id: bool = False,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[DocumentSnapshot]:
        """
        Read the documents directly inside a collection.

        Args:
            collection_path: Slash-separated collection path (e.g. 'prices/AAPL/daily')
            order_by_id: Order results by document id
            descending: Reverse the id ordering (only with order_by_id)
            limit: Maximum number of documents to return

        Raises:
            MissingIndexError: if the store cannot serve the requested ordering
        """
        ...

    async def count(self, collection_path: str) -> int:
        """Number of documents in a collection."""
        return len(await self.scan(collection_path))
