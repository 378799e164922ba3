"""
In-memory document store adapter.

Holds documents in a dict keyed by slash-separated path. Used for local
runs from YAML fixtures and as the store behind the test suite; read
latency, ordering support and transport failures can be simulated per path.
"""

import asyncio
import copy
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import structlog
import yaml

from ..errors import MissingIndexError
from .base import DocumentSnapshot, DocumentStore

logger = structlog.get_logger(__name__)


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed DocumentStore with read accounting."""

    def __init__(
        self,
        documents: Optional[Mapping[str, Mapping[str, Any]]] = None,
        *,
        supports_ordering: bool = True,
        delays: Optional[Mapping[str, float]] = None,
        failures: Optional[Mapping[str, Exception]] = None,
    ):
        """
        Initialize the store.

        Args:
            documents: Document payloads keyed by path
            supports_ordering: When False, ordered scans raise MissingIndexError
            delays: Simulated read latency in seconds, keyed by path
            failures: Exceptions raised when the keyed path is read
        """
        self.documents: dict[str, dict[str, Any]] = {}
        self.supports_ordering = supports_ordering
        self.delays = dict(delays or {})
        self.failures = dict(failures or {})
        self.reads: list[tuple[str, str]] = []

        for path, data in (documents or {}).items():
            self.put(path, data)

    @classmethod
    def from_mapping(cls, documents: Mapping[str, Mapping[str, Any]], **kwargs) -> "InMemoryDocumentStore":
        """Create a store from a path -> payload mapping."""
        return cls(documents, **kwargs)

    @classmethod
    def from_yaml(cls, fixture_file: Union[str, Path], **kwargs) -> "InMemoryDocumentStore":
        """
        Load documents from a YAML fixture.

        Expected layout:
            documents:
              stocks/AAPL: {companyName: Apple Inc., sector: Technology, marketCap: 2750000000000}
              prices/AAPL/daily/2024-10-21: {c: 178.33}
        """
        with open(fixture_file) as f:
            fixture = yaml.safe_load(f) or {}

        documents = fixture.get("documents", {})
        logger.info("Loaded document fixture", fixture=str(fixture_file), document_count=len(documents))
        return cls(documents, **kwargs)

    def put(self, path: str, data: Mapping[str, Any]) -> None:
        """Store a document (fixture setup only; the access layer never writes)."""
        self.documents[self._clean(path)] = copy.deepcopy(dict(data))

    def read_count(self, operation: Optional[str] = None) -> int:
        """Number of reads performed, optionally for one operation."""
        if operation is None:
            return len(self.reads)
        return sum(1 for op, _ in self.reads if op == operation)

    async def get(self, path: str) -> DocumentSnapshot:
        path = self._clean(path)
        await self._simulate(path, "get")

        data = self.documents.get(path)
        if data is None:
            return DocumentSnapshot.missing(path)

        return DocumentSnapshot(
            id=path.rsplit("/", 1)[-1],
            exists=True,
            data=copy.deepcopy(data),
            path=path,
        )

    async def scan(
        self,
        collection_path: str,
        *,
        order_by_id: bool = False,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[DocumentSnapshot]:
        collection_path = self._clean(collection_path)
        await self._simulate(collection_path, "scan")

        if order_by_id and not self.supports_ordering:
            raise MissingIndexError(
                f"The query requires an index on {collection_path}",
                path=collection_path,
            )

        prefix = collection_path + "/"
        snapshots = [
            DocumentSnapshot(
                id=path[len(prefix):],
                exists=True,
                data=copy.deepcopy(data),
                path=path,
            )
            for path, data in self.documents.items()
            if path.startswith(prefix) and "/" not in path[len(prefix):]
        ]

        if order_by_id:
            snapshots.sort(key=lambda snap: snap.id, reverse=descending)

        if limit is not None:
            snapshots = snapshots[:limit]

        return snapshots

    async def _simulate(self, path: str, operation: str) -> None:
        self.reads.append((operation, path))

        delay = self.delays.get(path)
        if delay:
            await asyncio.sleep(delay)

        failure = self.failures.get(path)
        if failure is not None:
            raise failure

    @staticmethod
    def _clean(path: str) -> str:
        return path.strip("/")
