"""
Metadata resolution across candidate document locations.

The store's schema evolved over time: company metadata may live on the root
stock document or on a nested profile document, and both shapes coexist.
All candidates are read concurrently, then evaluated strictly in priority
order so the winner never depends on which read completed first.
"""

import asyncio
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence

import structlog

from ..config.defaults import MetadataParams
from ..errors import InvalidDataError, NotFoundError
from ..store.base import DocumentSnapshot, DocumentStore
from .formatting import format_market_cap
from .models import MetadataRecord

logger = structlog.get_logger(__name__)

REQUIRED_TEXT_FIELDS = ("companyName", "sector")


def _non_empty_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def parse_metadata(data: Mapping[str, Any], market_cap_keys: Sequence[str],
                   source_path: Optional[str] = None) -> Optional[MetadataRecord]:
    """
    Build a MetadataRecord from a raw document, or None if it is not valid.

    A document is valid only when company name, sector and a market cap
    under one of the accepted spellings are all present and well-typed.
    Partially populated documents are rejected, never patched.
    """
    company_name = _non_empty_text(data.get("companyName"))
    sector = _non_empty_text(data.get("sector"))
    if company_name is None or sector is None:
        return None

    market_cap = None
    for key in market_cap_keys:
        if data.get(key) is None:
            continue
        try:
            market_cap = format_market_cap(data[key])
            break
        except InvalidDataError:
            continue

    if market_cap is None:
        return None

    skipped = set(REQUIRED_TEXT_FIELDS) | set(market_cap_keys)
    extra = {key: value for key, value in data.items() if key not in skipped}

    return MetadataRecord(
        company_name=company_name,
        sector=sector,
        market_cap=market_cap,
        source_path=source_path,
        extra=MappingProxyType(extra),
    )


class MetadataResolver:
    """Resolves company metadata from prioritized candidate locations."""

    def __init__(self, store: DocumentStore, params: Optional[MetadataParams] = None):
        """
        Initialize the resolver.

        Args:
            store: Document store to read from
            params: Candidate paths and accepted market cap spellings
        """
        self.store = store
        self.params = params or MetadataParams()

    def candidate_paths(self, symbol: str) -> list[str]:
        """Candidate document paths for a symbol, highest priority first."""
        return [template.format(symbol=symbol) for template in self.params.candidate_paths]

    async def resolve(self, symbol: str) -> MetadataRecord:
        """
        Resolve metadata for a normalized symbol.

        Raises:
            NotFoundError: if no candidate location holds a valid record
            Any exception raised by the document store read
        """
        paths = self.candidate_paths(symbol)
        snapshots: list[DocumentSnapshot] = await asyncio.gather(
            *(self.store.get(path) for path in paths)
        )

        for path, snapshot in zip(paths, snapshots):
            if not snapshot.exists:
                logger.debug("Metadata candidate missing", symbol=symbol, path=path)
                continue

            record = parse_metadata(snapshot.data, self.params.market_cap_keys, source_path=path)
            if record is not None:
                logger.debug("Metadata resolved", symbol=symbol, path=path)
                return record

            logger.info(
                "Metadata candidate rejected as incomplete",
                symbol=symbol,
                path=path,
                fields=sorted(snapshot.data.keys()),
            )

        raise NotFoundError("metadata", symbol, context={"paths_checked": paths})
