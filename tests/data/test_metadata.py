"""
Tests for metadata resolution across candidate document locations.
"""

import pytest

from stalk_data.config.defaults import MetadataParams
from stalk_data.data.metadata import MetadataResolver, parse_metadata
from stalk_data.errors import NotFoundError
from stalk_data.store.memory import InMemoryDocumentStore

MARKET_CAP_KEYS = MetadataParams().market_cap_keys


class TestParseMetadata:
    """Test structural validation of metadata documents."""

    def test_valid_document(self, apple_metadata):
        record = parse_metadata(apple_metadata, MARKET_CAP_KEYS, source_path="stocks/AAPL")

        assert record.company_name == "Apple Inc."
        assert record.sector == "Technology"
        assert record.market_cap == "2.75T"
        assert record.source_path == "stocks/AAPL"

    @pytest.mark.parametrize("missing", ["companyName", "sector", "marketCap"])
    def test_partial_documents_rejected(self, apple_metadata, missing):
        del apple_metadata[missing]
        assert parse_metadata(apple_metadata, MARKET_CAP_KEYS) is None

    @pytest.mark.parametrize("field,value", [
        ("companyName", ""),
        ("companyName", 42),
        ("sector", "   "),
        ("marketCap", None),
        ("marketCap", float("nan")),
    ])
    def test_ill_typed_fields_rejected(self, apple_metadata, field, value):
        apple_metadata[field] = value
        assert parse_metadata(apple_metadata, MARKET_CAP_KEYS) is None

    @pytest.mark.parametrize("key", ["market_cap", "marketcap", "mktCap"])
    def test_alternate_market_cap_spellings(self, key):
        data = {"companyName": "NVIDIA", "sector": "Technology", key: 980_000_000}
        assert parse_metadata(data, MARKET_CAP_KEYS).market_cap == "980.00M"

    def test_extra_fields_carried(self, apple_metadata):
        apple_metadata["industry"] = "Consumer Electronics"
        record = parse_metadata(apple_metadata, MARKET_CAP_KEYS)

        assert record.extra["industry"] == "Consumer Electronics"
        assert "marketCap" not in record.extra


class TestMetadataResolver:
    """Test prioritized, concurrent metadata resolution."""

    @pytest.mark.asyncio
    async def test_root_document_used(self, store):
        record = await MetadataResolver(store).resolve("AAPL")

        assert record.company_name == "Apple Inc."
        assert record.market_cap == "2.75T"
        assert record.source_path == "stocks/AAPL"

    @pytest.mark.asyncio
    async def test_falls_back_to_profile(self, store):
        record = await MetadataResolver(store).resolve("MSFT")

        assert record.company_name == "Microsoft"
        assert record.market_cap == "3.10T"
        assert record.source_path == "stocks/MSFT/stats/profile"

    @pytest.mark.asyncio
    async def test_all_candidates_read(self, store):
        await MetadataResolver(store).resolve("AAPL")

        read_paths = [path for op, path in store.reads if op == "get"]
        assert read_paths == ["stocks/AAPL", "stocks/AAPL/stats/profile"]

    @pytest.mark.asyncio
    async def test_priority_independent_of_completion_order(self):
        """The root wins even when the profile read completes first."""
        store = InMemoryDocumentStore(
            {
                "stocks/AMZN": {"companyName": "Amazon (root)", "sector": "Retail", "marketCap": 2e12},
                "stocks/AMZN/stats/profile": {"companyName": "Amazon (profile)", "sector": "Retail", "marketCap": 1e12},
            },
            delays={"stocks/AMZN": 0.05},
        )

        record = await MetadataResolver(store).resolve("AMZN")

        assert record.company_name == "Amazon (root)"

    @pytest.mark.asyncio
    async def test_incomplete_root_falls_through(self):
        store = InMemoryDocumentStore({
            "stocks/TSLA": {"companyName": "Tesla"},
            "stocks/TSLA/stats/profile": {"companyName": "Tesla, Inc.", "sector": "Automotive", "market_cap": "700B"},
        })

        record = await MetadataResolver(store).resolve("TSLA")

        assert record.company_name == "Tesla, Inc."
        assert record.market_cap == "700B"

    @pytest.mark.asyncio
    async def test_missing_everywhere_is_not_found(self):
        store = InMemoryDocumentStore({
            "stocks/TSLA": {"companyName": "Tesla"},
            "stocks/TSLA/stats/profile": {"sector": "Automotive"},
        })

        with pytest.raises(NotFoundError) as exc_info:
            await MetadataResolver(store).resolve("TSLA")

        assert exc_info.value.entity == "metadata"
        assert exc_info.value.symbol == "TSLA"
        assert exc_info.value.context["paths_checked"] == ["stocks/TSLA", "stocks/TSLA/stats/profile"]

    @pytest.mark.asyncio
    async def test_custom_candidate_paths(self):
        store = InMemoryDocumentStore({
            "companies/GOOGL": {"companyName": "Alphabet", "sector": "Technology", "marketCap": 2.1e12},
        })
        params = MetadataParams(candidate_paths=("stocks/{symbol}", "companies/{symbol}"))

        record = await MetadataResolver(store, params).resolve("GOOGL")

        assert record.company_name == "Alphabet"
        assert record.market_cap == "2.10T"
