"""Tests for the Raydium pool directory client."""

import httpx
import pytest
from solders.pubkey import Pubkey

from model.errors import DecodeError, NetworkError, NotFoundError
from model.providers.raydium_api_provider import RaydiumAPIProvider
from utils.pool_utils import parse_pool

from fakes import pool_json

POOLS_URL = "https://api.raydium.io/v2/sdk/liquidity/mainnet.json"


def api_provider(handler) -> RaydiumAPIProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RaydiumAPIProvider(POOLS_URL, http_client=client)


class TestParsePool:
    """Tests for parse_pool."""

    def test_maps_fields(self):
        entry = pool_json()
        pool = parse_pool(entry)

        assert pool.id == Pubkey.from_string(entry["id"])
        assert pool.base_vault == Pubkey.from_string(entry["baseVault"])
        assert pool.lookup_table_account == Pubkey.from_string(entry["lookupTableAccount"])
        assert pool.version == 4
        assert pool.market_version == 3
        assert pool.base_decimals == 6

    def test_bad_address(self):
        entry = pool_json()
        entry["quoteMint"] = "not-an-address"

        with pytest.raises(DecodeError):
            parse_pool(entry)

    def test_missing_field(self):
        entry = pool_json()
        del entry["marketBids"]

        with pytest.raises(DecodeError, match="marketBids"):
            parse_pool(entry)


class TestRaydiumAPIProvider:
    """Tests for RaydiumAPIProvider."""

    @pytest.mark.asyncio
    async def test_fetch_pools(self):
        official = [pool_json(), pool_json()]
        unofficial = [pool_json()]

        def handler(request):
            assert str(request.url) == POOLS_URL
            return httpx.Response(200, json={"name": "Raydium Mainnet Liquidity Pools",
                                             "official": official, "unOfficial": unofficial})

        pools = await api_provider(handler).fetch_pools()

        assert pools.name == "Raydium Mainnet Liquidity Pools"
        assert len(pools.official) == 2
        assert len(pools.unofficial) == 1
        assert [str(p.id) for p in pools.all_pools()] == [p["id"] for p in official + unofficial]

    @pytest.mark.asyncio
    async def test_non_200_is_error(self):
        provider = api_provider(lambda request: httpx.Response(503))

        with pytest.raises(NetworkError, match="status_code=503"):
            await provider.fetch_pools()

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        provider = api_provider(lambda request: httpx.Response(200, content=b"<html>"))

        with pytest.raises(DecodeError):
            await provider.fetch_pools()

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("dns failure", request=request)

        with pytest.raises(NetworkError):
            await api_provider(handler).fetch_pools()

    @pytest.mark.asyncio
    async def test_find_pool_in_unofficial(self):
        target = str(Pubkey.new_unique())
        body = {"name": "pools", "official": [pool_json()], "unOfficial": [pool_json(target)]}
        provider = api_provider(lambda request: httpx.Response(200, json=body))

        pool = await provider.find_pool(target)

        assert str(pool.id) == target

    @pytest.mark.asyncio
    async def test_find_pool_not_found(self):
        body = {"name": "pools", "official": [pool_json()], "unOfficial": []}
        provider = api_provider(lambda request: httpx.Response(200, json=body))
        missing = str(Pubkey.new_unique())

        with pytest.raises(NotFoundError, match=missing):
            await provider.find_pool(missing)
