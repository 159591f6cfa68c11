"""Tests for oracle_client.py - HTTP fetch against an in-process server."""

import asyncio

import aiohttp
import orjson
import pytest
from aiohttp import web
from aiohttp import test_utils

from oracledash.errors import TransportFailure
from oracledash.oracle_client import OracleClient

RECORDS = [
    {
        "base": "ETH",
        "quote": "USD",
        "priceE8": 300000000000,
        "confidenceBP": 9800,
        "timestamp": 1000,
        "prediction5m": "3050.00",
    }
]


def make_app(seen_requests):
    async def handle_price(request: web.Request) -> web.Response:
        seen_requests.append(request)
        return web.Response(
            status=200,
            content_type="application/json",
            body=orjson.dumps(RECORDS),
        )

    async def handle_error(request: web.Request) -> web.Response:
        return web.Response(status=503, text="unavailable")

    async def handle_garbage(request: web.Request) -> web.Response:
        return web.Response(status=200, content_type="application/json", text="{not json")

    async def handle_slow(request: web.Request) -> web.Response:
        await asyncio.sleep(0.5)
        return web.Response(status=200, body=b"[]")

    async def handle_object(request: web.Request) -> web.Response:
        return web.Response(status=200, content_type="application/json", text='{"a": 1}')

    app = web.Application()
    app.router.add_get("/price", handle_price)
    app.router.add_get("/error", handle_error)
    app.router.add_get("/garbage", handle_garbage)
    app.router.add_get("/slow", handle_slow)
    app.router.add_get("/object", handle_object)
    return app


class TestOracleClient:
    """Tests for OracleClient.fetch."""

    @pytest.mark.asyncio
    async def test_fetch_decodes_array(self):
        seen = []
        async with test_utils.TestServer(make_app(seen)) as server:
            async with OracleClient(str(server.make_url("/price"))) as client:
                payload = await client.fetch()

        assert payload == RECORDS
        assert len(seen) == 1
        assert seen[0].method == "GET"
        assert seen[0].query_string == ""
        assert "Authorization" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_non_2xx_is_transport_failure(self):
        async with test_utils.TestServer(make_app([])) as server:
            async with OracleClient(str(server.make_url("/error"))) as client:
                with pytest.raises(TransportFailure, match="HTTP 503"):
                    await client.fetch()

    @pytest.mark.asyncio
    async def test_bad_json_is_transport_failure(self):
        async with test_utils.TestServer(make_app([])) as server:
            async with OracleClient(str(server.make_url("/garbage"))) as client:
                with pytest.raises(TransportFailure, match="Invalid JSON") as exc_info:
                    await client.fetch()
            assert isinstance(exc_info.value.__cause__, orjson.JSONDecodeError)

    @pytest.mark.asyncio
    async def test_timeout_is_transport_failure(self):
        async with test_utils.TestServer(make_app([])) as server:
            async with OracleClient(str(server.make_url("/slow")), timeout_s=0.1) as client:
                with pytest.raises(TransportFailure, match="Timed out") as exc_info:
                    await client.fetch()
            assert isinstance(exc_info.value.__cause__, asyncio.TimeoutError)

    @pytest.mark.asyncio
    async def test_non_array_body_returned_as_is(self):
        """Test shape checking is left to the normalizer."""
        async with test_utils.TestServer(make_app([])) as server:
            async with OracleClient(str(server.make_url("/object"))) as client:
                assert await client.fetch() == {"a": 1}

    @pytest.mark.asyncio
    async def test_connection_error_is_transport_failure(self):
        async with test_utils.TestServer(make_app([])) as server:
            url = str(server.make_url("/price"))
        # Server is closed now
        async with OracleClient(url, timeout_s=1.0) as client:
            with pytest.raises(TransportFailure) as exc_info:
                await client.fetch()
        assert isinstance(exc_info.value.__cause__, aiohttp.ClientError)

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        client = OracleClient("http://127.0.0.1:1/price")
        await client.close()
        await client.close()
