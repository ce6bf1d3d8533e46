"""
Unit tests for the upstream HTTP client and the explorer/market fetchers.
"""

import asyncio

import httpx
import pytest

from vscache.core.config import NetworkContext
from vscache.core.exceptions import (
    ConfigurationError,
    MalformedUpstreamDataError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
)
from vscache.core.types import Network
from vscache.upstream import ExplorerFetcher, MarketDataFetcher, UpstreamClient

EXPLORER = "https://testnet-explorer.test"
CTX = NetworkContext(network=Network.TESTNET, explorer_url=EXPLORER + "/", rpc_url=None)


def _recording(responder, seen):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return responder(request)

    return handler


class TestUpstreamClient:
    @pytest.mark.asyncio
    async def test_fetch_json(self, make_http_client):
        seen = []
        client = UpstreamClient(
            make_http_client(_recording(lambda r: httpx.Response(200, json={"ok": True}), seen))
        )

        assert await client.fetch_json("https://api.test/x") == {"ok": True}
        assert seen[0].headers["accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_non_2xx_is_failure(self, make_http_client):
        client = UpstreamClient(make_http_client(lambda r: httpx.Response(503, text="maintenance")))

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await client.fetch_json("https://api.test/x")

        error = exc_info.value
        assert error.status_code == 503
        assert error.body == "maintenance"
        assert error.url == "https://api.test/x"
        assert error.is_server_error()
        assert not error.is_rate_limited()

    @pytest.mark.asyncio
    async def test_rate_limited(self, make_http_client):
        client = UpstreamClient(make_http_client(lambda r: httpx.Response(429, text="slow down")))

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await client.fetch_json("https://api.test/x")
        assert exc_info.value.is_rate_limited()

    @pytest.mark.asyncio
    async def test_error_body_is_truncated(self, make_http_client):
        client = UpstreamClient(make_http_client(lambda r: httpx.Response(500, text="x" * 10_000)))

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await client.fetch_json("https://api.test/x")
        assert len(exc_info.value.body) == 2048

    @pytest.mark.asyncio
    async def test_timeout(self, make_http_client):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = UpstreamClient(make_http_client(handler), timeout=0.5)

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await client.fetch_json("https://api.test/x")
        assert exc_info.value.timed_out is True
        assert "0.5" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_stalled_response_hits_total_timeout(self, make_http_client):
        async def handler(request):
            await asyncio.sleep(5)
            return httpx.Response(200, json={"ok": True})

        client = UpstreamClient(make_http_client(handler), timeout=0.2)

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await client.fetch_json("https://api.test/x")
        assert exc_info.value.timed_out is True

    @pytest.mark.asyncio
    async def test_trickling_body_hits_total_timeout(self):
        body = b'{"ok": true}'

        async def trickle(reader, writer):
            try:
                await reader.readuntil(b"\r\n\r\n")
                writer.write(
                    b"HTTP/1.1 200 OK\r\n"
                    b"Content-Type: application/json\r\n"
                    b"Content-Length: " + str(len(body)).encode() + b"\r\n\r\n"
                )
                await writer.drain()
                for i in range(len(body)):
                    writer.write(body[i : i + 1])
                    await writer.drain()
                    await asyncio.sleep(0.3)
            except (ConnectionError, asyncio.IncompleteReadError):
                pass
            finally:
                writer.close()

        server = await asyncio.start_server(trickle, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        http = httpx.AsyncClient(trust_env=False)
        client = UpstreamClient(http, timeout=1.0)
        loop = asyncio.get_running_loop()
        started = loop.time()
        try:
            with pytest.raises(UpstreamUnavailableError) as exc_info:
                await client.fetch_json(f"http://127.0.0.1:{port}/slow")
        finally:
            await http.aclose()
            server.close()

        assert exc_info.value.timed_out is True
        assert loop.time() - started < 2.5

    @pytest.mark.asyncio
    async def test_connection_error(self, make_http_client):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = UpstreamClient(make_http_client(handler))

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await client.fetch_json("https://api.test/x")
        assert exc_info.value.timed_out is False

    @pytest.mark.asyncio
    async def test_non_json_body_is_malformed(self, make_http_client):
        client = UpstreamClient(
            make_http_client(
                lambda r: httpx.Response(200, text="<html/>", headers={"content-type": "text/html"})
            )
        )

        with pytest.raises(MalformedUpstreamDataError, match="text/html"):
            await client.fetch_json("https://api.test/x")

    @pytest.mark.asyncio
    async def test_injected_client_is_not_closed(self, make_http_client):
        http = make_http_client(lambda r: httpx.Response(200, json={}))
        client = UpstreamClient(http)

        await client.close()

        assert not http.is_closed

    @pytest.mark.asyncio
    async def test_owned_client_is_closed(self):
        client = UpstreamClient()
        http = client.http

        await client.close()

        assert http.is_closed


class TestExplorerFetcher:
    @pytest.mark.asyncio
    async def test_balance_request(self, make_http_client):
        seen = []
        upstream = UpstreamClient(
            make_http_client(
                _recording(
                    lambda r: httpx.Response(200, json={"status": "1", "message": "OK", "result": "7"}),
                    seen,
                )
            )
        )

        assert await ExplorerFetcher(upstream).fetch_balance(CTX, "0xABC") == "7"

        url = seen[0].url
        assert f"{url.scheme}://{url.host}{url.path}" == EXPLORER + "/api"
        assert dict(url.params) == {"module": "account", "action": "balance", "address": "0xABC"}

    @pytest.mark.asyncio
    async def test_transactions_pass_limit_as_offset(self, make_http_client):
        seen = []
        upstream = UpstreamClient(
            make_http_client(
                _recording(lambda r: httpx.Response(200, json={"status": "1", "result": []}), seen)
            )
        )

        await ExplorerFetcher(upstream).fetch_transactions(CTX, "0xABC", 3, 25)

        params = dict(seen[0].url.params)
        assert params["action"] == "txlist"
        assert params["page"] == "3"
        assert params["offset"] == "25"

    @pytest.mark.asyncio
    async def test_status_zero_is_rejected(self, make_http_client):
        upstream = UpstreamClient(
            make_http_client(
                lambda r: httpx.Response(
                    200, json={"status": "0", "message": "No transactions found", "result": []}
                )
            )
        )

        with pytest.raises(UpstreamRejectedError) as exc_info:
            await ExplorerFetcher(upstream).fetch_token_list(CTX, "0xABC")

        assert exc_info.value.message == "No transactions found"
        assert exc_info.value.result == []

    @pytest.mark.asyncio
    async def test_v2_address_paths(self, make_http_client):
        seen = []
        upstream = UpstreamClient(
            make_http_client(_recording(lambda r: httpx.Response(200, json={"items": []}), seen))
        )
        explorer = ExplorerFetcher(upstream)

        await explorer.fetch_address_info(CTX, "0xABC")
        await explorer.fetch_address_tokens(CTX, "0xABC")

        assert [r.url.path for r in seen] == ["/v2/addresses/0xABC", "/v2/addresses/0xABC/tokens"]

    @pytest.mark.asyncio
    async def test_missing_base_url_fails_before_request(self, make_http_client):
        seen = []
        upstream = UpstreamClient(make_http_client(_recording(lambda r: httpx.Response(200), seen)))
        ctx = NetworkContext(network=Network.MAINNET, explorer_url=None, rpc_url=None)

        with pytest.raises(ConfigurationError) as exc_info:
            await ExplorerFetcher(upstream).fetch_balance(ctx, "0xABC")

        assert exc_info.value.setting == "VSC_MAINNET_API"
        assert seen == []

    @pytest.mark.asyncio
    async def test_nft_catalogue(self, make_http_client):
        seen = []
        items = [{"name": "Gold NFT", "symbol": "GNFT"}]
        upstream = UpstreamClient(
            make_http_client(_recording(lambda r: httpx.Response(200, json={"items": items}), seen))
        )

        assert await ExplorerFetcher(upstream).fetch_nft_catalogue(CTX) == items
        assert seen[0].url.path == "/v2/tokens"
        assert seen[0].url.params["type"] == "ERC-721"

    @pytest.mark.asyncio
    async def test_nft_catalogue_without_items(self, make_http_client):
        upstream = UpstreamClient(make_http_client(lambda r: httpx.Response(200, json={})))

        assert await ExplorerFetcher(upstream).fetch_nft_catalogue(CTX) == []

    @pytest.mark.asyncio
    async def test_nft_catalogue_items_not_a_list(self, make_http_client):
        upstream = UpstreamClient(make_http_client(lambda r: httpx.Response(200, json={"items": "x"})))

        with pytest.raises(MalformedUpstreamDataError):
            await ExplorerFetcher(upstream).fetch_nft_catalogue(CTX)

    @pytest.mark.asyncio
    async def test_ping(self, make_http_client):
        upstream = UpstreamClient(make_http_client(lambda r: httpx.Response(200, text="ok")))
        assert await ExplorerFetcher(upstream).ping(CTX) is True

    @pytest.mark.asyncio
    async def test_ping_connection_failure(self, make_http_client):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        upstream = UpstreamClient(make_http_client(handler))
        assert await ExplorerFetcher(upstream).ping(CTX) is False


class TestMarketDataFetcher:
    @pytest.mark.asyncio
    async def test_coin_url(self, make_http_client):
        seen = []
        upstream = UpstreamClient(
            make_http_client(_recording(lambda r: httpx.Response(200, json={"id": "vsg"}), seen))
        )
        market = MarketDataFetcher(upstream, "https://market.test/api/v3/", "vitalik-smart-gas")

        assert await market.fetch_coin() == {"id": "vsg"}
        assert str(seen[0].url) == "https://market.test/api/v3/coins/vitalik-smart-gas"
