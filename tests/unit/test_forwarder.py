"""Unit tests for forwarder helpers (full request flow lives in integration tests)."""

from __future__ import annotations

import httpx
from starlette.datastructures import MutableHeaders

from jumbleproxy.config import ForwarderSettings
from jumbleproxy.forwarder import _relay_body, build_forward_http_client, merge_response_headers


class TestMergeResponseHeaders:
    def test_adds_new_headers(self) -> None:
        target = MutableHeaders()
        merge_response_headers(target, httpx.Headers({"Content-Type": "text/html", "X": "v"}))
        assert target["content-type"] == "text/html"
        assert target.getlist("x") == ["v"]

    def test_skips_identical_pair(self) -> None:
        target = MutableHeaders({"Access-Control-Allow-Origin": "*"})
        merge_response_headers(target, httpx.Headers({"Access-Control-Allow-Origin": "*"}))
        assert target.getlist("access-control-allow-origin") == ["*"]

    def test_keeps_differing_values_additively(self) -> None:
        target = MutableHeaders({"Vary": "Origin"})
        merge_response_headers(target, httpx.Headers({"Vary": "Accept-Encoding"}))
        assert target.getlist("vary") == ["Origin", "Accept-Encoding"]

    def test_multi_valued_upstream_header(self) -> None:
        target = MutableHeaders()
        upstream = httpx.Headers([("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")])
        merge_response_headers(target, upstream)
        assert target.getlist("set-cookie") == ["a=1", "b=2"]

    def test_drops_hop_by_hop_headers(self) -> None:
        target = MutableHeaders()
        upstream = httpx.Headers({
            "Connection": "keep-alive",
            "Transfer-Encoding": "chunked",
            "Keep-Alive": "timeout=5",
            "ETag": '"abc"',
        })
        merge_response_headers(target, upstream)
        assert "connection" not in target
        assert "transfer-encoding" not in target
        assert "keep-alive" not in target
        assert target["etag"] == '"abc"'


class TestRelayBody:
    async def test_streams_raw_bytes_then_closes_upstream(self) -> None:
        upstream = httpx.Response(200, content=b"chunk")

        chunks = [chunk async for chunk in _relay_body(upstream, "https://example.com")]

        assert b"".join(chunks) == b"chunk"
        assert upstream.is_closed

    async def test_closes_upstream_when_client_stops_early(self) -> None:
        upstream = httpx.Response(200, content=b"chunk")
        relay = _relay_body(upstream, "https://example.com")

        await relay.__anext__()
        await relay.aclose()

        assert upstream.is_closed


class TestBuildForwardHttpClient:
    async def test_defaults(self) -> None:
        client = build_forward_http_client(ForwarderSettings())
        try:
            assert client.follow_redirects is True
            assert client.timeout.read == 30.0
        finally:
            await client.aclose()

    async def test_no_timeout(self) -> None:
        client = build_forward_http_client(
            ForwarderSettings(timeout_seconds=None, follow_redirects=False)
        )
        try:
            assert client.timeout.connect is None
            assert client.follow_redirects is False
        finally:
            await client.aclose()
