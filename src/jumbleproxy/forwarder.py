"""Generic pass-through forwarding for non-GitHub targets.

The Forwarder receives an httpx.AsyncClient via constructor injection; the
lifespan owns the client lifecycle. Successful upstream responses are streamed
back untouched; failed ones are replaced by a short plain-text message so the
upstream error body never reaches the browser.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import structlog
from starlette.responses import PlainTextResponse, Response, StreamingResponse

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Mapping

    from starlette.datastructures import MutableHeaders
    from starlette.requests import Request

    from jumbleproxy.config import ForwarderSettings

log = structlog.get_logger()

# Hop-by-hop headers describe a single connection and are never relayed
HOP_BY_HOP_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
})

# httpx derives these from the target URL and the buffered body
_DERIVED_REQUEST_HEADERS = frozenset({b"host", b"content-length", b"transfer-encoding"})


def build_forward_http_client(settings: ForwarderSettings) -> httpx.AsyncClient:
    """Create the shared httpx client for proxied requests. Called once at startup."""
    return httpx.AsyncClient(
        follow_redirects=settings.follow_redirects,
        timeout=httpx.Timeout(settings.timeout_seconds),
    )


def merge_response_headers(target: MutableHeaders, upstream: httpx.Headers) -> None:
    """Append upstream headers to ``target``, additively.

    A name/value pair already present in ``target`` is skipped, so a header
    the proxy already set (e.g. ``Access-Control-Allow-Origin: *``) is never
    duplicated. Hop-by-hop headers are dropped.
    """
    for name, value in upstream.multi_items():
        if name.lower() in HOP_BY_HOP_HEADERS:
            continue
        if value in target.getlist(name):
            continue
        target.append(name, value)


def _error_response(message: str, status_code: int, headers: Mapping[str, str]) -> Response:
    return PlainTextResponse(message, status_code=status_code, headers=dict(headers))


class Forwarder:
    """Relay an inbound request to an arbitrary target URL."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def forward(
        self,
        request: Request,
        site: str,
        headers: Mapping[str, str],
    ) -> Response:
        """Forward ``request`` to ``site`` and build the client-facing response.

        ``headers`` are set on every response before anything from upstream
        is merged in. Transport failures become 502; upstream statuses >= 400
        are mapped to a synthetic message with the same status.
        """
        # Raw byte pairs, so non-ASCII values reach upstream unchanged
        outbound_headers = [
            (name, value)
            for name, value in request.headers.raw
            if name.lower() not in _DERIVED_REQUEST_HEADERS
        ]
        body = await request.body()

        try:
            outbound = self._client.build_request(
                request.method,
                site,
                headers=outbound_headers,
                content=body or None,
            )
        except httpx.InvalidURL:
            log.warning("proxy_invalid_url", url=site, exc_info=True)
            return _error_response("Failed to create request", 500, headers)

        try:
            upstream = await self._client.send(outbound, stream=True)
        except httpx.HTTPError as exc:
            log.error(
                "proxy_error",
                url=site,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return _error_response(f"proxy request failed: {exc}", 502, headers)

        status = upstream.status_code
        if status >= 400:
            await upstream.aclose()
            return self._failure_response(site, status, headers)

        log.info("proxy_success", url=site, status_code=status)

        response = StreamingResponse(
            _relay_body(upstream, site),
            status_code=status,
            headers=dict(headers),
        )
        merge_response_headers(response.headers, upstream.headers)
        return response

    def _failure_response(
        self, site: str, status: int, headers: Mapping[str, str]
    ) -> Response:
        if status == 429:
            log.error("proxy_rate_limited", url=site, status_code=status)
            return _error_response(f"Rate limit exceeded for site {site}", 429, headers)
        if status == 403:
            log.error("proxy_access_denied", url=site, status_code=status)
            return _error_response(f"Access forbidden for site {site}", 403, headers)
        if status == 503:
            log.error("proxy_service_unavailable", url=site, status_code=status)
            return _error_response(
                f"Service temporarily unavailable for site {site}", 503, headers
            )
        log.error("proxy_upstream_error", url=site, status_code=status)
        return _error_response(f"Request failed for site {site}", status, headers)


async def _relay_body(upstream: httpx.Response, site: str) -> AsyncIterator[bytes]:
    """Stream the upstream body as received, without decoding."""
    try:
        async for chunk in upstream.aiter_raw():
            yield chunk
    except httpx.HTTPError:
        # Status and headers are already on the wire; all we can do is log.
        log.error("proxy_body_copy_error", url=site, exc_info=True)
    finally:
        await upstream.aclose()
