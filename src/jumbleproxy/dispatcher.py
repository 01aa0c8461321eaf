"""Route handler for ``GET /sites/{site}``.

Sets the CORS headers on every response, then sends GitHub URLs down the
cached preview path and everything else through the Forwarder.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from starlette.responses import HTMLResponse, PlainTextResponse

import jumbleproxy.preview as h_preview
from jumbleproxy.classifier import is_matching_host
from jumbleproxy.errors import ProxyError

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

    from jumbleproxy.state import AppState

log = structlog.get_logger()

ALLOW_METHODS = "GET"
ALLOW_HEADERS = "Content-Type, Authorization"
PREVIEW_FAILED_MESSAGE = "Failed to generate the GitHub Open Graph HTML response"


def cors_headers(allow_origin: str) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": allow_origin or "*",
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
    }


async def dispatch(request: Request) -> Response:
    """Proxy the URL carried in the ``site`` path parameter."""
    state: AppState = request.app.state.proxy
    headers = cors_headers(state.settings.cors.allow_origin)

    site: str = request.path_params["site"]
    log.info("fetching_site", site=site, method=request.method)

    if not is_matching_host(site):
        return await state.forwarder.forward(request, site, headers)

    try:
        content = await h_preview.handle(site, state)
    except ProxyError as exc:
        log.warning(
            "preview_error",
            site=site,
            code=exc.code,
            message=exc.message,
            recoverable=exc.recoverable,
        )
        return PlainTextResponse(exc.message, status_code=exc.status_code, headers=headers)
    except Exception:
        log.error("preview_unexpected_error", site=site, exc_info=True)
        return PlainTextResponse(PREVIEW_FAILED_MESSAGE, status_code=500, headers=headers)

    return HTMLResponse(content, status_code=200, headers=headers)
