"""Cache-aside handler for GitHub preview documents.

Receives AppState, orchestrates cache lookup / classification / resolution /
rendering / cache write, and returns the rendered document bytes.
No Starlette imports; the dispatcher handles the HTTP wiring.

The lookup and the write are separate steps: two concurrent misses for the
same URL both resolve upstream and both write, and the later write wins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from jumbleproxy.classifier import classify
from jumbleproxy.renderer import render_preview

if TYPE_CHECKING:
    from jumbleproxy.state import AppState


async def handle(site: str, state: AppState) -> bytes:
    """Return the preview document for ``site``, from cache when fresh.

    Raises ProxyError when the URL cannot be classified or resolved.
    """
    log = structlog.get_logger().bind(handler="preview", url=site)

    cached_entry = await state.cache.get(site)
    if cached_entry is not None:
        log.info("cache_hit", expires_at=cached_entry.expires_at.isoformat())
        return cached_entry.content

    log.info("cache_miss_resolving")
    descriptor = classify(site)
    preview = await state.resolver.resolve(descriptor)
    content = render_preview(site, preview).encode("utf-8")

    log.info("preview_rendered", kind=descriptor.kind, content_length=len(content))

    # Store in cache (non-fatal on failure; handled inside PreviewCache)
    await state.cache.put(site, content, ttl_seconds=state.settings.cache.ttl_seconds)

    return content
