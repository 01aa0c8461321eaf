"""Open Graph preview document rendering.

Pure string templating; the same URL and preview always render to the same
document. Every interpolated value is HTML-escaped, so markup in issue bodies
or release notes shows up as text instead of being injected into the page.
"""

from __future__ import annotations

from html import escape
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jumbleproxy.models.resource import NormalizedPreview

SITE_NAME = "GitHub"
IMAGE_WIDTH = 1200
IMAGE_HEIGHT = 630

_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{title}</title>
    <meta property="og:title" content="{title}">
    <meta property="og:description" content="{body}">
    <meta property="og:url" content="{url}">
    <meta property="og:image" content="{image}">
    <meta property="og:image:width" content="{width}">
    <meta property="og:image:height" content="{height}">
    <meta property="og:type" content="website">
    <meta property="og:site_name" content="{site_name}">
</head>
<body>
    <h1>{title}</h1>
    <p>{body}</p>
    <img src="{image}" alt="Preview" style="max-width: 100%; height: auto;">
</body>
</html>"""


def render_preview(raw_url: str, preview: NormalizedPreview) -> str:
    """Render the preview as a minimal HTML page with Open Graph meta tags.

    ``og:url`` is the raw target URL exactly as requested.
    """
    return _TEMPLATE.format(
        title=escape(preview.title),
        body=escape(preview.body),
        url=escape(raw_url),
        image=escape(preview.image_source),
        width=IMAGE_WIDTH,
        height=IMAGE_HEIGHT,
        site_name=SITE_NAME,
    )
