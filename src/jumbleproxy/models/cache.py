from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class PreviewCacheEntry(BaseModel):
    """Rendered preview document for a single target URL."""

    url: str  # Raw target URL (primary key)
    content: bytes  # Rendered HTML, UTF-8
    fetched_at: datetime
    expires_at: datetime
