"""SQLite cache for rendered preview documents.

Entries are keyed by the raw target URL and expire after a per-write TTL.
Expired entries read as misses and are removed by ``cleanup_expired``.

All cache operations catch ``aiosqlite.Error`` internally and degrade
gracefully: read failures return ``None`` (treated as cache miss by callers),
write failures are logged and ignored (the freshly rendered document is still
returned to the client). Infrastructure errors never cross the
PreviewCache class boundary.

Concurrent callers share one connection; aiosqlite runs every statement on
the connection's worker thread, so reads and writes are serialised. Two
writers for the same URL simply replace each other (last writer wins).
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import aiosqlite
import structlog

from jumbleproxy.models.cache import PreviewCacheEntry

log = structlog.get_logger()

_CREATE_PREVIEW_TABLE = """
CREATE TABLE IF NOT EXISTS preview_cache (
    url        TEXT PRIMARY KEY,
    content    BLOB NOT NULL,
    fetched_at TEXT NOT NULL,
    expires_at TEXT NOT NULL
)
"""

_CREATE_PREVIEW_INDEX = (
    "CREATE INDEX IF NOT EXISTS idx_preview_expires ON preview_cache(expires_at)"
)


class PreviewCache:
    """SQLite-backed preview cache implementing PreviewCacheProtocol."""

    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db

    async def init_db(self) -> None:
        """Create tables and set WAL mode. Called once at startup."""
        await self._db.execute("PRAGMA journal_mode = WAL")
        await self._db.execute(_CREATE_PREVIEW_TABLE)
        await self._db.execute(_CREATE_PREVIEW_INDEX)
        await self._db.commit()

    async def get(self, url: str) -> PreviewCacheEntry | None:
        """Read a live entry. Returns ``None`` on miss, expiry or read failure."""
        try:
            cursor = await self._db.execute(
                "SELECT url, content, fetched_at, expires_at FROM preview_cache WHERE url = ?",
                (url,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None

            expires_at = datetime.fromisoformat(row[3])
            if datetime.now(UTC) >= expires_at:
                return None

            return PreviewCacheEntry(
                url=row[0],
                content=bytes(row[1]),
                fetched_at=datetime.fromisoformat(row[2]),
                expires_at=expires_at,
            )
        except aiosqlite.Error:
            log.warning("cache_read_error", key=url, exc_info=True)
            return None

    async def put(self, url: str, content: bytes, ttl_seconds: int) -> None:
        """Write an entry, replacing any previous one. Non-fatal on failure."""
        try:
            now = datetime.now(UTC)
            expires_at = now + timedelta(seconds=ttl_seconds)
            await self._db.execute(
                "INSERT OR REPLACE INTO preview_cache (url, content, fetched_at, expires_at) "
                "VALUES (?, ?, ?, ?)",
                (url, content, now.isoformat(), expires_at.isoformat()),
            )
            await self._db.commit()
        except aiosqlite.Error:
            log.warning("cache_write_error", key=url, exc_info=True)

    async def cleanup_expired(self) -> None:
        """Delete every expired entry. Non-fatal on failure."""
        try:
            cutoff = datetime.now(UTC).isoformat()
            cursor = await self._db.execute(
                "DELETE FROM preview_cache WHERE expires_at <= ?", (cutoff,)
            )
            deleted = cursor.rowcount
            await self._db.commit()
            log.info("cache_cleanup_complete", deleted=deleted)
        except aiosqlite.Error:
            log.warning("cache_cleanup_error", exc_info=True)
