"""Protocol interfaces for swappable components.

The resolver, preview handler and AppState reference these protocols, not the
concrete implementations. This allows:
- Tests to use lightweight in-memory stubs instead of GitHub
- Future backends (e.g. Redis cache) to be swapped without changing handler code
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from jumbleproxy.models.cache import PreviewCacheEntry
    from jumbleproxy.models.github import (
        GitHubCommit,
        GitHubIssue,
        GitHubPullRequest,
        GitHubRelease,
        GitHubRepository,
        GitHubUser,
    )


class MetadataProviderProtocol(Protocol):
    """Interface for the GitHub metadata lookups."""

    async def get_user(self, owner: str) -> GitHubUser | None: ...

    async def get_repository(self, owner: str, repo: str) -> GitHubRepository | None: ...

    async def get_issue(self, owner: str, repo: str, number: int) -> GitHubIssue | None: ...

    async def get_pull_request(
        self, owner: str, repo: str, number: int
    ) -> GitHubPullRequest | None: ...

    async def get_commit(self, owner: str, repo: str, sha: str) -> GitHubCommit | None: ...

    async def get_release_by_tag(
        self, owner: str, repo: str, tag: str
    ) -> GitHubRelease | None: ...


class PreviewCacheProtocol(Protocol):
    """Interface for the rendered-preview cache backend."""

    async def get(self, url: str) -> PreviewCacheEntry | None: ...

    async def put(self, url: str, content: bytes, ttl_seconds: int) -> None: ...

    async def cleanup_expired(self) -> None: ...
