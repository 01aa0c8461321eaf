"""Shared test fixtures for the jumbleproxy test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import aiosqlite
import pytest

from jumbleproxy.cache import PreviewCache
from jumbleproxy.models.github import (
    GitHubCommit,
    GitHubCommitDetail,
    GitHubIssue,
    GitHubPullRequest,
    GitHubRelease,
    GitHubRepository,
    GitHubUser,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

FIXED_NOW = 1_700_000_000.0


class StubProvider:
    """In-memory metadata provider that records every lookup.

    Set an entity attribute to ``None`` to simulate an empty reply, or assign
    an exception to ``error`` to make every lookup raise it.
    """

    def __init__(self) -> None:
        self.user: GitHubUser | None = GitHubUser(
            login="octocat",
            name="The Octocat",
            bio="GitHub mascot",
            avatar_url="https://avatars.githubusercontent.com/u/583231",
        )
        self.repository: GitHubRepository | None = GitHubRepository(
            full_name="octocat/hello-world",
            description="My first repository on GitHub!",
        )
        self.issue: GitHubIssue | None = GitHubIssue(
            number=42, title="Found a bug", body="It crashes on start."
        )
        self.pull_request: GitHubPullRequest | None = GitHubPullRequest(
            number=7, title="Fix the bug", body="Closes #42."
        )
        self.commit: GitHubCommit | None = GitHubCommit(
            sha="fe114c64733d850007f181bb029d9cc2237efe0f",
            commit=GitHubCommitDetail(message="Initial commit"),
        )
        self.release: GitHubRelease | None = GitHubRelease(
            tag_name="v0.1.0", name="First release", body="Release notes"
        )
        self.error: Exception | None = None
        self.calls: list[tuple[object, ...]] = []

    def _record(self, *call: object) -> None:
        self.calls.append(call)
        if self.error is not None:
            raise self.error

    async def get_user(self, owner: str) -> GitHubUser | None:
        self._record("user", owner)
        return self.user

    async def get_repository(self, owner: str, repo: str) -> GitHubRepository | None:
        self._record("repository", owner, repo)
        return self.repository

    async def get_issue(self, owner: str, repo: str, number: int) -> GitHubIssue | None:
        self._record("issue", owner, repo, number)
        return self.issue

    async def get_pull_request(
        self, owner: str, repo: str, number: int
    ) -> GitHubPullRequest | None:
        self._record("pull_request", owner, repo, number)
        return self.pull_request

    async def get_commit(self, owner: str, repo: str, sha: str) -> GitHubCommit | None:
        self._record("commit", owner, repo, sha)
        return self.commit

    async def get_release_by_tag(self, owner: str, repo: str, tag: str) -> GitHubRelease | None:
        self._record("release", owner, repo, tag)
        return self.release


@pytest.fixture()
def stub_provider() -> StubProvider:
    return StubProvider()


@pytest.fixture()
async def cache() -> AsyncGenerator[PreviewCache, None]:
    """PreviewCache backed by an in-memory SQLite database."""
    async with aiosqlite.connect(":memory:") as db:
        preview_cache = PreviewCache(db)
        await preview_cache.init_db()
        yield preview_cache
