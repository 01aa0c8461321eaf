"""GitHub REST API client used to resolve preview metadata.

All metadata lookups go through a single GitHubClient instance shared across
requests. The client receives an httpx.AsyncClient via constructor injection;
the lifespan owns the client lifecycle. The API token is baked into that
client's default headers once at startup and never logged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar
from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from jumbleproxy import __version__
from jumbleproxy.errors import ErrorCode, ProxyError
from jumbleproxy.models.github import (
    GitHubCommit,
    GitHubIssue,
    GitHubPullRequest,
    GitHubRelease,
    GitHubRepository,
    GitHubUser,
)

if TYPE_CHECKING:
    from jumbleproxy.config import GitHubSettings

log = structlog.get_logger()

GITHUB_API_VERSION = "2022-11-28"

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def build_github_http_client(settings: GitHubSettings) -> httpx.AsyncClient:
    """Create the shared httpx client for the GitHub API. Called once at startup."""
    headers = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": GITHUB_API_VERSION,
        "User-Agent": f"jumbleproxy/{__version__}",
    }
    if settings.token is not None and settings.token.get_secret_value():
        headers["Authorization"] = f"Bearer {settings.token.get_secret_value()}"

    return httpx.AsyncClient(
        base_url=settings.api_url,
        follow_redirects=True,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers=headers,
    )


def _segment(value: str | int) -> str:
    return quote(str(value), safe="")


class GitHubClient:
    """Metadata provider backed by the GitHub REST API.

    Each ``get_*`` method returns the validated entity, or ``None`` when the
    API answers successfully with an empty (``null``) payload. Failures raise
    ProxyError: RESOURCE_NOT_FOUND for 404, UPSTREAM_RATE_LIMITED for
    exhausted quotas, UPSTREAM_FETCH_FAILED for everything else.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def get_user(self, owner: str) -> GitHubUser | None:
        return await self._get(f"/users/{_segment(owner)}", GitHubUser)

    async def get_repository(self, owner: str, repo: str) -> GitHubRepository | None:
        return await self._get(f"/repos/{_segment(owner)}/{_segment(repo)}", GitHubRepository)

    async def get_issue(self, owner: str, repo: str, number: int) -> GitHubIssue | None:
        return await self._get(
            f"/repos/{_segment(owner)}/{_segment(repo)}/issues/{number}", GitHubIssue
        )

    async def get_pull_request(
        self, owner: str, repo: str, number: int
    ) -> GitHubPullRequest | None:
        return await self._get(
            f"/repos/{_segment(owner)}/{_segment(repo)}/pulls/{number}", GitHubPullRequest
        )

    async def get_commit(self, owner: str, repo: str, sha: str) -> GitHubCommit | None:
        return await self._get(
            f"/repos/{_segment(owner)}/{_segment(repo)}/commits/{_segment(sha)}", GitHubCommit
        )

    async def get_release_by_tag(self, owner: str, repo: str, tag: str) -> GitHubRelease | None:
        return await self._get(
            f"/repos/{_segment(owner)}/{_segment(repo)}/releases/tags/{_segment(tag)}",
            GitHubRelease,
        )

    async def _get(self, path: str, model: type[_ModelT]) -> _ModelT | None:
        """GET an API path and validate the JSON reply into ``model``."""
        try:
            response = await self._client.get(path)
        except httpx.HTTPError as exc:
            log.warning("github_request_failed", path=path, error=str(exc))
            raise ProxyError(
                code=ErrorCode.UPSTREAM_FETCH_FAILED,
                message=f"Network error querying GitHub {path}: {exc}",
                recoverable=True,
            ) from exc

        if not response.is_success:
            _raise_for_status(response, path)

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProxyError(
                code=ErrorCode.UPSTREAM_FETCH_FAILED,
                message=f"GitHub returned a non-JSON reply for {path}",
                recoverable=True,
            ) from exc

        if payload is None:
            return None

        try:
            entity = model.model_validate(payload)
        except ValidationError as exc:
            raise ProxyError(
                code=ErrorCode.UPSTREAM_FETCH_FAILED,
                message=f"GitHub returned an unexpected reply for {path}",
                recoverable=False,
            ) from exc

        log.debug("github_request_complete", path=path, status_code=response.status_code)
        return entity


def _raise_for_status(response: httpx.Response, path: str) -> None:
    status = response.status_code

    if status == 404:
        raise ProxyError(
            code=ErrorCode.RESOURCE_NOT_FOUND,
            message=f"GitHub resource not found: {path}",
            recoverable=False,
        )

    rate_limited = status == 429 or (
        status == 403 and response.headers.get("x-ratelimit-remaining") == "0"
    )
    if rate_limited:
        log.warning(
            "github_rate_limited",
            path=path,
            status_code=status,
            reset=response.headers.get("x-ratelimit-reset"),
        )
        raise ProxyError(
            code=ErrorCode.UPSTREAM_RATE_LIMITED,
            message=f"GitHub API rate limit exceeded querying {path}",
            recoverable=True,
        )

    raise ProxyError(
        code=ErrorCode.UPSTREAM_FETCH_FAILED,
        message=f"HTTP {status} querying GitHub {path}",
        recoverable=status >= 500,
    )
