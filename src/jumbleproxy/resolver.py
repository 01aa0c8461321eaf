"""Resource resolution.

Maps a ResourceDescriptor to a NormalizedPreview with one metadata lookup per
resource kind. No knowledge of HTTP routing, caching or HTML.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, assert_never

from jumbleproxy.errors import ErrorCode, ProxyError
from jumbleproxy.models.resource import NormalizedPreview, ResourceKind

if TYPE_CHECKING:
    from collections.abc import Callable

    from jumbleproxy.models.resource import ResourceDescriptor
    from jumbleproxy.protocols import MetadataProviderProtocol

OPENGRAPH_IMAGE_BASE = "https://opengraph.githubassets.com"
SHORT_SHA_LENGTH = 7


def _empty_reply(what: str) -> ProxyError:
    return ProxyError(
        code=ErrorCode.RESOURCE_EMPTY,
        message=f"error getting the GitHub {what}",
        recoverable=True,
    )


class PreviewResolver:
    """Resolve descriptors into preview triples through a metadata provider.

    ``clock`` supplies the Unix time used as the cache-busting component of
    the Open Graph image URL.
    """

    def __init__(
        self,
        provider: MetadataProviderProtocol,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._provider = provider
        self._clock = clock

    def image_base(self, descriptor: ResourceDescriptor) -> str:
        """Return ``<base>/<unix-ts>/<owner>/<repo>`` for the descriptor."""
        return f"{OPENGRAPH_IMAGE_BASE}/{int(self._clock())}/{descriptor.owner}/{descriptor.repo}"

    async def resolve(self, descriptor: ResourceDescriptor) -> NormalizedPreview:
        """Resolve one descriptor. Provider errors propagate unchanged."""
        base = self.image_base(descriptor)
        kind = descriptor.kind

        match kind:
            case ResourceKind.USER:
                return await self._user(descriptor, base)
            case ResourceKind.REPOSITORY:
                return await self._repository(descriptor, base)
            case ResourceKind.ISSUE:
                return await self._issue(descriptor, base)
            case ResourceKind.PULL_REQUEST:
                return await self._pull_request(descriptor, base)
            case ResourceKind.COMMIT:
                return await self._commit(descriptor, base)
            case ResourceKind.RELEASE:
                return await self._release(descriptor, base)
            case ResourceKind.UNKNOWN:
                if descriptor.owner and descriptor.repo:
                    return await self._repository(descriptor, base)
                raise ProxyError(
                    code=ErrorCode.RESOURCE_UNKNOWN,
                    message=f"resource type unknown {kind}",
                    recoverable=False,
                )
            case _:
                assert_never(kind)

    async def _user(self, d: ResourceDescriptor, base: str) -> NormalizedPreview:
        user = await self._provider.get_user(d.owner)
        if user is None:
            raise _empty_reply(f"user {d.owner}")
        return NormalizedPreview(title=user.name or "", body=user.bio or "", image_source=base)

    async def _repository(self, d: ResourceDescriptor, base: str) -> NormalizedPreview:
        repo = await self._provider.get_repository(d.owner, d.repo)
        if repo is None:
            raise _empty_reply(f"repository {d.repo}")
        return NormalizedPreview(
            title=repo.full_name,
            body=repo.description or "",
            image_source=base,
        )

    async def _issue(self, d: ResourceDescriptor, base: str) -> NormalizedPreview:
        issue = await self._provider.get_issue(d.owner, d.repo, d.number)
        if issue is None:
            raise _empty_reply(f"issue #{d.number} from {d.repo} repository")
        return NormalizedPreview(
            title=issue.title,
            body=issue.body or "",
            image_source=f"{base}/issues/{d.number}",
        )

    async def _pull_request(self, d: ResourceDescriptor, base: str) -> NormalizedPreview:
        pr = await self._provider.get_pull_request(d.owner, d.repo, d.number)
        if pr is None:
            raise _empty_reply(f"pull request #{d.number} from {d.repo} repository")
        return NormalizedPreview(
            title=pr.title,
            body=pr.body or "",
            image_source=f"{base}/pull/{d.number}",
        )

    async def _commit(self, d: ResourceDescriptor, base: str) -> NormalizedPreview:
        commit = await self._provider.get_commit(d.owner, d.repo, d.sha)
        if commit is None:
            raise _empty_reply(f"commit {d.sha} from {d.repo} repository")
        short_sha = commit.sha[:SHORT_SHA_LENGTH]
        return NormalizedPreview(
            title=commit.commit.message,
            body=f"{d.owner}/{d.repo}@{short_sha}",
            image_source=f"{base}/commit/{d.sha}",
        )

    async def _release(self, d: ResourceDescriptor, base: str) -> NormalizedPreview:
        release = await self._provider.get_release_by_tag(d.owner, d.repo, d.version)
        if release is None:
            raise _empty_reply(f"release {d.version} from {d.repo} repository")
        return NormalizedPreview(
            title=f"{d.repo} {release.tag_name}",
            body=release.body or "",
            image_source=f"{base}/releases/tag/{d.version}",
        )
