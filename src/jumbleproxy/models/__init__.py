from __future__ import annotations

from jumbleproxy.models.cache import PreviewCacheEntry
from jumbleproxy.models.github import (
    GitHubCommit,
    GitHubCommitDetail,
    GitHubIssue,
    GitHubPullRequest,
    GitHubRelease,
    GitHubRepository,
    GitHubUser,
)
from jumbleproxy.models.resource import NormalizedPreview, ResourceDescriptor, ResourceKind

__all__ = [
    # resource
    "ResourceKind",
    "ResourceDescriptor",
    "NormalizedPreview",
    # github
    "GitHubUser",
    "GitHubRepository",
    "GitHubIssue",
    "GitHubPullRequest",
    "GitHubCommit",
    "GitHubCommitDetail",
    "GitHubRelease",
    # cache
    "PreviewCacheEntry",
]
