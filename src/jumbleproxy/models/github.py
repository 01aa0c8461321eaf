"""Subsets of the GitHub REST API payloads used to build previews.

Unknown fields are ignored. Fields GitHub may return as ``null`` are optional.
"""

from __future__ import annotations

from pydantic import BaseModel


class GitHubUser(BaseModel):
    login: str
    name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None


class GitHubRepository(BaseModel):
    full_name: str
    description: str | None = None


class GitHubIssue(BaseModel):
    number: int
    title: str
    body: str | None = None


class GitHubPullRequest(BaseModel):
    number: int
    title: str
    body: str | None = None


class GitHubCommitDetail(BaseModel):
    message: str = ""


class GitHubCommit(BaseModel):
    sha: str
    commit: GitHubCommitDetail = GitHubCommitDetail()


class GitHubRelease(BaseModel):
    tag_name: str
    name: str | None = None
    body: str | None = None
