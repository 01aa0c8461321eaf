from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class ResourceKind(StrEnum):
    USER = "user"
    REPOSITORY = "repository"
    ISSUE = "issue"
    PULL_REQUEST = "pull_request"
    RELEASE = "release"
    COMMIT = "commit"
    UNKNOWN = "unknown"


class ResourceDescriptor(BaseModel):
    """What a GitHub URL points at.

    ``kind`` decides which fields carry meaning: ``number`` for issues and
    pull requests, ``sha`` for commits, ``version`` for releases. Unknown
    shapes keep whatever owner/repo could be read from the path.
    """

    model_config = ConfigDict(frozen=True)

    kind: ResourceKind = ResourceKind.UNKNOWN
    owner: str = ""
    repo: str = ""
    number: int = 0
    sha: str = ""
    version: str = ""


class NormalizedPreview(BaseModel):
    """Title, description and image for one Open Graph document."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    body: str = ""
    image_source: str = ""
