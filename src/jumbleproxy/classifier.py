"""GitHub URL classification.

Pure functions; no I/O. ``classify`` turns a target URL into a
``ResourceDescriptor`` by looking at the number and content of its path
segments; ``is_matching_host`` decides whether a URL takes the preview path
at all.
"""

from __future__ import annotations

import re
from urllib.parse import unquote, urlsplit

from jumbleproxy.errors import ClassificationError
from jumbleproxy.models.resource import ResourceDescriptor, ResourceKind

GITHUB_DOMAINS: tuple[str, ...] = ("github.com", "api.github.com", "gist.github.com")

_NUMBER_RE = re.compile(r"[0-9]+")

_NUMBERED_KINDS: dict[str, ResourceKind] = {
    "issues": ResourceKind.ISSUE,
    "pull": ResourceKind.PULL_REQUEST,
}


def is_matching_host(url: str) -> bool:
    """Return True if the URL mentions a GitHub domain anywhere, ignoring case.

    This is a substring check on the whole string, not a host parse: a URL
    whose query string contains ``github.com`` matches too.
    """
    lowered = url.lower()
    return any(domain in lowered for domain in GITHUB_DOMAINS)


def classify(raw_url: str) -> ResourceDescriptor:
    """Classify a GitHub URL by its path shape.

    ``/owner`` is a user, ``/owner/repo`` a repository,
    ``/owner/repo/{issues,pull,commit}/<id>`` an issue, pull request or commit,
    and ``/owner/repo/releases/tag/<version>`` a release. Anything else is
    ``unknown`` with best-effort owner/repo.

    Raises ClassificationError when the URL cannot be parsed or an issue/pull
    number is not a positive integer.
    """
    try:
        path = unquote(urlsplit(raw_url).path, errors="strict")
    except ValueError as exc:
        raise ClassificationError(
            f"invalid URL {raw_url!r}: {exc}",
            ResourceDescriptor(),
        ) from exc

    path = path.strip("/")
    if not path:
        return ResourceDescriptor()

    parts = path.split("/")

    match len(parts):
        case 1:
            return ResourceDescriptor(kind=ResourceKind.USER, owner=parts[0])
        case 2:
            return ResourceDescriptor(kind=ResourceKind.REPOSITORY, owner=parts[0], repo=parts[1])
        case 4:
            return _classify_sub_resource(parts)
        case 5:
            owner, repo, section = parts[0], parts[1], parts[2]
            if section != "releases":
                return ResourceDescriptor(owner=owner, repo=repo)
            return ResourceDescriptor(
                kind=ResourceKind.RELEASE,
                owner=owner,
                repo=repo,
                version=parts[4],
            )
        case _:
            return ResourceDescriptor()


def _classify_sub_resource(parts: list[str]) -> ResourceDescriptor:
    """Handle ``owner/repo/<section>/<id>`` paths."""
    owner, repo, section, ident = parts

    if section == "commit":
        return ResourceDescriptor(kind=ResourceKind.COMMIT, owner=owner, repo=repo, sha=ident)

    kind = _NUMBERED_KINDS.get(section)
    if kind is None:
        return ResourceDescriptor(owner=owner, repo=repo)

    number = int(ident) if _NUMBER_RE.fullmatch(ident) else 0
    if number <= 0:
        raise ClassificationError(
            f"invalid {kind} number {ident!r}",
            ResourceDescriptor(owner=owner, repo=repo),
        )
    return ResourceDescriptor(kind=kind, owner=owner, repo=repo, number=number)
