from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jumbleproxy.models.resource import ResourceDescriptor


class ErrorCode(StrEnum):
    INVALID_URL = "INVALID_URL"
    RESOURCE_UNKNOWN = "RESOURCE_UNKNOWN"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_EMPTY = "RESOURCE_EMPTY"
    UPSTREAM_RATE_LIMITED = "UPSTREAM_RATE_LIMITED"
    UPSTREAM_FETCH_FAILED = "UPSTREAM_FETCH_FAILED"


_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.INVALID_URL: 400,
    ErrorCode.RESOURCE_UNKNOWN: 400,
    ErrorCode.RESOURCE_NOT_FOUND: 404,
    ErrorCode.RESOURCE_EMPTY: 502,
    ErrorCode.UPSTREAM_RATE_LIMITED: 429,
    ErrorCode.UPSTREAM_FETCH_FAILED: 502,
}


class ProxyError(Exception):
    """Raised by the preview pipeline for all expected failure conditions.

    Caught by the dispatcher and turned into a plain-text HTTP response whose
    status comes from ``status_code``. Never catch this inside business
    logic; let it propagate so the client sees the real cause.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.recoverable = recoverable

    @property
    def status_code(self) -> int:
        return _STATUS_BY_CODE[self.code]


class ClassificationError(ProxyError):
    """A target URL could not be classified.

    ``descriptor`` holds the best-effort classification (always of kind
    ``unknown``) so callers can still inspect the owner and repo.
    """

    def __init__(self, message: str, descriptor: ResourceDescriptor) -> None:
        super().__init__(ErrorCode.INVALID_URL, message, recoverable=False)
        self.descriptor = descriptor
