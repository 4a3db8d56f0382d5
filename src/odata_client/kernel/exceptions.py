"""Flat, tagged exception taxonomy for the OData client.

Every failure surfaced by the endpoint caller is a single exception type,
ODataClientException, tagged with an ErrorKind. Callers branch on ``kind``
instead of on a class hierarchy:

- CONNECTION_OPEN: the transport could not be established (proxy failures included)
- SOCKET: low-level socket failure while connecting or reading
- TIMEOUT: the service answered HTTP 408
- UNAUTHORIZED: the service answered HTTP 401
- HTTP_STATUS: any other failing HTTP status
- GENERIC: I/O failure not otherwise classified, or an unknown status
- RESOURCE_RELEASE: closing a stream, writer or connection failed
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Classifies a client failure by its origin."""

    CONNECTION_OPEN = "CONNECTION_OPEN"
    SOCKET = "SOCKET"
    TIMEOUT = "TIMEOUT"
    UNAUTHORIZED = "UNAUTHORIZED"
    HTTP_STATUS = "HTTP_STATUS"
    GENERIC = "GENERIC"
    RESOURCE_RELEASE = "RESOURCE_RELEASE"


class ODataClientException(Exception):
    """Base and only exception raised by the endpoint caller.

    Args:
        message: Human-readable error description.
        kind: The error kind this failure was classified as.
        status_code: HTTP status code, when the failure came from a response.
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.GENERIC,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code
        self.context: dict[str, Any] = context if context is not None else {}

    @property
    def code(self) -> str:
        """Machine-readable error code, the value of ``kind``."""
        return self.kind.value

    @property
    def cause(self) -> BaseException | None:
        """The underlying failure this exception was raised from, if any."""
        return self.__cause__

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self.kind.name}, "
            f"status_code={self.status_code!r}, message={self.message!r})"
        )
