"""Error taxonomy for nquery.

- InvalidPath: malformed ``-f`` path expression (raised before any request)
- NotFound: a job vanished between listing and full fetch (recoverable)
- AuthError / TransportError: fatal API failures
"""

from __future__ import annotations

from typing import Optional


class NQueryError(Exception):
    """Base class for all nquery errors."""

    pass


class InvalidPath(NQueryError, ValueError):
    """A field path is empty or contains an empty segment."""

    def __init__(self, raw: str, reason: str):
        self.raw = raw
        self.reason = reason
        super().__init__(f"Invalid field path {raw!r}: {reason}")


class NomadError(NQueryError):
    """Error returned while talking to the Nomad HTTP API."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class NotFound(NomadError):
    """The requested job does not exist (anymore)."""

    pass


class AuthError(NomadError):
    """The API rejected our credentials (HTTP 401/403)."""

    pass


class TransportError(NomadError):
    """Connection failure, timeout, bad status, or unreadable body."""

    pass


__all__ = [
    "AuthError",
    "InvalidPath",
    "NQueryError",
    "NomadError",
    "NotFound",
    "TransportError",
]
