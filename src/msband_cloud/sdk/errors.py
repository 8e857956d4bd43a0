"""
Exceptions raised by the Microsoft Band cloud SDK.

Every error is raised to the immediate caller. Nothing here is logged.
"""

from typing import Optional


class BandError(Exception):
    """Base class for all SDK errors."""


class InvalidPath(BandError, ValueError):
    """Resource path is not a well-formed relative URI reference."""


class EncodingError(BandError, ValueError):
    """Request body could not be serialized as JSON."""


class TransportError(BandError, IOError):
    """Network-level failure while sending or reading a request."""


class AuthError(BandError, RuntimeError):
    """No valid credential could be produced for a request."""


class DecodeError(BandError, ValueError):
    """Response body is not valid JSON or does not fit the target record."""


class HTTPStatusError(BandError):
    """Response status outside the 2xx range.

    The body is never parsed as JSON; ``body`` holds a best-effort text
    excerpt for diagnostics.
    """

    def __init__(
        self,
        status_code: int,
        reason: str = "",
        url: str = "",
        body: str = "",
        response=None,
    ):
        self.status_code = status_code
        self.reason = reason
        self.url = url
        self.body = body
        self.response = response
        super().__init__(self._message())

    def _message(self) -> str:
        msg = f"http request failed: {self.status_code}"
        if self.reason:
            msg += f" {self.reason}"
        if self.url:
            msg += f" ({self.url})"
        if self.body:
            msg += f": {self.body}"
        return msg

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= 500


def body_excerpt(text: Optional[str], limit: int = 200) -> str:
    """Trim a response body for inclusion in an error message."""
    if not text:
        return ""
    text = text.strip()
    if len(text) > limit:
        return text[:limit] + "..."
    return text
