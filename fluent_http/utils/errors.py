"""
fluent_http/utils/errors.py

WHAT THIS FILE IS FOR
---------------------
The single error hierarchy raised by the library.

- TransportError   -> network / connection failure during send()
- EncodingError    -> a body could not be serialized to JSON
- DecodingError    -> a response body is not the JSON a view asked for
- StatusCodeError  -> status outside an explicitly accepted set

Every error derives from FluentHttpError so callers can catch the
whole family in one place.

HTTP 4xx/5xx responses are NOT errors unless the caller opted in with
accepted status codes. Callers inspect `status_code` themselves.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from fluent_http.messages.response import Response


class FluentHttpError(Exception):
    """Base class for all library errors."""


class TransportError(FluentHttpError):
    """Raised when the request never produced an HTTP response."""

    def __init__(self, reason: str, *, method: Optional[str] = None, url: Optional[str] = None):
        super().__init__(f"HTTP request failed: {reason}")
        self.reason = reason
        self.method = method
        self.url = url


class EncodingError(FluentHttpError, ValueError):
    """Raised when a body structure cannot be serialized to JSON text."""


class DecodingError(FluentHttpError, ValueError):
    """Raised when a response body cannot be decoded into the requested JSON view."""

    def __init__(self, message: str, *, body: str = ""):
        super().__init__(message)
        self.body = body


class StatusCodeError(FluentHttpError):
    """Raised when a response status is outside the accepted status codes."""

    def __init__(self, response: "Response", accepted: frozenset[int]):
        super().__init__(
            f"Unexpected status {response.status_code} (accepted: {', '.join(str(c) for c in sorted(accepted))})"
        )
        self.response = response
        self.accepted = accepted
