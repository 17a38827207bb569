"""
Fault taxonomy for the reporting client.

Every failure surfaced by the client is a :class:`MatomoError`.  The
``category`` attribute gives a stable string for callers that branch on the
kind of failure rather than the class:

  configuration     → required settings missing at construction time
  timeout           → the exchange exceeded the configured timeout
  transport         → connection failure or non-success HTTP status
  api_error         → the remote answered, but reported a logical failure
  invalid_response  → the body could not be decoded in the requested format

The client never retries.  Whether a failed call may be re-submitted is a
property of the remote method, so that decision stays with the caller.
"""

from __future__ import annotations


class MatomoError(Exception):
    """Base class for every fault raised by the client."""

    category = "other"


class ConfigurationError(MatomoError, ValueError):
    """Required configuration was missing or invalid when building a client."""

    category = "configuration"


class TransportError(MatomoError):
    """
    The physical exchange did not complete.

    Raised for connection errors, timeouts, and non-2xx HTTP statuses.  When
    the exchange carried a batch, every call in that batch receives the same
    instance.

    Attributes:
        status_code: HTTP status of the response, or ``None`` when no
            response was received.
        timed_out: ``True`` when the exchange exceeded the timeout.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        timed_out: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.timed_out = timed_out

    @property
    def category(self) -> str:  # type: ignore[override]
        return "timeout" if self.timed_out else "transport"


class ApiError(MatomoError):
    """
    The remote reported a logical failure for a method or batch item.

    Attributes:
        message: Error text exactly as returned by the remote.
        method: Remote method the failure belongs to, when known.
    """

    category = "api_error"

    def __init__(self, message: str, *, method: str | None = None) -> None:
        prefix = f"{method}: " if method else ""
        super().__init__(f"Matomo API error: {prefix}{message}")
        self.message = message
        self.method = method


class DecodeError(MatomoError):
    """
    The response body could not be read in the requested format.

    Attributes:
        format: Response format that was being decoded.
        body: Leading excerpt of the offending body.
    """

    category = "invalid_response"

    def __init__(self, message: str, *, format: str = "json", body: str = "") -> None:
        super().__init__(message)
        self.format = format
        self.body = body
