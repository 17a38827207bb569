"""
Response decoding and fault classification.

No I/O occurs here; all functions are pure transformations of strings and
decoded values to support easy unit testing.

Decoding is split in two steps:

- :func:`decode_body` turns the raw body into a value for the requested
  format (structured for ``json``, verbatim text otherwise).
- :func:`classify_result` inspects a decoded value and raises
  :class:`ApiError` when it carries the remote's fault shape
  (``{"result": "error", "message": ...}``).
"""

from __future__ import annotations

import json
from typing import Any

from .config import BODY_EXCERPT_CHARS, STRUCTURED_FORMATS, TEXT_FORMATS
from .errors import ApiError, DecodeError


def _excerpt(body: str) -> str:
    return body[:BODY_EXCERPT_CHARS]


def decode_body(body: str, format: str) -> Any:
    """
    Decode a response body according to its response format.

    Args:
        body: Response text.
        format: Effective response format of the call.

    Returns:
        Parsed JSON value for ``json``; ``body`` unchanged for text formats.

    Raises:
        DecodeError: The body is not valid JSON, or the format is unknown.
    """
    if format in TEXT_FORMATS:
        return body

    if format in STRUCTURED_FORMATS:
        try:
            return json.loads(body)
        except json.JSONDecodeError as exc:
            raise DecodeError(
                f"Response is not valid JSON ({exc.msg} at position {exc.pos}).",
                format=format,
                body=_excerpt(body),
            ) from exc

    raise DecodeError(f"No decoder for response format '{format}'.", format=format)


def is_error_payload(value: Any) -> bool:
    """Return ``True`` if ``value`` matches the remote's fault shape."""
    return isinstance(value, dict) and value.get("result") == "error"


def classify_result(value: Any, method: str | None = None) -> Any:
    """
    Separate a success payload from a remote-reported fault.

    Args:
        value: Decoded JSON value.
        method: Remote method name, attached to the raised error.

    Returns:
        ``value`` unchanged when it is a success payload.

    Raises:
        ApiError: ``value`` is ``{"result": "error", ...}``; the remote's
                  message is carried verbatim.
    """
    if is_error_payload(value):
        message = value.get("message")
        raise ApiError("" if message is None else str(message), method=method)
    return value


def parse_response(body: str, format: str, method: str | None = None) -> Any:
    """
    Decode a body and, for structured formats, classify it.

    Text formats are never classified: the remote's fault shape is only
    recognisable in JSON.

    Raises:
        DecodeError: See :func:`decode_body`.
        ApiError: See :func:`classify_result`.
    """
    value = decode_body(body, format)
    if format in STRUCTURED_FORMATS:
        return classify_result(value, method)
    return value


def split_bulk_response(value: Any, expected: int) -> list:
    """
    Validate the decoded reply of a bulk exchange.

    Args:
        value: Decoded (and already classified) JSON reply.
        expected: Number of calls carried by the envelope.

    Returns:
        The reply as a list with exactly ``expected`` items.

    Raises:
        DecodeError: The reply is not a list or has the wrong length.
    """
    if not isinstance(value, list):
        raise DecodeError(
            f"Bulk reply must be a JSON array, got {type(value).__name__}.",
            body=_excerpt(json.dumps(value, default=str)),
        )
    if len(value) != expected:
        raise DecodeError(
            f"Bulk reply has {len(value)} items for {expected} queued calls.",
            body=_excerpt(json.dumps(value, default=str)),
        )
    return value
