"""
Request construction and single-call execution.

:class:`CoreClient` performs exactly one HTTP exchange per :meth:`execute`
call: encode the parameters, merge the connection defaults, send, decode,
classify.  It holds no per-call state, so one instance may be shared by any
number of threads.

Design notes:
- Call-supplied parameters always win over connection defaults
  (``idSite``, ``language``, ``format``).  ``module``, ``method`` and
  ``token_auth`` are routing fields and cannot be supplied per call.
- No retries.  Re-submitting a write method is not safe in general, so a
  failed exchange is surfaced to the caller once.
- Exception messages never include request URLs: in GET mode the token is
  part of the query string.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import requests
from loguru import logger

from .config import (
    API_MODULE,
    FORMAT_KEY,
    LANGUAGE_KEY,
    METHOD_KEY,
    MODULE_KEY,
    ROUTING_KEYS,
    SITE_KEY,
    SUPPORTED_FORMATS,
    TOKEN_KEY,
    ClientConfig,
)
from .encoder import EncodedValue, encode_params, to_wire_fields
from .errors import TransportError
from .parser import parse_response

if TYPE_CHECKING:
    from .batch import BatchRequest


# ---------------------------------------------------------------------------
# Request construction
# ---------------------------------------------------------------------------

def apply_call_defaults(
    config: ClientConfig,
    encoded: Mapping[str, EncodedValue],
) -> dict[str, EncodedValue]:
    """
    Merge the connection's per-call defaults under already-encoded params.

    Defaults (``idSite``, ``language``) are only added when the call did
    not supply the key.

    Args:
        config: Connection configuration.
        encoded: Output of :func:`encoder.encode_params`.

    Returns:
        New dict: defaults first, then the call's own parameters.
    """
    merged: dict[str, EncodedValue] = {}
    if config.id_site is not None and SITE_KEY not in encoded:
        merged[SITE_KEY] = config.id_site
    if config.language and LANGUAGE_KEY not in encoded:
        merged[LANGUAGE_KEY] = config.language
    merged.update(encoded)
    return merged


def build_request_fields(
    config: ClientConfig,
    method: str,
    params: Mapping[str, Any] | None = None,
) -> tuple[str, list[tuple[str, str]]]:
    """
    Construct the full wire form of one API call.

    Args:
        config: Connection configuration.
        method: Dot-namespaced remote method, e.g. ``'VisitsSummary.get'``.
        params: Call parameters (absent values are dropped).

    Returns:
        Tuple of (effective format, ordered ``(key, value)`` string pairs).

    Raises:
        ValueError: ``params`` sets a routing field, or requests an
                    unsupported format.
        TypeError: A parameter value cannot be encoded.
    """
    encoded = encode_params(params)

    reserved = sorted(key for key in encoded if key in ROUTING_KEYS and key != FORMAT_KEY)
    if reserved:
        raise ValueError(
            f"Parameters {reserved} are set by the client and cannot be passed "
            f"to '{method}'."
        )

    fmt = str(encoded.pop(FORMAT_KEY, config.format))
    if fmt not in SUPPORTED_FORMATS:
        raise ValueError(
            f"Unsupported response format '{fmt}' for '{method}'. "
            f"Expected one of: {', '.join(sorted(SUPPORTED_FORMATS))}."
        )

    request: dict[str, EncodedValue] = {
        MODULE_KEY: API_MODULE,
        METHOD_KEY: method,
        FORMAT_KEY: fmt,
        TOKEN_KEY: config.token_auth,
    }
    request.update(apply_call_defaults(config, encoded))
    return fmt, to_wire_fields(request)


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

class CoreClient:
    """
    Dispatcher for single Matomo API calls.

    Args:
        config: Connection configuration (validated at construction).
        session: Optional ``requests.Session`` to send through.  When omitted
            the client creates one and closes it in :meth:`close`.

    Usage::

        core = CoreClient(ClientConfig(url="https://analytics.example.org",
                                       token_auth="...", id_site=1))
        core.execute("VisitsSummary.get", {"period": "day", "date": "today"})
    """

    def __init__(
        self,
        config: ClientConfig,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()

    def __enter__(self) -> CoreClient:
        return self

    def __exit__(self, *_exc) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self._session.close()

    def _send(self, method: str, fields: list[tuple[str, str]]) -> requests.Response:
        config = self.config
        try:
            if config.security_mode:
                response = self._session.post(
                    config.endpoint, data=fields, timeout=config.timeout
                )
            else:
                response = self._session.get(
                    config.endpoint, params=fields, timeout=config.timeout
                )
            response.raise_for_status()
        except requests.Timeout as exc:
            raise TransportError(
                f"Request for '{method}' timed out after {config.timeout}s.",
                timed_out=True,
            ) from exc
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise TransportError(
                f"HTTP {status} from {config.url} for '{method}'.",
                status_code=status,
            ) from exc
        except requests.RequestException as exc:
            raise TransportError(
                f"Could not reach {config.url} for '{method}' ({type(exc).__name__})."
            ) from exc
        return response

    def execute(
        self,
        method: str,
        params: Mapping[str, Any] | None = None,
        *,
        format: str | None = None,
    ) -> Any:
        """
        Perform one API call and return its decoded result.

        Args:
            method: Dot-namespaced remote method name.
            params: Call parameters.
            format: Response format for this call only; defaults to the
                    connection's format.  A ``format`` key in ``params`` is
                    accepted too, but must not disagree with this argument.

        Returns:
            Structured value for ``json``; raw text for text formats.

        Raises:
            ValueError: Empty method name, invalid routing parameters, or
                        conflicting format overrides.
            TransportError: Connection failure, timeout, or non-2xx status.
            ApiError: The remote reported an error for this call.
            DecodeError: The body could not be decoded.
        """
        if not method or not method.strip():
            raise ValueError("A remote method name is required.")

        if format is not None:
            params = dict(params or {})
            requested = params.get(FORMAT_KEY)
            if requested is not None and requested != format:
                raise ValueError(
                    f"Conflicting formats for '{method}': "
                    f"format={format!r} but params['format']={requested!r}."
                )
            params[FORMAT_KEY] = format

        fmt, fields = build_request_fields(self.config, method, params)
        logger.debug("Dispatching {} (format={}, {} fields)", method, fmt, len(fields))

        start = time.monotonic()
        response = self._send(method, fields)
        latency = time.monotonic() - start
        logger.debug(
            "{} answered HTTP {} in {:.3f}s", method, response.status_code, latency
        )

        return parse_response(response.text, fmt, method)

    # Shared submission capability: modules call ``submit`` on either a
    # CoreClient or a BatchRequest.
    submit = execute

    def prepare_requests(self) -> BatchRequest:
        """Start a batch whose calls are sent through this client."""
        # Deferred import to avoid circular dependency at module load time
        from .batch import BatchRequest  # noqa: PLC0415

        return BatchRequest(self)
