"""
Connection configuration, wire constants, and environment loading.

All constants used across the encoder, dispatcher, and batch modules are
centralized here so that configuration is separated from logic.

The remote endpoint is fixed: every physical exchange goes to
``<url>/index.php`` with ``module=API`` and the method name as routing
parameters.  Values below must match what the Matomo Reporting API expects
byte for byte; change them only alongside the server contract.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import ConfigurationError

# ---------------------------------------------------------------------------
# Wire constants
# ---------------------------------------------------------------------------

API_ENDPOINT_PATH = "index.php"
API_MODULE = "API"

# Bulk method used to carry a whole batch in one exchange
BULK_METHOD = "API.getBulkRequest"
BULK_ITEM_KEY = "urls[{index}]"

# Routing / auth field names.  Call parameters never override MODULE_KEY,
# METHOD_KEY or TOKEN_KEY; FORMAT_KEY may be overridden per call.
MODULE_KEY = "module"
METHOD_KEY = "method"
FORMAT_KEY = "format"
TOKEN_KEY = "token_auth"
SITE_KEY = "idSite"
LANGUAGE_KEY = "language"

ROUTING_KEYS: frozenset[str] = frozenset({MODULE_KEY, METHOD_KEY, FORMAT_KEY, TOKEN_KEY})

# Delimiter used when a list of primitives is flattened to one wire value
LIST_DELIMITER = ","

# ---------------------------------------------------------------------------
# Response formats
# ---------------------------------------------------------------------------

DEFAULT_FORMAT = "json"

# Formats decoded into structured values
STRUCTURED_FORMATS: frozenset[str] = frozenset({"json"})
# Formats returned verbatim as text
TEXT_FORMATS: frozenset[str] = frozenset({"xml", "csv", "tsv", "html", "rss"})
SUPPORTED_FORMATS: frozenset[str] = STRUCTURED_FORMATS | TEXT_FORMATS

# ---------------------------------------------------------------------------
# Execution parameters
# ---------------------------------------------------------------------------

DEFAULT_TIMEOUT_SECONDS: float = 30.0  # bound on one physical exchange

# Characters of an undecodable body kept on a DecodeError
BODY_EXCERPT_CHARS: int = 200

# ---------------------------------------------------------------------------
# Environment variables (read by load_config_from_env)
# ---------------------------------------------------------------------------

ENV_URL = "MATOMO_URL"
ENV_TOKEN = "MATOMO_AUTH_TOKEN"
ENV_SITE_ID = "MATOMO_DEFAULT_SITE_ID"
ENV_FORMAT = "MATOMO_FORMAT"
ENV_TIMEOUT = "MATOMO_TIMEOUT"


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable connection settings shared by every call of one client.

    Attributes:
        url: Base address of the Matomo instance, e.g.
            ``'https://analytics.example.org'``.  One trailing slash is
            stripped.
        token_auth: Authentication token sent as ``token_auth``.
        id_site: Default site id merged into calls that do not set ``idSite``.
        format: Default response format (``json``, ``xml``, ``csv``, ``tsv``,
            ``html`` or ``rss``).
        language: Default ``language`` parameter, if any.
        timeout: Seconds allowed for one physical exchange.
        security_mode: ``True`` sends parameters in a POST body so the token
            never appears in URLs or server logs; ``False`` uses GET.

    Raises:
        ConfigurationError: If ``url`` or ``token_auth`` is missing, the
            format is unsupported, or the timeout is not positive.
    """

    url: str
    token_auth: str
    id_site: int | str | None = None
    format: str = DEFAULT_FORMAT
    language: str | None = None
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    security_mode: bool = True

    def __post_init__(self) -> None:
        if not self.url or not str(self.url).strip():
            raise ConfigurationError("A base url is required to build a client.")
        if not self.token_auth:
            raise ConfigurationError("A token_auth is required to build a client.")
        if self.format not in SUPPORTED_FORMATS:
            raise ConfigurationError(
                f"Unsupported response format '{self.format}'. "
                f"Expected one of: {', '.join(sorted(SUPPORTED_FORMATS))}."
            )
        if self.timeout is None or self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout!r}.")

        url = str(self.url).strip()
        if url.endswith("/"):
            url = url[:-1]
        # frozen dataclass: bypass __setattr__ for the normalised value
        object.__setattr__(self, "url", url)

    @property
    def endpoint(self) -> str:
        """Full URL of the API entry point."""
        return f"{self.url}/{API_ENDPOINT_PATH}"


def load_config_from_env(**overrides) -> ClientConfig:
    """
    Build a :class:`ClientConfig` from environment variables.

    ``MATOMO_URL`` and ``MATOMO_AUTH_TOKEN`` are required;
    ``MATOMO_DEFAULT_SITE_ID``, ``MATOMO_FORMAT`` and ``MATOMO_TIMEOUT`` are
    optional.  Keyword ``overrides`` take precedence over the environment.

    Raises:
        ConfigurationError: A required variable is unset, or
            ``MATOMO_TIMEOUT`` is not a number.
    """
    values: dict = {}

    for field_name, env_var in (("url", ENV_URL), ("token_auth", ENV_TOKEN)):
        if field_name in overrides:
            continue
        value = os.getenv(env_var)
        if not value:
            raise ConfigurationError(
                f"Configuration not found. Set the '{env_var}' environment variable."
            )
        values[field_name] = value

    site_id = os.getenv(ENV_SITE_ID)
    if site_id:
        values["id_site"] = site_id

    fmt = os.getenv(ENV_FORMAT)
    if fmt:
        values["format"] = fmt.strip().lower()

    timeout = os.getenv(ENV_TIMEOUT)
    if timeout:
        try:
            values["timeout"] = float(timeout)
        except ValueError as exc:
            raise ConfigurationError(
                f"'{ENV_TIMEOUT}' must be a number of seconds, got '{timeout}'."
            ) from exc

    values.update(overrides)
    return ClientConfig(**values)
