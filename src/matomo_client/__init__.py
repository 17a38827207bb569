"""
matomo_client — Python client for the Matomo Reporting API.

Module layout
-------------
config.py    — ClientConfig, wire constants, environment loading
errors.py    — MatomoError taxonomy (configuration, transport, api, decode)
encoder.py   — parameter normalisation and wire flattening
parser.py    — response decoding and fault classification
executor.py  — CoreClient: one HTTP exchange per call
batch.py     — BatchRequest: many calls, one bulk exchange
modules/     — typed call sites (API, Actions, VisitsSummary, ...)
client.py    — ReportingClient facade

Public interface
----------------
Single calls:
    client = ReportingClient(url, token_auth, id_site=1)
    client.visits_summary.get(period="day", date="today")
    client.execute("VisitsSummary.get", {"period": "day", "date": "today"})

Batched calls:
    batch = client.prepare_requests()
    handle = batch.enqueue("API.getMatomoVersion")
    batch.flush(); handle.result()

Logging uses loguru and is disabled by default; enable it with
``logger.enable("matomo_client")``.
"""

from loguru import logger

from .batch import BatchRequest, CallDescriptor, CallState, PendingCall
from .client import ReportingClient
from .config import ClientConfig, load_config_from_env
from .encoder import OMIT
from .errors import (
    ApiError,
    ConfigurationError,
    DecodeError,
    MatomoError,
    TransportError,
)
from .executor import CoreClient
from .modules import Submitter

logger.disable(__name__)

__all__ = [
    # Clients
    "ReportingClient",
    "CoreClient",
    "BatchRequest",
    "PendingCall",
    "CallDescriptor",
    "CallState",
    "Submitter",
    # Configuration
    "ClientConfig",
    "load_config_from_env",
    "OMIT",
    # Errors
    "MatomoError",
    "ConfigurationError",
    "TransportError",
    "ApiError",
    "DecodeError",
]
