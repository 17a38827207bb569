"""
Shared pytest fixtures for the client tests.

No test touches the network: every client is built around a
``MagicMock(spec=requests.Session)`` whose ``post`` / ``get`` return real
``requests.Response`` objects built by :func:`make_response`.
"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests

from matomo_client import ClientConfig, CoreClient

BASE_URL = "https://analytics.example.org"
ENDPOINT = f"{BASE_URL}/index.php"
TOKEN = "T"
DEFAULT_SITE_ID = 1


# ---------------------------------------------------------------------------
# Response builders
# ---------------------------------------------------------------------------

def make_response(body: str | bytes = "", status: int = 200) -> requests.Response:
    """Build a real ``requests.Response`` carrying ``body``."""
    response = requests.Response()
    response.status_code = status
    response._content = body.encode("utf-8") if isinstance(body, str) else body
    response.encoding = "utf-8"
    response.url = ENDPOINT
    return response


def json_response(payload: Any, status: int = 200) -> requests.Response:
    return make_response(json.dumps(payload), status)


def sent_fields(session: MagicMock, verb: str = "post") -> dict[str, str]:
    """Return the fields of the last request sent through ``session``."""
    call = getattr(session, verb).call_args
    key = "data" if verb == "post" else "params"
    return dict(call.kwargs[key])


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def session() -> MagicMock:
    """Mocked HTTP session answering ``{}`` to any request."""
    mock = MagicMock(spec=requests.Session)
    mock.post.return_value = json_response({})
    mock.get.return_value = json_response({})
    return mock


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(url=BASE_URL, token_auth=TOKEN, id_site=DEFAULT_SITE_ID)


@pytest.fixture
def core(config, session) -> CoreClient:
    return CoreClient(config, session=session)
