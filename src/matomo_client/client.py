"""
Client facade: one object exposing every module over a shared dispatcher.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict
from typing import Any

import requests

from .batch import BatchRequest
from .config import DEFAULT_FORMAT, DEFAULT_TIMEOUT_SECONDS, ClientConfig, load_config_from_env
from .executor import CoreClient
from .modules import (
    ActionsModule,
    ApiModule,
    ScheduledReportsModule,
    SitesManagerModule,
    VisitsSummaryModule,
    bind_modules,
)


class ReportingClient:
    """
    Matomo Reporting API client.

    Args:
        url: Base address of the Matomo instance.
        token_auth: API authentication token.
        id_site: Default site id for calls that do not pass one.
        format: Default response format.
        language: Default ``language`` parameter.
        timeout: Seconds allowed per HTTP exchange.
        security_mode: POST parameters (default) instead of GET.
        session: Optional ``requests.Session`` to send through.

    Raises:
        ConfigurationError: ``url`` or ``token_auth`` missing, or another
            setting invalid.

    Usage::

        client = ReportingClient("https://analytics.example.org", token, id_site=1)
        client.visits_summary.get(period="day", date="today")

        batch = client.prepare_requests()
        visits = batch.visits_summary.get(period="day", date="today")
        version = batch.api.get_matomo_version()
        batch.flush()
    """

    api: ApiModule
    actions: ActionsModule
    scheduled_reports: ScheduledReportsModule
    sites_manager: SitesManagerModule
    visits_summary: VisitsSummaryModule

    def __init__(
        self,
        url: str,
        token_auth: str,
        id_site: int | str | None = None,
        format: str = DEFAULT_FORMAT,
        language: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        security_mode: bool = True,
        session: requests.Session | None = None,
    ) -> None:
        self.config = ClientConfig(
            url=url,
            token_auth=token_auth,
            id_site=id_site,
            format=format,
            language=language,
            timeout=timeout,
            security_mode=security_mode,
        )
        self.core = CoreClient(self.config, session=session)
        bind_modules(self, self.core)

    @classmethod
    def from_env(cls, session: requests.Session | None = None, **overrides) -> ReportingClient:
        """Build a client from ``MATOMO_*`` environment variables."""
        config = load_config_from_env(**overrides)
        return cls(**asdict(config), session=session)

    def __enter__(self) -> ReportingClient:
        return self

    def __exit__(self, *_exc) -> None:
        self.close()

    def close(self) -> None:
        self.core.close()

    def execute(
        self,
        method: str,
        params: Mapping[str, Any] | None = None,
        *,
        format: str | None = None,
    ) -> Any:
        """Call any remote method by name; see :meth:`CoreClient.execute`."""
        return self.core.execute(method, params, format=format)

    def prepare_requests(self) -> BatchRequest:
        """Start a batch sharing this client's connection settings."""
        return self.core.prepare_requests()
