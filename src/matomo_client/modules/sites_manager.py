"""SitesManager module: create, read, update and delete tracked sites."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .base import ReportingModule


class SitesManagerModule(ReportingModule):
    name = "SitesManager"

    def get_all_sites(self, **extra) -> Any:
        return self._call("getAllSites", extra=extra)

    def get_site_from_id(self, id_site: int | str | None = None, **extra) -> Any:
        return self._call("getSiteFromId", {"idSite": id_site}, extra)

    def add_site(
        self,
        site_name: str,
        urls: list[str] | str | None = None,
        ecommerce: bool | None = None,
        site_search: bool | None = None,
        timezone: str | None = None,
        currency: str | None = None,
        group: str | None = None,
        start_date: str | None = None,
        excluded_ips: list[str] | str | None = None,
        excluded_query_parameters: list[str] | str | None = None,
        keep_url_fragments: bool | None = None,
        type: str | None = None,
        setting_values: Mapping[str, Any] | None = None,
        **extra,
    ) -> Any:
        """
        Register a new site.

        Args:
            site_name: Display name.
            urls: Main URL followed by alias URLs.
            setting_values: Plugin measurable settings, sent as embedded JSON.

        Returns:
            The new site id (as returned by the remote).
        """
        return self._call(
            "addSite",
            {
                "siteName": site_name,
                "urls": urls,
                "ecommerce": ecommerce,
                "siteSearch": site_search,
                "timezone": timezone,
                "currency": currency,
                "group": group,
                "startDate": start_date,
                "excludedIps": excluded_ips,
                "excludedQueryParameters": excluded_query_parameters,
                "keepURLFragments": keep_url_fragments,
                "type": type,
                "settingValues": setting_values,
            },
            extra,
        )

    def update_site(
        self,
        id_site: int | str,
        site_name: str | None = None,
        urls: list[str] | str | None = None,
        ecommerce: bool | None = None,
        site_search: bool | None = None,
        timezone: str | None = None,
        currency: str | None = None,
        group: str | None = None,
        setting_values: Mapping[str, Any] | None = None,
        **extra,
    ) -> Any:
        """Change a site's settings; only the arguments given are sent."""
        return self._call(
            "updateSite",
            {
                "idSite": id_site,
                "siteName": site_name,
                "urls": urls,
                "ecommerce": ecommerce,
                "siteSearch": site_search,
                "timezone": timezone,
                "currency": currency,
                "group": group,
                "settingValues": setting_values,
            },
            extra,
        )

    def delete_site(self, id_site: int | str, **extra) -> Any:
        return self._call("deleteSite", {"idSite": id_site}, extra)
