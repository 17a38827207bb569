"""API module: Matomo version, report metadata, and processed reports."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .base import ReportingModule


class ApiModule(ReportingModule):
    name = "API"

    def get_matomo_version(self, **extra) -> Any:
        return self._call("getMatomoVersion", extra=extra)

    def get_php_version(self, **extra) -> Any:
        return self._call("getPhpVersion", extra=extra)

    def get_report_metadata(
        self,
        id_site: int | str | None = None,
        period: str | None = None,
        date: str | None = None,
        hide_metrics_doc: bool | None = None,
        show_subtable_reports: bool | None = None,
        **extra,
    ) -> Any:
        """List the reports available for a site, with their metrics."""
        return self._call(
            "getReportMetadata",
            {
                "idSite": id_site,
                "period": period,
                "date": date,
                "hideMetricsDoc": hide_metrics_doc,
                "showSubtableReports": show_subtable_reports,
            },
            extra,
        )

    def get_processed_report(
        self,
        api_module: str,
        api_action: str,
        period: str,
        date: str,
        id_site: int | str | None = None,
        segment: str | None = None,
        api_parameters: Mapping[str, Any] | str | None = None,
        id_goal: int | str | None = None,
        show_raw_metrics: bool | None = None,
        **extra,
    ) -> Any:
        """
        Fetch a report together with its metadata and formatted metrics.

        ``api_parameters`` may be a mapping; it is sent as embedded JSON.
        """
        return self._call(
            "getProcessedReport",
            {
                "idSite": id_site,
                "period": period,
                "date": date,
                "apiModule": api_module,
                "apiAction": api_action,
                "segment": segment,
                "apiParameters": api_parameters,
                "idGoal": id_goal,
                "showRawMetrics": show_raw_metrics,
            },
            extra,
        )

    def is_plugin_activated(self, plugin_name: str, **extra) -> Any:
        return self._call("isPluginActivated", {"pluginName": plugin_name}, extra)

    def get_bulk_request(self, urls: list[str], **extra) -> Any:
        """
        Call ``API.getBulkRequest`` with hand-built sub-request strings.

        Prefer :meth:`CoreClient.prepare_requests`, which builds the
        sub-requests and splits the reply per call.
        """
        params = {f"urls[{index}]": url for index, url in enumerate(urls)}
        return self._call("getBulkRequest", params, extra)
