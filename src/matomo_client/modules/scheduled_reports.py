"""
ScheduledReports module.

Manage scheduled email reports and generate or send any existing report.
``reports`` and ``parameters`` accept mappings; the encoder embeds them as
JSON text, which is the form the remote stores.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .base import ReportingModule


class ScheduledReportsModule(ReportingModule):
    name = "ScheduledReports"

    def add_report(
        self,
        description: str,
        period: str,
        hour: int,
        report_type: str,
        report_format: str,
        reports: list[str] | Mapping[str, Any],
        parameters: Mapping[str, Any] | str,
        id_site: int | str | None = None,
        id_segment: int | str | None = None,
        evolution_period_for: str | None = None,
        evolution_period_n: int | None = None,
        period_param: str | None = None,
        **extra,
    ) -> Any:
        """
        Create a scheduled report.

        Args:
            description: Report title shown to recipients.
            period: Sending schedule (``day``, ``week``, ``month``, ``never``).
            hour: Hour of day (server time zone) to send at.
            report_type: Delivery channel, usually ``email``.
            report_format: ``html``, ``pdf``, ``csv``, ``tsv``...
            reports: Report unique ids; a list is sent comma-delimited, a
                mapping as JSON.
            parameters: Channel parameters, e.g.
                ``{"displayFormat": 1, "emailMe": True}``.

        Returns:
            Id of the new report.
        """
        return self._call(
            "addReport",
            {
                "idSite": id_site,
                "description": description,
                "period": period,
                "hour": hour,
                "reportType": report_type,
                "reportFormat": report_format,
                "reports": reports,
                "parameters": parameters,
                "idSegment": id_segment,
                "evolutionPeriodFor": evolution_period_for,
                "evolutionPeriodN": evolution_period_n,
                "periodParam": period_param,
            },
            extra,
        )

    def update_report(
        self,
        id_report: int | str,
        description: str,
        period: str,
        hour: int,
        report_type: str,
        report_format: str,
        reports: list[str] | Mapping[str, Any],
        parameters: Mapping[str, Any] | str,
        id_site: int | str | None = None,
        id_segment: int | str | None = None,
        **extra,
    ) -> Any:
        return self._call(
            "updateReport",
            {
                "idReport": id_report,
                "idSite": id_site,
                "description": description,
                "period": period,
                "hour": hour,
                "reportType": report_type,
                "reportFormat": report_format,
                "reports": reports,
                "parameters": parameters,
                "idSegment": id_segment,
            },
            extra,
        )

    def delete_report(self, id_report: int | str, **extra) -> Any:
        return self._call("deleteReport", {"idReport": id_report}, extra)

    def get_reports(
        self,
        id_site: int | str | None = None,
        period: str | None = None,
        id_report: int | str | None = None,
        if_super_user_return_only_super_user_reports: bool | None = None,
        **extra,
    ) -> Any:
        return self._call(
            "getReports",
            {
                "idSite": id_site,
                "period": period,
                "idReport": id_report,
                "ifSuperUserReturnOnlySuperUserReports": (
                    if_super_user_return_only_super_user_reports
                ),
            },
            extra,
        )

    def generate_report(
        self,
        id_report: int | str,
        date: str,
        language: str | None = None,
        output_type: int | str | None = None,
        period: str | None = None,
        report_format: str | None = None,
        parameters: Mapping[str, Any] | str | None = None,
        **extra,
    ) -> Any:
        """Render a report for ``date``; the body format follows ``report_format``."""
        return self._call(
            "generateReport",
            {
                "idReport": id_report,
                "date": date,
                "language": language,
                "outputType": output_type,
                "period": period,
                "reportFormat": report_format,
                "parameters": parameters,
            },
            extra,
        )

    def send_report(
        self,
        id_report: int | str,
        period: str | None = None,
        date: str | None = None,
        force: bool | None = None,
        **extra,
    ) -> Any:
        return self._call(
            "sendReport",
            {"idReport": id_report, "period": period, "date": date, "force": force},
            extra,
        )
