"""
VisitsSummary module.

Core web analytics metrics: visits, unique visitors, actions, time on site,
bounces.  Every method takes the same ``period`` / ``date`` / ``id_site`` /
``segment`` arguments.
"""

from __future__ import annotations

from typing import Any

from .base import ReportingModule


class VisitsSummaryModule(ReportingModule):
    name = "VisitsSummary"

    def _metric(
        self,
        action: str,
        period: str,
        date: str,
        id_site: int | str | None,
        segment: str | None,
        extra: dict,
    ) -> Any:
        return self._call(
            action,
            {"idSite": id_site, "period": period, "date": date, "segment": segment},
            extra,
        )

    def get(
        self,
        period: str,
        date: str,
        id_site: int | str | None = None,
        segment: str | None = None,
        columns: list[str] | str | None = None,
        **extra,
    ) -> Any:
        """
        Get all core metrics for a period.

        Args:
            period: ``day``, ``week``, ``month``, ``year`` or ``range``.
            date: ``YYYY-MM-DD``, a range, or a keyword such as ``today``.
            id_site: Site id; the client's default is used when omitted.
            segment: Optional segment definition.
            columns: Restrict the returned metrics.
        """
        return self._metric(
            "get", period, date, id_site, segment, {"columns": columns, **extra}
        )

    def get_visits(self, period, date, id_site=None, segment=None, **extra) -> Any:
        return self._metric("getVisits", period, date, id_site, segment, extra)

    def get_unique_visitors(self, period, date, id_site=None, segment=None, **extra) -> Any:
        return self._metric("getUniqueVisitors", period, date, id_site, segment, extra)

    def get_actions(self, period, date, id_site=None, segment=None, **extra) -> Any:
        return self._metric("getActions", period, date, id_site, segment, extra)

    def get_bounce_count(self, period, date, id_site=None, segment=None, **extra) -> Any:
        return self._metric("getBounceCount", period, date, id_site, segment, extra)

    def get_sum_visits_length(self, period, date, id_site=None, segment=None, **extra) -> Any:
        # seconds; getSumVisitsLengthPretty returns the formatted string
        return self._metric("getSumVisitsLength", period, date, id_site, segment, extra)
