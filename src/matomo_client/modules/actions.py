"""Actions module: page URLs and titles, downloads, outlinks, site search."""

from __future__ import annotations

from typing import Any

from .base import ReportingModule


class ActionsModule(ReportingModule):
    name = "Actions"

    def _page_report(
        self,
        action: str,
        period: str,
        date: str,
        id_site: int | str | None,
        segment: str | None,
        expanded: bool | None,
        flat: bool | None,
        id_subtable: int | str | None,
        depth: int | None,
        extra: dict,
    ) -> Any:
        return self._call(
            action,
            {
                "idSite": id_site,
                "period": period,
                "date": date,
                "segment": segment,
                "expanded": expanded,
                "flat": flat,
                "idSubtable": id_subtable,
                "depth": depth,
            },
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
        """Totals for pageviews, downloads, outlinks and searches."""
        return self._call(
            "get",
            {
                "idSite": id_site,
                "period": period,
                "date": date,
                "segment": segment,
                "columns": columns,
            },
            extra,
        )

    def get_page_urls(
        self,
        period: str,
        date: str,
        id_site: int | str | None = None,
        segment: str | None = None,
        expanded: bool | None = None,
        flat: bool | None = None,
        id_subtable: int | str | None = None,
        depth: int | None = None,
        **extra,
    ) -> Any:
        """
        Page URL report, as a tree unless ``flat`` is set.

        ``id_subtable`` fetches the children of one row of a previous call.
        """
        return self._page_report(
            "getPageUrls", period, date, id_site, segment,
            expanded, flat, id_subtable, depth, extra,
        )

    def get_page_titles(
        self,
        period: str,
        date: str,
        id_site: int | str | None = None,
        segment: str | None = None,
        expanded: bool | None = None,
        flat: bool | None = None,
        id_subtable: int | str | None = None,
        depth: int | None = None,
        **extra,
    ) -> Any:
        return self._page_report(
            "getPageTitles", period, date, id_site, segment,
            expanded, flat, id_subtable, depth, extra,
        )

    def get_downloads(
        self,
        period: str,
        date: str,
        id_site: int | str | None = None,
        segment: str | None = None,
        expanded: bool | None = None,
        flat: bool | None = None,
        id_subtable: int | str | None = None,
        **extra,
    ) -> Any:
        return self._page_report(
            "getDownloads", period, date, id_site, segment,
            expanded, flat, id_subtable, None, extra,
        )

    def get_outlinks(
        self,
        period: str,
        date: str,
        id_site: int | str | None = None,
        segment: str | None = None,
        expanded: bool | None = None,
        flat: bool | None = None,
        id_subtable: int | str | None = None,
        **extra,
    ) -> Any:
        return self._page_report(
            "getOutlinks", period, date, id_site, segment,
            expanded, flat, id_subtable, None, extra,
        )

    def get_site_search_keywords(
        self,
        period: str,
        date: str,
        id_site: int | str | None = None,
        segment: str | None = None,
        **extra,
    ) -> Any:
        return self._call(
            "getSiteSearchKeywords",
            {"idSite": id_site, "period": period, "date": date, "segment": segment},
            extra,
        )
