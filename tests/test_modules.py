"""
Unit tests for src/matomo_client/modules/ and the ReportingClient facade.

Module methods are checked two ways: against a MagicMock submitter (exact
method name and parameter mapping) and end to end through a CoreClient or a
BatchRequest (wire fields).
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from matomo_client import CallState, PendingCall, ReportingClient
from matomo_client.modules import (
    MODULES,
    ActionsModule,
    ApiModule,
    ScheduledReportsModule,
    SitesManagerModule,
    VisitsSummaryModule,
)

from .conftest import BASE_URL, TOKEN, json_response, sent_fields


@pytest.fixture
def submitter() -> MagicMock:
    return MagicMock()


def _submitted(submitter: MagicMock) -> tuple[str, dict]:
    method, params = submitter.submit.call_args.args
    return method, params


# ---------------------------------------------------------------------------
# Class: method names and parameter mapping
# ---------------------------------------------------------------------------

class TestParameterMapping:

    def test_visits_summary_get(self, submitter):
        VisitsSummaryModule(submitter).get(period="day", date="today", segment="browserCode==FF")
        method, params = _submitted(submitter)

        assert method == "VisitsSummary.get"
        assert params["period"] == "day"
        assert params["date"] == "today"
        assert params["segment"] == "browserCode==FF"
        assert params["idSite"] is None

    @pytest.mark.parametrize(
        "attribute, remote",
        [
            ("get_visits", "VisitsSummary.getVisits"),
            ("get_unique_visitors", "VisitsSummary.getUniqueVisitors"),
            ("get_actions", "VisitsSummary.getActions"),
            ("get_bounce_count", "VisitsSummary.getBounceCount"),
            ("get_sum_visits_length", "VisitsSummary.getSumVisitsLength"),
        ],
    )
    def test_visits_summary_metrics(self, submitter, attribute, remote):
        getattr(VisitsSummaryModule(submitter), attribute)("month", "2024-01-01", id_site=3)
        method, params = _submitted(submitter)
        assert method == remote
        assert params["idSite"] == 3

    def test_actions_page_urls(self, submitter):
        ActionsModule(submitter).get_page_urls("day", "yesterday", flat=True, id_subtable=12)
        method, params = _submitted(submitter)

        assert method == "Actions.getPageUrls"
        assert params["flat"] is True
        assert params["idSubtable"] == 12
        assert params["expanded"] is None

    def test_api_is_plugin_activated(self, submitter):
        ApiModule(submitter).is_plugin_activated("Goals")
        assert _submitted(submitter) == ("API.isPluginActivated", {"pluginName": "Goals"})

    def test_api_processed_report(self, submitter):
        ApiModule(submitter).get_processed_report(
            "UserCountry", "getCountry", "week", "today", api_parameters={"flat": 1}
        )
        method, params = _submitted(submitter)

        assert method == "API.getProcessedReport"
        assert params["apiModule"] == "UserCountry"
        assert params["apiAction"] == "getCountry"
        assert params["apiParameters"] == {"flat": 1}

    def test_get_bulk_request_numbers_urls(self, submitter):
        ApiModule(submitter).get_bulk_request(["?method=A.b", "?method=C.d"])
        method, params = _submitted(submitter)

        assert method == "API.getBulkRequest"
        assert params == {"urls[0]": "?method=A.b", "urls[1]": "?method=C.d"}

    def test_sites_manager_add_site_uses_remote_names(self, submitter):
        SitesManagerModule(submitter).add_site(
            "Shop", urls=["https://shop.example"], ecommerce=True, keep_url_fragments=False
        )
        method, params = _submitted(submitter)

        assert method == "SitesManager.addSite"
        assert params["siteName"] == "Shop"
        assert params["ecommerce"] is True
        assert params["keepURLFragments"] is False

    def test_scheduled_reports_delete(self, submitter):
        ScheduledReportsModule(submitter).delete_report(9)
        assert _submitted(submitter) == ("ScheduledReports.deleteReport", {"idReport": 9})

    def test_extra_keyword_arguments_are_forwarded(self, submitter):
        VisitsSummaryModule(submitter).get("day", "today", showColumns="nb_visits")
        _, params = _submitted(submitter)
        assert params["showColumns"] == "nb_visits"

    def test_returns_whatever_the_submitter_returns(self, submitter):
        submitter.submit.return_value = {"value": "5.0.0"}
        assert ApiModule(submitter).get_matomo_version() == {"value": "5.0.0"}


# ---------------------------------------------------------------------------
# Class: end to end through the dispatcher
# ---------------------------------------------------------------------------

class TestThroughDispatcher:

    def test_absent_arguments_never_reach_the_wire(self, core, session):
        VisitsSummaryModule(core).get("day", "today")
        fields = sent_fields(session)

        assert "segment" not in fields
        assert "columns" not in fields
        assert fields["idSite"] == "1"

    def test_nested_parameters_are_embedded_json(self, core, session):
        ScheduledReportsModule(core).add_report(
            description="Weekly",
            period="week",
            hour=6,
            report_type="email",
            report_format="pdf",
            reports=["VisitsSummary_get", "Actions_get"],
            parameters={"displayFormat": 1, "emailMe": True},
        )
        fields = sent_fields(session)

        assert fields["method"] == "ScheduledReports.addReport"
        assert fields["parameters"] == '{"displayFormat":1,"emailMe":true}'
        assert fields["reports"] == "VisitsSummary_get,Actions_get"

    def test_url_lists_are_comma_delimited(self, core, session):
        SitesManagerModule(core).add_site("Blog", urls=["https://a.example", "https://b.example"])
        assert sent_fields(session)["urls"] == "https://a.example,https://b.example"


# ---------------------------------------------------------------------------
# Class: facade and batch binding
# ---------------------------------------------------------------------------

class TestReportingClient:

    def test_every_module_is_bound(self, session):
        client = ReportingClient(BASE_URL, TOKEN, session=session)
        for attribute, module_cls in MODULES.items():
            module = getattr(client, attribute)
            assert isinstance(module, module_cls)
            assert module.client is client.core

    def test_module_call_returns_decoded_result(self, session):
        session.post.return_value = json_response({"nb_visits": 42})
        client = ReportingClient(BASE_URL, TOKEN, id_site=1, session=session)

        assert client.visits_summary.get(period="day", date="today") == {"nb_visits": 42}
        assert sent_fields(session)["method"] == "VisitsSummary.get"

    def test_execute_calls_any_method(self, session):
        session.post.return_value = json_response({"value": True})
        client = ReportingClient(BASE_URL, TOKEN, session=session)

        assert client.execute("API.isPluginActivated", {"pluginName": "Goals"}) == {"value": True}

    def test_batch_modules_return_pending_calls(self, session):
        session.post.return_value = json_response([{"nb_visits": 3}, {"value": "5.0.0"}])
        client = ReportingClient(BASE_URL, TOKEN, id_site=1, session=session)

        batch = client.prepare_requests()
        visits = batch.visits_summary.get(period="day", date="today")
        version = batch.api.get_matomo_version()

        assert isinstance(visits, PendingCall)
        assert visits.state is CallState.ENQUEUED
        session.post.assert_not_called()

        batch.flush()
        assert visits.result() == {"nb_visits": 3}
        assert version.result() == {"value": "5.0.0"}

    def test_close_leaves_injected_session_open(self, session):
        with ReportingClient(BASE_URL, TOKEN, session=session):
            pass
        session.close.assert_not_called()
