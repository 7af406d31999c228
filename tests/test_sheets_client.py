"""Export client against a mocked transport."""

import asyncio

import httpx
import pytest

from adsight.config import settings
from adsight.connectors.sheets.client import SheetsAPIError, SheetsClient
from adsight.models.report_rows import DatasetKind

SHEET_URL = "https://script.example.com/exec"


def _client(handler):
    return SheetsClient(
        sheet_url=SHEET_URL, transport=httpx.MockTransport(handler), retry_base_delay=0
    )


def _run(coro):
    return asyncio.run(coro)


class TestFetchTab:
    def test_tab_param_and_rows(self):
        seen = []

        def handler(request):
            seen.append(request.url.params["tab"])
            return httpx.Response(200, json=[{"campaign": "Brand", "campaignId": "1"}])

        rows = _run(_client(handler).fetch_tab(DatasetKind.SEARCH_TERMS))
        assert seen == ["searchTerms"]
        assert rows == [{"campaign": "Brand", "campaignId": "1"}]

    def test_non_list_payload_is_empty(self):
        def handler(request):
            return httpx.Response(200, json={"error": "no such tab"})

        assert _run(_client(handler).fetch_tab(DatasetKind.DAILY)) == []

    def test_retries_server_errors(self):
        calls = []

        def handler(request):
            calls.append(1)
            if len(calls) < 3:
                return httpx.Response(503)
            return httpx.Response(200, json=[])

        assert _run(_client(handler).fetch_tab(DatasetKind.DAILY)) == []
        assert len(calls) == 3

    def test_retries_rate_limit(self):
        calls = []

        def handler(request):
            calls.append(1)
            if len(calls) == 1:
                return httpx.Response(429)
            return httpx.Response(200, json=[{"campaign": "A"}])

        assert len(_run(_client(handler).fetch_tab(DatasetKind.DAILY))) == 1
        assert len(calls) == 2

    def test_client_errors_are_not_retried(self):
        calls = []

        def handler(request):
            calls.append(1)
            return httpx.Response(404)

        with pytest.raises(SheetsAPIError) as exc:
            _run(_client(handler).fetch_tab(DatasetKind.DAILY))
        assert exc.value.status_code == 404
        assert len(calls) == 1

    def test_retries_exhausted(self):
        def handler(request):
            return httpx.Response(500)

        with pytest.raises(SheetsAPIError) as exc:
            _run(_client(handler).fetch_tab(DatasetKind.DAILY))
        assert exc.value.status_code == 500

    def test_transport_errors(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(SheetsAPIError):
            _run(_client(handler).fetch_tab(DatasetKind.DAILY))

    def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, content=b"<html>login</html>")

        with pytest.raises(SheetsAPIError):
            _run(_client(handler).fetch_tab(DatasetKind.DAILY))

    def test_missing_url(self, monkeypatch):
        monkeypatch.setattr(settings, "sheet_url", "")
        with pytest.raises(SheetsAPIError):
            _run(SheetsClient().fetch_tab(DatasetKind.DAILY))


class TestFetchAllTabs:
    def test_parses_every_tab(self):
        def handler(request):
            tab = request.url.params["tab"]
            if tab == "daily":
                return httpx.Response(
                    200, json=[{"campaign": "Brand", "campaignId": 1, "impr": "10"}]
                )
            if tab == "landingPages":
                return httpx.Response(200, json=[{"url": "/a", "impressions": 5}])
            return httpx.Response(200, json=[])

        data = _run(_client(handler).fetch_all_tabs())
        assert data.daily[0].campaign_id == "1"
        assert data.daily[0].impr == 10
        assert data.landing_pages[0].impressions == 5
        assert data.search_terms == []

    def test_failed_tab_left_empty(self):
        def handler(request):
            if request.url.params["tab"] == "searchTerms":
                return httpx.Response(403)
            return httpx.Response(200, json=[{"campaign": "A"}])

        data = _run(_client(handler).fetch_all_tabs())
        assert data.search_terms == []
        assert len(data.daily) == 1

    def test_all_tabs_failing_raises(self):
        def handler(request):
            return httpx.Response(403)

        with pytest.raises(SheetsAPIError):
            _run(_client(handler).fetch_all_tabs())
