"""Row parsing and coercion."""

import math

from adsight.connectors.sheets.transformer import build_tab_data, parse_rows
from adsight.models.report_rows import (
    DailyRow,
    DatasetKind,
    LandingPageRow,
    to_count,
    to_number,
    to_text,
)


class TestCoercion:
    def test_numbers_parse_or_zero(self):
        assert to_number("12.5") == 12.5
        assert to_number(7) == 7.0
        assert to_number("abc") == 0.0
        assert to_number(None) == 0.0
        assert to_number("") == 0.0
        assert to_number(math.nan) == 0.0
        assert to_number(math.inf) == 0.0

    def test_negative_numbers_are_kept(self):
        assert to_number("-5") == -5.0

    def test_counts_truncate(self):
        assert to_count("12.7") == 12
        assert to_count("n/a") == 0

    def test_text(self):
        assert to_text(None) == ""
        assert to_text(123) == "123"
        assert to_text(123.0) == "123"
        assert to_text("Brand") == "Brand"


class TestRowModels:
    def test_daily_row_from_messy_export(self):
        row = DailyRow.model_validate(
            {
                "campaign": "Brand",
                "campaignId": 123,
                "date": "2025-01-01",
                "impr": "100",
                "clicks": None,
                "cost": "abc",
                "conv": math.nan,
                "value": "12.5",
                "ctr": 0.99,
            }
        )
        assert row.campaign_id == "123"
        assert row.impr == 100
        assert row.clicks == 0
        assert row.cost == 0.0
        assert row.conv == 0.0
        assert row.value == 12.5

    def test_upstream_ratios_are_dropped(self):
        row = LandingPageRow.model_validate({"url": "/a", "cvr": 0.5, "ctr": 0.1})
        record = row.to_record()
        assert "cvr" not in record
        assert "ctr" not in record

    def test_record_uses_export_column_names(self):
        row = DailyRow(campaign="Brand", campaign_id="1", date="2025-01-01")
        record = row.to_record()
        assert record["campaignId"] == "1"
        assert "campaign_id" not in record


class TestTransformer:
    def test_non_objects_are_skipped(self):
        rows = parse_rows(DatasetKind.DAILY, [{"campaign": "A"}, "junk", 3])
        assert len(rows) == 1
        assert isinstance(rows[0], DailyRow)

    def test_tab_data_lookup_by_kind(self, tab_data):
        assert len(tab_data.rows(DatasetKind.DAILY)) == 5
        assert len(tab_data.rows(DatasetKind.SEARCH_TERMS)) == 3
        assert tab_data.rows(DatasetKind.CAMPAIGN_STATUS) == []

    def test_missing_tabs_default_empty(self):
        data = build_tab_data({DatasetKind.DAILY: []})
        assert data.landing_pages == []
        assert data.search_terms == []
