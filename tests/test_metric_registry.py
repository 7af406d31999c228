"""Metric catalog lookups and display formatting."""

from adsight.core.metric_registry import (
    dimension_label,
    display_kind,
    format_metric,
    metric_keys_for,
    metric_label,
)
from adsight.models.report_rows import DatasetKind


class TestFormatting:
    def test_percent_scales_fraction_once(self):
        assert format_metric(0.0523, "percent") == "5.2%"

    def test_currency(self):
        assert format_metric(1234.5, "currency") == "$1,234.50"
        assert format_metric(10, "currency", currency="€") == "€10.00"

    def test_ratio_and_number(self):
        assert format_metric(4, "ratio") == "4.00x"
        assert format_metric(12345.6) == "12,346"
        assert format_metric(2.25, "decimal") == "2.2"

    def test_zero(self):
        assert format_metric(0, "currency") == "0"


class TestLookups:
    def test_display_kinds(self):
        assert display_kind("ctr") == "percent"
        assert display_kind("cost") == "currency"
        assert display_kind("roas") == "ratio"
        assert display_kind("impr") == "number"
        assert display_kind("campaign") == "number"

    def test_labels(self):
        assert metric_label("convRate") == "Conversion Rate"
        assert metric_label("mystery") == "mystery"
        assert dimension_label("searchTerm") == "Search Term"
        assert dimension_label("matchType") == "MatchType"

    def test_allow_lists(self):
        assert "cvr" in metric_keys_for(DatasetKind.LANDING_PAGES)
        assert "convRate" not in metric_keys_for(DatasetKind.LANDING_PAGES)
        assert "impr" in metric_keys_for(DatasetKind.SEARCH_TERMS)
        assert metric_keys_for(DatasetKind.CAMPAIGN_STATUS) == frozenset()
