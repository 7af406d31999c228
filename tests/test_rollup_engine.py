"""Campaign / ad group / asset group rollups and selection."""

import pytest

from adsight.analyzer.rollup_engine import (
    ALL_ENTITIES_NAME,
    ad_group_summaries,
    aggregate_by_date,
    asset_group_summaries,
    build_summaries,
    campaign_summaries,
    default_selection,
    entity_series,
    metrics_by_date,
    sort_by_date,
    step_selection,
)
from adsight.models.analysis_models import EntitySummary
from adsight.models.report_rows import AdGroupRow, AssetGroupRow, DailyRow


def _daily(campaign_id, name, day, cost, **counters):
    return DailyRow(campaign=name, campaign_id=campaign_id, date=day, cost=cost, **counters)


class TestSummaries:
    def test_costs_summed_and_ranked(self):
        rows = [
            _daily("1", "Brand", "2025-03-10", 50),
            _daily("2", "Generic", "2025-03-10", 120),
            _daily("1", "Brand", "2025-03-11", 40),
        ]
        summaries = campaign_summaries(rows)
        assert [s.id for s in summaries] == ["2", "1"]
        assert summaries[1].total_cost == pytest.approx(90)

    def test_blank_ids_skipped(self):
        rows = [_daily("", "Orphan", "2025-03-10", 500), _daily("  ", "Spaces", "2025-03-10", 5)]
        assert campaign_summaries(rows) == []

    def test_first_name_wins(self):
        rows = [
            _daily("1", "Old Name", "2025-03-10", 1),
            _daily("1", "New Name", "2025-03-11", 1),
        ]
        assert campaign_summaries(rows)[0].name == "Old Name"

    def test_ties_keep_first_seen_order(self):
        rows = [_daily("b", "B", "d", 10), _daily("a", "A", "d", 10), _daily("c", "C", "d", 10)]
        assert [s.id for s in campaign_summaries(rows)] == ["b", "a", "c"]

    def test_ad_groups_scoped_to_campaign(self):
        rows = [
            AdGroupRow(campaign_id="1", ad_group="Exact", ad_group_id="11", cost=30),
            AdGroupRow(campaign_id="1", ad_group="Phrase", ad_group_id="12", cost=60),
            AdGroupRow(campaign_id="2", ad_group="Broad", ad_group_id="21", cost=500),
        ]
        summaries = ad_group_summaries(rows, "1")
        assert [s.id for s in summaries] == ["12", "11"]

    def test_asset_group_status(self):
        rows = [
            AssetGroupRow(campaign_id="2", asset_group="Summer", asset_group_id="31",
                          status="ENABLED", cost=5),
            AssetGroupRow(campaign_id="2", asset_group="Summer", asset_group_id="31",
                          status="PAUSED", cost=5),
        ]
        summary = asset_group_summaries(rows, "2")[0]
        assert summary.status == "ENABLED"
        assert summary.total_cost == pytest.approx(10)

    def test_custom_accessors(self):
        rows = [{"k": 7, "n": "seven", "c": 1.5}, {"k": 7, "n": "other", "c": 2.5}]
        summaries = build_summaries(
            rows, lambda r: r["k"], lambda r: r["n"], cost_of=lambda r: r["c"]
        )
        assert summaries == [EntitySummary(id="7", name="seven", total_cost=4.0)]


class TestSelection:
    summaries = [
        EntitySummary(id="a", name="A", total_cost=30),
        EntitySummary(id="b", name="B", total_cost=20),
        EntitySummary(id="c", name="C", total_cost=10),
    ]

    def test_default_is_highest_cost(self):
        assert default_selection(self.summaries) == "a"

    def test_current_kept_when_listed(self):
        assert default_selection(self.summaries, "b") == "b"
        assert default_selection(self.summaries, "gone") == "a"

    def test_default_on_empty(self):
        assert default_selection([]) is None

    def test_step_with_all_position(self):
        assert step_selection(self.summaries, None, 1, include_all=True) == "a"
        assert step_selection(self.summaries, None, -1, include_all=True) == "c"
        assert step_selection(self.summaries, "c", 1, include_all=True) is None
        assert step_selection(self.summaries, "a", -1, include_all=True) is None
        assert step_selection(self.summaries, "a", 1, include_all=True) == "b"

    def test_step_wraps(self):
        assert step_selection(self.summaries, "c", 1) == "a"
        assert step_selection(self.summaries, "a", -1) == "c"
        assert step_selection(self.summaries, "b", -1) == "a"

    def test_step_single_entry_stays(self):
        single = self.summaries[:1]
        assert step_selection(single, "a", 1) == "a"
        assert step_selection(single, "a", -1) == "a"


class TestTimeSeries:
    def test_all_aggregate(self):
        rows = [
            _daily("1", "Brand", "2025-03-11", 40, impr=800, clicks=80),
            _daily("1", "Brand", "2025-03-10", 50, impr=1000, clicks=100),
            _daily("2", "Generic", "2025-03-10", 120, impr=2000, clicks=100),
        ]
        aggregated = aggregate_by_date(rows)
        assert [r.date for r in aggregated] == ["2025-03-10", "2025-03-11"]
        first = aggregated[0]
        assert first.campaign == ALL_ENTITIES_NAME
        assert first.impr == 3000
        assert first.clicks == 200
        assert first.cost == pytest.approx(170)

    def test_all_aggregate_uses_calendar_order(self):
        rows = [
            _daily("1", "Brand", "2025-03-10", 50),
            _daily("1", "Brand", "2025-3-9", 40),
        ]
        aggregated = aggregate_by_date(rows)
        assert [r.date for r in aggregated] == ["2025-3-9", "2025-03-10"]

    def test_sort_puts_bad_dates_last(self):
        rows = [_daily("1", "x", "oops", 1), _daily("1", "x", "2025-03-02", 1),
                _daily("1", "x", "2025-03-01", 1)]
        assert [r.date for r in sort_by_date(rows)] == ["2025-03-01", "2025-03-02", "oops"]
        assert [r.date for r in sort_by_date(rows, descending=True)] == [
            "2025-03-02", "2025-03-01", "oops"
        ]

    def test_campaign_series_ascending(self):
        rows = [
            _daily("1", "Brand", "2025-03-11", 40),
            _daily("2", "Generic", "2025-03-10", 120),
            _daily("1", "Brand", "2025-03-10", 50),
        ]
        assert [r.date for r in metrics_by_date(rows, "1")] == ["2025-03-10", "2025-03-11"]

    def test_entity_series_descending(self):
        rows = [
            AdGroupRow(ad_group_id="12", date="2025-03-10"),
            AdGroupRow(ad_group_id="12", date="2025-03-11"),
            AdGroupRow(ad_group_id="11", date="2025-03-12"),
        ]
        series = entity_series(rows, "ad_group_id", "12")
        assert [r.date for r in series] == ["2025-03-11", "2025-03-10"]
