"""AdSight — KPI Engine.

Derives CTR, conversion rate, CPA, ROAS and CPC from a row's base counters.
Every zero denominator yields 0. Rates are returned as 0–1 fractions;
scaling to percent happens only at display time.
"""

from typing import Iterable, List, Tuple

from adsight.models.analysis_models import DerivedMetrics, DerivedRow, MetricTotals
from adsight.models.report_rows import MetricRow, MetricVariant
from adsight.core.logging import get_logger

logger = get_logger("analyzer.kpi")

# (impressions, clicks, cost, conversions, value) field names per variant
COUNTER_FIELDS = {
    MetricVariant.STANDARD: ("impr", "clicks", "cost", "conv", "value"),
    MetricVariant.LANDING_PAGE: ("impressions", "clicks", "cost", "conversions", "value"),
}


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def base_counters(row: MetricRow) -> Tuple[int, int, float, float, float]:
    """Read (impressions, clicks, cost, conversions, value) from any metric row."""
    fields = COUNTER_FIELDS[row.variant]
    impressions, clicks, cost, conversions, value = (getattr(row, f) for f in fields)
    return impressions, clicks, cost, conversions, value


def compute_ratios(
    impressions: float, clicks: float, cost: float, conversions: float, value: float
) -> DerivedMetrics:
    """Compute the five ratios from raw counters."""
    return DerivedMetrics(
        ctr=_ratio(clicks, impressions),
        conv_rate=_ratio(conversions, clicks),
        cpa=_ratio(cost, conversions),
        roas=_ratio(value, cost),
        cpc=_ratio(cost, clicks),
    )


def derive_metrics(row: MetricRow) -> DerivedRow:
    """Augment a single row with its derived ratios."""
    return DerivedRow(row=row, metrics=compute_ratios(*base_counters(row)))


def derive_all(rows: Iterable[MetricRow]) -> List[DerivedRow]:
    """Derive every row, preserving order and count."""
    derived = [derive_metrics(r) for r in rows]
    logger.debug(f"Derived metrics for {len(derived)} rows")
    return derived


def calculate_totals(rows: Iterable[MetricRow]) -> MetricTotals:
    """Sum the counters of a collection and derive ratios from the sums."""
    impressions = clicks = 0
    cost = conversions = value = 0.0
    for r in rows:
        i, c, s, cv, v = base_counters(r)
        impressions += i
        clicks += c
        cost += s
        conversions += cv
        value += v

    return MetricTotals(
        impressions=impressions,
        clicks=clicks,
        cost=cost,
        conversions=conversions,
        value=value,
        metrics=compute_ratios(impressions, clicks, cost, conversions, value),
    )
