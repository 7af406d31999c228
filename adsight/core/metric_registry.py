"""AdSight — Unified Metric Registry.

Defines the canonical set of Google Ads metrics, which of them each dataset
carries, and how columns are labelled. The query engine uses the per-dataset
allow-lists to decide which numeric columns count as metrics.
"""

from enum import Enum
from typing import Dict, FrozenSet

from adsight.models.report_rows import DatasetKind, MetricVariant


class MetricType(str, Enum):
    """How a metric is categorised."""

    VOLUME = "volume"  # Raw counts: impressions, clicks, conversions
    COST = "cost"  # Monetary: cost
    REVENUE = "revenue"  # Conversion value
    DERIVED = "derived"  # Computed by the KPI engine: ctr, cpa, roas


class MetricDefinition:
    """Describes a single metric."""

    def __init__(
        self,
        name: str,
        metric_type: MetricType,
        unit: str = "",
        label: str = "",
        description: str = "",
    ):
        self.name = name
        self.metric_type = metric_type
        self.unit = unit
        self.label = label or name
        self.description = description

    def __repr__(self) -> str:
        return f"<Metric {self.name} ({self.metric_type.value})>"


# ─────────────────────────────────────────────
# GOOGLE ADS METRICS — Canonical Registry
# ─────────────────────────────────────────────

BASE_METRICS: Dict[str, MetricDefinition] = {
    "impr": MetricDefinition(
        "impr", MetricType.VOLUME, "count", "Impressions", "Times the ad was shown"
    ),
    "impressions": MetricDefinition(
        "impressions", MetricType.VOLUME, "count", "Impressions", "Landing page impressions"
    ),
    "clicks": MetricDefinition("clicks", MetricType.VOLUME, "count", "Clicks"),
    "cost": MetricDefinition("cost", MetricType.COST, "currency", "Cost"),
    "conv": MetricDefinition(
        "conv", MetricType.VOLUME, "decimal", "Conversions", "Fractional conversions allowed"
    ),
    "conversions": MetricDefinition(
        "conversions", MetricType.VOLUME, "decimal", "Conversions"
    ),
    "value": MetricDefinition(
        "value", MetricType.REVENUE, "currency", "Conversion Value"
    ),
}

DERIVED_METRICS: Dict[str, MetricDefinition] = {
    "ctr": MetricDefinition("ctr", MetricType.DERIVED, "%", "CTR", "Clicks / Impressions"),
    "convRate": MetricDefinition(
        "convRate", MetricType.DERIVED, "%", "Conversion Rate", "Conversions / Clicks"
    ),
    "cvr": MetricDefinition(
        "cvr", MetricType.DERIVED, "%", "Conversion Rate", "Conversions / Clicks"
    ),
    "cpa": MetricDefinition(
        "cpa", MetricType.DERIVED, "currency", "CPA", "Cost / Conversions"
    ),
    "roas": MetricDefinition(
        "roas", MetricType.DERIVED, "ratio", "ROAS", "Conversion Value / Cost"
    ),
    "cpc": MetricDefinition("cpc", MetricType.DERIVED, "currency", "CPC", "Cost / Clicks"),
}

ALL_METRICS = {**BASE_METRICS, **DERIVED_METRICS}

# Record keys the derived ratios are written under, per counter naming.
DERIVED_RECORD_KEYS: Dict[MetricVariant, Dict[str, str]] = {
    MetricVariant.STANDARD: {
        "ctr": "ctr",
        "conv_rate": "convRate",
        "cpa": "cpa",
        "roas": "roas",
        "cpc": "cpc",
    },
    MetricVariant.LANDING_PAGE: {
        "ctr": "ctr",
        "conv_rate": "cvr",
        "cpa": "cpa",
        "roas": "roas",
        "cpc": "cpc",
    },
}

_STANDARD_KEYS = frozenset(
    ["impr", "clicks", "cost", "conv", "value", "ctr", "convRate", "cpa", "roas", "cpc"]
)
_LANDING_PAGE_KEYS = frozenset(
    ["impressions", "clicks", "cost", "conversions", "value", "ctr", "cvr", "cpa", "roas", "cpc"]
)

DATASET_METRIC_KEYS: Dict[DatasetKind, FrozenSet[str]] = {
    DatasetKind.DAILY: _STANDARD_KEYS,
    DatasetKind.SEARCH_TERMS: _STANDARD_KEYS,
    DatasetKind.AD_GROUPS: _STANDARD_KEYS,
    DatasetKind.ASSET_GROUPS: _STANDARD_KEYS,
    DatasetKind.LANDING_PAGES: _LANDING_PAGE_KEYS,
}

DIMENSION_LABELS: Dict[str, str] = {
    "campaign": "Campaign",
    "campaignId": "Campaign ID",
    "adGroup": "Ad Group",
    "adGroupId": "Ad Group ID",
    "assetGroup": "Asset Group",
    "assetGroupId": "Asset Group ID",
    "searchTerm": "Search Term",
    "keyword": "Keyword",
    "keywordText": "Keyword Text",
    "status": "Status",
    "url": "URL",
}

DATE_FIELD = "date"


# ─────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────


def get_metric(name: str) -> MetricDefinition | None:
    """Look up a metric by record key."""
    return ALL_METRICS.get(name)


def metric_keys_for(kind: DatasetKind) -> FrozenSet[str]:
    """Metric allow-list for a dataset; empty for pass-through datasets."""
    return DATASET_METRIC_KEYS.get(kind, frozenset())


def metric_label(key: str) -> str:
    metric = get_metric(key)
    return metric.label if metric else key


def dimension_label(key: str) -> str:
    if key in DIMENSION_LABELS:
        return DIMENSION_LABELS[key]
    return key[:1].upper() + key[1:]


def format_metric(value: float, kind: str = "number", currency: str = "$") -> str:
    """Format a metric for display.

    Rates are stored as 0–1 fractions; "percent" scales them by 100 here
    and nowhere else.
    """
    if not value:
        return "0"
    if kind == "currency":
        return f"{currency}{value:,.2f}"
    if kind == "percent":
        return f"{value * 100:,.1f}%"
    if kind == "decimal":
        return f"{value:,.1f}"
    if kind == "ratio":
        return f"{value:.2f}x"
    return f"{value:,.0f}"


def display_kind(key: str) -> str:
    """Map a record key to the format_metric kind used to display it."""
    metric = get_metric(key)
    if metric is None:
        return "number"
    if metric.unit == "%":
        return "percent"
    if metric.unit in ("currency", "ratio", "decimal"):
        return metric.unit
    return "number"
