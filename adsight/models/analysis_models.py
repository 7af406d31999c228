"""AdSight — Analysis Value Models.

Everything the analyzer engines produce or consume besides raw report rows:
derived rows, rollup summaries, query schema/filters/sorts, token usage and
pricing, date ranges, and the per-request pipeline context.
"""

from datetime import date
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from adsight.core.metric_registry import DERIVED_RECORD_KEYS
from adsight.models.report_rows import MetricRow


# ─────────────────────────────────────────────
# DERIVED METRICS
# ─────────────────────────────────────────────


class DerivedMetrics(BaseModel):
    """Computed efficiency ratios. Rates are 0–1 fractions."""

    model_config = ConfigDict(frozen=True)

    ctr: float = 0.0
    conv_rate: float = 0.0
    cpa: float = 0.0
    roas: float = 0.0
    cpc: float = 0.0


class DerivedRow(BaseModel):
    """A metric row plus its recomputed ratios."""

    model_config = ConfigDict(frozen=True)

    row: MetricRow
    metrics: DerivedMetrics

    def to_record(self) -> dict:
        """Flatten into one dict keyed by export column names."""
        record = self.row.to_record()
        keys = DERIVED_RECORD_KEYS[self.row.variant]
        for field_name, record_key in keys.items():
            record[record_key] = getattr(self.metrics, field_name)
        return record


class MetricTotals(BaseModel):
    """Summed counters for a row collection with ratios derived from the sums."""

    impressions: int = 0
    clicks: int = 0
    cost: float = 0.0
    conversions: float = 0.0
    value: float = 0.0
    metrics: DerivedMetrics = DerivedMetrics()


# ─────────────────────────────────────────────
# ROLLUPS
# ─────────────────────────────────────────────


class EntitySummary(BaseModel):
    """A cost-ranked campaign / ad group / asset group identity."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    total_cost: float = 0.0
    status: Optional[str] = None


# ─────────────────────────────────────────────
# QUERY ENGINE
# ─────────────────────────────────────────────


class ColumnType(str, Enum):
    METRIC = "metric"
    DIMENSION = "dimension"
    DATE = "date"


class ColumnDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    type: ColumnType


class FilterOperator(str, Enum):
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    GREATER_EQUAL = "greater_equal"
    LESS_EQUAL = "less_equal"
    AFTER = "after"
    BEFORE = "before"
    ON_OR_AFTER = "on_or_after"
    ON_OR_BEFORE = "on_or_before"


class OperatorSpec(BaseModel):
    """Catalog entry: operator, display label, legal column types."""

    model_config = ConfigDict(frozen=True)

    value: FilterOperator
    label: str
    types: List[ColumnType]


class FilterClause(BaseModel):
    """One column + operator + literal predicate.

    The operator is kept as a plain string; operators outside the catalog
    pass every row.
    """

    model_config = ConfigDict(frozen=True)

    id: str = ""
    column: str
    operator: str
    value: str = ""

    @field_validator("operator", mode="before")
    @classmethod
    def _operator_text(cls, value):
        return value.value if isinstance(value, Enum) else value


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    column: str
    direction: SortDirection = SortDirection.ASC


class MetricStats(BaseModel):
    min: float
    max: float
    avg: float
    sum: float


class ValueCount(BaseModel):
    value: str
    count: int


class DimensionStats(BaseModel):
    unique_count: int
    top_values: Optional[List[ValueCount]] = None


class DataSummary(BaseModel):
    total_rows: int = 0
    metrics: Dict[str, MetricStats] = {}
    dimensions: Dict[str, DimensionStats] = {}


class QueryResult(BaseModel):
    """Everything the insights surface shows for one dataset query."""

    dataset: str
    columns: List[ColumnDescriptor] = []
    preview: List[dict] = []
    total_rows: int = 0
    filtered_rows: int = 0
    llm_rows: int = 0
    summary: DataSummary = DataSummary()
    filter_descriptions: List[str] = []


# ─────────────────────────────────────────────
# TOKENS & PRICING
# ─────────────────────────────────────────────


class TokenUsage(BaseModel):
    """Token counts for one LLM request. Total defaults to input + output."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: Optional[int] = None
    cost: Optional[float] = None

    @model_validator(mode="after")
    def _default_total(self) -> "TokenUsage":
        if self.total_tokens is None:
            self.total_tokens = self.input_tokens + self.output_tokens
        return self


class ModelPriceEntry(BaseModel):
    """Price per 1,000,000 tokens."""

    model_config = ConfigDict(frozen=True)

    input: float
    output: float


class LLMModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    provider: str
    api_model: str


class InsightRequest(BaseModel):
    """Body of a text-generation request built from a query."""

    prompt: str
    data: List[dict] = []
    data_source: str
    filters: List[str] = []
    total_rows: int = 0
    analyzed_rows: int = 0
    currency: str = "USD"
    provider: str = "openai"
    model: str = ""


class LLMResponse(BaseModel):
    content: str
    usage: Optional[TokenUsage] = None
    provider: str = ""
    model: str = ""


# ─────────────────────────────────────────────
# DATES & CONTEXT
# ─────────────────────────────────────────────


class DateRange(BaseModel):
    """Inclusive calendar-day range."""

    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1


class PipelineContext(BaseModel):
    """Per-request state threaded through every pipeline entry point."""

    model_config = ConfigDict(frozen=True)

    currency: str = "USD"
    date_range: str = "last-30-days"
    custom_start: Optional[date] = None
    custom_end: Optional[date] = None
    today: Optional[date] = None
    campaign_id: Optional[str] = None
    ad_group_id: Optional[str] = None
    asset_group_id: Optional[str] = None
    preview_row_count: int = 5


class DashboardView(BaseModel):
    """Resolved dashboard for one context."""

    currency: str
    date_range: DateRange
    campaigns: List[EntitySummary] = []
    selected_campaign_id: Optional[str] = None
    daily: List[dict] = []
    totals: Optional[MetricTotals] = None
    ad_groups: List[EntitySummary] = []
    selected_ad_group_id: Optional[str] = None
    ad_group_daily: List[dict] = []
    asset_groups: List[EntitySummary] = []
    selected_asset_group_id: Optional[str] = None
    asset_group_daily: List[dict] = []
