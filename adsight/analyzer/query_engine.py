"""AdSight — Tabular Query Engine.

Works on any list of flat records. The column schema is inferred once from
the first record, then a chain of filter clauses (logical AND), one
optional sort, and two independent row caps (preview and LLM export) are
applied. Nothing here raises on bad data: unparseable numbers become NaN
(which only ``not_equals`` accepts), unknown columns are no-ops.
"""

import math
import uuid
from collections import Counter
from functools import cmp_to_key
from typing import Any, Dict, List, Optional, Sequence

from adsight.analyzer.date_range import parse_day
from adsight.config import settings
from adsight.core.metric_registry import (
    ALL_METRICS,
    DATE_FIELD,
    dimension_label,
    metric_keys_for,
    metric_label,
)
from adsight.models.analysis_models import (
    ColumnDescriptor,
    ColumnType,
    DataSummary,
    DimensionStats,
    FilterClause,
    FilterOperator,
    MetricStats,
    OperatorSpec,
    QueryResult,
    SortDirection,
    SortSpec,
    ValueCount,
)
from adsight.models.report_rows import DatasetKind
from adsight.core.logging import get_logger

logger = get_logger("analyzer.query")

PREVIEW_ROW_CHOICES = (5, 10, 30, 50, 100)
MAX_INSIGHT_ROWS = 1000
TOP_VALUES_UNIQUE_LIMIT = 20
TOP_VALUES_COUNT = 5

M, D, T = ColumnType.METRIC, ColumnType.DIMENSION, ColumnType.DATE

FILTER_OPERATORS: List[OperatorSpec] = [
    OperatorSpec(value=FilterOperator.CONTAINS, label="Contains", types=[D]),
    OperatorSpec(value=FilterOperator.NOT_CONTAINS, label="Does not contain", types=[D]),
    OperatorSpec(value=FilterOperator.EQUALS, label="Equals", types=[M, D, T]),
    OperatorSpec(value=FilterOperator.NOT_EQUALS, label="Not equals", types=[M, D, T]),
    OperatorSpec(value=FilterOperator.STARTS_WITH, label="Starts with", types=[D]),
    OperatorSpec(value=FilterOperator.ENDS_WITH, label="Ends with", types=[D]),
    OperatorSpec(value=FilterOperator.GREATER_THAN, label="Greater than", types=[M]),
    OperatorSpec(value=FilterOperator.LESS_THAN, label="Less than", types=[M]),
    OperatorSpec(
        value=FilterOperator.GREATER_EQUAL, label="Greater than or equals", types=[M]
    ),
    OperatorSpec(
        value=FilterOperator.LESS_EQUAL, label="Less than or equals", types=[M]
    ),
    OperatorSpec(value=FilterOperator.AFTER, label="After", types=[T]),
    OperatorSpec(value=FilterOperator.BEFORE, label="Before", types=[T]),
    OperatorSpec(value=FilterOperator.ON_OR_AFTER, label="On or after", types=[T]),
    OperatorSpec(value=FilterOperator.ON_OR_BEFORE, label="On or before", types=[T]),
]

_OPERATOR_LABELS = {spec.value.value: spec.label for spec in FILTER_OPERATORS}

_NUMERIC_COMPARISONS = {
    FilterOperator.GREATER_THAN.value: lambda a, b: a > b,
    FilterOperator.LESS_THAN.value: lambda a, b: a < b,
    FilterOperator.GREATER_EQUAL.value: lambda a, b: a >= b,
    FilterOperator.LESS_EQUAL.value: lambda a, b: a <= b,
}

_DATE_COMPARISONS = {
    FilterOperator.AFTER.value: lambda a, b: a > b,
    FilterOperator.BEFORE.value: lambda a, b: a < b,
    FilterOperator.ON_OR_AFTER.value: lambda a, b: a >= b,
    FilterOperator.ON_OR_BEFORE.value: lambda a, b: a <= b,
}


# ─────────────────────────────────────────────
# VALUE HELPERS
# ─────────────────────────────────────────────


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_float(value: Any) -> float:
    """Numeric coercion for comparisons: anything unparseable is NaN."""
    if _is_number(value):
        return float(value)
    text = stringify(value).strip()
    if not text:
        return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan


def stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _collate(a: str, b: str) -> int:
    """Locale-style ordering: case-insensitive, lowercase first on ties."""
    left, right = (a.casefold(), a.swapcase()), (b.casefold(), b.swapcase())
    return (left > right) - (left < right)


def compare_values(a: Any, b: Any) -> int:
    if _is_number(a) and _is_number(b):
        return (a > b) - (a < b)
    return _collate(stringify(a), stringify(b))


# ─────────────────────────────────────────────
# SCHEMA
# ─────────────────────────────────────────────


def infer_columns(
    records: Sequence[dict], kind: Optional[DatasetKind] = None
) -> List[ColumnDescriptor]:
    """Classify every key of the first record as date, metric or dimension."""
    if not records:
        return []

    allowed = metric_keys_for(kind) if kind is not None else frozenset(ALL_METRICS)
    columns: List[ColumnDescriptor] = []
    for key, value in records[0].items():
        if key == DATE_FIELD:
            columns.append(ColumnDescriptor(key=key, label="Date", type=ColumnType.DATE))
        elif _is_number(value) and key in allowed:
            columns.append(
                ColumnDescriptor(key=key, label=metric_label(key), type=ColumnType.METRIC)
            )
        else:
            columns.append(
                ColumnDescriptor(
                    key=key, label=dimension_label(key), type=ColumnType.DIMENSION
                )
            )
    return columns


def operators_for(column_type: ColumnType) -> List[OperatorSpec]:
    """Operators legal against a column classification."""
    return [spec for spec in FILTER_OPERATORS if column_type in spec.types]


def default_operator(column: Optional[ColumnDescriptor]) -> str:
    if column is None:
        return FilterOperator.EQUALS.value
    if column.type is ColumnType.DIMENSION:
        return FilterOperator.CONTAINS.value
    if column.type is ColumnType.METRIC:
        return FilterOperator.GREATER_THAN.value
    legal = operators_for(column.type)
    return legal[0].value.value if legal else FilterOperator.EQUALS.value


# ─────────────────────────────────────────────
# FILTERING
# ─────────────────────────────────────────────


def matches(record: dict, clause: FilterClause, column: ColumnDescriptor) -> bool:
    """Evaluate one clause against one record."""
    value = record.get(clause.column)
    row_text = stringify(value).lower()
    needle = clause.value.lower()
    op = clause.operator

    if op == FilterOperator.CONTAINS:
        return needle in row_text
    if op == FilterOperator.NOT_CONTAINS:
        return needle not in row_text
    if op == FilterOperator.STARTS_WITH:
        return row_text.startswith(needle)
    if op == FilterOperator.ENDS_WITH:
        return row_text.endswith(needle)

    if op in (FilterOperator.EQUALS, FilterOperator.NOT_EQUALS):
        if column.type is ColumnType.METRIC:
            equal = to_float(value) == to_float(clause.value)
        elif column.type is ColumnType.DATE:
            left, right = parse_day(value), parse_day(clause.value)
            equal = left is not None and right is not None and left == right
        else:
            equal = row_text == needle
        return equal if op == FilterOperator.EQUALS else not equal

    if op in _NUMERIC_COMPARISONS:
        return _NUMERIC_COMPARISONS[op](
            to_float(value), to_float(clause.value)
        )

    if op in _DATE_COMPARISONS:
        left, right = parse_day(value), parse_day(clause.value)
        if left is None or right is None:
            return False
        return _DATE_COMPARISONS[op](left, right)

    return True


def apply_filters(
    records: Sequence[dict],
    clauses: Sequence[FilterClause],
    columns: Sequence[ColumnDescriptor],
) -> List[dict]:
    """Keep records that satisfy every clause. Unknown columns pass everything."""
    by_key = {c.key: c for c in columns}
    active = [(c, by_key[c.column]) for c in clauses if c.column in by_key]
    if not active:
        return list(records)
    return [r for r in records if all(matches(r, c, col) for c, col in active)]


def describe_filters(
    clauses: Sequence[FilterClause], columns: Sequence[ColumnDescriptor]
) -> List[str]:
    """Human-readable clause descriptions, e.g. ``Cost Greater than "5"``."""
    labels = {c.key: c.label for c in columns}
    return [
        f'{labels.get(c.column, c.column)} {_OPERATOR_LABELS.get(c.operator, c.operator)} "{c.value}"'
        for c in clauses
    ]


def new_filter(columns: Sequence[ColumnDescriptor]) -> FilterClause:
    """A blank clause on the first column with its default operator."""
    first = columns[0] if columns else None
    return FilterClause(
        id=f"filter_{uuid.uuid4().hex[:12]}",
        column=first.key if first else "",
        operator=default_operator(first),
        value="",
    )


def change_filter_column(
    clause: FilterClause, column_key: str, columns: Sequence[ColumnDescriptor]
) -> FilterClause:
    """Point a clause at another column, resetting operator and value."""
    column = next((c for c in columns if c.key == column_key), None)
    if column is None:
        return clause.model_copy(update={"column": column_key})
    return clause.model_copy(
        update={"column": column_key, "operator": default_operator(column), "value": ""}
    )


# ─────────────────────────────────────────────
# SORTING & CAPS
# ─────────────────────────────────────────────


def next_sort(current: Optional[SortSpec], column: str) -> SortSpec:
    """Clicking a column: same column toggles direction, a new one sorts ascending."""
    if current is not None and current.column == column:
        flipped = (
            SortDirection.DESC
            if current.direction is SortDirection.ASC
            else SortDirection.ASC
        )
        return SortSpec(column=column, direction=flipped)
    return SortSpec(column=column, direction=SortDirection.ASC)


def sort_records(
    records: Sequence[dict],
    sort: Optional[SortSpec],
    columns: Sequence[ColumnDescriptor],
) -> List[dict]:
    """Stable single-column sort; skipped when the column is unknown."""
    if sort is None or not any(c.key == sort.column for c in columns):
        return list(records)

    sign = -1 if sort.direction is SortDirection.DESC else 1

    def _compare(a: dict, b: dict) -> int:
        return sign * compare_values(a.get(sort.column), b.get(sort.column))

    return sorted(records, key=cmp_to_key(_compare))


def preview_rows(records: Sequence[dict], count: int) -> List[dict]:
    """First N rows; a non-positive N falls back to the configured default."""
    if count < 1:
        count = settings.preview_row_count
    return list(records[:count])


def llm_rows(records: Sequence[dict], cap: int = MAX_INSIGHT_ROWS) -> List[dict]:
    """Rows sent to the LLM, capped independently of the preview."""
    return list(records[:cap])


# ─────────────────────────────────────────────
# SUMMARY
# ─────────────────────────────────────────────


def summarize(
    records: Sequence[dict], columns: Sequence[ColumnDescriptor]
) -> DataSummary:
    """Per-column statistics for the filtered set."""
    summary = DataSummary(total_rows=len(records))
    if not records:
        return summary

    for column in columns:
        if column.type is ColumnType.METRIC:
            values = [to_float(r.get(column.key)) for r in records]
            values = [v for v in values if not math.isnan(v)]
            if values:
                total = sum(values)
                summary.metrics[column.key] = MetricStats(
                    min=min(values),
                    max=max(values),
                    avg=total / len(values),
                    sum=total,
                )
        elif column.type is ColumnType.DIMENSION:
            counts = Counter(stringify(r.get(column.key)) for r in records)
            stats = DimensionStats(unique_count=len(counts))
            if len(counts) <= TOP_VALUES_UNIQUE_LIMIT:
                stats.top_values = [
                    ValueCount(value=v, count=n)
                    for v, n in counts.most_common(TOP_VALUES_COUNT)
                ]
            summary.dimensions[column.key] = stats

    return summary


# ─────────────────────────────────────────────
# DATASET
# ─────────────────────────────────────────────


class Dataset:
    """A record collection with its column schema computed once."""

    def __init__(self, records: Sequence[dict], kind: Optional[DatasetKind] = None):
        self.kind = kind
        self.records = list(records)
        self.columns = infer_columns(self.records, kind)
        self._columns_by_key: Dict[str, ColumnDescriptor] = {
            c.key: c for c in self.columns
        }

    @property
    def name(self) -> str:
        return self.kind.value if self.kind is not None else "dataset"

    def column(self, key: str) -> Optional[ColumnDescriptor]:
        return self._columns_by_key.get(key)

    def filter(self, clauses: Sequence[FilterClause]) -> List[dict]:
        return apply_filters(self.records, clauses, self.columns)

    def sort(self, records: Sequence[dict], sort: Optional[SortSpec]) -> List[dict]:
        return sort_records(records, sort, self.columns)

    def query(
        self,
        clauses: Sequence[FilterClause] = (),
        sort: Optional[SortSpec] = None,
        preview_count: int = 5,
        llm_cap: int = MAX_INSIGHT_ROWS,
    ) -> QueryResult:
        """Filter, sort and cap in one pass."""
        filtered = self.filter(clauses)
        ordered = self.sort(filtered, sort)
        result = QueryResult(
            dataset=self.name,
            columns=self.columns,
            preview=preview_rows(ordered, preview_count),
            total_rows=len(self.records),
            filtered_rows=len(filtered),
            llm_rows=len(llm_rows(ordered, llm_cap)),
            summary=summarize(filtered, self.columns),
            filter_descriptions=describe_filters(clauses, self.columns),
        )
        logger.info(
            f"Query on {self.name}: {result.filtered_rows}/{result.total_rows} rows "
            f"after {len(clauses)} filters",
            extra={"dataset": self.name, "rows": result.filtered_rows},
        )
        return result
