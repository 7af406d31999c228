"""AdSight — Date Range Resolver.

Turns a symbolic range ("last-7-days" …) into an inclusive calendar-day
range and filters dated rows against it. Ranges end on the anchor day
(yesterday by default, since the export lags a day) and start N-1 days
earlier.
"""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, List, Optional, Sequence, TypeVar

from adsight.config import settings
from adsight.models.analysis_models import DateRange
from adsight.models.report_rows import to_text
from adsight.core.logging import get_logger

logger = get_logger("analyzer.date_range")

DATE_FORMAT = "%Y-%m-%d"
DEFAULT_RANGE_DAYS = 30

RowT = TypeVar("RowT")


class DateRangeOption(str, Enum):
    LAST_7_DAYS = "last-7-days"
    LAST_14_DAYS = "last-14-days"
    LAST_30_DAYS = "last-30-days"
    LAST_90_DAYS = "last-90-days"
    LAST_180_DAYS = "last-180-days"
    LAST_365_DAYS = "last-365-days"
    CUSTOM = "custom"


RANGE_DAYS = {
    DateRangeOption.LAST_7_DAYS: 7,
    DateRangeOption.LAST_14_DAYS: 14,
    DateRangeOption.LAST_30_DAYS: 30,
    DateRangeOption.LAST_90_DAYS: 90,
    DateRangeOption.LAST_180_DAYS: 180,
    DateRangeOption.LAST_365_DAYS: 365,
}

RANGE_LABELS = {
    DateRangeOption.LAST_7_DAYS: "Last 7 days",
    DateRangeOption.LAST_14_DAYS: "Last 14 days",
    DateRangeOption.LAST_30_DAYS: "Last 30 days",
    DateRangeOption.LAST_90_DAYS: "Last 90 days",
    DateRangeOption.LAST_180_DAYS: "Last 180 days",
    DateRangeOption.LAST_365_DAYS: "Last 365 days",
    DateRangeOption.CUSTOM: "Custom range",
}


def parse_day(value: Any) -> Optional[date]:
    """Parse a YYYY-MM-DD (or ISO datetime) value to a calendar day, else None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = to_text(value).strip()
    if not text:
        return None
    try:
        return datetime.strptime(text[:10], DATE_FORMAT).date()
    except ValueError:
        return None


def _coerce_option(option: Any) -> Optional[DateRangeOption]:
    try:
        return DateRangeOption(option)
    except ValueError:
        return None


def resolve_range(
    option: Any,
    today: Optional[date] = None,
    anchor_offset_days: Optional[int] = None,
    custom_start: Optional[date] = None,
    custom_end: Optional[date] = None,
) -> DateRange:
    """Resolve a symbolic range to inclusive start/end days.

    Unknown options and a custom range without both bounds fall back to the
    last 30 days.
    """
    today = today or date.today()
    if anchor_offset_days is None:
        anchor_offset_days = settings.anchor_offset_days
    end = today - timedelta(days=anchor_offset_days)

    resolved = _coerce_option(option)
    if resolved is DateRangeOption.CUSTOM and custom_start and custom_end:
        start, stop = sorted((custom_start, custom_end))
        return DateRange(start=start, end=stop)

    days = RANGE_DAYS.get(resolved, DEFAULT_RANGE_DAYS)
    return DateRange(start=end - timedelta(days=days - 1), end=end)


def in_range(value: Any, date_range: DateRange) -> bool:
    day = parse_day(value)
    if day is None:
        return False
    return date_range.start <= day <= date_range.end


def filter_by_range(
    rows: Sequence[RowT],
    date_range: DateRange,
    date_field: str = "date",
) -> List[RowT]:
    """Keep rows whose day falls inside the range. Unparseable dates are dropped."""
    kept = [r for r in rows if in_range(getattr(r, date_field, ""), date_range)]
    dropped = len(rows) - len(kept)
    if dropped:
        logger.debug(
            f"Date filter {date_range.start} → {date_range.end} kept {len(kept)} of {len(rows)} rows"
        )
    return kept

