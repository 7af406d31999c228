"""AdSight — Rollup Engine.

Groups flat rows into cost-ranked campaign / ad group / asset group pick
lists, builds the synthetic "All" daily series, and resolves which entity
is selected when the user steps through a list.
"""

from collections import OrderedDict
from typing import Callable, Dict, Iterable, List, Optional, Sequence, TypeVar

from adsight.analyzer.date_range import parse_day
from adsight.models.analysis_models import EntitySummary
from adsight.models.report_rows import AdGroupRow, AssetGroupRow, DailyRow, to_text
from adsight.core.logging import get_logger

logger = get_logger("analyzer.rollup")

ALL_ENTITIES_NAME = "All"

RowT = TypeVar("RowT")


def build_summaries(
    rows: Iterable[RowT],
    id_of: Callable[[RowT], object],
    name_of: Callable[[RowT], object],
    status_of: Optional[Callable[[RowT], object]] = None,
    cost_of: Callable[[RowT], float] = lambda r: r.cost,
) -> List[EntitySummary]:
    """Roll rows up by entity id, ranked by total cost descending.

    Rows with a blank id are skipped. The first row seen for an id supplies
    its name and status; later rows only add cost. Ties keep first-seen order.
    """
    seen: "OrderedDict[str, dict]" = OrderedDict()
    skipped = 0

    for row in rows:
        entity_id = to_text(id_of(row)).strip()
        if not entity_id:
            skipped += 1
            continue

        if entity_id not in seen:
            seen[entity_id] = {
                "id": entity_id,
                "name": to_text(name_of(row)),
                "total_cost": cost_of(row),
                "status": to_text(status_of(row)) if status_of else None,
            }
        else:
            seen[entity_id]["total_cost"] += cost_of(row)

    summaries = sorted(
        (EntitySummary(**s) for s in seen.values()),
        key=lambda s: s.total_cost,
        reverse=True,
    )
    if skipped:
        logger.debug(f"Skipped {skipped} rows without an entity id")
    return summaries


def campaign_summaries(rows: Iterable[DailyRow]) -> List[EntitySummary]:
    return build_summaries(rows, lambda r: r.campaign_id, lambda r: r.campaign)


def ad_group_summaries(
    rows: Iterable[AdGroupRow], campaign_id: Optional[str] = None
) -> List[EntitySummary]:
    """Ad groups of one campaign (or all), ranked by cost."""
    if campaign_id is not None:
        rows = [r for r in rows if r.campaign_id == campaign_id]
    return build_summaries(rows, lambda r: r.ad_group_id, lambda r: r.ad_group)


def asset_group_summaries(
    rows: Iterable[AssetGroupRow], campaign_id: Optional[str] = None
) -> List[EntitySummary]:
    """Asset groups of one campaign (or all), ranked by cost, with status."""
    if campaign_id is not None:
        rows = [r for r in rows if r.campaign_id == campaign_id]
    return build_summaries(
        rows,
        lambda r: r.asset_group_id,
        lambda r: r.asset_group,
        status_of=lambda r: r.status,
    )


# ─────────────────────────────────────────────
# SELECTION
# ─────────────────────────────────────────────


def default_selection(
    summaries: Sequence[EntitySummary], current: Optional[str] = None
) -> Optional[str]:
    """Keep the current id if still listed, otherwise pick the highest-cost entity."""
    if current and any(s.id == current for s in summaries):
        return current
    return summaries[0].id if summaries else None


def step_selection(
    summaries: Sequence[EntitySummary],
    current: Optional[str],
    step: int,
    include_all: bool = False,
) -> Optional[str]:
    """Move to the previous (step=-1) or next (step=1) entity.

    With include_all, None stands for the "All" position that sits before the
    first and after the last entity. Without it, the list wraps around.
    """
    if not summaries:
        return current
    ids = [s.id for s in summaries]
    index = ids.index(current) if current in ids else -1

    if include_all:
        if index == -1:
            return ids[0] if step > 0 else ids[-1]
        target = index + step
        if target < 0 or target >= len(ids):
            return None
        return ids[target]

    if step > 0:
        if index < len(ids) - 1:
            return ids[index + 1]
        return ids[0] if len(ids) > 1 else current
    if index > 0:
        return ids[index - 1]
    if index == 0 and len(ids) > 1:
        return ids[-1]
    return current


# ─────────────────────────────────────────────
# TIME SERIES
# ─────────────────────────────────────────────


def aggregate_by_date(rows: Iterable[DailyRow]) -> List[DailyRow]:
    """Sum all campaigns per date string into synthetic "All" rows."""
    totals: Dict[str, dict] = OrderedDict()
    for r in rows:
        bucket = totals.setdefault(
            r.date,
            {"impr": 0, "clicks": 0, "cost": 0.0, "conv": 0.0, "value": 0.0},
        )
        bucket["impr"] += r.impr
        bucket["clicks"] += r.clicks
        bucket["cost"] += r.cost
        bucket["conv"] += r.conv
        bucket["value"] += r.value

    aggregated = sort_by_date(
        DailyRow(campaign=ALL_ENTITIES_NAME, campaign_id="", date=day, **sums)
        for day, sums in totals.items()
    )
    logger.info(f"Aggregated daily rows into {len(aggregated)} dates")
    return aggregated


def sort_by_date(rows: Iterable[RowT], descending: bool = False) -> List[RowT]:
    """Order dated rows by parsed day; unparseable dates go last."""
    keyed = [(parse_day(getattr(r, "date", "")), r) for r in rows]
    dated = [(day, r) for day, r in keyed if day is not None]
    undated = [r for day, r in keyed if day is None]
    dated.sort(key=lambda pair: pair[0], reverse=descending)
    return [r for _, r in dated] + undated


def metrics_by_date(rows: Iterable[DailyRow], campaign_id: str) -> List[DailyRow]:
    """Daily series for one campaign, oldest first."""
    return sort_by_date(r for r in rows if r.campaign_id == campaign_id)


def entity_series(
    rows: Iterable[RowT], id_field: str, entity_id: str, descending: bool = True
) -> List[RowT]:
    """Dated rows of one ad group / asset group, newest first by default."""
    return sort_by_date(
        (r for r in rows if getattr(r, id_field, None) == entity_id),
        descending=descending,
    )
