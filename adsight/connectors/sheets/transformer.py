"""AdSight — Raw Export Rows → Typed Row Records.

Picks the row model from the dataset kind at parse time; field coercion
lives on the models themselves.
"""

from typing import Any, Dict, Iterable, List

from adsight.models.report_rows import ROW_MODELS, DatasetKind, ReportRow, TabData
from adsight.core.logging import get_logger

logger = get_logger("sheets.transformer")


def parse_rows(kind: DatasetKind, raw_rows: Iterable[Any]) -> List[ReportRow]:
    """Parse raw JSON objects into the row model for ``kind``.

    Entries that are not objects are skipped.
    """
    model = ROW_MODELS[kind]
    rows: List[ReportRow] = []
    skipped = 0
    for item in raw_rows:
        if not isinstance(item, dict):
            skipped += 1
            continue
        rows.append(model.model_validate(item))

    if skipped:
        logger.warning(
            f"Skipped {skipped} non-object rows in {kind.value}",
            extra={"dataset": kind.value},
        )
    return rows


def build_tab_data(raw: Dict[DatasetKind, Iterable[Any]]) -> TabData:
    """Assemble TabData from raw rows keyed by dataset kind."""
    parsed = {kind.value: parse_rows(kind, rows) for kind, rows in raw.items()}
    return TabData.model_validate(parsed)
