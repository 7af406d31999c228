"""AdSight — Analysis Pipeline.

Wires the engines together:
  typed rows → KPI engine → rollups (dashboard) / query engine (insights)
  → cost engine (LLM-bound subset only)

Every entry point takes an explicit PipelineContext; nothing here reads
request state from globals.
"""

from typing import List, Optional, Sequence

from adsight.ai.prompts import DATA_ANALYSIS_SYSTEM_PROMPT, create_insights_user_content
from adsight.analyzer.cost_engine import estimate_text_tokens, usage_with_cost
from adsight.analyzer.date_range import filter_by_range, resolve_range
from adsight.analyzer.kpi_engine import calculate_totals, derive_all
from adsight.analyzer.query_engine import Dataset, describe_filters, llm_rows
from adsight.analyzer.rollup_engine import (
    ad_group_summaries,
    aggregate_by_date,
    asset_group_summaries,
    campaign_summaries,
    default_selection,
    entity_series,
    metrics_by_date,
)
from adsight.config import settings
from adsight.models.analysis_models import (
    DashboardView,
    FilterClause,
    InsightRequest,
    PipelineContext,
    SortSpec,
    TokenUsage,
)
from adsight.core.logging import get_logger
from adsight.models.report_rows import METRIC_DATASETS, DatasetKind, TabData

logger = get_logger("analyzer.pipeline")


def dataset_records(tab_data: TabData, kind: DatasetKind) -> List[dict]:
    """Flat records for a dataset; metric datasets carry recomputed ratios."""
    rows = tab_data.rows(kind)
    if kind in METRIC_DATASETS:
        return [d.to_record() for d in derive_all(rows)]
    return [r.to_record() for r in rows]


def build_dataset(tab_data: TabData, kind: DatasetKind) -> Dataset:
    return Dataset(dataset_records(tab_data, kind), kind)


def context_from_settings(**overrides) -> PipelineContext:
    """A context seeded from configured defaults."""
    values = {
        "currency": settings.account_currency,
        "date_range": settings.default_date_range,
        "preview_row_count": settings.preview_row_count,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return PipelineContext(**values)


# ─────────────────────────────────────────────
# DASHBOARD
# ─────────────────────────────────────────────


def build_dashboard(tab_data: TabData, context: PipelineContext) -> DashboardView:
    """Resolve the campaign dashboard for one context.

    No campaign selected means the "All" aggregate. Within a campaign, the
    ad group and asset group pick lists default to their highest-cost entry.
    """
    date_range = resolve_range(
        context.date_range,
        today=context.today,
        custom_start=context.custom_start,
        custom_end=context.custom_end,
    )
    daily = filter_by_range(tab_data.daily, date_range)
    campaigns = campaign_summaries(daily)

    selected = context.campaign_id
    if selected and not any(c.id == selected for c in campaigns):
        selected = None

    series = metrics_by_date(daily, selected) if selected else aggregate_by_date(daily)
    view = DashboardView(
        currency=context.currency,
        date_range=date_range,
        campaigns=campaigns,
        selected_campaign_id=selected,
        daily=[d.to_record() for d in derive_all(series)],
        totals=calculate_totals(series) if series else None,
    )

    if selected:
        ad_groups = filter_by_range(tab_data.ad_groups, date_range)
        view.ad_groups = ad_group_summaries(ad_groups, selected)
        view.selected_ad_group_id = default_selection(view.ad_groups, context.ad_group_id)
        if view.selected_ad_group_id:
            view.ad_group_daily = [
                d.to_record()
                for d in derive_all(
                    entity_series(ad_groups, "ad_group_id", view.selected_ad_group_id)
                )
            ]

        asset_groups = filter_by_range(tab_data.asset_groups, date_range)
        view.asset_groups = asset_group_summaries(asset_groups, selected)
        view.selected_asset_group_id = default_selection(
            view.asset_groups, context.asset_group_id
        )
        if view.selected_asset_group_id:
            view.asset_group_daily = [
                d.to_record()
                for d in derive_all(
                    entity_series(
                        asset_groups, "asset_group_id", view.selected_asset_group_id
                    )
                )
            ]

    logger.info(
        f"Dashboard {date_range.start} → {date_range.end}: {len(campaigns)} campaigns, "
        f"selected={selected or 'all'}"
    )
    return view


# ─────────────────────────────────────────────
# INSIGHTS
# ─────────────────────────────────────────────


def build_insight_request(
    dataset: Dataset,
    prompt: str,
    context: PipelineContext,
    clauses: Sequence[FilterClause] = (),
    sort: Optional[SortSpec] = None,
    provider: str = "openai",
    model: str = "",
) -> InsightRequest:
    """Assemble the LLM payload: filtered, sorted rows capped at the export limit."""
    filtered = dataset.filter(clauses)
    rows = llm_rows(dataset.sort(filtered, sort), settings.max_insight_rows)
    return InsightRequest(
        prompt=prompt,
        data=rows,
        data_source=dataset.name,
        filters=describe_filters(clauses, dataset.columns),
        total_rows=len(dataset.records),
        analyzed_rows=len(filtered),
        currency=context.currency,
        provider=provider,
        model=model or settings.default_model,
    )


def estimate_insight_usage(
    request: InsightRequest, expected_output_tokens: int = 0
) -> TokenUsage:
    """Pre-flight estimate for an insight request, from character counts."""
    text = DATA_ANALYSIS_SYSTEM_PROMPT + create_insights_user_content(request)
    return usage_with_cost(
        request.model, estimate_text_tokens(text), expected_output_tokens
    )
