"""AdSight — Dashboard Routes."""

from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from adsight.analyzer.date_range import RANGE_LABELS
from adsight.analyzer.pipeline import build_dashboard, context_from_settings
from adsight.analyzer.rollup_engine import step_selection
from adsight.api.dependencies import get_tab_data
from adsight.config import settings
from adsight.core.logging import get_logger
from adsight.models.analysis_models import DashboardView
from adsight.models.report_rows import TabData

logger = get_logger("api.dashboard")

router = APIRouter(tags=["Dashboard"])


# ── Request / Response Models ──


class DashboardRequest(BaseModel):
    """Request body for POST /dashboard."""

    date_range: Optional[str] = None
    """One of: "last-7-days" … "last-365-days", or "custom" with both bounds."""
    custom_start: Optional[date] = None
    custom_end: Optional[date] = None
    campaign_id: Optional[str] = None
    """Omit for the "All" aggregate."""
    ad_group_id: Optional[str] = None
    asset_group_id: Optional[str] = None
    currency: Optional[str] = None
    today: Optional[date] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"date_range": "last-7-days"},
                {
                    "date_range": "custom",
                    "custom_start": "2025-01-01",
                    "custom_end": "2025-01-31",
                    "campaign_id": "123",
                },
            ]
        }
    }


class StepRequest(DashboardRequest):
    """Request body for POST /dashboard/step."""

    level: Literal["campaign", "ad_group", "asset_group"] = "campaign"
    step: Literal[-1, 1] = 1


class StepResponse(BaseModel):
    level: str
    selected_id: Optional[str] = None


def _context(request: DashboardRequest):
    return context_from_settings(
        date_range=request.date_range,
        custom_start=request.custom_start,
        custom_end=request.custom_end,
        campaign_id=request.campaign_id,
        ad_group_id=request.ad_group_id,
        asset_group_id=request.asset_group_id,
        currency=request.currency,
        today=request.today,
    )


# ── Endpoints ──


@router.get("/dashboard/date-ranges")
async def date_ranges():
    """Selectable date range options."""
    return {
        "default": settings.default_date_range,
        "options": [
            {"value": option.value, "label": label}
            for option, label in RANGE_LABELS.items()
        ],
    }


@router.post("/dashboard", response_model=DashboardView)
async def dashboard(
    request: DashboardRequest,
    tab_data: TabData = Depends(get_tab_data),
):
    """Campaign overview: pick lists, daily series and totals for the range."""
    return build_dashboard(tab_data, _context(request))


@router.post("/dashboard/step", response_model=StepResponse)
async def step(
    request: StepRequest,
    tab_data: TabData = Depends(get_tab_data),
):
    """Previous/next entry of a pick list.

    Campaigns include the "All" position (returned as null); ad groups and
    asset groups wrap around.
    """
    view = build_dashboard(tab_data, _context(request))
    if request.level == "campaign":
        selected = step_selection(
            view.campaigns, view.selected_campaign_id, request.step, include_all=True
        )
    elif request.level == "ad_group":
        selected = step_selection(view.ad_groups, view.selected_ad_group_id, request.step)
    else:
        selected = step_selection(
            view.asset_groups, view.selected_asset_group_id, request.step
        )
    return StepResponse(level=request.level, selected_id=selected)
