"""AdSight — Dataset Query & Insight Routes."""

from typing import Callable, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from adsight.analyzer.pipeline import (
    build_dataset,
    build_insight_request,
    context_from_settings,
    estimate_insight_usage,
)
from adsight.analyzer.query_engine import PREVIEW_ROW_CHOICES, default_operator, operators_for
from adsight.api.dependencies import get_provider_selector, get_tab_data, parse_dataset_kind
from adsight.config import settings
from adsight.core.logging import get_logger
from adsight.models.analysis_models import (
    ColumnDescriptor,
    FilterClause,
    OperatorSpec,
    QueryResult,
    SortSpec,
    TokenUsage,
)
from adsight.models.report_rows import DatasetKind, TabData

logger = get_logger("api.insights")

router = APIRouter(tags=["Insights"])


# ── Request / Response Models ──


class ColumnsResponse(BaseModel):
    """Response for GET /datasets/{kind}/columns."""

    dataset: str
    columns: List[ColumnDescriptor]
    operators: Dict[str, List[OperatorSpec]]
    default_operators: Dict[str, str]


class QueryRequest(BaseModel):
    """Request body for POST /insights/preview."""

    dataset: str = DatasetKind.SEARCH_TERMS.value
    filters: List[FilterClause] = []
    sort: Optional[SortSpec] = None
    preview_count: int = 0
    """Non-positive uses the configured default."""
    model: str = ""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "dataset": "searchTerms",
                    "filters": [
                        {"column": "cost", "operator": "greater_than", "value": "5"}
                    ],
                    "sort": {"column": "cost", "direction": "desc"},
                    "preview_count": 10,
                }
            ]
        }
    }


class PreviewResponse(BaseModel):
    """Response for POST /insights/preview."""

    result: QueryResult
    estimated_usage: TokenUsage
    """Input tokens for the LLM-bound subset; output not yet known."""


class GenerateRequest(QueryRequest):
    """Request body for POST /insights/generate."""

    prompt: str
    provider: str = "auto"
    currency: Optional[str] = None


class GenerateResponse(BaseModel):
    """Response for POST /insights/generate."""

    status: str
    provider_used: str
    model: str
    content: str
    usage: Optional[TokenUsage] = None
    total_rows: int
    analyzed_rows: int
    sent_rows: int


# ── Endpoints ──


@router.get("/datasets")
async def list_datasets():
    """Dataset kinds exposed by the export."""
    return {
        "datasets": [k.value for k in DatasetKind],
        "preview_row_choices": list(PREVIEW_ROW_CHOICES),
    }


@router.get("/datasets/{kind}/columns", response_model=ColumnsResponse)
async def dataset_columns(kind: str, tab_data: TabData = Depends(get_tab_data)):
    """Column schema inferred from the dataset, with legal operators per column."""
    dataset = build_dataset(tab_data, parse_dataset_kind(kind))
    return ColumnsResponse(
        dataset=dataset.name,
        columns=dataset.columns,
        operators={c.key: operators_for(c.type) for c in dataset.columns},
        default_operators={c.key: default_operator(c) for c in dataset.columns},
    )


@router.post("/insights/preview", response_model=PreviewResponse)
async def preview(request: QueryRequest, tab_data: TabData = Depends(get_tab_data)):
    """Filter, sort and preview a dataset, with a pre-flight token estimate."""
    dataset = build_dataset(tab_data, parse_dataset_kind(request.dataset))
    result = dataset.query(
        request.filters,
        request.sort,
        preview_count=request.preview_count,
        llm_cap=settings.max_insight_rows,
    )
    insight_request = build_insight_request(
        dataset,
        prompt="",
        context=context_from_settings(),
        clauses=request.filters,
        sort=request.sort,
        model=request.model,
    )
    return PreviewResponse(
        result=result, estimated_usage=estimate_insight_usage(insight_request)
    )


@router.post("/insights/generate", response_model=GenerateResponse)
async def generate(
    request: GenerateRequest,
    tab_data: TabData = Depends(get_tab_data),
    select_provider: Callable = Depends(get_provider_selector),
):
    """Send the filtered, sorted and capped rows to an LLM with the user's prompt."""
    if not request.prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt must not be empty.")

    dataset = build_dataset(tab_data, parse_dataset_kind(request.dataset))
    provider_name, provider = select_provider(request.provider)
    insight_request = build_insight_request(
        dataset,
        prompt=request.prompt,
        context=context_from_settings(currency=request.currency),
        clauses=request.filters,
        sort=request.sort,
        provider=provider_name,
        model=request.model,
    )

    try:
        response = await provider.generate_insights(insight_request)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Insight generation failed: {str(e)}")

    return GenerateResponse(
        status="success",
        provider_used=provider_name,
        model=response.model,
        content=response.content,
        usage=response.usage,
        total_rows=insight_request.total_rows,
        analyzed_rows=insight_request.analyzed_rows,
        sent_rows=len(insight_request.data),
    )
