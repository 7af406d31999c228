"""AdSight — Landing Page Analysis & Cost Routes."""

from typing import Callable, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from adsight.ai.prompts import DEFAULT_LANDING_PAGE_ANALYSIS_PROMPT
from adsight.analyzer.cost_engine import (
    AVAILABLE_MODELS,
    billed_image_tokens,
    estimate_image_tokens,
    estimate_text_tokens,
    get_model,
    usage_with_cost,
)
from adsight.api.dependencies import get_provider_selector
from adsight.core.logging import get_logger
from adsight.models.analysis_models import LLMModel, TokenUsage

logger = get_logger("api.landing_pages")

router = APIRouter(tags=["Landing Pages"])


# ── Request / Response Models ──


class LandingPageRequest(BaseModel):
    """Request body for POST /landing-pages/analyze.

    Supply the page copy for a text analysis, or a screenshot data URL with its
    pixel dimensions for a vision analysis.
    """

    url: Optional[str] = None
    copy_text: Optional[str] = None
    screenshot: Optional[str] = None
    """data:image/png;base64,..."""
    image_width: int = 0
    image_height: int = 0
    prompt: str = DEFAULT_LANDING_PAGE_ANALYSIS_PROMPT
    provider: str = "auto"
    model: str = ""


class LandingPageResponse(BaseModel):
    status: str
    analysis_type: str
    provider_used: str
    model: str
    content: str
    usage: Optional[TokenUsage] = None


class CostEstimateRequest(BaseModel):
    """Request body for POST /cost/estimate."""

    model: str = "gpt-4.1-mini"
    input_tokens: int = 0
    output_tokens: int = 0
    text: Optional[str] = None
    """Estimated from character count and added to input tokens."""
    image_width: int = 0
    image_height: int = 0


class CostEstimateResponse(BaseModel):
    model: str
    image_tokens: int
    billed_image_tokens: int
    usage: TokenUsage


# ── Endpoints ──


@router.get("/models", response_model=List[LLMModel], tags=["Cost"])
async def list_models():
    """Model catalog available for insights and landing-page analysis."""
    return AVAILABLE_MODELS


@router.post("/cost/estimate", response_model=CostEstimateResponse, tags=["Cost"])
async def cost_estimate(request: CostEstimateRequest):
    """Estimate tokens and money cost for a request before sending it.

    Unpriced models are echoed back unchanged and cost 0. Billed image
    tokens are folded into ``usage.input_tokens``.
    """
    catalog_model = get_model(request.model)
    model = catalog_model.api_model if catalog_model is not None else request.model
    input_tokens = request.input_tokens
    if request.text:
        input_tokens += estimate_text_tokens(request.text)
    image_tokens = estimate_image_tokens(request.image_width, request.image_height)
    billed = billed_image_tokens(model, image_tokens)

    return CostEstimateResponse(
        model=model,
        image_tokens=image_tokens,
        billed_image_tokens=billed,
        usage=usage_with_cost(model, input_tokens + billed, request.output_tokens),
    )


@router.post("/landing-pages/analyze", response_model=LandingPageResponse)
async def analyze_landing_page(
    request: LandingPageRequest,
    select_provider: Callable = Depends(get_provider_selector),
):
    """Analyze a landing page from its copy (text) or a full-page screenshot (vision)."""
    has_copy = bool(request.copy_text and request.copy_text.strip())
    if not has_copy and not request.screenshot:
        raise HTTPException(
            status_code=400,
            detail="Provide copy_text for a text analysis or screenshot for a vision analysis.",
        )

    provider_name, provider = select_provider(request.provider)
    analysis_type = "vision" if request.screenshot else "text"
    logger.info(f"Landing page {analysis_type} analysis for {request.url or 'unnamed page'}")

    try:
        response = await provider.analyze_landing_page(
            request.prompt,
            request.model,
            copy=request.copy_text if has_copy else None,
            image_data_url=request.screenshot,
            image_width=request.image_width,
            image_height=request.image_height,
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Landing page analysis failed: {str(e)}")

    return LandingPageResponse(
        status="success",
        analysis_type=analysis_type,
        provider_used=provider_name,
        model=response.model,
        content=response.content,
        usage=response.usage,
    )
