"""AdSight — FastAPI Application Entry Point.

Google Ads analytics: dashboards, dataset queries and LLM insights.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from adsight.api.dashboard_routes import router as dashboard_router
from adsight.api.insights_routes import router as insights_router
from adsight.api.landing_page_routes import router as landing_page_router
from adsight.config import settings
from adsight.core.logging import get_logger

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("🚀 AdSight starting up...")
    if not settings.sheet_url:
        logger.warning("⚠️ SHEET_URL not set, data endpoints will return 502")
    providers = [
        name
        for name, key in (
            ("openai", settings.openai_api_key),
            ("claude", settings.anthropic_api_key),
        )
        if key
    ]
    logger.info(f"🤖 AI providers: {', '.join(providers) or 'none'}")
    yield
    logger.info("AdSight shut down")


app = FastAPI(
    title="AdSight",
    description="Google Ads analytics — campaign dashboards, dataset filtering and LLM-generated insights over a sheet export.",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(dashboard_router)
app.include_router(insights_router)
app.include_router(landing_page_router)


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "adsight",
        "version": "1.0.0",
    }
