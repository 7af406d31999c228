"""AdSight — Shared Route Dependencies."""

from typing import Callable, Tuple

from fastapi import HTTPException

from adsight.ai.base_provider import AIProvider
from adsight.ai.claude_provider import ClaudeProvider
from adsight.ai.openai_provider import OpenAIProvider
from adsight.config import settings
from adsight.connectors.sheets.client import SheetsAPIError, SheetsClient
from adsight.core.logging import get_logger
from adsight.models.report_rows import DatasetKind, TabData

logger = get_logger("api.dependencies")

PROVIDERS = {
    "openai": OpenAIProvider,
    "claude": ClaudeProvider,
}


async def get_tab_data() -> TabData:
    """Fetch every export tab for the current request."""
    client = SheetsClient()
    try:
        return await client.fetch_all_tabs()
    except SheetsAPIError as e:
        logger.error(f"Export fetch failed: {e}", extra={"status_code": e.status_code})
        raise HTTPException(status_code=502, detail=f"Export fetch failed: {e}")
    finally:
        await client.close()


def parse_dataset_kind(value: str) -> DatasetKind:
    try:
        return DatasetKind(value)
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown dataset: {value}. Expected one of: "
            + ", ".join(k.value for k in DatasetKind),
        )


def select_provider(provider_name: str) -> Tuple[str, AIProvider]:
    """Select and return an available AI provider.

    When provider_name is 'auto', tries DEFAULT_AI_PROVIDER first,
    then falls through remaining providers.
    """
    if provider_name == "auto":
        default = settings.default_ai_provider
        if default in PROVIDERS:
            p = PROVIDERS[default]()
            if p.is_available():
                return default, p
        for name, cls in PROVIDERS.items():
            if name == default:
                continue
            provider = cls()
            if provider.is_available():
                return name, provider
        raise HTTPException(
            status_code=503,
            detail="No AI provider configured. Set OPENAI_API_KEY or ANTHROPIC_API_KEY in .env.",
        )
    elif provider_name in PROVIDERS:
        provider = PROVIDERS[provider_name]()
        if not provider.is_available():
            raise HTTPException(
                status_code=503,
                detail=f"{provider_name} provider not configured.",
            )
        return provider_name, provider
    else:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown provider: {provider_name}.",
        )


def get_provider_selector() -> Callable[[str], Tuple[str, AIProvider]]:
    return select_provider
