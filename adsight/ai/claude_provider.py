"""AdSight — Anthropic Claude Provider."""

from typing import Optional, Tuple

from anthropic import AsyncAnthropic

from adsight.ai.base_provider import AIProvider
from adsight.ai.prompts import (
    DATA_ANALYSIS_SYSTEM_PROMPT,
    LANDING_PAGE_ANALYSIS_SYSTEM_PROMPT,
    create_insights_user_content,
    create_landing_page_analysis_prompt,
    create_landing_page_vision_prompt,
)
from adsight.analyzer.cost_engine import usage_with_cost
from adsight.config import settings
from adsight.core.logging import get_logger
from adsight.models.analysis_models import InsightRequest, LLMResponse

logger = get_logger("ai.claude")

CLAUDE_MODEL = "claude-sonnet-4-20250514"
MAX_OUTPUT_TOKENS = 4000


def split_data_url(data_url: str) -> Tuple[str, str]:
    """Split a base64 data URL into (media type, payload)."""
    header, _, payload = data_url.partition(",")
    media_type = header[len("data:"):].split(";")[0] if header.startswith("data:") else ""
    return media_type or "image/png", payload


class ClaudeProvider(AIProvider):
    """Anthropic Claude provider. Claude models carry no catalog price, so cost is 0."""

    name = "claude"

    def __init__(self, client: Optional[AsyncAnthropic] = None):
        if client is not None:
            self.client = client
        else:
            self.client = (
                AsyncAnthropic(api_key=settings.anthropic_api_key)
                if settings.anthropic_api_key
                else None
            )

    def is_available(self) -> bool:
        return self.client is not None

    async def _complete(self, system: str, content) -> LLMResponse:
        if not self.is_available():
            raise RuntimeError("Claude provider not configured")

        try:
            response = await self.client.messages.create(
                model=CLAUDE_MODEL,
                max_tokens=MAX_OUTPUT_TOKENS,
                system=system,
                messages=[
                    {"role": "user", "content": content},
                ],
            )
        except Exception as e:
            logger.error(f"Claude generation failed: {e}", extra={"model": CLAUDE_MODEL})
            raise

        text = response.content[0].text if response.content else "No insights generated."
        usage = usage_with_cost(
            CLAUDE_MODEL, response.usage.input_tokens, response.usage.output_tokens
        )
        logger.info(
            f"Claude: {usage.input_tokens} in / {usage.output_tokens} out",
            extra={"model": CLAUDE_MODEL},
        )
        return LLMResponse(content=text, usage=usage, provider=self.name, model=CLAUDE_MODEL)

    async def generate_insights(self, request: InsightRequest) -> LLMResponse:
        return await self._complete(
            DATA_ANALYSIS_SYSTEM_PROMPT, create_insights_user_content(request)
        )

    async def analyze_landing_page(
        self,
        prompt: str,
        model: str,
        copy: Optional[str] = None,
        image_data_url: Optional[str] = None,
        image_width: int = 0,
        image_height: int = 0,
    ) -> LLMResponse:
        if image_data_url:
            media_type, payload = split_data_url(image_data_url)
            content = [
                {
                    "type": "image",
                    "source": {"type": "base64", "media_type": media_type, "data": payload},
                },
                {"type": "text", "text": create_landing_page_vision_prompt(prompt)},
            ]
            return await self._complete(LANDING_PAGE_ANALYSIS_SYSTEM_PROMPT, content)

        return await self._complete(
            LANDING_PAGE_ANALYSIS_SYSTEM_PROMPT,
            create_landing_page_analysis_prompt(copy or "", prompt),
        )
