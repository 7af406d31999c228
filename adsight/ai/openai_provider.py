"""AdSight — OpenAI Provider."""

import time
from typing import Optional

from openai import AsyncOpenAI

from adsight.ai.base_provider import AIProvider
from adsight.ai.prompts import (
    DATA_ANALYSIS_SYSTEM_PROMPT,
    LANDING_PAGE_ANALYSIS_SYSTEM_PROMPT,
    create_insights_user_content,
    create_landing_page_analysis_prompt,
    create_landing_page_vision_prompt,
)
from adsight.analyzer.cost_engine import (
    estimate_image_tokens,
    estimate_text_tokens,
    get_api_model_name,
    usage_with_cost,
)
from adsight.config import settings
from adsight.core.logging import get_logger
from adsight.models.analysis_models import InsightRequest, LLMResponse

logger = get_logger("ai.openai")

MAX_OUTPUT_TOKENS = 4000


class OpenAIProvider(AIProvider):
    """OpenAI chat-completions provider, priced from the model catalog."""

    name = "openai"

    def __init__(self, client: Optional[AsyncOpenAI] = None):
        if client is not None:
            self.client = client
        else:
            self.client = (
                AsyncOpenAI(api_key=settings.openai_api_key)
                if settings.openai_api_key
                else None
            )

    def is_available(self) -> bool:
        return self.client is not None

    async def _complete(
        self,
        api_model: str,
        system: str,
        user_content,
        prompt_chars: int,
        image_tokens: int = 0,
    ) -> LLMResponse:
        if not self.is_available():
            raise RuntimeError("OpenAI provider not configured")

        start = time.perf_counter()
        try:
            response = await self.client.chat.completions.create(
                model=api_model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user_content},
                ],
                max_tokens=MAX_OUTPUT_TOKENS,
            )
        except Exception as e:
            logger.error(f"OpenAI generation failed: {e}", extra={"model": api_model})
            raise

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise RuntimeError("No content returned from OpenAI")

        if response.usage is not None:
            # Reported prompt tokens already include any image input.
            usage = usage_with_cost(
                api_model,
                response.usage.prompt_tokens or 0,
                response.usage.completion_tokens or 0,
            )
        else:
            usage = usage_with_cost(
                api_model,
                estimate_text_tokens(prompt_chars),
                estimate_text_tokens(content),
                image_tokens,
            )
        duration_ms = round((time.perf_counter() - start) * 1000)
        logger.info(
            f"OpenAI {api_model}: {usage.input_tokens} in / {usage.output_tokens} out, "
            f"${usage.cost:.6f}",
            extra={"model": api_model, "duration_ms": duration_ms},
        )
        return LLMResponse(
            content=content, usage=usage, provider=self.name, model=api_model
        )

    async def generate_insights(self, request: InsightRequest) -> LLMResponse:
        api_model = get_api_model_name(request.model or settings.default_model)
        user_content = create_insights_user_content(request)
        logger.info(
            f"Sending {len(request.data)} {request.data_source} rows to {api_model}",
            extra={"dataset": request.data_source, "rows": len(request.data)},
        )
        return await self._complete(
            api_model,
            DATA_ANALYSIS_SYSTEM_PROMPT,
            user_content,
            len(DATA_ANALYSIS_SYSTEM_PROMPT) + len(user_content),
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
        api_model = get_api_model_name(model or settings.default_model)

        if image_data_url:
            text = create_landing_page_vision_prompt(prompt)
            user_content = [
                {"type": "text", "text": text},
                {"type": "image_url", "image_url": {"url": image_data_url}},
            ]
            return await self._complete(
                api_model,
                LANDING_PAGE_ANALYSIS_SYSTEM_PROMPT,
                user_content,
                len(LANDING_PAGE_ANALYSIS_SYSTEM_PROMPT) + len(text),
                image_tokens=estimate_image_tokens(image_width, image_height),
            )

        text = create_landing_page_analysis_prompt(copy or "", prompt)
        return await self._complete(
            api_model,
            LANDING_PAGE_ANALYSIS_SYSTEM_PROMPT,
            text,
            len(LANDING_PAGE_ANALYSIS_SYSTEM_PROMPT) + len(text),
        )
