"""AdSight — Cost & Token Engine.

Deterministic token and cost estimates for LLM requests:
- text fallback: ceil(characters / 3.5) when the API reports no usage
- images: 32px patches, capped at 1536, with a shrink step for large images
- cost: per-million-token prices; unknown models are unpriced (cost 0)
"""

import math
from typing import Dict, List, Optional, Union

from adsight.models.analysis_models import LLMModel, ModelPriceEntry, TokenUsage
from adsight.core.logging import get_logger

logger = get_logger("analyzer.cost")

CHARS_PER_TOKEN = 3.5
PATCH_SIZE = 32
MAX_IMAGE_PATCHES = 1536
TOKENS_PER_MILLION = 1_000_000

AVAILABLE_MODELS: List[LLMModel] = [
    LLMModel(
        id="gpt-4.1-mini",
        name="GPT-4.1 Mini",
        provider="openai",
        api_model="gpt-4.1-mini-2025-04-14",
    ),
    LLMModel(
        id="gpt-4.1", name="GPT-4.1", provider="openai", api_model="gpt-4.1-2025-04-14"
    ),
    LLMModel(
        id="gpt-4.1-nano",
        name="GPT-4.1 Nano",
        provider="openai",
        api_model="gpt-4.1-nano-2025-04-14",
    ),
]

DEFAULT_OPENAI_MODEL = "gpt-4.1-mini-2025-04-14"

# USD per 1M tokens
OPENAI_PRICING: Dict[str, ModelPriceEntry] = {
    "gpt-4.1-2025-04-14": ModelPriceEntry(input=2.00, output=8.00),
    "gpt-4.1-mini-2025-04-14": ModelPriceEntry(input=0.40, output=1.60),
    "gpt-4.1-nano-2025-04-14": ModelPriceEntry(input=0.10, output=0.40),
}

# Image tokens are billed at a model-specific effective rate.
IMAGE_TOKEN_MULTIPLIERS: Dict[str, float] = {
    "gpt-4.1-mini-2025-04-14": 1.62,
    "gpt-4.1-nano-2025-04-14": 2.46,
}


# ─────────────────────────────────────────────
# MODEL LOOKUP
# ─────────────────────────────────────────────


def get_model(model_id: str) -> Optional[LLMModel]:
    return next((m for m in AVAILABLE_MODELS if m.id == model_id), None)


def get_api_model_name(model_id: str) -> str:
    """Map a catalog id to its API model name, defaulting to GPT-4.1 Mini."""
    model = get_model(model_id)
    if model is not None:
        return model.api_model
    if model_id in OPENAI_PRICING:
        return model_id
    return DEFAULT_OPENAI_MODEL


def _api_name(model: str) -> str:
    found = get_model(model)
    return found.api_model if found is not None else model


def get_pricing(model: str) -> Optional[ModelPriceEntry]:
    """Price entry for a catalog id or API model name."""
    return OPENAI_PRICING.get(_api_name(model))


def image_multiplier(model: str) -> float:
    return IMAGE_TOKEN_MULTIPLIERS.get(_api_name(model), 1.0)


# ─────────────────────────────────────────────
# TOKENS
# ─────────────────────────────────────────────


def estimate_text_tokens(text: Union[str, int]) -> int:
    """Fallback estimate from a string or a character count."""
    characters = len(text) if isinstance(text, str) else int(text)
    if characters <= 0:
        return 0
    return math.ceil(characters / CHARS_PER_TOKEN)


def _patch_count(width: float, height: float) -> int:
    return math.ceil(width / PATCH_SIZE) * math.ceil(height / PATCH_SIZE)


def estimate_image_tokens(width: int, height: int) -> int:
    """Patch-based image token count.

    Images within 1536 patches cost one token per patch. Larger images are
    scaled to fit 1536 patches' worth of pixels, re-patched, and capped.
    """
    if width <= 0 or height <= 0:
        return 0

    total = _patch_count(width, height)
    if total <= MAX_IMAGE_PATCHES:
        return total

    shrink = math.sqrt(MAX_IMAGE_PATCHES * PATCH_SIZE * PATCH_SIZE / (width * height))
    scaled_width = math.floor(width * shrink)
    scaled_height = math.floor(height * shrink)
    return min(_patch_count(scaled_width, scaled_height), MAX_IMAGE_PATCHES)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def billed_image_tokens(model: str, image_tokens: int) -> int:
    """Image tokens after the model's multiplier, as added to input tokens."""
    if image_tokens <= 0:
        return 0
    return _round_half_up(image_tokens * image_multiplier(model))


# ─────────────────────────────────────────────
# COST
# ─────────────────────────────────────────────


def estimate_cost(
    model: str, input_tokens: int, output_tokens: int, image_tokens: int = 0
) -> float:
    """Money cost of a request; 0 for models without a price entry."""
    pricing = get_pricing(model)
    if pricing is None:
        return 0.0

    billed_input = input_tokens + billed_image_tokens(model, image_tokens)
    input_cost = billed_input / TOKENS_PER_MILLION * pricing.input
    output_cost = output_tokens / TOKENS_PER_MILLION * pricing.output
    return input_cost + output_cost


def usage_with_cost(
    model: str, input_tokens: int, output_tokens: int, image_tokens: int = 0
) -> TokenUsage:
    """TokenUsage with the estimated cost attached."""
    cost = estimate_cost(model, input_tokens, output_tokens, image_tokens)
    logger.debug(
        f"Usage for {model}: in={input_tokens} out={output_tokens} img={image_tokens} cost=${cost:.6f}"
    )
    return TokenUsage(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        cost=cost,
    )
