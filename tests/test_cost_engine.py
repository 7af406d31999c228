"""Token and cost estimation."""

import pytest

from adsight.analyzer.cost_engine import (
    DEFAULT_OPENAI_MODEL,
    billed_image_tokens,
    estimate_cost,
    estimate_image_tokens,
    estimate_text_tokens,
    get_api_model_name,
    get_pricing,
    usage_with_cost,
)
from adsight.models.analysis_models import TokenUsage


class TestTextTokens:
    def test_characters_over_three_and_a_half(self):
        assert estimate_text_tokens("a" * 7) == 2
        assert estimate_text_tokens("a" * 8) == 3
        assert estimate_text_tokens(35) == 10

    def test_empty(self):
        assert estimate_text_tokens("") == 0
        assert estimate_text_tokens(0) == 0


class TestImageTokens:
    def test_small_image_is_patch_count(self):
        assert estimate_image_tokens(1024, 1024) == 1024
        assert estimate_image_tokens(100, 40) == 4 * 2

    def test_large_image_is_capped(self):
        tokens = estimate_image_tokens(4000, 3000)
        assert 0 < tokens <= 1536
        assert tokens == 1536

    def test_missing_dimensions(self):
        assert estimate_image_tokens(0, 1080) == 0
        assert estimate_image_tokens(1920, -1) == 0

    def test_model_multipliers(self):
        assert billed_image_tokens("gpt-4.1-mini", 1000) == 1620
        assert billed_image_tokens("gpt-4.1-nano-2025-04-14", 100) == 246
        assert billed_image_tokens("gpt-4.1", 1000) == 1000
        assert billed_image_tokens("gpt-4.1-mini", 1536) == 2488
        assert billed_image_tokens("gpt-4.1-mini", 0) == 0


class TestCost:
    def test_mini_cost(self):
        assert estimate_cost("gpt-4.1-mini-2025-04-14", 1000, 500) == pytest.approx(0.0012)

    def test_catalog_id_and_api_name_agree(self):
        assert estimate_cost("gpt-4.1", 10_000, 1_000) == pytest.approx(
            estimate_cost("gpt-4.1-2025-04-14", 10_000, 1_000)
        )
        assert estimate_cost("gpt-4.1", 10_000, 1_000) == pytest.approx(0.028)

    def test_image_tokens_billed_as_input(self):
        cost = estimate_cost("gpt-4.1-mini", 0, 0, image_tokens=1000)
        assert cost == pytest.approx(1620 / 1_000_000 * 0.40)

    def test_unpriced_model_costs_nothing(self):
        assert get_pricing("claude-sonnet-4-20250514") is None
        assert estimate_cost("claude-sonnet-4-20250514", 5000, 5000) == 0.0

    def test_api_name_lookup(self):
        assert get_api_model_name("gpt-4.1-nano") == "gpt-4.1-nano-2025-04-14"
        assert get_api_model_name("gpt-4.1-2025-04-14") == "gpt-4.1-2025-04-14"
        assert get_api_model_name("something-else") == DEFAULT_OPENAI_MODEL

    def test_usage_totals(self):
        usage = usage_with_cost("gpt-4.1-mini", 1000, 500)
        assert usage.total_tokens == 1500
        assert usage.cost == pytest.approx(0.0012)

    def test_explicit_total_kept(self):
        assert TokenUsage(input_tokens=1, output_tokens=2, total_tokens=10).total_tokens == 10
