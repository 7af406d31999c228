"""AdSight — Abstract AI Provider."""

from abc import ABC, abstractmethod
from typing import Optional

from adsight.models.analysis_models import InsightRequest, LLMResponse


class AIProvider(ABC):
    """Abstract base for LLM-backed analysis.

    Providers receive payloads the pipeline has already filtered, sorted and
    capped. Dashboards and queries work without any provider configured.
    """

    name: str = ""

    @abstractmethod
    async def generate_insights(self, request: InsightRequest) -> LLMResponse:
        """Answer the request's prompt over its data rows.

        Returns:
            The generated markdown plus token usage and cost (0 when the
            model is unpriced).
        """
        ...

    @abstractmethod
    async def analyze_landing_page(
        self,
        prompt: str,
        model: str,
        copy: Optional[str] = None,
        image_data_url: Optional[str] = None,
        image_width: int = 0,
        image_height: int = 0,
    ) -> LLMResponse:
        """Analyze landing-page copy, or a full-page screenshot when given one."""
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this provider is configured and ready."""
        ...
