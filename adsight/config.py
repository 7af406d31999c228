"""AdSight — Central Configuration via Pydantic Settings."""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Export Endpoint ──
    sheet_url: str = ""
    request_timeout: float = 30.0

    # ── AI Providers ──
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    default_ai_provider: str = "openai"  # openai | claude
    default_model: str = "gpt-4.1-mini"

    # ── App ──
    log_level: str = "INFO"
    log_format: str = "json"  # json | text

    # ── Analysis ──
    account_currency: str = "USD"
    date_range_anchor: str = "yesterday"  # yesterday | today
    default_date_range: str = "last-30-days"
    preview_row_count: int = 5
    max_insight_rows: int = 1000

    @property
    def anchor_offset_days(self) -> int:
        """Days between today and the last day covered by the export."""
        return 0 if self.date_range_anchor == "today" else 1

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
