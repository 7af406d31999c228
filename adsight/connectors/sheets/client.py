"""AdSight — Export Endpoint Client.

Fetches report tabs from the spreadsheet-backed export endpoint
(``<sheet_url>?tab=<name>``) with retry and rate-limit handling.
"""

import asyncio
from typing import Any, Dict, List, Optional

import httpx

from adsight.config import settings
from adsight.connectors.sheets.transformer import build_tab_data
from adsight.models.report_rows import DatasetKind, TabData
from adsight.core.logging import get_logger

logger = get_logger("sheets.client")

MAX_RETRIES = 3
RETRY_BASE_DELAY = 2  # seconds


class SheetsAPIError(Exception):
    """Raised when the export endpoint cannot be read."""

    def __init__(self, message: str, status_code: int = 0):
        self.status_code = status_code
        super().__init__(message)


class SheetsClient:
    """Async HTTP client for the export endpoint."""

    def __init__(
        self,
        sheet_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_base_delay: float = RETRY_BASE_DELAY,
    ):
        self.sheet_url = sheet_url or settings.sheet_url
        self.timeout = timeout or settings.request_timeout
        self.retry_base_delay = retry_base_delay
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport, follow_redirects=True
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    # ── Core Request Method ──

    async def _request(self, params: Dict[str, Any]) -> Any:
        """GET the endpoint with retry on 429, 5xx and transport errors."""
        if not self.sheet_url:
            raise SheetsAPIError("No export URL configured. Set SHEET_URL in .env.")

        client = await self._get_client()

        for attempt in range(1, MAX_RETRIES + 1):
            wait = self.retry_base_delay * (2 ** (attempt - 1))
            try:
                resp = await client.get(self.sheet_url, params=params)

                if resp.status_code == 429 and attempt < MAX_RETRIES:
                    logger.warning(
                        f"Rate limited (429). Retrying in {wait}s (attempt {attempt}/{MAX_RETRIES})"
                    )
                    await asyncio.sleep(wait)
                    continue

                resp.raise_for_status()
                return resp.json()

            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if attempt < MAX_RETRIES and status >= 500:
                    logger.warning(f"Server error {status}. Retrying in {wait}s")
                    await asyncio.sleep(wait)
                    continue
                raise SheetsAPIError(
                    f"Export endpoint returned {status}", status
                ) from e

            except httpx.RequestError as e:
                if attempt < MAX_RETRIES:
                    logger.warning(f"Request error: {e}. Retrying in {wait}s")
                    await asyncio.sleep(wait)
                    continue
                raise SheetsAPIError(
                    f"Connection failed after {MAX_RETRIES} retries: {e}"
                ) from e

            except ValueError as e:
                raise SheetsAPIError(f"Export endpoint returned invalid JSON: {e}") from e

        raise SheetsAPIError("Max retries exhausted")

    # ── Tabs ──

    async def fetch_tab(self, kind: DatasetKind) -> List[Dict[str, Any]]:
        """Fetch one tab's raw rows. A non-list payload counts as empty."""
        payload = await self._request({"tab": kind.value})
        if not isinstance(payload, list):
            logger.warning(
                f"Response is not an array for {kind.value}", extra={"dataset": kind.value}
            )
            return []
        logger.info(
            f"Fetched {len(payload)} rows for {kind.value}",
            extra={"dataset": kind.value, "rows": len(payload)},
        )
        return payload

    async def fetch_all_tabs(self) -> TabData:
        """Fetch every tab concurrently and parse into typed rows.

        A tab that fails is logged and left empty; if every tab fails the
        last error is raised.
        """
        kinds = list(DatasetKind)
        results = await asyncio.gather(
            *(self.fetch_tab(k) for k in kinds), return_exceptions=True
        )

        raw: Dict[DatasetKind, List[Dict[str, Any]]] = {}
        errors: List[SheetsAPIError] = []
        for kind, result in zip(kinds, results):
            if isinstance(result, SheetsAPIError):
                logger.error(
                    f"Error fetching {kind.value} data: {result}",
                    extra={"dataset": kind.value},
                )
                errors.append(result)
                raw[kind] = []
            elif isinstance(result, BaseException):
                raise result
            else:
                raw[kind] = result

        if errors and len(errors) == len(kinds):
            raise errors[-1]
        return build_tab_data(raw)
