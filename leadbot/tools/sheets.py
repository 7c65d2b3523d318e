"""
Spreadsheet persistence through an Apps Script (or similar) webhook.

The sink only appends rows; it never reads them back.
"""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class SheetsSink:
    """Appends lead and audit rows by POSTing JSON to ``SHEETS_WEBHOOK_URL``."""

    def __init__(self, url: str, client: httpx.AsyncClient) -> None:
        self.url = url
        self.client = client

    async def persist_record(self, record: dict[str, Any]) -> bool:
        """Return True when the row was acknowledged, False when ignored or failed."""
        if not self.url:
            logger.warning("SHEETS_WEBHOOK_URL not configured; %s row not saved", record.get("vertical"))
            return False
        try:
            response = await self.client.post(self.url, json=record)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Error saving %s row to Sheets: %s", record.get("vertical"), exc)
            return False
        logger.info("Row saved to Sheets for %s (%s)", record.get("identity"), record.get("vertical"))
        return True
