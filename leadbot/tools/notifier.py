"""E-mail notification relay for completed leads."""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class EmailNotifier:
    """Forwards a completed lead to ``EMAIL_WEBHOOK_URL``, which sends the e-mail."""

    def __init__(self, url: str, client: httpx.AsyncClient) -> None:
        self.url = url
        self.client = client

    async def notify(self, record: dict[str, Any]) -> bool:
        if not self.url:
            logger.warning("EMAIL_WEBHOOK_URL not configured; no notification sent")
            return False
        try:
            response = await self.client.post(self.url, json=record)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Error sending e-mail notification for %s: %s", record.get("identity"), exc)
            return False
        logger.info("E-mail notification sent for %s", record.get("identity"))
        return True
