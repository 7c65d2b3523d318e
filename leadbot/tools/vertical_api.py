"""
Per-vertical business APIs: clinic appointments, courier tracking,
real-estate CRM leads and restaurant orders.

When a vertical's base URL is not configured the client answers from
canned mock data, so every flow can be demoed without a backend.
"""

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from leadbot.schemas.lead_schema import ExternalResult

logger = logging.getLogger(__name__)

_ID_KEYS = ("codigo", "code", "id")


def _parse_result(response: httpx.Response, default_ok: bool) -> ExternalResult:
    """Read a JSON reply; ``default_ok`` applies when the body has no ``ok`` key."""
    try:
        data = response.json()
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {"items": data}
    generated_id: Optional[str] = None
    for key in _ID_KEYS:
        if data.get(key):
            generated_id = str(data[key])
            break
    return ExternalResult(ok=bool(data.get("ok", default_ok)), generated_id=generated_id, data=data)


class VerticalApiClient:
    """
    Create/status client for one vertical's REST API.

    ``create_path`` receives completed records (POST); ``status_path`` is a
    template with ``{id}`` for read-only lookups (GET). Either may be None
    when the vertical has no such endpoint.

    A create reply counts as successful only when it says ``"ok": true``.
    Status replies without an ``ok`` key fall back to ``status_default_ok``.
    """

    def __init__(
        self,
        vertical: str,
        base_url: str,
        client: httpx.AsyncClient,
        create_path: Optional[str] = None,
        status_path: Optional[str] = None,
        mock_generated_id: Optional[str] = None,
        mock_status: Optional[dict[str, Any]] = None,
        status_default_ok: bool = False,
    ) -> None:
        self.vertical = vertical
        self.base_url = base_url.rstrip("/")
        self.client = client
        self.create_path = create_path
        self.status_path = status_path
        self.mock_generated_id = mock_generated_id
        self.mock_status = mock_status or {}
        self.status_default_ok = status_default_ok

    async def create_external_resource(self, record: dict[str, Any]) -> ExternalResult:
        if self.create_path is None:
            logger.warning("%s API has no create endpoint", self.vertical)
            return ExternalResult(ok=False)
        if not self.base_url:
            logger.warning("%s API base URL not configured; mock create only", self.vertical)
            return ExternalResult(ok=True, generated_id=self.mock_generated_id, data={"mock": True})
        try:
            response = await self.client.post(f"{self.base_url}{self.create_path}", json=record)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Error creating %s resource: %s", self.vertical, exc)
            return ExternalResult(ok=False)
        result = _parse_result(response, default_ok=False)
        logger.info("%s resource created (id=%s)", self.vertical, result.generated_id)
        return result

    async def query_external_status(self, identifier: str) -> ExternalResult:
        if self.status_path is None:
            logger.warning("%s API has no status endpoint", self.vertical)
            return ExternalResult(ok=False)
        if not self.base_url:
            logger.warning("%s API base URL not configured; mock status returned", self.vertical)
            return ExternalResult(ok=True, data={**self.mock_status, "code": identifier})
        path = self.status_path.format(id=quote(identifier, safe=""))
        try:
            response = await self.client.get(f"{self.base_url}{path}")
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Error querying %s status for %s: %s", self.vertical, identifier, exc)
            return ExternalResult(ok=False)
        return _parse_result(response, default_ok=self.status_default_ok)
