"""
WhatsApp Cloud API message delivery.

Every send is best-effort: failures are logged and reported as ``False``,
never raised, so a delivery problem cannot undo a conversation step.
"""

import logging
from typing import Any

import httpx

from leadbot.config import WhatsAppConfig
from leadbot.schemas.message_schema import MessageKind, OutboundMessage

logger = logging.getLogger(__name__)

GRAPH_API_BASE = "https://graph.facebook.com"


class WhatsAppMessenger:
    """Sends text, document, location and image messages through the Graph API."""

    def __init__(self, config: WhatsAppConfig, client: httpx.AsyncClient) -> None:
        self.config = config
        self.client = client

    @property
    def url(self) -> str:
        return f"{GRAPH_API_BASE}/{self.config.graph_api_version}/{self.config.phone_number_id}/messages"

    async def _post(self, to: str, payload: dict[str, Any], what: str) -> bool:
        if not self.config.token or not self.config.phone_number_id:
            logger.error("WhatsApp token or phone number id missing; %s to %s not sent", what, to)
            return False
        body = {"messaging_product": "whatsapp", "to": to, **payload}
        try:
            response = await self.client.post(
                self.url,
                json=body,
                headers={"Authorization": f"Bearer {self.config.token}"},
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Error sending %s to %s: %s", what, to, exc)
            return False
        logger.info("%s sent to %s", what.capitalize(), to)
        return True

    async def send_text(self, to: str, body: str) -> bool:
        return await self._post(to, {"text": {"body": body}}, "text")

    async def send_document(self, to: str, url: str, caption: str, filename: str) -> bool:
        document = {"link": url, "caption": caption or "", "filename": filename or "archivo.pdf"}
        return await self._post(to, {"type": "document", "document": document}, "document")

    async def send_location(
        self, to: str, lat: float, lng: float, name: str, address: str
    ) -> bool:
        location = {"latitude": lat, "longitude": lng, "name": name, "address": address}
        return await self._post(to, {"type": "location", "location": location}, "location")

    async def send_image(self, to: str, url: str, caption: str = "") -> bool:
        return await self._post(to, {"type": "image", "image": {"link": url, "caption": caption}}, "image")

    async def deliver(self, to: str, message: OutboundMessage) -> bool:
        """Send any OutboundMessage using the matching Graph API call."""
        if message.kind == MessageKind.DOCUMENT:
            return await self.send_document(to, message.url, message.caption, message.filename)
        if message.kind == MessageKind.LOCATION:
            return await self.send_location(
                to, message.latitude, message.longitude, message.name, message.address
            )
        if message.kind == MessageKind.IMAGE:
            return await self.send_image(to, message.url, message.caption)
        return await self.send_text(to, message.body)
