"""Outbound messages the bot sends back to a user."""

from dataclasses import dataclass
from enum import Enum


class MessageKind(str, Enum):
    TEXT = "text"
    DOCUMENT = "document"
    LOCATION = "location"
    IMAGE = "image"


@dataclass(frozen=True)
class OutboundMessage:
    """One message to deliver to the user."""
    kind: MessageKind
    body: str = ""
    url: str = ""
    caption: str = ""
    filename: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    name: str = ""
    address: str = ""

    @classmethod
    def text(cls, body: str) -> "OutboundMessage":
        return cls(MessageKind.TEXT, body=body)

    @classmethod
    def document(cls, url: str, caption: str, filename: str) -> "OutboundMessage":
        return cls(MessageKind.DOCUMENT, url=url, caption=caption, filename=filename)

    @classmethod
    def location(
        cls, latitude: float, longitude: float, name: str, address: str
    ) -> "OutboundMessage":
        return cls(
            MessageKind.LOCATION,
            latitude=latitude,
            longitude=longitude,
            name=name,
            address=address,
        )

    @classmethod
    def image(cls, url: str, caption: str = "") -> "OutboundMessage":
        return cls(MessageKind.IMAGE, url=url, caption=caption)
