"""WhatsApp Cloud API inbound webhook payload."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TextBody(BaseModel):
    body: str = ""


class WhatsAppMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sender: str = Field(alias="from")
    type: str = "text"
    text: Optional[TextBody] = None


class ChangeValue(BaseModel):
    messages: list[WhatsAppMessage] = Field(default_factory=list)


class Change(BaseModel):
    value: ChangeValue = Field(default_factory=ChangeValue)


class Entry(BaseModel):
    changes: list[Change] = Field(default_factory=list)


class InboundMessage(BaseModel):
    """The only part of a webhook event the dialogue engine consumes."""
    sender: str
    text: str


class WebhookPayload(BaseModel):
    """Top-level ``{"entry": [{"changes": [{"value": {"messages": [...]}}]}]}`` event."""

    entry: list[Entry] = Field(default_factory=list)

    def first_message(self) -> Optional[InboundMessage]:
        """Return the first message of the event, or None for status-only events."""
        if not self.entry or not self.entry[0].changes:
            return None
        messages = self.entry[0].changes[0].value.messages
        if not messages:
            return None
        msg = messages[0]
        text = msg.text.body if msg.text else ""
        return InboundMessage(sender=msg.sender, text=text)
