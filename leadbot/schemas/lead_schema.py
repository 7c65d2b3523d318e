"""Lead records produced by completed conversations."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class EnrichmentFields:
    """Which collected fields feed the lead-enrichment heuristics."""
    service: Optional[str] = None
    business: Optional[str] = None
    budget: Optional[str] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LeadRecord(BaseModel):
    """Flattened capture of one completed conversation."""

    model_config = ConfigDict(frozen=True)

    vertical: str
    identity: str
    channel: str
    flow: Optional[str] = None
    fields: dict[str, str] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow)

    def with_field(self, name: str, value: str) -> "LeadRecord":
        """Return a copy with ``name`` set, e.g. to splice in an external code."""
        return self.model_copy(update={"fields": {**self.fields, name: value}})

    def text(self, name: Optional[str]) -> str:
        if not name:
            return ""
        return self.fields.get(name, "")

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "vertical": self.vertical,
            "flow": self.flow,
            "identity": self.identity,
            "channel": self.channel,
            "created_at": self.created_at.isoformat(),
        }
        payload.update(self.fields)
        return payload


class EnrichedLead(BaseModel):
    """LeadRecord plus the classification fields derived from its text."""

    model_config = ConfigDict(frozen=True)

    lead: LeadRecord
    language: str
    country: str
    service_category: str
    interest_level: str
    interest_tier: str
    interest_score: int = Field(ge=0, le=100)
    client_type: str
    channel: str
    source: str

    def to_payload(self) -> dict[str, Any]:
        payload = self.lead.to_payload()
        payload.update(
            language=self.language,
            country=self.country,
            service_category=self.service_category,
            interest_level=self.interest_level,
            interest_tier=self.interest_tier,
            interest_score=self.interest_score,
            client_type=self.client_type,
            channel=self.channel,
            source=self.source,
        )
        return payload


class ExternalResult(BaseModel):
    """Outcome of a call to a vertical's create/status API."""

    ok: bool
    generated_id: Optional[str] = None
    data: dict[str, Any] = Field(default_factory=dict)
