"""
Lead enrichment: derive classification fields from a completed conversation.

Every function here is pure and deterministic. Heuristics are keyword
based and fall through to a documented default, so an EnrichedLead
always carries every derived field.

Budget parsing joins *all* digit runs of the answer into one number:
"80,000 - 120,000" is read as 80000120000, not as a range. Any answer
with a range or thousands separators therefore lands in the ``high``
tier. This matches the records already stored by the bot; see
DESIGN.md before changing it.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from leadbot.schemas.lead_schema import EnrichedLead, EnrichmentFields, LeadRecord
from leadbot.utils import normalize_phone

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"

SPANISH_CHARS = re.compile(r"[ñáéíóúü]")
SPANISH_WORDS = re.compile(r"\b(?:que|para|pero|porque)\b")
ENGLISH_WORDS = re.compile(r"\b(?:the|and|for|with|project)\b")

# Order matters: the first matching prefix wins.
COUNTRY_PREFIXES: tuple[tuple[str, str], ...] = (
    ("51", "Peru"),
    ("34", "Spain"),
    ("49", "Germany"),
)

# Checked in this order; first category with a matching keyword wins.
SERVICE_CATEGORIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("web", ("landing", "página web", "web", "website")),
    ("saas/system", ("saas", "sistema", "system", "erp", "multitenant")),
    ("automation", (
        "automatización", "automatizacion", "automation",
        "integracion", "integración", "integration", "api",
    )),
    ("marketing", ("marketing", "ads", "redes", "social media")),
)
DEFAULT_SERVICE_CATEGORY = "other"

B2B_KEYWORDS = (
    "empresa", "negocio", "tienda", "clínica", "consultorio",
    "company", "business", "store", "clinic",
)
FREELANCE_KEYWORDS = ("freelance", "independiente", "personal")

LOW_BUDGET_KEYWORDS = ("bajo", "limitado", "ajustado", "low", "limited", "tight")
MEDIUM_BUDGET_KEYWORDS = ("medio", "medium")
HIGH_BUDGET_KEYWORDS = ("alto", "completo", "robusto", "high", "complete", "robust")

LOW_BUDGET_LIMIT = 500
MEDIUM_BUDGET_LIMIT = 2000


@dataclass(frozen=True)
class InterestScore:
    """Interest classification derived from the budget answer."""
    level: str
    score: int
    tier: str


LOW_INTEREST = InterestScore(level="low", score=40, tier="low")
MEDIUM_INTEREST = InterestScore(level="medium", score=70, tier="medium")
HIGH_INTEREST = InterestScore(level="high", score=90, tier="high")
DEFAULT_INTEREST = InterestScore(level=UNKNOWN, score=50, tier="medium")


def detect_language(text: str) -> str:
    """Return ``es``, ``en`` or ``unknown``; Spanish wins when both match."""
    lower = (text or "").lower()
    if SPANISH_CHARS.search(lower) or SPANISH_WORDS.search(lower):
        return "es"
    if ENGLISH_WORDS.search(lower):
        return "en"
    return UNKNOWN


def detect_country(identity: str) -> str:
    """Infer the country from the leading digits of a WhatsApp identity."""
    if not identity:
        return UNKNOWN
    digits = normalize_phone(identity).lstrip("+")
    for prefix, country in COUNTRY_PREFIXES:
        if digits.startswith(prefix):
            return country
    return UNKNOWN


def classify_service(text: str) -> str:
    lower = (text or "").lower()
    for category, keywords in SERVICE_CATEGORIES:
        if any(keyword in lower for keyword in keywords):
            return category
    return DEFAULT_SERVICE_CATEGORY


def extract_budget_digits(text: str) -> Optional[str]:
    """Concatenate every digit run of ``text`` in order of appearance.

    >>> extract_budget_digits("80,000 - 120,000")
    '80000120000'
    >>> extract_budget_digits("alto") is None
    True
    """
    runs = re.findall(r"\d+", text or "")
    if not runs:
        return None
    return "".join(runs)


def score_interest(budget_text: str) -> InterestScore:
    digits = extract_budget_digits(budget_text)
    if digits is not None:
        amount = int(digits)
        if amount < LOW_BUDGET_LIMIT:
            return LOW_INTEREST
        if amount < MEDIUM_BUDGET_LIMIT:
            return MEDIUM_INTEREST
        return HIGH_INTEREST

    lower = (budget_text or "").lower()
    if any(keyword in lower for keyword in LOW_BUDGET_KEYWORDS):
        return LOW_INTEREST
    if any(keyword in lower for keyword in MEDIUM_BUDGET_KEYWORDS):
        return MEDIUM_INTEREST
    if any(keyword in lower for keyword in HIGH_BUDGET_KEYWORDS):
        return HIGH_INTEREST
    return DEFAULT_INTEREST


def detect_client_type(text: str) -> str:
    lower = (text or "").lower()
    if any(keyword in lower for keyword in B2B_KEYWORDS):
        return "b2b"
    if any(keyword in lower for keyword in FREELANCE_KEYWORDS):
        return "freelance"
    return UNKNOWN


def enrich_lead(
    record: LeadRecord,
    fields: EnrichmentFields,
    source: str,
) -> EnrichedLead:
    """Build the EnrichedLead for ``record``.

    ``fields`` names which collected answers hold the service interest,
    the business description and the budget; missing answers are read
    as empty text and fall through to the defaults.
    """
    free_text = " ".join(record.fields.values())
    interest = score_interest(record.text(fields.budget))

    enriched = EnrichedLead(
        lead=record,
        language=detect_language(free_text),
        country=detect_country(record.identity),
        service_category=classify_service(record.text(fields.service)),
        interest_level=interest.level,
        interest_tier=interest.tier,
        interest_score=interest.score,
        client_type=detect_client_type(record.text(fields.business)),
        channel=record.channel,
        source=source,
    )
    logger.debug(
        "Lead enriched for %s: %s/%s/%s score=%d",
        record.identity, enriched.language, enriched.service_category,
        enriched.client_type, enriched.interest_score,
    )
    return enriched
