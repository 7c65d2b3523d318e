from leadbot.enrichment.lead_enrichment import (
    InterestScore,
    classify_service,
    detect_client_type,
    detect_country,
    detect_language,
    enrich_lead,
    extract_budget_digits,
    score_interest,
)

__all__ = [
    "InterestScore",
    "classify_service",
    "detect_client_type",
    "detect_country",
    "detect_language",
    "enrich_lead",
    "extract_budget_digits",
    "score_interest",
]
