"""Shared utilities used across the lead bot."""

import re

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 15


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("+51 999 000 111")
        '+51999000111'
        >>> normalize_phone("(01) 234-5678")
        '012345678'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def normalize_input(value: str) -> str:
    """Trim and case-fold user input for keyword matching."""
    return (value or "").strip().casefold()


def is_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value.strip()))


def is_phone(value: str) -> bool:
    digits = re.sub(r"[^\d]", "", value)
    return MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS


def is_contact(value: str) -> bool:
    """True when the text looks like an e-mail address or a phone number."""
    return is_email(value) or is_phone(value)
