"""Regular expressions and helpers for contact details in résumé text."""

import re
from typing import List

EMAIL_PATTERN = re.compile(
    r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b", re.IGNORECASE
)

# Tried in order; the first pattern with a match wins
PHONE_PATTERNS = (
    # US: (123) 456-7890, 123-456-7890, 123.456.7890, 123 456 7890
    re.compile(r"\(?\b\d{3}\)?[-. ]?\d{3}[-. ]?\d{4}\b"),
    # International: +1-123-456-7890, +44 123 456 7890
    re.compile(r"\+\d{1,3}[-. ]?\(?\d{3}\)?[-. ]?\d{3}[-. ]?\d{4}\b"),
    # Plain: 1234567890
    re.compile(r"\b\d{10}\b"),
    # Country code with optional space: +1 (123) 456-7890
    re.compile(r"\+\d{1,3}\s?\(?\d{3}\)?[-. ]?\d{3}[-. ]?\d{4}\b"),
)

_NON_DIGIT_PATTERN = re.compile(r"\D")


def extract_email(text: str) -> str:
    """First e-mail address in the text, lowercased, or an empty string."""
    if not text:
        return ""
    match = EMAIL_PATTERN.search(text)
    return match.group().lower() if match else ""


def extract_all_emails(text: str) -> List[str]:
    """Every e-mail address in order of appearance, lowercased, without duplicates."""
    if not text:
        return []
    emails = []
    for match in EMAIL_PATTERN.finditer(text):
        email = match.group().lower()
        if email not in emails:
            emails.append(email)
    return emails


def clean_phone(phone: str) -> str:
    """Keep a leading '+' and strip every other non-digit.

    Example:
        >>> clean_phone("+1 (555) 123-4567")
        '+15551234567'
    """
    if not phone:
        return ""
    stripped = phone.strip()
    prefix = "+" if stripped.startswith("+") else ""
    return prefix + _NON_DIGIT_PATTERN.sub("", stripped)


def extract_phone(text: str) -> str:
    """First phone number found by the ordered patterns, cleaned, or an empty string."""
    if not text:
        return ""
    for pattern in PHONE_PATTERNS:
        match = pattern.search(text)
        if match:
            return clean_phone(match.group())
    return ""


def extract_all_phones(text: str) -> List[str]:
    """Every phone number matched by any pattern, cleaned, without duplicates.

    Results are grouped by pattern, in pattern order.
    """
    if not text:
        return []
    phones = []
    for pattern in PHONE_PATTERNS:
        for match in pattern.finditer(text):
            phone = clean_phone(match.group())
            if phone not in phones:
                phones.append(phone)
    return phones


def is_valid_email(email: str) -> bool:
    """Whether the whole string is a single e-mail address."""
    if not email or not email.strip():
        return False
    return EMAIL_PATTERN.fullmatch(email.strip()) is not None


def is_valid_phone(phone: str) -> bool:
    """Whether the whole string matches one of the phone formats."""
    if not phone or not phone.strip():
        return False
    candidate = phone.strip()
    return any(pattern.fullmatch(candidate) for pattern in PHONE_PATTERNS)
