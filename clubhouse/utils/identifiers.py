"""
Login identifier helpers.

Players sign in with either an email address or a phone number. These
helpers classify and normalize identifiers so that lookups compare like
with like.
"""
import re
import uuid
from typing import Optional, Tuple

from .constants import MIN_PHONE_DIGITS

EMAIL = "email"
PHONE = "phone"

_NON_DIGITS = re.compile(r"\D")


def digits_only(value: Optional[str]) -> str:
    """Strip everything but digits from a phone number."""
    return _NON_DIGITS.sub("", value or "")


def normalize_email(value: Optional[str]) -> str:
    """Lower-case and trim an email address."""
    return (value or "").strip().lower()


def classify_identifier(identifier: str) -> Tuple[str, str]:
    """
    Classify a login identifier as a phone number or an email address.

    An identifier is a phone number when it has no "@" and carries at least
    seven digits; anything else is treated as an email.

    Args:
        identifier: Raw text the user typed

    Returns:
        Tuple of (kind, normalized value) where kind is "phone" or "email"

    Example:
        >>> classify_identifier("(555) 123-4567")
        ('phone', '5551234567')
        >>> classify_identifier(" Jane@Example.com ")
        ('email', 'jane@example.com')
    """
    raw = identifier or ""
    if "@" not in raw and len(digits_only(raw)) >= MIN_PHONE_DIGITS:
        return PHONE, digits_only(raw)
    return EMAIL, normalize_email(raw)


def format_phone(phone: Optional[str]) -> str:
    """
    Format a phone number as (XXX)XXX-XXXX when it is a 10-digit number.

    Eleven digits with a leading US country code are shortened; anything
    else is returned unchanged.
    """
    if not phone:
        return ""
    cleaned = digits_only(phone)
    if len(cleaned) == 11 and cleaned.startswith("1"):
        cleaned = cleaned[1:]
    if len(cleaned) == 10:
        return f"({cleaned[:3]}){cleaned[3:6]}-{cleaned[6:]}"
    return phone


def new_id(prefix: str = "") -> str:
    """Generate a unique record id, optionally prefixed (e.g. "team-")."""
    token = uuid.uuid4().hex[:12]
    return f"{prefix}{token}" if prefix else token
