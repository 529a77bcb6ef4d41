"""Shared validation utilities"""

import re
from typing import Optional


def validate_br_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a Brazilian phone number (area code + 9 digits).

    Args:
        phone: Phone number string in various formats, e.g. "(11) 98765-4321"

    Returns:
        The 11 digits with formatting removed

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    digits = re.sub(r"\D", "", phone)

    if len(digits) != 11:
        raise ValueError("Phone number must have 11 digits")

    return digits


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def normalize_postal_code(postal_code: Optional[str]) -> str:
    """Strip everything but digits from a CEP"""
    return re.sub(r"\D", "", postal_code or "")


def validate_postal_code(postal_code: Optional[str]) -> bool:
    """A CEP is valid when it has exactly 8 digits once formatting is removed"""
    return len(normalize_postal_code(postal_code)) == 8


def format_postal_code(postal_code: str) -> str:
    """Render a CEP as NNNNN-NNN (input that is not 8 digits is returned as digits)"""
    digits = normalize_postal_code(postal_code)
    if len(digits) != 8:
        return digits
    return f"{digits[:5]}-{digits[5:]}"


def validate_hhmm(value: Optional[str]) -> Optional[str]:
    """Validate a HH:MM wall-clock time. Empty strings become None."""
    if not value:
        return None

    value = value.strip()
    match = re.match(r"^([01]\d|2[0-3]):([0-5]\d)(:[0-5]\d)?$", value)
    if not match:
        raise ValueError("Time must be in HH:MM format")

    return f"{match.group(1)}:{match.group(2)}"
