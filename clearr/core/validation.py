"""
Input validation utilities shared by the services.
"""
import re
from typing import Optional

from clearr.core.exceptions import ValidationError

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
PREFERRED_MODES = ("professional", "personal", "casual")


def normalize_phone_number(phone_number: str) -> str:
    """
    Normalize a phone number to E.164.

    Non-digits are stripped; a bare 10-digit number is treated as North
    American and gets a ``+1`` prefix, anything else a ``+``.
    """
    digits = re.sub(r'\D', '', phone_number or '')
    if len(digits) == 10:
        return f"+1{digits}"
    return f"+{digits}"


def validate_phone_number(phone_number: str) -> bool:
    """Accept 10 to 15 digits once formatting characters are removed."""
    digits = re.sub(r'\D', '', phone_number or '')
    return 10 <= len(digits) <= 15


def validate_email(email: str) -> str:
    """
    Validate email format

    Args:
        email: Email address to validate

    Returns:
        Validated email in lowercase

    Raises:
        ValidationError: If email format is invalid
    """
    email = email.strip().lower()

    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Please provide a valid email address")

    if len(email) > 255:
        raise ValidationError("Email too long (max 255 characters)")

    return email


def validate_text(
    value: Optional[str],
    field: str,
    min_length: int = 0,
    max_length: Optional[int] = None,
) -> str:
    """
    Trim ``value`` and enforce length bounds.

    Raises:
        ValidationError: If the trimmed text is too short or too long
    """
    text = (value or '').strip()
    if len(text) < min_length:
        if min_length <= 1:
            raise ValidationError(f"{field} is required")
        raise ValidationError(f"{field} must be at least {min_length} characters long")
    if max_length is not None and len(text) > max_length:
        raise ValidationError(f"{field} cannot exceed {max_length} characters")
    return text


def validate_preferred_mode(mode: str) -> str:
    mode = (mode or '').strip().lower()
    if mode not in PREFERRED_MODES:
        raise ValidationError(
            "Preferred mode must be one of: " + ", ".join(PREFERRED_MODES)
        )
    return mode
