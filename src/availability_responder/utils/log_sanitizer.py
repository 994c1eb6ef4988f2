"""
Log sanitization utilities to prevent PII leakage.

Requester phone numbers and SMS bodies are personal data; every module logs
them through these helpers instead of writing them out verbatim.
"""

import re
from typing import Iterable, Optional

_DIGITS = re.compile(r'\d')


def sanitize_phone_number(phone_number: Optional[str]) -> str:
    """
    Sanitize a phone number for logging by keeping only the last four digits.

    Args:
        phone_number: Phone number to sanitize

    Returns:
        Sanitized phone number representation

    Example:
        "+15551234567" -> "***4567 (12 chars)"
    """
    if not phone_number:
        return "[no-number]"

    digits = _DIGITS.findall(phone_number)
    if len(digits) < 4:
        return f"[short-number] ({len(phone_number)} chars)"

    return f"***{''.join(digits[-4:])} ({len(phone_number)} chars)"


def sanitize_phone_list(phone_numbers: Iterable[str]) -> str:
    """
    Sanitize a collection of phone numbers for logging.

    Args:
        phone_numbers: Phone numbers to sanitize

    Returns:
        Sanitized representation of the collection
    """
    numbers = sorted(phone_numbers)
    if not numbers:
        return "[]"
    return f"[{len(numbers)} numbers: {', '.join(sanitize_phone_number(n) for n in numbers)}]"


def sanitize_message_body(body: Optional[str], max_preview_length: int = 20) -> str:
    """
    Sanitize an SMS body for logging.

    Args:
        body: Message text to sanitize
        max_preview_length: Maximum characters to show from the body

    Returns:
        Sanitized body representation
    """
    if not body:
        return "[empty-body]"

    preview = body[:max_preview_length]
    if len(body) > max_preview_length:
        preview += "..."

    return f"'{preview}' ({len(body)} chars)"


def sanitize_summary(summary: Optional[str]) -> str:
    """Sanitize a calendar event summary, which may name people or places."""
    if not summary:
        return "[no-summary]"
    return sanitize_message_body(summary, max_preview_length=12)


def sanitize_for_logging(**kwargs) -> dict:
    """
    Sanitize multiple fields for logging in one call.

    Args:
        **kwargs: Fields to sanitize (to, from, body, summary, etc.)

    Returns:
        Dictionary with sanitized values
    """
    sanitized = {}

    for key, value in kwargs.items():
        if key in ('to', 'from', 'sender', 'requester', 'destination'):
            sanitized[key] = sanitize_phone_number(value)
        elif key in ('allow_list', 'numbers') and value is not None:
            sanitized[key] = sanitize_phone_list(value)
        elif key in ('body', 'message'):
            sanitized[key] = sanitize_message_body(value)
        elif key == 'summary':
            sanitized[key] = sanitize_summary(value)
        else:
            # Other fields are not personal data
            sanitized[key] = value

    return sanitized
