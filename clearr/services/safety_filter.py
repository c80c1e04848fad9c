"""
Pre-generation content check.

Only extreme self-harm and violence phrasing is rejected. Profanity and
hostility are exactly what users come to soften, so they pass through.
"""
import re
from typing import Pattern, Tuple

SAFETY_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r'\b(kill|murder|suicide|self-harm|end.{0,10}life)\b', re.IGNORECASE),
    re.compile(r'\b(want.{0,10}to.{0,10}die|gonna.{0,10}die)\b', re.IGNORECASE),
)


def should_block(text: str) -> bool:
    """Return True when ``text`` matches any safety pattern."""
    return any(pattern.search(text or '') for pattern in SAFETY_PATTERNS)
