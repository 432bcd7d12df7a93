"""
Input parsing helpers for the Local XI lineup manager.

Rating and stat fields are typed by hand on the sideline, so these parsers are
permissive: they return ``None`` for "clear this value" and raise
:class:`ParseRejection` when the input should simply be ignored.
"""
import math
import re
from typing import Optional

from .constants import MAX_RATING, MIN_RATING

_INTEGER_RE = re.compile(r"^\d+$")


class ParseRejection(ValueError):
    """Raised when user input cannot be applied and should be discarded."""
    pass


def round_one_decimal(value: float) -> float:
    """
    Round half away from zero to one decimal place.

    Example:
        >>> round_one_decimal(7.25)
        7.3
    """
    return math.floor(value * 10 + 0.5) / 10


def clamp_rating(value: float) -> float:
    """Clamp a rating into the rating scale and round it to one decimal."""
    return round_one_decimal(min(MAX_RATING, max(MIN_RATING, value)))


def parse_rating(raw: Optional[str]) -> Optional[float]:
    """
    Parse a rating typed by the user.

    Args:
        raw: Raw text; whitespace is trimmed and a comma counts as a decimal point

    Returns:
        Clamped rating with one decimal, or None when the input is blank

    Raises:
        ParseRejection: If the input is not a finite number
    """
    text = (raw or "").strip().replace(",", ".")
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        raise ParseRejection(f"Not a number: {raw!r}")
    if not math.isfinite(value):
        raise ParseRejection(f"Not a finite number: {raw!r}")
    return clamp_rating(value)


def parse_stat(raw: Optional[str]) -> Optional[int]:
    """
    Parse a match stat counter typed by the user.

    Args:
        raw: Raw text for the counter

    Returns:
        Non-negative integer, or None when the input is blank

    Raises:
        ParseRejection: If the input is not a non-negative whole number
    """
    text = (raw or "").strip()
    if not text:
        return None
    if not _INTEGER_RE.match(text):
        raise ParseRejection(f"Not a non-negative integer: {raw!r}")
    return int(text)
