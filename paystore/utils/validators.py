"""
Custom Validators
Validation helpers for inbound request fields
"""

import math
import re
from typing import Any, Optional

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def parse_amount(value: Any) -> Optional[int]:
    """
    Parse an amount to an integer, reading only its leading digits

    "100" -> 100, " 250.75" -> 250, 99.9 -> 99, "abc" -> None

    Args:
        value: Raw amount from a JSON body or query string

    Returns:
        The parsed integer, or None if no leading integer exists
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None

    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def is_blank(value: Any) -> bool:
    """True for None and for strings that are empty after trimming"""
    return value is None or not str(value).strip()
