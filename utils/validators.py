"""
utils/validators.py - Lenient Query Parameter Parsing

The list endpoint never rejects client input. These helpers turn raw query
string values into safe values and report "no value" instead of raising:
- Integer parsing with leading-integer semantics ("12abc" -> 12), optionally
  limited to the signed 64-bit range
- Clamping into an inclusive range
- Cleaning repeated string parameters
"""

import re
from typing import Iterable, List, Optional

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

# Signed 64-bit range of BIGINT columns and OFFSET
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def parse_int(value: Optional[str]) -> Optional[int]:
    """
    Parse the leading integer of a query string value.

    Args:
        value: Raw parameter value (may be None)

    Returns:
        int if the value starts with an integer, None otherwise
    """
    if value is None:
        return None

    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def parse_int64(value: Optional[str]) -> Optional[int]:
    """
    Like parse_int, but integers outside the signed 64-bit range count as
    no value; the database cannot compare against them.
    """
    number = parse_int(value)
    if number is None or not INT64_MIN <= number <= INT64_MAX:
        return None
    return number


def clamp(value: int, lower: int, upper: int) -> int:
    """Clamp value into the inclusive range [lower, upper]."""
    return min(max(lower, value), upper)


def clean_values(values: Optional[Iterable[str]]) -> List[str]:
    """
    Drop blank entries from a repeated parameter, keeping order.

    Args:
        values: Raw repeated values

    Returns:
        list: Non-blank values, stripped
    """
    if not values:
        return []
    return [value.strip() for value in values if value and value.strip()]
