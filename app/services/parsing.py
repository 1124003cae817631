"""
Parsing Service - coerces loosely-typed sensor/threshold values to numbers

Values in mrtb/ctrl are free text ("12.5psi", "--", "").
Two parsers, one per field class:
- parse_number_loose: latest readings and threshold bounds (strips junk first)
- to_number: detail time series (value must already be a number literal)
"""

import math
import re
from decimal import Decimal
from typing import Any, Optional

_NON_NUMERIC_CHARS = re.compile(r"[^0-9.+-]")
_DECIMAL_LITERAL = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def _finite(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


def _from_native(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return _finite(float(value))
    return None


def parse_number_loose(value: Any) -> Optional[float]:
    """
    Permissive parse.

    Every character other than an ASCII digit, '.', '+' or '-' is dropped and
    whatever remains goes to float(). Nothing else is validated, so "1.2.3"
    reaches the converter and comes back as None because float() rejects it.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return _from_native(value)
    if not value:
        return None

    cleaned = _NON_NUMERIC_CHARS.sub("", value.strip())
    if not cleaned:
        return None
    try:
        return _finite(float(cleaned))
    except ValueError:
        return None


def to_number(value: Any) -> Optional[float]:
    """Strict parse: the trimmed text must be a plain decimal literal."""
    if value is None:
        return None
    if not isinstance(value, str):
        return _from_native(value)

    candidate = value.strip()
    if not _DECIMAL_LITERAL.match(candidate):
        return None
    return _finite(float(candidate))


def is_out_of_range(
    value: Optional[float],
    low: Optional[float],
    high: Optional[float],
) -> bool:
    """True when value is known and falls outside whichever bounds exist."""
    if value is None:
        return False
    if low is not None and value < low:
        return True
    if high is not None and value > high:
        return True
    return False
