from __future__ import annotations
from typing import Any
import math
import re

_FLOAT_ILLEGAL_RE = re.compile(r"[^0-9.+\-eE]")
_INT_ILLEGAL_RE = re.compile(r"[^0-9+\-]")

_FLOAT_PREFIX_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX_RE = re.compile(r"[+-]?\d+")

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)

def to_float(value: Any) -> float:
    """
    Keep digits, '.', signs and the exponent marker, then read the leading number.

    '$1,234.50'  -> 1234.5
    '-3.2e2 kg'  -> -320.0
    'abc'        -> 0.0
    """
    try:
        if _is_number(value):
            return float(value)
        kept = _FLOAT_ILLEGAL_RE.sub("", str(value))
        m = _FLOAT_PREFIX_RE.match(kept)
        return float(m.group(0)) if m else 0.0
    except OverflowError:
        # ints beyond the float range
        return 0.0

def to_int(value: Any) -> int:
    """
    Keep digits and signs, then read the leading integer.

    '  123-456 ' -> 123 (the second sign ends the number)
    'n/a'        -> 0
    inf, or more digits than int() accepts -> 0
    """
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    try:
        if _is_number(value):
            return int(value)
        kept = _INT_ILLEGAL_RE.sub("", str(value))
        m = _INT_PREFIX_RE.match(kept)
        return int(m.group(0)) if m else 0
    except (OverflowError, ValueError):
        return 0
