from __future__ import annotations
from typing import Any
import re

_WHITESPACE_RE = re.compile(r"\s+")
# first non-space char of every whitespace-delimited word
_WORD_START_RE = re.compile(r"(^|\s)(\S)")

# Non-string values pass through unchanged: these rules only make sense on text.

def trim(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    return value.strip()

def lowercase(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    return value.lower()

def uppercase(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    return value.upper()

def capitalize(value: Any) -> Any:
    """
    Lowercase everything, then uppercase the first letter of every word.

    Words are split on whitespace only, so "o'neil-smith" -> "O'neil-smith"
    (unlike str.title, which would also capitalize after ' and -).
    """
    if not isinstance(value, str):
        return value
    return _WORD_START_RE.sub(lambda m: m.group(1) + m.group(2).upper(), value.lower())

def norm_spaces(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    return _WHITESPACE_RE.sub(" ", value).strip()
