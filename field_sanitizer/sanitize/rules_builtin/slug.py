from __future__ import annotations
from typing import Any
import re

from slugify import slugify as _slugify

_DIGIT_COMMA_RE = re.compile(r"(?<=\d),(?=\d)")

def slug(value: Any) -> str:
    """
    ASCII-transliterated, lowercase, hyphen-separated.

    slug('This is a test with special chars: ação!@#$%^&*()')
      -> 'this-is-a-test-with-special-chars-acao'

    slug('1,000 items') -> '1-000-items'

    Non-string input yields ''.
    """
    if not isinstance(value, str):
        return ""
    # slugify would delete a comma between digits; it is a separator like any other
    value = _DIGIT_COMMA_RE.sub("-", value)
    return _slugify(
        value,
        lowercase=True,
        separator="-",
        regex_pattern=r"[^a-z0-9]+",
        entities=False,
        decimal=False,
        hexadecimal=False,
    )
