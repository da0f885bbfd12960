from __future__ import annotations
from typing import Any
import re

# Character filters. Not validators: whatever survives the filter is returned.
# Numbers and other scalars are filtered through their str() form.

_NON_DIGIT_RE = re.compile(r"[^0-9]")
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]")

# letters, digits and !#$%&'*+-=?^_`{|}~@.[]
_EMAIL_ILLEGAL_RE = re.compile(r"[^a-zA-Z0-9!#$%&'*+\-=?^_`{|}~@.\[\]]")

# letters, digits and $-_.+!*'(),{}|\^~[]`<>#%";/?:@&=
_URL_ILLEGAL_RE = re.compile(r"[^a-zA-Z0-9$\-_.+!*'(),{}|\\^~\[\]`<>#%\";/?:@&=]")

def _text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)

def numbers_only(value: Any) -> str:
    return _NON_DIGIT_RE.sub("", _text(value))

def alphanumeric(value: Any) -> str:
    return _NON_ALNUM_RE.sub("", _text(value))

def email(value: Any) -> str:
    return _EMAIL_ILLEGAL_RE.sub("", _text(value))

def url(value: Any) -> str:
    return _URL_ILLEGAL_RE.sub("", _text(value))
