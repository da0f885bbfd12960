from __future__ import annotations
from typing import Any, Iterable
import re

from ...utils.fp import unique_stable

_HTML_ESCAPES = {
    ord("&"): "&amp;",
    ord("<"): "&lt;",
    ord(">"): "&gt;",
    ord('"'): "&quot;",
    ord("'"): "&#039;",
}

# comments | open/close tags with a name (quoted attribute values may hold '>') | doctype, processing instructions, bare '</...>'
_TAG_RE = re.compile(
    r"<!--.*?-->"
    r"""|</?([a-zA-Z][a-zA-Z0-9:_-]*)(?:\s(?:"[^"]*"|'[^']*'|[^'">])*)?/?>"""
    r"|<[!?/][^>]*>",
    re.S,
)
_TAG_NAME_RE = re.compile(r"[a-zA-Z][a-zA-Z0-9:_-]*")

def htmlspecialchars(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    return value.translate(_HTML_ESCAPES)

def parse_allowed_tags(tokens: Iterable[str]) -> frozenset[str]:
    """
    Accepts '<a>', 'a' and concatenated '<a><p>' forms; names are case-insensitive.
    """
    names: list[str] = []
    for tok in tokens:
        names.extend(n.lower() for n in _TAG_NAME_RE.findall(tok or ""))
    return frozenset(unique_stable(names))

def _strip(text: str, allowed: frozenset[str]) -> str:
    def _sub(m: re.Match[str]) -> str:
        name = m.group(1)
        if name and name.lower() in allowed:
            return m.group(0)
        return ""

    # removing one tag can expose another ('<<b>b>'), so run to a fixed point
    while True:
        out = _TAG_RE.sub(_sub, text)
        if out == text:
            return out
        text = out

def strip_tags(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    return _strip(value, frozenset())

def strip_tags_allowed(value: Any, allowed_tags: Iterable[str] = ()) -> str:
    """
    Remove every tag except the allowed ones; the inner text of removed tags is kept.

    strip_tags_allowed('<p>Test</p><a>Link</a>', ['<a>']) -> 'Test<a>Link</a>'

    Non-string input yields ''.
    """
    if not isinstance(value, str):
        return ""
    return _strip(value, parse_allowed_tags(allowed_tags))
