from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable

# -------- public types --------

@dataclass(frozen=True)
class RuleSpec:
    """
    A rule name plus an ordered list of string parameters.

    The string form used in configuration is either:
      'trim'                      -> RuleSpec('trim')
      'strip_tags_allowed:<a>,<p>' -> RuleSpec('strip_tags_allowed', ('<a>', '<p>'), parameterized=True)

    There is no escaping: a parameter can never contain a comma. `parameterized`
    records whether a colon was present, since 'name:' carries a single empty
    parameter while 'name' carries none.
    """
    name: str
    params: tuple[str, ...] = ()
    parameterized: bool = False

    def __str__(self) -> str:
        return format_rule_spec(self)


# -------- parse / format --------

def parse_rule_spec(text: str) -> RuleSpec:
    """
    Split on the first colon only, then split the remainder on every comma.

    'append:x,y'   -> name='append', params=('x', 'y')
    'append:'      -> name='append', params=('',)
    'ratio:1:2'    -> name='ratio',  params=('1:2',)
    ':x'           -> name='',       params=('x',)   (never resolves; caller decides)
    """
    s = str(text).strip()
    if ":" not in s:
        return RuleSpec(name=s)
    name, raw = s.split(":", 1)
    return RuleSpec(name=name, params=tuple(raw.split(",")), parameterized=True)


def format_rule_spec(spec: RuleSpec) -> str:
    if not (spec.parameterized or spec.params):
        return spec.name
    for p in spec.params:
        if "," in p:
            raise ValueError(
                f"Parameter {p!r} of rule {spec.name!r} contains a comma and cannot be serialized"
            )
    return f"{spec.name}:{','.join(spec.params)}"


def as_rule_spec(x: Any) -> RuleSpec:
    if isinstance(x, RuleSpec):
        return x
    if isinstance(x, str):
        return parse_rule_spec(x)
    raise TypeError(f"Rule specifier must be a str or RuleSpec, got {type(x).__name__}")


def parse_pipeline(rules: Iterable[Any]) -> list[RuleSpec]:
    return [as_rule_spec(r) for r in rules]
