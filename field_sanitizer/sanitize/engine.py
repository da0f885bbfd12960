from __future__ import annotations
from typing import Any, Mapping, Sequence
import logging

import pandas as pd

from ..utils.fp import pipe
from .registry import RuleRegistry, RuleSet, default_registry
from .specifier import RuleSpec, as_rule_spec, parse_pipeline

_log = logging.getLogger(__name__)

RulesLike = Mapping[str, Sequence[Any]]


# ---- rule-set merging ----
# Two strategies:
#   replace_merge: combining layers (config < instance/registry < dynamic < late); a field's
#                  pipeline in a later layer replaces the earlier one wholesale.
#   append_merge:  incremental add_rules on one engine; pipelines for the same field concatenate.

def replace_merge(*layers: RulesLike | None) -> RuleSet:
    out: RuleSet = {}
    for layer in layers:
        if not layer:
            continue
        for field, pipeline in layer.items():
            out[field] = list(pipeline)
    return out


def append_merge(base: RulesLike | None, incoming: RulesLike | None) -> RuleSet:
    out: RuleSet = {f: list(p) for f, p in (base or {}).items()}
    for field, pipeline in (incoming or {}).items():
        if field in out:
            out[field] = out[field] + list(pipeline)
        else:
            out[field] = list(pipeline)
    return out


# ---- single rule / pipeline ----

def _is_blank(value: Any) -> bool:
    """None, '' and pandas missing scalars (NA / NaN / NaT)."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if pd.api.types.is_scalar(value):
        try:
            return bool(pd.isna(value))
        except (TypeError, ValueError):
            return False
    return False


def apply_rule(value: Any, rule: RuleSpec | str, registry: RuleRegistry | None = None) -> Any:
    """
    Apply one rule to one value.

    Resolution order: built-in table, then the registry, then identity.
    Built-ins never run on a blank value; custom rules always see the raw value.
    Exceptions raised by custom rules propagate.
    """
    spec = as_rule_spec(rule)
    reg = registry if registry is not None else default_registry

    builtin = reg.builtin(spec.name)
    if builtin is not None:
        if _is_blank(value):
            return value
        return builtin(value, list(spec.params))

    custom = reg.resolve(spec.name)
    if custom is not None:
        return custom(value, list(spec.params))

    _log.debug("unknown rule %r: value passed through", spec.name)
    return value


def run_pipeline(value: Any, pipeline: Sequence[Any], registry: RuleRegistry | None = None) -> Any:
    specs = parse_pipeline(pipeline)
    return pipe(value, *[(lambda v, s=s: apply_rule(v, s, registry)) for s in specs])


def _flatten_pipeline(rules: Any) -> list[Any]:
    """Scalar mode: a plain pipeline, or every pipeline of a rule-set chained in order."""
    if not rules:
        return []
    if isinstance(rules, (str, RuleSpec)):
        return [rules]
    if isinstance(rules, Mapping):
        out: list[Any] = []
        for pipeline in rules.values():
            out.extend(_flatten_pipeline(pipeline))
        return out
    return list(rules)


# ---- engine ----

class RuleEngine:
    """
    Holds a base rule-set and applies merged rules to data.

    Effective rules, lowest to highest priority:
      base rules (constructor) < registry field rules < dynamic rules (add_rules) < late rules (sanitize call)
    """

    def __init__(self, rules: RulesLike | None = None, registry: RuleRegistry | None = None) -> None:
        self._rules: RuleSet = {f: list(p) for f, p in (rules or {}).items()}
        self._dynamic: RuleSet = {}
        self._registry = registry

    @property
    def registry(self) -> RuleRegistry:
        # resolved lazily so registrations made after construction are seen
        return self._registry if self._registry is not None else default_registry

    def add_rules(self, rules: RulesLike) -> None:
        """Incremental add: pipelines for an already-known field are appended to, not replaced."""
        self._dynamic = append_merge(self._dynamic, rules)

    def get_rules(self) -> RuleSet:
        """Fresh snapshot of the effective rules; safe to mutate."""
        return replace_merge(self._rules, self.registry.field_rules(), self._dynamic)

    def sanitize(self, data: Any, late_rules: Any = None) -> Any:
        """
        Two modes, chosen by the type of `data`:

        - Mapping: every field with a pipeline in get_rules() + late_rules is run
          through it; other fields are copied as-is. The result has exactly the
          input's keys. late_rules is a rule-set and wins per field for this call only.
        - Anything else: the value is run through the pipeline given by late_rules,
          which may be a plain list of specifiers or a rule-set whose pipelines are
          chained in order (field keys are ignored).

        With no rules anywhere, `data` is returned as-is.
        """
        if isinstance(data, Mapping):
            merged = replace_merge(self.get_rules(), late_rules)
            if not merged:
                return data
            return {
                field: (run_pipeline(value, merged[field], self.registry) if field in merged else value)
                for field, value in data.items()
            }

        pipeline = _flatten_pipeline(late_rules)
        if not pipeline:
            return data
        return run_pipeline(data, pipeline, self.registry)

    def sanitize_frame(self, df: pd.DataFrame, late_rules: RulesLike | None = None) -> pd.DataFrame:
        """Column-wise variant of `sanitize` for tabular data; returns a new frame."""
        merged = replace_merge(self.get_rules(), late_rules)
        out = df.copy(deep=True)
        if not merged:
            return out
        reg = self.registry
        for col in out.columns:
            if col in merged:
                pipeline = parse_pipeline(merged[col])
                out[col] = out[col].map(lambda v, p=pipeline: run_pipeline(v, p, reg))
        return out


def sanitize_data(data: Mapping[str, Any], rules: RulesLike, registry: RuleRegistry | None = None) -> dict[str, Any]:
    """One-shot: sanitize a mapping with an explicit rule-set, no engine state involved."""
    if not rules:
        return dict(data)
    return {
        field: (run_pipeline(value, rules[field], registry) if field in rules else value)
        for field, value in data.items()
    }
