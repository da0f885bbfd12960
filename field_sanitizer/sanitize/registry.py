from __future__ import annotations
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Mapping, Sequence
import inspect
import logging
import threading

_log = logging.getLogger(__name__)

# -------- public types --------

# Every stored rule gets (value, params) and returns the new value.
RuleFn = Callable[[Any, list[str]], Any]
RuleSet = dict[str, list[Any]]


# -------- built-in table --------

def compile_builtin_rules() -> dict[str, RuleFn]:
    """
    Map built-in rule names -> callables with the uniform (value, params) shape.
    Built-ins are fixed: the custom table can never shadow them.
    """
    from .rules_builtin.text_norm import trim, lowercase, uppercase, capitalize, norm_spaces
    from .rules_builtin.charset import numbers_only, alphanumeric, email, url
    from .rules_builtin.numeric import to_float, to_int
    from .rules_builtin.markup import htmlspecialchars, strip_tags, strip_tags_allowed
    from .rules_builtin.slug import slug

    # Most built-ins ignore params
    def _wrap(fn: Callable[[Any], Any]) -> RuleFn:
        def inner(value: Any, params: list[str]) -> Any:
            return fn(value)
        inner.__name__ = getattr(fn, "__name__", "rule")
        return inner

    return {
        "trim":             _wrap(trim),
        "lowercase":        _wrap(lowercase),
        "uppercase":        _wrap(uppercase),
        "capitalize":       _wrap(capitalize),
        "norm_spaces":      _wrap(norm_spaces),

        "numbers_only":     _wrap(numbers_only),
        "alphanumeric":     _wrap(alphanumeric),
        "email":            _wrap(email),
        "url":              _wrap(url),

        "float":            _wrap(to_float),
        "int":              _wrap(to_int),

        "htmlspecialchars": _wrap(htmlspecialchars),
        "strip_tags":       _wrap(strip_tags),
        "strip_tags_allowed": lambda value, params: strip_tags_allowed(value, params),

        "slug":             _wrap(slug),
    }


_BUILTINS: dict[str, RuleFn] = compile_builtin_rules()
BUILTIN_RULE_NAMES: frozenset[str] = frozenset(_BUILTINS)


# -------- callback shape --------

def _takes_params(fn: Callable[..., Any]) -> bool:
    """True when fn can be called as fn(value, params)."""
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        # builtins without introspectable signatures: assume the full shape
        return True
    positional = 0
    for p in sig.parameters.values():
        if p.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            positional += 1
    return positional >= 2


def _normalize_callback(name: str, callback: Any) -> RuleFn:
    if not callable(callback):
        raise TypeError(f"Rule {name!r}: callback must be callable, got {type(callback).__name__}")
    if _takes_params(callback):
        return callback

    def single(value: Any, params: list[str]) -> Any:
        return callback(value)
    single.__name__ = getattr(callback, "__name__", name)
    single.__wrapped__ = callback  # type: ignore[attr-defined]
    return single


# -------- registry --------

class RuleRegistry:
    """
    Table of custom rules plus field-keyed pipelines contributed by the registry.

    Writers swap in a fresh dict under a lock; readers see either the old or the
    new table, never a partial one.
    """

    def __init__(self, rules: Mapping[str, Callable[..., Any]] | None = None) -> None:
        self._lock = threading.RLock()
        self._custom: dict[str, RuleFn] = {}
        self._field_rules: RuleSet = {}
        if rules:
            self.register_many(rules)

    # ---- built-ins ----

    @staticmethod
    def is_builtin(name: str) -> bool:
        return name in _BUILTINS

    @staticmethod
    def builtin(name: str) -> RuleFn | None:
        return _BUILTINS.get(name)

    # ---- custom rules ----

    def register(self, name: str, callback: Callable[..., Any]) -> None:
        """Insert or overwrite; last writer wins. A built-in name is accepted but never reached."""
        fn = _normalize_callback(name, callback)
        with self._lock:
            self._custom = {**self._custom, name: fn}
        if name in _BUILTINS:
            _log.debug("custom rule %r is shadowed by a built-in", name)
        else:
            _log.debug("registered custom rule %r", name)

    def register_many(self, rules: Mapping[str, Callable[..., Any]]) -> None:
        # validate everything before touching the table
        compiled = {name: _normalize_callback(name, cb) for name, cb in rules.items()}
        with self._lock:
            self._custom = {**self._custom, **compiled}
        _log.debug("registered %d custom rules", len(compiled))

    def unregister(self, name: str) -> bool:
        with self._lock:
            if name not in self._custom:
                return False
            self._custom = {k: v for k, v in self._custom.items() if k != name}
        return True

    def resolve(self, name: str) -> RuleFn | None:
        return self._custom.get(name)

    def names(self) -> list[str]:
        return sorted(self._custom)

    def __contains__(self, name: object) -> bool:
        return name in self._custom

    def __len__(self) -> int:
        return len(self._custom)

    # ---- field-keyed pipelines ----

    def register_field_rules(self, rules: Mapping[str, Sequence[Any]]) -> None:
        """Per-field replace, same as any other rule layer."""
        with self._lock:
            self._field_rules = {**self._field_rules, **{f: list(p) for f, p in rules.items()}}

    def field_rules(self) -> RuleSet:
        return {f: list(p) for f, p in self._field_rules.items()}

    # ---- lifecycle ----

    def reset(self) -> None:
        """Drop every custom rule and field pipeline. Built-ins are untouched."""
        with self._lock:
            self._custom = {}
            self._field_rules = {}
        _log.debug("custom rules reset")

    @contextmanager
    def isolated(self) -> Iterator["RuleRegistry"]:
        """Registrations made inside the block are discarded on exit."""
        with self._lock:
            saved = (self._custom, self._field_rules)
        try:
            yield self
        finally:
            with self._lock:
                self._custom, self._field_rules = saved


# Shared convenience instance; engines fall back to it when none is injected.
default_registry = RuleRegistry()


def register_rule(name: str, callback: Callable[..., Any]) -> None:
    default_registry.register(name, callback)


def reset_rules() -> None:
    default_registry.reset()
