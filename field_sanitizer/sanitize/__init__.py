from __future__ import annotations

# Public API re-exports (keep small & stable)
from .specifier import RuleSpec, parse_rule_spec, format_rule_spec
from .registry import (
    RuleRegistry,
    BUILTIN_RULE_NAMES,
    default_registry,
    register_rule,
    reset_rules,
)
from .engine import (
    RuleEngine,
    apply_rule,
    run_pipeline,
    sanitize_data,
    replace_merge,
    append_merge,
)
from .entity import EntitySanitizer
