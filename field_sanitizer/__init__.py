from __future__ import annotations

from .sanitize import (
    RuleSpec,
    RuleRegistry,
    RuleEngine,
    EntitySanitizer,
    default_registry,
    register_rule,
    reset_rules,
    sanitize_data,
)

__version__ = "0.1.0"
