from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

from .engine import RuleEngine, RulesLike, replace_merge
from .registry import RuleRegistry, RuleSet, default_registry


@dataclass
class EntitySanitizer:
    """
    Rule layers for one named entity (e.g. a model/table name):

      config[entity]  <  registry field rules  <  instance rules (set_rules)  <  dynamic rules (add_rule)

    `config` is the already-parsed provider mapping: entity name -> rule-set.
    """
    entity: str
    config: Mapping[str, RulesLike] = field(default_factory=dict)
    registry: RuleRegistry = field(default_factory=lambda: default_registry)
    instance_rules: RuleSet = field(default_factory=dict)
    dynamic_rules: RuleSet = field(default_factory=dict)

    @classmethod
    def from_config(cls, cfg: Any, entity: str, registry: RuleRegistry | None = None) -> "EntitySanitizer":
        """Build from a loaded SanitizerCfg (anything with a `.rules` entity mapping)."""
        return cls(
            entity=entity,
            config=dict(getattr(cfg, "rules", {}) or {}),
            registry=registry if registry is not None else default_registry,
        )

    def set_rules(self, rules: RulesLike) -> None:
        """
        Merge `rules` into the instance layer, per field.

        Fields not mentioned keep their earlier instance pipeline, so two calls
        accumulate. Use clear_rules() first to start the instance layer over.
        """
        self.instance_rules = replace_merge(self.instance_rules, rules)

    def clear_rules(self) -> None:
        """Drop the instance and dynamic layers; config rules remain."""
        self.instance_rules = {}
        self.dynamic_rules = {}

    def add_rule(self, field_name: str, rule: str | Sequence[Any]) -> None:
        pipeline = [rule] if isinstance(rule, str) else list(rule)
        self.dynamic_rules = replace_merge(self.dynamic_rules, {field_name: pipeline})

    def load_rules(self) -> RuleSet:
        return self.engine().get_rules()

    def get_rules(self, field_name: str | None = None) -> RuleSet | list[Any]:
        rules = self.load_rules()
        if field_name is None:
            return rules
        return rules.get(field_name, [])

    def register_rule(self, name: str, callback: Callable[..., Any]) -> None:
        self.registry.register(name, callback)

    def engine(self) -> RuleEngine:
        # config is the base layer; registry field rules sit between it and the explicit layers
        eng = RuleEngine(self.config.get(self.entity), registry=self.registry)
        eng.add_rules(replace_merge(self.instance_rules, self.dynamic_rules))
        return eng

    def sanitize(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return self.engine().sanitize(data)
