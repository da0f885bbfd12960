from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List
import os
from pydantic import (
    BaseModel,
    ConfigDict,
    field_validator,
)

# Pipelines are lists of "name" / "name:arg1,arg2" strings
EntityRules = Dict[str, List[str]]


class LoggingCfg(BaseModel):
    level: str = "INFO"
    structured_json: bool = True


class SanitizerCfg(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # entity name -> field -> pipeline
    rules: Dict[str, EntityRules] = {}
    logging: LoggingCfg = LoggingCfg()

    @field_validator("rules", mode="before")
    @classmethod
    def _single_rule_as_list(cls, v: Any) -> Any:
        # allow `phone = "numbers_only"` as shorthand for a one-rule pipeline
        if not isinstance(v, dict):
            return v
        out: Dict[str, Any] = {}
        for entity, fields in v.items():
            if isinstance(fields, dict):
                out[entity] = {f: ([p] if isinstance(p, str) else p) for f, p in fields.items()}
            else:
                out[entity] = fields
        return out

    def rules_for(self, entity: str) -> EntityRules:
        return {f: list(p) for f, p in self.rules.get(entity, {}).items()}

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str]) -> "SanitizerCfg":
        try:
            import tomllib  # py>=3.11
        except Exception:
            import tomli as tomllib

        p = Path(path)
        # utf-8-sig drops a BOM some editors leave behind
        text = p.read_text(encoding="utf-8-sig")
        try:
            raw = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            snippet = text.strip()[:80].replace("\n", "\\n")
            raise RuntimeError(
                f"Failed to parse TOML at {p}. First chars: {snippet!r}"
            ) from e

        raw.setdefault("rules", {})
        raw.setdefault("logging", {})
        return cls(rules=raw["rules"], logging=LoggingCfg(**raw["logging"]))

    @classmethod
    def load(cls, path: str | None = None) -> "SanitizerCfg":
        final = Path(path or os.environ.get("FIELD_SANITIZER_CFG", "config/sanitization.toml")).resolve()
        return cls.from_toml(final)


def load_config(path: str | None = None) -> SanitizerCfg:
    return SanitizerCfg.load(path)
