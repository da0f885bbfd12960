from __future__ import annotations
import argparse, json, sys
from pathlib import Path
from typing import Any, Iterable, List

from field_sanitizer.config_model.model import load_config
from field_sanitizer.sanitize.entity import EntitySanitizer
from field_sanitizer.utils.log import logger_from_config


def _read_records(path: Path) -> List[dict[str, Any]]:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".jsonl", ".ndjson"}:
        return [json.loads(line) for line in text.splitlines() if line.strip()]
    obj = json.loads(text)
    return obj if isinstance(obj, list) else [obj]


def _write_records(records: Iterable[dict[str, Any]], out: Path | None, jsonl: bool) -> None:
    rows = list(records)
    if jsonl:
        payload = "".join(json.dumps(r, ensure_ascii=False) + "\n" for r in rows)
    else:
        payload = json.dumps(rows, ensure_ascii=False, indent=2) + "\n"
    if out is None:
        sys.stdout.write(payload)
    else:
        out.write_text(payload, encoding="utf-8")


def _parse_rule_flags(flags: List[str]) -> dict[str, List[str]]:
    # --rule field=trim --rule field=uppercase  ->  {"field": ["trim", "uppercase"]}
    rules: dict[str, List[str]] = {}
    for flag in flags:
        if "=" not in flag:
            raise SystemExit(f"--rule expects FIELD=RULE, got {flag!r}")
        field, spec = flag.split("=", 1)
        rules.setdefault(field.strip(), []).append(spec.strip())
    return rules


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Apply an entity's sanitization rules to JSON / JSON-lines records.")
    ap.add_argument("input", type=Path, help="records file (.json list/object or .jsonl)")
    ap.add_argument("--entity", required=True, help="entity name whose rules to apply (e.g. UserModel)")
    ap.add_argument("--config", default=None, help="TOML config (default: $FIELD_SANITIZER_CFG or config/sanitization.toml)")
    ap.add_argument("--rule", action="append", default=[], help="extra FIELD=RULE, overrides the configured pipeline for FIELD")
    ap.add_argument("--out", type=Path, default=None, help="output file (default: stdout)")
    args = ap.parse_args(argv)

    cfg = load_config(args.config)
    log = logger_from_config(cfg, "sanitize_records")

    sanitizer = EntitySanitizer.from_config(cfg, args.entity)
    for field, pipeline in _parse_rule_flags(args.rule).items():
        sanitizer.add_rule(field, pipeline)

    records = _read_records(args.input)
    cleaned = [sanitizer.sanitize(r) for r in records]
    jsonl = args.input.suffix.lower() in {".jsonl", ".ndjson"}
    _write_records(cleaned, args.out, jsonl)

    log.info(
        "sanitize_records_done",
        extra={
            "entity": args.entity,
            "records": len(cleaned),
            "fields_with_rules": sorted(sanitizer.load_rules()),
            "out": str(args.out) if args.out else "<stdout>",
        },
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
