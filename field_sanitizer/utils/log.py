from __future__ import annotations
import json, logging, sys
from typing import Any, Dict

# LogRecord attributes that are not user-supplied `extra` fields
_RECORD_ATTRS = frozenset({
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
    "module", "exc_info", "exc_text", "stack_info", "lineno", "funcName",
    "created", "msecs", "relativeCreated", "thread", "threadName",
    "processName", "process", "taskName", "message", "asctime",
})

class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for k, v in record.__dict__.items():
            if k not in _RECORD_ATTRS:
                payload[k] = v
        # rule params / field values are not always JSON-native
        return json.dumps(payload, separators=(",", ":"), default=str)

def get_logger(name: str = "field_sanitizer", level: str = "INFO", structured_json: bool = True) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler(sys.stderr)
    if structured_json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger

def logger_from_config(cfg: Any, name: str = "field_sanitizer") -> logging.Logger:
    """Build a logger from anything carrying a `.logging` section (level / structured_json)."""
    section = getattr(cfg, "logging", None)
    level = str(getattr(section, "level", "INFO"))
    structured = bool(getattr(section, "structured_json", True))
    return get_logger(name, level, structured)
