from __future__ import annotations
import json
import logging
from datetime import datetime, timezone

# Context fields that may be absent on a record (no adapter in play).
_CONTEXT_FIELDS = ("index_name", "store")

_RESERVED = set(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}


class SafeFormatter(logging.Formatter):
    """Text formatter that tolerates missing context fields in the pattern."""

    def format(self, record: logging.LogRecord) -> str:
        for field in _CONTEXT_FIELDS:
            if not hasattr(record, field):
                setattr(record, field, "-")
        return super().format(record)


class JsonFormatter(logging.Formatter):
    """One JSON object per line; extra fields are included as top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for k, v in vars(record).items():
            if k not in _RESERVED and not k.startswith("_"):
                payload[k] = v
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)
