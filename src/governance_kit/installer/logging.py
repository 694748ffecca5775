"""JSON logging for installer runs.

Each log line is one JSON object on stderr, leaving stdout to the action
report. The fields the orchestrator attaches to per-artifact records
(`artifact`, `action`, `path`) and the run's `dry_run` flag are top-level keys,
so one run's log can be filtered per artifact; any other `extra` fields are
nested under `context`.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

# Attributes every LogRecord carries; anything beyond these came from `extra=`.
_STANDARD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}

PROMOTED_FIELDS: tuple[str, ...] = ("dry_run", "artifact", "action", "path")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }
        for key in PROMOTED_FIELDS:
            if key in context:
                payload[key] = context.pop(key)
        if context:
            payload["context"] = context

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class RunContextFilter(logging.Filter):
    """Stamp every record with whether the run is a dry-run."""

    def __init__(self, *, dry_run: bool) -> None:
        super().__init__()
        self.dry_run = dry_run

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 (record)
        record.dry_run = self.dry_run
        return True


def configure_logging(level: str, *, dry_run: bool = False) -> None:
    """Route all records through a single JSON handler on stderr.

    Raises:
        ValueError: if `level` is not a known logging level.
    """

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RunContextFilter(dry_run=dry_run))
    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)
