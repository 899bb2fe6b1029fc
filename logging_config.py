"""
Structured logging for the Sideline API and CLI.

Each record is written as one JSON object. Whatever a call site passes in
``extra`` (``event``, ``source``, ``key``, row counts) is lifted to the top
level, so merge and fetch events can be filtered without parsing messages.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

# attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

# environments not listed log at DEBUG
_ENVIRONMENT_LEVELS = {"production": logging.INFO, "staging": logging.INFO}


def extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    def __init__(self, service: str, environment: str) -> None:
        super().__init__()
        self.context = {"service": service, "environment": environment}

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            **self.context,
            "message": record.getMessage(),
        }
        payload.update(extra_fields(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def resolve_level(level: str | None, environment: str) -> int:
    """LOG_LEVEL name -> logging level; unknown names fall back to INFO."""
    if not level:
        return _ENVIRONMENT_LEVELS.get(environment.lower(), logging.DEBUG)
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
    service: str,
    environment: str,
    log_level: str | None = None,
    stream: TextIO | None = None,
) -> logging.Handler:
    """
    Route every logger through a single JSON handler on the root logger.
    The CLI passes ``sys.stderr`` since its stdout carries command output.
    """
    handler = logging.StreamHandler(stream=stream or sys.stdout)
    handler.setFormatter(JSONFormatter(service=service, environment=environment))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(resolve_level(log_level, environment))
    return handler
