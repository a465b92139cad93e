"""Shared logging configuration utilities."""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Optional

from refbox_tools.config.env import parse_bool_env
from refbox_tools.error_handling.errors import PipelineError


DEFAULT_JSON_ENV_KEYS = ("LOG_JSON", "LOG_FORMAT")


def _should_use_json(env: dict[str, str]) -> bool:
    for key in DEFAULT_JSON_ENV_KEYS:
        if key in env:
            parsed = parse_bool_env(env.get(key))
            if parsed is not None:
                return parsed
    return True


def _resolve_context_value(record: logging.LogRecord, key: str, env_key: str) -> str:
    if hasattr(record, key):
        value = getattr(record, key)
        if value is not None:
            return str(value)
    env_value = os.getenv(env_key)
    return env_value if env_value is not None else ""


class JsonLogFormatter(logging.Formatter):
    """Formats logs as structured JSON with standard fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.module,
            "task_name": _resolve_context_value(record, "task_name", "TASK_NAME"),
            "round_id": _resolve_context_value(record, "round_id", "ROUND_ID"),
            "message": record.getMessage(),
        }
        task_error = getattr(record, "task_error", None)
        if isinstance(task_error, PipelineError):
            error = task_error.to_dict()
            payload["task_error"] = error
            payload["error_category"] = error["category"]
            payload["error_severity"] = error["severity"]
            if not payload["task_name"] and task_error.context.task_name:
                payload["task_name"] = task_error.context.task_name
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


class PlainTextFormatter(logging.Formatter):
    """Human-friendly formatter for local runs."""

    def format(self, record: logging.LogRecord) -> str:
        record.task_name = _resolve_context_value(record, "task_name", "TASK_NAME")
        record.round_id = _resolve_context_value(record, "round_id", "ROUND_ID")
        return super().format(record)


def resolve_log_level(name: Optional[str]) -> int:
    """Map a level name such as ``debug`` to its number; unknown names give INFO."""
    level = logging.getLevelName((name or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def init_logging(
    *,
    level: Optional[int] = None,
    json_enabled: Optional[bool] = None,
    stream: Optional[Any] = None,
) -> None:
    """Initialize shared logging configuration."""

    if level is None:
        level = resolve_log_level(os.getenv("LOG_LEVEL"))

    if json_enabled is None:
        json_enabled = _should_use_json(dict(os.environ))

    # stdout carries the task payload printed by the job entry point
    handler_stream = stream if stream is not None else sys.stderr
    handler = logging.StreamHandler(handler_stream)
    if json_enabled:
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(
            PlainTextFormatter(
                "%(asctime)s %(levelname)s %(module)s "
                "[task=%(task_name)s round=%(round_id)s] "
                "%(message)s"
            )
        )

    logging.basicConfig(level=level, handlers=[handler], force=True)
