"""Process-wide logging setup with per-task contextual fields."""

from __future__ import annotations

import json
import logging
import logging.config
import os
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Mapping

LOG_LEVEL_ENV_VAR = "STORYTIME_LOG_LEVEL"
LOG_FORMAT_ENV_VAR = "STORYTIME_LOG_FORMAT"
CAPTURE_WARNINGS_ENV_VAR = "STORYTIME_CAPTURE_WARNINGS"

_LOG_CONTEXT: ContextVar[Mapping[str, Any]] = ContextVar("storytime_log_context", default={})

# Attributes every LogRecord carries; anything else on a record came from ``extra``.
_STANDARD_ATTRS = frozenset(logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__) | {
    "message",
    "asctime",
    "context",
}

# Server loggers routed through our handler instead of their own.
_ADOPTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class ContextFilter(logging.Filter):
    """Attach the active :func:`log_context` fields and the service name to each record."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401 - inherited docstring
        record.context = dict(_LOG_CONTEXT.get())
        if not getattr(record, "service", None):
            record.service = self.service_name
        return True


def _record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Context fields overlaid with the record's own ``extra`` values."""

    fields: Dict[str, Any] = {}
    context = getattr(record, "context", None)
    if isinstance(context, Mapping):
        fields.update({key: value for key, value in context.items() if value is not None})
    for key, value in record.__dict__.items():
        if key in _STANDARD_ATTRS or key.startswith("_") or value is None:
            continue
        fields[key] = value
    return fields


class JsonFormatter(logging.Formatter):
    """One JSON object per line; values that cannot be serialised are dropped."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - inherited docstring
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in _record_fields(record).items():
            if key not in payload and _is_json_safe(value):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)
        return json.dumps(payload, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Human-readable lines for local runs: ``LEVEL logger: message key=value ...``."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - inherited docstring
        line = f"{record.levelname:<7} {record.name}: {record.getMessage()}"
        fields = " ".join(f"{key}={value}" for key, value in sorted(_record_fields(record).items()))
        if fields:
            line = f"{line} [{fields}]"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _is_json_safe(value: Any) -> bool:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return False
    return True


def setup_logging(
    service_name: str,
    level: str | int | None = None,
    *,
    capture_warnings: bool | None = None,
) -> None:
    """Configure the root logger for ``service_name``.

    ``level`` falls back to ``STORYTIME_LOG_LEVEL`` (default INFO) and the
    output format to ``STORYTIME_LOG_FORMAT`` (``json`` or ``text``). Each call
    replaces the previous handlers.
    """

    resolved_level = level or os.getenv(LOG_LEVEL_ENV_VAR, "INFO").upper()
    formatter = "text" if os.getenv(LOG_FORMAT_ENV_VAR, "json").lower() == "text" else "json"

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {"()": "storytime_observability.logging.JsonFormatter"},
                "text": {"()": "storytime_observability.logging.TextFormatter"},
            },
            "filters": {
                "context": {
                    "()": "storytime_observability.logging.ContextFilter",
                    "service_name": service_name,
                }
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": formatter,
                    "filters": ["context"],
                }
            },
            "root": {"level": resolved_level, "handlers": ["default"]},
            "loggers": {
                name: {"handlers": ["default"], "level": resolved_level, "propagate": False}
                for name in _ADOPTED_LOGGERS
            },
        }
    )

    if capture_warnings is None:
        capture_warnings = os.getenv(CAPTURE_WARNINGS_ENV_VAR, "").lower() in {"1", "true", "yes"}
    logging.captureWarnings(capture_warnings)


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Bind ``fields`` to every log line emitted inside the block.

    Passing ``None`` for a field unbinds it for the duration of the block.
    """

    merged = dict(_LOG_CONTEXT.get())
    for key, value in fields.items():
        if value is None:
            merged.pop(key, None)
        else:
            merged[key] = value
    token = _LOG_CONTEXT.set(merged)
    try:
        yield
    finally:
        _LOG_CONTEXT.reset(token)


def current_log_context() -> Dict[str, Any]:
    return dict(_LOG_CONTEXT.get())


__all__ = [
    "ContextFilter",
    "JsonFormatter",
    "TextFormatter",
    "setup_logging",
    "log_context",
    "current_log_context",
]
