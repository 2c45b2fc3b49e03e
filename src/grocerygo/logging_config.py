"""Logging setup with per-request context for the grocerygo application.

Request id, user id and meal plan id live in context variables; both
formatters read them directly, so every log line emitted while a request is
being served carries them, including lines from third-party loggers.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
user_id_ctx: ContextVar[str | None] = ContextVar("user_id", default=None)
meal_plan_id_ctx: ContextVar[str | None] = ContextVar("meal_plan_id", default=None)

_CONTEXT_VARS: dict[str, ContextVar] = {
    "request_id": request_id_ctx,
    "user_id": user_id_ctx,
    "meal_plan_id": meal_plan_id_ctx,
}

# Short labels used by the text formatter
_TEXT_LABELS = {"request_id": "req", "user_id": "user", "meal_plan_id": "plan"}


def _current_context() -> dict[str, str]:
    return {name: value for name, var in _CONTEXT_VARS.items() if (value := var.get())}


class StructuredJsonFormatter(logging.Formatter):
    """One JSON object per line, for production log collectors."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_current_context(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


class ContextualFormatter(logging.Formatter):
    """Human-readable formatter for development."""

    def format(self, record: logging.LogRecord) -> str:
        context = _current_context()
        if "request_id" in context:
            context["request_id"] = context["request_id"][:8]
        parts = [f"{_TEXT_LABELS[name]}={value}" for name, value in context.items()]
        context_str = f" [{', '.join(parts)}]" if parts else ""

        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        formatted = (
            f"{timestamp} | {record.levelname.ljust(8)} | {record.name}{context_str}"
            f" | {record.getMessage()}"
        )
        if record.exc_info:
            formatted += "\n" + self.formatException(record.exc_info)
        return formatted


def get_logger(name: str) -> logging.Logger:
    """Get the logger for a module."""
    return logging.getLogger(name)


def configure_logging(log_level: str = "INFO", json_format: bool = False) -> None:
    """
    Configure the root logger.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Emit JSON lines instead of the human-readable format.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredJsonFormatter() if json_format else ContextualFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    # Keep chatty libraries quiet unless they have something to report
    for module_name in ("httpx", "httpcore", "sqlalchemy.engine", "uvicorn.access"):
        logging.getLogger(module_name).setLevel(logging.WARNING)

    get_logger(__name__).info(
        f"Logging configured: level={logging.getLevelName(level)}, "
        f"format={'json' if json_format else 'text'}"
    )


def set_context(
    request_id: str | None = None,
    user_id: str | None = None,
    meal_plan_id: str | None = None,
) -> None:
    """Set logging context variables for the rest of the current task."""
    if request_id is not None:
        request_id_ctx.set(request_id)
    if user_id is not None:
        user_id_ctx.set(user_id)
    if meal_plan_id is not None:
        meal_plan_id_ctx.set(meal_plan_id)


class LoggingContext:
    """Context manager that sets logging context and restores it on exit."""

    def __init__(
        self,
        request_id: str | None = None,
        user_id: str | None = None,
        meal_plan_id: str | None = None,
    ):
        self.values = {
            "request_id": request_id,
            "user_id": user_id,
            "meal_plan_id": meal_plan_id,
        }
        self._tokens: dict[str, Any] = {}

    def __enter__(self) -> "LoggingContext":
        for name, value in self.values.items():
            if value is not None:
                self._tokens[name] = _CONTEXT_VARS[name].set(value)
        return self

    def __exit__(self, *args: Any) -> None:
        for name, token in self._tokens.items():
            _CONTEXT_VARS[name].reset(token)
        self._tokens.clear()
