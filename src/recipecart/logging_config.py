"""Structured logging configuration for recipecart."""

import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

# Context variables for request/list tracking
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
owner_id_ctx: ContextVar[str | None] = ContextVar("owner_id", default=None)
list_key_ctx: ContextVar[str | None] = ContextVar("list_key", default=None)

_CONTEXT_VARS: dict[str, ContextVar] = {
    "request_id": request_id_ctx,
    "owner_id": owner_id_ctx,
    "list_key": list_key_ctx,
}


def _current_context() -> dict[str, str]:
    return {name: value for name, var in _CONTEXT_VARS.items() if (value := var.get())}


class StructuredJsonFormatter(logging.Formatter):
    """JSON formatter for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        log_data.update(_current_context())

        # Add extra fields from the record
        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data["location"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }

        return json.dumps(log_data, ensure_ascii=False)


class ContextualFormatter(logging.Formatter):
    """Human-readable formatter with context for development."""

    def format(self, record: logging.LogRecord) -> str:
        context_parts = []
        if request_id := request_id_ctx.get():
            context_parts.append(f"req={request_id[:8]}")
        if owner_id := owner_id_ctx.get():
            context_parts.append(f"owner={owner_id}")
        if list_key := list_key_ctx.get():
            context_parts.append(f"item={list_key}")

        context_str = f" [{', '.join(context_parts)}]" if context_parts else ""

        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname.ljust(8)
        message = record.getMessage()

        formatted = f"{timestamp} | {level} | {record.name}{context_str} | {message}"

        if record.exc_info:
            formatted += "\n" + self.formatException(record.exc_info)

        return formatted


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that automatically includes context variables."""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        extra = kwargs.get("extra", {})
        extra.update(_current_context())
        kwargs["extra"] = extra
        return msg, kwargs


def get_logger(name: str) -> ContextLogger:
    """Get a context-aware logger for the given module name."""
    logger = logging.getLogger(name)
    return ContextLogger(logger, {})


def configure_logging(
    log_level: str | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """
    Configure logging for a host application embedding recipecart.

    Args:
        log_level: Minimum log level. Defaults to the ``log_level`` setting.
        json_format: Use JSON format for logs. If None, auto-detect based on environment.
        log_file: Optional file path to write logs to.
    """
    from recipecart.config import get_settings

    settings = get_settings()

    if json_format is None:
        json_format = os.getenv("LOG_FORMAT", "").lower() == "json" or (
            not sys.stdout.isatty() and settings.environment == "production"
        )

    level_str = (log_level or settings.log_level).upper()
    level = getattr(logging, level_str, logging.INFO)

    formatter: logging.Formatter
    if json_format:
        formatter = StructuredJsonFormatter()
    else:
        formatter = ContextualFormatter()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        root_logger.addHandler(file_handler)

    module_levels = {
        "recipecart": level,
        "recipecart.normalize": level,
        "recipecart.shopping": level,
    }

    for module_name, module_level in module_levels.items():
        logging.getLogger(module_name).setLevel(module_level)

    logger = get_logger(__name__)
    logger.info(
        f"Logging configured: level={level_str}, format={'json' if json_format else 'text'}"
    )


def set_context(
    request_id: str | None = None,
    owner_id: str | None = None,
    list_key: str | None = None,
) -> None:
    """Set logging context variables."""
    if request_id is not None:
        request_id_ctx.set(request_id)
    if owner_id is not None:
        owner_id_ctx.set(owner_id)
    if list_key is not None:
        list_key_ctx.set(list_key)


def clear_context() -> None:
    """Clear all logging context variables."""
    for var in _CONTEXT_VARS.values():
        var.set(None)


class LoggingContext:
    """Context manager for setting logging context."""

    def __init__(
        self,
        request_id: str | None = None,
        owner_id: str | None = None,
        list_key: str | None = None,
    ):
        self.values = {
            "request_id": request_id,
            "owner_id": owner_id,
            "list_key": list_key,
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
