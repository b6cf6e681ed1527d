from __future__ import annotations

import datetime as dt
import json
import logging
import sys
import uuid
from logging.handlers import RotatingFileHandler
from typing import Any

from loguru import logger as loguru_logger

UTC = dt.UTC

_STANDARD_RECORD_FIELDS = frozenset(
    {
        "args",
        "msg",
        "name",
        "levelno",
        "levelname",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "getMessage",
        "message",
    }
)

_NOISY_LOGGERS = ("httpx", "httpcore", "peewee", "trafilatura")


class EnhancedJsonFormatter(logging.Formatter):
    """JSON formatter that keeps ``extra={...}`` fields as structured data."""

    def __init__(self, include_location: bool = True) -> None:
        super().__init__()
        self.include_location = include_location

    def format(self, record: logging.LogRecord) -> str:
        base: dict[str, Any] = {
            "timestamp": dt.datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_location:
            base.update(
                {
                    "module": record.module,
                    "function": record.funcName,
                    "line": record.lineno,
                }
            )

        if record.exc_info:
            base["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        extra_fields = _extract_extra(record)
        cid = extra_fields.pop("cid", None) or extra_fields.pop("correlation_id", None)
        if cid:
            base["correlation_id"] = cid
        if extra_fields:
            base["extra"] = extra_fields

        return json.dumps(
            base, ensure_ascii=False, default=self._json_serializer, separators=(",", ":")
        )

    def _json_serializer(self, obj: Any) -> str:
        if isinstance(obj, set | frozenset):
            return str(sorted(obj, key=str))
        return str(obj)


class InterceptHandler(logging.Handler):
    """Bridge stdlib log records (with their extras) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        level: int | str
        try:
            level = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        loguru_logger.bind(**_extract_extra(record)).opt(depth=6, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _extract_extra(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if not key.startswith("_") and key not in _STANDARD_RECORD_FIELDS
    }


def setup_json_logging(
    level: str = "INFO",
    *,
    log_file: str | None = None,
    use_loguru: bool = True,
    max_file_size: str = "50 MB",
    retention: str = "14 days",
) -> None:
    """Configure structured JSON logging for the whole process.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path for persistent logging
        use_loguru: Route records through loguru sinks instead of stdlib handlers
        max_file_size: Rotation size for the loguru file sink
        retention: Retention period for the loguru file sink
    """
    lvl = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(lvl)

    if use_loguru:
        loguru_logger.remove()
        loguru_logger.add(sys.stderr, level=level.upper(), serialize=True, enqueue=True)
        if log_file:
            loguru_logger.add(
                log_file,
                level=level.upper(),
                serialize=True,
                rotation=max_file_size,
                retention=retention,
                compression="gz",
                enqueue=True,
            )
        root.addHandler(InterceptHandler())
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(EnhancedJsonFormatter())
        root.addHandler(console_handler)
        if log_file:
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=50 * 1024 * 1024,
                backupCount=5,
            )
            file_handler.setFormatter(EnhancedJsonFormatter())
            root.addHandler(file_handler)

    for noisy_logger in _NOISY_LOGGERS:
        logging.getLogger(noisy_logger).setLevel(max(lvl, logging.WARNING))

    logging.getLogger(__name__).debug(
        "logging_initialized",
        extra={"level": level, "log_file": log_file, "use_loguru": use_loguru},
    )


def generate_correlation_id() -> str:
    """Generate a short correlation ID for tracing one scan across log records."""
    return uuid.uuid4().hex[:12]


def truncate_log_content(content: str | None, max_length: int = 200) -> str | None:
    """Truncate large content for logging, breaking at a word boundary when possible."""
    if not content or len(content) <= max_length:
        return content

    if max_length > 20:
        cut = content[: max_length - 15]
        last_space = cut.rfind(" ")
        if last_space > len(cut) // 2:
            cut = cut[:last_space]
        return f"{cut}... [+{len(content) - len(cut)} chars]"
    return content[:max_length]
