"""Logging setup for Resume Intake.

Every parse runs under its own correlation id (and document name), held in
context variables so concurrent parses on one event loop keep their log
lines apart. A filter copies both onto each record for the formatters.
"""

import json
import logging
import logging.handlers
import sys
from contextvars import ContextVar
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

LOGGER_NAMESPACE = "resume_intake"

correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")
current_document: ContextVar[str] = ContextVar("current_document", default="")

# Attributes every LogRecord has; anything else came in through ``extra=``
_STANDARD_ATTRIBUTES = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message", "asctime", "correlation_id", "document",
}

# Third party loggers that are noisy on malformed documents
_QUIET_LOGGERS = {
    "asyncio": logging.WARNING,
    "pypdf": logging.ERROR,
    "docx": logging.WARNING,
}


class CorrelationIdFilter(logging.Filter):
    """Attach the current parse context to every record."""

    def filter(self, record):
        record.correlation_id = correlation_id.get()
        record.document = current_document.get()
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, including any ``extra=`` fields."""

    def format(self, record):
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if getattr(record, "correlation_id", ""):
            entry["correlation_id"] = record.correlation_id
        if getattr(record, "document", ""):
            entry["document"] = record.document
        entry.update({
            key: value for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRIBUTES
        })
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Single line console format: time, level, logger, parse context, message."""

    def format(self, record):
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        name = record.name
        if name.startswith(LOGGER_NAMESPACE + "."):
            name = name[len(LOGGER_NAMESPACE) + 1:]

        context = " ".join(part for part in (
            getattr(record, "correlation_id", ""),
            getattr(record, "document", ""),
        ) if part)
        prefix = f"[{context}] " if context else ""

        line = f"{timestamp} {record.levelname:<8} {name:<22} {prefix}{record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _build_handlers(
    formatter: logging.Formatter,
    enable_console: bool,
    log_file: Optional[str],
    max_file_size: int,
    backup_count: int
) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if enable_console:
        # stderr keeps stdout free for command output such as --json
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file, maxBytes=max_file_size, backupCount=backup_count, encoding="utf-8"
        ))

    context_filter = CorrelationIdFilter()
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
    return handlers


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    enable_console: bool = True,
    enable_file: bool = False,
    structured: bool = False,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5
) -> None:
    """Configure the root logger, replacing any handlers installed before.

    Args:
        level: Level name; unknown names fall back to INFO
        log_file: Path of the rotating log file
        enable_console: Log to stderr
        enable_file: Log to ``log_file`` (ignored when no path is given)
        structured: Emit JSON lines instead of the console format
        max_file_size: Rotation size of the log file in bytes
        backup_count: Rotated files to keep
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = StructuredFormatter() if structured else HumanReadableFormatter()
    for handler in _build_handlers(
        formatter,
        enable_console,
        log_file if enable_file else None,
        max_file_size,
        backup_count
    ):
        root.addHandler(handler)

    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    get_logger("logging").debug(f"Logging configured at {level.upper()}", extra={
        "structured": structured,
        "file_output": bool(enable_file and log_file),
    })


def get_logger(name: str) -> logging.Logger:
    """Return the package logger for a component, e.g. ``get_logger("file_handler.pdf")``."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def start_parse_context(document: str) -> str:
    """Open a fresh logging context for one parse.

    Args:
        document: Name of the document being parsed

    Returns:
        The new correlation id
    """
    value = uuid4().hex[:12]
    correlation_id.set(value)
    current_document.set(document)
    return value


def get_correlation_id() -> str:
    """Correlation id of the current context, or an empty string."""
    return correlation_id.get()


def log_performance(operation: str, duration: float, details: Optional[Dict[str, Any]] = None) -> None:
    """Record how long a pipeline stage took.

    Args:
        operation: Stage name, e.g. ``decode``
        duration: Elapsed seconds
        details: Extra fields for structured output
    """
    extra = dict(details or {})
    extra.update(operation=operation, duration_ms=round(duration * 1000, 2))
    get_logger("performance").info(f"{operation} finished in {duration * 1000:.1f}ms", extra=extra)


def log_error(error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
    """Record an unexpected exception with its traceback.

    Args:
        error: The exception
        context: Extra fields for structured output
    """
    extra = dict(context or {})
    extra.update(error_class=type(error).__name__)
    get_logger("error").error(f"Unexpected {type(error).__name__}: {error}", extra=extra, exc_info=error)
