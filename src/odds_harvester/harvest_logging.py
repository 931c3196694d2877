"""Structured logging for the odds harvester."""

import logging
import sys
import uuid
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

import structlog
from structlog.stdlib import LoggerFactory

from .config import AppSettings, get_settings

# Context variable for run tracking
trace_id_var: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def get_trace_id() -> Optional[str]:
    """Get the trace ID of the current harvest run, if any."""
    return trace_id_var.get()


def new_trace_id() -> str:
    """Generate a trace ID and bind it to the current context."""
    trace_id = str(uuid.uuid4())[:8]
    trace_id_var.set(trace_id)
    return trace_id


def clear_trace_id() -> None:
    """Clear the trace ID from the current context."""
    trace_id_var.set(None)


def add_trace_id(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add the run trace ID to log events."""
    trace_id = trace_id_var.get()
    if trace_id is not None:
        event_dict["trace_id"] = trace_id
    return event_dict


def configure_logging(settings: Optional[AppSettings] = None) -> None:
    """Configure structlog and stdlib logging from settings."""
    settings = settings or get_settings()

    processors = [
        structlog.contextvars.merge_contextvars,
        add_trace_id,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    elif settings.LOG_FORMAT == "structured":
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:  # text format
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, settings.LOG_LEVEL)
    handlers = [logging.StreamHandler(sys.stdout)]

    if settings.LOG_FILE:
        settings.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            settings.LOG_FILE,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
        )
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, format="%(message)s", force=True)

    # Silence noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
