"""
Logging configuration for the Nightjar Launch analyzer.

Console output goes through Rich on stderr so that stdout stays reserved for
the MCP stdio transport. An optional file handler writes one JSON object per
record, including any fields set with LogContext.
"""

import functools
import inspect
import json
import logging
import time
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from rich.console import Console
from rich.logging import RichHandler

from nightjar.config import get_settings

# Attributes every LogRecord carries; anything else came from extra= or context
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

# Per-task so concurrent tool calls do not see each other's fields
_log_context: ContextVar[Dict[str, Any]] = ContextVar("nightjar_log_context", default={})

NOISY_LOGGERS = ("aiohttp", "httpx", "httpcore", "openai", "mcp")


def get_log_context() -> Dict[str, Any]:
    """Fields currently attached to every log record."""
    return dict(_log_context.get())


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }
        log_data.update({key: value for key, value in vars(record).items() if key not in _STANDARD_ATTRS})

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ContextFilter(logging.Filter):
    """Copy the current LogContext fields onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            setattr(record, key, value)
        return True


context_filter = ContextFilter()


def setup_logging(log_level: Optional[str] = None, log_file_path: Optional[Path] = None) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Logging level (defaults to settings)
        log_file_path: Path to a JSON log file (defaults to settings)
    """
    settings = get_settings()

    log_level = (log_level or settings.effective_log_level).upper()
    log_file_path = log_file_path or settings.get_log_file_path()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=settings.debug,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(log_level)
    console_handler.addFilter(context_filter)
    root_logger.addHandler(console_handler)

    if log_file_path:
        file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.addFilter(context_filter)
        file_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        "Logging configured",
        extra={"log_level": log_level, "log_file": str(log_file_path) if log_file_path else None},
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LogContext:
    """
    Attach fields to every record logged inside the block.

    Nested blocks shadow outer values; leaving a block restores exactly what
    was there before.
    """

    def __init__(self, **kwargs: Any) -> None:
        self.context = kwargs
        self._token = None

    def __enter__(self) -> "LogContext":
        self._token = _log_context.set({**_log_context.get(), **self.context})
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        _log_context.reset(self._token)


@contextmanager
def _timed(func) -> Iterator[None]:
    logger = get_logger(func.__module__)
    start = time.perf_counter()
    with LogContext(function=func.__name__):
        logger.debug(f"Starting {func.__name__}")
        try:
            yield
        except Exception as e:
            logger.debug(
                f"Failed {func.__name__}",
                extra={"duration_seconds": time.perf_counter() - start, "error": str(e)},
            )
            raise
        duration = time.perf_counter() - start
        logger.debug(f"Completed {func.__name__} in {duration:.2f}s", extra={"duration_seconds": duration})


def log_performance(func):
    """
    Log start, completion time and failures of a function at debug level.

    Works on plain and async functions:

        @log_performance
        async def parse_embed(self, embed_url: str) -> ParsedModel:
            ...
    """

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            with _timed(func):
                return await func(*args, **kwargs)

        return async_wrapper

    @functools.wraps(func)
    def sync_wrapper(*args, **kwargs):
        with _timed(func):
            return func(*args, **kwargs)

    return sync_wrapper
