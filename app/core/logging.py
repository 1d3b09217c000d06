"""Structured logging with structlog.

Every event carries the correlation ids in scope: ``request_id`` for admin API
calls and ``run_id`` for a single seed or clear run. The CLI routes log output
to stderr so the printed run summary on stdout stays readable.
"""

import logging
import sys
import uuid
from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, TextIO

import structlog

from app.core.config import get_settings

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
run_id_ctx: ContextVar[str | None] = ContextVar("run_id", default=None)


def add_correlation_ids(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Add request_id and run_id from context to log events."""
    for key, ctx in (("request_id", request_id_ctx), ("run_id", run_id_ctx)):
        value = ctx.get()
        if value:
            event_dict.setdefault(key, value)
    return event_dict


@contextmanager
def run_context(operation: str) -> Iterator[str]:
    """Scope a run id over one seed or clear run.

    Args:
        operation: Run kind, logged with the run id.

    Yields:
        The run id bound for the duration of the block.
    """
    run_id = f"{operation}-{uuid.uuid4().hex[:12]}"
    token = run_id_ctx.set(run_id)
    try:
        yield run_id
    finally:
        run_id_ctx.reset(token)


def configure_logging(
    log_level: str | None = None,
    log_format: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog for the application.

    Args:
        log_level: Override for the configured level (the CLI uses this for --verbose).
        log_format: Override for the configured format, "json" or "console".
        stream: Output stream; defaults to stdout.
    """
    settings = get_settings()
    level = (log_level or settings.log_level).upper()
    fmt = log_format or settings.log_format

    renderer: structlog.types.Processor
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream is None and sys.stdout.isatty())

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_correlation_ids,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stdout),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Get a logger bound to the module name."""
    logger: structlog.typing.FilteringBoundLogger = structlog.get_logger(name)
    return logger
