"""Structured logging for splist.

Every module logs through ``get_logger(__name__)`` with snake_case event
names and keyword context. splist is a library, so nothing is configured
on import: log records go through the host's ``logging`` setup until the
host calls ``configure_logging()``.

``configure_logging()`` renders splist's own records (the ``splist``
logger tree) to a dedicated handler and leaves the root logger alone.

Usage:
    from splist.core.logging import configure_logging
    configure_logging()                       # level and format from Settings
    configure_logging(level="DEBUG", renderer="json", force=True)
"""

import logging
import sys
from contextvars import ContextVar
from typing import IO, Any, Literal
from uuid import uuid4

import structlog

from splist.config import get_settings

LIBRARY_LOGGER = "splist"

# Correlation ID for a logical operation (e.g. one document upsert)
operation_id_ctx: ContextVar[str | None] = ContextVar("operation_id", default=None)

_handler: logging.Handler | None = None


def add_operation_id(
    _logger: logging.Logger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add operation ID to log entries if available."""
    operation_id = operation_id_ctx.get()
    if operation_id:
        event_dict["operation_id"] = operation_id
    return event_dict


def configure_logging(
    level: str | None = None,
    renderer: Literal["console", "json"] | None = None,
    *,
    stream: IO[str] | None = None,
    force: bool = False,
) -> None:
    """Render splist log events through structlog.

    Subsequent calls are no-ops unless ``force`` is set.

    Args:
        level: Level for the ``splist`` logger; defaults to ``LOG_LEVEL``
        renderer: ``console`` or ``json``; defaults to console in
            development and JSON elsewhere
        stream: Output stream (default: stderr)
        force: Replace an existing configuration
    """
    global _handler

    if _handler is not None and not force:
        return

    settings = get_settings()
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    if renderer is None:
        renderer = "console" if settings.is_development else "json"

    shared_processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        add_operation_id,
    ]

    if renderer == "json":
        final: list[structlog.typing.Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        final = [structlog.dev.ConsoleRenderer(colors=stream is None)]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *final,
            ],
        )
    )

    library_logger = logging.getLogger(LIBRARY_LOGGER)
    if _handler is not None:
        library_logger.removeHandler(_handler)
    library_logger.addHandler(handler)
    library_logger.setLevel(log_level)
    library_logger.propagate = False
    _handler = handler

    # Request-level chatter from the HTTP stack
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def reset_logging() -> None:
    """Undo ``configure_logging()`` and hand records back to the host."""
    global _handler

    library_logger = logging.getLogger(LIBRARY_LOGGER)
    if _handler is not None:
        library_logger.removeHandler(_handler)
        _handler = None
    library_logger.setLevel(logging.NOTSET)
    library_logger.propagate = True
    structlog.reset_defaults()


def is_configured() -> bool:
    """Check if splist logging has been configured."""
    return _handler is not None


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def generate_operation_id() -> str:
    """Generate a new operation correlation ID."""
    return str(uuid4())[:8]
