"""
Structured logging for folio.

``configure_logging`` is called once by the entry point (the CLI callback);
library code only ever calls ``get_logger(__name__)`` and logs dotted snake
event names with keyword fields::

    logger.info("project.created", project_id=pid, slug=slug)

Logs go to stderr so ``--json`` output on stdout stays machine-readable.
Per-operation ids are bound with :class:`LogContext` and show up on every
line logged inside the block.

Tags:
    logging, structlog
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

_service = "folio"


def _add_service(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", _service)
    return event_dict


def configure_logging(level: str = "INFO", json_format: bool | None = None, service: str = "folio") -> None:
    """Set up structlog for the process.

    Args:
        level: Minimum level name (``DEBUG``, ``INFO``, ...).
        json_format: JSON lines when true, coloured console when false,
            JSON unless stderr is a terminal when ``None``.
        service: Value of the ``service`` field on every line.
    """
    global _service
    _service = service
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    if json_format is None:
        json_format = not sys.stderr.isatty()

    processors: list[Processor] = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        _add_service,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]
    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


class LogContext:
    """Bind fields for the duration of a ``with`` block.

    ``None`` values are skipped so optional ids never show up as nulls::

        with LogContext(request_id=ctx.request_id, user_id=user.id):
            logger.info("project.updated")
    """

    def __init__(self, **kwargs: Any) -> None:
        self._fields = {key: value for key, value in kwargs.items() if value is not None}

    def __enter__(self) -> LogContext:
        bind_context(**self._fields)
        return self

    def __exit__(self, *exc_info: Any) -> None:
        unbind_context(*self._fields)


__all__ = ["configure_logging", "get_logger", "bind_context", "unbind_context", "LogContext"]
