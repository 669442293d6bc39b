"""Structured logging for the estimator CLI and library, using structlog.

Log lines always go to stderr; stdout belongs to estimate output.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any

import orjson
import structlog
from structlog.types import Processor

from tax_estimator.core.config import settings

LOG_FORMATS = ("json", "console")

# Path or name of the bracket schedule an estimate is using
schedule_source_ctx: ContextVar[str | None] = ContextVar("schedule_source", default=None)


def _add_context_vars(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Tag events with the schedule in use, unless the caller already did."""
    if schedule_source := schedule_source_ctx.get():
        event_dict.setdefault("schedule_source", schedule_source)
    return event_dict


def _orjson_serializer(obj: Any, **kwargs: Any) -> str:
    """Serialize a log event with orjson; Decimal amounts fall back to ``str``."""
    return orjson.dumps(obj, default=str).decode("utf-8")


def resolve_log_format(log_format: str | None = None) -> str:
    """Pick the renderer: explicit argument, then settings, then environment.

    Outside development the default is JSON so collected logs stay machine
    readable; a developer's terminal gets the console renderer.
    """
    chosen = log_format or settings.log_format
    if chosen:
        chosen = chosen.lower()
        if chosen not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {LOG_FORMATS}, got {chosen!r}")
        return chosen
    return "console" if settings.environment == "development" else "json"


def resolve_log_level(verbose: bool | None = None) -> int:
    """DEBUG when asked for on the command line or by settings, else WARNING.

    A CLI run prints its result; INFO events are only wanted with ``--verbose``.
    """
    debug = settings.debug if verbose is None else verbose
    return logging.DEBUG if debug else logging.WARNING


def configure_logging(*, verbose: bool | None = None, log_format: str | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        verbose: Override ``settings.debug`` for this run.
        log_format: Override ``settings.log_format`` ("json" or "console").
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_context_vars,
    ]

    if resolve_log_format(log_format) == "json":
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.EventRenamer("message"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(serializer=_orjson_serializer),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level = resolve_log_level(verbose)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger().setLevel(level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger, named after the calling module by convention."""
    return structlog.get_logger(name)
