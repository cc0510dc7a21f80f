"""
Structured logging for principia.

Wraps structlog so every module logs the same way: ``get_logger(__name__)``
and keyword events such as ``logger.debug("entity_created", entity_id=...)``.

Manifesto:
    - **Structures:** JSON output for log aggregation, console for development
    - **Correlates:** Context bound once is attached to every later event
    - **Standardizes:** One processor chain for the whole library

Architecture:
    ::

        configure_logging(level="INFO", json_format=None, service="principia")
            │
            ▼
        structlog processor chain:
          1. TimeStamper (iso)
          2. merge_contextvars
          3. add_log_level / add_logger_name
          4. add_service_metadata
          5. JSONRenderer (or ConsoleRenderer when attached to a TTY)

Examples:
    >>> from principia.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=True)
    >>> logger = get_logger(__name__)
    >>> logger.info("user_registered", user_id="u-1")

Guardrails:
    - Service name is stored globally (set once at startup)
    - Silent until configured: loggers sit on stdlib logging, whose root
      logger drops DEBUG/INFO until an application sets it up
    - Unknown levels raise ConfigError instead of failing deep inside logging
    - Logging never replaces raising: errors still reach the caller

Tags:
    logging, structlog, observability, json-logging, principia
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from principia.core.errors import ConfigError
from principia.core.settings import PrincipiaSettings, get_settings

_SERVICE_NAME = "principia"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def resolve_level(level: str | int) -> int:
    """Map a level name (any case) or number to a stdlib level.

    Raises:
        ConfigError: ``level`` is not a known logging level.
    """
    if isinstance(level, int):
        return level
    levels = logging.getLevelNamesMapping()
    try:
        return levels[level.strip().upper()]
    except KeyError:
        raise ConfigError(
            f"Unknown log level: {level!r}",
            context={"allowed": sorted(levels, key=levels.__getitem__)},
        ) from None


def _build_processors(json_format: bool, add_timestamp: bool) -> list[Processor]:
    processors: list[Processor] = []
    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors += [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]
    if json_format:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return processors


def configure_logging(
    level: str | int = "INFO",
    json_format: bool | None = None,
    service: str = "principia",
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for the application.

    Rendered events are handed to stdlib loggers, so they go wherever the
    root logger's handlers send them (stdout by default).

    Args:
        level: Level name (any case) or number
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name to include in logs
        add_timestamp: Include ISO timestamp in logs

    Raises:
        ConfigError: ``level`` is not a known logging level.
    """
    global _SERVICE_NAME

    numeric_level = resolve_level(level)
    if json_format is None:
        json_format = not sys.stdout.isatty()
    _SERVICE_NAME = service

    structlog.configure(
        processors=_build_processors(json_format, add_timestamp),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    root.setLevel(numeric_level)


def configure_from_settings(settings: PrincipiaSettings | None = None) -> None:
    """Configure logging from :class:`PrincipiaSettings` (env-driven)."""
    settings = settings or get_settings()
    configure_logging(
        level=settings.log_level,
        json_format=settings.json_logs,
        service=settings.service_name,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger backed by the stdlib logger ``name``.

    Until :func:`configure_logging` runs, events pass through structlog's
    default processors and end at the stdlib logger, which drops anything
    below WARNING when no handlers are set up.

    Args:
        name: Logger name (usually __name__)
    """
    return structlog.wrap_logger(logging.getLogger(name))


def bind_context(**kwargs: Any) -> None:
    """Bind context to include in all subsequent logs.

    Example:
        bind_context(request_id="abc123")
        logger.info("user_registered")  # Includes request_id
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove specific keys from logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    """Clear all bound context."""
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Context manager for scoped logging context.

    Example:
        with LogContext(request_id="abc123"):
            service.register("ada@example.com", "Ada")
        # Context cleared here
    """

    def __init__(self, **kwargs: Any):
        self._context = kwargs

    def __enter__(self) -> LogContext:
        bind_context(**self._context)
        return self

    def __exit__(self, *args: Any) -> None:
        unbind_context(*self._context.keys())


__all__ = [
    "configure_logging",
    "configure_from_settings",
    "resolve_level",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
]
