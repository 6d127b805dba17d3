"""Structured logging for MaxBot.

Log lines are structlog events rendered as JSON (production) or colored
console text (development). Output goes through the ``maxbot`` stdlib
logger, so configuring it never touches the application's root logger.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, TextIO

import structlog

if TYPE_CHECKING:
    from structlog.typing import EventDict, Processor

    from maxbot.config import Settings

PACKAGE_LOGGER = "maxbot"

# Event keys whose values are replaced before rendering
REDACTED_KEYS = frozenset({"api_key", "authorization", "webhook_secret", "signature"})

_configured = False


def redact_secrets(logger: object, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask credential values passed as fields or bound as context."""
    for key in event_dict.keys() & REDACTED_KEYS:
        event_dict[key] = "***"
    return event_dict


def _processors(format: str) -> list[Processor]:
    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        redact_secrets,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if format.lower() == "json":
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    return processors


def configure_logging(
    level: str = "INFO",
    format: str = "json",
    stream: TextIO | None = None,
) -> None:
    """Configure structured logging for MaxBot.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Unknown
            names fall back to INFO.
        format: "json" for production, "text" for development.
        stream: Where lines are written; stdout when omitted.

    Example:
        ```python
        from maxbot.logging import configure_logging, get_logger

        configure_logging(level="DEBUG", format="text")
        get_logger("maxbot.bot").info("Polling started", offset=0)
        ```
    """
    global _configured

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers = [handler]
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    package_logger.propagate = False

    structlog.configure(
        processors=_processors(format),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


def configure_from_settings(settings: Settings) -> None:
    """Apply ``settings.log_level`` and ``settings.log_format``."""
    configure_logging(level=settings.log_level, format=settings.log_format)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, configuring defaults on first use.

    Names under ``maxbot.`` share the package handler and level.
    """
    if not _configured:
        configure_logging()

    return structlog.get_logger(name)  # type: ignore[no-any-return]


def bind_context(**kwargs: object) -> None:
    """Attach fields to every following log line in this context.

    E.g. ``bind_context(bot="support", session="poll-1")`` tags all lines
    of one polling session.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)
