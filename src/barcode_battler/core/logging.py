"""Structured logging for the Barcode Battler core.

Engine modules log through structlog with keyword events. Events are
handed to the standard library ``logging`` machinery, so the level, the
console format and the optional log file all come from :class:`Settings`:

- ``log_level`` sets the threshold; ``debug`` forces DEBUG.
- ``json_logs`` switches the console from coloured lines to JSON.
- ``log_file`` adds a handler that always writes JSON lines.

Nothing is configured on import. Call :func:`configure_logging` once at
start-up; calling it again replaces the handlers it installed before.

Example:
    >>> from barcode_battler.core.logging import configure_logging, get_logger
    >>> configure_logging()
    >>> logger = get_logger(__name__)
    >>> logger.info("Battle initiated", player="Ivarno", difficulty="medium")
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor

from barcode_battler.core.config import Settings, get_settings


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger


HANDLER_PREFIX = "barcode_battler."
"""Name prefix of the handlers installed on the root logger."""


class AppContext:
    """Processor that stamps every event with the application name and version."""

    def __init__(self, settings: Settings) -> None:
        self._app = settings.app_name
        self._version = settings.app_version

    def __call__(
        self,
        logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict.setdefault("app", self._app)
        event_dict.setdefault("version", self._version)
        return event_dict


def resolve_level(settings: Settings) -> int:
    """Numeric log level for the given settings (DEBUG whenever debug is on)."""
    if settings.debug:
        return logging.DEBUG
    return logging.getLevelNamesMapping()[settings.log_level]


def _formatter(shared: list[Processor], renderers: list[Processor]) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderers],
    )


def _json_renderers() -> list[Processor]:
    return [
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(sort_keys=True),
    ]


def _remove_installed_handlers(root: logging.Logger) -> None:
    for handler in list(root.handlers):
        if (handler.get_name() or "").startswith(HANDLER_PREFIX):
            root.removeHandler(handler)
            handler.close()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the root logger from application settings.

    Args:
        settings: Settings to apply, the cached global settings if None.
    """
    settings = settings or get_settings()
    level = resolve_level(settings)

    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        AppContext(settings),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    _remove_installed_handlers(root)
    root.setLevel(level)

    console_renderers: list[Processor]
    if settings.json_logs:
        console_renderers = _json_renderers()
    else:
        console_renderers = [structlog.dev.ConsoleRenderer(colors=settings.debug)]

    console = logging.StreamHandler(sys.stderr)
    console.set_name(f"{HANDLER_PREFIX}console")
    console.setFormatter(_formatter(shared, console_renderers))
    root.addHandler(console)

    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        file_handler.set_name(f"{HANDLER_PREFIX}file")
        file_handler.setFormatter(_formatter(shared, _json_renderers()))
        root.addHandler(file_handler)

    get_logger(__name__).debug(
        "Logging configured",
        level=logging.getLevelName(level),
        json_logs=settings.json_logs,
        log_file=settings.log_file,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger; it follows whatever configuration is active when it logs.

    Args:
        name: Logger name, typically ``__name__``.
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables that will be included in all subsequent logs.

    The battle engine binds the battle id for the lifetime of a battle so
    every turn's log lines can be correlated.

    Args:
        **kwargs: Key-value pairs to bind to the logging context.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "HANDLER_PREFIX",
    "AppContext",
    "resolve_level",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
