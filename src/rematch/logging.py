"""Structlog setup for rematch.

Only the edges of the package log: the pattern registry (one debug event per
compiled pattern), the decorator front-end (one debug event per registered
type), the schema store (loads and saves) and the CLI (command failures).
Parsing itself is silent; its failures are raised, never logged.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

from rematch.settings import Settings, get_settings

if TYPE_CHECKING:
    from structlog.typing import EventDict, Processor

PACKAGE_LOGGER_NAME = "rematch"

_LOGGING_CONFIGURED = False


def _flatten_extra(
    logger: logging.Logger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Lift the `extra=` mapping of a call into top-level event keys.

    Call sites pass context the stdlib way, e.g.
    `logger.debug("Pattern compiled", extra={"type_name": ...})`; keys already
    present on the event win over the mapping.

    Args:
        logger: The logger instance (unused).
        method_name: The logging method name (unused).
        event_dict: Event being processed.

    Returns:
        The event with the `extra` keys merged in.
    """
    extra = event_dict.pop("extra", None)
    if isinstance(extra, dict):
        for key, value in extra.items():
            event_dict.setdefault(key, value)
    return event_dict


def _event_to_message(
    logger: logging.Logger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Emit the event text under `message`, the key the CLI output uses."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def resolve_log_level(name: str) -> int:
    """Map a level name such as `debug` to its stdlib value, defaulting to INFO."""
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def _handlers(config: Settings) -> list[logging.Handler]:
    """Return stderr, plus `LOG_FILE` when set; stdout stays reserved for parse results."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file, encoding="utf-8"))
    return handlers


def _processors(config: Settings) -> list[Processor]:
    renderer: Any = (
        structlog.processors.JSONRenderer() if config.log_json else structlog.dev.ConsoleRenderer(colors=False)
    )
    return [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        _flatten_extra,
        _event_to_message,
        structlog.processors.format_exc_info,
        renderer,
    ]


def configure_logging(*, settings: Settings | None = None, force: bool = False) -> None:
    """Route rematch events through structlog into stdlib handlers.

    Runs once per process unless `force` is set, which tests and the CLI use to
    apply freshly loaded settings.

    Args:
        settings (Settings | None): Settings to apply, defaults to `get_settings()`.
        force (bool): Reconfigure even if logging was already set up.
    """
    global _LOGGING_CONFIGURED  # noqa: PLW0603

    if _LOGGING_CONFIGURED and not force:
        return

    config = settings if settings is not None else get_settings()
    log_level = resolve_log_level(config.log_level)

    logging.basicConfig(level=log_level, format="%(message)s", handlers=_handlers(config), force=force)
    structlog.configure(
        processors=_processors(config),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _LOGGING_CONFIGURED = True


def get_logger(name: str = PACKAGE_LOGGER_NAME) -> structlog.BoundLogger:
    """Return a rematch logger, configuring logging on first request."""
    if not _LOGGING_CONFIGURED:
        configure_logging()
    return structlog.get_logger(name)
