"""
Structured logging setup.

Usage:
    from flagkit.config import get_settings
    from flagkit.logging_config import configure_logging, get_logger

    configure_logging(get_settings())
    logger = get_logger()
    logger.warning("Segment not found", segment="beta_testers")

Strategies never require a logger. The composition root hands them the
logger returned by get_logger(); passing None disables logging entirely.
"""

import logging
from typing import Any

import structlog

from .config import FlagSettings, get_settings

COMPONENT = "flagkit"


def add_component(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Structlog processor that tags every event with the engine name."""
    event_dict.setdefault("component", COMPONENT)
    return event_dict


def configure_logging(settings: FlagSettings | None = None) -> None:
    """
    Configure structlog for the engine.

    JSON output for log_format="json", colourless console output otherwise.
    """
    settings = settings or get_settings()

    if settings.log_format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            add_component,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level)
        ),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str = COMPONENT) -> Any:
    """Get a structlog logger bound to the given name."""
    return structlog.get_logger(name)
