"""structlog setup shared by the API and CLI entry points."""

import logging

import structlog

from lifeintel.config.settings import settings


def configure_logging(level: str | None = None, environment: str | None = None) -> None:
    """Configure structlog rendering and level filtering.

    Development renders colored console lines; production renders JSON.
    """
    level = level or settings.log_level
    environment = environment or settings.environment

    renderer = (
        structlog.processors.JSONRenderer()
        if environment == "production"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level)),
    )
