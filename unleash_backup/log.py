"""structlog configuration for processes embedding the backup store."""

from __future__ import annotations

import logging

import structlog

from unleash_backup.config import Settings, get_settings


def configure_logging(settings: Settings | None = None) -> None:
    """Install the processor chain: ISO timestamp, level, JSON or console output."""
    settings = settings or get_settings()
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, settings.log_level)),
    )
