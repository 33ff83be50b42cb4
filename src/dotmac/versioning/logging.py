"""
Structured logging setup using structlog directly.

Applications embedding the versioning middleware call ``setup_logging()``
once at startup; library modules only call ``structlog.get_logger``.
The middleware binds ``api_version`` into structlog's context variables
while the endpoint runs, so every log line emitted by a versioned request
carries the version it was served under.
"""

import logging

import structlog
from structlog.typing import Processor

from .settings import VersioningSettings, get_settings


def build_processors(settings: VersioningSettings) -> list[Processor]:
    """Processor chain for the configured log format."""
    processors: list[Processor] = [
        # Request-scoped values bound by APIVersionMiddleware
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def setup_logging(settings: VersioningSettings | None = None) -> None:
    """
    Setup structured logging with structlog.

    Uses the versioning settings unless explicit settings are passed.
    """
    settings = settings or get_settings()

    logging.basicConfig(format="%(message)s", level=settings.log_level.value)
    logging.getLogger().setLevel(settings.log_level.value)

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
