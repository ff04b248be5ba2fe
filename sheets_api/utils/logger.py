"""
Structured Logging Configuration
================================

structlog setup for the sheets API.

Every event carries the service name, version and environment; the base
path is added when the service is mounted under a sub-directory. Request
handlers bind ``request_id`` with ``request_context`` so events logged
while serving a request can be correlated with its X-Request-ID header.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from sheets_api import __version__
from sheets_api.config.settings import Settings, get_settings

SERVICE_NAME = "sheets-api"


def service_context(settings: Settings) -> Processor:
    """Processor stamping service identity onto every event."""
    context: dict[str, Any] = {
        "service": SERVICE_NAME,
        "version": __version__,
        "environment": settings.environment,
    }
    if settings.base_path:
        context["base_path"] = settings.base_path

    def _add_service_context(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        for key, value in context.items():
            event_dict.setdefault(key, value)
        return event_dict

    return _add_service_context


def build_processors(settings: Settings) -> list[Processor]:
    """
    Processor chain for ``settings``.

    Production renders one JSON object per line (Thai sheet text kept
    readable); other environments use the coloured console renderer.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        service_context(settings),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.is_production:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    return processors


def configure_logging(settings: Settings | None = None) -> None:
    """Configure stdlib logging and structlog from ``settings``."""
    settings = settings or get_settings()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@contextmanager
def request_context(request_id: str, **values: Any) -> Iterator[None]:
    """Bind ``request_id`` (and ``values``) to events logged in this context."""
    with structlog.contextvars.bound_contextvars(request_id=request_id, **values):
        yield


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance for the given name.

    Args:
        name: Logger name, typically __name__

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
