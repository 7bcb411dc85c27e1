"""
structlog setup for the catalog manager.

Every event carries ``service`` and, inside a request, the ``request_id``,
``method`` and ``path`` bound by :func:`request_context`.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.typing import EventDict, WrappedLogger

SERVICE_NAME = "catalog-manager"


def add_service(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def configure_logging(level: str = "INFO", *, json: bool = True) -> None:
    """Configure the structlog/standard logging bridge.

    ``json=False`` renders human-readable console lines for local debugging.
    """

    renderer: Any = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_service,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=level, format="%(message)s")
    logging.getLogger().setLevel(level)


@contextmanager
def request_context(**fields: Any) -> Iterator[None]:
    """Bind request fields to every event logged inside the block."""
    with structlog.contextvars.bound_contextvars(**fields):
        yield
