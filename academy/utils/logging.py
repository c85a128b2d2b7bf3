# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structured logging configuration using structlog.

Logs are formatted as JSON in production and as colored console output
in development.

Example:
    >>> import logging
    >>> from academy.utils.logging import setup_logging
    >>> from academy.core.config import get_settings
    >>> setup_logging(get_settings())
    >>> logger = logging.getLogger(__name__)
    >>> logger.info("Enrolled user %s in class %s", "123", "456")
"""

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from academy.core.config.settings import Settings


def setup_logging(settings: "Settings") -> None:
    """Configure structured logging for the application.

    Standard library loggers (``logging.getLogger(__name__)``) are routed
    through the same structlog processor chain, so both styles produce
    one consistent output format.

    Args:
        settings: Application settings containing log_level and debug flag.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.is_development or settings.debug:
        renderer: Processor = structlog.dev.ConsoleRenderer(colors=True)
    else:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    # Third-party loggers stay at WARNING to reduce noise
    for logger_name in [
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
        "httpx",
        "httpcore",
        "sqlalchemy",
        "asyncio",
        "aiosmtplib",
        "stripe",
    ]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    if settings.database.echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    logging.getLogger("academy").setLevel(log_level)


def bind_context(**kwargs: object) -> None:
    """Bind context variables to all subsequent log calls in this context.

    Used for request-scoped information like request_id or user_id.

    Args:
        **kwargs: Key-value pairs to bind to the logging context.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables.

    Called at the end of request processing to prevent context leakage
    between requests.
    """
    structlog.contextvars.clear_contextvars()
