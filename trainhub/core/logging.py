"""
Structured logging setup.

Development renders colored key/value lines; production emits one JSON object
per line so the output can be shipped to a log aggregator:

    2026-10-19T10:30:00Z [info     ] request  method=GET path=/api/trainings status=200
    {"event": "request", "method": "GET", "path": "/api/trainings", "status": 200, ...}

Usage:
    from trainhub.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("training created", training_id=training.id)
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.typing import Processor

from .config import Settings


def configure_logging(settings: Settings) -> None:
    """Configure structlog and the stdlib root logger for this process."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level, logging.INFO),
    )

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_json:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
