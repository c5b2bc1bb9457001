"""
Honorary Allow-List - Logging Configuration
"""

import logging
import sys

import structlog

from allowlist.core.config import settings

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def setup_logging(level: str | None = None) -> None:
    """Configure structured logging.

    Logs go to stderr; stdout is reserved for roots and proofs.
    """
    use_json = settings.ENV == "production"
    level_name = (level or settings.LOG_LEVEL).upper()
    if level_name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level {level_name!r}, expected one of {', '.join(LOG_LEVELS)}")

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=logging.getLevelName(level_name),
        force=True,
    )
