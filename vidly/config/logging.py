"""
Logging Configuration for the Vidly Rental Core

Routes structlog events through the standard library logging module with a
JSON or console renderer. Money and date values in event context are
rendered as plain strings ("4.50", "2025-06-15").
"""

import logging
import sys
from datetime import date
from decimal import Decimal
from typing import Optional

import structlog
from structlog.processors import JSONRenderer, TimeStamper
from structlog.stdlib import ProcessorFormatter, add_log_level

from vidly.config.settings import Settings, get_settings

# Third-party loggers that are noisy at DEBUG
QUIET_LOGGERS = ("faker", "faker.factory")


def render_domain_values(logger, method_name, event_dict):
    """Render Decimal and date context values as strings"""
    for key, value in event_dict.items():
        if isinstance(value, (Decimal, date)):
            event_dict[key] = str(value)
    return event_dict


def shared_processors():
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_log_level,
        TimeStamper(fmt="iso"),
        render_domain_values,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    log_level: Optional[str] = None,
    settings: Optional[Settings] = None,
    log_format: Optional[str] = None,
) -> None:
    """
    Configure structured logging for the process.

    Args:
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
        settings: Settings to read defaults from (cached settings if omitted)
        log_format: Override renderer, "json" or "text"
    """
    settings = settings or get_settings()
    level = (log_level or settings.monitoring.log_level).upper()
    fmt = (log_format or settings.monitoring.log_format).lower()
    numeric_level = getattr(logging, level, logging.INFO)

    processors = shared_processors()

    structlog.configure(
        processors=processors + [ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if fmt == "json":
        renderer = JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=settings.debug)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(ProcessorFormatter(processor=renderer, foreign_pre_chain=processors))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(numeric_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.INFO))

    structlog.get_logger(__name__).info(
        "Logging configured",
        level=level,
        format=fmt,
        environment=settings.app_env,
    )
