"""
structlog setup for the ai-store CLI and embedding applications.

Library modules only call structlog.get_logger(__name__); nothing is
emitted until an application calls setup_logging(). Store and Retriever
events are debug level, so they show up with `ai-store --debug` or
LOG_LEVEL=DEBUG.
"""

import logging
import sys

import structlog
from structlog.types import Processor

from ai_store.config.settings import get_settings


def setup_logging(level: str | None = None) -> None:
    """
    Route structlog events through stdlib logging on stderr.

    Production renders one JSON object per event; other environments get
    the console renderer, colored only when stderr is a terminal.

    Args:
        level: Log level name overriding Settings.log_level
    """
    settings = get_settings()
    level_name = (level or settings.log_level).upper()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if settings.is_production:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # stdout is reserved for command output
    logging.basicConfig(format="%(message)s", stream=sys.stderr, force=True)
    logging.getLogger("ai_store").setLevel(level_name)
    logging.getLogger("redis").setLevel(logging.WARNING)
