"""Structured logging for the notifier process.

stdout carries the echoed server log and the Start/End banners, so every
diagnostic (tail errors, rate-limit waits, webhook responses) is written to
stderr. A terminal gets structlog's console renderer; a redirected stderr
(systemd, docker) gets one JSON object per line.
"""

import logging
import sys
from typing import cast

import structlog


def _renderer(json_output: bool) -> structlog.types.Processor:
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def configure_logging(level: str = "INFO", json_output: bool | None = None) -> None:
    """Route notifier and httpx logs to stderr.

    Called once by the CLI before the daemon starts. The tailer, dispatcher
    and webhook client log through module-level structlog loggers, which
    pick this configuration up on first use.

    Args:
        level: Log level name; --verbose passes 'DEBUG' to also show
            detected events and player session lengths
        json_output: Force JSON (True) or console (False) rendering;
            default picks console when stderr is a terminal
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    if json_output is None:
        json_output = not sys.stderr.isatty()

    # Applied to structlog events and to stdlib records from httpx alike
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processor=_renderer(json_output),
        )
    )
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    # httpx logs every webhook POST at INFO; DiscordClient already logs the outcome
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a notifier logger, named after the calling module."""
    return cast(structlog.BoundLogger, structlog.get_logger(name))
