"""Structured logging setup for the KushRouter client."""

import logging
import os
import sys

import structlog


_configured = False


def configure_logging(level: str | None = None) -> None:
    """Route KushRouter's structlog events through stdlib logging on stderr.

    The library never calls this itself; applications (and the CLI) opt in.
    ``level`` defaults to ``KUSHROUTER_LOG_LEVEL`` or ``WARNING``.
    """
    global _configured
    if _configured:
        return

    name = (level or os.getenv("KUSHROUTER_LOG_LEVEL", "WARNING")).upper()
    log_level = getattr(logging, name, logging.WARNING)

    handler = logging.StreamHandler(sys.__stderr__)
    handler.setLevel(log_level)
    logging.basicConfig(level=log_level, handlers=[handler], format="%(message)s")

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Structlog logger bound to the stdlib logger ``name``.

    Events go through stdlib logging even when :func:`configure_logging`
    was never called, so the host application's handlers and levels apply.
    """
    return structlog.wrap_logger(logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger)
