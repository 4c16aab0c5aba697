from __future__ import annotations

import logging
import sys

import structlog

SERVICE_NAME = "hotspot-gate"


def setup_logging(log_level: str = "INFO", debug: bool = False, service: str = SERVICE_NAME) -> None:
    """Configure structlog; every event carries ``service`` so hotspot logs can be told apart."""
    level = logging.DEBUG if debug else getattr(logging, log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(service=service)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    # httpx logs every proxied request at INFO; keep it to warnings unless debugging.
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def token_prefix(token: str | None) -> str | None:
    """Shorten a token for log output; full digests never reach the logs."""
    if not token:
        return None
    return token[:8]
