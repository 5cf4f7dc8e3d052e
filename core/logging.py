"""
Logging for UltraCare Backend.

structlog renders on top of stdlib logging: JSON in production, console
output when ``DEBUG`` is on. Dated files under ``logs/`` are optional, and
request lines go to their own file so device heartbeat chatter stays out of
the application log.
"""

import logging
import os
import sys
import time
from datetime import datetime

import structlog
from structlog.stdlib import LoggerFactory

from core.config import Settings

LOGS_DIR = "logs"
REQUEST_LOGGER = "ultracare.requests"
LINE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _file_handler(kind: str, level: int) -> logging.FileHandler:
    path = os.path.join(LOGS_DIR, f"{kind}_{datetime.now():%Y%m%d}.log")
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LINE_FORMAT))
    handler.setLevel(level)
    return handler


def _init_sentry(settings: Settings, logger) -> None:
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.SENTRY_ENVIRONMENT,
        integrations=[FastApiIntegration(), SqlalchemyIntegration()],
        traces_sample_rate=0.1 if settings.ENV == "production" else 1.0,
    )
    logger.info("Sentry integration enabled", environment=settings.SENTRY_ENVIRONMENT)


def setup_logging(settings: Settings) -> structlog.stdlib.BoundLogger:
    """Configure structlog and the root handlers from ``settings``."""
    renderer = structlog.dev.ConsoleRenderer() if settings.DEBUG else structlog.processors.JSONRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper()))
    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(LINE_FORMAT))
    root.addHandler(console)

    if settings.ENABLE_FILE_LOGGING or settings.ENABLE_REQUEST_LOGGING:
        os.makedirs(LOGS_DIR, exist_ok=True)

    if settings.ENABLE_FILE_LOGGING:
        root.addHandler(_file_handler("app", logging.INFO))
        root.addHandler(_file_handler("error", logging.ERROR))

    if settings.ENABLE_REQUEST_LOGGING:
        requests_log = logging.getLogger(REQUEST_LOGGER)
        requests_log.setLevel(logging.INFO)
        requests_log.propagate = False
        requests_log.handlers.clear()
        requests_log.addHandler(_file_handler("requests", logging.INFO))

    logger = structlog.get_logger()
    if settings.SENTRY_DSN and settings.SENTRY_DSN.strip():
        _init_sentry(settings, logger)
    return logger


def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


async def log_request_middleware(request, call_next):
    """One line per request with status and elapsed milliseconds."""
    logger = get_logger(REQUEST_LOGGER)
    started = time.perf_counter()

    response = await call_next(request)

    logger.info(
        "Request handled",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
        client_ip=request.client.host if request.client else None,
    )
    return response
