from __future__ import annotations

import logging
import logging.config
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from threading import Lock
from typing import Any

import structlog
import structlog.contextvars
import structlog.stdlib

from backoffice.core.config import Settings
from backoffice.core.constants import ORDER_ID_CTX_KEY, SERVICE_NAME

_LOGGING_INITIALISED = False
_LOGGING_LOCK = Lock()
_ORDER_ID_CTX: ContextVar[str | None] = ContextVar(ORDER_ID_CTX_KEY, default=None)


def _resolve_level(level: str) -> int:
    resolved = logging.getLevelName(level.upper())
    if isinstance(resolved, str):
        return logging.INFO
    return int(resolved)


def configure_logging(settings: Settings) -> None:
    """Configure structlog + stdlib logging exactly once per process.

    The host application calls this at startup. Records from the
    ``backoffice`` logger tree are emitted as JSON at the configured level,
    or at ``DEBUG`` when ``settings.debug`` is set.
    """

    global _LOGGING_INITIALISED
    if _LOGGING_INITIALISED:
        return

    with _LOGGING_LOCK:
        if _LOGGING_INITIALISED:
            return

        level = logging.DEBUG if settings.debug else _resolve_level(settings.log_level)
        timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)

        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.add_log_level,
                timestamper,
                structlog.processors.dict_tracebacks,
                structlog.processors.JSONRenderer(),
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        logging.config.dictConfig(
            {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {
                    "structlog": {
                        "()": structlog.stdlib.ProcessorFormatter,
                        "processors": [
                            structlog.contextvars.merge_contextvars,
                            structlog.processors.add_log_level,
                            timestamper,
                            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                            structlog.processors.JSONRenderer(),
                        ],
                    }
                },
                "handlers": {
                    "default": {
                        "class": "logging.StreamHandler",
                        "formatter": "structlog",
                        "level": level,
                    }
                },
                "loggers": {
                    SERVICE_NAME: {
                        "handlers": ["default"],
                        "level": level,
                        "propagate": False,
                    },
                },
            }
        )

        structlog.contextvars.bind_contextvars(service=SERVICE_NAME)
        _LOGGING_INITIALISED = True


def bind_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


@contextmanager
def order_context(order_id: str, **kwargs: Any) -> Iterator[None]:
    """Attach an order identifier to every log line emitted inside the block."""

    token = _ORDER_ID_CTX.set(order_id)
    try:
        with structlog.contextvars.bound_contextvars(
            **{ORDER_ID_CTX_KEY: order_id, **kwargs}
        ):
            yield
    finally:
        _ORDER_ID_CTX.reset(token)


def clear_context() -> None:
    _ORDER_ID_CTX.set(None)
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=SERVICE_NAME)


def get_order_id(default: str | None = None) -> str | None:
    return _ORDER_ID_CTX.get(default)
