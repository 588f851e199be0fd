from __future__ import annotations

import logging
import sys
from typing import Any, Optional

import structlog

__all__ = ["setup_logger", "get_logger"]

_CONFIGURED = False


def _to_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    try:
        return getattr(logging, str(level).upper())
    except AttributeError:
        return logging.INFO


def setup_logger(level: str | int = "INFO", json: bool = False, force: bool = False):
    """
    Idempotentna konfiguracja structlog + stdlib logging.
    Logi idą na stderr, żeby stdout CLI zostawał czysty (JSON-lines z `bookings`).
    `force=True` nadpisuje wcześniejszą konfigurację (np. --debug w CLI).
    """
    global _CONFIGURED
    if force or not _CONFIGURED:
        logging.basicConfig(
            level=_to_level(level),
            format="%(message)s",
            stream=sys.stderr,
            force=force,
        )

        processors: list[Any] = [
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ]
        if json:
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer())

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(_to_level(level)),
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _CONFIGURED = True

    return structlog.get_logger("saxotrader")


def get_logger(name: Optional[str] = None):
    """
    Pobiera BoundLogger. Gwarantuje, że konfiguracja istnieje.
    """
    if not _CONFIGURED:
        setup_logger()
    return structlog.get_logger(name) if name else structlog.get_logger()

