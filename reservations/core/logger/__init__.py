"""
Project logger: console plus optional rotating JSON file, booking-context aware.

Usage:
    from reservations.core.logger import configure, get_logger, LoggerConfig

    # Configure once at startup (from_env() if not called)
    configure(LoggerConfig(level="DEBUG", log_dir="/var/log/reservations"))

    logger = get_logger(__name__)
    logger.info("Appointment created", extra={"appointment_id": 7, "confirmation_code": "APT-A8F3"})
"""
from reservations.core.logger.config import LoggerConfig
from reservations.core.logger.formatters import (
    CONTEXT_KEYS,
    JsonFormatter,
    PlainConsoleFormatter,
)
from reservations.core.logger.setup import configure, get_logger

__all__ = [
    "CONTEXT_KEYS",
    "LoggerConfig",
    "JsonFormatter",
    "PlainConsoleFormatter",
    "configure",
    "get_logger",
]
