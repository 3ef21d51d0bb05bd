"""Structured log records for service operations.

Every service logs under "food_locales.services.<module>", and each step of a
derivation run is logged as "<operation>: <outcome>" with its details (locale
ids, counts, codes) attached to the record as attributes:

    logger = get_service_logger(__name__)
    log_operation(logger, "derive_locale", "done", dest_locale="en_NZ", created_count=12)

Detail names must not clash with LogRecord attributes ("name", "msg",
"args", "module" and so on), or logging raises KeyError.
"""

import logging
from typing import Any

SERVICE_LOGGER_PREFIX = "food_locales.services"


def get_service_logger(name: str) -> logging.Logger:
    """
    Logger for a service module.

    >>> get_service_logger("food_locales.services.derive_locale.derive_locale_service").name
    'food_locales.services.derive_locale_service'
    """
    module = name.rsplit(".", 1)[-1]
    return logging.getLogger(f"{SERVICE_LOGGER_PREFIX}.{module}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **details: Any,
) -> None:
    """Log one operation step; use DEBUG for per-food steps and WARNING for rejections."""
    logger.log(
        level,
        "%s: %s",
        operation,
        outcome,
        extra={"operation": operation, "outcome": outcome, **details},
    )
