"""Structured logging setup and request logging."""

import json
import logging
from typing import Any

from tripplanner.config import Settings

logger = logging.getLogger("tripplanner.requests")


class StructuredFormatter(logging.Formatter):
    """Formatter that appends the ``structured`` extra as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        structured = getattr(record, "structured", None)
        if structured:
            message = f"{message} {json.dumps(structured, default=str, sort_keys=True)}"
        return message


def configure_logging(settings: Settings) -> None:
    """Install a structured stream handler on the package logger."""
    package_logger = logging.getLogger("tripplanner")
    package_logger.setLevel(settings.log_level.upper())

    if not any(isinstance(h.formatter, StructuredFormatter) for h in package_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(
            StructuredFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        package_logger.addHandler(handler)


class StructuredRequestLogger:
    """Structured logger for completed HTTP requests."""

    def log_request(
        self,
        method: str,
        route: str,
        status_code: int,
        latency_ms: float,
        user_id: int | None = None,
    ) -> None:
        """Log a request with structured data."""
        log_data: dict[str, Any] = {
            "method": method,
            "route": route,
            "status": status_code,
            "latency_ms": round(latency_ms, 2),
        }

        if user_id is not None:
            log_data["user_id"] = user_id

        log_msg = f"{method} {route} - {status_code}"

        if status_code >= 500:
            logger.error(log_msg, extra={"structured": log_data})
        elif status_code >= 400:
            logger.warning(log_msg, extra={"structured": log_data})
        else:
            logger.info(log_msg, extra={"structured": log_data})
