"""
family_access.observability.logging

Structured logging configuration for the service.

Responsibilities:
- Configure `structlog` for JSON logs suitable for ELK/Splunk/CloudWatch.
- Scrub bearer credentials from every log event before rendering.
- Provide a small wrapper for obtaining bound loggers.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from family_access.audit.redaction import mask_bearer

_SENSITIVE_KEYS = frozenset({"credential", "authorization", "access_token", "accesstoken", "token"})


def configure_logging(*, service_name: str, level: str) -> None:
    """
    Structured JSON logs for ingestion in a log stream.
    """

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=build_processors(service_name),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def build_processors(service_name: str) -> list[Any]:
    # structlog processors run on each log event; keep this list focused and stable.
    # TimeStamper owns the "timestamp" key: it is the time the line is written.
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_service_name(service_name),
        scrub_credentials,
        structlog.processors.dict_tracebacks,
        structlog.processors.JSONRenderer(),
    ]


def _add_service_name(service_name: str):
    # Adds a stable "service" field for log routing/aggregation across environments.
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def scrub_credentials(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for key, value in list(event_dict.items()):
        if key.lower() in _SENSITIVE_KEYS and value is not None:
            event_dict[key] = "[REDACTED]"
        elif isinstance(value, str):
            event_dict[key] = mask_bearer(value)
    return event_dict


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# --- Module Notes -----------------------------------------------------------
# Request-scoped metadata is bound via contextvars in `observability.middleware`.
