"""Structured logging for Repo Insights.

Engine modules log through ``get_logger(__name__)`` with keyword fields.
Development renders to a colored console, production to one JSON object
per line. Account identifiers and credentials never reach the output, and
long sequences (repository names, detected categories) are capped.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from app.config import Environment, Settings, get_settings

MAX_LOGGED_ITEMS = 20

_SECRET_MARKERS = ("token", "secret", "password", "authorization")
_IDENTITY_KEYS = frozenset({"login", "owner", "author", "committer", "email"})


def _redact(_logger: Any, _method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Mask credentials and the identity of the scanned account."""
    for key in event_dict:
        lowered = key.lower()
        if lowered in _IDENTITY_KEYS:
            event_dict[key] = "[PII_REDACTED]"
        elif any(marker in lowered for marker in _SECRET_MARKERS):
            event_dict[key] = "[REDACTED]"
    return event_dict


def _cap_sequences(
    _logger: Any, _method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Truncate list and tuple fields to ``MAX_LOGGED_ITEMS`` entries."""
    for key, value in event_dict.items():
        if isinstance(value, (list, tuple)) and len(value) > MAX_LOGGED_ITEMS:
            hidden = len(value) - MAX_LOGGED_ITEMS
            event_dict[key] = [*value[:MAX_LOGGED_ITEMS], f"...+{hidden}"]
    return event_dict


def setup_logging(settings: Settings | None = None) -> None:
    """Route structlog and stdlib logging through one handler on stdout."""
    settings = settings or get_settings()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _redact,
        _cap_sequences,
    ]

    if settings.environment == Environment.PRODUCTION:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        shared_processors.append(structlog.processors.dict_tracebacks)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=settings.debug)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(settings.log_level.upper())


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
