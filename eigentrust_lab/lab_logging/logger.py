"""
Structured logging for the trust engine: timestamp, level, logger, event_type.

structlog with ISO timestamps and consistent keys so solver runs can be
grepped or aggregated (iterations, delta, converged). Every module calls
get_logger(__name__) and logs a snake_case event name plus keyword context.

Uses only Python stdlib logging and structlog; no eigentrust_lab imports to avoid circular imports.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

import structlog

LOG_LEVEL = os.getenv("EIGENTRUST_LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)

# json for services, console for interactive use
LOG_FORMAT = os.getenv("EIGENTRUST_LOG_FORMAT", "console").strip().lower()


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Ensure timestamp is always present (ISO 8601)."""
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Rename structlog 'event' to event_type; keep message if present."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


def configure_structlog(
    level: int = LOG_LEVEL_VALUE,
    log_format: str = LOG_FORMAT,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog: timestamp, level, event_type, JSON or console output to stream (default stderr)."""
    stream = stream if stream is not None else sys.stderr
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
    ]
    if log_format == "json":
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(colors=stream.isatty())
        )
    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


# One-time configuration on first import
if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("trust_computed", nodes=10, iterations=42, converged=True)
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_run(**context: Any) -> None:
    """Bind context (e.g. run_id, scenario) to every log line of the current call chain."""
    structlog.contextvars.bind_contextvars(**context)


def clear_run(*keys: str) -> None:
    """Drop the given keys bound with bind_run, or all bound context when none are given."""
    if keys:
        structlog.contextvars.unbind_contextvars(*keys)
    else:
        structlog.contextvars.clear_contextvars()
