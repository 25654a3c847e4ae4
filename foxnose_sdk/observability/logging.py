"""Structured logging configuration for SDK consumers.

The SDK itself only emits events through ``structlog.get_logger()``; it never
configures logging on import. Applications that want the SDK's transport
events rendered call :func:`configure_logging` once at startup.
"""

import logging
import sys
from collections.abc import Mapping
from typing import Any, TextIO

import structlog

from foxnose_sdk.transport.constants import SDK_VERSION
from foxnose_sdk.transport.redact import redact_headers


# Event keys whose values are header mappings
HEADER_FIELDS = frozenset({"headers", "request_headers", "response_headers"})


def redact_header_fields(
    logger: Any, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Redact credentials from header mappings attached to an event.

    Applies to every key in ``HEADER_FIELDS`` whose value is a mapping, so
    headers logged by application code are as safe as the SDK's own.
    """
    for key in HEADER_FIELDS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, Mapping):
            event_dict[key] = redact_headers(value)
    return event_dict


def add_sdk_version(
    logger: Any, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Tag events with the SDK version unless the caller set one."""
    event_dict.setdefault("sdk_version", SDK_VERSION)
    return event_dict


def configure_logging(
    level: int = logging.WARNING,
    output: TextIO = sys.stderr,
    json_format: bool = True,
) -> None:
    """Configure structlog for the SDK's structured events.

    Args:
        level: Minimum level to emit (default: WARNING, which shows retries
            and terminal failures but not per-request debug events).
        output: Output stream (default: stderr).
        json_format: Render JSON lines instead of the plain console format.
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        redact_header_fields,
        add_sdk_version,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )
