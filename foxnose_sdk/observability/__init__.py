"""Observability helpers for structured logging."""

from foxnose_sdk.observability.logging import (
    HEADER_FIELDS,
    add_sdk_version,
    configure_logging,
    redact_header_fields,
)


__all__ = [
    "HEADER_FIELDS",
    "add_sdk_version",
    "configure_logging",
    "redact_header_fields",
]
