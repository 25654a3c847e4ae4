"""HTTP transport layer with retries and error normalization.

This module provides the request core shared by every client:
- Header assembly with auth strategies applied last
- Configurable retry policy with exponential backoff and Retry-After
- Normalization of error responses into typed exceptions
- Header redaction for logging
- Metrics collection for observability
"""

from foxnose_sdk.transport.client import (
    HttpTransport,
    encode_query,
    parse_retry_after,
    serialize_json,
)
from foxnose_sdk.transport.config import (
    DEFAULT_RETRY_CONFIG,
    FoxnoseConfig,
    RetryConfig,
    create_config,
)
from foxnose_sdk.transport.constants import (
    DEFAULT_FLUX_TIMEOUT_SECONDS,
    DEFAULT_MANAGEMENT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    SDK_VERSION,
)
from foxnose_sdk.transport.metrics import TransportMetrics
from foxnose_sdk.transport.redact import redact_headers


__all__ = [
    # Client
    "HttpTransport",
    "encode_query",
    "parse_retry_after",
    "serialize_json",
    # Config
    "DEFAULT_RETRY_CONFIG",
    "FoxnoseConfig",
    "RetryConfig",
    "create_config",
    # Constants
    "DEFAULT_FLUX_TIMEOUT_SECONDS",
    "DEFAULT_MANAGEMENT_BASE_URL",
    "DEFAULT_TIMEOUT_SECONDS",
    "DEFAULT_USER_AGENT",
    "SDK_VERSION",
    # Metrics
    "TransportMetrics",
    # Redaction
    "redact_headers",
]
