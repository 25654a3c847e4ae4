"""HTTP constants for the transport layer.

Centralizes all transport-related constants to avoid duplication across modules.
"""

SDK_VERSION = "0.1.1"
DEFAULT_USER_AGENT = f"foxnose-sdk-python/{SDK_VERSION}"

# Endpoints
DEFAULT_MANAGEMENT_BASE_URL = "https://api.foxnose.net"

# Timeouts (seconds)
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_FLUX_TIMEOUT_SECONDS = 15.0

# HTTP status thresholds
HTTP_STATUS_ERROR_MIN = 400

# Header names
HEADER_USER_AGENT = "User-Agent"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_RETRY_AFTER = "Retry-After"
HEADER_AUTHORIZATION = "Authorization"
HEADER_DATE = "Date"

JSON_CONTENT_TYPE = "application/json"

# Retry defaults
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_BACKOFF_FACTOR = 0.5
DEFAULT_RETRY_STATUS_CODES = frozenset({408, 425, 429, 500, 502, 503, 504})
DEFAULT_RETRY_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})

# Error messages
DEFAULT_API_ERROR_MESSAGE = "API request failed"
RETRIES_EXHAUSTED_MESSAGE = "All retry attempts exhausted"
