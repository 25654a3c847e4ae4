"""Error types for the FoxNose SDK."""

from enum import Enum
from typing import Any


class FoxnoseErrorKind(str, Enum):
    """Classification of SDK failures.

    - AUTH: Credentials or client construction are invalid
    - TRANSPORT: No HTTP response was received
    - API: The API answered with an error status
    """

    AUTH = "AUTH"
    TRANSPORT = "TRANSPORT"
    API = "API"


class FoxnoseError(Exception):
    """Base exception for all SDK errors."""

    kind: FoxnoseErrorKind = FoxnoseErrorKind.AUTH

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {"kind": self.kind.value, "message": self.message}


class FoxnoseAuthError(FoxnoseError):
    """Raised when authentication headers cannot be generated."""

    kind = FoxnoseErrorKind.AUTH


class FoxnoseConfigError(FoxnoseError, ValueError):
    """Raised when required client configuration is missing."""

    kind = FoxnoseErrorKind.AUTH


class FoxnoseTransportError(FoxnoseError):
    """Raised when the HTTP layer fails before receiving a response."""

    kind = FoxnoseErrorKind.TRANSPORT


class FoxnoseAPIError(FoxnoseError):
    """Raised when the API responds with an error status (4xx/5xx).

    Attributes:
        status_code: HTTP status code of the response.
        error_code: Platform error code from the body, if any.
        detail: Structured ``detail`` field from the body, if any.
        response_headers: Response headers as a plain mapping.
        response_body: Parsed JSON body, or the raw text when not JSON.
    """

    kind = FoxnoseErrorKind.API

    def __init__(
        self,
        message: str,
        status_code: int,
        error_code: str | None = None,
        detail: Any = None,
        response_headers: dict[str, str] | None = None,
        response_body: Any = None,
    ) -> None:
        code = f", error_code={error_code}" if error_code else ""
        super().__init__(f"{message} (status={status_code}{code})")
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.detail = detail
        self.response_headers = response_headers or {}
        self.response_body = response_body

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            **super().to_dict(),
            "status_code": self.status_code,
            "error_code": self.error_code,
            "detail": self.detail,
        }
