"""Configuration models for the HTTP transport layer."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from foxnose_sdk.errors import FoxnoseConfigError
from foxnose_sdk.transport.constants import (
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_METHODS,
    DEFAULT_RETRY_STATUS_CODES,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
)


class FoxnoseConfig(BaseModel):
    """Transport-level configuration shared by all clients.

    Created once per client and never mutated.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: Annotated[str, Field(min_length=1, description="API root URL")]
    timeout_seconds: Annotated[float, Field(gt=0.0)] = DEFAULT_TIMEOUT_SECONDS
    default_headers: dict[str, str] = Field(
        default_factory=dict,
        description="Headers applied to every request (lower priority than per-call headers)",
    )
    user_agent: Annotated[str, Field(min_length=1)] = DEFAULT_USER_AGENT

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so it never ends with a slash."""
        stripped = v.rstrip("/")
        if not stripped:
            msg = "base_url must not be empty"
            raise ValueError(msg)
        return stripped


def create_config(
    base_url: str,
    *,
    timeout_seconds: float | None = None,
    default_headers: dict[str, str] | None = None,
    user_agent: str | None = None,
) -> FoxnoseConfig:
    """Create a validated FoxnoseConfig with defaults applied.

    Args:
        base_url: Root URL (including scheme) for the API.
        timeout_seconds: Per-attempt request timeout.
        default_headers: Headers applied to every request.
        user_agent: User agent string reported to the API.

    Returns:
        Immutable configuration.

    Raises:
        FoxnoseConfigError: If base_url is empty.
    """
    if not base_url or not base_url.rstrip("/"):
        msg = "base_url must be provided"
        raise FoxnoseConfigError(msg)

    return FoxnoseConfig(
        base_url=base_url,
        timeout_seconds=(
            timeout_seconds if timeout_seconds is not None else DEFAULT_TIMEOUT_SECONDS
        ),
        default_headers=dict(default_headers or {}),
        user_agent=user_agent or DEFAULT_USER_AGENT,
    )


class RetryConfig(BaseModel):
    """Controls HTTP retry behavior for idempotent requests.

    Backoff is exponential: delay = backoff_factor * 2 ^ (attempt - 1) seconds,
    unless the server supplies a Retry-After header.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    attempts: Annotated[
        int, Field(ge=1, description="Total attempts (first request + retries)")
    ] = DEFAULT_RETRY_ATTEMPTS
    backoff_factor: Annotated[float, Field(ge=0.0)] = DEFAULT_BACKOFF_FACTOR
    status_codes: frozenset[int] = DEFAULT_RETRY_STATUS_CODES
    methods: frozenset[str] = DEFAULT_RETRY_METHODS

    @field_validator("methods", mode="before")
    @classmethod
    def normalize_methods(cls, v: object) -> object:
        """Upper-case method names so membership checks ignore case."""
        if isinstance(v, str):
            return frozenset({v.upper()})
        if isinstance(v, (list, tuple, set, frozenset)):
            return frozenset(str(method).upper() for method in v)
        return v

    def allows_method(self, method: str) -> bool:
        """Check if a method is eligible for retries.

        Args:
            method: HTTP method, any case.

        Returns:
            True if requests with this method may be retried.
        """
        return method.upper() in self.methods

    def should_retry(self, method: str, status_code: int) -> bool:
        """Determine if a response status is retryable for a method.

        Does not consider the attempt budget; callers check that separately.

        Args:
            method: HTTP method of the request.
            status_code: Response status code.

        Returns:
            True if the response may be retried.
        """
        return self.allows_method(method) and status_code in self.status_codes

    def backoff_seconds(self, attempt: int) -> float:
        """Calculate the exponential delay after a failed attempt.

        Args:
            attempt: Attempt number that just failed (1-indexed).

        Returns:
            Delay in seconds.
        """
        return self.backoff_factor * (2 ** max(attempt - 1, 0))


DEFAULT_RETRY_CONFIG = RetryConfig()
