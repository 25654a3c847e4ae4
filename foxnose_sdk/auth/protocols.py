"""Protocol interfaces for authentication strategies."""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class RequestData:
    """Immutable view of the outbound request used when applying auth.

    Attributes:
        method: Upper-cased HTTP method.
        url: Full request URL including the query string.
        path: Request path including the query string.
        body: Exact bytes sent as the request body (empty when none).
    """

    method: str
    url: str
    path: str
    body: bytes = b""


@runtime_checkable
class AuthStrategy(Protocol):
    """Protocol implemented by every authentication strategy.

    Strategies compute headers from the request view; they never mutate
    the request, retry, or cache.
    """

    def build_headers(self, request: RequestData) -> dict[str, str]:
        """Compute authentication headers for one attempt.

        Args:
            request: Read-only view of the outbound request.

        Returns:
            Headers to merge over all other request headers.

        Raises:
            FoxnoseAuthError: If headers cannot be produced.
        """
        ...


@runtime_checkable
class TokenProvider(Protocol):
    """Provides access tokens for bearer-style auth."""

    def get_token(self) -> str:
        """Return the current access token."""
        ...
