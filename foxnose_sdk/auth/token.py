"""Bearer-token authentication backed by a token provider."""

import structlog

from foxnose_sdk.auth.protocols import RequestData, TokenProvider
from foxnose_sdk.errors import FoxnoseAuthError
from foxnose_sdk.transport.constants import HEADER_AUTHORIZATION


logger = structlog.get_logger()


class StaticTokenProvider:
    """Token provider that always returns the same token."""

    def __init__(self, token: str) -> None:
        self._token = token

    def get_token(self) -> str:
        return self._token


class JWTAuth:
    """Adds ``Authorization: <scheme> <token>`` headers using a token provider.

    The provider is consulted on every attempt, so providers that refresh
    tokens behind the scenes are picked up without rebuilding the client.
    """

    def __init__(self, provider: TokenProvider, *, scheme: str = "Bearer") -> None:
        """Initialize the strategy.

        Args:
            provider: Source of access tokens.
            scheme: Authorization scheme prefix.
        """
        self._provider = provider
        self.scheme = scheme

    def build_headers(self, request: RequestData) -> dict[str, str]:  # noqa: ARG002
        """Build the bearer Authorization header.

        Raises:
            FoxnoseAuthError: If the provider returns an empty token.
        """
        token = self._provider.get_token()
        if not token:
            logger.warning("auth_empty_token", component="auth", scheme=self.scheme)
            msg = "Token provider returned an empty token"
            raise FoxnoseAuthError(msg)
        return {HEADER_AUTHORIZATION: f"{self.scheme} {token}"}

    @classmethod
    def from_static_token(cls, token: str, *, scheme: str = "Bearer") -> "JWTAuth":
        """Convenience constructor for scripts with manual token management."""
        return cls(StaticTokenProvider(token), scheme=scheme)
