"""SDK settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from foxnose_sdk.auth.anonymous import AnonymousAuth
from foxnose_sdk.auth.protocols import AuthStrategy
from foxnose_sdk.auth.secure import SecureKeyAuth
from foxnose_sdk.auth.simple import SimpleKeyAuth
from foxnose_sdk.auth.token import JWTAuth
from foxnose_sdk.transport.constants import (
    DEFAULT_MANAGEMENT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
)


class FoxnoseSettings(BaseSettings):
    """Environment configuration read from ``FOXNOSE_*`` variables."""

    model_config = SettingsConfigDict(
        env_prefix="FOXNOSE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = DEFAULT_MANAGEMENT_BASE_URL
    flux_base_url: str | None = None
    environment_key: str | None = None
    api_prefix: str | None = None
    public_key: str | None = None
    secret_key: str | None = None
    private_key: str | None = None
    access_token: str | None = None
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)

    def build_auth(self) -> AuthStrategy:
        """Pick an auth strategy from the configured credentials.

        Priority: private key (Secure), secret key (Simple), access token
        (JWT), otherwise anonymous.

        Returns:
            The auth strategy.

        Raises:
            FoxnoseAuthError: If a key-based strategy lacks its public key.
        """
        if self.private_key:
            return SecureKeyAuth(self.public_key or "", self.private_key)
        if self.secret_key:
            return SimpleKeyAuth(self.public_key or "", self.secret_key)
        if self.access_token:
            return JWTAuth.from_static_token(self.access_token)
        return AnonymousAuth()


def get_settings() -> FoxnoseSettings:
    """Get a settings instance."""
    return FoxnoseSettings()
