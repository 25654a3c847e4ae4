"""Python client for the FoxNose Management and Flux APIs."""

from foxnose_sdk.auth import (
    AnonymousAuth,
    AuthStrategy,
    JWTAuth,
    RequestData,
    SecureKeyAuth,
    SimpleKeyAuth,
    StaticTokenProvider,
    TokenProvider,
)
from foxnose_sdk.errors import (
    FoxnoseAPIError,
    FoxnoseAuthError,
    FoxnoseConfigError,
    FoxnoseError,
    FoxnoseErrorKind,
    FoxnoseTransportError,
)
from foxnose_sdk.flux import FluxClient
from foxnose_sdk.management import (
    BatchUpsertItem,
    BatchUpsertResult,
    ManagementClient,
    resolve_key,
)
from foxnose_sdk.settings import FoxnoseSettings, get_settings
from foxnose_sdk.transport import (
    DEFAULT_RETRY_CONFIG,
    SDK_VERSION,
    FoxnoseConfig,
    HttpTransport,
    RetryConfig,
    create_config,
)


__version__ = SDK_VERSION

__all__ = [
    "__version__",
    # Clients
    "FluxClient",
    "HttpTransport",
    "ManagementClient",
    # Auth
    "AnonymousAuth",
    "AuthStrategy",
    "JWTAuth",
    "RequestData",
    "SecureKeyAuth",
    "SimpleKeyAuth",
    "StaticTokenProvider",
    "TokenProvider",
    # Config
    "DEFAULT_RETRY_CONFIG",
    "FoxnoseConfig",
    "FoxnoseSettings",
    "RetryConfig",
    "create_config",
    "get_settings",
    # Errors
    "FoxnoseAPIError",
    "FoxnoseAuthError",
    "FoxnoseConfigError",
    "FoxnoseError",
    "FoxnoseErrorKind",
    "FoxnoseTransportError",
    # Batch
    "BatchUpsertItem",
    "BatchUpsertResult",
    "resolve_key",
]
