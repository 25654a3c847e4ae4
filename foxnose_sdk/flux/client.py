"""Client for the FoxNose Flux delivery API."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from foxnose_sdk.auth.protocols import AuthStrategy
from foxnose_sdk.errors import FoxnoseConfigError
from foxnose_sdk.transport.client import HttpTransport, QueryParams
from foxnose_sdk.transport.config import RetryConfig, create_config
from foxnose_sdk.transport.constants import DEFAULT_FLUX_TIMEOUT_SECONDS


if TYPE_CHECKING:
    from foxnose_sdk.settings.app import FoxnoseSettings


logger = structlog.get_logger()


def _clean_prefix(prefix: str) -> str:
    cleaned = prefix.strip("/")
    if not cleaned:
        msg = "api_prefix cannot be empty"
        raise FoxnoseConfigError(msg)
    return cleaned


class FluxClient:
    """Client for reading published content through a Flux API prefix."""

    def __init__(
        self,
        base_url: str,
        api_prefix: str,
        auth: AuthStrategy,
        *,
        timeout_seconds: float = DEFAULT_FLUX_TIMEOUT_SECONDS,
        retry_config: RetryConfig | None = None,
        default_headers: dict[str, str] | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Environment delivery host, e.g. ``https://<env>.fxns.io``.
            api_prefix: Flux API prefix; surrounding slashes are ignored.
            auth: Authentication strategy.
            timeout_seconds: Per-attempt request timeout.
            retry_config: Retry policy (defaults apply when omitted).
            default_headers: Headers sent with every request.
            http_client: Optional pre-built httpx client.

        Raises:
            FoxnoseConfigError: If base_url or api_prefix is empty.
        """
        self.api_prefix = _clean_prefix(api_prefix)
        config = create_config(
            base_url,
            timeout_seconds=timeout_seconds,
            default_headers=default_headers,
        )
        self._transport = HttpTransport(config, auth, retry_config, http_client=http_client)
        self._log = logger.bind(component="flux", api_prefix=self.api_prefix)

    @classmethod
    def from_settings(
        cls,
        settings: "FoxnoseSettings",
        *,
        retry_config: RetryConfig | None = None,
        http_client: httpx.Client | None = None,
    ) -> "FluxClient":
        """Build a client from environment-driven settings.

        Raises:
            FoxnoseConfigError: If settings lack a Flux base URL or API prefix.
        """
        return cls(
            settings.flux_base_url or "",
            settings.api_prefix or "",
            settings.build_auth(),
            timeout_seconds=settings.timeout_seconds,
            retry_config=retry_config,
            http_client=http_client,
        )

    def __enter__(self) -> "FluxClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._transport.close()

    def _build_path(self, folder_path: str, suffix: str = "") -> str:
        folder = folder_path.strip("/")
        return f"/{self.api_prefix}/{folder}{suffix}"

    def list_resources(
        self,
        folder_path: str,
        params: QueryParams | None = None,
    ) -> Any:
        """List published resources of a folder."""
        return self._transport.request("GET", self._build_path(folder_path), params=params)

    def get_resource(
        self,
        folder_path: str,
        resource_key: str,
        params: QueryParams | None = None,
    ) -> Any:
        return self._transport.request(
            "GET",
            self._build_path(folder_path, f"/{resource_key}"),
            params=params,
        )

    def search(self, folder_path: str, body: Mapping[str, Any]) -> Any:
        """Run a search query against a folder.

        Args:
            folder_path: Folder path under the API prefix.
            body: Search request body.

        Returns:
            Decoded search response.
        """
        self._log.debug("flux_search", folder_path=folder_path)
        return self._transport.request(
            "POST",
            self._build_path(folder_path, "/_search"),
            json_body=dict(body),
        )
