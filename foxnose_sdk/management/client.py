"""Client for the FoxNose Management API."""

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from foxnose_sdk.auth.protocols import AuthStrategy
from foxnose_sdk.errors import FoxnoseConfigError
from foxnose_sdk.management.batch import DEFAULT_MAX_CONCURRENCY, batch_upsert
from foxnose_sdk.management.models import (
    BatchUpsertItem,
    BatchUpsertResult,
    KeyRef,
    resolve_key,
)
from foxnose_sdk.management.paths import ManagementPaths
from foxnose_sdk.transport.client import HttpTransport, QueryParams
from foxnose_sdk.transport.config import RetryConfig, create_config
from foxnose_sdk.transport.constants import (
    DEFAULT_MANAGEMENT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
)


if TYPE_CHECKING:
    from foxnose_sdk.settings.app import FoxnoseSettings


logger = structlog.get_logger()

Payload = dict[str, Any]


def _ensure_list(payload: Any) -> list[Any]:
    """Normalize endpoints that sometimes return a bare object instead of a list."""
    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    return [payload]


class ManagementClient:
    """Client for the FoxNose Management API.

    Every method returns the decoded JSON payload. Methods accepting a
    ``*_key`` reference take either the key string or a summary object /
    decoded payload carrying a ``key``.
    """

    def __init__(
        self,
        environment_key: str,
        auth: AuthStrategy,
        *,
        base_url: str = DEFAULT_MANAGEMENT_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        retry_config: RetryConfig | None = None,
        default_headers: dict[str, str] | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            environment_key: Environment that scopes all ``/v1`` endpoints.
            auth: Authentication strategy.
            base_url: API root URL.
            timeout_seconds: Per-attempt request timeout.
            retry_config: Retry policy (defaults apply when omitted).
            default_headers: Headers sent with every request.
            http_client: Optional pre-built httpx client.

        Raises:
            FoxnoseConfigError: If environment_key or base_url is empty.
        """
        if not environment_key:
            msg = "environment_key must be provided"
            raise FoxnoseConfigError(msg)
        self.environment_key = environment_key
        config = create_config(
            base_url,
            timeout_seconds=timeout_seconds,
            default_headers=default_headers,
        )
        self._transport = HttpTransport(
            config,
            auth,
            retry_config,
            http_client=http_client,
        )
        self.paths = ManagementPaths(environment_key)
        self._log = logger.bind(component="management", environment_key=environment_key)

    @classmethod
    def from_settings(
        cls,
        settings: "FoxnoseSettings",
        *,
        retry_config: RetryConfig | None = None,
        http_client: httpx.Client | None = None,
    ) -> "ManagementClient":
        """Build a client from environment-driven settings.

        Raises:
            FoxnoseConfigError: If settings lack an environment key.
        """
        return cls(
            settings.environment_key or "",
            settings.build_auth(),
            base_url=settings.base_url,
            timeout_seconds=settings.timeout_seconds,
            retry_config=retry_config,
            http_client=http_client,
        )

    def __enter__(self) -> "ManagementClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        *,
        params: QueryParams | None = None,
        json_body: Any = None,
        headers: Mapping[str, str] | None = None,
        parse_json: bool = True,
    ) -> Any:
        """Low-level escape hatch for calling arbitrary endpoints."""
        return self._transport.request(
            method,
            path,
            params=params,
            json_body=json_body,
            headers=headers,
            parse_json=parse_json,
        )

    def close(self) -> None:
        self._transport.close()

    def _delete(self, path: str, json_body: Any = None) -> None:
        self.request("DELETE", path, json_body=json_body, parse_json=False)

    # Organization operations

    def list_organizations(self) -> list[Payload]:
        return _ensure_list(self.request("GET", "/organizations/"))

    def get_organization(self, org_key: KeyRef) -> Payload:
        return self.request("GET", f"{self.paths.org_root(resolve_key(org_key))}/")

    def update_organization(self, org_key: KeyRef, payload: Payload) -> Payload:
        return self.request(
            "PUT", f"{self.paths.org_root(resolve_key(org_key))}/", json_body=payload
        )

    def list_regions(self) -> list[Payload]:
        return _ensure_list(self.request("GET", "/regions/"))

    def get_available_plans(self) -> Payload:
        return self.request("GET", "/plans/")

    def get_organization_plan(self, org_key: KeyRef) -> Payload:
        return self.request("GET", f"{self.paths.org_root(resolve_key(org_key))}/plan/")

    def set_organization_plan(self, org_key: KeyRef, plan_code: str) -> Payload:
        """Switch an organization to another plan."""
        org_root = self.paths.org_root(resolve_key(org_key))
        return self.request("POST", f"{org_root}/plan/{plan_code}/")

    def get_organization_usage(self, org_key: KeyRef) -> Payload:
        return self.request("GET", f"{self.paths.org_root(resolve_key(org_key))}/usage/")

    # Management API key operations

    def list_management_api_keys(self, params: QueryParams | None = None) -> Payload:
        return self.request("GET", f"{self.paths.management_api_keys_root()}/", params=params)

    def create_management_api_key(self, payload: Payload) -> Payload:
        return self.request(
            "POST", f"{self.paths.management_api_keys_root()}/", json_body=payload
        )

    def get_management_api_key(self, key: KeyRef) -> Payload:
        return self.request("GET", f"{self.paths.management_api_key_root(resolve_key(key))}/")

    def update_management_api_key(self, key: KeyRef, payload: Payload) -> Payload:
        return self.request(
            "PUT",
            f"{self.paths.management_api_key_root(resolve_key(key))}/",
            json_body=payload,
        )

    def delete_management_api_key(self, key: KeyRef) -> None:
        self._delete(f"{self.paths.management_api_key_root(resolve_key(key))}/")

    # Flux API key operations

    def list_flux_api_keys(self, params: QueryParams | None = None) -> Payload:
        return self.request("GET", f"{self.paths.flux_api_keys_root()}/", params=params)

    def create_flux_api_key(self, payload: Payload) -> Payload:
        return self.request("POST", f"{self.paths.flux_api_keys_root()}/", json_body=payload)

    def get_flux_api_key(self, key: KeyRef) -> Payload:
        return self.request("GET", f"{self.paths.flux_api_key_root(resolve_key(key))}/")

    def update_flux_api_key(self, key: KeyRef, payload: Payload) -> Payload:
        return self.request(
            "PUT", f"{self.paths.flux_api_key_root(resolve_key(key))}/", json_body=payload
        )

    def delete_flux_api_key(self, key: KeyRef) -> None:
        self._delete(f"{self.paths.flux_api_key_root(resolve_key(key))}/")

    # API definition operations

    def list_apis(self, params: QueryParams | None = None) -> Payload:
        return self.request("GET", f"{self.paths.apis_root()}/", params=params)

    def create_api(self, payload: Payload) -> Payload:
        return self.request("POST", f"{self.paths.apis_root()}/", json_body=payload)

    def get_api(self, api_key: KeyRef) -> Payload:
        return self.request("GET", f"{self.paths.api_root(resolve_key(api_key))}/")

    def update_api(self, api_key: KeyRef, payload: Payload) -> Payload:
        return self.request(
            "PUT", f"{self.paths.api_root(resolve_key(api_key))}/", json_body=payload
        )

    def delete_api(self, api_key: KeyRef) -> None:
        self._delete(f"{self.paths.api_root(resolve_key(api_key))}/")

    # API folder associations

    def list_api_folders(self, api_key: KeyRef, params: QueryParams | None = None) -> Payload:
        return self.request(
            "GET", f"{self.paths.api_folders_root(resolve_key(api_key))}/", params=params
        )

    def add_api_folder(
        self,
        api_key: KeyRef,
        folder_key: KeyRef,
        *,
        allowed_methods: Sequence[str] | None = None,
    ) -> Payload:
        """Expose a folder through a Flux API.

        Args:
            api_key: API definition reference.
            folder_key: Folder reference.
            allowed_methods: Methods the API may use on the folder.

        Returns:
            The created association.
        """
        body: Payload = {"folder": resolve_key(folder_key)}
        if allowed_methods:
            body["allowed_methods"] = list(allowed_methods)
        return self.request(
            "POST", f"{self.paths.api_folders_root(resolve_key(api_key))}/", json_body=body
        )

    def get_api_folder(self, api_key: KeyRef, folder_key: KeyRef) -> Payload:
        folders_root = self.paths.api_folders_root(resolve_key(api_key))
        return self.request("GET", f"{folders_root}/{resolve_key(folder_key)}/")

    def update_api_folder(
        self,
        api_key: KeyRef,
        folder_key: KeyRef,
        *,
        allowed_methods: Sequence[str] | None = None,
    ) -> Payload:
        body: Payload = {}
        if allowed_methods:
            body["allowed_methods"] = list(allowed_methods)
        folders_root = self.paths.api_folders_root(resolve_key(api_key))
        return self.request(
            "PUT", f"{folders_root}/{resolve_key(folder_key)}/", json_body=body
        )

    def remove_api_folder(self, api_key: KeyRef, folder_key: KeyRef) -> None:
        folders_root = self.paths.api_folders_root(resolve_key(api_key))
        self._delete(f"{folders_root}/{resolve_key(folder_key)}/")

    # Management role operations

    def list_management_roles(self, params: QueryParams | None = None) -> Payload:
        return self.request("GET", f"{self.paths.management_roles_root()}/", params=params)

    def create_management_role(self, payload: Payload) -> Payload:
        return self.request(
            "POST", f"{self.paths.management_roles_root()}/", json_body=payload
        )

    def get_management_role(self, role_key: KeyRef) -> Payload:
        return self.request(
            "GET", f"{self.paths.management_role_root(resolve_key(role_key))}/"
        )

    def update_management_role(self, role_key: KeyRef, payload: Payload) -> Payload:
        return self.request(
            "PUT",
            f"{self.paths.management_role_root(resolve_key(role_key))}/",
            json_body=payload,
        )

    def delete_management_role(self, role_key: KeyRef) -> None:
        self._delete(f"{self.paths.management_role_root(resolve_key(role_key))}/")

    def list_management_role_permissions(self, role_key: KeyRef) -> list[Payload]:
        path = f"{self.paths.role_permissions_root(resolve_key(role_key))}/"
        return _ensure_list(self.request("GET", path))

    def upsert_management_role_permission(self, role_key: KeyRef, payload: Payload) -> Payload:
        return self.request(
            "PUT",
            f"{self.paths.role_permissions_root(resolve_key(role_key))}/",
            json_body=payload,
        )

    def delete_management_role_permission(self, role_key: KeyRef, content_type: str) -> None:
        permissions_root = self.paths.role_permissions_root(resolve_key(role_key))
        self._delete(f"{permissions_root}/{content_type}/")

    def replace_management_role_permissions(
        self,
        role_key: KeyRef,
        permissions: Sequence[Payload],
    ) -> list[Payload]:
        """Replace every permission of a management role in one call."""
        path = f"{self.paths.role_permissions_batch(resolve_key(role_key))}/"
        return _ensure_list(self.request("PUT", path, json_body=list(permissions)))

    def list_management_permission_objects(
        self,
        role_key: KeyRef,
        content_type: str,
    ) -> list[Payload]:
        path = f"{self.paths.role_permission_objects_root(resolve_key(role_key))}/"
        return _ensure_list(
            self.request("GET", path, params={"content_type": content_type})
        )

    def add_management_permission_object(self, role_key: KeyRef, payload: Payload) -> Payload:
        return self.request(
            "POST",
            f"{self.paths.role_permission_objects_root(resolve_key(role_key))}/",
            json_body=payload,
        )

    def delete_management_permission_object(self, role_key: KeyRef, payload: Payload) -> None:
        self._delete(
            f"{self.paths.role_permission_objects_root(resolve_key(role_key))}/",
            json_body=payload,
        )

    # Flux role operations

    def list_flux_roles(self, params: QueryParams | None = None) -> Payload:
        return self.request("GET", f"{self.paths.flux_roles_root()}/", params=params)

    def create_flux_role(self, payload: Payload) -> Payload:
        return self.request("POST", f"{self.paths.flux_roles_root()}/", json_body=payload)

    def get_flux_role(self, role_key: KeyRef) -> Payload:
        return self.request("GET", f"{self.paths.flux_role_root(resolve_key(role_key))}/")

    def update_flux_role(self, role_key: KeyRef, payload: Payload) -> Payload:
        return self.request(
            "PUT", f"{self.paths.flux_role_root(resolve_key(role_key))}/", json_body=payload
        )

    def delete_flux_role(self, role_key: KeyRef) -> None:
        self._delete(f"{self.paths.flux_role_root(resolve_key(role_key))}/")

    def list_flux_role_permissions(self, role_key: KeyRef) -> list[Payload]:
        path = f"{self.paths.flux_role_permissions_root(resolve_key(role_key))}/"
        return _ensure_list(self.request("GET", path))

    def upsert_flux_role_permission(self, role_key: KeyRef, payload: Payload) -> Payload:
        return self.request(
            "PUT",
            f"{self.paths.flux_role_permissions_root(resolve_key(role_key))}/",
            json_body=payload,
        )

    def delete_flux_role_permission(self, role_key: KeyRef, content_type: str) -> None:
        permissions_root = self.paths.flux_role_permissions_root(resolve_key(role_key))
        self._delete(f"{permissions_root}/{content_type}/")

    def replace_flux_role_permissions(
        self,
        role_key: KeyRef,
        permissions: Sequence[Payload],
    ) -> list[Payload]:
        """Replace every permission of a Flux role in one call."""
        path = f"{self.paths.flux_role_permissions_batch(resolve_key(role_key))}/"
        return _ensure_list(self.request("PUT", path, json_body=list(permissions)))

    def list_flux_permission_objects(
        self,
        role_key: KeyRef,
        content_type: str,
    ) -> list[Payload]:
        path = f"{self.paths.flux_role_permission_objects_root(resolve_key(role_key))}/"
        return _ensure_list(
            self.request("GET", path, params={"content_type": content_type})
        )

    def add_flux_permission_object(self, role_key: KeyRef, payload: Payload) -> Payload:
        return self.request(
            "POST",
            f"{self.paths.flux_role_permission_objects_root(resolve_key(role_key))}/",
            json_body=payload,
        )

    def delete_flux_permission_object(self, role_key: KeyRef, payload: Payload) -> None:
        self._delete(
            f"{self.paths.flux_role_permission_objects_root(resolve_key(role_key))}/",
            json_body=payload,
        )

    # Folder operations

    def list_folders(self, params: QueryParams | None = None) -> Payload:
        return self.request("GET", f"{self.paths.folders_root()}/", params=params)

    def get_folder(self, folder_key: KeyRef) -> Payload:
        return self.request("GET", f"{self.paths.folder_root(resolve_key(folder_key))}/")

    def get_folder_by_path(self, path: str) -> Payload:
        """Look up a folder by its slash-separated alias path."""
        return self.request(
            "GET", f"{self.paths.folders_tree_item()}/", params={"path": path}
        )

    def list_folder_tree(self, *, key: str | None = None, mode: str | None = None) -> Payload:
        params = {"key": key or None, "mode": mode or None}
        return self.request("GET", f"{self.paths.folders_tree_root()}/", params=params)

    def create_folder(self, payload: Payload) -> Payload:
        return self.request("POST", f"{self.paths.folders_tree_root()}/", json_body=payload)

    def update_folder(self, folder_key: KeyRef, payload: Payload) -> Payload:
        return self.request(
            "PUT", f"{self.paths.folder_root(resolve_key(folder_key))}/", json_body=payload
        )

    def delete_folder(self, folder_key: KeyRef) -> None:
        self._delete(f"{self.paths.folder_root(resolve_key(folder_key))}/")

    # Folder schema versions

    def list_folder_versions(
        self,
        folder_key: KeyRef,
        params: QueryParams | None = None,
    ) -> Payload:
        versions_base = self.paths.folder_versions_base(resolve_key(folder_key))
        return self.request("GET", f"{versions_base}/", params=params)

    def create_folder_version(
        self,
        folder_key: KeyRef,
        payload: Payload,
        *,
        copy_from: KeyRef | None = None,
    ) -> Payload:
        """Create a schema version, optionally copying an existing one."""
        versions_base = self.paths.folder_versions_base(resolve_key(folder_key))
        return self._create_version(versions_base, payload, copy_from)

    def get_folder_version(
        self,
        folder_key: KeyRef,
        version_key: KeyRef,
        *,
        include_schema: bool | None = None,
    ) -> Payload:
        versions_base = self.paths.folder_versions_base(resolve_key(folder_key))
        return self.request(
            "GET",
            f"{versions_base}/{resolve_key(version_key)}/",
            params={"include_schema": include_schema},
        )

    def update_folder_version(
        self,
        folder_key: KeyRef,
        version_key: KeyRef,
        payload: Payload,
    ) -> Payload:
        versions_base = self.paths.folder_versions_base(resolve_key(folder_key))
        return self.request(
            "PUT", f"{versions_base}/{resolve_key(version_key)}/", json_body=payload
        )

    def delete_folder_version(self, folder_key: KeyRef, version_key: KeyRef) -> None:
        versions_base = self.paths.folder_versions_base(resolve_key(folder_key))
        self._delete(f"{versions_base}/{resolve_key(version_key)}/")

    def publish_folder_version(self, folder_key: KeyRef, version_key: KeyRef) -> Payload:
        versions_base = self.paths.folder_versions_base(resolve_key(folder_key))
        return self.request("POST", f"{versions_base}/{resolve_key(version_key)}/publish/")

    # Folder fields

    def list_folder_fields(
        self,
        folder_key: KeyRef,
        version_key: KeyRef,
        params: QueryParams | None = None,
    ) -> Payload:
        tree = self.paths.folder_schema_tree(resolve_key(folder_key), resolve_key(version_key))
        return self.request("GET", f"{tree}/", params=params)

    def create_folder_field(
        self,
        folder_key: KeyRef,
        version_key: KeyRef,
        payload: Payload,
    ) -> Payload:
        tree = self.paths.folder_schema_tree(resolve_key(folder_key), resolve_key(version_key))
        return self.request("POST", f"{tree}/", json_body=payload)

    def get_folder_field(
        self,
        folder_key: KeyRef,
        version_key: KeyRef,
        field_path: str,
    ) -> Payload:
        tree = self.paths.folder_schema_tree(resolve_key(folder_key), resolve_key(version_key))
        return self.request("GET", f"{tree}/{field_path}/")

    def update_folder_field(
        self,
        folder_key: KeyRef,
        version_key: KeyRef,
        field_path: str,
        payload: Payload,
    ) -> Payload:
        tree = self.paths.folder_schema_tree(resolve_key(folder_key), resolve_key(version_key))
        return self.request("PUT", f"{tree}/{field_path}/", json_body=payload)

    def delete_folder_field(
        self,
        folder_key: KeyRef,
        version_key: KeyRef,
        field_path: str,
    ) -> None:
        tree = self.paths.folder_schema_tree(resolve_key(folder_key), resolve_key(version_key))
        self._delete(f"{tree}/{field_path}/")

    # Component operations

    def list_components(self, params: QueryParams | None = None) -> Payload:
        return self.request("GET", f"{self.paths.components_root()}/", params=params)

    def get_component(self, component_key: KeyRef) -> Payload:
        return self.request(
            "GET", f"{self.paths.component_root(resolve_key(component_key))}/"
        )

    def create_component(self, payload: Payload) -> Payload:
        return self.request("POST", f"{self.paths.components_root()}/", json_body=payload)

    def update_component(self, component_key: KeyRef, payload: Payload) -> Payload:
        return self.request(
            "PUT",
            f"{self.paths.component_root(resolve_key(component_key))}/",
            json_body=payload,
        )

    def delete_component(self, component_key: KeyRef) -> None:
        self._delete(f"{self.paths.component_root(resolve_key(component_key))}/")

    # Component schema versions

    def list_component_versions(
        self,
        component_key: KeyRef,
        params: QueryParams | None = None,
    ) -> Payload:
        versions_base = self.paths.component_versions_base(resolve_key(component_key))
        return self.request("GET", f"{versions_base}/", params=params)

    def create_component_version(
        self,
        component_key: KeyRef,
        payload: Payload,
        *,
        copy_from: KeyRef | None = None,
    ) -> Payload:
        versions_base = self.paths.component_versions_base(resolve_key(component_key))
        return self._create_version(versions_base, payload, copy_from)

    def get_component_version(
        self,
        component_key: KeyRef,
        version_key: KeyRef,
        *,
        include_schema: bool | None = None,
    ) -> Payload:
        versions_base = self.paths.component_versions_base(resolve_key(component_key))
        return self.request(
            "GET",
            f"{versions_base}/{resolve_key(version_key)}/",
            params={"include_schema": include_schema},
        )

    def publish_component_version(
        self,
        component_key: KeyRef,
        version_key: KeyRef,
    ) -> Payload:
        versions_base = self.paths.component_versions_base(resolve_key(component_key))
        return self.request("POST", f"{versions_base}/{resolve_key(version_key)}/publish/")

    def update_component_version(
        self,
        component_key: KeyRef,
        version_key: KeyRef,
        payload: Payload,
    ) -> Payload:
        versions_base = self.paths.component_versions_base(resolve_key(component_key))
        return self.request(
            "PUT", f"{versions_base}/{resolve_key(version_key)}/", json_body=payload
        )

    def delete_component_version(self, component_key: KeyRef, version_key: KeyRef) -> None:
        versions_base = self.paths.component_versions_base(resolve_key(component_key))
        self._delete(f"{versions_base}/{resolve_key(version_key)}/")

    # Component fields

    def list_component_fields(
        self,
        component_key: KeyRef,
        version_key: KeyRef,
        params: QueryParams | None = None,
    ) -> Payload:
        tree = self.paths.component_schema_tree(
            resolve_key(component_key), resolve_key(version_key)
        )
        return self.request("GET", f"{tree}/", params=params)

    def create_component_field(
        self,
        component_key: KeyRef,
        version_key: KeyRef,
        payload: Payload,
    ) -> Payload:
        tree = self.paths.component_schema_tree(
            resolve_key(component_key), resolve_key(version_key)
        )
        return self.request("POST", f"{tree}/", json_body=payload)

    def get_component_field(
        self,
        component_key: KeyRef,
        version_key: KeyRef,
        field_path: str,
    ) -> Payload:
        tree = self.paths.component_schema_tree(
            resolve_key(component_key), resolve_key(version_key)
        )
        return self.request("GET", f"{tree}/{field_path}/")

    def update_component_field(
        self,
        component_key: KeyRef,
        version_key: KeyRef,
        field_path: str,
        payload: Payload,
    ) -> Payload:
        tree = self.paths.component_schema_tree(
            resolve_key(component_key), resolve_key(version_key)
        )
        return self.request("PUT", f"{tree}/{field_path}/", json_body=payload)

    def delete_component_field(
        self,
        component_key: KeyRef,
        version_key: KeyRef,
        field_path: str,
    ) -> None:
        tree = self.paths.component_schema_tree(
            resolve_key(component_key), resolve_key(version_key)
        )
        self._delete(f"{tree}/{field_path}/")

    # Resource operations

    def list_resources(self, folder_key: KeyRef, params: QueryParams | None = None) -> Payload:
        return self.request(
            "GET", f"{self.paths.resource_base(resolve_key(folder_key))}/", params=params
        )

    def get_resource(self, folder_key: KeyRef, resource_key: KeyRef) -> Payload:
        resource_base = self.paths.resource_base(resolve_key(folder_key))
        return self.request("GET", f"{resource_base}/{resolve_key(resource_key)}/")

    def create_resource(
        self,
        folder_key: KeyRef,
        payload: Payload,
        *,
        component: KeyRef | None = None,
        external_id: str | None = None,
    ) -> Payload:
        """Create a resource in a folder.

        Args:
            folder_key: Folder reference.
            payload: Resource body.
            component: Component reference for composite folders.
            external_id: Caller-side identifier for later upserts.

        Returns:
            The created resource.
        """
        body = dict(payload)
        if component is not None:
            body["component"] = resolve_key(component)
        if external_id:
            body["external_id"] = external_id
        return self.request(
            "POST", f"{self.paths.resource_base(resolve_key(folder_key))}/", json_body=body
        )

    def upsert_resource(
        self,
        folder_key: KeyRef,
        payload: Payload,
        *,
        external_id: str,
        component: KeyRef | None = None,
    ) -> Payload:
        """Create or update a resource identified by ``external_id``."""
        body = {**payload, "external_id": external_id}
        if component is not None:
            body["component"] = resolve_key(component)
        return self.request(
            "PUT", f"{self.paths.resource_base(resolve_key(folder_key))}/", json_body=body
        )

    def batch_upsert_resources(
        self,
        folder_key: KeyRef,
        items: Sequence[BatchUpsertItem],
        *,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        fail_fast: bool = False,
        on_progress: Callable[[int, int], None] | None = None,
    ) -> BatchUpsertResult:
        """Upsert many resources with bounded parallelism.

        Args:
            folder_key: Folder reference.
            items: Items to upsert.
            max_concurrency: Requests in flight per window.
            fail_fast: Stop starting new windows after a failure.
            on_progress: Called as ``(completed, total)`` per finished item.

        Returns:
            BatchUpsertResult with successes in input order and failures
            tagged with their input index.
        """
        folder = resolve_key(folder_key)
        self._log.info("batch_upsert_resources", folder=folder, total=len(items))

        def _upsert(item: BatchUpsertItem) -> Any:
            return self.upsert_resource(
                folder,
                item.payload,
                external_id=item.external_id,
                component=item.component or None,
            )

        return batch_upsert(
            _upsert,
            items,
            max_concurrency=max_concurrency,
            fail_fast=fail_fast,
            on_progress=on_progress,
        )

    def update_resource(
        self,
        folder_key: KeyRef,
        resource_key: KeyRef,
        payload: Payload,
    ) -> Payload:
        resource_base = self.paths.resource_base(resolve_key(folder_key))
        return self.request(
            "PUT", f"{resource_base}/{resolve_key(resource_key)}/", json_body=payload
        )

    def delete_resource(self, folder_key: KeyRef, resource_key: KeyRef) -> None:
        resource_base = self.paths.resource_base(resolve_key(folder_key))
        self._delete(f"{resource_base}/{resolve_key(resource_key)}/")

    def get_resource_data(self, folder_key: KeyRef, resource_key: KeyRef) -> Payload:
        resource_base = self.paths.resource_base(resolve_key(folder_key))
        return self.request("GET", f"{resource_base}/{resolve_key(resource_key)}/data/")

    # Revision operations

    def list_revisions(
        self,
        folder_key: KeyRef,
        resource_key: KeyRef,
        params: QueryParams | None = None,
    ) -> Payload:
        revisions = self._revision_base(folder_key, resource_key)
        return self.request("GET", f"{revisions}/", params=params)

    def create_revision(
        self,
        folder_key: KeyRef,
        resource_key: KeyRef,
        payload: Payload,
    ) -> Payload:
        revisions = self._revision_base(folder_key, resource_key)
        return self.request("POST", f"{revisions}/", json_body=payload)

    def get_revision(
        self,
        folder_key: KeyRef,
        resource_key: KeyRef,
        revision_key: KeyRef,
    ) -> Payload:
        revisions = self._revision_base(folder_key, resource_key)
        return self.request("GET", f"{revisions}/{resolve_key(revision_key)}/")

    def update_revision(
        self,
        folder_key: KeyRef,
        resource_key: KeyRef,
        revision_key: KeyRef,
        payload: Payload,
    ) -> Payload:
        revisions = self._revision_base(folder_key, resource_key)
        return self.request(
            "PUT", f"{revisions}/{resolve_key(revision_key)}/", json_body=payload
        )

    def delete_revision(
        self,
        folder_key: KeyRef,
        resource_key: KeyRef,
        revision_key: KeyRef,
    ) -> None:
        revisions = self._revision_base(folder_key, resource_key)
        self._delete(f"{revisions}/{resolve_key(revision_key)}/")

    def publish_revision(
        self,
        folder_key: KeyRef,
        resource_key: KeyRef,
        revision_key: KeyRef,
        payload: Payload | None = None,
    ) -> Payload:
        revisions = self._revision_base(folder_key, resource_key)
        return self.request(
            "POST",
            f"{revisions}/{resolve_key(revision_key)}/publish/",
            json_body=payload or None,
        )

    def validate_revision(
        self,
        folder_key: KeyRef,
        resource_key: KeyRef,
        revision_key: KeyRef,
    ) -> Payload:
        revisions = self._revision_base(folder_key, resource_key)
        return self.request("POST", f"{revisions}/{resolve_key(revision_key)}/validate/")

    def get_revision_data(
        self,
        folder_key: KeyRef,
        resource_key: KeyRef,
        revision_key: KeyRef,
    ) -> Payload:
        revisions = self._revision_base(folder_key, resource_key)
        return self.request("GET", f"{revisions}/{resolve_key(revision_key)}/data/")

    # Locale operations

    def list_locales(self) -> list[Payload]:
        return _ensure_list(self.request("GET", f"{self.paths.locales_root()}/"))

    def create_locale(self, payload: Payload) -> Payload:
        return self.request("POST", f"{self.paths.locales_root()}/", json_body=payload)

    def get_locale(self, code: str) -> Payload:
        return self.request("GET", f"{self.paths.locale_root(code)}/")

    def update_locale(self, code: str, payload: Payload) -> Payload:
        return self.request("PUT", f"{self.paths.locale_root(code)}/", json_body=payload)

    def delete_locale(self, code: str) -> None:
        self._delete(f"{self.paths.locale_root(code)}/")

    # Project operations

    def list_projects(self, org_key: KeyRef, params: QueryParams | None = None) -> Payload:
        return self.request(
            "GET", f"{self.paths.projects_base(resolve_key(org_key))}/", params=params
        )

    def get_project(self, org_key: KeyRef, project_key: KeyRef) -> Payload:
        path = self.paths.project_root(resolve_key(org_key), resolve_key(project_key))
        return self.request("GET", f"{path}/")

    def create_project(self, org_key: KeyRef, payload: Payload) -> Payload:
        return self.request(
            "POST", f"{self.paths.projects_base(resolve_key(org_key))}/", json_body=payload
        )

    def update_project(self, org_key: KeyRef, project_key: KeyRef, payload: Payload) -> Payload:
        path = self.paths.project_root(resolve_key(org_key), resolve_key(project_key))
        return self.request("PUT", f"{path}/", json_body=payload)

    def delete_project(self, org_key: KeyRef, project_key: KeyRef) -> None:
        path = self.paths.project_root(resolve_key(org_key), resolve_key(project_key))
        self._delete(f"{path}/")

    # Environment operations

    def list_environments(self, org_key: KeyRef, project_key: KeyRef) -> list[Payload]:
        """List environments of a project.

        Accepts a bare list, a single object, or a paginated envelope.
        """
        path = self.paths.environments_base(resolve_key(org_key), resolve_key(project_key))
        payload = self.request("GET", f"{path}/")
        if isinstance(payload, dict) and "results" in payload:
            return _ensure_list(payload["results"])
        return _ensure_list(payload)

    def get_environment(
        self,
        org_key: KeyRef,
        project_key: KeyRef,
        env_key: KeyRef,
    ) -> Payload:
        return self.request("GET", f"{self._environment_root(org_key, project_key, env_key)}/")

    def create_environment(
        self,
        org_key: KeyRef,
        project_key: KeyRef,
        payload: Payload,
    ) -> Payload:
        path = self.paths.environments_base(resolve_key(org_key), resolve_key(project_key))
        return self.request("POST", f"{path}/", json_body=payload)

    def update_environment(
        self,
        org_key: KeyRef,
        project_key: KeyRef,
        env_key: KeyRef,
        payload: Payload,
    ) -> Payload:
        return self.request(
            "PUT",
            f"{self._environment_root(org_key, project_key, env_key)}/",
            json_body=payload,
        )

    def delete_environment(
        self,
        org_key: KeyRef,
        project_key: KeyRef,
        env_key: KeyRef,
    ) -> None:
        self._delete(f"{self._environment_root(org_key, project_key, env_key)}/")

    def toggle_environment(
        self,
        org_key: KeyRef,
        project_key: KeyRef,
        env_key: KeyRef,
        is_enabled: bool,
    ) -> None:
        self.request(
            "POST",
            f"{self._environment_root(org_key, project_key, env_key)}/toggle/",
            json_body={"is_enabled": is_enabled},
        )

    def update_environment_protection(
        self,
        org_key: KeyRef,
        project_key: KeyRef,
        env_key: KeyRef,
        *,
        protection_level: str,
        protection_reason: str | None = None,
    ) -> Payload:
        body: Payload = {"protection_level": protection_level}
        if protection_reason:
            body["protection_reason"] = protection_reason
        return self.request(
            "POST",
            f"{self._environment_root(org_key, project_key, env_key)}/protect/",
            json_body=body,
        )

    def clear_environment_protection(
        self,
        org_key: KeyRef,
        project_key: KeyRef,
        env_key: KeyRef,
    ) -> Payload:
        return self.request(
            "POST", f"{self._environment_root(org_key, project_key, env_key)}/unprotect/"
        )

    # Helpers

    def _create_version(
        self,
        versions_base: str,
        payload: Payload,
        copy_from: KeyRef | None,
    ) -> Payload:
        params = {"copy_from": resolve_key(copy_from)} if copy_from is not None else None
        return self.request("POST", f"{versions_base}/", json_body=payload, params=params)

    def _revision_base(self, folder_key: KeyRef, resource_key: KeyRef) -> str:
        return self.paths.revision_base(resolve_key(folder_key), resolve_key(resource_key))

    def _environment_root(self, org_key: KeyRef, project_key: KeyRef, env_key: KeyRef) -> str:
        return self.paths.environment_root(
            resolve_key(org_key), resolve_key(project_key), resolve_key(env_key)
        )
