"""URL path builders for Management API endpoints.

Builders return paths without a trailing slash; client methods append the
trailing ``/`` the API expects.
"""


class ManagementPaths:
    """Path builders scoped to one environment."""

    def __init__(self, environment_key: str) -> None:
        self.environment_key = environment_key
        self._env_root = f"/v1/{environment_key}"

    # Organization paths

    def org_root(self, org_key: str) -> str:
        return f"/organizations/{org_key}"

    def projects_base(self, org_key: str) -> str:
        return f"{self.org_root(org_key)}/projects"

    def project_root(self, org_key: str, project_key: str) -> str:
        return f"{self.projects_base(org_key)}/{project_key}"

    def environments_base(self, org_key: str, project_key: str) -> str:
        return f"{self.project_root(org_key, project_key)}/environments"

    def environment_root(self, org_key: str, project_key: str, env_key: str) -> str:
        return f"{self.environments_base(org_key, project_key)}/{env_key}"

    # Folder paths

    def folders_root(self) -> str:
        return f"{self._env_root}/folders"

    def folders_tree_root(self) -> str:
        return f"{self.folders_root()}/tree"

    def folders_tree_item(self) -> str:
        return f"{self.folders_tree_root()}/folder"

    def folder_root(self, folder_key: str) -> str:
        return f"{self.folders_root()}/{folder_key}"

    def folder_versions_base(self, folder_key: str) -> str:
        return f"{self.folder_root(folder_key)}/model/versions"

    def folder_schema_tree(self, folder_key: str, version_key: str) -> str:
        return f"{self.folder_versions_base(folder_key)}/{version_key}/schema/tree"

    # Component paths

    def components_root(self) -> str:
        return f"{self._env_root}/components"

    def component_root(self, component_key: str) -> str:
        return f"{self.components_root()}/{component_key}"

    def component_versions_base(self, component_key: str) -> str:
        return f"{self.component_root(component_key)}/model/versions"

    def component_schema_tree(self, component_key: str, version_key: str) -> str:
        return f"{self.component_versions_base(component_key)}/{version_key}/schema/tree"

    # Resource paths

    def resource_base(self, folder_key: str) -> str:
        return f"{self.folder_root(folder_key)}/resources"

    def revision_base(self, folder_key: str, resource_key: str) -> str:
        return f"{self.resource_base(folder_key)}/{resource_key}/revisions"

    # API key paths

    def management_api_keys_root(self) -> str:
        return f"{self._env_root}/permissions/management-api/api-keys"

    def management_api_key_root(self, api_key: str) -> str:
        return f"{self.management_api_keys_root()}/{api_key}"

    def flux_api_keys_root(self) -> str:
        return f"{self._env_root}/permissions/flux-api/api-keys"

    def flux_api_key_root(self, api_key: str) -> str:
        return f"{self.flux_api_keys_root()}/{api_key}"

    # API definition paths

    def apis_root(self) -> str:
        return f"{self._env_root}/api"

    def api_root(self, api_key: str) -> str:
        return f"{self.apis_root()}/{api_key}"

    def api_folders_root(self, api_key: str) -> str:
        return f"{self.api_root(api_key)}/folders"

    # Management role paths

    def management_roles_root(self) -> str:
        return f"{self._env_root}/permissions/management-api/roles"

    def management_role_root(self, role_key: str) -> str:
        return f"{self.management_roles_root()}/{role_key}"

    def role_permissions_root(self, role_key: str) -> str:
        return f"{self.management_role_root(role_key)}/permissions"

    def role_permissions_batch(self, role_key: str) -> str:
        return f"{self.role_permissions_root(role_key)}/batch"

    def role_permission_objects_root(self, role_key: str) -> str:
        return f"{self.role_permissions_root(role_key)}/objects"

    # Flux role paths

    def flux_roles_root(self) -> str:
        return f"{self._env_root}/permissions/flux-api/roles"

    def flux_role_root(self, role_key: str) -> str:
        return f"{self.flux_roles_root()}/{role_key}"

    def flux_role_permissions_root(self, role_key: str) -> str:
        return f"{self.flux_role_root(role_key)}/permissions"

    def flux_role_permissions_batch(self, role_key: str) -> str:
        return f"{self.flux_role_permissions_root(role_key)}/batch"

    def flux_role_permission_objects_root(self, role_key: str) -> str:
        return f"{self.flux_role_permissions_root(role_key)}/objects"

    # Locale paths

    def locales_root(self) -> str:
        return f"{self._env_root}/locales"

    def locale_root(self, code: str) -> str:
        return f"{self.locales_root()}/{code}"
