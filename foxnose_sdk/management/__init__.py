"""Management API client, path builders and response models."""

from foxnose_sdk.management.batch import DEFAULT_MAX_CONCURRENCY, batch_upsert
from foxnose_sdk.management.client import ManagementClient
from foxnose_sdk.management.models import (
    APIFolderSummary,
    APIInfo,
    BatchItemError,
    BatchUpsertItem,
    BatchUpsertResult,
    ComponentSummary,
    EnvironmentSummary,
    FieldSummary,
    FluxAPIKeySummary,
    FluxRoleSummary,
    FolderSummary,
    HasKey,
    KeyRef,
    LocaleSummary,
    ManagementAPIKeySummary,
    ManagementRoleSummary,
    OrganizationSummary,
    PaginatedResponse,
    ProjectSummary,
    RegionInfo,
    ResourceSummary,
    RevisionSummary,
    RolePermission,
    RolePermissionObject,
    SchemaVersionSummary,
    UserReference,
    resolve_key,
)
from foxnose_sdk.management.paths import ManagementPaths


__all__ = [
    # Client
    "ManagementClient",
    "ManagementPaths",
    # Batch
    "DEFAULT_MAX_CONCURRENCY",
    "BatchItemError",
    "BatchUpsertItem",
    "BatchUpsertResult",
    "batch_upsert",
    # Models
    "APIFolderSummary",
    "APIInfo",
    "ComponentSummary",
    "EnvironmentSummary",
    "FieldSummary",
    "FluxAPIKeySummary",
    "FluxRoleSummary",
    "FolderSummary",
    "LocaleSummary",
    "ManagementAPIKeySummary",
    "ManagementRoleSummary",
    "OrganizationSummary",
    "PaginatedResponse",
    "ProjectSummary",
    "RegionInfo",
    "ResourceSummary",
    "RevisionSummary",
    "RolePermission",
    "RolePermissionObject",
    "SchemaVersionSummary",
    "UserReference",
    # References
    "HasKey",
    "KeyRef",
    "resolve_key",
]
