"""Typed response shapes and reference helpers for the Management API.

Client methods return decoded JSON; these models validate those payloads
when callers want typed access, e.g. ``FolderSummary.model_validate(payload)``.
Unknown fields are kept so newer API versions do not break validation.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Annotated, Any, Generic, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


T = TypeVar("T")


class _ApiModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")


class PaginatedResponse(_ApiModel, Generic[T]):
    """Generic page envelope returned by list endpoints."""

    count: int = 0
    next: str | None = None
    previous: str | None = None
    results: list[T] = Field(default_factory=list)


# Resources & revisions


class ResourceSummary(_ApiModel):
    key: str
    folder: str | None = None
    content_type: str | None = None
    created_at: str | None = None
    vectors_size: int | None = None
    name: str | None = None
    component: str | None = None
    resource_owner: str | None = None
    current_revision: str | None = None
    external_id: str | None = None


class RevisionSummary(_ApiModel):
    key: str
    resource: str | None = None
    schema_version: str | None = None
    number: int | None = None
    size: int | None = None
    created_at: str | None = None
    status: str | None = None
    is_valid: bool | None = None
    published_at: str | None = None
    unpublished_at: str | None = None


# Folders, components & schemas


class FolderSummary(_ApiModel):
    key: str
    name: str | None = None
    alias: str | None = None
    folder_type: str | None = None
    content_type: str | None = None
    strict_reference: bool | None = None
    created_at: str | None = None
    parent: str | None = None
    mode: str | None = None
    path: str | None = None


class ComponentSummary(_ApiModel):
    key: str
    name: str | None = None
    description: str | None = None
    environment: str | None = None
    content_type: str | None = None
    created_at: str | None = None
    current_version: str | None = None


class SchemaVersionSummary(_ApiModel):
    key: str
    name: str | None = None
    description: str | None = None
    version_number: int | None = None
    created_at: str | None = None
    published_at: str | None = None
    archived_at: str | None = None
    json_schema: dict[str, Any] | None = None


class FieldSummary(_ApiModel):
    key: str
    name: str | None = None
    description: str | None = None
    path: str | None = None
    parent: str | None = None
    type: str | None = None
    meta: dict[str, Any] = Field(default_factory=dict)
    required: bool = False
    nullable: bool = False
    private: bool = False


# Organizations, projects & environments


class RegionInfo(_ApiModel):
    location: str | None = None
    name: str | None = None
    code: str


class UserReference(_ApiModel):
    key: str
    email: str | None = None
    full_name: str | None = None


class OrganizationSummary(_ApiModel):
    key: str
    name: str | None = None
    owner: UserReference | None = None
    legal_name: str | None = None
    country_iso: str | None = None
    created_at: str | None = None
    is_blocked: bool = False


class ProjectSummary(_ApiModel):
    key: str
    name: str | None = None
    organization: str | None = None
    region: RegionInfo | str | None = None
    environments: list[dict[str, Any]] = Field(default_factory=list)
    gdpr: bool | None = None
    created_at: str | None = None


class EnvironmentSummary(_ApiModel):
    key: str
    name: str | None = None
    project: str | None = None
    host: str | None = None
    is_enabled: bool | None = None
    created_at: str | None = None
    protection_level: str | None = None
    protected_by_user: UserReference | None = None
    protection_reason: str | None = None


class LocaleSummary(_ApiModel):
    code: str
    name: str | None = None
    environment: str | None = None
    is_default: bool = False
    created_at: str | None = None


# Access control


class ManagementAPIKeySummary(_ApiModel):
    key: str
    description: str | None = None
    public_key: str | None = None
    secret_key: str | None = None
    role: str | None = None
    environment: str | None = None
    created_at: str | None = None


class FluxAPIKeySummary(ManagementAPIKeySummary):
    pass


class ManagementRoleSummary(_ApiModel):
    key: str
    name: str | None = None
    description: str | None = None
    full_access: bool = False
    environment: str | None = None
    created_at: str | None = None


class FluxRoleSummary(_ApiModel):
    key: str
    name: str | None = None
    description: str | None = None
    environment: str | None = None
    created_at: str | None = None


class RolePermission(_ApiModel):
    content_type: str
    actions: list[str] = Field(default_factory=list)
    all_objects: bool = False
    objects: list[str] | None = None


class RolePermissionObject(_ApiModel):
    content_type: str
    object_key: str


# Flux API definitions


class APIInfo(_ApiModel):
    key: str
    name: str | None = None
    prefix: str | None = None
    description: str | None = None
    environment: str | None = None
    version: str | None = None
    is_auth_required: bool | None = None
    created_at: str | None = None


class APIFolderSummary(_ApiModel):
    folder: str
    api: str | None = None
    path: str | None = None
    allowed_methods: list[str] | None = None
    created_at: str | None = None


# Batch upsert


class BatchUpsertItem(BaseModel):
    """One resource to upsert by external identifier."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    external_id: Annotated[str, Field(min_length=1)]
    payload: dict[str, Any] = Field(default_factory=dict)
    component: str | None = None


@dataclass(frozen=True)
class BatchItemError:
    """Failure of a single batch item.

    Attributes:
        index: Position of the item in the input list.
        external_id: External identifier of the item.
        error: Exception raised for the item.
    """

    index: int
    external_id: str
    error: Exception


@dataclass
class BatchUpsertResult:
    """Outcome of a batch upsert.

    ``succeeded`` holds decoded responses ordered by input position.
    """

    succeeded: list[Any] = field(default_factory=list)
    failed: list[BatchItemError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Check if every item succeeded."""
        return not self.failed


# References


@runtime_checkable
class HasKey(Protocol):
    """Any object exposing a string ``key`` attribute (all summary models)."""

    @property
    def key(self) -> str: ...


KeyRef = str | HasKey | Mapping[str, Any]


def resolve_key(value: KeyRef) -> str:
    """Extract the string key from a reference.

    Args:
        value: A key string, an object with a ``key`` attribute, or a
            decoded payload mapping with a ``"key"`` entry.

    Returns:
        The key string.

    Raises:
        TypeError: If no string key can be extracted.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        key = value.get("key")
    else:
        key = getattr(value, "key", None)
    if isinstance(key, str):
        return key
    msg = f"Expected a string or an object with a 'key' attribute, got {type(value).__name__}"
    raise TypeError(msg)
