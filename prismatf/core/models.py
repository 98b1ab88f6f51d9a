"""Core Pydantic data models for prismatf."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .types import SearchType, TimeRangeType


class TimeRange(BaseModel):
    """RQL search time range."""

    model_config = ConfigDict(frozen=True)

    type: TimeRangeType = Field(
        default=TimeRangeType.TO_NOW, description="Time range kind"
    )
    value: Dict[str, Any] = Field(
        default_factory=lambda: {"unit": "epoch"},
        description="Kind-specific value (unit/amount or startTime/endTime)",
    )

    def to_api(self) -> Dict[str, Any]:
        """Render in the API's request shape."""
        return {"type": self.type.value, "value": dict(self.value)}

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> Optional["TimeRange"]:
        """Parse the API's time range payload, if present."""
        if not data:
            return None
        return cls(type=data["type"], value=data.get("value") or {})


class RqlSearchConfig(BaseModel):
    """Saved RQL search input."""

    model_config = ConfigDict(frozen=True)

    search_type: SearchType = Field(
        default=SearchType.CONFIG, description="Search domain (forces new resource)"
    )
    query: str = Field(..., min_length=1, description="The RQL search to perform")
    time_range: Optional[TimeRange] = Field(
        default=None, description="Time range of the search"
    )
    limit: int = Field(default=10, gt=0, description="Limit results")
    skip_result: bool = Field(
        default=False, description="Skip search results in response"
    )
    heuristic_search: bool = Field(
        default=False, description="Enable heuristic search"
    )


class RqlSearchState(BaseModel):
    """Persisted state of a saved RQL search."""

    model_config = ConfigDict(frozen=False)

    id: str = Field(..., description="Composite resource identifier")
    inputs: RqlSearchConfig = Field(..., description="Search input")

    search_id: Optional[str] = Field(default=None, description="The search ID")
    name: Optional[str] = Field(default=None, description="The search name")
    description: Optional[str] = Field(default=None, description="The description")
    cloud_type: Optional[str] = Field(default=None, description="The cloud type")
    saved: Optional[bool] = Field(default=None, description="Is search saved")
    group_by: List[str] = Field(default_factory=list, description="Group by")

    config_data: List[Dict[str, Any]] = Field(default_factory=list)
    network_data: List[Dict[str, Any]] = Field(default_factory=list)
    event_data: List[Dict[str, Any]] = Field(default_factory=list)
    iam_data: List[Dict[str, Any]] = Field(default_factory=list)
    asset_data: List[Dict[str, Any]] = Field(default_factory=list)


class UserRoleQuery(BaseModel):
    """User role data source input."""

    model_config = ConfigDict(frozen=True)

    role_id: str = Field(default="", description="Role ID")
    name: str = Field(default="", description="Role name")
    backoff_retry: Optional[bool] = Field(
        default=None, description="Enable backoff retry for read API calls"
    )
    max_retries: Optional[int] = Field(
        default=None, ge=0, description="Maximum number of retries for read API calls"
    )

    @model_validator(mode="after")
    def _require_role_id_or_name(self) -> "UserRoleQuery":
        if not self.role_id and not self.name:
            raise ValueError("at least one of 'role_id' or 'name' is required")
        return self


class AdditionalAttributes(BaseModel):
    """Extra user role flags."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    only_allow_ci_access: bool = Field(default=False, alias="onlyAllowCIAccess")
    only_allow_compute_access: bool = Field(
        default=False, alias="onlyAllowComputeAccess"
    )
    only_allow_read_access: bool = Field(default=False, alias="onlyAllowReadAccess")
    has_defender_permissions: bool = Field(
        default=False, alias="hasDefenderPermissions"
    )


class UserRole(BaseModel):
    """User role as returned by the API."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    role_id: str = Field(..., alias="id", description="Role ID")
    name: str = Field(..., description="Role name")
    description: str = Field(default="", description="Description")
    role_type: str = Field(default="", alias="roleType", description="User role type")
    last_modified_by: str = Field(default="", alias="lastModifiedBy")
    last_modified_ts: int = Field(default=0, alias="lastModifiedTs")
    account_group_ids: List[str] = Field(default_factory=list, alias="accountGroupIds")
    resource_list_ids: List[str] = Field(default_factory=list, alias="resourceListIds")
    code_repository_ids: List[str] = Field(
        default_factory=list, alias="codeRepositoryIds"
    )
    associated_users: List[str] = Field(default_factory=list, alias="associatedUsers")
    restrict_dismissal_access: bool = Field(
        default=False, alias="restrictDismissalAccess"
    )
    additional_attributes: AdditionalAttributes = Field(
        default_factory=AdditionalAttributes, alias="additionalAttributes"
    )
