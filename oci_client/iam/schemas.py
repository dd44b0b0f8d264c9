"""IAM CLI schemas - compartments, region subscriptions."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

TENANCY_PREFIX = "ocid1.tenancy."


class LifecycleState(StrEnum):
    """Compartment lifecycle states."""

    CREATING = "CREATING"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DELETING = "DELETING"
    DELETED = "DELETED"


class CompartmentSchema(BaseModel):
    """Compartment as printed by ``oci iam compartment list``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    compartment_id: str | None = Field(alias="compartment-id", default=None)
    name: str | None = None
    description: str | None = None
    lifecycle_state: str = Field(alias="lifecycle-state", default=LifecycleState.ACTIVE)
    time_created: datetime | None = Field(alias="time-created", default=None)
    inactive_status: int | None = Field(alias="inactive-status", default=None)
    is_accessible: bool | None = Field(alias="is-accessible", default=None)
    defined_tags: dict = Field(alias="defined-tags", default_factory=dict)
    freeform_tags: dict = Field(alias="freeform-tags", default_factory=dict)

    @property
    def is_deleted(self) -> bool:
        return self.lifecycle_state == LifecycleState.DELETED

    @property
    def parent_is_tenancy(self) -> bool:
        return bool(self.compartment_id) and self.compartment_id.startswith(TENANCY_PREFIX)

    @classmethod
    def root(cls, tenancy_id: str) -> "CompartmentSchema":
        """Synthetic entry for the tenancy itself, which the listing never returns."""
        return cls(
            id=tenancy_id,
            compartment_id=tenancy_id,
            name="ROOT",
            lifecycle_state=LifecycleState.ACTIVE,
        )

    def to_cli(self) -> dict:
        """Back to the CLI's kebab-case JSON shape."""
        return self.model_dump(mode="json", by_alias=True)


class RegionSubscriptionSchema(BaseModel):
    """Subscribed region (``oci iam region-subscription list``)."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    region_name: str = Field(alias="region-name")
    region_key: str | None = Field(alias="region-key", default=None)
    status: str | None = None
    is_home_region: bool = Field(alias="is-home-region", default=False)
