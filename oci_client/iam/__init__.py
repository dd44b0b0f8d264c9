"""IAM CLI client."""

from oci_client.iam.client import COMPARTMENTS, REGION_SUBSCRIPTIONS, IamClient
from oci_client.iam.schemas import (
    CompartmentSchema,
    LifecycleState,
    RegionSubscriptionSchema,
)

__all__ = [
    "IamClient",
    "COMPARTMENTS",
    "REGION_SUBSCRIPTIONS",
    "CompartmentSchema",
    "LifecycleState",
    "RegionSubscriptionSchema",
]
