"""IAM CLI client - compartments, plus the region subscription listing command."""

from oci_client.base import BaseClient
from oci_client.paging import run_paged

REGION_SUBSCRIPTIONS = "iam region-subscription list"
COMPARTMENTS = "iam compartment list --all --compartment-id-in-subtree true"


class IamClient(BaseClient):
    """Client for IAM listings."""

    async def compartments(self) -> dict | None:
        """oci iam compartment list - every compartment below the tenancy, deleted ones included."""
        return await run_paged(self, COMPARTMENTS)
