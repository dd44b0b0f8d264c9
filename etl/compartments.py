"""Compartment discovery - the fan-out set for audit queries."""

from loguru import logger
from pydantic import ValidationError

from oci_client.errors import SchemaError
from oci_client.iam import CompartmentSchema, IamClient


def build_compartment_set(listing: dict | None, tenancy_id: str | None = None) -> dict:
    """Drop deleted compartments and append the synthetic ROOT entry.

    The tenancy id is taken from the parent chain of the listed compartments,
    falling back to tenancy_id.
    """
    raw = (listing or {}).get("data") or []
    try:
        parsed = [(item, CompartmentSchema.model_validate(item)) for item in raw]
    except ValidationError as e:
        raise SchemaError(f"Unexpected compartment listing: {e}") from e

    active = [(item, c) for item, c in parsed if not c.is_deleted]
    tenancies = list(dict.fromkeys(c.compartment_id for _, c in active if c.parent_is_tenancy))
    if len(tenancies) > 1:
        logger.warning("Compartments reference {} tenancies, using {}", len(tenancies), tenancies[0])

    root_id = tenancies[0] if tenancies else tenancy_id
    if not root_id:
        raise SchemaError("Could not determine the tenancy id from the compartment listing")
    if tenancy_id and tenancy_id != root_id:
        logger.warning("Configured tenancy {} differs from listed tenancy {}", tenancy_id, root_id)

    data = [item for item, c in active if c.id != root_id]
    data.append(CompartmentSchema.root(root_id).to_cli())
    logger.info("Compartments: {} active (+ROOT), {} deleted skipped", len(data) - 1, len(parsed) - len(active))
    return {"data": data}


async def discover_compartments(client: IamClient, tenancy_id: str | None = None) -> dict:
    """List compartments and build the fan-out set."""
    return build_compartment_set(await client.compartments(), tenancy_id)


def compartment_ids(compartments: dict) -> list[str]:
    """Ids in fan-out order."""
    return [c["id"] for c in compartments["data"]]
