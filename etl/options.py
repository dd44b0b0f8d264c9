"""Export options - one JSON output per entry, in run order."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from etl.audit import sync_audit_events
from etl.compartments import compartment_ids, discover_compartments
from oci_client.iam import REGION_SUBSCRIPTIONS
from oci_client.paging import run_paged

if TYPE_CHECKING:
    from etl.sync import AuditExporter

ALL = "ALL"
ALL_REGIONS = "ALL_REGIONS"

Handler = Callable[["AuditExporter", str | None], Awaitable[dict | None]]


async def run_simple(exporter: "AuditExporter", command: str | None) -> dict | None:
    """Single listing command, all pages."""
    return await run_paged(exporter.iam, command)


async def run_compartments(exporter: "AuditExporter", _: str | None) -> dict:
    """Compartment listing with ROOT appended."""
    return await discover_compartments(exporter.iam, exporter.config.tenancy_id)


async def run_audit_events(exporter: "AuditExporter", _: str | None) -> dict | None:
    compartments = await exporter.export_option("IAM-Comparts")
    config = exporter.config
    return await sync_audit_events(
        exporter.audit,
        compartment_ids(compartments),
        config.start_date,
        config.end_date,
        config.slice_seconds,
    )


@dataclass(frozen=True)
class ExportOption:
    name: str
    output_file: str
    handler: Handler
    argument: str | None = None


OPTIONS: tuple[ExportOption, ...] = (
    ExportOption("IAM-RegionSub", "oci_iam_region-subscription.json", run_simple, REGION_SUBSCRIPTIONS),
    ExportOption("IAM-Comparts", "oci_iam_compartment.json", run_compartments),
    ExportOption("Audit-Events", "oci_audit_event.json", run_audit_events),
)

OPTIONS_BY_NAME = {option.name: option for option in OPTIONS}


def valid_options() -> list[str]:
    """Everything accepted as the first CLI argument."""
    return [ALL, ALL_REGIONS, *sorted(OPTIONS_BY_NAME)]
