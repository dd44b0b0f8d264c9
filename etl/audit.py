"""Audit ETL - events across windows and compartments."""

from datetime import date

from etl.windows import run_over_range
from oci_client.audit import AuditClient
from settings import SLICE_SECONDS


async def sync_audit_events(
    client: AuditClient,
    compartments: list[str],
    start: date,
    end: date,
    slice_seconds: int = SLICE_SECONDS,
) -> dict | None:
    """Non-GET audit events between start and end, one window at a time."""

    async def per_window(start_time: str, end_time: str) -> dict | None:
        return await client.events(start_time, end_time, compartments)

    return await run_over_range(start, end, slice_seconds, per_window)
