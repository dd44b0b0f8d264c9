"""Audit CLI client - audit events."""

from collections.abc import Iterable

from oci_client.base import BaseClient
from oci_client.merge import select_data
from oci_client.paging import run_across_compartments


def events_command(start_time: str, end_time: str) -> str:
    """``audit event list`` bounded by two ``YYYY-MM-DDTHH:MM:SS`` timestamps (UTC)."""
    return f"audit event list --all --start-time {start_time}Z --end-time {end_time}Z"


def request_action(event: dict) -> str | None:
    """HTTP method of the audited request, for both CLI event layouts."""
    if "request-action" in event:
        return event["request-action"]
    request = (event.get("data") or {}).get("request") or {}
    return request.get("action")


def is_not_read(event: dict) -> bool:
    return request_action(event) != "GET"


without_reads = select_data(is_not_read)


class AuditClient(BaseClient):
    """Client for audit event listings."""

    async def events(self, start_time: str, end_time: str, compartments: Iterable[str]) -> dict | None:
        """Non-GET audit events of one time window, across compartments."""
        return await run_across_compartments(self, events_command(start_time, end_time), without_reads, compartments)
