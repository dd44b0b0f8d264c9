"""Tests for audit event retrieval."""

from datetime import date

import pytest

from etl.audit import sync_audit_events
from oci_client.audit import AuditClient, events_command, request_action, without_reads


def event(eid: str, action: str) -> dict:
    return {"event-id": eid, "request-action": action}


def command(start: str, end: str, compartment: str) -> str:
    return f"{events_command(start, end)} --compartment-id {compartment}"


class TestFilters:
    def test_request_action_layouts(self):
        assert request_action({"request-action": "POST"}) == "POST"
        assert request_action({"data": {"request": {"action": "DELETE"}}}) == "DELETE"
        assert request_action({"event-type": "x"}) is None

    def test_without_reads(self):
        doc = {
            "data": [
                event("1", "GET"),
                event("2", "PUT"),
                {"event-id": "3", "data": {"request": {"action": "GET"}}},
                {"event-id": "4", "data": {"request": {"action": "POST"}}},
            ]
        }
        assert [e["event-id"] for e in without_reads(doc)["data"]] == ["2", "4"]

    def test_events_command(self):
        assert events_command("2024-01-01T00:00:00", "2024-01-02T00:00:00") == (
            "audit event list --all --start-time 2024-01-01T00:00:00Z --end-time 2024-01-02T00:00:00Z"
        )


class TestSyncAuditEvents:
    @pytest.mark.asyncio
    async def test_windows_then_compartments(self, config, fake_cli):
        client = AuditClient(config)
        d1, d2, d3 = "2024-01-01T00:00:00", "2024-01-02T00:00:00", "2024-01-03T00:00:00"
        cli = fake_cli(
            {
                command(d1, d2, "c1"): {"data": [event("a", "GET"), event("b", "POST")]},
                command(d1, d2, "root"): "",
                command(d2, d3, "c1"): {"data": [event("c", "DELETE")]},
                command(d2, d3, "root"): {"data": event("d", "PUT")},
            },
            client,
        )

        result = await sync_audit_events(client, ["c1", "root"], date(2024, 1, 1), date(2024, 1, 3))

        assert [e["event-id"] for e in result["data"]] == ["b", "c", "d"]
        assert cli.calls == [
            command(d1, d2, "c1"),
            command(d1, d2, "root"),
            command(d2, d3, "c1"),
            command(d2, d3, "root"),
        ]

    @pytest.mark.asyncio
    async def test_same_day(self, config, fake_cli):
        client = AuditClient(config)
        day = "2024-01-05T00:00:00"
        cli = fake_cli({command(day, day, "c1"): ""}, client)

        assert await sync_audit_events(client, ["c1"], date(2024, 1, 5), date(2024, 1, 5)) is None
        assert len(cli.calls) == 1
