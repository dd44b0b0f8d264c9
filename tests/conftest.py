"""Shared fixtures - scripted OCI CLI and a history-less config."""

import json

import pytest

from settings import ExportConfig

TENANCY = "ocid1.tenancy.oc1..aaaatenancy"


class FakeCli:
    """Stands in for BaseClient._exec, answering by command string."""

    def __init__(self, responses: dict):
        self.responses = responses
        self.calls: list[str] = []

    async def __call__(self, argv: list[str], command: str) -> str:
        self.calls.append(command)
        response = self.responses[command]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            return response
        return json.dumps(response)


@pytest.fixture
def config():
    return ExportConfig(
        oci_path="oci",
        oci_cli_args="",
        history_file=None,
        tenancy_id=None,
        start_date="2024-01-01",
        end_date="2024-01-03",
    )


@pytest.fixture
def fake_cli():
    """Factory: attach a FakeCli to one or more clients."""

    def _attach(responses: dict, *clients) -> FakeCli:
        cli = FakeCli(responses)
        for client in clients:
            client._exec = cli
        return cli

    return _attach
