"""Audit CLI client."""

from oci_client.audit.client import AuditClient, events_command, request_action, without_reads

__all__ = [
    "AuditClient",
    "events_command",
    "request_action",
    "without_reads",
]
