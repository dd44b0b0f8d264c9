"""OCI CLI client package."""

from oci_client.audit import AuditClient
from oci_client.base import BaseClient, keep_all
from oci_client.errors import (
    AuditExportError,
    ProtocolError,
    QueryTimeout,
    SchemaError,
    UpstreamError,
)
from oci_client.iam import IamClient
from oci_client.merge import concat_data, select_data
from oci_client.paging import run_across_compartments, run_paged

__all__ = [
    # Base
    "BaseClient",
    "keep_all",
    # Clients
    "IamClient",
    "AuditClient",
    # Drivers
    "run_paged",
    "run_across_compartments",
    "concat_data",
    "select_data",
    # Errors
    "AuditExportError",
    "QueryTimeout",
    "ProtocolError",
    "SchemaError",
    "UpstreamError",
]
