"""ETL package - audit export from the OCI CLI to JSON files."""

from etl.sync import AuditExporter, export, export_all_regions

__all__ = [
    "AuditExporter",
    "export",
    "export_all_regions",
]
