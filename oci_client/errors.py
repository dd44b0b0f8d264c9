"""Export errors."""


class AuditExportError(Exception):
    """Base error for the audit export."""

    def __init__(self, message: str = "Audit export failed"):
        self.message = message
        super().__init__(self.message)


class QueryTimeout(AuditExportError):
    """OCI call exceeded its deadline."""

    def __init__(self, command: str, timeout: float):
        self.command = command
        self.timeout = timeout
        super().__init__(f"Timed out after {timeout}s: {command}")


class ProtocolError(AuditExportError):
    """OCI call returned something that is not JSON."""


class SchemaError(AuditExportError):
    """JSON document does not have the expected shape."""


class UpstreamError(AuditExportError):
    """OCI CLI failed or is unusable."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)
