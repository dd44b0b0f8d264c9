"""Application settings."""

import os
import shlex
from datetime import date, timedelta
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

# Logging
LOG_DIR = Path("logs")
LOG_FILE = LOG_DIR / "oci_json_audit.log"

# OCI CLI
OCI_PATH = "oci"
OCI_CLI_ARGS = os.getenv("OCI_CLI_ARGS") or "--cli-rc-file /dev/null"
OCI_TIMEOUT = 600
MIN_OCI_CLI = "2.4.34"

# Export
DEFAULT_PERIOD = 7
SLICE_SECONDS = 3600 * 24
HISTORY_VALIDITY = 3600 * 24 * 3
HISTORY_FILE = Path(os.environ["HIST_ZIP_FILE"]) if os.getenv("HIST_ZIP_FILE") else None
DEBUG = os.getenv("DEBUG", "0") not in ("", "0")
# Read when each config is built; fallback for listings that never name the tenancy
TENANCY_ID_ENV = "OCI_TENANCY_ID"


def _parse_ymd(value):
    """Parse a strict YYYY-MM-DD string (dates pass through)."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or len(value) != 10:
        raise ValueError(f"Date {value} in wrong format. Specify YYYY-MM-DD.")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Date {value} in wrong format. Specify YYYY-MM-DD.") from None


class ExportConfig(BaseModel):
    """Run configuration passed explicitly into the export entry points."""

    oci_path: str = OCI_PATH
    oci_cli_args: str = OCI_CLI_ARGS
    timeout: float = Field(default=OCI_TIMEOUT, gt=0)
    slice_seconds: int = Field(default=SLICE_SECONDS, gt=0)
    history_validity: int = Field(default=HISTORY_VALIDITY, ge=0)
    history_file: Path | None = HISTORY_FILE
    default_period: int = Field(default=DEFAULT_PERIOD, ge=0)
    start_date: date | None = None
    end_date: date | None = None
    tenancy_id: str | None = Field(default_factory=lambda: os.getenv(TENANCY_ID_ENV) or None)
    debug: bool = DEBUG

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _check_date(cls, value):
        if value is None or value == "":
            return None
        return _parse_ymd(value)

    @model_validator(mode="after")
    def _fill_dates(self):
        if self.end_date is None:
            self.end_date = date.today()
        if self.start_date is None:
            self.start_date = date.today() - timedelta(days=self.default_period)
        if self.start_date > self.end_date:
            raise ValueError(f"start_date {self.start_date} is after end_date {self.end_date}")
        return self

    @property
    def caching(self) -> bool:
        return self.history_file is not None

    def cli_args(self) -> list[str]:
        """Tokenized extra arguments passed to every oci call."""
        return shlex.split(self.oci_cli_args)
