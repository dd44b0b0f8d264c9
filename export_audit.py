#!/usr/bin/env python3
"""
Export Oracle Cloud audit information into JSON files.

Usage:
    python export_audit.py <option> [begin_date] [end_date]

    python export_audit.py ALL                          # All options, last 7 days
    python export_audit.py ALL_REGIONS                  # Same, once per subscribed region
    python export_audit.py Audit-Events 2024-01-01 2024-01-31

Dates are YYYY-MM-DD. Environment:
    OCI_CLI_ARGS   extra arguments for every oci call (default: --cli-rc-file /dev/null)
    HIST_ZIP_FILE  zip archive keeping fetched results between runs
    OCI_TENANCY_ID tenancy OCID, used when the compartment listing does not name it
    DEBUG=1        append a debug trail to logs/oci_json_audit.log
"""

import json
import sys
from datetime import datetime
from pathlib import Path

# Add project to path
sys.path.insert(0, str(Path(__file__).parent))

from pydantic import ValidationError

from etl import export
from etl.options import ALL, ALL_REGIONS, valid_options
from oci_client.errors import AuditExportError
from settings import ExportConfig
from settings.logging import setup_logging


def usage() -> None:
    """Print usage and the valid options to stderr."""
    print(__doc__, file=sys.stderr)
    print("Valid <option> values are:", file=sys.stderr)
    for option in valid_options():
        print(f"- {option}", file=sys.stderr)


def main() -> int:
    """Run one export from the command line. Returns the exit status."""
    args = sys.argv[1:]

    if not args or args[0] not in valid_options():
        usage()
        return 1

    option = args[0]
    try:
        config = ExportConfig(
            start_date=args[1] if len(args) > 1 else None,
            end_date=args[2] if len(args) > 2 else None,
        )
    except ValidationError as e:
        print(e, file=sys.stderr)
        return 1

    logger = setup_logging(debug=config.debug)
    logger.info("Exporting {} from {} to {}", option, config.start_date, config.end_date)
    if not config.caching:
        logger.warning("HIST_ZIP_FILE not set: every window will be fetched again")

    out_dir = Path(f"oci_json_audit_{datetime.now():%Y%m%d%H%M%S}")
    try:
        result = export(option, config, out_dir)
    except AuditExportError as e:
        logger.error("{}", e)
        return 1

    if option in (ALL, ALL_REGIONS):
        logger.info("Output written to {}", out_dir)
    elif result is not None:
        print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
