"""Local persistence of fetched OCI results."""
