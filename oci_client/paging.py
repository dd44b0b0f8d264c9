"""Pagination and compartment fan-out over a single OCI command."""

from collections.abc import Iterable
from typing import Any

from loguru import logger

from oci_client.base import BaseClient, ResultFilter, keep_all
from oci_client.merge import NEXT_PAGE, concat_data


async def run_paged(client: BaseClient, command: str, result_filter: ResultFilter = keep_all) -> dict | None:
    """Run command, following ``opc-next-page`` until the last page."""
    merged = None
    page_command = command
    pages = 0

    while True:
        out = await client.run(page_command, result_filter)
        pages += 1
        next_page = out.get(NEXT_PAGE) if isinstance(out, dict) else None
        if next_page:
            data = out.get("data")
            out = {"data": [] if data is None else data}
            page_command = f"{command} --page {next_page}"
        merged = concat_data(merged, out)
        if not next_page:
            break

    if pages > 1:
        logger.debug("{}: {} pages", command, pages)
    return merged


async def run_across_compartments(
    client: BaseClient,
    command: str,
    result_filter: ResultFilter,
    compartments: Iterable[str],
) -> Any:
    """Run command once per compartment id and merge the results.

    The first failing compartment aborts the whole run.
    """
    merged = None
    for compartment_id in compartments:
        out = await run_paged(client, f"{command} --compartment-id {compartment_id}", result_filter)
        merged = concat_data(merged, out)
    return merged
