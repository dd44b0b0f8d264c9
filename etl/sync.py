"""Main export orchestration."""

import asyncio
import json
from pathlib import Path
from typing import Any

from loguru import logger

from app.repositories.history import HistoryRepository
from etl.options import ALL, ALL_REGIONS, OPTIONS, OPTIONS_BY_NAME
from oci_client.audit import AuditClient
from oci_client.errors import AuditExportError
from oci_client.iam import IamClient, RegionSubscriptionSchema
from settings import ExportConfig

LIST_FILE = "oci_json_audit_list.txt"


def write_json(path: Path, doc: Any) -> None:
    path.write_text(json.dumps(doc, indent=2) + "\n")


class AuditExporter:
    """Runs export options for one region, each at most once per run."""

    def __init__(
        self,
        config: ExportConfig,
        region: str | None = None,
        history: HistoryRepository | None = None,
    ):
        self.config = config
        self.region = region
        if history is None:
            history = HistoryRepository(config.history_file, config.history_validity)
        self.iam = IamClient(config, region, history)
        self.audit = AuditClient(config, region, history)
        self._results: dict[str, Any] = {}

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.iam.__aexit__(*exc)
        await self.audit.__aexit__(*exc)

    async def export_option(self, name: str) -> Any:
        """JSON output of one option."""
        if name in self._results:
            return self._results[name]
        option = OPTIONS_BY_NAME.get(name)
        if option is None:
            raise ValueError(f"Unknown option: {name}")

        logger.info("Running {}{}", name, f" [{self.region}]" if self.region else "")
        result = await option.handler(self, option.argument)
        self._results[name] = result
        return result

    async def export_all(self, out_dir: Path) -> dict[str, bool]:
        """Write every option's output file into out_dir.

        A failing option leaves ``<file>.err`` behind instead and the run
        moves on to the next option.
        """
        out_dir.mkdir(parents=True, exist_ok=True)
        status = {}

        for option in OPTIONS:
            target = out_dir / option.output_file
            logger.info('Processing "{}"', option.output_file)
            try:
                result = await self.export_option(option.name)
            except AuditExportError as e:
                logger.error('Skipped "{}": {}', option.output_file, e)
                (out_dir / f"{option.output_file}.err").write_text(f"{e}\n")
                status[option.name] = False
                continue

            if result is not None:
                write_json(target, result)
            status[option.name] = True

        (out_dir / LIST_FILE).write_text("".join(f"{o.output_file}\n" for o in OPTIONS))
        return status


async def export_all_regions(
    config: ExportConfig,
    out_dir: Path,
    history: HistoryRepository | None = None,
) -> dict[str, dict[str, bool]]:
    """Run export_all once per subscribed region, sequentially."""
    if history is None:
        history = HistoryRepository(config.history_file, config.history_validity)

    async with AuditExporter(config, history=history) as home:
        subscriptions = await home.export_option("IAM-RegionSub")

    regions = [RegionSubscriptionSchema.model_validate(r).region_name for r in (subscriptions or {}).get("data", [])]
    logger.info("Regions: {}", ", ".join(regions))

    results = {}
    for region in regions:
        logger.info("Region {} set.", region)
        async with AuditExporter(config, region, history) as exporter:
            results[region] = await exporter.export_all(out_dir / region)
    return results


async def _export_async(option: str, config: ExportConfig, out_dir: Path) -> Any:
    """Async export implementation."""
    history = HistoryRepository(config.history_file, config.history_validity)

    async with AuditExporter(config, history=history) as exporter:
        await exporter.iam.check_cli()
        if option == ALL:
            return await exporter.export_all(out_dir)
        if option != ALL_REGIONS:
            return await exporter.export_option(option)

    return await export_all_regions(config, out_dir, history)


def export(option: str, config: ExportConfig, out_dir: Path) -> Any:
    """Main export entry point."""
    return asyncio.run(_export_async(option, config, out_dir))
