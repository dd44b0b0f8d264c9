"""Base OCI CLI client with timeout and history lookup."""

import asyncio
import json
import re
import shlex
import shutil
import zipfile
from collections.abc import Callable
from typing import Any

from loguru import logger

from app.repositories.history import MISS, HistoryRepository
from oci_client.errors import ProtocolError, QueryTimeout, UpstreamError
from settings import MIN_OCI_CLI, ExportConfig

ResultFilter = Callable[[Any], Any]


def keep_all(doc: Any) -> Any:
    """Result filter that keeps the document as is."""
    return doc


def _version(text: str) -> tuple[int, ...]:
    """Numeric (major, minor, patch) from a version string."""
    return tuple(int(p) for p in re.findall(r"\d+", text)[:3])


class BaseClient:
    """Runs one oci CLI command at a time and returns its parsed JSON.

    Results are looked up in the history archive before the CLI is invoked
    and saved there afterwards. When bound to a region, history keys are
    prefixed with the region name.
    """

    def __init__(
        self,
        config: ExportConfig,
        region: str | None = None,
        history: HistoryRepository | None = None,
    ):
        self._config = config
        self.region = region
        if history is None:
            history = HistoryRepository(config.history_file, config.history_validity)
        self._history = history
        self._request_count = 0
        logger.info("{}: region={}, timeout={}s", self.__class__.__name__, region or "default", config.timeout)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *_):
        logger.info("Total OCI calls: {}", self._request_count)

    @property
    def request_count(self) -> int:
        return self._request_count

    def signature(self, command: str) -> str:
        """History key for command."""
        return f"{self.region} {command}" if self.region else command

    def _argv(self, command: str) -> list[str]:
        """Full oci argument vector for command."""
        argv = [self._config.oci_path, *self._config.cli_args()]
        if self.region:
            argv += ["--region", self.region]
        return argv + shlex.split(command)

    async def check_cli(self) -> str:
        """Ensure the oci binary exists and is recent enough. Returns its version."""
        if shutil.which(self._config.oci_path) is None:
            raise UpstreamError(
                f"Could not find oci-cli binary '{self._config.oci_path}'. "
                "Download page: https://github.com/oracle/oci-cli"
            )
        version = (await self._exec([self._config.oci_path, "-v"], "-v")).strip()
        if _version(version) < _version(MIN_OCI_CLI):
            raise UpstreamError(f"Minimal oci version required is {MIN_OCI_CLI}. Found: {version}")
        return version

    async def run(self, command: str, result_filter: ResultFilter = keep_all) -> Any:
        """Execute command (or reuse history) and return filtered JSON, None when empty."""
        key = self.signature(command)
        cached = self._history.lookup(key)
        if cached is not MISS:
            logger.debug('Got "{}" from history', key)
            return cached

        logger.debug("{} {}", self._config.oci_path, key)
        self._request_count += 1
        raw = await self._exec(self._argv(command), command)
        result = self._parse(raw, command)
        if result is not None:
            result = result_filter(result)
        self._remember(key, result)
        return result

    async def _exec(self, argv: list[str], command: str) -> str:
        """Run argv and return its stdout, mapping failures to export errors."""
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise UpstreamError(f"Could not start {argv[0]}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self._config.timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise QueryTimeout(command, self._config.timeout) from None

        if proc.returncode != 0:
            err = stderr.decode(errors="replace").strip()
            raise UpstreamError(
                f"oci {command} failed with exit code {proc.returncode}: {err}",
                returncode=proc.returncode,
                stderr=err,
            )
        return stdout.decode()

    @staticmethod
    def _parse(raw: str, command: str) -> Any:
        """Decode CLI output, None when it printed nothing."""
        if not raw.strip():
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ProtocolError(f"oci {command} returned malformed JSON: {e}") from e

    def _remember(self, key: str, result: Any) -> None:
        """Store result in history; a failed write only logs a warning."""
        if not self._history.enabled:
            return
        try:
            self._history.store(key, result)
        except (OSError, zipfile.BadZipFile) as e:
            logger.warning("Could not save history for {}: {}", key, e)
