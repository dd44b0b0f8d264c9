"""History repository - zip archive of previously fetched OCI query results."""

import json
import os
import zipfile
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from loguru import logger

from app.models.history import INDEX_NAME, HistoryEntry
from settings import HISTORY_VALIDITY

# Returned by lookup when nothing usable is cached. None is a valid payload.
MISS = object()

# Errors raised by an archive that is missing, truncated or not a zip at all
ARCHIVE_ERRORS = (OSError, zipfile.BadZipFile)


class HistoryRepository:
    """Read-through store keyed by the exact query signature.

    The archive holds an index (``audit_hist_list.txt``, lines of
    ``signature|N.json``) and one payload member per signature. Payloads for
    signatures with explicit start/end bounds never expire; everything else
    is stale once older than ``validity`` seconds.

    An archive that cannot be read is ignored for the rest of the run: every
    lookup misses and nothing is written over it.
    """

    def __init__(
        self,
        path: Path | str | None,
        validity: int = HISTORY_VALIDITY,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._path = Path(path) if path else None
        self._validity = timedelta(seconds=validity)
        self._clock = clock
        self._index: dict[str, list[HistoryEntry]] = {}
        self._unreadable = False
        if self._path and self._path.exists():
            try:
                self._index = self._read_index()
            except ARCHIVE_ERRORS as e:
                logger.warning("History {} is unreadable, ignoring it: {}", self._path, e)
                self._unreadable = True
            else:
                logger.info("History {}: {} entries", self._path, len(self._index))

    @property
    def enabled(self) -> bool:
        return self._path is not None

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, signature: str) -> bool:
        return signature in self._index

    def lookup(self, signature: str) -> Any:
        """Cached payload for signature, or MISS."""
        if not self.enabled or self._unreadable:
            return MISS
        entries = self._index.get(signature)
        if not entries or len(entries) > 1:
            return MISS
        entry = entries[0]

        try:
            text = self._read_payload(entry)
        except ARCHIVE_ERRORS as e:
            logger.warning("History {} is unreadable: {}", self._path, e)
            return MISS

        if text is None or not text.strip():
            return MISS
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            logger.warning("History payload {} is not JSON, ignoring", entry.filename)
            return MISS

    def store(self, signature: str, payload: Any) -> bool:
        """Save payload under signature. Returns False when the index is ambiguous."""
        if not self.enabled:
            return False
        if self._unreadable:
            logger.debug("History unreadable, not storing {}", signature)
            return False

        entries = self._index.get(signature)
        if entries and len(entries) > 1:
            logger.warning("History index has {} lines for {}, not storing", len(entries), signature)
            return False

        if entries:
            entry = entries[0]
            index = self._index
        else:
            last = max((e.number for lines in self._index.values() for e in lines), default=0)
            entry = HistoryEntry(signature=signature, filename=f"{last + 1}.json")
            index = {**self._index, signature: [entry]}

        self._rewrite(
            {
                entry.filename: json.dumps(payload),
                INDEX_NAME: "".join(e.to_line() + "\n" for lines in index.values() for e in lines),
            }
        )
        self._index = index
        logger.debug("History saved: {} -> {}", signature, entry.filename)
        return True

    def _read_payload(self, entry: HistoryEntry) -> str | None:
        """Payload text of entry, None when the member is missing or stale."""
        with zipfile.ZipFile(self._path) as zf:
            try:
                info = zf.getinfo(entry.filename)
            except KeyError:
                return None
            if not entry.is_bounded and self._is_stale(info):
                logger.debug("History expired: {}", entry.signature)
                return None
            return zf.read(info).decode()

    def _is_stale(self, info: zipfile.ZipInfo) -> bool:
        """Whether the member is at least validity old."""
        created = datetime(*info.date_time)
        return self._clock() - created >= self._validity

    def _read_index(self) -> dict[str, list[HistoryEntry]]:
        """Parse the index member into signature -> entries."""
        index: dict[str, list[HistoryEntry]] = {}
        with zipfile.ZipFile(self._path) as zf:
            if INDEX_NAME not in zf.namelist():
                return index
            for line in zf.read(INDEX_NAME).decode().splitlines():
                entry = HistoryEntry.from_line(line)
                if entry:
                    index.setdefault(entry.signature, []).append(entry)
        return index

    @staticmethod
    def _member(name: str, date_time: tuple) -> zipfile.ZipInfo:
        """Uncompressed member header, so later rewrites copy it without recompressing."""
        info = zipfile.ZipInfo(name, date_time=date_time)
        info.compress_type = zipfile.ZIP_STORED
        info.external_attr = 0o644 << 16
        return info

    def _rewrite(self, members: dict[str, str]) -> None:
        """Copy the archive with members replaced, then swap it in atomically."""
        tmp = self._path.with_name(self._path.name + ".tmp")
        stamp = self._clock().timetuple()[:6]
        self._path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with zipfile.ZipFile(tmp, "w", zipfile.ZIP_STORED) as zout:
                if self._path.exists():
                    with zipfile.ZipFile(self._path) as zin:
                        for info in zin.infolist():
                            if info.filename not in members:
                                zout.writestr(self._member(info.filename, info.date_time), zin.read(info))
                for name, text in members.items():
                    zout.writestr(self._member(name, stamp), text)
            os.replace(tmp, self._path)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
