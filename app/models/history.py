"""Audit history archive layout - index + one payload file per query."""

from dataclasses import dataclass

INDEX_NAME = "audit_hist_list.txt"
SEPARATOR = "|"

# Signatures carrying both markers are immutable once fetched
BOUND_MARKERS = ("start-time", "end-time")


@dataclass(frozen=True)
class HistoryEntry:
    """One line of the history index."""

    signature: str
    filename: str

    @property
    def number(self) -> int:
        return int(self.filename.removesuffix(".json"))

    @property
    def is_bounded(self) -> bool:
        return all(marker in self.signature for marker in BOUND_MARKERS)

    def to_line(self) -> str:
        return f"{self.signature}{SEPARATOR}{self.filename}"

    @classmethod
    def from_line(cls, line: str) -> "HistoryEntry | None":
        signature, sep, filename = line.rstrip("\n").rpartition(SEPARATOR)
        if not sep or not filename.strip().removesuffix(".json").isdigit():
            return None
        return cls(signature=signature.strip(), filename=filename.strip())
