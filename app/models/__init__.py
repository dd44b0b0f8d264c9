"""Models package - persisted layouts."""

from app.models.history import BOUND_MARKERS, INDEX_NAME, SEPARATOR, HistoryEntry

__all__ = [
    "HistoryEntry",
    "INDEX_NAME",
    "SEPARATOR",
    "BOUND_MARKERS",
]
