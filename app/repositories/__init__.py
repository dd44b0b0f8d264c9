"""Repositories package - local persistence of fetched OCI results."""

from app.repositories.history import MISS, HistoryRepository

__all__ = [
    "HistoryRepository",
    "MISS",
]
