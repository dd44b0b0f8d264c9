"""JSON helpers for ``{"data": [...]}`` documents."""

from collections.abc import Callable
from typing import Any

from oci_client.errors import SchemaError

NEXT_PAGE = "opc-next-page"


def _as_list(doc: dict) -> list:
    if not isinstance(doc, dict) or "data" not in doc:
        raise SchemaError(f"Expected a JSON object with 'data', got: {str(doc)[:200]}")
    data = doc["data"]
    return data if isinstance(data, list) else [data]


def concat_data(a: dict | None, b: dict | None) -> dict | None:
    """Concatenate the ``data`` arrays of a and b (a first).

    None stands for "no result yet" and is the identity. A non-list ``data``
    is treated as a one-element list.
    """
    if a is None:
        return b
    if b is None:
        return a
    return {"data": _as_list(a) + _as_list(b)}


def select_data(predicate: Callable[[Any], bool]) -> Callable[[dict], dict]:
    """Result filter keeping only the ``data`` items matching predicate."""

    def _filter(doc: dict) -> dict:
        return {**doc, "data": [item for item in _as_list(doc) if predicate(item)]}

    return _filter
