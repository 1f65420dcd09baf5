"""
Response-shape normalization for list and single-object endpoints.

The backend answers list endpoints either with a bare JSON array or with an
envelope `{"data": [...]}`, and single-object endpoints either with the bare
object or with `{"data": {...}}`. Resource modules run every payload through
these helpers once so that callers always see a plain list of records or a
plain record.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional


def coerce_list(value: Any) -> list:
    """Return the list carried by `value`, or an empty list.

    Accepted shapes:
      - `[...]` -> the list itself
      - `{"data": [...]}` -> the enveloped list
    Anything else (None, {}, scalars, `{"data": null}`) yields `[]`.
    """
    if isinstance(value, list):
        return value
    if isinstance(value, Mapping):
        inner = value.get("data")
        if isinstance(inner, list):
            return inner
    return []


def coerce_records(value: Any) -> list:
    """Like `coerce_list`, but keep only object entries (drops null, strings, numbers)."""
    return [item for item in coerce_list(value) if isinstance(item, Mapping)]


def coerce_item(value: Any) -> Optional[Mapping]:
    """Return the object carried by `value`, or None when it is not an object.

    `{"data": {...}}` is unwrapped; any other mapping is taken as the bare
    object (including `{}` and `{"data": null}`).
    """
    if not isinstance(value, Mapping):
        return None
    inner = value.get("data")
    if isinstance(inner, Mapping):
        return inner
    return value
