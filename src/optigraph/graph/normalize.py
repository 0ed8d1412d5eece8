"""Normalization of graph search hits into :class:`SearchResultItem`.

Two item shapes come back from the gateway depending on the query:

* the ``_Content`` shape, with a ``_metadata`` block (``key``, ``displayName``,
  ``types``, ``locale``, ``url.base``/``url.default``) and ``_id``;
* the ``Content`` shape, with ``Name``/``PageName``, ``ContentLink.GuidValue``,
  ``ContentType``, ``Language.Name``, ``Url``, ``Status`` and ``Modified``.

Each field is taken from the first non-empty source in a fixed priority order.
"""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import urljoin

from optigraph.models import SearchResultItem

UNTITLED = "Untitled"
UNKNOWN = "Unknown"


def _get(data: Any, *path: str) -> Any:
    current = data
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def _first_non_empty(*values: Any) -> Any:
    for value in values:
        if value:
            return value
    return None


def _first_element(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _resolve_url(item: Mapping[str, Any]) -> str | None:
    base = _get(item, "_metadata", "url", "base")
    relative = _get(item, "_metadata", "url", "default")
    if isinstance(base, str) and isinstance(relative, str) and base and relative:
        return urljoin(base, relative)
    url = _first_non_empty(item.get("Url"), relative)
    return url if isinstance(url, str) else None


def _as_float(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def item_identifier(item: Mapping[str, Any]) -> str | None:
    return _first_non_empty(
        _get(item, "_metadata", "key"),
        item.get("_id"),
        _get(item, "ContentLink", "GuidValue"),
    )


def normalize_content_item(item: Mapping[str, Any]) -> SearchResultItem:
    """Map one raw graph item onto the normalized record.

    The returned ``guid`` is ``None`` when none of the identifier sources are
    present; callers drop such items.
    """

    return SearchResultItem(
        guid=item_identifier(item),
        name=_first_non_empty(item.get("Name"), item.get("PageName"), _get(item, "_metadata", "displayName"))
        or UNTITLED,
        content_type=_first_non_empty(
            _first_element(item.get("ContentType")),
            _first_element(_get(item, "_metadata", "types")),
        )
        or UNKNOWN,
        language=_first_non_empty(_get(item, "Language", "Name"), _get(item, "_metadata", "locale")) or UNKNOWN,
        url=_resolve_url(item),
        score=_as_float(_get(item, "_ranking", "semantic")),
        modified=item.get("Modified"),
        status=item.get("Status"),
        id=item.get("_id"),
    )


def extract_items(payload: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    """Return the raw item list from either ``Content`` or ``_Content`` results."""

    items = _first_non_empty(
        _get(payload, "data", "Content", "items"),
        _get(payload, "data", "_Content", "items"),
    )
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, Mapping)]


def normalize_items(payload: Mapping[str, Any]) -> list[SearchResultItem]:
    normalized = (normalize_content_item(item) for item in extract_items(payload))
    return [item for item in normalized if item.guid]
