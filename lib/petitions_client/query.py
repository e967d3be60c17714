from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, unquote

_KEY_SEGMENT = re.compile(r"\[([^\[\]]*)\]")


def _raw_encode(value: Any) -> str:
    # Only unreserved characters stay literal; space becomes %20, never "+".
    return quote(str(value), safe="")


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else ""
    return str(value)


def _items(value: Mapping[Any, Any] | list | tuple):
    if isinstance(value, (list, tuple)):
        return enumerate(value)
    return value.items()


def build_query_string(params: Mapping[Any, Any], key_prefix: str = "") -> str:
    """Build a raw percent-encoded query string from a possibly nested mapping.

    Nested mappings (and lists, keyed by index) render as ``prefix[key]``
    with the brackets percent-encoded. A ``None`` value emits the bare key.
    Slashes in values are kept literal for readable paths.
    """
    fragments: list[str] = []
    for raw_key, value in _items(params):
        key = _raw_encode(raw_key)
        if key_prefix:
            key = f"{key_prefix}%5B{key}%5D"

        if isinstance(value, (Mapping, list, tuple)):
            nested = build_query_string(value, key)
            if nested:
                fragments.append(nested)
        elif value is None:
            fragments.append(key)
        else:
            fragments.append(key + "=" + _raw_encode(_scalar(value)).replace("%2F", "/"))

    return "&".join(fragments)


def parse_query_string(query: str) -> dict[str, Any]:
    """Parse a query string into the nested mapping shape ``build_query_string`` accepts.

    Bare keys map to ``None``; ``a[b][c]=v`` becomes ``{"a": {"b": {"c": "v"}}}``.
    """
    result: dict[str, Any] = {}
    for fragment in (query or "").lstrip("?").split("&"):
        if not fragment:
            continue
        if "=" in fragment:
            raw_key, raw_value = fragment.split("=", 1)
            value: str | None = unquote(raw_value)
        else:
            raw_key, value = fragment, None
        assign_path(result, split_key(unquote(raw_key)), value)
    return result


def split_key(key: str) -> list[str]:
    """Split ``a[b][c]`` into ``["a", "b", "c"]``."""
    head, bracket, tail = key.partition("[")
    if not bracket or not head:
        return [key]
    rest = "[" + tail
    segments = _KEY_SEGMENT.findall(rest)
    if "".join(f"[{s}]" for s in segments) != rest:
        return [key]
    return [head, *segments]


def assign_path(target: dict[str, Any], path: list[str], value: Any) -> None:
    node = target
    for segment in path[:-1]:
        child = node.get(segment)
        if not isinstance(child, dict):
            child = {}
            node[segment] = child
        node = child
    node[path[-1]] = value
