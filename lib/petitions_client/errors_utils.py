from __future__ import annotations

from typing import Any


def response_info(response: Any) -> dict[str, Any]:
    """Return ``metadata.responseInfo`` of a decoded response, or ``{}``."""
    if not isinstance(response, dict):
        return {}
    metadata = response.get("metadata")
    if not isinstance(metadata, dict):
        return {}
    info = metadata.get("responseInfo")
    return info if isinstance(info, dict) else {}


def developer_message(response: Any) -> str | None:
    value = response_info(response).get("developerMessage")
    if value is None or value == "":
        return None
    return str(value)
