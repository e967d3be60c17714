from __future__ import annotations

from datetime import datetime, timezone


def format_timestamp(value: int | float | str | None) -> str:
    """Render the API's unix timestamps as UTC ISO strings."""
    if value is None or value == "":
        return "-"
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return str(value)
    try:
        dt = datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return str(value)
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")


def format_count(value: int | str | None) -> str:
    if value is None or value == "":
        return "-"
    try:
        return f"{int(value):,}"
    except (TypeError, ValueError):
        return str(value)


def truncate(text: str | None, width: int = 60) -> str:
    if not text:
        return "-"
    text = " ".join(str(text).split())
    if len(text) <= width:
        return text
    return text[: width - 1] + "…"
