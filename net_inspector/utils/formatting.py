"""Formatting helpers shared by the transaction descriptions."""

from datetime import datetime
from typing import Optional

DESCRIPTION_SEPARATOR = " · "
ELLIPSIS = "…"

_BYTE_UNITS = ["bytes", "KB", "MB", "GB", "TB"]


def format_duration(seconds: Optional[float]) -> str:
    """Renders a time interval as milliseconds below one second, seconds otherwise."""
    if seconds is None:
        return ""
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    return f"{seconds:.2f} s"


def format_byte_count(byte_count: int) -> str:
    """Renders a byte count with a binary-prefixed unit, e.g. ``"1.5 KB"``."""
    size = float(byte_count)
    for unit in _BYTE_UNITS[:-1]:
        if size < 1024:
            return f"{byte_count} bytes" if unit == "bytes" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} {_BYTE_UNITS[-1]}"


def format_timestamp(moment: datetime, timestamp_format: str) -> str:
    """Renders ``moment`` in local time."""
    return moment.astimezone().strftime(timestamp_format)


def truncate(text: str, limit: int) -> str:
    """Shortens ``text`` to at most ``limit`` characters, ending in an ellipsis when cut."""
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    return text[: max(limit - 1, 0)] + ELLIPSIS


def join_description(*parts: Optional[str]) -> str:
    """Joins the non-empty parts of a one-line description."""
    return DESCRIPTION_SEPARATOR.join(part for part in parts if part)
