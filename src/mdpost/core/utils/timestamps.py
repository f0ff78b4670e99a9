"""Timestamp parsing and formatting for frontmatter date fields"""

from datetime import datetime
from typing import Any, Optional

from mdpost.core.errors import InvalidTimestamp


TIMESTAMP_FORMATS = (
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S.%f %z",
    "%Y-%m-%d %H:%M %z",
)


def _parse(text: str) -> Optional[datetime]:
    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_timestamp(value: Any, field: str) -> datetime:
    """Return a timezone-aware datetime for value or raise InvalidTimestamp naming field."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = _parse(value.strip())
        if parsed is None:
            raise InvalidTimestamp(field, value)
    else:
        raise InvalidTimestamp(field, value, f"expected a string, got {type(value).__name__}")

    if parsed.tzinfo is None or parsed.utcoffset() is None:
        raise InvalidTimestamp(field, value, "missing timezone offset")
    return parsed


def format_timestamp(value: datetime) -> str:
    """Format as 'YYYY-MM-DD HH:MM:SS +HHMM', keeping microseconds when present."""
    if value.microsecond:
        return value.strftime("%Y-%m-%d %H:%M:%S.%f %z")
    return value.strftime("%Y-%m-%d %H:%M:%S %z")
