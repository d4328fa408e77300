"""
Toggl has changed how it serializes timestamps between API versions, and a
single response can carry both forms. Decoding accepts either one.
"""
from __future__ import annotations

import re
from datetime import datetime
from datetime import timezone
from typing import Any

from toggl_client.exceptions import TimestampParseException

UTC_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
OFFSET_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# strptime reads at most microseconds; drop any finer digits
_FRACTION = re.compile(r"(\.\d{6})\d+")


def _strptime(text: str, fmt: str) -> datetime:
    # Fractional seconds may follow the seconds field in either format
    if "." in text:
        text = _FRACTION.sub(r"\1", text)
        fmt = fmt.replace("%S", "%S.%f")
    return datetime.strptime(text, fmt)


def parse_timestamp(text: str) -> datetime:
    try:
        return _strptime(text, UTC_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        pass
    try:
        return _strptime(text, OFFSET_FORMAT)
    except ValueError:
        msg = f"Unable to parse timestamp: '{text}'"
        raise TimestampParseException(msg, text) from None


def parse_optional_timestamp(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        msg = f"Expected a timestamp string, got: '{value!r}'"
        raise TimestampParseException(msg, repr(value))
    return parse_timestamp(value)


def format_timestamp(value: datetime) -> str:
    """Encode as RFC3339 with an explicit offset. Naive values are local time."""
    if value.tzinfo is None:
        value = value.astimezone()
    return value.isoformat()
