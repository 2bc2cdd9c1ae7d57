"""JSON (de)serialization for tool-call arguments and results.

Arguments and results travel as JSON text. Decoding applies a date-revival
pass: any string that is a full ISO-8601 timestamp with an explicit zone
(``YYYY-MM-DDTHH:mm:ss[.fff](Z|+HH:MM)``) becomes a timezone-aware ``datetime``.
"""

import json
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel

ISO_TIMESTAMP = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d*))?(Z|([+-])(\d{2}):(\d{2}))$"
)


def revive_date(value: Any) -> Any:
    """Convert a single ISO-8601 timestamp string into a datetime.

    Non-matching values, and strings that match the pattern but are not a
    valid calendar timestamp, are returned unchanged.
    """
    if not isinstance(value, str):
        return value
    match = ISO_TIMESTAMP.match(value)
    if not match:
        return value

    year, month, day, hour, minute, second, fraction, zone, sign, off_h, off_m = match.groups()
    microsecond = int((fraction or "").ljust(6, "0")[:6] or 0)
    if zone == "Z":
        tz = timezone.utc
    else:
        offset = timedelta(hours=int(off_h), minutes=int(off_m))
        tz = timezone(offset if sign == "+" else -offset)

    try:
        return datetime(
            int(year), int(month), int(day), int(hour), int(minute), int(second), microsecond, tzinfo=tz
        )
    except ValueError:
        return value


def revive_dates(node: Any) -> Any:
    """Recursively apply :func:`revive_date` to a decoded JSON structure."""
    if isinstance(node, dict):
        return {key: revive_dates(value) for key, value in node.items()}
    if isinstance(node, list):
        return [revive_dates(item) for item in node]
    return revive_date(node)


def deserialize(text: str) -> Any:
    """Decode JSON text, reviving timestamps.

    Raises:
        json.JSONDecodeError: If the text is not valid JSON.
    """
    return revive_dates(json.loads(text))


def _default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize(value: Any) -> str:
    """Encode a value as JSON text, writing datetimes as ISO-8601 strings."""
    return json.dumps(value, default=_default)
