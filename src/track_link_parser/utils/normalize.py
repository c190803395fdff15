from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Optional, Union


_ISO_DURATION = re.compile(
    r"^P(?:(?P<weeks>\d+)W)?(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$"
)


def none_if_empty(value: Any) -> Any:
    if value is None or value == "":
        return None
    return value


def to_number(value: Any) -> Optional[Union[int, float]]:
    """Coerce API counters, which some sites send as strings, to numbers."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


def to_datetime(value: Any) -> Optional[datetime]:
    """Return an aware UTC datetime from epoch seconds or an ISO-8601 string.

    Naive timestamps are taken to be UTC.
    """
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        if value <= 0:
            return None
        return datetime.fromtimestamp(value, tz=timezone.utc)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_iso8601_duration(value: str) -> Union[int, float]:
    """Convert an ISO-8601 duration such as ``PT1H2M3S`` to seconds."""
    match = _ISO_DURATION.match(value or "")
    if not match:
        raise ValueError(f"Could not parse ISO-8601 duration: {value!r}")
    weeks = int(match.group("weeks") or 0)
    days = int(match.group("days") or 0)
    hours = int(match.group("hours") or 0)
    minutes = int(match.group("minutes") or 0)
    seconds_raw = match.group("seconds") or "0"
    seconds = float(seconds_raw) if "." in seconds_raw else int(seconds_raw)
    return weeks * 604800 + days * 86400 + hours * 3600 + minutes * 60 + seconds
