"""
ISO 8601 duration parsing (YouTube contentDetails.duration).
"""

import re
from typing import Optional

DURATION_RE = re.compile(r"^PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?$")


def parse_duration(iso8601: Optional[str]) -> int:
    """
    Parse an ISO 8601 duration like "PT15M33S" into total seconds.

    Hours, minutes and seconds are each optional. Empty or unparseable
    input returns 0.

    Example:
        >>> parse_duration("PT1H2M3S")
        3723
    """
    if not iso8601:
        return 0

    match = DURATION_RE.match(iso8601.strip())
    if not match:
        return 0

    hours = int(match.group(1) or 0)
    minutes = int(match.group(2) or 0)
    seconds = int(match.group(3) or 0)

    return hours * 3600 + minutes * 60 + seconds


def duration_minutes(iso8601: Optional[str]) -> float:
    """Duration in (fractional) minutes, 0.0 when unparseable."""
    return parse_duration(iso8601) / 60.0
