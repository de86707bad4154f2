"""Parse Date values from header exports."""

from datetime import datetime
from email.utils import parsedate_to_datetime


def parse_timestamp(value: str | None, fmt: str | None = None) -> datetime | None:
    """Parse a date string, returning None on failure.

    The export format `fmt` is tried first, then RFC 2822 header dates
    like 'Mon, 2 Jan 2006 15:04:05 -0700 (MST)'.
    """
    if not value or not value.strip():
        return None
    value = value.strip()
    if fmt:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            pass
    try:
        return parsedate_to_datetime(value)
    except (ValueError, TypeError, IndexError):
        return None
