"""Date helpers for wire and query formatting."""
from datetime import date, datetime, timezone
from typing import Optional, Union

from dateutil import parser as date_parser

WIRE_FORMAT = '%Y-%m-%dT%H:%M:%S'


def parse_datetime(value: Union[str, date, datetime, None]) -> Optional[datetime]:
    """
    Parse an ISO 8601 string (or a date/datetime) into a datetime.

    Args:
        value: String, date or datetime

    Returns:
        datetime object, or None when the value cannot be parsed
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None

    try:
        return date_parser.isoparse(value)
    except ValueError:
        pass

    try:
        return date_parser.parse(value)
    except (ValueError, OverflowError):
        return None


def to_utc(value: datetime) -> datetime:
    """Convert to UTC, naive datetimes are taken as UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_wire_string(value: datetime) -> str:
    """Format as ``YYYY-MM-DDTHH:MM:SS`` in UTC (entity fields and queries)."""
    return to_utc(value).strftime(WIRE_FORMAT)


def to_atom_string(value: datetime) -> str:
    """Format as ATOM (RFC 3339) keeping the original offset, used for timings."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat(timespec='seconds')
