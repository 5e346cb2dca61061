"""Datetime utility functions."""
import re
from datetime import date, datetime, timezone
from typing import Optional

def normalize_iso_datetime(dt_str: str) -> str:
    """Normalize various ISO datetime formats to consistent format with Z suffix."""
    if not dt_str:
        return dt_str
    dt_str = dt_str.strip().replace(" ", "T")
    dt_str = re.sub(r'(\.\d{1,6})?\+00:?00$', 'Z', dt_str)
    if dt_str and dt_str[-1].lower() == 'z':
        return dt_str[:-1] + 'Z'
    return dt_str

def parse_datetime(dt_str: str) -> datetime:
    """Parse ISO datetime string to an aware UTC datetime (naive input is taken as UTC)."""
    dt_str = normalize_iso_datetime(dt_str)
    if dt_str.endswith("Z"):
        dt_str = dt_str[:-1]
    dt = datetime.fromisoformat(dt_str)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)

def to_unix_timestamp(dt_str: Optional[str]) -> Optional[int]:
    """Unix seconds for an ISO string, or None when it cannot be parsed."""
    if not dt_str:
        return None
    try:
        return int(parse_datetime(dt_str).timestamp())
    except (TypeError, ValueError):
        return None

def timestamp_to_iso(timestamp: Optional[int]) -> str:
    """ISO-8601 UTC string with Z suffix, or "" for a missing timestamp."""
    if not timestamp:
        return ""
    dt = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return dt.isoformat().replace("+00:00", "Z")

def same_day(dt_str: str, day: date) -> bool:
    """Check whether an ISO datetime falls on the given UTC calendar day."""
    try:
        return parse_datetime(dt_str).date() == day
    except (TypeError, ValueError):
        return False
