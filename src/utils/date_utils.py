"""Date and time utility functions."""
from datetime import datetime
from typing import Optional


def now_iso() -> str:
    """
    Current local time as an ISO 8601 string with UTC offset.

    Returns:
        str: e.g. "2025-10-28T14:32:10.123456+08:00"
    """
    return datetime.now().astimezone().isoformat()


def parse_iso(timestamp: str) -> datetime:
    """
    Parse an ISO 8601 timestamp, accepting a trailing 'Z'.

    Args:
        timestamp: ISO 8601 string

    Returns:
        datetime object

    Raises:
        ValueError: If the timestamp is not ISO 8601
    """
    if not isinstance(timestamp, str):
        raise ValueError(f"Invalid timestamp format: {timestamp}")
    return datetime.fromisoformat(timestamp.replace("Z", "+00:00"))


def is_valid_iso(timestamp: Optional[str]) -> bool:
    """Check whether a value parses as an ISO 8601 timestamp."""
    if not timestamp:
        return False
    try:
        parse_iso(timestamp)
        return True
    except ValueError:
        return False


def format_clock_time(timestamp: Optional[str]) -> str:
    """
    Format a check-in timestamp as HH:MM for activity lists.

    Args:
        timestamp: ISO 8601 string or None

    Returns:
        "HH:MM", or "--:--" when missing or unparseable
    """
    if not timestamp:
        return "--:--"
    try:
        return parse_iso(timestamp).strftime("%H:%M")
    except ValueError:
        return "--:--"
