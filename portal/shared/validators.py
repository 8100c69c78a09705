"""Shared validation utilities"""

import re
from datetime import date, datetime, time
from typing import Optional

TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def normalize_date_string(value: str) -> str:
    """
    Convert a German style DD.MM.YYYY date to ISO YYYY-MM-DD.

    Values without dots are returned unchanged (already ISO).
    Day and month are zero padded, e.g. "1.3.2026" -> "2026-03-01".
    """
    value = value.strip()
    if "." in value:
        parts = value.split(".")
        if len(parts) == 3:
            day, month, year = parts
            return f"{year}-{month.zfill(2)}-{day.zfill(2)}"
    return value


def parse_reservation_date(value: Optional[str]) -> date:
    """
    Parse a reservation date in DD.MM.YYYY or YYYY-MM-DD format.

    Raises:
        ValueError: If the date is missing or not a real calendar day
    """
    if not value:
        raise ValueError("Date is required")

    normalized = normalize_date_string(value)
    try:
        return datetime.strptime(normalized, "%Y-%m-%d").date()
    except ValueError as e:
        raise ValueError(f"Invalid date '{value}'. Expected DD.MM.YYYY or YYYY-MM-DD") from e


def parse_time_of_day(value: Optional[str]) -> time:
    """
    Parse an HH:MM time of day (24h clock).

    Raises:
        ValueError: If the time is missing or out of range
    """
    if not value:
        raise ValueError("Time is required")

    match = TIME_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Invalid time '{value}'. Expected HH:MM")

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"Invalid time '{value}'. Expected HH:MM")
    return time(hour, minute)


def format_time_of_day(value: time) -> str:
    """Format a time of day as zero padded HH:MM"""
    return f"{value.hour:02d}:{value.minute:02d}"
