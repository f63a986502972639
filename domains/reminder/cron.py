"""Translate human clock times into daily cron expressions.

Expressions use six fields: second minute hour day-of-month month day-of-week.
A daily reminder at 6:30 PM is "0 30 18 * * *".
"""

import re

from .errors import InvalidTime, InvalidSchedule

CRON_FIELDS = ("second", "minute", "hour", "day", "month", "day_of_week")

_CLOCK_PATTERN = re.compile(r"^(\d{1,2})(?::(\d{1,2}))?$")
_MERIDIANS = ("AM", "PM")


def parse_clock_time(text: str) -> tuple[int, int]:
    """Parse a clock time to a 24-hour (hour, minute) pair.

    Accepts "HH[:MM]" optionally followed by AM/PM, case-insensitive:
    "8:00 PM", "8 pm", "12:15 am", "18:30", "7".

    Args:
        text: Time string as typed by the user

    Returns:
        Tuple of (hour, minute)

    Raises:
        InvalidTime: If the text is malformed or out of range
    """
    parts = (text or "").strip().upper().split()
    if not parts:
        raise InvalidTime("No time given")
    if len(parts) > 2:
        raise InvalidTime(f"Unexpected text after time: {' '.join(parts[2:])}")

    match = _CLOCK_PATTERN.match(parts[0])
    if not match:
        raise InvalidTime(f"Not a clock time: {parts[0]}")

    hour = int(match.group(1))
    minute = int(match.group(2) or 0)

    meridian = parts[1] if len(parts) > 1 else None
    if meridian is not None and meridian not in _MERIDIANS:
        raise InvalidTime(f"Expected AM or PM, got: {meridian}")

    # Convert 12-hour to 24-hour
    if meridian == "PM" and hour != 12:
        hour += 12
    elif meridian == "AM" and hour == 12:
        hour = 0

    if hour < 0 or hour > 23:
        raise InvalidTime(f"Invalid hour: {match.group(1)}")
    if minute < 0 or minute > 59:
        raise InvalidTime(f"Invalid minute: {match.group(2)}")

    return hour, minute


def to_cron_expression(text: str) -> str:
    """Convert a clock time like "8:00 PM" into "0 0 20 * * *"."""
    hour, minute = parse_clock_time(text)
    return f"0 {minute} {hour} * * *"


def parse_cron_fields(expression: str) -> dict[str, str]:
    """Split a 6-field cron expression into named fields.

    Field names match APScheduler's CronTrigger keyword arguments.

    Raises:
        InvalidSchedule: If the expression does not have six fields
    """
    values = (expression or "").split()
    if len(values) != len(CRON_FIELDS):
        raise InvalidSchedule(
            f"Expected {len(CRON_FIELDS)} cron fields, got {len(values)}: {expression!r}"
        )
    return dict(zip(CRON_FIELDS, values))


def cron_to_clock(expression: str) -> tuple[int, int]:
    """Re-derive the 24-hour (hour, minute) of a daily cron expression.

    Raises:
        InvalidSchedule: If hour or minute is not a single number
    """
    fields = parse_cron_fields(expression)
    try:
        return int(fields["hour"]), int(fields["minute"])
    except ValueError:
        raise InvalidSchedule(f"Not a fixed daily time: {expression!r}") from None
