from __future__ import annotations

from datetime import date

from .models import STATUS_HALF_DAY, STATUS_LEAVE, STATUS_PRESENT, STATUS_WEEKEND

WEEKDAY_HOURS = 8.5
SATURDAY_HOURS = 4.0
SUNDAY_HOURS = 0.0

SATURDAY = 5
SUNDAY = 6


def expected_hours(work_date: date) -> float:
    """Policy hours for the day: Mon-Fri 8.5h, Saturday 4h, Sunday off."""

    weekday = work_date.weekday()
    if weekday == SUNDAY:
        return SUNDAY_HOURS
    if weekday == SATURDAY:
        return SATURDAY_HOURS
    return WEEKDAY_HOURS


def determine_status(work_date: date, has_in: bool, has_out: bool) -> str:
    """Classify the day from its weekday and whether both punches exist.

    Must stay in step with ``expected_hours``: only Sunday is "Weekend".
    """

    weekday = work_date.weekday()
    if weekday == SUNDAY:
        return STATUS_WEEKEND
    if not (has_in and has_out):
        return STATUS_LEAVE
    if weekday == SATURDAY:
        return STATUS_HALF_DAY
    return STATUS_PRESENT


__all__ = ["expected_hours", "determine_status"]
