from __future__ import annotations

import math
import numbers
import re
import warnings
from datetime import date, datetime, time, timedelta
from typing import Any, Optional

import pandas as pd


# Spreadsheet serials count days from 1899-12-30; 25569 of them fall before 1970-01-01.
UNIX_EPOCH = date(1970, 1, 1)
SERIAL_EPOCH_OFFSET = 25569
MINUTES_PER_DAY = 24 * 60

TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2})(?::(\d{2}))?\s*(AM|PM)?", re.IGNORECASE)
DATE_SPLIT_PATTERN = re.compile(r"[/\-.]")
DATE_ORDERS = {"DMY": (0, 1, 2), "MDY": (1, 0, 2), "YMD": (2, 1, 0)}


def round_half_up(value: float, digits: int = 0):
    """Round halves away from zero for positives ("2.5" -> 3), unlike ``round``."""

    factor = 10 ** digits
    rounded = math.floor(value * factor + 0.5)
    if digits == 0:
        return int(rounded)
    return rounded / factor


def is_blank(value: Any) -> bool:
    """None, NaN/NaT and whitespace-only text count as an empty cell."""

    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def serial_to_date(serial: float) -> date:
    return UNIX_EPOCH + timedelta(days=math.floor(serial - SERIAL_EPOCH_OFFSET))


def parse_date(value: Any, date_order: str = "DMY") -> Optional[date]:
    """Turn a cell value into a calendar date, or None when it cannot be read.

    Accepts native dates/timestamps, spreadsheet day serials and text. Text is
    first given to pandas; if that fails it is split on "/", "-" or "." and the
    three numbers are read positionally according to ``date_order``.
    """

    if is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        if not math.isfinite(value):
            return None
        try:
            return serial_to_date(float(value))
        except OverflowError:
            return None
    if isinstance(value, str):
        return _parse_date_text(value.strip(), date_order)
    return None


def _parse_date_text(text: str, date_order: str) -> Optional[date]:
    # words alone ("today", "now", "Jan") are not dates
    if not any(ch.isdigit() for ch in text):
        return None
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", UserWarning)
            parsed = pd.to_datetime(text)
    except (ValueError, TypeError, OverflowError):
        parsed = None
    if parsed is not None and not pd.isna(parsed):
        return parsed.date()

    parts = DATE_SPLIT_PATTERN.split(text)
    if len(parts) != 3:
        return None
    try:
        values = [int(part) for part in parts]
    except ValueError:
        return None
    day_pos, month_pos, year_pos = DATE_ORDERS.get(date_order.upper(), DATE_ORDERS["DMY"])
    try:
        return date(values[year_pos], values[month_pos], values[day_pos])
    except (ValueError, OverflowError):
        return None


def parse_time(value: Any, base_date: date) -> Optional[datetime]:
    """Anchor a punch value ("9:05", "05:30 PM", 0.375, ...) to ``base_date``."""

    if is_blank(value):
        return None
    text = str(value)
    midnight = datetime.combine(base_date, time())

    match = TIME_PATTERN.search(text)
    if match:
        hours = int(match.group(1))
        minutes = int(match.group(2))
        meridiem = match.group(4)
        if meridiem:
            meridiem = meridiem.upper()
            if meridiem == "PM" and hours != 12:
                hours += 12
            if meridiem == "AM" and hours == 12:
                hours = 0
        # timedelta lets "25:00" roll into the next day instead of failing
        return midnight + timedelta(hours=hours, minutes=minutes)

    try:
        serial = float(text)
    except ValueError:
        return None
    if not math.isfinite(serial):
        return None
    try:
        return midnight + timedelta(minutes=round_half_up(serial * MINUTES_PER_DAY))
    except OverflowError:
        return None


__all__ = [
    "parse_date",
    "parse_time",
    "round_half_up",
    "is_blank",
    "serial_to_date",
]
