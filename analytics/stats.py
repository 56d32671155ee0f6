from __future__ import annotations

from datetime import date
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from parsers.columns import ResolvedColumns, resolve_columns
from parsers.datetime_parser import is_blank, parse_date, parse_time, round_half_up

from .calendar import determine_status, expected_hours
from .models import (
    STATUS_HALF_DAY,
    STATUS_LEAVE,
    STATUS_PRESENT,
    STATUS_WEEKEND,
    AttendanceParseConfig,
    AttendanceRecord,
    DailyProductivity,
    DashboardStats,
    records_to_dicts,
)


def punch_text(value: Any) -> Optional[str]:
    """Raw punch as display text, or None when the cell is empty.

    Whitespace-only text counts as a punch that is present but unreadable.
    """

    if isinstance(value, str):
        return value or None
    if is_blank(value):
        return None
    return str(value)


def calculate_worked_hours(in_value: Any, out_value: Any, work_date: date) -> float:
    """Hours between the two punches, 0 when either is missing, unreadable or reversed."""

    in_at = parse_time(in_value, work_date)
    out_at = parse_time(out_value, work_date)
    if in_at is None or out_at is None:
        return 0.0
    hours = (out_at - in_at).total_seconds() / 3600
    return max(0.0, round_half_up(hours, 2))


def calculate_productivity(worked: float, expected: float) -> float:
    if expected > 0:
        return worked / expected * 100
    return 0.0


def build_attendance_record(
    row: Mapping[str, Any],
    columns: ResolvedColumns,
    running_name: str,
    config: AttendanceParseConfig,
) -> Tuple[str, Optional[AttendanceRecord]]:
    """Build one record from a raw row.

    Returns the (possibly updated) running employee name together with the
    record, or ``None`` in place of the record when the row has no usable date.
    """

    if columns.date is None:
        return running_name, None
    work_date = parse_date(row.get(columns.date), config.date_order)
    if work_date is None:
        return running_name, None

    if columns.name is not None and not is_blank(row.get(columns.name)):
        running_name = str(row[columns.name]).strip()

    in_value = row.get(columns.in_time) if columns.in_time is not None else None
    out_value = row.get(columns.out_time) if columns.out_time is not None else None
    in_time = punch_text(in_value)
    out_time = punch_text(out_value)

    worked = calculate_worked_hours(in_value, out_value, work_date)
    expected = expected_hours(work_date)
    status = determine_status(work_date, in_time is not None, out_time is not None)

    record = AttendanceRecord(
        date=work_date,
        employee_name=running_name or config.default_employee_name,
        in_time=in_time,
        out_time=out_time,
        worked_hours=worked,
        expected_hours=expected,
        status=status,
        productivity=calculate_productivity(worked, expected),
    )
    return running_name, record


def build_attendance_records_from_rows(
    rows: Iterable[Mapping[str, Any]],
    config: Optional[AttendanceParseConfig] = None,
) -> Tuple[List[AttendanceRecord], str]:
    """Fold rows left to right, carrying the last non-empty employee name forward.

    Returns the records in source order and the final employee name.
    """

    config = config or AttendanceParseConfig()
    running_name = ""
    records: List[AttendanceRecord] = []
    for row in rows:
        columns = resolve_columns(row.keys(), config.column_rules)
        running_name, record = build_attendance_record(row, columns, running_name, config)
        if record is not None:
            records.append(record)
    return records, running_name or config.default_employee_name


def aggregate_stats(records: Sequence[AttendanceRecord], leave_limit: int) -> DashboardStats:
    total_expected = sum(record.expected_hours for record in records)
    total_actual = sum(record.worked_hours for record in records)
    counts = {STATUS_PRESENT: 0, STATUS_LEAVE: 0, STATUS_WEEKEND: 0, STATUS_HALF_DAY: 0}
    for record in records:
        counts[record.status] += 1

    score = round_half_up(total_actual / total_expected * 100) if total_expected > 0 else 0
    return DashboardStats(
        total_expected_hours=round_half_up(total_expected, 1),
        total_actual_hours=round_half_up(total_actual, 1),
        leaves_used=counts[STATUS_LEAVE],
        leave_limit=leave_limit,
        productivity_score=score,
        present_days=counts[STATUS_PRESENT],
        leave_days=counts[STATUS_LEAVE],
        weekend_days=counts[STATUS_WEEKEND],
        half_days=counts[STATUS_HALF_DAY],
    )


def short_date_label(value: date) -> str:
    # "Jan 5"
    return f"{value:%b} {value.day}"


def daily_productivity(records: Iterable[AttendanceRecord]) -> List[DailyProductivity]:
    return [
        DailyProductivity(
            date=short_date_label(record.date),
            productivity=round_half_up(record.productivity),
            expected_hours=record.expected_hours,
            actual_hours=record.worked_hours,
        )
        for record in records
        if record.expected_hours > 0
    ]


def aggregate(
    records: Sequence[AttendanceRecord],
    leave_limit: int,
) -> Tuple[DashboardStats, List[DailyProductivity]]:
    """Summarise a date-sorted employee-month."""

    return aggregate_stats(records, leave_limit), daily_productivity(records)


def to_dataframe(records: Sequence[AttendanceRecord]) -> pd.DataFrame:
    columns = list(AttendanceRecord.__dataclass_fields__)
    if not records:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(records_to_dicts(records), columns=columns)


__all__ = [
    "aggregate",
    "aggregate_stats",
    "build_attendance_record",
    "build_attendance_records_from_rows",
    "calculate_productivity",
    "calculate_worked_hours",
    "daily_productivity",
    "punch_text",
    "short_date_label",
    "to_dataframe",
]
