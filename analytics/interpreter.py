"""Turn raw spreadsheet rows into one employee-month of attendance data."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from .exceptions import EmptyInputError, NoValidRecordsError
from .models import AttendanceParseConfig, ParsedResult
from .stats import aggregate, build_attendance_records_from_rows

logger = logging.getLogger(__name__)


def interpret_rows(
    rows: Sequence[Mapping[str, Any]],
    config: Optional[AttendanceParseConfig] = None,
) -> ParsedResult:
    """
    Interpret rows for a single employee-month.

    Args:
        rows: Rows in sheet order, each mapping header text to a cell value
        config: Parse policy; defaults are used when omitted

    Returns:
        ParsedResult with date-sorted records, stats and daily productivity

    Raises:
        EmptyInputError: rows is empty
        NoValidRecordsError: no row had a readable date
    """
    config = config or AttendanceParseConfig()
    rows = list(rows)
    if not rows:
        raise EmptyInputError()

    records, employee_name = build_attendance_records_from_rows(rows, config)
    skipped = len(rows) - len(records)
    if skipped:
        logger.debug("Skipped %d of %d rows without a readable date", skipped, len(rows))
    if not records:
        raise NoValidRecordsError()

    records = sorted(records, key=lambda record: record.date)
    stats, daily = aggregate(records, config.leave_limit)
    month = records[0].date.strftime("%B %Y")

    logger.info(
        "Interpreted %d records for %s (%s): productivity %d%%",
        len(records),
        employee_name,
        month,
        stats.productivity_score,
    )
    return ParsedResult(
        records=records,
        stats=stats,
        daily_productivity=daily,
        employee_name=employee_name,
        month=month,
    )
