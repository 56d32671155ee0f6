"""Command line entry point: interpret one attendance sheet and print the month summary."""
from __future__ import annotations

import argparse
import logging
import sys

from analytics.exceptions import AttendanceParseError, EmptyInputError, NoValidRecordsError
from analytics.models import DEFAULT_LEAVE_LIMIT, AttendanceParseConfig, ParsedResult
from analytics.stats import to_dataframe
from parsers.datetime_parser import DATE_ORDERS
from parsers.excel_parser import AttendanceFileParser
from storage.repository import SqlAlchemyAttendanceRepository, save_parsed_result

logger = logging.getLogger(__name__)

USER_MESSAGES = {
    EmptyInputError: "The file has no data rows.",
    NoValidRecordsError: "The file has rows, but none of them carries a date we could read.",
}


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Summarise an employee's monthly attendance sheet",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py january.xlsx
  python main.py january.csv --date-order MDY --csv records.csv
  python main.py january.xlsx --db sqlite:///attendance.db
        """,
    )
    parser.add_argument("file", help="Attendance sheet (.xlsx, .xls or .csv)")
    parser.add_argument(
        "--leave-limit",
        type=int,
        default=DEFAULT_LEAVE_LIMIT,
        help=f"Allowed leave days per month (default: {DEFAULT_LEAVE_LIMIT})",
    )
    parser.add_argument(
        "--date-order",
        choices=sorted(DATE_ORDERS),
        default="DMY",
        help="Order of day/month/year in delimited date text such as 05/01/2024 (default: DMY)",
    )
    parser.add_argument("--db", metavar="URL", help="Store the month in this database (e.g. sqlite:///attendance.db)")
    parser.add_argument("--csv", metavar="OUT", help="Also write the daily records to this CSV file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def format_summary(result: ParsedResult) -> str:
    stats = result.stats
    lines = [
        f"{result.employee_name} - {result.month}",
        f"Expected hours: {stats.total_expected_hours}",
        f"Actual hours:   {stats.total_actual_hours}",
        f"Productivity:   {stats.productivity_score}%",
        f"Leaves used:    {stats.leaves_used}/{stats.leave_limit}",
        (
            f"Present {stats.present_days} / Half-day {stats.half_days} / "
            f"Leave {stats.leave_days} / Weekend {stats.weekend_days}"
        ),
        "",
    ]
    for day in result.daily_productivity:
        lines.append(
            f"{day.date:>7}  {day.actual_hours:5.2f}h / {day.expected_hours:4.1f}h  {day.productivity:4d}%"
        )
    return "\n".join(lines)


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = AttendanceParseConfig(leave_limit=args.leave_limit, date_order=args.date_order)
    try:
        result = AttendanceFileParser(config).read(args.file)
    except AttendanceParseError as exc:
        logger.error("Failed to process %s [%s]: %s", args.file, exc.code, exc)
        print(USER_MESSAGES.get(type(exc), str(exc)), file=sys.stderr)
        return 1

    print(format_summary(result))
    if args.csv:
        to_dataframe(result.records).to_csv(args.csv, index=False)
        logger.info("Wrote %d records to %s", len(result.records), args.csv)
    if args.db:
        employee, month, year = save_parsed_result(SqlAlchemyAttendanceRepository.from_url(args.db), result)
        logger.info("Stored %s %s for employee id %s", month, year, employee.id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
