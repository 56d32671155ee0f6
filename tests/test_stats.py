from __future__ import annotations

import unittest
from datetime import date

from analytics.models import AttendanceParseConfig, AttendanceRecord
from analytics.stats import (
    aggregate,
    aggregate_stats,
    build_attendance_record,
    build_attendance_records_from_rows,
    calculate_worked_hours,
    daily_productivity,
    to_dataframe,
)
from parsers.columns import resolve_columns


def make_record(day: date, worked: float, expected: float, status: str) -> AttendanceRecord:
    productivity = worked / expected * 100 if expected > 0 else 0.0
    return AttendanceRecord(
        date=day,
        employee_name="Asha",
        in_time="09:00" if worked else None,
        out_time="17:30" if worked else None,
        worked_hours=worked,
        expected_hours=expected,
        status=status,
        productivity=productivity,
    )


class BuildAttendanceRecordTest(unittest.TestCase):
    def setUp(self) -> None:
        self.config = AttendanceParseConfig()

    def build(self, row, running_name=""):
        columns = resolve_columns(row.keys(), self.config.column_rules)
        return build_attendance_record(row, columns, running_name, self.config)

    def test_full_weekday(self) -> None:
        _, record = self.build({"Date": "2024-01-01", "In": "09:00", "Out": "17:30"})
        self.assertEqual(record.date, date(2024, 1, 1))
        self.assertEqual(record.worked_hours, 8.5)
        self.assertEqual(record.expected_hours, 8.5)
        self.assertEqual(record.status, "Present")
        self.assertEqual(record.productivity, 100.0)
        self.assertEqual(record.employee_name, "Employee")

    def test_saturday_without_punches_is_leave(self) -> None:
        _, record = self.build({"Date": "2024-01-06"})
        self.assertEqual(record.expected_hours, 4.0)
        self.assertEqual(record.status, "Leave")
        self.assertEqual(record.worked_hours, 0.0)
        self.assertIsNone(record.in_time)
        self.assertIsNone(record.out_time)

    def test_saturday_with_punches_is_half_day(self) -> None:
        _, record = self.build({"Date": "2024-01-06", "In Time": "9:00 AM", "Out Time": "1:00 PM"})
        self.assertEqual(record.status, "Half-Day")
        self.assertEqual(record.worked_hours, 4.0)
        self.assertEqual(record.productivity, 100.0)

    def test_sunday_is_weekend(self) -> None:
        _, record = self.build({"Date": "2024-01-07", "In": "10:00", "Out": "12:00"})
        self.assertEqual(record.status, "Weekend")
        self.assertEqual(record.expected_hours, 0.0)
        self.assertEqual(record.worked_hours, 2.0)
        self.assertEqual(record.productivity, 0.0)

    def test_out_before_in_clamps_to_zero(self) -> None:
        _, record = self.build({"Date": "2024-01-02", "In": "17:00", "Out": "09:00"})
        self.assertEqual(record.worked_hours, 0.0)
        self.assertEqual(record.status, "Present")

    def test_unreadable_punch_keeps_presence_status(self) -> None:
        _, record = self.build({"Date": "2024-01-02", "In": "late", "Out": "18:00"})
        self.assertEqual(record.worked_hours, 0.0)
        self.assertEqual(record.status, "Present")
        self.assertEqual(record.in_time, "late")
        self.assertEqual(record.productivity, 0.0)

    def test_whitespace_punch_counts_as_present(self) -> None:
        _, record = self.build({"Date": "2024-01-02", "In": " ", "Out": "17:30"})
        self.assertEqual(record.status, "Present")
        self.assertEqual(record.in_time, " ")
        self.assertEqual(record.worked_hours, 0.0)

    def test_empty_text_punch_is_absent(self) -> None:
        _, record = self.build({"Date": "2024-01-02", "In": "", "Out": "17:30"})
        self.assertEqual(record.status, "Leave")
        self.assertIsNone(record.in_time)

    def test_missing_date_column_skips_row(self) -> None:
        running_name, record = self.build({"Name": "Asha", "In": "09:00"}, running_name="Ravi")
        self.assertIsNone(record)
        self.assertEqual(running_name, "Ravi")

    def test_unreadable_date_skips_without_touching_name(self) -> None:
        running_name, record = self.build({"Date": "Total", "Name": "Summary"}, running_name="Ravi")
        self.assertIsNone(record)
        self.assertEqual(running_name, "Ravi")

    def test_name_cell_updates_running_name(self) -> None:
        running_name, record = self.build({"Date": "2024-01-02", "Employee Name": " Asha "}, running_name="Ravi")
        self.assertEqual(running_name, "Asha")
        self.assertEqual(record.employee_name, "Asha")

    def test_punch_values_are_stringified(self) -> None:
        _, record = self.build({"Date": "2024-01-02", "In": 0.375, "Out": 0.75})
        self.assertEqual(record.in_time, "0.375")
        self.assertEqual(record.out_time, "0.75")
        self.assertEqual(record.worked_hours, 9.0)

    def test_worked_hours_rounding(self) -> None:
        self.assertEqual(calculate_worked_hours("09:00", "17:20", date(2024, 1, 2)), 8.33)
        self.assertEqual(calculate_worked_hours("09:00", None, date(2024, 1, 2)), 0.0)


class BuildRecordsFromRowsTest(unittest.TestCase):
    def test_name_carries_forward(self) -> None:
        rows = [
            {"Name": None, "Date": "2024-01-01", "In": "09:00", "Out": "17:30"},
            {"Name": "Asha", "Date": "2024-01-02", "In": "09:00", "Out": "17:30"},
            {"Name": None, "Date": "2024-01-03", "In": "09:00", "Out": "17:30"},
            {"Name": "", "Date": "2024-01-04", "In": None, "Out": None},
            {"Name": "Ravi", "Date": "2024-01-05", "In": "09:00", "Out": "17:30"},
        ]
        records, employee_name = build_attendance_records_from_rows(rows)
        self.assertEqual(
            [record.employee_name for record in records],
            ["Employee", "Asha", "Asha", "Asha", "Ravi"],
        )
        self.assertEqual(employee_name, "Ravi")

    def test_default_name_from_config(self) -> None:
        config = AttendanceParseConfig(default_employee_name="Unknown")
        records, employee_name = build_attendance_records_from_rows([{"Date": "2024-01-01"}], config)
        self.assertEqual(records[0].employee_name, "Unknown")
        self.assertEqual(employee_name, "Unknown")

    def test_heterogeneous_rows(self) -> None:
        rows = [
            {"Attendance Report": "March", "Unnamed: 1": None},
            {"Date": "2024-01-02", "In": "09:00", "Out": "17:30"},
            {"Day": "2024-01-03", "Punch In": "08:30", "Punch Out": "17:00"},
        ]
        records, _ = build_attendance_records_from_rows(rows)
        self.assertEqual([record.date for record in records], [date(2024, 1, 2), date(2024, 1, 3)])
        self.assertEqual(records[1].worked_hours, 8.5)


class AggregateTest(unittest.TestCase):
    def setUp(self) -> None:
        self.records = [
            make_record(date(2024, 1, 1), 8.5, 8.5, "Present"),
            make_record(date(2024, 1, 2), 4.25, 8.5, "Present"),
            make_record(date(2024, 1, 3), 0.0, 8.5, "Leave"),
            make_record(date(2024, 1, 6), 4.0, 4.0, "Half-Day"),
            make_record(date(2024, 1, 7), 0.0, 0.0, "Weekend"),
        ]

    def test_stats(self) -> None:
        stats = aggregate_stats(self.records, leave_limit=2)
        self.assertEqual(stats.total_expected_hours, 29.5)
        self.assertEqual(stats.total_actual_hours, 16.8)
        self.assertEqual(stats.productivity_score, 57)
        self.assertEqual(stats.present_days, 2)
        self.assertEqual(stats.leave_days, 1)
        self.assertEqual(stats.leaves_used, 1)
        self.assertEqual(stats.half_days, 1)
        self.assertEqual(stats.weekend_days, 1)
        self.assertEqual(stats.leave_limit, 2)

    def test_status_counts_cover_every_record(self) -> None:
        stats = aggregate_stats(self.records, leave_limit=2)
        total = stats.present_days + stats.leave_days + stats.weekend_days + stats.half_days
        self.assertEqual(total, len(self.records))

    def test_leave_limit_is_passed_through(self) -> None:
        self.assertEqual(aggregate_stats(self.records, leave_limit=5).leave_limit, 5)

    def test_score_rounds_half_up(self) -> None:
        stats = aggregate_stats([make_record(date(2024, 1, 6), 2.5, 4.0, "Half-Day")], leave_limit=2)
        self.assertEqual(stats.productivity_score, 63)

    def test_only_weekend(self) -> None:
        stats = aggregate_stats([make_record(date(2024, 1, 7), 0.0, 0.0, "Weekend")], leave_limit=2)
        self.assertEqual(stats.productivity_score, 0)
        self.assertEqual(stats.total_expected_hours, 0)

    def test_daily_productivity_skips_weekends(self) -> None:
        daily = daily_productivity(self.records)
        self.assertEqual([d.date for d in daily], ["Jan 1", "Jan 2", "Jan 3", "Jan 6"])
        self.assertEqual([d.productivity for d in daily], [100, 50, 0, 100])
        self.assertEqual(daily[1].expected_hours, 8.5)
        self.assertEqual(daily[1].actual_hours, 4.25)

    def test_aggregate_returns_both(self) -> None:
        stats, daily = aggregate(self.records, leave_limit=3)
        self.assertEqual(stats.leave_limit, 3)
        self.assertEqual(len(daily), 4)

    def test_to_dataframe(self) -> None:
        df = to_dataframe(self.records)
        self.assertEqual(len(df), 5)
        self.assertIn("worked_hours", df.columns)
        self.assertEqual(list(to_dataframe([]).columns), list(df.columns))


if __name__ == "__main__":
    unittest.main()
