from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Protocol, Sequence, Tuple

from sqlalchemy import delete, select
from sqlalchemy.orm import sessionmaker

from analytics.models import AttendanceRecord, DashboardStats, ParsedResult, records_to_dicts
from analytics.stats import daily_productivity

from .database import AttendanceRow, EmployeeRow, MonthlySummaryRow, create_db_engine, create_session_factory

logger = logging.getLogger(__name__)

RECORD_FIELDS = tuple(AttendanceRecord.__dataclass_fields__)
SUMMARY_FIELDS = tuple(DashboardStats.__dataclass_fields__)


@dataclass(frozen=True)
class Employee:
    id: int
    name: str
    email: Optional[str] = None


@dataclass(frozen=True)
class AvailableMonth:
    month: str
    year: int
    label: str


@dataclass
class EmployeeMonths:
    employee: Employee
    available_months: List[AvailableMonth] = field(default_factory=list)


def month_label(month_key: str) -> str:
    """Long label for a "YYYY-MM" key, e.g. "January 2024"."""
    return date.fromisoformat(f"{month_key}-01").strftime("%B %Y")


class AttendanceRepository(Protocol):
    def find_or_create_employee(self, name: str) -> Employee:
        raise NotImplementedError

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def replace_month(
        self,
        *,
        employee_id: int,
        month: str,
        year: int,
        records: Sequence[AttendanceRecord],
        stats: DashboardStats,
    ) -> int:
        """Drop whatever is stored for the key, then store ``records`` and ``stats``."""

        raise NotImplementedError

    def get_records(self, employee_id: int, month: str, year: int) -> List[AttendanceRecord]:
        raise NotImplementedError

    def get_summary(self, employee_id: int, month: str, year: int) -> Optional[DashboardStats]:
        raise NotImplementedError

    def list_employees(self) -> List[EmployeeMonths]:
        raise NotImplementedError


class SqlAlchemyAttendanceRepository(AttendanceRepository):
    """Stores employee-months in the tables of ``storage.database``."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @classmethod
    def from_url(cls, db_url: Optional[str] = None) -> "SqlAlchemyAttendanceRepository":
        return cls(create_session_factory(create_db_engine(db_url)))

    def find_or_create_employee(self, name: str) -> Employee:
        with self._session_factory.begin() as session:
            row = session.execute(select(EmployeeRow).where(EmployeeRow.name == name)).scalar_one_or_none()
            if row is None:
                row = EmployeeRow(name=name)
                session.add(row)
                session.flush()
                logger.info("Created employee %s (id=%s)", name, row.id)
            return Employee(id=row.id, name=row.name, email=row.email)

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        with self._session_factory() as session:
            row = session.get(EmployeeRow, employee_id)
            if row is None:
                return None
            return Employee(id=row.id, name=row.name, email=row.email)

    def replace_month(
        self,
        *,
        employee_id: int,
        month: str,
        year: int,
        records: Sequence[AttendanceRecord],
        stats: DashboardStats,
    ) -> int:
        year = int(year)
        with self._session_factory.begin() as session:
            removed = session.execute(
                delete(AttendanceRow).where(
                    AttendanceRow.employee_id == employee_id,
                    AttendanceRow.month == month,
                    AttendanceRow.year == year,
                )
            ).rowcount
            if removed:
                logger.info("Replacing %d stored records for employee %s %s", removed, employee_id, month)
            session.add_all(
                AttendanceRow(employee_id=employee_id, month=month, year=year, **row)
                for row in records_to_dicts(records)
            )

            summary = session.execute(
                select(MonthlySummaryRow).where(
                    MonthlySummaryRow.employee_id == employee_id,
                    MonthlySummaryRow.month == month,
                    MonthlySummaryRow.year == year,
                )
            ).scalar_one_or_none()
            if summary is None:
                summary = MonthlySummaryRow(employee_id=employee_id, month=month, year=year)
                session.add(summary)
            for name, value in stats.to_dict().items():
                setattr(summary, name, value)
        return len(records)

    def get_records(self, employee_id: int, month: str, year: int) -> List[AttendanceRecord]:
        query = (
            select(AttendanceRow)
            .where(
                AttendanceRow.employee_id == employee_id,
                AttendanceRow.month == month,
                AttendanceRow.year == int(year),
            )
            .order_by(AttendanceRow.date, AttendanceRow.id)
        )
        with self._session_factory() as session:
            rows = session.execute(query).scalars().all()
            return [
                AttendanceRecord.from_dict({name: getattr(row, name) for name in RECORD_FIELDS})
                for row in rows
            ]

    def get_summary(self, employee_id: int, month: str, year: int) -> Optional[DashboardStats]:
        query = select(MonthlySummaryRow).where(
            MonthlySummaryRow.employee_id == employee_id,
            MonthlySummaryRow.month == month,
            MonthlySummaryRow.year == int(year),
        )
        with self._session_factory() as session:
            row = session.execute(query).scalar_one_or_none()
            if row is None:
                return None
            return DashboardStats.from_dict({name: getattr(row, name) for name in SUMMARY_FIELDS})

    def list_employees(self) -> List[EmployeeMonths]:
        result = []
        with self._session_factory() as session:
            employees = session.execute(select(EmployeeRow).order_by(EmployeeRow.name)).scalars().all()
            for row in employees:
                summaries = session.execute(
                    select(MonthlySummaryRow.month, MonthlySummaryRow.year)
                    .where(MonthlySummaryRow.employee_id == row.id)
                    .order_by(MonthlySummaryRow.year.desc(), MonthlySummaryRow.month.desc())
                ).all()
                months = [AvailableMonth(month=month, year=year, label=month_label(month)) for month, year in summaries]
                employee = Employee(id=row.id, name=row.name, email=row.email)
                result.append(EmployeeMonths(employee=employee, available_months=months))
        return result


def save_parsed_result(repo: AttendanceRepository, result: ParsedResult) -> Tuple[Employee, str, int]:
    """Store one interpreted employee-month, replacing any earlier upload of it."""

    employee = repo.find_or_create_employee(result.employee_name)
    month, year = result.month_key, result.year
    count = repo.replace_month(
        employee_id=employee.id,
        month=month,
        year=year,
        records=result.records,
        stats=result.stats,
    )
    logger.info("Successfully processed %d attendance records for %s", count, employee.name)
    return employee, month, year


def load_parsed_result(
    repo: AttendanceRepository,
    employee_id: int,
    month: str,
    year: int,
) -> Optional[ParsedResult]:
    """Rebuild the dashboard payload for a stored employee-month, or None if absent."""

    summary = repo.get_summary(employee_id, month, year)
    employee = repo.get_employee(employee_id)
    if summary is None or employee is None:
        return None
    records = repo.get_records(employee_id, month, year)
    return ParsedResult(
        records=records,
        stats=summary,
        daily_productivity=daily_productivity(records),
        employee_name=employee.name,
        month=month_label(month),
    )


__all__ = [
    "AttendanceRepository",
    "AvailableMonth",
    "Employee",
    "EmployeeMonths",
    "SqlAlchemyAttendanceRepository",
    "load_parsed_result",
    "month_label",
    "save_parsed_result",
]
