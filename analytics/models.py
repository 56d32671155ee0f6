from __future__ import annotations

from dataclasses import dataclass, asdict, field
from datetime import date
from typing import Any, Dict, List, Optional

from parsers.columns import DEFAULT_COLUMN_RULES, ColumnRule


STATUS_PRESENT = "Present"
STATUS_LEAVE = "Leave"
STATUS_HALF_DAY = "Half-Day"
STATUS_WEEKEND = "Weekend"

DEFAULT_EMPLOYEE_NAME = "Employee"
DEFAULT_LEAVE_LIMIT = 2


@dataclass(frozen=True)
class AttendanceRecord:
    """One employee's attendance for one calendar date."""

    date: date
    employee_name: str
    in_time: Optional[str]
    out_time: Optional[str]
    worked_hours: float
    expected_hours: float
    status: str
    productivity: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AttendanceRecord":
        return cls(**{name: data[name] for name in cls.__dataclass_fields__})


@dataclass
class DashboardStats:
    total_expected_hours: float
    total_actual_hours: float
    leaves_used: int
    leave_limit: int
    productivity_score: int
    present_days: int
    leave_days: int
    weekend_days: int
    half_days: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DashboardStats":
        return cls(**{name: data[name] for name in cls.__dataclass_fields__})


@dataclass
class DailyProductivity:
    date: str
    productivity: int
    expected_hours: float
    actual_hours: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ParsedResult:
    """Everything the dashboard needs for one employee-month."""

    records: List[AttendanceRecord]
    stats: DashboardStats
    daily_productivity: List[DailyProductivity]
    employee_name: str
    month: str

    @property
    def month_key(self) -> str:
        # storage key, e.g. "2024-01"
        return self.records[0].date.strftime("%Y-%m")

    @property
    def year(self) -> int:
        return self.records[0].date.year

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AttendanceParseConfig:
    """Policy values and header rules used while interpreting a sheet."""

    leave_limit: int = DEFAULT_LEAVE_LIMIT
    default_employee_name: str = DEFAULT_EMPLOYEE_NAME
    date_order: str = "DMY"  # positional order for "01/02/2024"-style text
    column_rules: List[ColumnRule] = field(default_factory=lambda: list(DEFAULT_COLUMN_RULES))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def records_to_dicts(records: List[AttendanceRecord]) -> List[Dict[str, Any]]:
    return [record.to_dict() for record in records]
