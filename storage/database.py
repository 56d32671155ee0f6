"""SQLAlchemy engine, session factory and tables for stored employee-months."""
import logging
import os
from typing import Optional

from sqlalchemy import Column, Date, Float, ForeignKey, Integer, String, UniqueConstraint, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

DB_URL = os.getenv("ATTENDANCE_DB_URL", "sqlite:///attendance.db")

Base = declarative_base()


class EmployeeRow(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=True)

    def __repr__(self):
        return f"<EmployeeRow id={self.id} name={self.name!r}>"


class AttendanceRow(Base):
    __tablename__ = "attendance_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    month = Column(String(7), nullable=False)  # "YYYY-MM"
    year = Column(Integer, nullable=False)
    date = Column(Date, nullable=False)
    employee_name = Column(String(255), nullable=False)
    in_time = Column(String(64), nullable=True)
    out_time = Column(String(64), nullable=True)
    worked_hours = Column(Float, nullable=False)
    expected_hours = Column(Float, nullable=False)
    status = Column(String(20), nullable=False)
    productivity = Column(Float, nullable=False)

    def __repr__(self):
        return f"<AttendanceRow id={self.id} employee_id={self.employee_id} date={self.date}>"


class MonthlySummaryRow(Base):
    __tablename__ = "monthly_summaries"
    __table_args__ = (UniqueConstraint("employee_id", "month", "year", name="uq_summary_employee_month_year"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    month = Column(String(7), nullable=False)
    year = Column(Integer, nullable=False)
    total_expected_hours = Column(Float, nullable=False)
    total_actual_hours = Column(Float, nullable=False)
    leaves_used = Column(Integer, nullable=False)
    leave_limit = Column(Integer, nullable=False)
    productivity_score = Column(Integer, nullable=False)
    present_days = Column(Integer, nullable=False)
    leave_days = Column(Integer, nullable=False)
    weekend_days = Column(Integer, nullable=False)
    half_days = Column(Integer, nullable=False)


def create_db_engine(db_url: Optional[str] = None) -> Engine:
    """
    Create an engine and make sure the tables exist.

    Args:
        db_url: Database URL (uses ATTENDANCE_DB_URL / local sqlite if not provided)

    Returns:
        SQLAlchemy Engine instance
    """
    url = db_url or DB_URL
    logger.debug("Creating database engine: %s", url.split("@")[-1])
    engine = create_engine(url, future=True)
    Base.metadata.create_all(engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
