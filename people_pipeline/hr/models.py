"""Entity records and pandera schemas for HR data validation."""

from dataclasses import dataclass, fields
from datetime import date, datetime
from enum import StrEnum

import pandera as pa
from pandera import Column, Check

type EmployeeID = int
type DepartmentID = int
type SalaryAmount = float

MAX_REASON_LENGTH = 100
MIN_RATING = 1
MAX_RATING = 5


class EmployeeStatus(StrEnum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ON_LEAVE = "ON_LEAVE"
    TERMINATED = "TERMINATED"


@dataclass(frozen=True)
class Department:
    dept_id: DepartmentID
    dept_name: str
    location: str | None = None
    budget: float = 0.0
    created_at: datetime | None = None
    last_modified: datetime | None = None


@dataclass(frozen=True)
class Employee:
    emp_id: EmployeeID
    first_name: str
    last_name: str
    dept_id: DepartmentID
    hire_date: date | None = None
    salary: SalaryAmount = 0.0
    manager_id: EmployeeID | None = None
    email: str | None = None
    phone: str | None = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class PerformanceReview:
    review_id: int
    emp_id: EmployeeID
    review_date: date
    rating: int
    comments: str | None = None
    reviewer_id: EmployeeID | None = None


@dataclass(frozen=True)
class SalaryChange:
    """One immutable entry of the salary audit trail."""

    history_id: int
    emp_id: EmployeeID
    old_salary: SalaryAmount
    new_salary: SalaryAmount
    change_date: datetime
    reason: str


def column_names(record_type: type) -> list[str]:
    """Column order of the DataFrame rendering of a record type."""
    return [f.name for f in fields(record_type)]


department_schema = pa.DataFrameSchema(
    {
        "dept_id": Column(int, unique=True),
        "dept_name": Column(str, Check.str_length(min_value=1, max_value=50)),
        "location": Column(str, Check.str_length(max_value=50), nullable=True),
        "budget": Column(float, Check.greater_than_or_equal_to(0)),
    },
    strict=False,
    coerce=True,
)


employee_schema = pa.DataFrameSchema(
    {
        "emp_id": Column(int, unique=True),
        "first_name": Column(str, Check.str_length(min_value=1, max_value=50)),
        "last_name": Column(str, Check.str_length(min_value=1, max_value=50)),
        "dept_id": Column(int),
        "hire_date": Column(pa.DateTime, nullable=True),
        "salary": Column(float, Check.greater_than_or_equal_to(0)),
        "manager_id": Column("Int64", nullable=True),
        "email": Column(str, Check.str_matches(r"^[\w.+-]+@[\w-]+\.[\w.]+$"), nullable=True),
        "phone": Column(str, Check.str_length(max_value=20), nullable=True),
        "status": Column(str, Check.isin([s.value for s in EmployeeStatus])),
    },
    strict=False,
    coerce=True,
)


review_schema = pa.DataFrameSchema(
    {
        "review_id": Column(int, unique=True),
        "emp_id": Column(int),
        "review_date": Column(pa.DateTime),
        "rating": Column(int, Check.in_range(MIN_RATING, MAX_RATING)),
        "comments": Column(str, nullable=True),
        "reviewer_id": Column("Int64", nullable=True),
    },
    strict=False,
    coerce=True,
)
