"""In-memory record store for departments, employees, reviews and salary history.

The store is the only holder of mutable state. Writes go through
``transaction()``, which serialises writers on a re-entrant lock and restores
the pre-call tables if the block raises. Readers take a ``snapshot()`` so a
report never mixes state from before and after an in-flight write.
"""

import logging
import math
import threading
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import asdict, dataclass, replace
from datetime import datetime
from numbers import Integral

import pandas as pd

from people_pipeline.exceptions import InvalidArgument, NotFound, ReferentialIntegrityViolation
from people_pipeline.hr.models import (
    MAX_RATING,
    MIN_RATING,
    Department,
    DepartmentID,
    Employee,
    EmployeeID,
    EmployeeStatus,
    PerformanceReview,
    SalaryAmount,
    SalaryChange,
    column_names,
)
from people_pipeline.utils.types import DateRange, to_date

logger = logging.getLogger(__name__)

type Clock = Callable[[], datetime]

_DEPARTMENT_DTYPES = {"dept_id": "int64", "budget": "float64"}
_EMPLOYEE_DTYPES = {"emp_id": "int64", "dept_id": "int64", "salary": "float64", "manager_id": "Int64"}
_REVIEW_DTYPES = {"review_id": "int64", "emp_id": "int64", "rating": "int64", "reviewer_id": "Int64"}
_HISTORY_DTYPES = {"history_id": "int64", "emp_id": "int64", "old_salary": "float64", "new_salary": "float64"}


@dataclass(frozen=True)
class StoreSnapshot:
    """Point-in-time copy of every table, taken under the store lock."""

    departments: pd.DataFrame
    employees: pd.DataFrame
    reviews: pd.DataFrame
    salary_history: pd.DataFrame


@dataclass(frozen=True)
class _Checkpoint:
    departments: dict[DepartmentID, Department]
    employees: dict[EmployeeID, Employee]
    reviews: dict[int, PerformanceReview]
    salary_history: list[SalaryChange]
    next_history_id: int


def _frame(records: Iterable, record_type: type, dtypes: dict[str, str], date_cols: tuple[str, ...]) -> pd.DataFrame:
    df = pd.DataFrame([asdict(r) for r in records], columns=column_names(record_type))
    df = df.astype(dtypes)
    for col in date_cols:
        df[col] = pd.to_datetime(df[col])
    return df


def _check_amount(value, label: str) -> float:
    """Coerce a monetary value, rejecting NaN, infinities and negatives."""
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f"{label} is not a number: {value!r}") from None
    if not math.isfinite(amount) or amount < 0:
        raise InvalidArgument(f"{label} must be a non-negative amount, got {value!r}")
    return amount


def _check_rating(rating) -> int:
    if isinstance(rating, bool) or not isinstance(rating, Integral):
        raise InvalidArgument(f"rating must be an integer, got {rating!r}")
    rating = int(rating)
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidArgument(f"rating must be between {MIN_RATING} and {MAX_RATING}, got {rating}")
    return rating


def parse_date_range(date_range: DateRange):
    """Validate an inclusive (start, end) pair and return it as dates."""
    try:
        start, end = date_range
        start, end = to_date(start), to_date(end)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"Malformed date range {date_range!r}: {exc}") from exc
    if start > end:
        raise InvalidArgument(f"Date range start {start} is after end {end}")
    return start, end


class RecordStore:
    """Departments, employees, performance reviews and the salary audit trail."""

    def __init__(self, clock: Clock = datetime.now):
        self._clock = clock
        self._lock = threading.RLock()
        self._departments: dict[DepartmentID, Department] = {}
        self._employees: dict[EmployeeID, Employee] = {}
        self._reviews: dict[int, PerformanceReview] = {}
        self._salary_history: list[SalaryChange] = []
        self._next_history_id = 1
        self._depth = 0
        self._owner: int | None = None

    def now(self) -> datetime:
        return self._clock()

    # -- transactions -----------------------------------------------------

    @property
    def in_transaction(self) -> bool:
        """True when the calling thread owns the open transaction."""
        return self._depth > 0 and self._owner == threading.get_ident()

    @contextmanager
    def transaction(self) -> Iterator["RecordStore"]:
        """Atomic unit of work; nested calls join the outermost transaction."""
        with self._lock:
            if self.in_transaction:
                yield self
                return

            checkpoint = self._checkpoint()
            self._depth, self._owner = 1, threading.get_ident()
            try:
                yield self
            except BaseException:
                self._restore(checkpoint)
                logger.warning("Store transaction rolled back")
                raise
            finally:
                self._depth, self._owner = 0, None

    def _checkpoint(self) -> _Checkpoint:
        return _Checkpoint(
            departments=dict(self._departments),
            employees=dict(self._employees),
            reviews=dict(self._reviews),
            salary_history=list(self._salary_history),
            next_history_id=self._next_history_id,
        )

    def _restore(self, checkpoint: _Checkpoint) -> None:
        self._departments = checkpoint.departments
        self._employees = checkpoint.employees
        self._reviews = checkpoint.reviews
        self._salary_history = checkpoint.salary_history
        self._next_history_id = checkpoint.next_history_id

    # -- reads ------------------------------------------------------------

    def get_employee(self, emp_id: EmployeeID) -> Employee:
        with self._lock:
            try:
                return self._employees[emp_id]
            except KeyError:
                raise NotFound("Employee", emp_id) from None

    def get_department(self, dept_id: DepartmentID) -> Department:
        with self._lock:
            try:
                return self._departments[dept_id]
            except KeyError:
                raise NotFound("Department", dept_id) from None

    def list_departments(self) -> pd.DataFrame:
        with self._lock:
            return self._department_frame()

    def list_employees(
        self,
        status: EmployeeStatus | str | None = None,
        dept_id: DepartmentID | None = None,
    ) -> pd.DataFrame:
        with self._lock:
            records = [
                e for e in self._employees.values()
                if (status is None or e.status == status)
                and (dept_id is None or e.dept_id == dept_id)
            ]
            return self._employee_frame(records)

    def list_reviews(
        self,
        employee_id: EmployeeID | None = None,
        date_range: DateRange | None = None,
    ) -> pd.DataFrame:
        """Reviews ordered by review date, optionally filtered by employee and inclusive date range."""
        bounds = parse_date_range(date_range) if date_range is not None else None
        with self._lock:
            records = [
                r for r in self._reviews.values()
                if (employee_id is None or r.emp_id == employee_id)
                and (bounds is None or bounds[0] <= to_date(r.review_date) <= bounds[1])
            ]
            records.sort(key=lambda r: (to_date(r.review_date), r.review_id))
            return self._review_frame(records)

    def list_salary_changes(self, employee_id: EmployeeID | None = None) -> pd.DataFrame:
        with self._lock:
            records = [
                c for c in self._salary_history
                if employee_id is None or c.emp_id == employee_id
            ]
            return self._history_frame(records)

    def snapshot(self) -> StoreSnapshot:
        """Consistent copy of all four tables for one report computation."""
        with self._lock:
            return StoreSnapshot(
                departments=self._department_frame(),
                employees=self._employee_frame(),
                reviews=self._review_frame(),
                salary_history=self._history_frame(),
            )

    def _department_frame(self, records: Iterable[Department] | None = None) -> pd.DataFrame:
        records = self._departments.values() if records is None else records
        return _frame(records, Department, _DEPARTMENT_DTYPES, ("created_at", "last_modified"))

    def _employee_frame(self, records: Iterable[Employee] | None = None) -> pd.DataFrame:
        records = self._employees.values() if records is None else records
        df = _frame(records, Employee, _EMPLOYEE_DTYPES, ("hire_date",))
        df["status"] = df["status"].astype(str)
        return df

    def _review_frame(self, records: Iterable[PerformanceReview] | None = None) -> pd.DataFrame:
        records = self._reviews.values() if records is None else records
        return _frame(records, PerformanceReview, _REVIEW_DTYPES, ("review_date",))

    def _history_frame(self, records: Iterable[SalaryChange] | None = None) -> pd.DataFrame:
        records = self._salary_history if records is None else records
        return _frame(records, SalaryChange, _HISTORY_DTYPES, ("change_date",))

    # -- administrative writes -------------------------------------------

    def add_department(self, department: Department) -> Department:
        with self.transaction():
            department = self._validate_department(department)
            self._departments[department.dept_id] = department
            return department

    def add_employee(self, employee: Employee) -> Employee:
        with self.transaction():
            employee = self._validate_employee(employee, set(self._employees))
            self._employees[employee.emp_id] = employee
            return employee

    def add_review(self, review: PerformanceReview) -> PerformanceReview:
        with self.transaction():
            review = self._validate_review(review)
            self._reviews[review.review_id] = review
            return review

    def bulk_load(
        self,
        departments: Iterable[Department] = (),
        employees: Iterable[Employee] = (),
        reviews: Iterable[PerformanceReview] = (),
    ) -> None:
        """Load many records at once; manager references may point forward within the batch.

        Cycles in the incoming manager references are not rejected here.
        """
        employees = list(employees)
        with self.transaction():
            for department in departments:
                self.add_department(department)

            known = set(self._employees) | {e.emp_id for e in employees}
            for employee in employees:
                employee = self._validate_employee(employee, known)
                self._employees[employee.emp_id] = employee

            for review in reviews:
                self.add_review(review)

        logger.info(
            "Loaded store: %d departments, %d employees, %d reviews",
            len(self._departments),
            len(self._employees),
            len(self._reviews),
        )

    def update_employee_manager(self, emp_id: EmployeeID, manager_id: EmployeeID | None) -> Employee:
        """Reassign a reporting line. Cycle checks are left to hierarchy resolution."""
        with self.transaction():
            employee = self.get_employee(emp_id)
            if manager_id is not None and manager_id not in self._employees:
                raise ReferentialIntegrityViolation("Employee", "manager_id", manager_id)
            employee = replace(employee, manager_id=manager_id)
            self._employees[emp_id] = employee
            return employee

    def update_department_budget(self, dept_id: DepartmentID, budget: float) -> Department:
        with self.transaction():
            department = self.get_department(dept_id)
            department = replace(
                department,
                budget=_check_amount(budget, "budget"),
                last_modified=self.now(),
            )
            self._departments[dept_id] = department
            return department

    # -- salary writes ----------------------------------------------------

    def update_employee_salary(self, emp_id: EmployeeID, new_salary: SalaryAmount) -> Employee:
        """Overwrite an employee's salary. Callers pair this with an audit entry."""
        with self.transaction():
            employee = self.get_employee(emp_id)
            employee = replace(employee, salary=_check_amount(new_salary, "salary"))
            self._employees[emp_id] = employee
            return employee

    def append_salary_change(
        self,
        emp_id: EmployeeID,
        old_salary: SalaryAmount,
        new_salary: SalaryAmount,
        change_date: datetime,
        reason: str,
    ) -> SalaryChange:
        """Append one audit entry; the history has no update or delete path."""
        with self.transaction():
            if emp_id not in self._employees:
                raise ReferentialIntegrityViolation("SalaryChange", "emp_id", emp_id)
            change = SalaryChange(
                history_id=self._next_history_id,
                emp_id=emp_id,
                old_salary=_check_amount(old_salary, "old_salary"),
                new_salary=_check_amount(new_salary, "new_salary"),
                change_date=change_date,
                reason=reason,
            )
            self._salary_history.append(change)
            self._next_history_id += 1
            return change

    # -- validation -------------------------------------------------------

    def _validate_department(self, department: Department) -> Department:
        if department.dept_id in self._departments:
            raise InvalidArgument(f"Duplicate department id: {department.dept_id}")
        if not isinstance(department.dept_name, str) or not department.dept_name.strip():
            raise InvalidArgument(f"Department {department.dept_id} needs a name")
        stamp = self.now()
        return replace(
            department,
            budget=_check_amount(department.budget, "budget"),
            created_at=department.created_at or stamp,
            last_modified=department.last_modified or stamp,
        )

    def _validate_employee(self, employee: Employee, known_employees: set[EmployeeID]) -> Employee:
        if employee.emp_id in self._employees:
            raise InvalidArgument(f"Duplicate employee id: {employee.emp_id}")
        if employee.dept_id not in self._departments:
            raise ReferentialIntegrityViolation("Employee", "dept_id", employee.dept_id)
        if employee.manager_id is not None and employee.manager_id not in known_employees:
            raise ReferentialIntegrityViolation("Employee", "manager_id", employee.manager_id)
        try:
            status = EmployeeStatus(employee.status)
        except ValueError:
            raise InvalidArgument(f"Unknown employee status: {employee.status!r}") from None
        return replace(employee, salary=_check_amount(employee.salary, "salary"), status=status)

    def _validate_review(self, review: PerformanceReview) -> PerformanceReview:
        if review.review_id in self._reviews:
            raise InvalidArgument(f"Duplicate review id: {review.review_id}")
        try:
            review_date = to_date(review.review_date)
        except (TypeError, ValueError):
            raise InvalidArgument(f"review_date is not a date: {review.review_date!r}") from None
        review = replace(review, review_date=review_date, rating=_check_rating(review.rating))
        if review.emp_id not in self._employees:
            raise ReferentialIntegrityViolation("PerformanceReview", "emp_id", review.emp_id)
        if review.reviewer_id is not None and review.reviewer_id not in self._employees:
            raise ReferentialIntegrityViolation("PerformanceReview", "reviewer_id", review.reviewer_id)
        return review
