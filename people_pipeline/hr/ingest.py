"""Ingest HRIS exports (departments, employees, performance reviews) into a record store."""

import logging
from pathlib import Path

import pandas as pd

from people_pipeline.config import DEFAULT_CONFIG, PipelineConfig
from people_pipeline.exceptions import InvalidArgument
from people_pipeline.hr.models import (
    Department,
    Employee,
    EmployeeStatus,
    PerformanceReview,
    department_schema,
    employee_schema,
    review_schema,
)
from people_pipeline.hr.store import Clock, RecordStore
from people_pipeline.hr.transform import (
    normalize_departments,
    normalize_employee_records,
    normalize_reviews,
)
from people_pipeline.utils.io import read_export_file
from people_pipeline.utils.transforms import snake_case
from people_pipeline.utils.types import ValidationOutcome
from people_pipeline.utils.validators import (
    validate_dataframe,
    validate_referential_integrity,
    validate_unique,
)

logger = logging.getLogger(__name__)

type ExportTables = dict[str, pd.DataFrame]

EXPORT_FILES = {
    "departments": "departments.csv",
    "employees": "employees.csv",
    "performance_reviews": "performance_reviews.csv",
}
REQUIRED_EXPORTS = ("departments", "employees")

# Phone numbers like +27821234567 must not be parsed as integers
TEXT_COLUMNS = {"phone", "phone_number"}


def _value(v):
    """Missing cells (NaN, NaT, <NA>) as None."""
    if v is None or (not isinstance(v, str) and pd.isna(v)):
        return None
    return v


def _optional_int(v) -> int | None:
    v = _value(v)
    return None if v is None else int(v)


def _optional_date(v):
    v = _value(v)
    return None if v is None else pd.Timestamp(v).date()


def read_hris_exports(data_dir: Path, dry_run: bool = False) -> ExportTables:
    """Read the raw export CSVs; departments and employees are required."""
    if not data_dir.exists():
        raise FileNotFoundError(f"HRIS export directory missing: {data_dir}")

    tables: ExportTables = {}
    for name, filename in EXPORT_FILES.items():
        path = data_dir / filename
        if not path.exists():
            if name in REQUIRED_EXPORTS:
                raise FileNotFoundError(f"Required HRIS export missing: {path}")
            logger.warning("Optional export %s not found, continuing without it", filename)
            continue
        if dry_run:
            tables[name] = pd.DataFrame()
            continue
        logger.info("Reading HRIS export: %s", filename)
        header = read_export_file(path, nrows=0).columns
        text_dtypes = {col: "string" for col in header if snake_case(col) in TEXT_COLUMNS}
        tables[name] = read_export_file(path, dtype=text_dtypes)
    return tables


def normalize_exports(raw: ExportTables) -> ExportTables:
    tables = {
        "departments": normalize_departments(raw["departments"]),
        "employees": normalize_employee_records(raw["employees"]),
    }
    if "performance_reviews" in raw:
        tables["performance_reviews"] = normalize_reviews(raw["performance_reviews"])
    return tables


def validate_exports(tables: ExportTables) -> dict[str, ValidationOutcome]:
    """Schema and cross-table reference checks for normalized exports."""
    departments = tables["departments"]
    employees = tables["employees"]
    reviews = tables.get("performance_reviews")

    outcomes = {
        "departments": validate_dataframe(departments, department_schema),
        "employees": validate_dataframe(employees, employee_schema),
        "departments.dept_id": validate_unique(departments, ["dept_id"]),
        "employees.emp_id": validate_unique(employees, ["emp_id"]),
        "employees.dept_id": validate_referential_integrity(employees, departments, "dept_id", "dept_id"),
        "employees.manager_id": validate_referential_integrity(employees, employees, "manager_id", "emp_id"),
    }
    if reviews is not None:
        outcomes["performance_reviews"] = validate_dataframe(reviews, review_schema)
        outcomes["performance_reviews.review_id"] = validate_unique(reviews, ["review_id"])
        outcomes["performance_reviews.emp_id"] = validate_referential_integrity(
            reviews, employees, "emp_id", "emp_id"
        )
        outcomes["performance_reviews.reviewer_id"] = validate_referential_integrity(
            reviews, employees, "reviewer_id", "emp_id"
        )
    return outcomes


def build_store(tables: ExportTables, clock: Clock | None = None) -> RecordStore:
    """Convert normalized export rows to records and bulk-load them."""
    store = RecordStore(clock) if clock else RecordStore()

    departments = [
        Department(
            dept_id=int(row["dept_id"]),
            dept_name=row["dept_name"],
            location=_value(row.get("location")),
            budget=float(row["budget"]),
        )
        for row in tables["departments"].to_dict("records")
    ]
    employees = [
        Employee(
            emp_id=int(row["emp_id"]),
            first_name=row["first_name"],
            last_name=row["last_name"],
            dept_id=int(row["dept_id"]),
            hire_date=_optional_date(row.get("hire_date")),
            salary=float(row["salary"]),
            manager_id=_optional_int(row.get("manager_id")),
            email=_value(row.get("email")),
            phone=_value(row.get("phone")),
            status=EmployeeStatus(row["status"]),
        )
        for row in tables["employees"].to_dict("records")
    ]
    reviews = [
        PerformanceReview(
            review_id=int(row["review_id"]),
            emp_id=int(row["emp_id"]),
            review_date=_optional_date(row["review_date"]),
            rating=int(row["rating"]),
            comments=_value(row.get("comments")),
            reviewer_id=_optional_int(row.get("reviewer_id")),
        )
        for row in tables.get("performance_reviews", pd.DataFrame()).to_dict("records")
    ]

    store.bulk_load(departments, employees, reviews)
    return store


def ingest_hris_data(
    data_dir: Path | None = None,
    config: PipelineConfig | None = None,
    clock: Clock | None = None,
) -> RecordStore:
    """Read, normalize and validate the HRIS exports, then load them into a new store.

    Raises InvalidArgument listing every validation failure when the exports
    do not pass their schemas or reference checks.
    """
    config = config or DEFAULT_CONFIG
    data_dir = data_dir or config.data_dir

    tables = normalize_exports(read_hris_exports(data_dir))
    outcomes = validate_exports(tables)
    errors = [
        f"{name}: {error}"
        for name, outcome in outcomes.items()
        for error in outcome["errors"]
    ]
    if errors:
        for error in errors:
            logger.error("Export validation failed: %s", error)
        raise InvalidArgument(f"{len(errors)} validation error(s) in HRIS exports from {data_dir}")

    return build_store(tables, clock)
