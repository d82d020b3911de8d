"""Normalize and clean HR records from raw HRIS exports."""

import logging

import pandas as pd

from people_pipeline.hr.models import EmployeeStatus
from people_pipeline.utils.transforms import normalize_columns

logger = logging.getLogger(__name__)

EMPLOYEE_COLUMN_ALIASES = {
    "employee_id": "emp_id",
    "department_id": "dept_id",
    "base_salary": "salary",
    "manager": "manager_id",
    "email_address": "email",
    "phone_number": "phone",
}
DEPARTMENT_COLUMN_ALIASES = {
    "department_id": "dept_id",
    "department_name": "dept_name",
    "name": "dept_name",
}
REVIEW_COLUMN_ALIASES = {
    "employee_id": "emp_id",
    "comment": "comments",
    "reviewer": "reviewer_id",
}


def _classify_status(raw_status) -> str:
    """Map raw status strings to canonical EmployeeStatus values."""
    if not isinstance(raw_status, str) or not raw_status.strip():
        return EmployeeStatus.ACTIVE.value
    normalized = raw_status.strip().lower().replace("-", "_").replace(" ", "_")
    match normalized:
        case "active" | "a" | "current" | "employed":
            return EmployeeStatus.ACTIVE.value
        case "inactive" | "i" | "suspended":
            return EmployeeStatus.INACTIVE.value
        case "on_leave" | "leave" | "loa":
            return EmployeeStatus.ON_LEAVE.value
        case "terminated" | "term" | "separated" | "resigned":
            return EmployeeStatus.TERMINATED.value
        case _:
            logger.warning("Unknown employee status: %r, defaulting to INACTIVE", raw_status)
            return EmployeeStatus.INACTIVE.value


def _normalize_name(name) -> str:
    """Title-case and strip whitespace from names."""
    return name.strip().title() if isinstance(name, str) else ""


def _clean_money(values: pd.Series) -> pd.Series:
    """Strip currency symbols, spaces and thousands separators."""
    if pd.api.types.is_numeric_dtype(values):
        return values.astype(float)
    cleaned = values.astype(str).str.replace(r"[^\d.\-]", "", regex=True)
    return pd.to_numeric(cleaned, errors="coerce")


def _optional_text(value) -> str | None:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    return str(value).strip() or None


def _column(df: pd.DataFrame, name: str) -> pd.Series:
    if name in df.columns:
        return df[name]
    return pd.Series([None] * len(df), index=df.index, dtype=object)


def normalize_departments(raw_df: pd.DataFrame) -> pd.DataFrame:
    df = normalize_columns(raw_df, DEPARTMENT_COLUMN_ALIASES)
    df["dept_name"] = df["dept_name"].astype(str).str.strip()
    df["location"] = _column(df, "location").map(_optional_text)
    df["budget"] = _clean_money(df["budget"])
    logger.info("Normalized %d department records", len(df))
    return df


def normalize_employee_records(raw_df: pd.DataFrame) -> pd.DataFrame:
    """Apply all cleaning and normalization steps to raw employee data."""
    df = normalize_columns(raw_df, EMPLOYEE_COLUMN_ALIASES)

    # Clean name fields
    df["first_name"] = df["first_name"].apply(_normalize_name)
    df["last_name"] = df["last_name"].apply(_normalize_name)

    df["status"] = _column(df, "status").apply(_classify_status)
    df["hire_date"] = pd.to_datetime(_column(df, "hire_date"), errors="coerce")
    df["manager_id"] = pd.to_numeric(_column(df, "manager_id"), errors="coerce").astype("Int64")

    # Salary cleanup: strip currency symbols and commas
    df["salary"] = _clean_money(df["salary"])

    df["email"] = _column(df, "email").map(_optional_text).map(
        lambda e: e.lower() if e is not None else None
    )
    df["phone"] = _column(df, "phone").map(_optional_text)

    logger.info("Normalized %d employee records", len(df))
    return df


def normalize_reviews(raw_df: pd.DataFrame) -> pd.DataFrame:
    df = normalize_columns(raw_df, REVIEW_COLUMN_ALIASES)
    df["review_date"] = pd.to_datetime(df["review_date"], errors="coerce")
    df["reviewer_id"] = pd.to_numeric(_column(df, "reviewer_id"), errors="coerce").astype("Int64")
    df["comments"] = _column(df, "comments").map(_optional_text)
    logger.info("Normalized %d performance review records", len(df))
    return df
