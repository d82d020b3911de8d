"""Salary changes: percentage raises, audited direct updates and the change history report."""

import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

import pandas as pd

from people_pipeline.config import DEFAULT_CONFIG, PipelineConfig
from people_pipeline.exceptions import InvalidArgument
from people_pipeline.hr.audit import DEFAULT_REASON, record_if_changed
from people_pipeline.hr.models import MAX_REASON_LENGTH, EmployeeID, SalaryAmount, SalaryChange
from people_pipeline.hr.store import RecordStore
from people_pipeline.utils.transforms import full_name, merge_datasets
from people_pipeline.utils.types import Percentage

logger = logging.getLogger(__name__)


def _minor_unit(decimals: int) -> Decimal:
    return Decimal(1).scaleb(-decimals)


def _to_decimal(value: Percentage | SalaryAmount, label: str) -> Decimal:
    if isinstance(value, bool):
        raise InvalidArgument(f"{label} must be a number, got {value!r}")
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise InvalidArgument(f"{label} must be a number, got {value!r}") from None
    if not number.is_finite():
        raise InvalidArgument(f"{label} must be finite, got {value!r}")
    return number


def _check_reason(reason: str) -> str:
    if not isinstance(reason, str) or not reason.strip():
        raise InvalidArgument("A reason is required for every salary change")
    reason = reason.strip()
    if len(reason) > MAX_REASON_LENGTH:
        raise InvalidArgument(f"Reason exceeds {MAX_REASON_LENGTH} characters")
    return reason


def compute_raise(
    old_salary: SalaryAmount,
    percentage: Percentage,
    decimals: int = DEFAULT_CONFIG.currency_decimals,
) -> SalaryAmount:
    """``old * (1 + percentage / 100)`` rounded half-up to the currency's minor unit."""
    old = _to_decimal(old_salary, "salary")
    pct = _to_decimal(percentage, "percentage")
    new = (old * (1 + pct / 100)).quantize(_minor_unit(decimals), rounding=ROUND_HALF_UP)
    if new < 0:
        raise InvalidArgument(
            f"A {pct}% change would take salary {old} below zero ({new})"
        )
    return float(new)


def apply_raise(
    store: RecordStore,
    employee_id: EmployeeID,
    percentage: Percentage,
    reason: str,
    *,
    timestamp: datetime | None = None,
    config: PipelineConfig | None = None,
) -> SalaryAmount:
    """Apply a percentage raise (negative for a cut) and audit it in one transaction.

    Returns the new salary. A change that rounds to the current salary
    writes nothing and produces no audit entry.
    """
    config = config or DEFAULT_CONFIG
    reason = _check_reason(reason)

    with store.transaction():
        employee = store.get_employee(employee_id)
        new_salary = compute_raise(employee.salary, percentage, config.currency_decimals)
        if new_salary != employee.salary:
            store.update_employee_salary(employee_id, new_salary)
        record_if_changed(
            store,
            employee_id,
            employee.salary,
            new_salary,
            reason,
            timestamp or store.now(),
        )

    logger.info(
        "Applied %s%% raise to employee %s: %.2f -> %.2f",
        percentage,
        employee_id,
        employee.salary,
        new_salary,
    )
    return new_salary


def set_salary(
    store: RecordStore,
    employee_id: EmployeeID,
    new_salary: SalaryAmount,
    reason: str = DEFAULT_REASON,
    *,
    timestamp: datetime | None = None,
    config: PipelineConfig | None = None,
) -> SalaryChange | None:
    """Overwrite a salary directly; audited exactly like a raise."""
    config = config or DEFAULT_CONFIG
    reason = _check_reason(reason)
    amount = _to_decimal(new_salary, "salary").quantize(
        _minor_unit(config.currency_decimals), rounding=ROUND_HALF_UP
    )

    with store.transaction():
        employee = store.get_employee(employee_id)
        updated = store.update_employee_salary(employee_id, float(amount))
        return record_if_changed(
            store,
            employee_id,
            employee.salary,
            updated.salary,
            reason,
            timestamp or store.now(),
        )


def salary_history(store: RecordStore, employee_id: EmployeeID | None = None) -> pd.DataFrame:
    """The salary audit trail, oldest entry first, with employee names attached."""
    snapshot = store.snapshot()
    history = snapshot.salary_history
    if employee_id is not None:
        history = history[history["emp_id"] == employee_id]

    names = snapshot.employees[["emp_id"]].copy()
    names["employee_name"] = full_name(snapshot.employees)

    report = merge_datasets(history, names, on="emp_id", how="left")
    report["change_amount"] = (report["new_salary"] - report["old_salary"]).round(2)
    report["change_pct"] = (
        report["change_amount"] / report["old_salary"].replace(0, float("nan")) * 100
    ).round(2)
    report = report.sort_values("history_id").reset_index(drop=True)

    logger.info("Built salary history with %d entries", len(report))
    return report[[
        "history_id", "emp_id", "employee_name", "old_salary", "new_salary",
        "change_amount", "change_pct", "change_date", "reason",
    ]]
