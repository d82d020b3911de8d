"""Salary audit trail: one immutable history entry per observed salary change."""

import logging
from datetime import datetime

from people_pipeline.exceptions import TransactionRequired
from people_pipeline.hr.models import EmployeeID, SalaryAmount, SalaryChange
from people_pipeline.hr.store import RecordStore

logger = logging.getLogger(__name__)

DEFAULT_REASON = "Salary Update"


def record_if_changed(
    store: RecordStore,
    employee_id: EmployeeID,
    old_salary: SalaryAmount,
    new_salary: SalaryAmount,
    reason: str,
    timestamp: datetime,
) -> SalaryChange | None:
    """Append a salary history entry when the salary actually moved.

    Must be called inside the store transaction that performs the salary
    mutation: a failed append rolls the mutation back with it, and a rolled
    back mutation takes its entry with it.
    """
    if not store.in_transaction:
        raise TransactionRequired("Salary audit must run inside the transaction that mutates the salary")

    if float(new_salary) == float(old_salary):
        logger.debug("Salary unchanged for employee %s, no audit entry", employee_id)
        return None

    change = store.append_salary_change(employee_id, old_salary, new_salary, timestamp, reason)
    logger.info(
        "Audited salary change #%d for employee %s: %.2f -> %.2f (%s)",
        change.history_id,
        employee_id,
        change.old_salary,
        change.new_salary,
        reason,
    )
    return change
