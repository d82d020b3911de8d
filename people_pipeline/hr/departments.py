"""Department rollups: headcount, salary cost and budget remaining."""

import logging

import numpy as np
import pandas as pd

from people_pipeline.hr.store import RecordStore
from people_pipeline.utils.transforms import merge_datasets

logger = logging.getLogger(__name__)

STATS_COLUMNS = [
    "dept_id", "dept_name", "location", "employee_count", "total_salary_cost",
    "avg_salary", "manager_count", "budget", "budget_remaining",
]


def _aggregate_employees(employees: pd.DataFrame) -> pd.DataFrame:
    """Per-department counts and salary totals over the given employees."""
    if employees.empty:
        return pd.DataFrame({
            "dept_id": pd.Series(dtype="int64"),
            "employee_count": pd.Series(dtype="int64"),
            "total_salary_cost": pd.Series(dtype="float64"),
            "manager_count": pd.Series(dtype="int64"),
        })

    grouped = employees.assign(is_top_level=employees["manager_id"].isna())
    return (
        grouped
        .groupby("dept_id")
        .agg(
            employee_count=("emp_id", "count"),
            total_salary_cost=("salary", "sum"),
            manager_count=("is_top_level", "sum"),
        )
        .reset_index()
    )


def department_stats(store: RecordStore) -> pd.DataFrame:
    """One row per department, including departments with no employees.

    ``manager_count`` counts employees with no manager of their own.
    ``avg_salary`` is 0 for an empty department. ``budget_remaining`` may be
    negative when salary cost exceeds budget.
    """
    snapshot = store.snapshot()
    per_dept = _aggregate_employees(snapshot.employees)

    stats = merge_datasets(snapshot.departments, per_dept, on="dept_id", how="left")
    stats["employee_count"] = stats["employee_count"].fillna(0).astype(int)
    stats["manager_count"] = stats["manager_count"].fillna(0).astype(int)
    stats["total_salary_cost"] = stats["total_salary_cost"].fillna(0.0).astype(float).round(2)

    counts = stats["employee_count"].to_numpy()
    totals = stats["total_salary_cost"].to_numpy()
    stats["avg_salary"] = np.round(
        np.divide(totals, counts, out=np.zeros(len(stats)), where=counts > 0), 2
    )
    stats["budget_remaining"] = (stats["budget"] - stats["total_salary_cost"]).round(2)

    over_budget = stats[stats["budget_remaining"] < 0]
    if not over_budget.empty:
        logger.warning(
            "%d department(s) over budget: %s",
            len(over_budget),
            ", ".join(over_budget["dept_name"]),
        )

    stats = stats.sort_values("dept_id").reset_index(drop=True)
    logger.info("Computed stats for %d departments", len(stats))
    return stats[STATS_COLUMNS]
