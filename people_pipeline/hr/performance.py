"""Review statistics and comparative rankings: department-relative ratings and salary quantiles."""

import logging

import numpy as np
import pandas as pd

from people_pipeline.config import DEFAULT_CONFIG, PipelineConfig
from people_pipeline.exceptions import NotFound
from people_pipeline.hr.models import EmployeeID
from people_pipeline.hr.store import RecordStore, StoreSnapshot, parse_date_range
from people_pipeline.utils.transforms import full_name, merge_datasets
from people_pipeline.utils.types import DateLike

logger = logging.getLogger(__name__)

type PerformanceSummary = dict[str, str | int | float | None]

QUARTILES = 4

RANKED_COLUMNS = [
    "dept_id", "dept_name", "emp_id", "employee_name", "review_id", "review_date",
    "rating", "dept_avg_rating", "rating_vs_dept_avg", "dept_rank",
]
QUANTILE_COLUMNS = ["emp_id", "employee_name", "dept_id", "dept_name", "salary", "quartile", "percentile"]


def _named_employees(snapshot: StoreSnapshot) -> pd.DataFrame:
    employees = snapshot.employees
    named = employees[["emp_id", "dept_id", "salary"]].copy()
    named["employee_name"] = full_name(employees)
    return named.merge(snapshot.departments[["dept_id", "dept_name"]], on="dept_id", how="inner")


def _summarize(reviews: pd.DataFrame, delimiter: str) -> tuple[int, float | None, str]:
    ordered = reviews.sort_values(["review_date", "review_id"])
    comments = [c for c in ordered["comments"] if isinstance(c, str) and c]
    count = len(ordered)
    avg = round(float(ordered["rating"].mean()), 2) if count else None
    return count, avg, delimiter.join(comments)


def performance_summary(
    store: RecordStore,
    employee_id: EmployeeID,
    start_date: DateLike,
    end_date: DateLike,
    config: PipelineConfig | None = None,
) -> PerformanceSummary:
    """Review count, mean rating and joined comments for one employee over an inclusive date range.

    With no reviews in range, ``review_count`` is 0, ``avg_rating`` is None
    and ``all_comments`` is an empty string.
    """
    config = config or DEFAULT_CONFIG
    start, end = parse_date_range((start_date, end_date))
    snapshot = store.snapshot()

    employee = snapshot.employees[snapshot.employees["emp_id"] == employee_id]
    if employee.empty:
        raise NotFound("Employee", employee_id)

    reviews = snapshot.reviews
    in_range = reviews[
        (reviews["emp_id"] == employee_id)
        & (reviews["review_date"] >= pd.Timestamp(start))
        & (reviews["review_date"] <= pd.Timestamp(end))
    ]
    count, avg, comments = _summarize(in_range, config.comment_delimiter)

    return {
        "emp_id": employee_id,
        "employee_name": full_name(employee).iloc[0],
        "review_count": count,
        "avg_rating": avg,
        "all_comments": comments,
    }


def performance_summaries(
    store: RecordStore,
    start_date: DateLike,
    end_date: DateLike,
    config: PipelineConfig | None = None,
) -> pd.DataFrame:
    """``performance_summary`` for every employee, as one table."""
    config = config or DEFAULT_CONFIG
    start, end = parse_date_range((start_date, end_date))
    snapshot = store.snapshot()
    reviews = snapshot.reviews
    in_range = reviews[
        (reviews["review_date"] >= pd.Timestamp(start))
        & (reviews["review_date"] <= pd.Timestamp(end))
    ]

    rows = []
    for emp_id, name in zip(snapshot.employees["emp_id"], full_name(snapshot.employees)):
        count, avg, comments = _summarize(in_range[in_range["emp_id"] == emp_id], config.comment_delimiter)
        rows.append({
            "emp_id": int(emp_id),
            "employee_name": name,
            "review_count": count,
            "avg_rating": avg,
            "all_comments": comments,
        })

    result = pd.DataFrame(rows, columns=["emp_id", "employee_name", "review_count", "avg_rating", "all_comments"])
    logger.info("Summarized reviews for %d employees between %s and %s", len(result), start, end)
    return result.sort_values("emp_id").reset_index(drop=True)


def ranked_performance(store: RecordStore) -> pd.DataFrame:
    """One row per review, compared against the average rating of the employee's department.

    ``dept_rank`` is a competition rank by rating within the department:
    ratings 5, 5, 4, 3 rank 1, 1, 3, 4.
    """
    snapshot = store.snapshot()
    employees = _named_employees(snapshot).drop(columns=["salary"])
    rows = merge_datasets(snapshot.reviews, employees, on="emp_id", how="inner")
    if rows.empty:
        logger.info("No reviews to rank")
        return pd.DataFrame(columns=RANKED_COLUMNS)

    by_dept = rows.groupby("dept_id")["rating"]
    dept_avg = by_dept.transform("mean")
    rows["dept_avg_rating"] = dept_avg.round(2)
    rows["rating_vs_dept_avg"] = (rows["rating"] - dept_avg).round(2)
    rows["dept_rank"] = by_dept.rank(method="min", ascending=False).astype(int)

    rows = rows.sort_values(
        ["dept_name", "dept_rank", "employee_name", "review_date", "review_id"]
    ).reset_index(drop=True)

    logger.info(
        "Ranked %d reviews across %d departments", len(rows), rows["dept_id"].nunique()
    )
    return rows[RANKED_COLUMNS]


def _ntile(n: int, buckets: int) -> np.ndarray:
    """Bucket numbers for ``n`` ordered rows; earlier buckets take the remainder."""
    base, extra = divmod(n, buckets)
    sizes = [base + 1 if i < extra else base for i in range(buckets)]
    return np.repeat(np.arange(1, buckets + 1), sizes)


def salary_quantiles(store: RecordStore) -> pd.DataFrame:
    """Salary quartile and percentile rank of every employee, lowest salary first.

    Quartiles split the ordered employees into four groups as evenly as
    possible (group 1 lowest). Percentile is the share of the other employees
    earning strictly less, so tied salaries share a value.
    """
    snapshot = store.snapshot()
    ordered = (
        _named_employees(snapshot)
        .sort_values(["salary", "emp_id"])
        .reset_index(drop=True)
    )
    n = len(ordered)
    if n == 0:
        return pd.DataFrame(columns=QUANTILE_COLUMNS)

    ordered["quartile"] = _ntile(n, QUARTILES)
    lower = ordered["salary"].rank(method="min") - 1
    ordered["percentile"] = lower / (n - 1) if n > 1 else 0.0

    logger.info("Computed salary quantiles for %d employees", n)
    return ordered[QUANTILE_COLUMNS]
