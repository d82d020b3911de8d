"""Review summaries, department-relative rankings and salary quantiles."""

from datetime import date

import pytest

from people_pipeline.config import PipelineConfig
from people_pipeline.exceptions import InvalidArgument, NotFound
from people_pipeline.hr.models import Department, Employee
from people_pipeline.hr.performance import (
    performance_summaries,
    performance_summary,
    ranked_performance,
    salary_quantiles,
)
from people_pipeline.hr.store import RecordStore


class TestPerformanceSummary:
    def test_all_reviews_in_range(self, forest_store):
        summary = performance_summary(forest_store, 6, "2024-01-01", "2024-12-31")
        assert summary["employee_name"] == "Finn Rep"
        assert summary["review_count"] == 2
        assert summary["avg_rating"] == 2.5
        assert summary["all_comments"] == "Missed quota | Improving"

    def test_range_bounds_are_inclusive(self, forest_store):
        summary = performance_summary(forest_store, 6, date(2024, 2, 20), date(2024, 2, 20))
        assert summary["review_count"] == 1
        assert summary["avg_rating"] == 2.0

    def test_no_reviews_in_range(self, forest_store):
        summary = performance_summary(forest_store, 6, "2023-01-01", "2023-12-31")
        assert summary["review_count"] == 0
        assert summary["avg_rating"] is None
        assert summary["all_comments"] == ""

    def test_missing_comments_are_skipped(self, forest_store):
        summary = performance_summary(forest_store, 1, "2024-01-01", "2024-12-31")
        assert summary["review_count"] == 1
        assert summary["all_comments"] == ""

    def test_custom_delimiter(self, forest_store):
        config = PipelineConfig(comment_delimiter="; ")
        summary = performance_summary(forest_store, 6, "2024-01-01", "2024-12-31", config)
        assert summary["all_comments"] == "Missed quota; Improving"

    def test_unknown_employee(self, forest_store):
        with pytest.raises(NotFound):
            performance_summary(forest_store, 404, "2024-01-01", "2024-12-31")

    def test_inverted_range(self, forest_store):
        with pytest.raises(InvalidArgument):
            performance_summary(forest_store, 6, "2024-12-31", "2024-01-01")

    def test_summaries_for_everyone(self, forest_store):
        table = performance_summaries(forest_store, "2024-01-01", "2024-12-31")
        assert table["emp_id"].tolist() == [1, 2, 3, 4, 5, 6, 7]
        assert table.set_index("emp_id").loc[7, "review_count"] == 0


class TestRankedPerformance:
    def test_competition_ranks_within_department(self, forest_store):
        ranked = ranked_performance(forest_store)
        engineering = ranked[ranked["dept_name"] == "Engineering"]
        assert engineering["rating"].tolist() == [5, 5, 4, 3]
        assert engineering["dept_rank"].tolist() == [1, 1, 3, 4]

    def test_department_average_is_partition_relative(self, forest_store):
        ranked = ranked_performance(forest_store)
        averages = ranked.groupby("dept_name")["dept_avg_rating"].unique()
        assert averages["Engineering"].tolist() == [4.25]
        assert averages["Sales"].tolist() == [3.0]

    def test_rating_versus_average(self, forest_store):
        ranked = ranked_performance(forest_store)
        sales = ranked[ranked["dept_name"] == "Sales"]
        assert sales["rating"].tolist() == [4, 3, 2]
        assert sales["rating_vs_dept_avg"].tolist() == [1.0, 0.0, -1.0]
        assert sales["dept_rank"].tolist() == [1, 2, 3]

    def test_one_row_per_review(self, forest_store):
        assert len(ranked_performance(forest_store)) == 7

    def test_no_reviews(self, sample_store):
        ranked = ranked_performance(sample_store)
        assert ranked.empty
        assert "dept_rank" in ranked.columns


class TestSalaryQuantiles:
    def test_quartiles_and_percentiles(self, forest_store):
        result = salary_quantiles(forest_store)
        assert result["salary"].tolist() == [60_000, 70_000, 90_000, 95_000, 110_000, 120_000, 150_000]
        assert result["quartile"].tolist() == [1, 1, 2, 2, 3, 3, 4]
        assert result["percentile"].iloc[0] == 0.0
        assert result["percentile"].iloc[-1] == 1.0
        assert result["percentile"].iloc[3] == pytest.approx(0.5)

    def test_lowest_ceiling_quarter_in_first_quartile(self, sample_store):
        result = salary_quantiles(sample_store)
        # ceil(6 / 4) == 2
        assert result["quartile"].tolist() == [1, 1, 2, 2, 3, 4]
        assert result["employee_name"].iloc[0] == "Sipho Mabaso"
        assert result["dept_name"].iloc[-1] == "DevOps"

    def test_tied_salaries_share_percentile(self):
        store = RecordStore()
        store.bulk_load(
            [Department(1, "Ops", None, 0)],
            [
                Employee(1, "W", "One", 1, date(2020, 1, 1), 50_000),
                Employee(2, "X", "Two", 1, date(2020, 1, 1), 50_000),
                Employee(3, "Y", "Three", 1, date(2020, 1, 1), 60_000),
                Employee(4, "Z", "Four", 1, date(2020, 1, 1), 70_000),
            ],
        )
        result = salary_quantiles(store)
        assert result["percentile"].tolist() == pytest.approx([0.0, 0.0, 2 / 3, 1.0])
        assert result["quartile"].tolist() == [1, 2, 3, 4]

    def test_single_employee(self):
        store = RecordStore()
        store.bulk_load([Department(1, "Ops", None, 0)], [Employee(1, "Solo", "Act", 1, salary=10)])
        result = salary_quantiles(store)
        assert result["quartile"].tolist() == [1]
        assert result["percentile"].tolist() == [0.0]

    def test_no_employees(self, empty_store):
        assert salary_quantiles(empty_store).empty
