"""Department rollups."""

from people_pipeline.hr.compensation import apply_raise
from people_pipeline.hr.departments import department_stats


class TestDepartmentStats:
    def test_rollup_per_department(self, forest_store):
        stats = department_stats(forest_store).set_index("dept_id")

        engineering = stats.loc[1]
        assert engineering["employee_count"] == 4
        assert engineering["total_salary_cost"] == 455_000
        assert engineering["avg_salary"] == 113_750
        assert engineering["manager_count"] == 1
        assert engineering["budget_remaining"] == 45_000

        sales = stats.loc[2]
        assert sales["employee_count"] == 3
        assert sales["avg_salary"] == 80_000
        # Gus has no manager of his own; Cara reports to Ada in Engineering
        assert sales["manager_count"] == 1

    def test_empty_department_still_listed(self, forest_store):
        research = department_stats(forest_store).set_index("dept_id").loc[3]
        assert research["employee_count"] == 0
        assert research["total_salary_cost"] == 0
        assert research["avg_salary"] == 0
        assert research["manager_count"] == 0
        assert research["budget_remaining"] == research["budget"] == 100_000

    def test_over_budget_is_negative_not_an_error(self, forest_store):
        forest_store.update_department_budget(1, 400_000)
        engineering = department_stats(forest_store).set_index("dept_id").loc[1]
        assert engineering["budget_remaining"] == -55_000

    def test_reflects_latest_salaries(self, forest_store):
        apply_raise(forest_store, 7, 50, "promotion")
        sales = department_stats(forest_store).set_index("dept_id").loc[2]
        assert sales["total_salary_cost"] == 270_000

    def test_column_layout(self, sample_store):
        stats = department_stats(sample_store)
        assert list(stats.columns) == [
            "dept_id", "dept_name", "location", "employee_count", "total_salary_cost",
            "avg_salary", "manager_count", "budget", "budget_remaining",
        ]
        assert stats["employee_count"].tolist() == [1] * 6

    def test_no_departments(self, empty_store):
        assert department_stats(empty_store).empty
