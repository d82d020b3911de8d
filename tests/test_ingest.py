"""Loading HRIS CSV exports into a record store."""

import pandas as pd
import pytest

from people_pipeline.config import PipelineConfig
from people_pipeline.exceptions import InvalidArgument
from people_pipeline.hr import validate
from people_pipeline.hr.ingest import ingest_hris_data, normalize_exports, read_hris_exports, validate_exports
from people_pipeline.hr.models import EmployeeStatus
from people_pipeline.hr.transform import normalize_employee_records

DEPARTMENTS_CSV = """dept_id,dept_name,location,budget
1,Administrator,Jeppestown,1000000
2,Marketing,Newtown,"800,000"
"""

EMPLOYEES_CSV = """Employee ID,First Name,Last Name,Dept ID,Hire Date,Salary,Manager ID,Email,Phone,Status
1, thabo ,NKOSI,1,2020-01-15,"R 85,000",,Thabo.Nkosi@company.co.za,+27821234567,active
2,nomvula,dlamini,2,2020-03-20,"75,000.50",1,nomvula.dlamini@company.co.za,+27829876543,On Leave
"""

REVIEWS_CSV = """review_id,emp_id,review_date,rating,comments,reviewer_id
1,2,2024-02-01,4,Great campaign,1
2,2,2024-05-01,5,,1
"""


@pytest.fixture
def export_dir(tmp_path):
    (tmp_path / "departments.csv").write_text(DEPARTMENTS_CSV)
    (tmp_path / "employees.csv").write_text(EMPLOYEES_CSV)
    (tmp_path / "performance_reviews.csv").write_text(REVIEWS_CSV)
    return tmp_path


class TestIngest:
    def test_exports_load_into_store(self, export_dir):
        store = ingest_hris_data(export_dir)

        thabo = store.get_employee(1)
        assert (thabo.first_name, thabo.last_name) == ("Thabo", "Nkosi")
        assert thabo.salary == 85_000
        assert thabo.manager_id is None
        assert thabo.email == "thabo.nkosi@company.co.za"
        assert thabo.phone == "+27821234567"

        nomvula = store.get_employee(2)
        assert nomvula.salary == 75_000.50
        assert nomvula.manager_id == 1
        assert nomvula.status == EmployeeStatus.ON_LEAVE

        assert store.get_department(2).budget == 800_000
        assert store.list_reviews(employee_id=2)["rating"].tolist() == [4, 5]

    def test_reviews_export_is_optional(self, export_dir):
        (export_dir / "performance_reviews.csv").unlink()
        store = ingest_hris_data(export_dir)
        assert store.list_reviews().empty

    def test_missing_required_export(self, export_dir):
        (export_dir / "employees.csv").unlink()
        with pytest.raises(FileNotFoundError):
            ingest_hris_data(export_dir)

    def test_out_of_range_rating_fails_validation(self, export_dir):
        (export_dir / "performance_reviews.csv").write_text(REVIEWS_CSV.replace(",4,Great", ",9,Great"))
        with pytest.raises(InvalidArgument):
            ingest_hris_data(export_dir)

    def test_dangling_department_reported(self, export_dir):
        (export_dir / "employees.csv").write_text(EMPLOYEES_CSV.replace(",2,2020-03-20", ",7,2020-03-20"))
        outcomes = validate_exports(normalize_exports(read_hris_exports(export_dir)))
        assert outcomes["employees.dept_id"]["valid"] is False
        assert outcomes["employees"]["valid"] is True

    def test_domain_validate_reports_missing_directory(self, tmp_path):
        result = validate(PipelineConfig(data_dir=tmp_path / "absent"))
        assert result["status"] == "error"

    def test_domain_validate_counts_exports(self, export_dir):
        assert validate(PipelineConfig(data_dir=export_dir)) == {"status": "ok", "exports_available": 3}


class TestNormalize:
    def test_unknown_status_is_inactive(self):
        raw = pd.DataFrame([{
            "emp_id": 1, "first_name": "a", "last_name": "b", "dept_id": 1,
            "salary": 10.0, "status": "sabbatical",
        }])
        assert normalize_employee_records(raw)["status"].tolist() == ["INACTIVE"]

    def test_missing_optional_columns_are_filled(self):
        raw = pd.DataFrame([{"emp_id": 1, "first_name": "a", "last_name": "b", "dept_id": 1, "salary": 10}])
        df = normalize_employee_records(raw)
        assert df["status"].tolist() == ["ACTIVE"]
        assert df["email"].tolist() == [None]
        assert pd.isna(df["manager_id"].iloc[0])
