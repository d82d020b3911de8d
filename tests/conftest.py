"""Shared fixtures: a fixed clock, the sample organisation and a small three-level forest."""

from datetime import date, datetime

import pytest

from people_pipeline.hr.models import Department, Employee, PerformanceReview
from people_pipeline.hr.sample import load_sample_store
from people_pipeline.hr.store import RecordStore

FIXED_NOW = datetime(2024, 6, 1, 9, 30)


def fixed_clock() -> datetime:
    return FIXED_NOW


FOREST_DEPARTMENTS = [
    Department(1, "Engineering", "Cape Town", 500_000),
    Department(2, "Sales", "Durban", 300_000),
    Department(3, "Research", "Pretoria", 100_000),
]

# Ada -> Ben -> {Dan, Eve}; Ada -> Cara -> Finn; Gus stands alone
FOREST_EMPLOYEES = [
    Employee(1, "Ada", "Root", 1, date(2018, 1, 1), 150_000),
    Employee(2, "Ben", "Lead", 1, date(2019, 1, 1), 120_000, manager_id=1),
    Employee(3, "Cara", "Lead", 2, date(2019, 6, 1), 110_000, manager_id=1),
    Employee(4, "Dan", "Dev", 1, date(2020, 1, 1), 90_000, manager_id=2),
    Employee(5, "Eve", "Dev", 1, date(2020, 6, 1), 95_000, manager_id=2),
    Employee(6, "Finn", "Rep", 2, date(2021, 1, 1), 70_000, manager_id=3),
    Employee(7, "Gus", "Solo", 2, date(2021, 6, 1), 60_000),
]

FOREST_REVIEWS = [
    PerformanceReview(1, 2, date(2024, 1, 10), 5, "Strong lead", reviewer_id=1),
    PerformanceReview(2, 4, date(2024, 2, 15), 5, "Shipped billing", reviewer_id=2),
    PerformanceReview(3, 5, date(2024, 3, 20), 4, "Solid", reviewer_id=2),
    PerformanceReview(4, 1, date(2024, 4, 5), 3, None),
    PerformanceReview(5, 3, date(2024, 2, 1), 4, "Good pipeline", reviewer_id=1),
    PerformanceReview(6, 6, date(2024, 2, 20), 2, "Missed quota", reviewer_id=3),
    PerformanceReview(7, 6, date(2024, 5, 10), 3, "Improving", reviewer_id=3),
]


@pytest.fixture
def empty_store():
    return RecordStore(fixed_clock)


@pytest.fixture
def sample_store():
    return load_sample_store(fixed_clock)


@pytest.fixture
def forest_store():
    store = RecordStore(fixed_clock)
    store.bulk_load(FOREST_DEPARTMENTS, FOREST_EMPLOYEES, FOREST_REVIEWS)
    return store


@pytest.fixture
def pair_store():
    """A (85000, no manager) managing B (75000)."""
    store = RecordStore(fixed_clock)
    store.bulk_load(
        [Department(1, "Head Office", "Jeppestown", 1_000_000)],
        [
            Employee(1, "A", "", 1, date(2020, 1, 15), 85_000),
            Employee(2, "B", "", 1, date(2020, 3, 20), 75_000, manager_id=1),
        ],
    )
    return store
