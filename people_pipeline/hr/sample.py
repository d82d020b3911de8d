"""Bundled sample organisation for demos and smoke runs."""

from datetime import date

from people_pipeline.hr.models import Department, Employee
from people_pipeline.hr.store import Clock, RecordStore

SAMPLE_DEPARTMENTS = [
    Department(1, "Administrator", "Jeppestown", 1_000_000),
    Department(2, "Marketing", "Newtown", 800_000),
    Department(3, "Sales", "Braamfontein", 900_000),
    Department(4, "Operator", "East gate", 600_000),
    Department(5, "DevOps", "Droonfontein", 1_200_000),
    Department(6, "Designer", "Hillbrow", 700_000),
]

SAMPLE_EMPLOYEES = [
    Employee(1, "Thabo", "Nkosi", 1, date(2020, 1, 15), 85_000, None,
             "thabo.nkosi@company.co.za", "+27821234567"),
    Employee(2, "Nomvula", "Dlamini", 2, date(2020, 3, 20), 75_000, 1,
             "nomvula.dlamini@company.co.za", "+27829876543"),
    Employee(3, "Sipho", "Mabaso", 3, date(2021, 2, 10), 65_000, 1,
             "sipho.mabaso@company.co.za", "+27823456789"),
    Employee(4, "Lesego", "Mokoena", 4, date(2021, 6, 1), 70_000, 1,
             "lesego.mokoena@company.co.za", "+27827654321"),
    Employee(5, "Tumelo", "Khumalo", 5, date(2021, 8, 15), 90_000, 1,
             "tumelo.khumalo@company.co.za", "+27825678901"),
    Employee(6, "Lindiwe", "Zulu", 6, date(2022, 1, 10), 68_000, 1,
             "lindiwe.zulu@company.co.za", "+27828901234"),
]


def load_sample_store(clock: Clock | None = None) -> RecordStore:
    """A store holding the six sample departments and their employees."""
    store = RecordStore(clock) if clock else RecordStore()
    store.bulk_load(SAMPLE_DEPARTMENTS, SAMPLE_EMPLOYEES)
    return store
