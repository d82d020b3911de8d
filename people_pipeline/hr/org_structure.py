"""Org hierarchy resolution — reporting paths, depth and span-of-control metrics."""

import logging
from collections import defaultdict

import pandas as pd

from people_pipeline.config import DEFAULT_CONFIG, PipelineConfig
from people_pipeline.exceptions import CycleDetected
from people_pipeline.hr.models import EmployeeID
from people_pipeline.hr.store import RecordStore
from people_pipeline.utils.transforms import full_name

logger = logging.getLogger(__name__)

type Adjacency = dict[EmployeeID, list[EmployeeID]]
type ManagerChain = list[EmployeeID]

HIERARCHY_COLUMNS = [
    "emp_id", "employee_name", "dept_id", "manager_id",
    "depth", "path", "direct_reports", "total_reports",
]


def _build_adjacency(employees: pd.DataFrame) -> Adjacency:
    """Build a manager_id -> list[emp_id] adjacency map."""
    tree: Adjacency = defaultdict(list)
    for emp_id, mgr in zip(employees["emp_id"], employees["manager_id"]):
        if pd.notna(mgr):
            tree[int(mgr)].append(int(emp_id))
    return dict(tree)


def _find_cycle(manager_of: dict[EmployeeID, EmployeeID | None], start: EmployeeID) -> ManagerChain:
    """Follow manager references from ``start`` until one repeats; return the loop."""
    position: dict[EmployeeID, int] = {}
    chain: ManagerChain = []
    node = start
    while node is not None and node not in position:
        position[node] = len(chain)
        chain.append(node)
        node = manager_of.get(node)
    if node is None:
        return [start]
    return chain[position[node]:] + [node]


def _count_total_reports(order: list[EmployeeID], adjacency: Adjacency) -> dict[EmployeeID, int]:
    # order is a pre-order walk, so reversing it visits children before parents
    totals: dict[EmployeeID, int] = {}
    for emp_id in reversed(order):
        totals[emp_id] = sum(1 + totals[c] for c in adjacency.get(emp_id, []))
    return totals


def resolve_org_hierarchy(
    store: RecordStore,
    config: PipelineConfig | None = None,
) -> pd.DataFrame:
    """Flatten the reporting forest into one row per employee, ordered by (depth, path).

    Roots are employees without a manager (depth 1, path = own name). Raises
    CycleDetected when a chain of manager references loops back on itself.
    """
    config = config or DEFAULT_CONFIG
    employees = store.snapshot().employees
    names = dict(zip(employees["emp_id"].astype(int), full_name(employees)))
    depts = dict(zip(employees["emp_id"].astype(int), employees["dept_id"].astype(int)))
    manager_of = {
        int(emp_id): int(mgr) if pd.notna(mgr) else None
        for emp_id, mgr in zip(employees["emp_id"], employees["manager_id"])
    }
    adjacency = _build_adjacency(employees)
    roots = sorted(emp_id for emp_id, mgr in manager_of.items() if mgr is None)

    rows = []
    order: list[EmployeeID] = []
    visited: set[EmployeeID] = set()
    stack = [(root, 1, names[root]) for root in reversed(roots)]
    while stack:
        emp_id, depth, path = stack.pop()
        if emp_id in visited:
            raise CycleDetected(_find_cycle(manager_of, emp_id))
        visited.add(emp_id)
        order.append(emp_id)
        rows.append({
            "emp_id": emp_id,
            "employee_name": names[emp_id],
            "dept_id": depts[emp_id],
            "manager_id": manager_of[emp_id],
            "depth": depth,
            "path": path,
        })
        for child in reversed(adjacency.get(emp_id, [])):
            stack.append((child, depth + 1, f"{path}{config.hierarchy_separator}{names[child]}"))

    # Anything a root walk never reached hangs off a loop of managers
    unreached = set(manager_of) - visited
    if unreached:
        cycle = _find_cycle(manager_of, min(unreached))
        logger.error("Manager reference cycle among %d employee(s): %s", len(unreached), cycle)
        raise CycleDetected(cycle)

    totals = _count_total_reports(order, adjacency)
    result = pd.DataFrame(rows, columns=HIERARCHY_COLUMNS[:-2])
    result["manager_id"] = result["manager_id"].astype("Int64")
    result["direct_reports"] = [len(adjacency.get(e, [])) for e in result["emp_id"]]
    result["total_reports"] = [totals[e] for e in result["emp_id"]]
    result = result.sort_values(["depth", "path", "emp_id"], kind="mergesort").reset_index(drop=True)

    logger.info("Resolved org hierarchy: %d nodes, %d root(s)", len(result), len(roots))
    return result
