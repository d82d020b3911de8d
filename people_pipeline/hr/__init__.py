"""HR / People Analytics domain pipeline.

Loads HRIS exports into a record store, applies audited salary changes,
resolves the reporting hierarchy, rolls up department cost, and ranks
review and salary performance.
"""

from people_pipeline.config import DEFAULT_CONFIG, PipelineConfig
from people_pipeline.hr.ingest import ingest_hris_data, read_hris_exports
from people_pipeline.hr.store import RecordStore
from people_pipeline.hr.audit import record_if_changed
from people_pipeline.hr.compensation import apply_raise, salary_history, set_salary
from people_pipeline.hr.org_structure import resolve_org_hierarchy
from people_pipeline.hr.departments import department_stats
from people_pipeline.hr.performance import (
    performance_summary,
    ranked_performance,
    salary_quantiles,
)
from people_pipeline.utils.types import ReportSet

REPORTS = ("hierarchy", "department_stats", "ranked_performance", "salary_quantiles", "salary_history")


def validate(config: PipelineConfig | None = None) -> dict[str, str | int]:
    """Validate that all HR data sources are accessible."""
    config = config or DEFAULT_CONFIG
    try:
        tables = read_hris_exports(config.data_dir, dry_run=True)
        return {"status": "ok", "exports_available": len(tables)}
    except FileNotFoundError as exc:
        return {"status": "error", "message": str(exc)}


def build_report(store: RecordStore, name: str, config: PipelineConfig | None = None):
    """Compute one named report from the current store contents."""
    match name:
        case "hierarchy":
            return resolve_org_hierarchy(store, config)
        case "department_stats":
            return department_stats(store)
        case "ranked_performance":
            return ranked_performance(store)
        case "salary_quantiles":
            return salary_quantiles(store)
        case "salary_history":
            return salary_history(store)
        case other:
            raise ValueError(f"Unknown report: {other}")


def run(store: RecordStore | None = None, config: PipelineConfig | None = None) -> ReportSet:
    """Execute the full HR pipeline and return every report."""
    config = config or DEFAULT_CONFIG
    store = store or ingest_hris_data(config=config)
    return {name: build_report(store, name, config) for name in REPORTS}
